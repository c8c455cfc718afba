#!/usr/bin/env python3
"""
Shared CLI helpers: loading the service, committing, and option parsing.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from typing import TypeVar

import click

from ..classification.taxonomy import Category, parse_category
from ..core.config import Config
from ..core.dates import FinancialDate
from ..core.datastore import DiagnosticStore
from ..service import DiagnosticService

E = TypeVar("E", bound=Enum)


def enum_choice(enum_type: type[Enum]) -> click.Choice:
    """Case-insensitive click choice over an Enum's values."""
    return click.Choice([member.value for member in enum_type], case_sensitive=False)


def to_enum(enum_type: type[E], value: str) -> E:
    return enum_type(value.upper())


def category_option(value: str) -> Category:
    try:
        return parse_category(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def date_option(value: str | None) -> FinancialDate | None:
    if value is None:
        return None
    try:
        return FinancialDate.from_string(value)
    except ValueError as e:
        raise click.BadParameter(f"Invalid date format: {value}. Use YYYY-MM-DD") from e


@contextmanager
def service_session(ctx: click.Context, commit: bool = True) -> Iterator[DiagnosticService]:
    """
    Load the service from the configured store and commit when the block succeeds.

    Unknown ids and invalid values surface as click errors; nothing is
    written in that case.
    """
    config: Config = ctx.obj["config"]
    store = DiagnosticStore(config.store.store_dir, schema_version=config.store.schema_version)

    try:
        service = DiagnosticService.from_store(store, analysis=config.analysis)
        yield service
    except KeyError as e:
        raise click.ClickException(str(e.args[0]) if e.args else "Not found") from e
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    if commit:
        service.commit()
