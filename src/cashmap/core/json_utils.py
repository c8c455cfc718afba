#!/usr/bin/env python3
"""
JSON Utilities Module

Pretty-printed UTF-8 JSON shared by the store, the saved reports and the
CLI's --json output. Enums, dates and paths serialize to their plain values.
"""

import json
import os
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any


def json_default(value: Any) -> Any:
    """`default=` hook for json.dump(s)."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Path):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def format_json(data: Any, ensure_ascii: bool = False, sort_keys: bool = False) -> str:
    """Format data as a pretty-printed JSON string."""
    return json.dumps(data, indent=2, ensure_ascii=ensure_ascii, sort_keys=sort_keys, default=json_default)


def write_json(filepath: str | Path, data: Any, ensure_ascii: bool = False, sort_keys: bool = False) -> None:
    """
    Write data to a JSON file, creating parent directories.

    The text is written to a sibling temporary file first and moved into
    place, so readers never see a partially written file.
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    text = format_json(data, ensure_ascii=ensure_ascii, sort_keys=sort_keys)
    partial = filepath.with_name(filepath.name + ".tmp")
    partial.write_text(text + "\n", encoding="utf-8")
    os.replace(partial, filepath)


def read_json(filepath: str | Path) -> Any:
    with open(filepath, encoding="utf-8") as f:
        return json.load(f)
