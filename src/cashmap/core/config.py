#!/usr/bin/env python3
"""
Configuration Management for Cash Map

Reads settings from environment variables (and a local .env file) into typed
dataclasses. Each environment (development, test, production) gets its own
data directory and log format.

Environment variables:
    CASHMAP_ENV                 development | test | production
    CASHMAP_DATA_DIR            Root of the store and report directories
    DRAIN_TOP_N                 Outflow categories always reported as drains
    DRAIN_SHARE_THRESHOLD       Share of outflows that makes a category a drain
    MEDIUM_RISK_DEBT_MULTIPLE   Months of debt service the low point must cover
    PROJECTION_HORIZON_DAYS     Default simulation horizon
    DEFAULT_STARTING_BALANCE    Floor for derived starting balances
    LOG_LEVEL / DEBUG           Logging verbosity
"""

import logging
import os
import tempfile
from collections.abc import Callable
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

from dotenv import load_dotenv

load_dotenv()

N = TypeVar("N", int, float)


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


@dataclass
class StoreConfig:
    """Where client collections are persisted."""

    store_dir: Path
    schema_version: int = 1


@dataclass
class AnalysisConfig:
    """Cash-flow and projection analysis parameters."""

    drain_top_n: int = 5
    drain_share_threshold: float = 0.10
    medium_risk_debt_multiple: float = 1.5
    default_horizon_days: int = 30
    default_starting_balance: float = 10000.0

    @classmethod
    def from_environment(cls) -> "AnalysisConfig":
        defaults = cls()
        return cls(
            drain_top_n=_env_number("DRAIN_TOP_N", int, defaults.drain_top_n),
            drain_share_threshold=_env_number("DRAIN_SHARE_THRESHOLD", float, defaults.drain_share_threshold),
            medium_risk_debt_multiple=_env_number(
                "MEDIUM_RISK_DEBT_MULTIPLE", float, defaults.medium_risk_debt_multiple
            ),
            default_horizon_days=_env_number("PROJECTION_HORIZON_DAYS", int, defaults.default_horizon_days),
            default_starting_balance=_env_number(
                "DEFAULT_STARTING_BALANCE", float, defaults.default_starting_balance
            ),
        )

    def problems(self) -> list[str]:
        found = []
        if self.default_horizon_days <= 0:
            found.append("Projection horizon must be positive")
        if not 0 < self.drain_share_threshold <= 1:
            found.append("Drain share threshold must be in (0, 1]")
        if self.drain_top_n < 0:
            found.append("Drain top-N must be non-negative")
        if self.medium_risk_debt_multiple < 0:
            found.append("Medium risk debt multiple must be non-negative")
        return found


@dataclass
class Config:
    """
    Main configuration class for the cash map application.

    The data directory holds the persisted store (`store/`) and the JSON
    reports written by the CLI (`reports/`).
    """

    environment: Environment
    data_dir: Path
    output_dir: Path
    store: StoreConfig
    analysis: AnalysisConfig
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "Config":
        """Create configuration from environment variables, creating directories as needed."""
        env = Environment(os.getenv("CASHMAP_ENV", Environment.DEVELOPMENT.value))
        data_dir = _data_dir_for(env)
        store = StoreConfig(store_dir=data_dir / "store")
        output_dir = data_dir / "reports"

        for directory in (data_dir, store.store_dir, output_dir):
            directory.mkdir(parents=True, exist_ok=True)

        return cls(
            environment=env,
            data_dir=data_dir,
            output_dir=output_dir,
            store=store,
            analysis=AnalysisConfig.from_environment(),
            debug=os.getenv("DEBUG", "false").lower() in ("1", "true", "yes"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = [
            f"{name} does not exist: {path}"
            for name, path in (
                ("data_dir", self.data_dir),
                ("store_dir", self.store.store_dir),
                ("output_dir", self.output_dir),
            )
            if not path.is_dir()
        ]
        if self.store.schema_version < 1:
            errors.append("Store schema version must be at least 1")
        return errors + self.analysis.problems()

    def setup_logging(self) -> None:
        """Configure the root logger; DEBUG wins over LOG_LEVEL."""
        level = logging.DEBUG if self.debug else getattr(logging, self.log_level, logging.INFO)

        if self.environment == Environment.DEVELOPMENT or self.debug:
            format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_str = "%(asctime)s - %(levelname)s - %(message)s"

        logging.basicConfig(level=level, format=format_str, datefmt="%Y-%m-%d %H:%M:%S")

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a JSON-friendly dictionary."""
        return {name: _plain(value) for name, value in asdict(self).items()}


def _data_dir_for(env: Environment) -> Path:
    configured = os.getenv("CASHMAP_DATA_DIR")
    if env == Environment.TEST:
        return Path(configured) if configured else Path(tempfile.gettempdir()) / "test_cashmap"
    return Path(configured or "./data").expanduser().resolve()


def _env_number(name: str, cast: Callable[[str], N], default: N) -> N:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ValueError(f"Invalid value for {name}: {raw!r}") from None


def _plain(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    return value


_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance, loading and validating it on first use."""
    global _config
    if _config is None:
        config = Config.from_environment()
        errors = config.validate()
        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")
        config.setup_logging()
        _config = config
    return _config


def reload_config() -> Config:
    """Drop the cached configuration and read the environment again."""
    global _config
    _config = None
    return get_config()


def get_data_dir() -> Path:
    return get_config().data_dir


def get_store_dir() -> Path:
    return get_config().store.store_dir


def get_output_dir() -> Path:
    return get_config().output_dir


def is_test() -> bool:
    """Check if running in test environment."""
    return get_config().environment == Environment.TEST
