#!/usr/bin/env python3
"""
DataStore - Persistence of the diagnostic collections.

Clients, movements, debts and action items are stored as four JSON arrays
next to a schema_version.json marker. A store written under a different
schema version is not migrated: it loads as empty and a warning is logged.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, TypeVar

from .datastore_mixin import DataStoreMixin
from .json_utils import read_json, write_json
from .models import ActionItem, Client, Debt, Movement

logger = logging.getLogger(__name__)

T = TypeVar("T")

SCHEMA_VERSION = 1


class DataStore(Protocol[T]):
    """
    Protocol for domain data persistence and metadata queries.

    Type parameter T represents the data loaded and saved as one unit.
    """

    def exists(self) -> bool:
        """Check if data exists in storage."""
        ...

    def load(self) -> T:
        """
        Load data from storage.

        Raises:
            ValueError: If data is invalid/corrupted
        """
        ...

    def save(self, data: T) -> None:
        """Save data to storage."""
        ...

    def item_count(self) -> int | None:
        """Get count of items/records in stored data."""
        ...

    def summary_text(self) -> str:
        """Get human-readable summary of current data state."""
        ...


@dataclass
class StoreSnapshot:
    """Every persisted collection, loaded and saved together."""

    clients: list[Client] = field(default_factory=list)
    movements: list[Movement] = field(default_factory=list)
    debts: list[Debt] = field(default_factory=list)
    actions: list[ActionItem] = field(default_factory=list)

    @property
    def record_count(self) -> int:
        return len(self.clients) + len(self.movements) + len(self.debts) + len(self.actions)


class DiagnosticStore(DataStoreMixin):
    """
    JSON-file DataStore for all diagnostic collections.

    Writes happen only through `save`; callers decide when to commit.
    """

    def __init__(self, store_dir: Path, schema_version: int = SCHEMA_VERSION):
        """
        Initialize diagnostic store.

        Args:
            store_dir: Directory holding the collection files (data/store)
            schema_version: Version written and accepted by this store
        """
        self.store_dir = Path(store_dir)
        self.schema_version = schema_version
        self.clients_file = self.store_dir / "clients.json"
        self.movements_file = self.store_dir / "movements.json"
        self.debts_file = self.store_dir / "debts.json"
        self.actions_file = self.store_dir / "actions.json"
        self.version_file = self.store_dir / "schema_version.json"

    def data_files(self) -> list[Path]:
        return [self.clients_file, self.movements_file, self.debts_file, self.actions_file]

    def stored_version(self) -> int | None:
        """Schema version recorded on disk, or None if the store is new."""
        if not self.version_file.exists():
            return None
        return int(read_json(self.version_file).get("version", 0))

    def is_compatible(self) -> bool:
        version = self.stored_version()
        return version is None or version == self.schema_version

    def load(self) -> StoreSnapshot:
        """
        Load every collection.

        Returns:
            StoreSnapshot; empty when nothing is stored or the schema
            version does not match

        Raises:
            ValueError: If a collection file holds malformed records
        """
        if not self.exists():
            return StoreSnapshot()

        if not self.is_compatible():
            logger.warning(
                "Store schema version %s does not match %s; starting from an empty store",
                self.stored_version(),
                self.schema_version,
            )
            return StoreSnapshot()

        try:
            snapshot = StoreSnapshot(
                clients=[Client.from_dict(d) for d in self._read_list(self.clients_file)],
                movements=[Movement.from_dict(d) for d in self._read_list(self.movements_file)],
                debts=[Debt.from_dict(d) for d in self._read_list(self.debts_file)],
                actions=[ActionItem.from_dict(d) for d in self._read_list(self.actions_file)],
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Corrupted store in {self.store_dir}: {e}") from e

        logger.debug("Loaded %d records from %s", snapshot.record_count, self.store_dir)
        return snapshot

    def save(self, data: StoreSnapshot) -> None:
        """Write every collection and the schema version marker."""
        self.store_dir.mkdir(parents=True, exist_ok=True)

        write_json(self.clients_file, [c.to_dict() for c in data.clients])
        write_json(self.movements_file, [m.to_dict() for m in data.movements])
        write_json(self.debts_file, [d.to_dict() for d in data.debts])
        write_json(self.actions_file, [a.to_dict() for a in data.actions])
        write_json(self.version_file, {"version": self.schema_version})

        logger.debug("Saved %d records to %s", data.record_count, self.store_dir)

    def clear(self) -> None:
        """Remove all stored collections and the version marker."""
        for path in [*self.data_files(), self.version_file]:
            if path.exists():
                path.unlink()

    def item_count(self) -> int | None:
        """Number of stored clients."""
        if not self.clients_file.exists():
            return None
        data = read_json(self.clients_file)
        return len(data) if isinstance(data, list) else 0

    def summary_text(self) -> str:
        count = self.item_count()
        if count is None:
            return "No diagnostic data found"
        return f"Diagnostic store: {count} clients"

    @staticmethod
    def _read_list(path: Path) -> list[dict]:
        if not path.exists():
            return []
        data = read_json(path)
        if not isinstance(data, list):
            raise ValueError(f"Expected a JSON array in {path}")
        return data
