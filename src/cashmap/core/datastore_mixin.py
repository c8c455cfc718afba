#!/usr/bin/env python3
"""
DataStore Mixin - File metadata shared by file-backed stores.

A store lists the files it owns; the mixin derives existence, age and size
from whichever of them are on disk.
"""

from abc import abstractmethod
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path


@dataclass
class StoreStatus:
    """Point-in-time view of a store's files."""

    exists: bool
    last_modified: datetime | None
    age_days: int | None
    item_count: int | None
    size_bytes: int | None
    summary_text: str


class DataStoreMixin:
    """
    Subclasses implement `data_files`, `item_count` and `summary_text`.
    """

    @abstractmethod
    def data_files(self) -> list[Path]:
        """Files owned by the store, whether or not they exist yet."""
        ...

    @abstractmethod
    def item_count(self) -> int | None: ...

    @abstractmethod
    def summary_text(self) -> str: ...

    def _present_files(self) -> list[Path]:
        return [path for path in self.data_files() if path.is_file()]

    def exists(self) -> bool:
        return bool(self._present_files())

    def last_modified(self) -> datetime | None:
        mtimes = [path.stat().st_mtime for path in self._present_files()]
        return datetime.fromtimestamp(max(mtimes)) if mtimes else None

    def age_days(self) -> int | None:
        """Whole days since the newest file was written, or None without data."""
        modified = self.last_modified()
        return None if modified is None else (datetime.now() - modified).days

    def size_bytes(self) -> int | None:
        present = self._present_files()
        return sum(path.stat().st_size for path in present) if present else None

    def status(self) -> StoreStatus:
        return StoreStatus(
            exists=self.exists(),
            last_modified=self.last_modified(),
            age_days=self.age_days(),
            item_count=self.item_count(),
            size_bytes=self.size_bytes(),
            summary_text=self.summary_text(),
        )
