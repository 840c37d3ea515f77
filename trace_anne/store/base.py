"""
Abstract base class for record stores.

This module defines the RecordStore interface. A store is an ordered
sequence of records addressed by zero-based position; reads always build
the sequence fresh from disk and writes always replace the whole store.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

Record = dict[str, Any]


class RecordStore(ABC):
    """Abstract base class for a file-backed record store.

    Subclasses implement read_all() and write_all(); count() and get()
    are built on top of a fresh read.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Return the format name (e.g., 'jsonl')."""
        pass

    @abstractmethod
    def read_all(self) -> list[Record]:
        """Read every record, in order.

        Returns:
            A list of records; index i is the i-th record in the file.

        Raises:
            StoreNotFound: If the file does not exist.
            StoreParseError: If any record cannot be parsed.
        """
        pass

    @abstractmethod
    def write_all(self, records: list[Record]) -> None:
        """Replace the store's entire content with ``records``.

        Raises:
            StoreWriteError: If the content could not be written.
        """
        pass

    def count(self) -> int:
        """Return the number of records currently in the store."""
        return len(self.read_all())

    def get(self, index: int) -> Record:
        """Return the record at ``index``.

        Raises:
            IndexError: If the index is out of range.
        """
        records = self.read_all()
        if index < 0 or index >= len(records):
            raise IndexError(f"Record index {index} out of range")
        return records[index]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({str(self.path)!r})"
