"""
Append-Only Record Log

The ledger stores records through this interface so a durable or
tamper-evident backend can replace the in-memory list without changing the
append/scan contract. The log has no update or delete.

Implementations are not required to be thread-safe; LedgerStore serialises
every call under its own lock.
"""

from abc import ABC, abstractmethod
from typing import Iterator, List

from .models import Record


class RecordLog(ABC):
    """Abstract append-only, ordered log of records."""

    @abstractmethod
    def append(self, record: Record) -> None:
        """Append a record at the end of the log."""
        pass

    @abstractmethod
    def scan(self) -> Iterator[Record]:
        """Iterate records in append order."""
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass


class InMemoryRecordLog(RecordLog):
    """Volatile list-backed log. Nothing survives a restart."""

    def __init__(self):
        self._records: List[Record] = []

    def append(self, record: Record) -> None:
        self._records.append(record)

    def scan(self) -> Iterator[Record]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)
