"""
Client Lineage Ledger

Registers client operations submitted under rotating fingerprints and
answers how many distinct clients exist, how many were active recently, and
what each canonical client has done.

Every public call holds one exclusive lock. Appends only add a record;
queries rebuild the lineage graph from the full record log each time, so
no derived state is cached and results always reflect the latest append.
Query cost is linear in the number of stored records.

Usage:
    ledger = new_in_memory()
    ledger.append(token, "login", datetime.now(timezone.utc))

    ledger.total_clients()
    ledger.recent_clients(datetime.now(timezone.utc) - timedelta(days=1))
    ledger.operations_by_client()
"""

import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Optional, Union

from loguru import logger

from ..auth.erf_claims import ClaimsExtractor, ClaimsParseError
from ..core.config import get_config
from .counting import OperationCounts, aggregate_operations, count_sinks
from .errors import InvalidToken
from .graph import GraphBuilder, LineageGraph
from .models import Record, to_epoch_seconds
from .record_log import InMemoryRecordLog, RecordLog
from .resolver import map_canonical_ids

Token = Union[str, bytes]


class ClientLedger(ABC):
    """Registers client operations and reports the number of unique clients."""

    @abstractmethod
    def append(self, token: Token, operation: str, observed_at: datetime) -> Record:
        """Add an operation to the log.

        Raises:
            InvalidToken: the assertion was rejected; nothing was stored
        """
        pass

    @abstractmethod
    def total_clients(self) -> int:
        """Number of distinct clients seen."""
        pass

    @abstractmethod
    def recent_clients(self, since: datetime) -> int:
        """Number of clients with operations observed at or after since."""
        pass

    @abstractmethod
    def operations_by_client(self) -> OperationCounts:
        """Map of canonical client ID to a count of each operation."""
        pass


class LedgerStore(ClientLedger):
    """ClientLedger over an append-only RecordLog guarded by a single lock."""

    def __init__(
        self,
        record_log: Optional[RecordLog] = None,
        extractor: Optional[ClaimsExtractor] = None,
    ):
        self._log = record_log if record_log is not None else InMemoryRecordLog()
        self._extractor = extractor or ClaimsExtractor.from_config(get_config())
        # Guards the record log for readers and the writer alike
        self._lock = threading.Lock()

    def append(self, token: Token, operation: str, observed_at: datetime) -> Record:
        with self._lock:
            # Check the token before storing anything
            try:
                claims = self._extractor.extract_claims(token)
            except ClaimsParseError as e:
                logger.warning("Rejected assertion for operation {operation}: {error}", operation=operation, error=str(e))
                raise InvalidToken(str(e), details=e.details) from e

            record = Record(
                subject=claims.subject,
                previous=claims.previous,
                operation=operation,
                observed_at=to_epoch_seconds(observed_at),
            )
            self._log.append(record)

            logger.debug(
                "Appended {operation} for fingerprint {subject}",
                operation=operation,
                subject=record.subject,
                rotated=record.has_previous,
                records=len(self._log),
            )
            return record

    def total_clients(self) -> int:
        with self._lock:
            graph = self._build_graph()
            return count_sinks(graph.outgoing)

    def recent_clients(self, since: datetime) -> int:
        with self._lock:
            graph = self._build_graph(since=to_epoch_seconds(since))
            return count_sinks(graph.outgoing)

    def operations_by_client(self) -> OperationCounts:
        # Always over the full history: operations belong to the client's
        # canonical identity whatever it has rotated to since
        with self._lock:
            graph = self._build_graph()
            canonical_ids = map_canonical_ids(graph)
            return aggregate_operations(self._log.scan(), canonical_ids)

    @property
    def record_count(self) -> int:
        with self._lock:
            return len(self._log)

    def __len__(self) -> int:
        return self.record_count

    def _build_graph(self, since: Optional[int] = None) -> LineageGraph:
        """Rebuild the lineage graph. Caller must hold self._lock."""
        graph = GraphBuilder(since=since).build(self._log.scan())
        logger.debug(
            "Built lineage graph",
            records=len(self._log),
            nodes=len(graph.outgoing),
            since=since,
        )
        return graph


def new_in_memory(
    config: Optional[Dict[str, Any]] = None,
    extractor: Optional[ClaimsExtractor] = None,
) -> LedgerStore:
    """Create a LedgerStore that keeps records in a volatile in-memory list.

    Args:
        config: Ledger configuration, defaulting to get_config(). Builds the
            claims extractor when no extractor is given
        extractor: Explicit claims extractor
    """
    if extractor is None:
        extractor = ClaimsExtractor.from_config(config if config is not None else get_config())
    return LedgerStore(record_log=InMemoryRecordLog(), extractor=extractor)
