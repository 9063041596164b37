"""
Client Lineage Ledger

Tracks clients that periodically rotate their exposed fingerprint (ERF) and
reconstructs which fingerprints belong to the same client:

- Records: append-only log of (subject, previous, operation, observed_at)
- Lineage graph: rotation links previous -> subject, rebuilt per query
- Canonical IDs: one identity per lineage; a branch starts a new identity
- Queries: total clients, recently active clients, operations per client
"""

from .collections import OrderedSet, Stack
from .counting import aggregate_operations, count_sinks
from .errors import InvalidToken, LedgerError
from .graph import GraphBuilder, LineageGraph, build_lineage_graph
from .ledger import ClientLedger, LedgerStore, new_in_memory
from .models import Record
from .record_log import InMemoryRecordLog, RecordLog
from .resolver import CanonicalIDResolver, map_canonical_ids

__all__ = [
    "ClientLedger",
    "LedgerStore",
    "new_in_memory",
    "Record",
    "RecordLog",
    "InMemoryRecordLog",
    "LineageGraph",
    "GraphBuilder",
    "build_lineage_graph",
    "CanonicalIDResolver",
    "map_canonical_ids",
    "count_sinks",
    "aggregate_operations",
    "OrderedSet",
    "Stack",
    "InvalidToken",
    "LedgerError",
]
