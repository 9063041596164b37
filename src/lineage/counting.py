"""
Client counting and per-client operation aggregation.
"""

from collections import defaultdict
from typing import Dict, Iterable

from .graph import Adjacency
from .models import Record
from .resolver import canonical_id_for

OperationCounts = Dict[str, Dict[str, int]]


def count_sinks(outgoing: Adjacency) -> int:
    """Count fingerprints with no observed successor. Each one is a live client."""
    return sum(1 for edges in outgoing.values() if edges is None)


def aggregate_operations(records: Iterable[Record], canonical_ids: Dict[str, str]) -> OperationCounts:
    """Tally operations per canonical client ID.

    Every record counts towards the canonical ID its subject resolves to,
    whatever fingerprint the client has rotated to since.
    """
    result: Dict[str, Dict[str, int]] = defaultdict(lambda: defaultdict(int))

    for record in records:
        client_id = canonical_id_for(canonical_ids, record.subject)
        result[client_id][record.operation] += 1

    return {client_id: dict(operations) for client_id, operations in result.items()}
