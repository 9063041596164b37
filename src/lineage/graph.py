"""
Lineage Graph Construction

Turns the flat record log into incoming/outgoing adjacency views over
fingerprints. Each rotation record adds an edge previous -> subject.

Both views map a fingerprint to either an OrderedSet of neighbours or None:
- incoming[node] is None: the node has no observed predecessor (a root)
- outgoing[node] is None: the node has no observed successor (a sink, i.e.
  a live client)
A fingerprint with no key at all is unknown in that direction. Sets are
created lazily, so an empty OrderedSet never appears in either view.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .collections import OrderedSet
from .models import Record

Adjacency = Dict[str, Optional[OrderedSet]]


@dataclass
class LineageGraph:
    """Incoming and outgoing adjacency views plus the set of observed subjects."""

    incoming: Adjacency = field(default_factory=dict)
    outgoing: Adjacency = field(default_factory=dict)
    subjects: OrderedSet = field(default_factory=OrderedSet)

    def is_root(self, node: str) -> bool:
        return node in self.incoming and self.incoming[node] is None

    def is_sink(self, node: str) -> bool:
        return node in self.outgoing and self.outgoing[node] is None

    def roots(self) -> List[str]:
        """Fingerprints with no observed predecessor, in first-seen order."""
        return [node for node, edges in self.incoming.items() if edges is None]

    def sinks(self) -> List[str]:
        """Fingerprints with no observed successor, in first-seen order."""
        return [node for node, edges in self.outgoing.items() if edges is None]

    def successors(self, node: str) -> List[str]:
        edges = self.outgoing.get(node)
        return edges.values() if edges is not None else []


class GraphBuilder:
    """Builds a LineageGraph from an ordered record sequence.

    Identical input sequences always produce identical graphs; edge order in
    every OrderedSet is first-insertion order.
    """

    def __init__(self, since: Optional[int] = None):
        """
        Args:
            since: Optional UTC epoch seconds. Records observed earlier are
                skipped entirely.
        """
        self.since = since

    def admits(self, record: Record) -> bool:
        return self.since is None or record.observed_at >= self.since

    def build(self, records: Iterable[Record]) -> LineageGraph:
        graph = LineageGraph()

        for record in records:
            if not self.admits(record):
                continue

            subject = record.subject
            previous = record.previous

            # Register the subject even if it never gains an edge, keeping
            # whatever adjacency it already has.
            graph.incoming.setdefault(subject, None)
            graph.outgoing.setdefault(subject, None)
            graph.subjects.add(subject)

            if not previous:
                continue

            if graph.outgoing.get(previous) is None:
                graph.outgoing[previous] = OrderedSet()
            graph.outgoing[previous].add(subject)

            if graph.incoming[subject] is None:
                graph.incoming[subject] = OrderedSet()
            graph.incoming[subject].add(previous)

            # A previous fingerprint never seen as a subject is still a root
            graph.incoming.setdefault(previous, None)

        return graph


def build_lineage_graph(records: Iterable[Record], since: Optional[int] = None) -> LineageGraph:
    """Build a LineageGraph, optionally keeping only records observed at or after since."""
    return GraphBuilder(since=since).build(records)
