"""
Canonical Client ID Resolution

Walks the lineage forest and assigns every observed fingerprint the
canonical ID of the client it belongs to.

Rules:
- A root starts a lineage whose canonical ID is the root's own fingerprint.
- The first successor of a node (first-insertion order) continues the
  parent's lineage.
- Every later successor is a branch and starts a new lineage named after
  itself.

Traversal is depth-first over an explicit stack so arbitrarily long rotation
chains never hit the interpreter's recursion limit. Where lineages merge
(a fingerprint with several predecessors) the last visit wins: within one
root tree that is the first-child continuation, since LIFO popping walks
later branches first.
"""

from typing import Dict, Optional, Set, Tuple

from loguru import logger

from .collections import Stack
from .graph import LineageGraph


class CanonicalIDResolver:
    """Maps fingerprints to canonical client IDs for one LineageGraph."""

    def __init__(self, graph: LineageGraph):
        self.graph = graph

    def resolve(self) -> Dict[str, str]:
        """Return a mapping of fingerprint -> canonical ID.

        Only fingerprints observed as a record subject appear as keys. A root
        seen solely as a previous fingerprint still seeds its lineage.
        Fingerprints reachable only through a cycle have no root and are left
        unmapped.
        """
        assigned: Dict[str, str] = {}

        for root in self.graph.roots():
            self._walk(root, assigned)

        result = {
            node: canonical_id
            for node, canonical_id in assigned.items()
            if node in self.graph.subjects
        }

        unmapped = len(self.graph.subjects) - len(result)
        if unmapped:
            logger.warning(
                f"{unmapped} fingerprint(s) are unreachable from any root",
                roots=len(self.graph.roots()),
            )

        return result

    def _walk(self, root: str, assigned: Dict[str, str]) -> None:
        # Entries are (node, canonical_id); a None canonical_id marks leaving
        # node's subtree. A fingerprint reached again is reassigned and its
        # subtree re-walked, so the last visit wins. on_path holds the
        # current ancestors and breaks cycles.
        work: Stack[Tuple[str, Optional[str]]] = Stack()
        on_path: Set[str] = set()
        work.push((root, root))

        while work:
            node, canonical_id = work.pop()

            if canonical_id is None:
                on_path.discard(node)
                continue
            if node in on_path:
                continue

            assigned[node] = canonical_id
            on_path.add(node)
            work.push((node, None))

            for index, child in enumerate(self.graph.successors(node)):
                if index == 0:
                    work.push((child, canonical_id))
                else:
                    work.push((child, child))


def map_canonical_ids(graph: LineageGraph) -> Dict[str, str]:
    return CanonicalIDResolver(graph).resolve()


def canonical_id_for(mapping: Dict[str, str], fingerprint: str) -> str:
    """Look up a fingerprint, falling back to the fingerprint itself when unmapped."""
    canonical_id: Optional[str] = mapping.get(fingerprint)
    return canonical_id if canonical_id is not None else fingerprint
