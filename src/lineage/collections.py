"""
Ordered containers used by lineage graph construction and traversal.

OrderedSet keeps fingerprints unique while remembering first-insertion order.
That order decides which successor of a branching fingerprint continues the
parent's lineage, so it must never be re-sorted.
"""

from typing import Generic, Iterable, Iterator, List, Optional, TypeVar

T = TypeVar("T")


class OrderedSet(Generic[T]):
    """A set of unique values that iterates in first-insertion order."""

    def __init__(self, values: Optional[Iterable[T]] = None):
        # dict preserves insertion order and gives O(1) membership
        self._items = {}
        if values is not None:
            for value in values:
                self.add(value)

    def add(self, value: T) -> bool:
        """Add value if not already present. Returns True if it was added."""
        if value in self._items:
            return False
        self._items[value] = None
        return True

    def values(self) -> List[T]:
        """Return a copy of the values in insertion order."""
        return list(self._items)

    def __contains__(self, value: object) -> bool:
        return value in self._items

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OrderedSet):
            return NotImplemented
        return self.values() == other.values()

    def __repr__(self) -> str:
        return f"OrderedSet({self.values()!r})"


class Stack(Generic[T]):
    """Simple LIFO stack."""

    def __init__(self):
        self._items: List[T] = []

    def push(self, value: T) -> None:
        self._items.append(value)

    def pop(self) -> Optional[T]:
        """Pop the most recently pushed value, or None if the stack is empty."""
        if not self._items:
            return None
        return self._items.pop()

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)
