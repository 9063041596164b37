"""
Tests for lineage collections.

Tests:
- OrderedSet uniqueness and first-insertion order
- Stack LIFO semantics and empty pop
"""

from src.lineage.collections import OrderedSet, Stack


class TestOrderedSet:
    """Tests for OrderedSet."""

    def test_preserves_first_insertion_order(self):
        s = OrderedSet()
        for value in ["c", "a", "b"]:
            s.add(value)

        assert s.values() == ["c", "a", "b"]
        assert list(s) == ["c", "a", "b"]

    def test_duplicate_add_is_ignored(self):
        s = OrderedSet(["x", "y"])

        assert s.add("x") is False
        assert s.add("z") is True
        assert s.values() == ["x", "y", "z"]
        assert len(s) == 3

    def test_values_returns_copy(self):
        s = OrderedSet(["x"])
        values = s.values()
        values.append("mutated")

        assert s.values() == ["x"]

    def test_membership(self):
        s = OrderedSet(["b", "a"])

        assert "a" in s
        assert "q" not in s

    def test_equality_is_order_sensitive(self):
        assert OrderedSet(["a", "b"]) == OrderedSet(["a", "b"])
        assert OrderedSet(["a", "b"]) != OrderedSet(["b", "a"])


class TestStack:
    """Tests for Stack."""

    def test_lifo_order(self):
        stack = Stack()
        stack.push("a")
        stack.push("b")

        assert stack.pop() == "b"
        assert stack.pop() == "a"

    def test_pop_empty_returns_none(self):
        stack = Stack()

        assert stack.pop() is None
        assert not stack
        assert len(stack) == 0

    def test_tuples(self):
        stack = Stack()
        stack.push(("node", "id"))

        assert bool(stack)
        assert stack.pop() == ("node", "id")
