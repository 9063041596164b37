"""
Tests for sink counting and operation aggregation.
"""

from src.lineage.collections import OrderedSet
from src.lineage.counting import aggregate_operations, count_sinks
from src.lineage.models import Record


def rec(subj: str, op: str, prev: str = "") -> Record:
    return Record(subject=subj, previous=prev, operation=op, observed_at=0)


class TestCountSinks:
    def test_empty(self):
        assert count_sinks({}) == 0

    def test_counts_only_absent_successors(self):
        outgoing = {"A": OrderedSet(["B"]), "B": None, "C": None}

        assert count_sinks(outgoing) == 2


class TestAggregateOperations:
    def test_empty(self):
        assert aggregate_operations([], {}) == {}

    def test_groups_by_canonical_id_and_operation(self):
        records = [rec("A", "login"), rec("B", "login", "A"), rec("B", "read", "A"), rec("Z", "read")]
        canonical_ids = {"A": "A", "B": "A", "Z": "Z"}

        result = aggregate_operations(records, canonical_ids)

        assert result == {"A": {"login": 2, "read": 1}, "Z": {"read": 1}}

    def test_unmapped_subject_counts_under_itself(self):
        result = aggregate_operations([rec("loop", "op")], {})

        assert result == {"loop": {"op": 1}}

    def test_result_is_plain_dicts(self):
        result = aggregate_operations([rec("A", "op")], {"A": "A"})

        assert type(result) is dict
        assert type(result["A"]) is dict
        assert result.get("missing") is None
