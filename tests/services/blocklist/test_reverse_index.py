"""
Tests for the reverse block index.
"""

from __future__ import annotations

from blockusers.services.blocklist import ReverseIndex, UserRecord, rebuild_index


class TestReverseIndex:
    def test_add_edge(self):
        index = ReverseIndex()
        index.add_edge("1001", "1002")
        index.add_edge("1003", "1002")

        assert index.who_blocks("1002") == {"1001", "1003"}
        assert index.who_blocks("1001") == frozenset()

    def test_add_edge_idempotent(self):
        index = ReverseIndex()
        index.add_edge("1001", "1002")
        index.add_edge("1001", "1002")
        assert index.who_blocks("1002") == {"1001"}

    def test_remove_edge(self):
        index = ReverseIndex()
        index.add_edge("1001", "1002")
        index.add_edge("1003", "1002")

        index.remove_edge("1003", "1002")

        assert index.who_blocks("1002") == {"1001"}

    def test_remove_missing_edge_is_noop(self):
        index = ReverseIndex()
        index.remove_edge("1001", "1002")
        index.add_edge("1001", "1002")
        index.remove_edge("9999", "1002")

        assert index.who_blocks("1002") == {"1001"}

    def test_who_blocks_returns_copy(self):
        index = ReverseIndex()
        index.add_edge("1001", "1002")
        blockers = index.who_blocks("1002")
        index.add_edge("1003", "1002")

        assert blockers == {"1001"}

    def test_to_dict_skips_empty(self):
        index = ReverseIndex()
        index.add_edge("1001", "1002")
        index.remove_edge("1001", "1002")
        index.add_edge("1001", "1003")

        assert index.to_dict() == {"1003": frozenset({"1001"})}
        assert len(index) == 1


class TestRebuildIndex:
    def test_rebuild_from_records(self):
        records = [
            UserRecord("1001", blocked={"1002", "1003"}),
            UserRecord("1002", blocked={"1003"}),
            UserRecord("1004"),
        ]

        index = rebuild_index(records)

        assert index.who_blocks("1003") == {"1001", "1002"}
        assert index.who_blocks("1002") == {"1001"}
        assert index.who_blocks("1001") == frozenset()

    def test_rebuild_matches_incremental(self):
        incremental = ReverseIndex()
        records = {
            "1001": UserRecord("1001"),
            "1002": UserRecord("1002"),
        }
        for owner, target in [("1001", "1002"), ("1002", "1001"), ("1001", "1003")]:
            records[owner].blocked.add(target)
            incremental.add_edge(owner, target)
        records["1001"].blocked.discard("1002")
        incremental.remove_edge("1001", "1002")

        assert rebuild_index(records.values()).to_dict() == incremental.to_dict()
