"""
Unit tests for the per-stream merge strategies.

Tests cover:
- Bounded feed snapshot ordering, dedup and bound
- Bounded feed incremental prepend and dedup
- Carried event items
- Account-scoped position replacement
"""

from decimal import Decimal
from operator import attrgetter

import pytest

from arena_feed.domain.models import AccountMeta, PositionBatchEvent
from arena_feed.services import AccountScopedMerger, BoundedFeedMerger, merge_accounts_meta

from tests.conftest import make_position, make_snapshot, make_trade


@pytest.fixture
def trade_merger() -> BoundedFeedMerger:
    return BoundedFeedMerger(
        identity=attrgetter("trade_id"),
        timestamp=attrgetter("trade_time"),
        limit=3,
    )


def ids(trades) -> list[int]:
    return [t.trade_id for t in trades]


# =============================================================================
# BOUNDED FEED SNAPSHOT TESTS
# =============================================================================


class TestBoundedSnapshot:
    """Tests for replacing a bounded feed with a fetched snapshot."""

    def test_sorted_newest_first(self, trade_merger: BoundedFeedMerger):
        snapshot = [make_trade(1, minute=1), make_trade(3, minute=3), make_trade(2, minute=2)]

        assert ids(trade_merger.apply_snapshot(snapshot)) == [3, 2, 1]

    def test_truncated_to_limit(self, trade_merger: BoundedFeedMerger):
        snapshot = [make_trade(i, minute=i) for i in range(10)]

        assert ids(trade_merger.apply_snapshot(snapshot)) == [9, 8, 7]

    def test_duplicate_ids_collapsed(self, trade_merger: BoundedFeedMerger):
        """
        GIVEN a snapshot listing the same trade twice
        WHEN it is merged
        THEN the trade appears once
        """
        snapshot = [make_trade(1, minute=1), make_trade(1, minute=1), make_trade(2, minute=0)]

        assert ids(trade_merger.apply_snapshot(snapshot)) == [1, 2]

    def test_equal_timestamps_keep_server_order(self, trade_merger: BoundedFeedMerger):
        snapshot = [make_trade(5, minute=0), make_trade(4, minute=0)]

        assert ids(trade_merger.apply_snapshot(snapshot)) == [5, 4]

    def test_carried_items_on_top_without_duplicates(self, trade_merger: BoundedFeedMerger):
        """
        GIVEN an event-delivered trade 9 carried over a snapshot
        WHEN the snapshot also contains trade 9
        THEN trade 9 appears once, on top
        """
        carried = [make_trade(9, minute=9)]
        snapshot = [make_trade(9, minute=9), make_trade(1, minute=1)]

        assert ids(trade_merger.apply_snapshot(snapshot, carried)) == [9, 1]

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            BoundedFeedMerger(identity=attrgetter("trade_id"), timestamp=attrgetter("trade_time"), limit=0)


# =============================================================================
# BOUNDED FEED EVENT TESTS
# =============================================================================


class TestBoundedEvent:
    """Tests for folding one pushed item into a bounded feed."""

    def test_new_item_prepended(self, trade_merger: BoundedFeedMerger):
        current = [make_trade(2, minute=2), make_trade(1, minute=1)]

        assert ids(trade_merger.apply_event(current, make_trade(3, minute=3))) == [3, 2, 1]

    def test_duplicate_returns_none(self, trade_merger: BoundedFeedMerger):
        current = [make_trade(2, minute=2), make_trade(1, minute=1)]

        assert trade_merger.apply_event(current, make_trade(1, minute=1)) is None

    def test_oldest_dropped_at_limit(self, trade_merger: BoundedFeedMerger):
        """
        GIVEN a full feed [3, 2, 1] with limit 3
        WHEN trade 4 arrives
        THEN the feed is [4, 3, 2]
        """
        current = [make_trade(3), make_trade(2), make_trade(1)]

        assert ids(trade_merger.apply_event(current, make_trade(4))) == [4, 3, 2]

    def test_current_list_not_mutated(self, trade_merger: BoundedFeedMerger):
        current = [make_trade(1)]

        trade_merger.apply_event(current, make_trade(2))

        assert ids(current) == [1]


# =============================================================================
# ACCOUNT-SCOPED TESTS
# =============================================================================


class TestAccountScoped:
    """Tests for positions snapshot merging."""

    def test_snapshot_one_entry_per_account(self):
        merger = AccountScopedMerger()
        first = make_snapshot(account_id=1, total_assets="100")
        second = make_snapshot(account_id=1, total_assets="200")

        merged = merger.apply_snapshot([first, second, make_snapshot(account_id=2)])

        assert [s.account_id for s in merged] == [1, 2]
        assert merged[0].total_assets == Decimal("200")

    def test_event_replaces_positions_and_keeps_aggregates(self):
        """
        GIVEN account 1 with total assets 10000 and one BTC position
        WHEN a batch with an ETH position for account 1 arrives
        THEN the positions are replaced, aggregates are carried forward and flagged stale
        """
        merger = AccountScopedMerger()
        current = [make_snapshot(account_id=1), make_snapshot(account_id=2)]
        batch = PositionBatchEvent(positions=(make_position("ETH"),), account_id=1)

        merged = merger.apply_event(current, batch)

        assert [s.account_id for s in merged] == [1, 2]
        assert [p.symbol for p in merged[0].positions] == ["ETH"]
        assert merged[0].total_assets == Decimal("10000")
        assert merged[0].aggregates_stale is True
        assert merged[1] is current[1]

    def test_event_for_new_account_appended(self):
        """
        GIVEN positions for account 1 only
        WHEN a batch for account 2 arrives
        THEN account 2 is appended with zero aggregates flagged stale
        """
        merger = AccountScopedMerger()
        current = [make_snapshot(account_id=1)]
        batch = PositionBatchEvent(positions=(make_position("SOL"),), account_id=2)

        merged = merger.apply_event(current, batch, account_name="Beta")

        assert [s.account_id for s in merged] == [1, 2]
        added = merged[1]
        assert added.account_name == "Beta"
        assert added.total_assets == Decimal("0")
        assert added.aggregates_stale is True
        assert [p.symbol for p in added.positions] == ["SOL"]

    def test_unattributed_batch_ignored(self):
        merger = AccountScopedMerger()
        batch = PositionBatchEvent(positions=(make_position(),), account_id=None)

        assert merger.apply_event([make_snapshot()], batch) is None

    def test_empty_batch_ignored(self):
        merger = AccountScopedMerger()
        batch = PositionBatchEvent(positions=(), account_id=1)

        assert merger.apply_event([make_snapshot()], batch) is None


class TestAccountsMeta:
    def test_last_write_wins(self):
        current = {1: AccountMeta(account_id=1, name="Old")}

        merged = merge_accounts_meta(current, [AccountMeta(account_id=1, name="New")])

        assert merged[1].name == "New"
        assert current[1].name == "Old"
