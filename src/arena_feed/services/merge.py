"""Per-stream merge strategies for snapshot and incremental updates."""

from dataclasses import replace
from datetime import datetime
from typing import Callable, Generic, Hashable, Iterable, Optional, Sequence, TypeVar

from arena_feed.domain.models import (
    AccountMeta,
    PositionBatchEvent,
    PositionsSnapshot,
)

T = TypeVar("T")


class BoundedFeedMerger(Generic[T]):
    """
    Merge strategy for append-style feeds (trades, decisions).

    Snapshot: replace wholesale, newest first. Event: prepend if unseen.
    Both keep the list free of duplicate ids and within the retention limit.
    Items delivered by events can be carried over a snapshot that does not
    contain them yet.
    """

    preserves_event_items = True

    def __init__(
        self,
        identity: Callable[[T], Hashable],
        timestamp: Callable[[T], datetime],
        limit: int,
    ):
        if limit < 1:
            raise ValueError("limit must be positive")
        self.identity = identity
        self._timestamp = timestamp
        self.limit = limit

    def apply_snapshot(self, snapshot: Sequence[T], carried: Sequence[T] = ()) -> list[T]:
        """Return the new list for a fetched snapshot, with carried items on top."""
        # Stable sort keeps server order for equal timestamps
        ordered = sorted(snapshot, key=self._timestamp, reverse=True)
        return self._bounded([*carried, *ordered])

    def apply_event(self, current: Sequence[T], item: T) -> Optional[list[T]]:
        """Return the list with item prepended, or None if it is already present."""
        key = self.identity(item)
        if any(self.identity(existing) == key for existing in current):
            return None
        return self._bounded([item, *current])

    def _bounded(self, items: Iterable[T]) -> list[T]:
        seen: set = set()
        result: list[T] = []
        for item in items:
            key = self.identity(item)
            if key in seen:
                continue
            seen.add(key)
            result.append(item)
            if len(result) >= self.limit:
                break
        return result


class AccountScopedMerger:
    """
    Merge strategy for positions snapshots.

    Snapshot: replace the whole array. Event: replace one account's snapshot,
    carrying forward its account-level aggregates and flagging them stale.
    A fetched snapshot is ground truth, so event items are never carried over.
    """

    preserves_event_items = False

    @staticmethod
    def identity(snapshot: PositionsSnapshot) -> int:
        return snapshot.account_id

    def apply_snapshot(
        self,
        snapshot: Sequence[PositionsSnapshot],
        carried: Sequence[PositionsSnapshot] = (),
    ) -> list[PositionsSnapshot]:
        by_account: dict[int, PositionsSnapshot] = {}
        for account in snapshot:
            by_account[account.account_id] = account
        return list(by_account.values())

    def apply_event(
        self,
        current: Sequence[PositionsSnapshot],
        batch: PositionBatchEvent,
        account_name: str = "",
    ) -> Optional[list[PositionsSnapshot]]:
        """Return positions with the batch's account replaced, or None if unattributable."""
        if batch.account_id is None or not batch.positions:
            return None

        previous = next((a for a in current if a.account_id == batch.account_id), None)
        if previous is not None:
            replacement = replace(previous, positions=list(batch.positions), aggregates_stale=True)
        else:
            replacement = PositionsSnapshot(
                account_id=batch.account_id,
                account_name=account_name,
                environment=batch.environment,
                positions=list(batch.positions),
                aggregates_stale=True,
            )

        if previous is None:
            return [*current, replacement]
        return [replacement if a.account_id == batch.account_id else a for a in current]


def merge_accounts_meta(
    current: dict[int, AccountMeta],
    updates: Iterable[AccountMeta],
) -> dict[int, AccountMeta]:
    """Last-write-wins merge of account metadata keyed by account_id."""
    merged = dict(current)
    for meta in updates:
        merged[meta.account_id] = meta
    return merged
