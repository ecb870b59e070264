"""Reconciliation engine merging fetched snapshots and push events per filter context."""

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import datetime
from operator import attrgetter
from typing import Callable, Iterable, Optional

from arena_feed.core.timezone import now_utc
from arena_feed.domain.models import (
    AccountMeta,
    DecisionEvent,
    DecisionRecord,
    FeedEvent,
    FeedStream,
    FilterContext,
    LoadState,
    PositionBatchEvent,
    PositionsSnapshot,
    TradeEvent,
    TradeRecord,
)
from arena_feed.repositories.protocols import EntryCache
from arena_feed.services.feed_adapters import (
    DEFAULT_DECISION_LIMIT,
    DEFAULT_TRADE_LIMIT,
    FeedAdapters,
    FetchResult,
)
from arena_feed.services.merge import (
    AccountScopedMerger,
    BoundedFeedMerger,
    merge_accounts_meta,
)

logger = logging.getLogger(__name__)

ChangeListener = Callable[[Optional[FeedStream]], None]


@dataclass
class StreamStatus:
    """Load lifecycle of one stream under the active filter context."""

    state: LoadState = LoadState.UNINITIALIZED
    in_flight: int = 0
    last_error: Optional[str] = None
    updated_at: Optional[datetime] = None

    @property
    def loading(self) -> bool:
        return self.in_flight > 0


class FeedEngine:
    """
    Owns the trades, decisions and positions state for the active filter context.

    Fetch results replace a stream's list (snapshot merge); push events are
    folded in one item at a time (incremental merge). Every accepted change is
    written to the entry cache before the in-memory state is updated.

    Switching context bumps a generation counter. A fetch result is applied
    only if the generation it was issued under is still current.
    """

    def __init__(
        self,
        adapters: FeedAdapters,
        cache: EntryCache,
        context: FilterContext,
        trade_limit: int = DEFAULT_TRADE_LIMIT,
        decision_limit: int = DEFAULT_DECISION_LIMIT,
    ):
        self._adapters = adapters
        self._cache = cache
        self._mergers = {
            FeedStream.TRADES: BoundedFeedMerger(
                identity=attrgetter("trade_id"),
                timestamp=attrgetter("trade_time"),
                limit=trade_limit,
            ),
            FeedStream.DECISIONS: BoundedFeedMerger(
                identity=attrgetter("id"),
                timestamp=attrgetter("decision_time"),
                limit=decision_limit,
            ),
            FeedStream.POSITIONS: AccountScopedMerger(),
        }
        self._listeners: list[ChangeListener] = []
        self._account_options: list[AccountMeta] = []
        self._generation = 0
        self._event_seq = 0
        self._activate(context)

    # Read access

    @property
    def context(self) -> FilterContext:
        return self._context

    @property
    def cache_key(self) -> str:
        return self._context.cache_key

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def trades(self) -> list[TradeRecord]:
        return list(self._items[FeedStream.TRADES])

    @property
    def decisions(self) -> list[DecisionRecord]:
        return list(self._items[FeedStream.DECISIONS])

    @property
    def positions(self) -> list[PositionsSnapshot]:
        return list(self._items[FeedStream.POSITIONS])

    @property
    def accounts_meta(self) -> list[AccountMeta]:
        return list(self._accounts_meta.values())

    @property
    def account_options(self) -> list[AccountMeta]:
        return list(self._account_options)

    def items(self, stream: FeedStream) -> list:
        return list(self._items[stream])

    def status(self, stream: FeedStream) -> StreamStatus:
        return replace(self._status[stream])

    def is_loading(self, stream: FeedStream) -> bool:
        return self._status[stream].loading

    def needs_load(self, stream: FeedStream) -> bool:
        """True when the stream has never been filled from a snapshot or holds nothing."""
        state = self._status[stream].state
        return state in (LoadState.UNINITIALIZED, LoadState.FAILED) or not self._items[stream]

    def add_listener(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a callback run after every state change; returns its remover."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    # Context handling

    def switch_context(self, context: FilterContext) -> bool:
        """Make context active, seeding from cache. Returns False if unchanged."""
        if context == self._context:
            return False
        logger.info("Switching feed context %s -> %s", self.cache_key, context.cache_key)
        self._activate(context)
        self._notify(None)
        return True

    def seed_from_cache(
        self,
        streams: Optional[Iterable[FeedStream]] = None,
        require_items: bool = False,
    ) -> bool:
        """
        Fill empty streams from the cache entry of the active key.

        With require_items, a cached empty list does not count as data.
        Returns True if any stream was seeded.
        """
        entry = self._cache.get(self.cache_key)
        if entry is None:
            return False

        seeded = False
        for stream in streams or list(FeedStream):
            cached = entry.stream_items(stream)
            if cached is None or (require_items and not cached):
                continue
            # Never overwrite held items, even event-only ones awaiting a snapshot
            if self._items[stream]:
                continue
            self._items[stream] = list(cached)
            status = self._status[stream]
            status.state = LoadState.READY
            status.updated_at = entry.updated_at
            seeded = True

        if entry.accounts_meta:
            self._accounts_meta = merge_accounts_meta(self._accounts_meta, entry.accounts_meta)

        if seeded:
            self._notify(None)
        return seeded

    # Snapshot merge

    async def load(self, stream: FeedStream) -> bool:
        """
        Fetch one stream and merge the snapshot.

        Returns True if the result was applied. Failures and results that
        arrive after a context switch leave state untouched.
        """
        generation = self._generation
        context = self._context
        status = self._status[stream]
        issued_seq = self._event_seq

        status.in_flight += 1
        if status.state in (LoadState.UNINITIALIZED, LoadState.FAILED):
            status.state = LoadState.LOADING
        self._notify(stream)

        try:
            result = await self._adapters.fetch(stream, context)
        finally:
            status.in_flight -= 1

        if generation != self._generation:
            logger.debug(
                "Discarding %s result for stale context %s", stream.value, context.cache_key
            )
            return False

        return self._apply_result(stream, result, issued_seq)

    async def refresh_all(self) -> dict[FeedStream, bool]:
        """Fetch all three streams concurrently; one failure never blocks the others."""
        streams = list(FeedStream)
        results = await asyncio.gather(
            *(self.load(stream) for stream in streams),
            return_exceptions=True,
        )

        outcome: dict[FeedStream, bool] = {}
        for stream, result in zip(streams, results):
            if isinstance(result, Exception):
                logger.error("Refreshing %s failed", stream.value, exc_info=result)
                outcome[stream] = False
            else:
                outcome[stream] = result
        return outcome

    async def load_account_options(self) -> list[AccountMeta]:
        """Load every trading account for the account selector, sorted by name."""
        result = await self._adapters.fetch_accounts()
        if result.ok:
            self._account_options = sorted(result.items, key=lambda m: m.name.lower())
            self._notify(None)
        return self.account_options

    def _apply_result(self, stream: FeedStream, result: FetchResult, issued_seq: int) -> bool:
        status = self._status[stream]
        if not result.ok:
            status.last_error = result.error
            if status.state is LoadState.LOADING and not status.loading:
                status.state = LoadState.FAILED
            self._notify(stream)
            return False

        merger = self._mergers[stream]
        carried = self._event_items_since(stream, issued_seq) if merger.preserves_event_items else []
        merged = merger.apply_snapshot(result.items, carried)
        accounts_meta = merge_accounts_meta(self._accounts_meta, result.accounts)

        self._cache.update(
            self.cache_key,
            **{stream.value: merged, "accounts_meta": list(accounts_meta.values())},
        )
        self._items[stream] = merged
        self._accounts_meta = accounts_meta
        self._prune_event_arrivals(stream)

        status.state = LoadState.READY
        status.last_error = None
        status.updated_at = now_utc()
        self._notify(stream)
        return True

    # Incremental merge

    def apply_event(self, event: FeedEvent) -> bool:
        """Fold an accepted push event into state. Returns True if anything changed."""
        if isinstance(event, TradeEvent):
            return self._apply_incremental(FeedStream.TRADES, event.trade)
        if isinstance(event, DecisionEvent):
            return self._apply_incremental(FeedStream.DECISIONS, event.decision)
        if isinstance(event, PositionBatchEvent):
            return self._apply_position_batch(event)
        raise TypeError(f"Unsupported feed event: {type(event).__name__}")

    def _apply_incremental(self, stream: FeedStream, item) -> bool:
        merger = self._mergers[stream]
        updated = merger.apply_event(self._items[stream], item)
        if updated is None:
            return False

        self._cache.update(self.cache_key, **{stream.value: updated})
        self._items[stream] = updated
        self._event_seq += 1
        self._event_arrivals[stream][merger.identity(item)] = self._event_seq
        self._notify(stream)
        return True

    def _apply_position_batch(self, batch: PositionBatchEvent) -> bool:
        if batch.account_id is None:
            logger.debug("Ignoring position update without account_id")
            return False

        meta = self._accounts_meta.get(batch.account_id)
        updated = self._mergers[FeedStream.POSITIONS].apply_event(
            self._items[FeedStream.POSITIONS],
            batch,
            account_name=meta.name if meta else "",
        )
        if updated is None:
            return False

        self._cache.update(self.cache_key, positions=updated)
        self._items[FeedStream.POSITIONS] = updated
        self._event_seq += 1
        self._notify(FeedStream.POSITIONS)
        return True

    # Internals

    def _activate(self, context: FilterContext) -> None:
        self._generation += 1
        self._context = context
        self._items: dict[FeedStream, list] = {stream: [] for stream in FeedStream}
        self._status: dict[FeedStream, StreamStatus] = {stream: StreamStatus() for stream in FeedStream}
        self._accounts_meta: dict[int, AccountMeta] = {}
        self._event_arrivals: dict[FeedStream, dict] = {stream: {} for stream in FeedStream}
        self.seed_from_cache()

    def _event_items_since(self, stream: FeedStream, seq: int) -> list:
        arrived = {key for key, arrival in self._event_arrivals[stream].items() if arrival > seq}
        if not arrived:
            return []
        identity = self._mergers[stream].identity
        return [item for item in self._items[stream] if identity(item) in arrived]

    def _prune_event_arrivals(self, stream: FeedStream) -> None:
        identity = self._mergers[stream].identity
        present = {identity(item) for item in self._items[stream]}
        arrivals = self._event_arrivals[stream]
        for key in [key for key in arrivals if key not in present]:
            del arrivals[key]

    def _notify(self, stream: Optional[FeedStream]) -> None:
        for listener in list(self._listeners):
            try:
                listener(stream)
            except Exception:
                logger.exception("Feed change listener failed")
