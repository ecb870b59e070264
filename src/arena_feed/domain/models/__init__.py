"""Domain models package."""

from arena_feed.domain.models.enums import Environment, FeedStream, LoadState, EventKind
from arena_feed.domain.models.filter import (
    ALL_ACCOUNTS,
    AccountSelector,
    FilterContext,
    parse_account_selector,
)
from arena_feed.domain.models.records import (
    AccountMeta,
    TradeRecord,
    DecisionRecord,
    Position,
    PositionsSnapshot,
)
from arena_feed.domain.models.events import (
    TradeEvent,
    PositionBatchEvent,
    DecisionEvent,
    FeedEvent,
)
from arena_feed.domain.models.cache import CacheEntry, CACHE_FIELDS

__all__ = [
    "Environment",
    "FeedStream",
    "LoadState",
    "EventKind",
    "ALL_ACCOUNTS",
    "AccountSelector",
    "FilterContext",
    "parse_account_selector",
    "AccountMeta",
    "TradeRecord",
    "DecisionRecord",
    "Position",
    "PositionsSnapshot",
    "TradeEvent",
    "PositionBatchEvent",
    "DecisionEvent",
    "FeedEvent",
    "CacheEntry",
    "CACHE_FIELDS",
]
