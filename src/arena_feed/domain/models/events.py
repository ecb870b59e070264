"""Push events decoded into a tagged variant."""

from dataclasses import dataclass, field
from typing import ClassVar, Optional, Union

from arena_feed.domain.models.enums import EventKind
from arena_feed.domain.models.records import DecisionRecord, Position, TradeRecord


@dataclass(frozen=True)
class TradeEvent:
    """A newly executed trade."""

    kind: ClassVar[EventKind] = EventKind.TRADE

    trade: TradeRecord
    account_id: Optional[int] = None
    environment: Optional[str] = None
    wallet_address: Optional[str] = None


@dataclass(frozen=True)
class PositionBatchEvent:
    """Fresh positions for one account, without account-level aggregates."""

    kind: ClassVar[EventKind] = EventKind.POSITION_BATCH

    positions: tuple[Position, ...] = field(default_factory=tuple)
    account_id: Optional[int] = None
    environment: Optional[str] = None
    wallet_address: Optional[str] = None


@dataclass(frozen=True)
class DecisionEvent:
    """A new AI decision entry."""

    kind: ClassVar[EventKind] = EventKind.DECISION

    decision: DecisionRecord
    account_id: Optional[int] = None
    environment: Optional[str] = None
    wallet_address: Optional[str] = None


FeedEvent = Union[TradeEvent, PositionBatchEvent, DecisionEvent]
