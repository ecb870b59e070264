"""Feed source protocol and result pages."""

from dataclasses import dataclass, field
from typing import Optional, Protocol

from arena_feed.domain.models import (
    AccountMeta,
    DecisionRecord,
    Environment,
    PositionsSnapshot,
    TradeRecord,
)


@dataclass
class TradesPage:
    trades: list[TradeRecord] = field(default_factory=list)
    accounts: list[AccountMeta] = field(default_factory=list)


@dataclass
class DecisionsPage:
    entries: list[DecisionRecord] = field(default_factory=list)


@dataclass
class PositionsPage:
    accounts: list[PositionsSnapshot] = field(default_factory=list)


class FeedSource(Protocol):
    """
    Protocol for upstream feed sources.

    Implementations raise on transport or parse failure; the adapter layer
    turns those failures into "no update" results.
    """

    async def fetch_trades(
        self,
        limit: int,
        environment: Environment,
        account_id: Optional[int] = None,
        wallet: Optional[str] = None,
    ) -> TradesPage:
        """Fetch the most recent trades, newest first."""
        ...

    async def fetch_decisions(
        self,
        limit: int,
        environment: Environment,
        account_id: Optional[int] = None,
        wallet: Optional[str] = None,
    ) -> DecisionsPage:
        """Fetch the most recent AI decisions, newest first."""
        ...

    async def fetch_positions(
        self,
        environment: Environment,
        account_id: Optional[int] = None,
    ) -> PositionsPage:
        """Fetch a full positions snapshot per account."""
        ...

    async def fetch_account_list(self) -> list[AccountMeta]:
        """Fetch every known trading account."""
        ...
