"""Feed record models received from the trading backend."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class AccountMeta:
    """Denormalized account identity; last write wins per account_id."""

    account_id: int
    name: str
    model: Optional[str] = None


@dataclass(frozen=True)
class TradeRecord:
    """An executed trade. Immutable once received; identified by trade_id."""

    trade_id: int
    account_id: int
    account_name: str
    symbol: str
    side: str
    price: Decimal
    quantity: Decimal
    notional: Decimal
    commission: Decimal
    trade_time: datetime
    model: Optional[str] = None
    environment: Optional[str] = None
    wallet_address: Optional[str] = None


@dataclass(frozen=True)
class DecisionRecord:
    """An AI decision entry (model chat). Identified by id."""

    id: int
    account_id: int
    account_name: str
    operation: str
    reason: str
    decision_time: datetime
    model: Optional[str] = None
    symbol: Optional[str] = None
    prompt_snapshot: Optional[str] = None
    reasoning_snapshot: Optional[str] = None
    decision_snapshot: Optional[str] = None
    prev_portion: Decimal = field(default_factory=lambda: Decimal("0"))
    target_portion: Decimal = field(default_factory=lambda: Decimal("0"))
    total_balance: Decimal = field(default_factory=lambda: Decimal("0"))
    executed: bool = False
    environment: Optional[str] = None
    wallet_address: Optional[str] = None


@dataclass(frozen=True)
class Position:
    """An open position. Has no identity outside its parent snapshot."""

    symbol: str
    side: str
    quantity: Decimal
    avg_cost: Decimal
    current_price: Decimal
    notional: Decimal
    current_value: Decimal
    unrealized_pnl: Decimal
    market: str = ""
    leverage: Optional[Decimal] = None
    margin_used: Optional[Decimal] = None
    return_on_equity: Optional[Decimal] = None
    percentage: Optional[Decimal] = None


@dataclass(frozen=True)
class PositionsSnapshot:
    """
    Account-level balances plus open positions for one account.

    Not append-only: every update replaces the prior snapshot for the account.
    aggregates_stale marks a snapshot synthesized from a push event whose
    account-level figures were carried forward rather than fetched.
    """

    account_id: int
    account_name: str
    available_cash: Decimal = field(default_factory=lambda: Decimal("0"))
    used_margin: Decimal = field(default_factory=lambda: Decimal("0"))
    positions_value: Decimal = field(default_factory=lambda: Decimal("0"))
    total_unrealized_pnl: Decimal = field(default_factory=lambda: Decimal("0"))
    total_assets: Decimal = field(default_factory=lambda: Decimal("0"))
    initial_capital: Decimal = field(default_factory=lambda: Decimal("0"))
    positions: list[Position] = field(default_factory=list)
    model: Optional[str] = None
    environment: Optional[str] = None
    total_return: Optional[Decimal] = None
    margin_usage_percent: Optional[Decimal] = None
    margin_mode: Optional[str] = None
    aggregates_stale: bool = False
