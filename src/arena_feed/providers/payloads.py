"""Pydantic schemas for upstream REST responses and push payloads."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, TypeAdapter

from arena_feed.core.timezone import parse_datetime_utc, to_utc
from arena_feed.domain.models import (
    AccountMeta,
    DecisionRecord,
    Position,
    PositionsSnapshot,
    TradeRecord,
)


def _coerce_timestamp(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return parse_datetime_utc(value)
        except (ValueError, OverflowError) as exc:
            raise ValueError(f"invalid timestamp {value!r}: {exc}") from exc
    if isinstance(value, datetime):
        return to_utc(value)
    return value


Timestamp = Annotated[datetime, BeforeValidator(_coerce_timestamp)]


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", from_attributes=True)


class AccountMetaPayload(_Payload):
    """Account metadata embedded in feed responses."""

    account_id: int
    name: str
    model: Optional[str] = None

    def to_domain(self) -> AccountMeta:
        return AccountMeta(account_id=self.account_id, name=self.name, model=self.model)


class AccountListItemPayload(_Payload):
    """Entry of the account list endpoint."""

    id: int
    name: str
    model: Optional[str] = None

    def to_domain(self) -> AccountMeta:
        return AccountMeta(account_id=self.id, name=self.name, model=self.model)


class TradePayload(_Payload):
    """Executed trade."""

    trade_id: int
    account_id: int
    account_name: str = ""
    model: Optional[str] = None
    symbol: str
    side: str
    price: Decimal
    quantity: Decimal
    notional: Decimal = Decimal("0")
    commission: Decimal = Decimal("0")
    trade_time: Timestamp
    environment: Optional[str] = None
    wallet_address: Optional[str] = None

    def to_domain(self) -> TradeRecord:
        return TradeRecord(**self.model_dump())


class DecisionPayload(_Payload):
    """AI decision (model chat) entry."""

    id: int
    account_id: int
    account_name: str = ""
    model: Optional[str] = None
    symbol: Optional[str] = None
    operation: str
    reason: str = ""
    prompt_snapshot: Optional[str] = None
    reasoning_snapshot: Optional[str] = None
    decision_snapshot: Optional[str] = None
    prev_portion: Decimal = Decimal("0")
    target_portion: Decimal = Decimal("0")
    total_balance: Decimal = Decimal("0")
    executed: bool = False
    decision_time: Timestamp
    environment: Optional[str] = None
    wallet_address: Optional[str] = None

    def to_domain(self) -> DecisionRecord:
        return DecisionRecord(**self.model_dump())


class PositionPayload(_Payload):
    """Open position; account_id is only present on push payloads."""

    account_id: Optional[int] = None
    symbol: str
    market: str = ""
    side: str
    quantity: Decimal
    avg_cost: Decimal
    current_price: Decimal
    leverage: Optional[Decimal] = None
    margin_used: Optional[Decimal] = None
    notional: Decimal = Decimal("0")
    current_value: Decimal = Decimal("0")
    unrealized_pnl: Decimal = Decimal("0")
    return_on_equity: Optional[Decimal] = None
    percentage: Optional[Decimal] = None

    def to_domain(self) -> Position:
        return Position(**self.model_dump(exclude={"account_id"}))


class PositionsSnapshotPayload(_Payload):
    """Account balances with open positions."""

    account_id: int
    account_name: str = ""
    model: Optional[str] = None
    environment: Optional[str] = None
    available_cash: Decimal = Decimal("0")
    used_margin: Decimal = Decimal("0")
    positions_value: Decimal = Decimal("0")
    total_unrealized_pnl: Decimal = Decimal("0")
    total_assets: Decimal = Decimal("0")
    initial_capital: Decimal = Decimal("0")
    total_return: Optional[Decimal] = None
    margin_usage_percent: Optional[Decimal] = None
    margin_mode: Optional[str] = None
    positions: list[PositionPayload] = []

    def to_domain(self) -> PositionsSnapshot:
        data = self.model_dump(exclude={"positions"})
        return PositionsSnapshot(positions=[p.to_domain() for p in self.positions], **data)


class TradesResponse(_Payload):
    trades: list[TradePayload] = []
    accounts: Optional[list[AccountMetaPayload]] = None


class ModelChatResponse(_Payload):
    entries: list[DecisionPayload] = []


class PositionsResponse(_Payload):
    accounts: list[PositionsSnapshotPayload] = []


AccountListAdapter = TypeAdapter(list[AccountListItemPayload])
