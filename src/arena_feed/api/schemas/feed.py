"""Pydantic schemas for feed endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel

from arena_feed.domain.models import Environment, FeedStream, LoadState
from arena_feed.domain.views import MarginStatus
from arena_feed.providers.payloads import (
    AccountMetaPayload,
    DecisionPayload,
    PositionsSnapshotPayload,
    TradePayload,
)


class TradeResponse(TradePayload):
    """Response schema for a trade."""


class DecisionResponse(DecisionPayload):
    """Response schema for an AI decision entry."""


class PositionsSnapshotResponse(PositionsSnapshotPayload):
    """Response schema for one account's positions snapshot."""

    aggregates_stale: bool = False


class AccountMetaResponse(AccountMetaPayload):
    """Response schema for account metadata."""


class StreamStatusResponse(BaseModel):
    """Load status of a single stream."""

    stream: FeedStream
    state: LoadState
    loading: bool
    last_error: Optional[str] = None
    updated_at: Optional[datetime] = None
    count: int


class FilterRequest(BaseModel):
    """Request schema for changing the filter context."""

    environment: Environment
    account: Union[int, str] = "all"
    wallet: Optional[str] = None


class RefreshRequest(BaseModel):
    """Request schema for a manual refresh."""

    refresh_token: Optional[int] = None


class RefreshResponse(BaseModel):
    """Response schema for a refresh request."""

    refreshed: bool
    streams: list[StreamStatusResponse]


class FeedStateResponse(BaseModel):
    """Response schema for the full feed state of the active context."""

    cache_key: str
    environment: Environment
    account: Union[int, str]
    wallet: Optional[str] = None
    streams: list[StreamStatusResponse]
    trades: list[TradeResponse]
    decisions: list[DecisionResponse]
    positions: list[PositionsSnapshotResponse]
    accounts: list[AccountMetaResponse]


class AccountBalanceResponse(BaseModel):
    """Response schema for one account's balance summary."""

    account_id: int
    account_name: str
    total_assets: Decimal
    available_cash: Decimal
    used_margin: Decimal
    total_unrealized_pnl: Decimal
    position_count: int
    margin_usage_percent: Decimal
    margin_status: MarginStatus
    total_return: Optional[Decimal] = None
    aggregates_stale: bool = False


class SummaryResponse(BaseModel):
    """Response schema for balances across accounts."""

    accounts: list[AccountBalanceResponse]
    total_assets: Decimal
    total_available_cash: Decimal
    total_unrealized_pnl: Decimal
