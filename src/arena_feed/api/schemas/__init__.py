"""Pydantic schemas for API request/response."""

from arena_feed.api.schemas.feed import (
    TradeResponse,
    DecisionResponse,
    PositionsSnapshotResponse,
    AccountMetaResponse,
    StreamStatusResponse,
    FilterRequest,
    RefreshRequest,
    RefreshResponse,
    FeedStateResponse,
    AccountBalanceResponse,
    SummaryResponse,
)
from arena_feed.api.schemas.account import AccountOptionResponse, AccountListResponse
from arena_feed.api.schemas.event import EventRelayResponse

__all__ = [
    "TradeResponse",
    "DecisionResponse",
    "PositionsSnapshotResponse",
    "AccountMetaResponse",
    "StreamStatusResponse",
    "FilterRequest",
    "RefreshRequest",
    "RefreshResponse",
    "FeedStateResponse",
    "AccountBalanceResponse",
    "SummaryResponse",
    "AccountOptionResponse",
    "AccountListResponse",
    "EventRelayResponse",
]
