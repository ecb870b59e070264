"""View models for service outputs."""

from arena_feed.domain.views.summary import (
    MarginStatus,
    margin_status,
    AccountBalanceView,
    FeedSummaryView,
)

__all__ = [
    "MarginStatus",
    "margin_status",
    "AccountBalanceView",
    "FeedSummaryView",
]
