"""View models for account balance summaries."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional


class MarginStatus(str, Enum):
    """Margin health bands shown next to each account balance."""

    HEALTHY = "HEALTHY"
    MODERATE = "MODERATE"
    HIGH_RISK = "HIGH_RISK"


def margin_status(percent: Decimal) -> MarginStatus:
    """Classify a margin usage percentage (0-100)."""
    if percent < 50:
        return MarginStatus.HEALTHY
    if percent < 75:
        return MarginStatus.MODERATE
    return MarginStatus.HIGH_RISK


@dataclass
class AccountBalanceView:
    """Balance figures for a single account."""

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


@dataclass
class FeedSummaryView:
    """Balances across every account in the active positions snapshot."""

    accounts: list[AccountBalanceView] = field(default_factory=list)
    total_assets: Decimal = field(default_factory=lambda: Decimal("0"))
    total_available_cash: Decimal = field(default_factory=lambda: Decimal("0"))
    total_unrealized_pnl: Decimal = field(default_factory=lambda: Decimal("0"))
