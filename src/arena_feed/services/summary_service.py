"""Account balance summaries derived from positions snapshots."""

from decimal import Decimal
from typing import Sequence

from arena_feed.domain.models import PositionsSnapshot
from arena_feed.domain.views import AccountBalanceView, FeedSummaryView, margin_status


def margin_usage_percent(snapshot: PositionsSnapshot) -> Decimal:
    """Reported margin usage, or used margin over total assets when not reported."""
    if snapshot.margin_usage_percent is not None:
        return snapshot.margin_usage_percent
    if snapshot.total_assets <= 0:
        return Decimal("0")
    return (snapshot.used_margin / snapshot.total_assets * 100).quantize(Decimal("0.01"))


def summarize_positions(snapshots: Sequence[PositionsSnapshot]) -> FeedSummaryView:
    """Build per-account balance views and totals, accounts ordered by name."""
    accounts = []
    for snapshot in sorted(snapshots, key=lambda s: (s.account_name.lower(), s.account_id)):
        usage = margin_usage_percent(snapshot)
        accounts.append(
            AccountBalanceView(
                account_id=snapshot.account_id,
                account_name=snapshot.account_name,
                total_assets=snapshot.total_assets,
                available_cash=snapshot.available_cash,
                used_margin=snapshot.used_margin,
                total_unrealized_pnl=snapshot.total_unrealized_pnl,
                position_count=len(snapshot.positions),
                margin_usage_percent=usage,
                margin_status=margin_status(usage),
                total_return=snapshot.total_return,
                aggregates_stale=snapshot.aggregates_stale,
            )
        )

    return FeedSummaryView(
        accounts=accounts,
        total_assets=sum((a.total_assets for a in accounts), Decimal("0")),
        total_available_cash=sum((a.available_cash for a in accounts), Decimal("0")),
        total_unrealized_pnl=sum((a.total_unrealized_pnl for a in accounts), Decimal("0")),
    )
