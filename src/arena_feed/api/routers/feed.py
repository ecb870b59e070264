"""Feed state and refresh endpoints."""

from fastapi import APIRouter, Depends

from arena_feed.api.deps import get_engine, get_scheduler
from arena_feed.api.schemas import (
    AccountBalanceResponse,
    AccountMetaResponse,
    DecisionResponse,
    FeedStateResponse,
    FilterRequest,
    PositionsSnapshotResponse,
    RefreshRequest,
    RefreshResponse,
    StreamStatusResponse,
    SummaryResponse,
    TradeResponse,
)
from arena_feed.domain.models import FeedStream, FilterContext
from arena_feed.services import FeedEngine, RefreshScheduler, summarize_positions

router = APIRouter(prefix="/feed", tags=["feed"])


def _stream_status(engine: FeedEngine, stream: FeedStream) -> StreamStatusResponse:
    status = engine.status(stream)
    return StreamStatusResponse(
        stream=stream,
        state=status.state,
        loading=status.loading,
        last_error=status.last_error,
        updated_at=status.updated_at,
        count=len(engine.items(stream)),
    )


def _feed_state(engine: FeedEngine) -> FeedStateResponse:
    context = engine.context
    return FeedStateResponse(
        cache_key=context.cache_key,
        environment=context.environment,
        account=context.account_selector,
        wallet=context.wallet,
        streams=[_stream_status(engine, stream) for stream in FeedStream],
        trades=[TradeResponse.model_validate(t) for t in engine.trades],
        decisions=[DecisionResponse.model_validate(d) for d in engine.decisions],
        positions=[PositionsSnapshotResponse.model_validate(p) for p in engine.positions],
        accounts=[AccountMetaResponse.model_validate(m) for m in engine.accounts_meta],
    )


@router.get("", response_model=FeedStateResponse)
def get_feed(engine: FeedEngine = Depends(get_engine)) -> FeedStateResponse:
    """Get the full feed state for the active filter context."""
    return _feed_state(engine)


@router.get("/trades", response_model=list[TradeResponse])
def get_trades(engine: FeedEngine = Depends(get_engine)) -> list[TradeResponse]:
    """Get trades, most recent first."""
    return [TradeResponse.model_validate(t) for t in engine.trades]


@router.get("/decisions", response_model=list[DecisionResponse])
def get_decisions(engine: FeedEngine = Depends(get_engine)) -> list[DecisionResponse]:
    """Get AI decisions, most recent first."""
    return [DecisionResponse.model_validate(d) for d in engine.decisions]


@router.get("/positions", response_model=list[PositionsSnapshotResponse])
def get_positions(engine: FeedEngine = Depends(get_engine)) -> list[PositionsSnapshotResponse]:
    """Get positions snapshots, one per account."""
    return [PositionsSnapshotResponse.model_validate(p) for p in engine.positions]


@router.get("/summary", response_model=SummaryResponse)
def get_summary(engine: FeedEngine = Depends(get_engine)) -> SummaryResponse:
    """Get account balances with margin health."""
    summary = summarize_positions(engine.positions)
    return SummaryResponse(
        accounts=[
            AccountBalanceResponse(
                account_id=a.account_id,
                account_name=a.account_name,
                total_assets=a.total_assets,
                available_cash=a.available_cash,
                used_margin=a.used_margin,
                total_unrealized_pnl=a.total_unrealized_pnl,
                position_count=a.position_count,
                margin_usage_percent=a.margin_usage_percent,
                margin_status=a.margin_status,
                total_return=a.total_return,
                aggregates_stale=a.aggregates_stale,
            )
            for a in summary.accounts
        ],
        total_assets=summary.total_assets,
        total_available_cash=summary.total_available_cash,
        total_unrealized_pnl=summary.total_unrealized_pnl,
    )


@router.put("/filter", response_model=FeedStateResponse)
async def change_filter(
    data: FilterRequest,
    engine: FeedEngine = Depends(get_engine),
    scheduler: RefreshScheduler = Depends(get_scheduler),
) -> FeedStateResponse:
    """Switch the filter context and reload all streams."""
    context = FilterContext(
        environment=data.environment,
        account_selector=data.account,
        wallet=data.wallet,
    )
    await scheduler.apply_filter(context)
    return _feed_state(engine)


@router.post("/tabs/{stream}", response_model=StreamStatusResponse)
async def activate_tab(
    stream: FeedStream,
    engine: FeedEngine = Depends(get_engine),
    scheduler: RefreshScheduler = Depends(get_scheduler),
) -> StreamStatusResponse:
    """Mark a stream's tab visible, loading it if it has no data yet."""
    await scheduler.activate_tab(stream)
    return _stream_status(engine, stream)


@router.post("/refresh", response_model=RefreshResponse)
async def refresh(
    data: RefreshRequest,
    engine: FeedEngine = Depends(get_engine),
    scheduler: RefreshScheduler = Depends(get_scheduler),
) -> RefreshResponse:
    """Reload all streams, or only if the refresh token changed."""
    refreshed = await scheduler.request_refresh(data.refresh_token)
    return RefreshResponse(
        refreshed=refreshed,
        streams=[_stream_status(engine, stream) for stream in FeedStream],
    )
