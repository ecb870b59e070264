"""Account selector endpoints."""

from fastapi import APIRouter, Depends, Query

from arena_feed.api.deps import get_engine
from arena_feed.api.schemas import AccountListResponse, AccountOptionResponse
from arena_feed.services import FeedEngine

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.get("", response_model=AccountListResponse)
async def list_accounts(
    reload: bool = Query(False, description="Fetch the account list again"),
    engine: FeedEngine = Depends(get_engine),
) -> AccountListResponse:
    """List trading accounts sorted by name."""
    if reload or not engine.account_options:
        await engine.load_account_options()

    accounts = engine.account_options
    return AccountListResponse(
        accounts=[
            AccountOptionResponse(account_id=a.account_id, name=a.name, model=a.model)
            for a in accounts
        ],
        count=len(accounts),
    )
