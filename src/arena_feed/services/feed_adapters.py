"""Source adapters turning feed source calls into settled fetch results."""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

from arena_feed.domain.models import AccountMeta, FeedStream, FilterContext
from arena_feed.providers.feed_source import FeedSource

logger = logging.getLogger(__name__)

DEFAULT_TRADE_LIMIT = 100
DEFAULT_DECISION_LIMIT = 60


@dataclass(frozen=True)
class FetchResult:
    """
    Outcome of one adapter call.

    A failed result carries the error text and no items; callers treat it as
    "no update" and keep whatever state they already hold.
    """

    items: list = field(default_factory=list)
    accounts: list[AccountMeta] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, error: str) -> "FetchResult":
        return cls(error=error)


class FeedAdapters:
    """
    Wraps a FeedSource with the fixed page sizes and failure containment.

    No exception raised by the source escapes an adapter call.
    """

    def __init__(
        self,
        source: FeedSource,
        trade_limit: int = DEFAULT_TRADE_LIMIT,
        decision_limit: int = DEFAULT_DECISION_LIMIT,
    ):
        self._source = source
        self.trade_limit = trade_limit
        self.decision_limit = decision_limit

    async def fetch(self, stream: FeedStream, context: FilterContext) -> FetchResult:
        """Fetch the snapshot for one stream."""
        if stream is FeedStream.TRADES:
            return await self.fetch_trades(context)
        if stream is FeedStream.DECISIONS:
            return await self.fetch_decisions(context)
        return await self.fetch_positions(context)

    async def fetch_trades(self, context: FilterContext) -> FetchResult:
        async def _load() -> FetchResult:
            page = await self._source.fetch_trades(
                limit=self.trade_limit,
                environment=context.environment,
                account_id=context.account_id,
                wallet=context.wallet,
            )
            return FetchResult(items=list(page.trades), accounts=list(page.accounts))

        return await self._settle("trades", context, _load)

    async def fetch_decisions(self, context: FilterContext) -> FetchResult:
        async def _load() -> FetchResult:
            page = await self._source.fetch_decisions(
                limit=self.decision_limit,
                environment=context.environment,
                account_id=context.account_id,
                wallet=context.wallet,
            )
            accounts = [
                AccountMeta(account_id=e.account_id, name=e.account_name, model=e.model)
                for e in page.entries
            ]
            return FetchResult(items=list(page.entries), accounts=accounts)

        return await self._settle("decisions", context, _load)

    async def fetch_positions(self, context: FilterContext) -> FetchResult:
        async def _load() -> FetchResult:
            page = await self._source.fetch_positions(
                environment=context.environment,
                account_id=context.account_id,
            )
            accounts = [
                AccountMeta(account_id=a.account_id, name=a.account_name, model=a.model)
                for a in page.accounts
            ]
            return FetchResult(items=list(page.accounts), accounts=accounts)

        return await self._settle("positions", context, _load)

    async def fetch_accounts(self) -> FetchResult:
        """Fetch the full account list used for the account selector."""

        async def _load() -> FetchResult:
            accounts = await self._source.fetch_account_list()
            return FetchResult(items=list(accounts), accounts=list(accounts))

        return await self._settle("accounts", None, _load)

    @staticmethod
    async def _settle(
        resource: str,
        context: Optional[FilterContext],
        load: Callable[[], Awaitable[FetchResult]],
    ) -> FetchResult:
        try:
            return await load()
        except Exception as exc:
            scope = context.cache_key if context else "-"
            logger.warning("Failed to load %s for %s: %s", resource, scope, _describe(exc))
            return FetchResult.failed(_describe(exc))


def _describe(exc: Any) -> str:
    message = getattr(exc, "message", None) or str(exc)
    return message or type(exc).__name__
