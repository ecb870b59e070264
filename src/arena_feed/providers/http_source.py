"""Feed source backed by the trading backend's REST API."""

import logging
from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError as PydanticValidationError

from arena_feed.core.exceptions import SourceError
from arena_feed.domain.models import AccountMeta, Environment
from arena_feed.providers.feed_source import DecisionsPage, PositionsPage, TradesPage
from arena_feed.providers.payloads import (
    AccountListAdapter,
    ModelChatResponse,
    PositionsResponse,
    TradesResponse,
)

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class HttpFeedSource:
    """
    REST feed source using an httpx AsyncClient.

    Timeouts are enforced by the client; every failure surfaces as SourceError.
    """

    TRADES_PATH = "/api/arena/trades"
    MODEL_CHAT_PATH = "/api/arena/model-chat"
    POSITIONS_PATH = "/api/arena/positions"
    ACCOUNTS_PATH = "/api/account/list"

    def __init__(
        self,
        base_url: str = "",
        timeout_seconds: float = 15.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout_seconds)

    async def fetch_trades(
        self,
        limit: int,
        environment: Environment,
        account_id: Optional[int] = None,
        wallet: Optional[str] = None,
    ) -> TradesPage:
        payload = await self._get_json(
            self.TRADES_PATH,
            "trades",
            limit=limit,
            account_id=account_id,
            trading_mode=Environment(environment).value,
            wallet_address=wallet,
        )
        response = self._parse(TradesResponse, payload, "trades")
        return TradesPage(
            trades=[t.to_domain() for t in response.trades],
            accounts=[a.to_domain() for a in response.accounts or []],
        )

    async def fetch_decisions(
        self,
        limit: int,
        environment: Environment,
        account_id: Optional[int] = None,
        wallet: Optional[str] = None,
    ) -> DecisionsPage:
        payload = await self._get_json(
            self.MODEL_CHAT_PATH,
            "decisions",
            limit=limit,
            account_id=account_id,
            trading_mode=Environment(environment).value,
            wallet_address=wallet,
        )
        response = self._parse(ModelChatResponse, payload, "decisions")
        return DecisionsPage(entries=[e.to_domain() for e in response.entries])

    async def fetch_positions(
        self,
        environment: Environment,
        account_id: Optional[int] = None,
    ) -> PositionsPage:
        payload = await self._get_json(
            self.POSITIONS_PATH,
            "positions",
            account_id=account_id,
            trading_mode=Environment(environment).value,
        )
        response = self._parse(PositionsResponse, payload, "positions")
        return PositionsPage(accounts=[a.to_domain() for a in response.accounts])

    async def fetch_account_list(self) -> list[AccountMeta]:
        payload = await self._get_json(self.ACCOUNTS_PATH, "accounts")
        try:
            items = AccountListAdapter.validate_python(payload)
        except PydanticValidationError as exc:
            raise SourceError("accounts", f"unexpected response shape: {exc}") from exc
        return [item.to_domain() for item in items]

    async def aclose(self) -> None:
        """Close the underlying client if this source created it."""
        if self._owns_client:
            await self._client.aclose()

    async def _get_json(self, path: str, resource: str, **params: Any) -> Any:
        query = {name: value for name, value in params.items() if value is not None}
        logger.debug("GET %s %s", path, query)
        try:
            response = await self._client.get(path, params=query)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as exc:
            raise SourceError(resource, str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            raise SourceError(resource, f"invalid JSON: {exc}") from exc

    @staticmethod
    def _parse(schema: type[ResponseT], payload: Any, resource: str) -> ResponseT:
        try:
            return schema.model_validate(payload)
        except PydanticValidationError as exc:
            raise SourceError(resource, f"unexpected response shape: {exc}") from exc
