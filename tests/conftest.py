"""
Pytest configuration and fixtures for feed reconciliation tests.

This module provides:
- Factory helpers for trades, decisions and positions snapshots
- Controllable fake feed sources (fixed pages, failures, held fetches)
- Cache, engine, ingestor and scheduler fixtures
- FastAPI test client running against the stub source
"""

import asyncio
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from arena_feed.main import app
from arena_feed.config.settings import Settings, reset_settings, set_settings
from arena_feed.core.timezone import UTC
from arena_feed.domain.models import (
    AccountMeta,
    DecisionRecord,
    Environment,
    FilterContext,
    Position,
    PositionsSnapshot,
    TradeRecord,
)
from arena_feed.providers import EventHub
from arena_feed.providers.feed_source import DecisionsPage, PositionsPage, TradesPage
from arena_feed.repositories.memory import InMemoryEntryCache
from arena_feed.services import EventIngestor, FeedAdapters, FeedEngine, RefreshScheduler


# =============================================================================
# TIME HELPERS
# =============================================================================


BASE_TIME = UTC.localize(datetime(2024, 6, 15, 14, 0, 0))


def at_minute(minute: int) -> datetime:
    """UTC timestamp a number of minutes after the fixed base time."""
    return BASE_TIME + timedelta(minutes=minute)


def run(coro):
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run(coro)


# =============================================================================
# RECORD FACTORIES
# =============================================================================


def make_trade(
    trade_id: int,
    account_id: int = 1,
    minute: int = 0,
    symbol: str = "BTC",
    environment: Optional[str] = "testnet",
    wallet_address: Optional[str] = None,
) -> TradeRecord:
    """Create a trade; larger minute means more recent."""
    return TradeRecord(
        trade_id=trade_id,
        account_id=account_id,
        account_name=f"Account {account_id}",
        symbol=symbol,
        side="BUY",
        price=Decimal("100"),
        quantity=Decimal("1"),
        notional=Decimal("100"),
        commission=Decimal("0.05"),
        trade_time=at_minute(minute),
        environment=environment,
        wallet_address=wallet_address,
    )


def make_decision(
    decision_id: int,
    account_id: int = 1,
    minute: int = 0,
    operation: str = "buy",
    environment: Optional[str] = "testnet",
) -> DecisionRecord:
    """Create an AI decision entry; larger minute means more recent."""
    return DecisionRecord(
        id=decision_id,
        account_id=account_id,
        account_name=f"Account {account_id}",
        operation=operation,
        reason="test signal",
        decision_time=at_minute(minute),
        symbol="BTC",
        environment=environment,
    )


def make_position(symbol: str = "BTC", quantity: str = "1", side: str = "LONG") -> Position:
    """Create an open position."""
    qty = Decimal(quantity)
    return Position(
        symbol=symbol,
        side=side,
        quantity=qty,
        avg_cost=Decimal("100"),
        current_price=Decimal("110"),
        notional=Decimal("100") * qty,
        current_value=Decimal("110") * qty,
        unrealized_pnl=Decimal("10") * qty,
    )


def make_snapshot(
    account_id: int = 1,
    name: Optional[str] = None,
    total_assets: str = "10000",
    used_margin: str = "2000",
    positions: Optional[list[Position]] = None,
    margin_usage_percent: Optional[str] = None,
) -> PositionsSnapshot:
    """Create a positions snapshot for one account."""
    assets = Decimal(total_assets)
    margin = Decimal(used_margin)
    return PositionsSnapshot(
        account_id=account_id,
        account_name=name or f"Account {account_id}",
        available_cash=assets - margin,
        used_margin=margin,
        total_unrealized_pnl=Decimal("10"),
        total_assets=assets,
        initial_capital=Decimal("10000"),
        positions=positions if positions is not None else [make_position()],
        environment="testnet",
        margin_usage_percent=Decimal(margin_usage_percent) if margin_usage_percent else None,
    )


# =============================================================================
# FEED SOURCE FIXTURES
# =============================================================================


class FakeFeedSource:
    """
    Feed source returning whatever the test put in it.

    fail holds resource names ("trades", "decisions", "positions",
    "accounts") that raise on fetch. hold() makes a resource wait until
    release() is called, so tests can interleave events with a fetch.
    """

    def __init__(self):
        self.trades: list[TradeRecord] = []
        self.decisions: list[DecisionRecord] = []
        self.positions: list[PositionsSnapshot] = []
        self.accounts: list[AccountMeta] = []
        self.fail: set[str] = set()
        self.calls: list[tuple] = []
        self._gates: dict[str, asyncio.Event] = {}

    def hold(self, resource: str) -> None:
        self._gates[resource] = asyncio.Event()

    def release(self, resource: str) -> None:
        self._gates.pop(resource).set()

    def calls_for(self, resource: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == resource]

    async def _enter(self, resource: str, *args) -> None:
        self.calls.append((resource, *args))
        gate = self._gates.get(resource)
        if gate is not None:
            await gate.wait()
        if resource in self.fail:
            raise ConnectionError(f"{resource} unavailable")

    async def fetch_trades(self, limit, environment, account_id=None, wallet=None) -> TradesPage:
        await self._enter("trades", Environment(environment), account_id, wallet)
        trades = [t for t in self.trades if account_id is None or t.account_id == account_id]
        return TradesPage(trades=trades[:limit], accounts=list(self.accounts))

    async def fetch_decisions(self, limit, environment, account_id=None, wallet=None) -> DecisionsPage:
        await self._enter("decisions", Environment(environment), account_id, wallet)
        entries = [d for d in self.decisions if account_id is None or d.account_id == account_id]
        return DecisionsPage(entries=entries[:limit])

    async def fetch_positions(self, environment, account_id=None) -> PositionsPage:
        await self._enter("positions", Environment(environment), account_id)
        accounts = [p for p in self.positions if account_id is None or p.account_id == account_id]
        return PositionsPage(accounts=accounts)

    async def fetch_account_list(self) -> list[AccountMeta]:
        await self._enter("accounts")
        return list(self.accounts)


@pytest.fixture
def fake_source() -> FakeFeedSource:
    """Provide an empty controllable feed source."""
    source = FakeFeedSource()
    source.accounts = [
        AccountMeta(account_id=2, name="beta", model="claude-sonnet"),
        AccountMeta(account_id=1, name="Alpha", model="deepseek-chat"),
    ]
    return source


# =============================================================================
# ENGINE FIXTURES
# =============================================================================


@pytest.fixture
def testnet_context() -> FilterContext:
    """All accounts on testnet, no wallet filter."""
    return FilterContext(environment=Environment.TESTNET)


@pytest.fixture
def cache() -> InMemoryEntryCache:
    """Provide an unbounded entry cache."""
    return InMemoryEntryCache()


@pytest.fixture
def adapters(fake_source) -> FeedAdapters:
    """Provide adapters over the fake source with small page sizes."""
    return FeedAdapters(fake_source, trade_limit=5, decision_limit=5)


@pytest.fixture
def engine(adapters, cache, testnet_context) -> FeedEngine:
    """Provide a FeedEngine with a retention limit of 5 per feed."""
    return FeedEngine(
        adapters=adapters,
        cache=cache,
        context=testnet_context,
        trade_limit=5,
        decision_limit=5,
    )


@pytest.fixture
def hub() -> EventHub:
    """Provide an in-process event hub."""
    return EventHub()


@pytest.fixture
def ingestor(engine, hub) -> EventIngestor:
    """Provide an ingestor subscribed to the hub."""
    ingestor = EventIngestor(engine, hub)
    ingestor.start()
    yield ingestor
    ingestor.stop()


@pytest.fixture
def scheduler(engine) -> RefreshScheduler:
    """Provide a scheduler without background polling."""
    return RefreshScheduler(engine, poll_interval_seconds=0)


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def client() -> TestClient:
    """Provide FastAPI test client backed by the stub feed source."""
    set_settings(Settings(poll_interval_seconds=0, source_base_url=None))
    with TestClient(app) as c:
        yield c
    reset_settings()
