"""Stub feed source for offline/testing use."""

import random
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from arena_feed.core.timezone import UTC
from arena_feed.domain.models import (
    AccountMeta,
    DecisionRecord,
    Environment,
    Position,
    PositionsSnapshot,
    TradeRecord,
)
from arena_feed.providers.feed_source import DecisionsPage, PositionsPage, TradesPage


_STUB_ACCOUNTS: list[AccountMeta] = [
    AccountMeta(account_id=1, name="DeepSeek Trader", model="deepseek-chat"),
    AccountMeta(account_id=2, name="Claude Trader", model="claude-sonnet"),
    AccountMeta(account_id=3, name="Qwen Trader", model="qwen-max"),
]

# Deterministic reference prices
_STUB_PRICES: dict[str, Decimal] = {
    "BTC": Decimal("67250.00"),
    "ETH": Decimal("3480.50"),
    "SOL": Decimal("152.25"),
    "DOGE": Decimal("0.1625"),
}

_BASE_TIME = UTC.localize(datetime(2024, 6, 15, 14, 0, 0))


def stub_wallet(account_id: int) -> str:
    """Deterministic wallet address for a stub account."""
    return f"0x{account_id:040x}"


class StubFeedSource:
    """
    Stub source with deterministic fake activity for offline operation.

    Each account gets a fixed history of trades and decisions a few minutes
    apart. Record ids embed the account id so they never collide.
    """

    def __init__(self, seed: int = 42, history: int = 20):
        self._seed = seed
        self._history = history

    async def fetch_trades(
        self,
        limit: int,
        environment: Environment,
        account_id: Optional[int] = None,
        wallet: Optional[str] = None,
    ) -> TradesPage:
        accounts = self._accounts(account_id, wallet)
        trades = [
            trade
            for account in accounts
            for trade in self._trades_for(account, Environment(environment))
        ]
        trades.sort(key=lambda t: t.trade_time, reverse=True)
        return TradesPage(trades=trades[:limit], accounts=list(accounts))

    async def fetch_decisions(
        self,
        limit: int,
        environment: Environment,
        account_id: Optional[int] = None,
        wallet: Optional[str] = None,
    ) -> DecisionsPage:
        accounts = self._accounts(account_id, wallet)
        entries = [
            entry
            for account in accounts
            for entry in self._decisions_for(account, Environment(environment))
        ]
        entries.sort(key=lambda d: d.decision_time, reverse=True)
        return DecisionsPage(entries=entries[:limit])

    async def fetch_positions(
        self,
        environment: Environment,
        account_id: Optional[int] = None,
    ) -> PositionsPage:
        accounts = self._accounts(account_id, None)
        return PositionsPage(
            accounts=[self._snapshot_for(account, Environment(environment)) for account in accounts]
        )

    async def fetch_account_list(self) -> list[AccountMeta]:
        return list(_STUB_ACCOUNTS)

    def _accounts(self, account_id: Optional[int], wallet: Optional[str]) -> list[AccountMeta]:
        accounts = _STUB_ACCOUNTS
        if account_id is not None:
            accounts = [a for a in accounts if a.account_id == account_id]
        if wallet:
            accounts = [a for a in accounts if stub_wallet(a.account_id) == wallet.lower()]
        return accounts

    def _rng(self, account: AccountMeta, environment: Environment) -> random.Random:
        return random.Random(f"{self._seed}:{account.account_id}:{environment.value}")

    def _trades_for(self, account: AccountMeta, environment: Environment) -> list[TradeRecord]:
        rng = self._rng(account, environment)
        symbols = sorted(_STUB_PRICES)
        trades = []
        for i in range(self._history):
            symbol = rng.choice(symbols)
            price = _STUB_PRICES[symbol]
            quantity = Decimal(str(round(rng.uniform(0.1, 5.0), 3)))
            notional = (price * quantity).quantize(Decimal("0.01"))
            trades.append(
                TradeRecord(
                    trade_id=account.account_id * 10_000 + i,
                    account_id=account.account_id,
                    account_name=account.name,
                    model=account.model,
                    symbol=symbol,
                    side=rng.choice(["BUY", "SELL"]),
                    price=price,
                    quantity=quantity,
                    notional=notional,
                    commission=(notional * Decimal("0.00035")).quantize(Decimal("0.0001")),
                    trade_time=_BASE_TIME - timedelta(minutes=i * 3 + account.account_id),
                    environment=environment.value,
                    wallet_address=stub_wallet(account.account_id),
                )
            )
        return trades

    def _decisions_for(self, account: AccountMeta, environment: Environment) -> list[DecisionRecord]:
        rng = self._rng(account, environment)
        symbols = sorted(_STUB_PRICES)
        entries = []
        for i in range(self._history):
            operation = rng.choice(["buy", "sell", "hold"])
            prev_portion = Decimal(str(round(rng.random(), 2)))
            target_portion = prev_portion if operation == "hold" else Decimal(str(round(rng.random(), 2)))
            entries.append(
                DecisionRecord(
                    id=account.account_id * 10_000 + i,
                    account_id=account.account_id,
                    account_name=account.name,
                    model=account.model,
                    symbol=rng.choice(symbols) if operation != "hold" else None,
                    operation=operation,
                    reason=f"Stub {operation} signal",
                    prev_portion=prev_portion,
                    target_portion=target_portion,
                    total_balance=Decimal("10000.00"),
                    executed=operation != "hold",
                    decision_time=_BASE_TIME - timedelta(minutes=i * 5 + account.account_id),
                    environment=environment.value,
                    wallet_address=stub_wallet(account.account_id),
                )
            )
        return entries

    def _snapshot_for(self, account: AccountMeta, environment: Environment) -> PositionsSnapshot:
        rng = self._rng(account, environment)
        positions = []
        for symbol in sorted(rng.sample(sorted(_STUB_PRICES), 2)):
            avg_cost = _STUB_PRICES[symbol]
            drift = Decimal(str(round(rng.uniform(0.95, 1.05), 4)))
            current_price = (avg_cost * drift).quantize(Decimal("0.0001"))
            quantity = Decimal(str(round(rng.uniform(0.1, 3.0), 3)))
            side = rng.choice(["LONG", "SHORT"])
            direction = 1 if side == "LONG" else -1
            positions.append(
                Position(
                    symbol=symbol,
                    market="perp",
                    side=side,
                    quantity=quantity,
                    avg_cost=avg_cost,
                    current_price=current_price,
                    leverage=Decimal("3"),
                    margin_used=(avg_cost * quantity / 3).quantize(Decimal("0.01")),
                    notional=(avg_cost * quantity).quantize(Decimal("0.01")),
                    current_value=(current_price * quantity).quantize(Decimal("0.01")),
                    unrealized_pnl=((current_price - avg_cost) * quantity * direction).quantize(Decimal("0.01")),
                )
            )

        used_margin = sum((p.margin_used for p in positions), Decimal("0"))
        unrealized = sum((p.unrealized_pnl for p in positions), Decimal("0"))
        initial_capital = Decimal("10000.00")
        available_cash = initial_capital - used_margin
        total_assets = available_cash + used_margin + unrealized

        return PositionsSnapshot(
            account_id=account.account_id,
            account_name=account.name,
            model=account.model,
            environment=environment.value,
            available_cash=available_cash,
            used_margin=used_margin,
            positions_value=sum((p.current_value for p in positions), Decimal("0")),
            total_unrealized_pnl=unrealized,
            total_assets=total_assets,
            initial_capital=initial_capital,
            total_return=((total_assets - initial_capital) / initial_capital).quantize(Decimal("0.0001")),
            margin_usage_percent=(used_margin / total_assets * 100).quantize(Decimal("0.01")),
            margin_mode="cross",
            positions=positions,
        )
