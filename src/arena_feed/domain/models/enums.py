"""Enumerations for domain models."""

from enum import Enum


class Environment(str, Enum):
    """Trading environment an account runs against."""

    TESTNET = "testnet"
    MAINNET = "mainnet"


class FeedStream(str, Enum):
    """The three independently reconciled feed streams."""

    TRADES = "trades"
    DECISIONS = "decisions"
    POSITIONS = "positions"


class LoadState(str, Enum):
    """Per-stream load lifecycle for the active filter context."""

    UNINITIALIZED = "UNINITIALIZED"
    LOADING = "LOADING"
    READY = "READY"
    FAILED = "FAILED"  # First load failed; nothing to fall back on


class EventKind(str, Enum):
    """Push-event message types."""

    TRADE = "trade_update"
    POSITION_BATCH = "position_update"
    DECISION = "model_chat_update"
