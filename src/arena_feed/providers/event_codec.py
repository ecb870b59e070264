"""Decoding of raw push messages into tagged feed events."""

import json
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from arena_feed.core.exceptions import EventDecodeError
from arena_feed.domain.models import (
    DecisionEvent,
    EventKind,
    FeedEvent,
    PositionBatchEvent,
    TradeEvent,
)
from arena_feed.providers.payloads import DecisionPayload, PositionPayload, TradePayload


def decode_event(message: Any) -> Optional[FeedEvent]:
    """
    Decode a raw push message.

    Accepts JSON text, bytes or an already parsed dict. Returns None for
    message types the feed does not consume; raises EventDecodeError for
    payloads that cannot be parsed.
    """
    data = _load(message)

    try:
        kind = EventKind(data.get("type"))
    except ValueError:
        return None

    # Nested record fields take precedence over envelope fields
    environment = data.get("trading_mode") or data.get("environment")
    wallet_address = data.get("wallet_address")

    try:
        if kind is EventKind.TRADE:
            trade = TradePayload.model_validate(_required_object(data, "trade")).to_domain()
            return TradeEvent(
                trade=trade,
                account_id=trade.account_id,
                environment=trade.environment or environment,
                wallet_address=trade.wallet_address or wallet_address,
            )

        if kind is EventKind.DECISION:
            decision = DecisionPayload.model_validate(_required_object(data, "decision")).to_domain()
            return DecisionEvent(
                decision=decision,
                account_id=decision.account_id,
                environment=decision.environment or environment,
                wallet_address=decision.wallet_address or wallet_address,
            )

        return _decode_position_batch(data, environment, wallet_address)
    except PydanticValidationError as exc:
        raise EventDecodeError(f"{kind.value}: {exc}") from exc


def _decode_position_batch(
    data: dict,
    environment: Optional[str],
    wallet_address: Optional[str],
) -> PositionBatchEvent:
    raw_positions = data.get("positions")
    if not isinstance(raw_positions, list):
        raise EventDecodeError("position_update without a positions list")

    payloads = [PositionPayload.model_validate(item) for item in raw_positions]
    account_id = payloads[0].account_id if payloads else None
    if account_id is None:
        account_id = data.get("account_id")
        if account_id is not None and not isinstance(account_id, int):
            raise EventDecodeError(f"position_update with invalid account_id {account_id!r}")

    # A batch is scoped to one account; rows for other accounts are ignored
    positions = tuple(
        p.to_domain() for p in payloads if p.account_id is None or p.account_id == account_id
    )
    return PositionBatchEvent(
        positions=positions,
        account_id=account_id,
        environment=environment,
        wallet_address=wallet_address,
    )


def _load(message: Any) -> dict:
    if isinstance(message, (bytes, bytearray)):
        try:
            message = message.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise EventDecodeError(f"not UTF-8: {exc}") from exc
    if isinstance(message, str):
        try:
            message = json.loads(message)
        except json.JSONDecodeError as exc:
            raise EventDecodeError(f"invalid JSON: {exc}") from exc
    if not isinstance(message, dict):
        raise EventDecodeError(f"expected a JSON object, got {type(message).__name__}")
    return message


def _required_object(data: dict, field: str) -> dict:
    value = data.get(field)
    if not isinstance(value, dict):
        raise EventDecodeError(f"{data.get('type')} without {field}")
    return value
