"""Push-event ingestion for the feed engine."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from arena_feed.core.exceptions import EventDecodeError
from arena_feed.domain.models import FeedEvent, FilterContext
from arena_feed.providers.event_codec import decode_event
from arena_feed.providers.event_stream import EventStream
from arena_feed.services.feed_engine import FeedEngine

logger = logging.getLogger(__name__)


def is_relevant(event: FeedEvent, context: FilterContext) -> bool:
    """
    Check an event against the active filter context.

    Environment and account only reject when the event carries them. An
    active wallet filter rejects events without a wallet address.
    """
    if event.environment and event.environment != context.environment.value:
        return False
    if (
        event.account_id is not None
        and not context.is_all_accounts
        and event.account_id != context.account_selector
    ):
        return False
    if context.wallet:
        if not event.wallet_address:
            return False
        if event.wallet_address.lower() != context.wallet.lower():
            return False
    return True


@dataclass
class IngestStats:
    """Counters for messages seen by an ingestor."""

    received: int = 0
    applied: int = 0
    rejected: int = 0
    malformed: int = 0


class EventIngestor:
    """
    Subscribes the feed engine to a shared push-event stream.

    Malformed messages are logged and dropped; irrelevant events are ignored.
    The subscription lives between start() and stop() and never touches other
    subscribers of the same stream.
    """

    def __init__(self, engine: FeedEngine, stream: EventStream):
        self._engine = engine
        self._stream = stream
        self._unsubscribe: Optional[Callable[[], None]] = None
        self.stats = IngestStats()

    @property
    def is_subscribed(self) -> bool:
        return self._unsubscribe is not None

    def start(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self._stream.subscribe(self.handle_message)

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def handle_message(self, message: Any) -> bool:
        """Decode, filter and apply one raw message. Returns True if state changed."""
        self.stats.received += 1
        try:
            event = decode_event(message)
        except EventDecodeError as exc:
            self.stats.malformed += 1
            logger.warning("Dropping event: %s", exc.message)
            return False

        if event is None:
            return False

        if not is_relevant(event, self._engine.context):
            self.stats.rejected += 1
            logger.debug("Ignoring %s for another context", event.kind.value)
            return False

        applied = self._engine.apply_event(event)
        if applied:
            self.stats.applied += 1
        return applied
