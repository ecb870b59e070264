"""Subscribable push-event stream shared by several consumers."""

import logging
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)

EventHandler = Callable[[Any], None]
Unsubscribe = Callable[[], None]


class EventStream(Protocol):
    """
    A push-event connection owned outside the feed engine.

    Consumers subscribe a handler and receive every raw message; the returned
    callable removes only that handler.
    """

    def subscribe(self, handler: EventHandler) -> Unsubscribe:
        """Register a message handler and return its unsubscribe callable."""
        ...


class EventHub:
    """
    In-process fan-out of raw push messages to subscribed handlers.

    The owner of the upstream connection calls publish() for every message.
    A failing handler is logged and does not stop delivery to the others.
    """

    def __init__(self) -> None:
        self._handlers: list[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> Unsubscribe:
        self._handlers.append(handler)

        def _unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return _unsubscribe

    def publish(self, message: Any) -> int:
        """Deliver a raw message to every subscriber; return how many received it."""
        delivered = 0
        for handler in list(self._handlers):
            try:
                handler(message)
            except Exception:
                logger.exception("Event handler %r failed", handler)
                continue
            delivered += 1
        return delivered

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)
