"""Refresh triggers driving the feed engine."""

import asyncio
import logging
from typing import Callable, Optional

from arena_feed.domain.models import FeedStream, FilterContext
from arena_feed.services.feed_engine import FeedEngine

logger = logging.getLogger(__name__)

ContextListener = Callable[[FilterContext], None]


class RefreshScheduler:
    """
    Decides when the engine fetches.

    Triggers:
    - tab activation: lazy load of the visible stream if it has no data
    - background poll: all three streams every poll interval
    - manual refresh or a changed external refresh token: all three streams
    - filter-context change: switch the engine and reload all three streams

    A failed fetch is never retried before the next trigger.
    """

    def __init__(
        self,
        engine: FeedEngine,
        poll_interval_seconds: float = 60.0,
        refresh_token: Optional[int] = None,
    ):
        self._engine = engine
        self._poll_interval = poll_interval_seconds
        self._last_refresh_token = refresh_token
        self._active_stream = FeedStream.TRADES
        self._context_listeners: list[ContextListener] = []
        self._task: Optional[asyncio.Task] = None

    @property
    def active_stream(self) -> FeedStream:
        return self._active_stream

    @property
    def is_polling(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start background polling on the running event loop."""
        if self._poll_interval <= 0:
            logger.info("Background polling disabled")
            return
        if self.is_polling:
            return
        self._task = asyncio.get_running_loop().create_task(self._poll_loop())

    async def stop(self) -> None:
        """Stop background polling."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def activate_tab(self, stream: FeedStream) -> bool:
        """
        Lazy-load a stream when its tab becomes visible.

        Uses cached data when the cache has any; otherwise fetches only this
        stream. Returns True if the stream's data changed.
        """
        self._active_stream = stream
        if self._engine.is_loading(stream) or not self._engine.needs_load(stream):
            return False
        if self._engine.seed_from_cache([stream], require_items=True):
            return True
        return await self._engine.load(stream)

    async def request_refresh(self, refresh_token: Optional[int] = None) -> bool:
        """
        Force a reload of all three streams.

        Without a token the refresh always runs. With a token it runs only if
        the token differs from the last one observed.
        """
        if refresh_token is not None:
            if refresh_token == self._last_refresh_token:
                return False
            self._last_refresh_token = refresh_token
        await self._engine.refresh_all()
        return True

    async def apply_filter(self, context: FilterContext) -> bool:
        """Switch to a new filter context and reload everything. False if unchanged."""
        if context.cache_key == self._engine.cache_key:
            return False
        self._engine.switch_context(context)
        for listener in list(self._context_listeners):
            listener(context)
        await self._engine.refresh_all()
        return True

    def add_context_listener(self, listener: ContextListener) -> Callable[[], None]:
        """Register a callback for filter-context changes; returns its remover."""
        self._context_listeners.append(listener)

        def _remove() -> None:
            if listener in self._context_listeners:
                self._context_listeners.remove(listener)

        return _remove

    async def _poll_loop(self) -> None:
        while True:
            await asyncio.sleep(self._poll_interval)
            logger.debug("Background poll for %s", self._engine.cache_key)
            try:
                await self._engine.refresh_all()
            except Exception:
                logger.exception("Background poll failed")
