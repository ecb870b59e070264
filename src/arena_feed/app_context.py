"""Application context owning the feed components and their lifecycle.

The entry cache, source, engine, ingestor and scheduler are created by
start() and released by close(); nothing reaches them through module globals
except the optional process-wide context accessor at the bottom.
"""

import logging
from typing import Optional

from arena_feed.config.settings import Settings, get_settings
from arena_feed.domain.models import FeedStream, FilterContext
from arena_feed.providers import EventHub, EventStream, FeedSource, HttpFeedSource, StubFeedSource
from arena_feed.repositories.memory import InMemoryEntryCache
from arena_feed.services import EventIngestor, FeedAdapters, FeedEngine, RefreshScheduler

logger = logging.getLogger(__name__)


class FeedAppContext:
    """
    Application context wiring the feed reconciliation components.

    The push-event stream is injected when an outside owner holds the
    connection; otherwise the context owns an EventHub that relays messages
    published to it.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        source: Optional[FeedSource] = None,
        event_stream: Optional[EventStream] = None,
        initial_context: Optional[FilterContext] = None,
    ):
        """
        Initialize application context.

        Args:
            settings: Settings to use. Falls back to the global settings.
            source: Feed source. Built from settings if not provided.
            event_stream: Shared push-event stream. An owned EventHub if not provided.
            initial_context: Starting filter context. Built from settings if not provided.
        """
        self._settings = settings or get_settings()
        self._source = source
        self._owns_source = source is None
        self._event_stream = event_stream
        self._initial_context = initial_context
        self._started = False

        self._cache: Optional[InMemoryEntryCache] = None
        self._engine: Optional[FeedEngine] = None
        self._ingestor: Optional[EventIngestor] = None
        self._scheduler: Optional[RefreshScheduler] = None

    async def start(self) -> None:
        """Build the components, subscribe to events, start polling and do the first load."""
        if self._started:
            return
        settings = self._settings

        if self._source is None:
            self._source = self._build_source(settings)
        if self._event_stream is None:
            self._event_stream = EventHub()

        self._cache = InMemoryEntryCache(max_entries=settings.cache_max_entries)
        adapters = FeedAdapters(
            self._source,
            trade_limit=settings.trade_limit,
            decision_limit=settings.decision_limit,
        )
        self._engine = FeedEngine(
            adapters=adapters,
            cache=self._cache,
            context=self._initial_context or self.default_context(settings),
            trade_limit=settings.trade_limit,
            decision_limit=settings.decision_limit,
        )
        self._ingestor = EventIngestor(self._engine, self._event_stream)
        self._scheduler = RefreshScheduler(
            self._engine,
            poll_interval_seconds=settings.poll_interval_seconds,
        )

        self._ingestor.start()
        self._scheduler.start()
        self._started = True
        logger.info("Feed started for %s", self._engine.cache_key)

        await self._engine.load_account_options()
        await self._scheduler.activate_tab(FeedStream.TRADES)

    async def close(self) -> None:
        """Stop polling, unsubscribe from events and release the source."""
        if not self._started:
            return
        await self._scheduler.stop()
        self._ingestor.stop()
        if self._owns_source and isinstance(self._source, HttpFeedSource):
            await self._source.aclose()
        self._cache.clear()
        self._started = False
        logger.info("Feed stopped")

    @staticmethod
    def default_context(settings: Settings) -> FilterContext:
        return FilterContext(
            environment=settings.default_environment,
            account_selector=settings.default_account,
            wallet=settings.default_wallet,
        )

    @staticmethod
    def _build_source(settings: Settings) -> FeedSource:
        if settings.source_base_url:
            return HttpFeedSource(
                base_url=settings.source_base_url,
                timeout_seconds=settings.request_timeout_seconds,
            )
        logger.info("No source_base_url configured; using stub feed source")
        return StubFeedSource()

    @property
    def is_started(self) -> bool:
        return self._started

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def cache(self) -> InMemoryEntryCache:
        self._require_started()
        return self._cache

    @property
    def engine(self) -> FeedEngine:
        self._require_started()
        return self._engine

    @property
    def ingestor(self) -> EventIngestor:
        self._require_started()
        return self._ingestor

    @property
    def scheduler(self) -> RefreshScheduler:
        self._require_started()
        return self._scheduler

    @property
    def event_hub(self) -> Optional[EventHub]:
        """The event hub messages can be published to, or None for other stream types."""
        return self._event_stream if isinstance(self._event_stream, EventHub) else None

    def _require_started(self) -> None:
        if not self._started:
            raise RuntimeError("FeedAppContext is not started")


# Global application context (set by the API lifespan)
_app_context: Optional[FeedAppContext] = None


def get_app_context() -> Optional[FeedAppContext]:
    """Return the global application context, if one is set."""
    return _app_context


def set_app_context(context: Optional[FeedAppContext]) -> None:
    """Set the global application context."""
    global _app_context
    _app_context = context
