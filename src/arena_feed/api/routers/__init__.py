"""API routers package."""

from arena_feed.api.routers.feed import router as feed_router
from arena_feed.api.routers.accounts import router as accounts_router
from arena_feed.api.routers.events import router as events_router

__all__ = [
    "feed_router",
    "accounts_router",
    "events_router",
]
