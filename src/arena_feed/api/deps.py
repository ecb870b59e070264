"""Dependency injection for FastAPI."""

from fastapi import Request

from arena_feed.app_context import FeedAppContext
from arena_feed.services import FeedEngine, RefreshScheduler


def get_feed_context(request: Request) -> FeedAppContext:
    """Provide the application context started by the lifespan handler."""
    return request.app.state.feed_context


def get_engine(request: Request) -> FeedEngine:
    """Provide the FeedEngine instance."""
    return get_feed_context(request).engine


def get_scheduler(request: Request) -> RefreshScheduler:
    """Provide the RefreshScheduler instance."""
    return get_feed_context(request).scheduler
