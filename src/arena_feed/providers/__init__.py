"""Feed sources and push-event stream providers."""

from arena_feed.providers.feed_source import (
    FeedSource,
    TradesPage,
    DecisionsPage,
    PositionsPage,
)
from arena_feed.providers.http_source import HttpFeedSource
from arena_feed.providers.stub_source import StubFeedSource
from arena_feed.providers.event_stream import EventStream, EventHub
from arena_feed.providers.event_codec import decode_event

__all__ = [
    "FeedSource",
    "TradesPage",
    "DecisionsPage",
    "PositionsPage",
    "HttpFeedSource",
    "StubFeedSource",
    "EventStream",
    "EventHub",
    "decode_event",
]
