"""Push-event relay endpoint."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from arena_feed.api.deps import get_feed_context
from arena_feed.api.schemas import EventRelayResponse
from arena_feed.app_context import FeedAppContext
from arena_feed.core.exceptions import ValidationError

router = APIRouter(prefix="/events", tags=["events"])


@router.post("", response_model=EventRelayResponse)
async def relay_event(
    payload: Any = Body(...),
    context: FeedAppContext = Depends(get_feed_context),
) -> EventRelayResponse:
    """Publish a raw push message to every subscriber of the event hub."""
    hub = context.event_hub
    if hub is None:
        raise ValidationError("Event relay is not available for this event stream")
    return EventRelayResponse(delivered=hub.publish(payload))
