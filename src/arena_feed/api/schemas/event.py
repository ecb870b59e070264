"""Pydantic schemas for event relay endpoints."""

from pydantic import BaseModel


class EventRelayResponse(BaseModel):
    """Response schema for a relayed push event."""

    delivered: int
