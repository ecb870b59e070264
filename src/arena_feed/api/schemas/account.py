"""Pydantic schemas for account endpoints."""

from typing import Optional

from pydantic import BaseModel


class AccountOptionResponse(BaseModel):
    """Response schema for an account selector option."""

    account_id: int
    name: str
    model: Optional[str] = None


class AccountListResponse(BaseModel):
    """Response schema for account listing."""

    accounts: list[AccountOptionResponse]
    count: int
