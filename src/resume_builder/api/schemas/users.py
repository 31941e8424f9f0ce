"""Pydantic schemas for user API responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class UserResponse(BaseModel):
    """Response schema for the signed-in user's profile and balances."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
    is_premium: bool = False
    ai_credits: int = 0
    download_credits: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
