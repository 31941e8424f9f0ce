"""Authenticated user routes for the API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from resume_builder.api.dependencies import CurrentUserId
from resume_builder.api.schemas.users import UserResponse
from resume_builder.services.users import get_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/user", response_model=UserResponse)
def get_current_user(user_id: CurrentUserId) -> UserResponse:
    """Return the caller's profile with AI and download credit balances."""
    user = get_user(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return UserResponse(**user)
