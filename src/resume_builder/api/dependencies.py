"""Shared dependencies for API routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from resume_builder.services.llm_service import LLMService
from resume_builder.services.payment_gateway import RazorpayGateway
from resume_builder.services.users import ensure_user


def get_current_user_id(
    x_user_id: Annotated[
        str | None,
        Header(
            description=(
                "Stable user id from the identity provider. In production, this "
                "should be extracted from the authenticated session."
            )
        ),
    ] = None,
) -> str:
    """Get the current user id from request context, creating the user on first access.

    Raises:
        HTTPException: If authentication is missing (401).
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authentication. Please provide X-User-Id header.",
        )
    user_id = x_user_id.strip()
    ensure_user(user_id)
    return user_id


CurrentUserId = Annotated[str, Depends(get_current_user_id)]


def get_llm_service() -> LLMService | None:
    """LLM service used by the AI routes.

    Returns None so the service picks its provider from the environment at
    call time; tests override this dependency with a fake provider.
    """
    return None


def get_payment_gateway() -> RazorpayGateway:
    """Gateway configured from ``RAZORPAY_KEY_ID`` / ``RAZORPAY_KEY_SECRET``.

    Raises:
        HTTPException: If the gateway has no credentials (503).
    """
    gateway = RazorpayGateway()
    if not gateway.configured:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Payment gateway not configured",
        )
    return gateway
