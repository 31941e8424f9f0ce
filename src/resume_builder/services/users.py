"""User service: first-seen upsert, profile lookup and credit balances.

Credit mutations are single conditional UPDATE statements so two racing
requests can never both spend the last credit or lose an increment.
"""

from __future__ import annotations

import logging
from typing import TypedDict

from sqlalchemy import update
from sqlalchemy.orm import Session

from resume_builder.data.db import get_session
from resume_builder.data.models import User

logger = logging.getLogger(__name__)

__all__ = [
    "UserData",
    "consume_ai_credit",
    "consume_download_credit",
    "ensure_user",
    "get_or_create_user",
    "get_user",
    "grant_download_credits",
    "refund_ai_credit",
    "set_premium",
]

_PROFILE_FIELDS = ("email", "first_name", "last_name", "profile_image_url")


class UserData(TypedDict, total=False):
    """Identity attributes supplied by the session provider."""

    email: str
    first_name: str
    last_name: str
    profile_image_url: str


def _user_to_dict(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "profile_image_url": user.profile_image_url,
        "is_premium": user.is_premium,
        "ai_credits": user.ai_credits,
        "download_credits": user.download_credits,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


def get_or_create_user(session: Session, user_id: str) -> User:
    """Return the user row for *user_id*, inserting a bare row if needed."""
    user = session.get(User, user_id)
    if user is None:
        user = User(id=user_id)
        session.add(user)
        session.flush()
        logger.info("Created user %s on first access", user_id)
    return user


def ensure_user(user_id: str, profile: UserData | None = None) -> dict:
    """Upsert the user identified by *user_id* and return it as a dict.

    Args:
        user_id: Stable id from the identity provider.
        profile: Optional identity attributes to store or refresh.
    """
    with get_session() as session:
        user = get_or_create_user(session, user_id)
        for field in _PROFILE_FIELDS:
            if profile and field in profile:
                setattr(user, field, profile[field])
        session.flush()
        return _user_to_dict(user)


def get_user(user_id: str) -> dict | None:
    """Return the user as a dict, or None if unknown."""
    with get_session() as session:
        user = session.get(User, user_id)
        if user is None:
            return None
        return _user_to_dict(user)


def set_premium(user_id: str, is_premium: bool) -> dict | None:
    with get_session() as session:
        user = session.get(User, user_id)
        if user is None:
            return None
        user.is_premium = is_premium
        session.flush()
        return _user_to_dict(user)


def consume_ai_credit(session: Session, user_id: str) -> bool:
    """Atomically take one AI credit.

    Returns:
        True if a credit was taken, False if the balance was already zero.
    """
    result = session.execute(
        update(User)
        .where(User.id == user_id, User.ai_credits > 0)
        .values(ai_credits=User.ai_credits - 1)
    )
    return result.rowcount == 1


def refund_ai_credit(session: Session, user_id: str) -> None:
    """Return one AI credit taken by :func:`consume_ai_credit`."""
    session.execute(
        update(User).where(User.id == user_id).values(ai_credits=User.ai_credits + 1)
    )


def consume_download_credit(session: Session, user_id: str) -> bool:
    """Atomically take one download credit; False when none are left."""
    result = session.execute(
        update(User)
        .where(User.id == user_id, User.download_credits > 0)
        .values(download_credits=User.download_credits - 1)
    )
    return result.rowcount == 1


def grant_download_credits(session: Session, user_id: str, credits: int) -> None:
    """Atomically add *credits* download credits to the user's balance."""
    if credits < 0:
        raise ValueError("credits must be non-negative")
    session.execute(
        update(User)
        .where(User.id == user_id)
        .values(download_credits=User.download_credits + credits)
    )
