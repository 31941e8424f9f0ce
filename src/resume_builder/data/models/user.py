"""User account model.

Identity comes from the external session provider; this table only keeps
the attributes the application needs plus the credit balances that gate
AI generation and resume downloads.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from resume_builder.data.db import Base

if TYPE_CHECKING:
    from resume_builder.data.models.payment import Payment
    from resume_builder.data.models.resume import Resume

DEFAULT_AI_CREDITS = 3


class User(Base):
    """Application user.

    Attributes:
        id: Stable identifier issued by the identity provider.
        email: Contact email, unique when present.
        first_name: Given name.
        last_name: Family name.
        profile_image_url: Avatar URL from the identity provider.
        is_premium: Premium users are never charged AI credits.
        ai_credits: Remaining AI generations for non-premium users.
        download_credits: Remaining resume exports.
        created_at: UTC timestamp when the user was first seen.
        updated_at: UTC timestamp of the last change.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("ai_credits >= 0", name="ck_users_ai_credits_non_negative"),
        CheckConstraint("download_credits >= 0", name="ck_users_download_credits_non_negative"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    first_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    profile_image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    is_premium: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    ai_credits: Mapped[int] = mapped_column(Integer, nullable=False, default=DEFAULT_AI_CREDITS)
    download_credits: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    resumes: Mapped[list[Resume]] = relationship(
        "Resume", back_populates="user", cascade="all, delete-orphan"
    )
    payments: Mapped[list[Payment]] = relationship(
        "Payment", back_populates="user", cascade="all, delete-orphan"
    )
