from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from resume_builder.data.db import Base

if TYPE_CHECKING:
    from resume_builder.data.models.user import User


def _new_id() -> str:
    return str(uuid.uuid4())


class Resume(Base):
    """
    A single resume document owned by one user.

    Section contents are embedded JSON arrays, so a resume is always read
    and written as one row.
    """

    __tablename__ = "resumes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    template: Mapped[str] = mapped_column(String(50), nullable=False, default="classic")

    # Personal information
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column("resume_email", String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    linkedin: Mapped[str | None] = mapped_column(String(255), nullable=True)
    github: Mapped[str | None] = mapped_column(String(255), nullable=True)

    summary: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Sections
    experience: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    education: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    skills: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    projects: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    certifications: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    achievements: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    languages: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    interests: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    # Section visibility
    show_summary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    show_experience: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    show_education: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    show_skills: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    show_projects: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    show_certifications: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    show_achievements: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    show_languages: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    show_interests: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    section_order: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    # Relationships
    user: Mapped[User] = relationship("User", back_populates="resumes")
