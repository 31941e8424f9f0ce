"""Pydantic schemas for AI generation endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SummaryContextSchema(_CamelSchema):
    full_name: str | None = None
    experience: Any = None
    skills: Any = None


class BulletsContextSchema(_CamelSchema):
    position: str | None = None
    company: str | None = None
    current_description: str | None = None


class GenerateSummaryRequest(_CamelSchema):
    """Request schema for drafting a professional summary.

    When ``resume_id`` is set the summary is also saved on that resume.
    """

    context: SummaryContextSchema = Field(default_factory=SummaryContextSchema)
    resume_id: str | None = Field(None, description="Resume to store the summary on")


class GenerateBulletsRequest(_CamelSchema):
    """Request schema for drafting experience bullet points."""

    context: BulletsContextSchema = Field(default_factory=BulletsContextSchema)
    resume_id: str | None = Field(None, description="Resume holding the experience item")
    experience_id: str | None = Field(None, description="Experience item to update")


class GenerateSummaryResponse(BaseModel):
    summary: str


class GenerateBulletsResponse(BaseModel):
    bullets: str
