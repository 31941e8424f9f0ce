"""Pydantic schemas for resume API endpoints.

Resume bodies themselves are :class:`ResumeDocument`; the schemas here
cover the rendered preview and the job analysis request.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelSchema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class LayoutStyleResponse(_CamelSchema):
    header_alignment: str
    heading_case: str
    accent: str | None = None
    font_family: str
    rule_under_headings: bool


class RenderedHeaderResponse(_CamelSchema):
    name: str
    contact: list[str] = []
    links: list[str] = []


class RenderedEntryResponse(_CamelSchema):
    item_id: str
    heading: str
    subheading: str = ""
    location: str | None = None
    dates: str = ""
    details: list[str] = []
    url: str | None = None


class RenderedSectionResponse(_CamelSchema):
    section: str
    title: str
    text: str | None = None
    entries: list[RenderedEntryResponse] = []


class ResumePreviewResponse(_CamelSchema):
    """Response schema for a rendered resume preview."""

    template: str
    style: LayoutStyleResponse
    header: RenderedHeaderResponse
    sections: list[RenderedSectionResponse] = []


class JobAnalysisRequest(_CamelSchema):
    """Request schema for matching a resume against a job posting."""

    job_description: str = Field(..., description="Full text of the job posting")
