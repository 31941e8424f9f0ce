"""Typed in-memory shape of a resume document.

Every section item is its own pydantic model so the rendering projection
and the store never handle untyped dictionaries. The JSON wire format uses
camelCase aliases (``fullName``, ``startDate``, ``showSummary``) and
snake_case is accepted on input as well.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import datetime
from enum import StrEnum
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

__all__ = [
    "CANONICAL_SECTION_ORDER",
    "SECTION_ITEM_TYPES",
    "AchievementItem",
    "CertificationItem",
    "EducationItem",
    "ExperienceItem",
    "InterestItem",
    "LanguageItem",
    "Proficiency",
    "ProjectItem",
    "ResumeDocument",
    "SectionId",
    "SectionItem",
    "SkillCategoryItem",
    "TemplateId",
    "add_item",
    "move_item",
    "new_item_id",
    "remove_item",
    "update_item",
    "visibility_field",
]


class SectionId(StrEnum):
    """Identifiers of the nine resume sections, in canonical order."""

    SUMMARY = "summary"
    EXPERIENCE = "experience"
    EDUCATION = "education"
    SKILLS = "skills"
    PROJECTS = "projects"
    CERTIFICATIONS = "certifications"
    ACHIEVEMENTS = "achievements"
    LANGUAGES = "languages"
    INTERESTS = "interests"


CANONICAL_SECTION_ORDER: tuple[SectionId, ...] = tuple(SectionId)


class TemplateId(StrEnum):
    """Visual templates a resume can be rendered with."""

    CLASSIC = "classic"
    MODERN = "modern"
    MINIMALIST = "minimalist"


class Proficiency(StrEnum):
    NATIVE = "Native"
    FLUENT = "Fluent"
    PROFESSIONAL = "Professional"
    INTERMEDIATE = "Intermediate"
    BASIC = "Basic"


def new_item_id() -> str:
    """Return a fresh identifier for a section item."""
    return uuid.uuid4().hex


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# ---------------------------------------------------------------------------
# Section items
# ---------------------------------------------------------------------------


class SectionItem(_CamelModel):
    """Common base: every item owns a stable id used as its update/remove key."""

    id: str = Field(default_factory=new_item_id)

    @field_validator("id", mode="before")
    @classmethod
    def _fill_blank_id(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return new_item_id()
        return value


class _DatedItem(SectionItem):
    start_date: str = ""
    end_date: str | None = None
    current: bool = False

    @model_validator(mode="after")
    def _clear_end_date_when_current(self) -> _DatedItem:
        if self.current:
            self.end_date = None
        return self


class ExperienceItem(_DatedItem):
    company: str = ""
    position: str = ""
    location: str | None = None
    description: str = ""


class EducationItem(_DatedItem):
    institution: str = ""
    degree: str = ""
    field: str = ""
    location: str | None = None
    gpa: str | None = None


class SkillCategoryItem(SectionItem):
    category: str = ""
    skills: list[str] = Field(default_factory=list)


class ProjectItem(SectionItem):
    name: str = ""
    description: str = ""
    technologies: list[str] = Field(default_factory=list)
    url: str | None = None
    start_date: str | None = None
    end_date: str | None = None

    @field_validator("technologies", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class CertificationItem(SectionItem):
    name: str = ""
    issuer: str = ""
    date: str = ""
    url: str | None = None


class AchievementItem(SectionItem):
    title: str = ""
    description: str = ""
    date: str | None = None


class LanguageItem(SectionItem):
    language: str = ""
    proficiency: Proficiency = Proficiency.PROFESSIONAL


class InterestItem(SectionItem):
    interest: str = ""


SECTION_ITEM_TYPES: dict[SectionId, type[SectionItem]] = {
    SectionId.EXPERIENCE: ExperienceItem,
    SectionId.EDUCATION: EducationItem,
    SectionId.SKILLS: SkillCategoryItem,
    SectionId.PROJECTS: ProjectItem,
    SectionId.CERTIFICATIONS: CertificationItem,
    SectionId.ACHIEVEMENTS: AchievementItem,
    SectionId.LANGUAGES: LanguageItem,
    SectionId.INTERESTS: InterestItem,
}


def visibility_field(section: SectionId | str) -> str:
    """Return the name of the show-flag attribute for *section*."""
    return f"show_{SectionId(section).value}"


# ---------------------------------------------------------------------------
# Resume document
# ---------------------------------------------------------------------------


class ResumeDocument(_CamelModel):
    """A complete resume: metadata, contact fields, sections and presentation."""

    id: str | None = None
    user_id: str | None = None
    title: str = Field(..., min_length=1, max_length=255)
    template: TemplateId = TemplateId.CLASSIC
    created_at: datetime | None = None
    updated_at: datetime | None = None

    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    location: str | None = None
    website: str | None = None
    linkedin: str | None = None
    github: str | None = None

    summary: str | None = None

    experience: list[ExperienceItem] = Field(default_factory=list)
    education: list[EducationItem] = Field(default_factory=list)
    skills: list[SkillCategoryItem] = Field(default_factory=list)
    projects: list[ProjectItem] = Field(default_factory=list)
    certifications: list[CertificationItem] = Field(default_factory=list)
    achievements: list[AchievementItem] = Field(default_factory=list)
    languages: list[LanguageItem] = Field(default_factory=list)
    interests: list[InterestItem] = Field(default_factory=list)

    show_summary: bool = True
    show_experience: bool = True
    show_education: bool = True
    show_skills: bool = True
    show_projects: bool = True
    show_certifications: bool = True
    show_achievements: bool = True
    show_languages: bool = True
    show_interests: bool = True

    section_order: list[SectionId] = Field(
        default_factory=lambda: list(CANONICAL_SECTION_ORDER)
    )

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be blank")
        return value

    @field_validator(
        "experience",
        "education",
        "skills",
        "projects",
        "certifications",
        "achievements",
        "languages",
        "interests",
        mode="before",
    )
    @classmethod
    def _sections_never_null(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("section_order", mode="before")
    @classmethod
    def _default_order_when_null(cls, value: Any) -> Any:
        return list(CANONICAL_SECTION_ORDER) if value is None else value

    @field_validator("section_order")
    @classmethod
    def _no_duplicate_sections(cls, value: list[SectionId]) -> list[SectionId]:
        if len(set(value)) != len(value):
            raise ValueError("section_order must not contain duplicates")
        return value

    def is_visible(self, section: SectionId | str) -> bool:
        return bool(getattr(self, visibility_field(section)))

    def section_items(self, section: SectionId | str) -> list[SectionItem]:
        """Return the item list of a list-valued section."""
        section = SectionId(section)
        if section is SectionId.SUMMARY:
            raise ValueError("summary is a text section and has no items")
        return getattr(self, section.value)

    def effective_section_order(self) -> list[SectionId]:
        """Declared order followed by any section it leaves out, canonically."""
        order = list(dict.fromkeys(self.section_order))
        order.extend(s for s in CANONICAL_SECTION_ORDER if s not in order)
        return order


# ---------------------------------------------------------------------------
# Id-keyed item helpers
#
# These return new lists; the caller sends the whole list back through the
# partial-update path, which replaces the stored section wholesale.
# ---------------------------------------------------------------------------

ItemT = TypeVar("ItemT", bound=SectionItem)


def _index_of(items: Sequence[SectionItem], item_id: str) -> int:
    for index, item in enumerate(items):
        if item.id == item_id:
            return index
    raise KeyError(item_id)


def add_item(items: Sequence[ItemT], item: ItemT) -> list[ItemT]:
    """Append *item*; its id must not already be present."""
    if any(existing.id == item.id for existing in items):
        raise ValueError(f"Duplicate item id {item.id!r}")
    return [*items, item]


def update_item(items: Sequence[ItemT], item_id: str, **changes: Any) -> list[ItemT]:
    """Return a copy of *items* where the item with *item_id* has *changes* applied.

    Raises:
        KeyError: If no item has that id.
    """
    index = _index_of(items, item_id)
    current = items[index]
    merged = {**current.model_dump(), **changes, "id": current.id}
    updated = type(current).model_validate(merged)
    return [*items[:index], updated, *items[index + 1 :]]


def remove_item(items: Sequence[ItemT], item_id: str) -> list[ItemT]:
    """Return *items* without the item whose id is *item_id* (no-op if absent)."""
    return [item for item in items if item.id != item_id]


def move_item(items: Sequence[ItemT], item_id: str, new_index: int) -> list[ItemT]:
    """Move the item with *item_id* to *new_index* (clamped to the list bounds)."""
    index = _index_of(items, item_id)
    remaining = [*items[:index], *items[index + 1 :]]
    new_index = max(0, min(new_index, len(remaining)))
    return [*remaining[:new_index], items[index], *remaining[new_index:]]
