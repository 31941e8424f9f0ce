"""Abstract base class for pluggable resume layouts.

A layout decides presentation only (section titles, heading case, header
alignment, accent). Content selection is shared: every layout walks the
resume's declared section order, skips hidden or empty sections, and
formats each item the same way.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING

from resume_builder.models import (
    AchievementItem,
    CertificationItem,
    EducationItem,
    ExperienceItem,
    InterestItem,
    LanguageItem,
    ProjectItem,
    SectionId,
    SkillCategoryItem,
)
from resume_builder.templates.rendered import (
    LayoutStyle,
    RenderedEntry,
    RenderedHeader,
    RenderedResume,
    RenderedSection,
)

if TYPE_CHECKING:
    from resume_builder.models import ResumeDocument, SectionItem, TemplateId

__all__ = ["ResumeLayout"]

_MONTH_ABBR = [
    "",
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
]

PLACEHOLDER_NAME = "Your Name"

DEFAULT_SECTION_TITLES: dict[SectionId, str] = {
    SectionId.SUMMARY: "Summary",
    SectionId.EXPERIENCE: "Experience",
    SectionId.EDUCATION: "Education",
    SectionId.SKILLS: "Skills",
    SectionId.PROJECTS: "Projects",
    SectionId.CERTIFICATIONS: "Certifications",
    SectionId.ACHIEVEMENTS: "Achievements",
    SectionId.LANGUAGES: "Languages",
    SectionId.INTERESTS: "Interests",
}


def _clean(value: str | None) -> str | None:
    """Return *value* stripped, or None when it is empty."""
    if value is None:
        return None
    value = value.strip()
    return value or None


class ResumeLayout(ABC):
    """Interface that every resume layout must implement."""

    @property
    @abstractmethod
    def template_id(self) -> TemplateId:
        """Identifier the layout is registered under."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable layout name shown in the UI."""

    @property
    @abstractmethod
    def style(self) -> LayoutStyle:
        """Presentation hints attached to every render."""

    def section_title(self, section: SectionId) -> str:
        return DEFAULT_SECTION_TITLES[section]

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------

    def render(self, resume: ResumeDocument) -> RenderedResume:
        """Project *resume* into a renderable tree without modifying it."""
        sections: list[RenderedSection] = []
        for section in resume.effective_section_order():
            if not resume.is_visible(section):
                continue
            rendered = self._render_section(resume, section)
            if rendered is not None:
                sections.append(rendered)

        return RenderedResume(
            template=self.template_id,
            style=self.style,
            header=self._render_header(resume),
            sections=tuple(sections),
        )

    # ------------------------------------------------------------------
    # Shared helpers available to all layouts
    # ------------------------------------------------------------------

    @staticmethod
    def format_date(iso: str | None) -> str:
        """Format ``YYYY-MM`` (or ``YYYY-MM-DD``) as ``Mon YYYY``.

        A bare year is returned as is; anything unparseable is passed
        through unchanged.
        """
        if not iso or not iso.strip():
            return ""
        iso = iso.strip()
        parts = iso.split("-")
        if len(parts) >= 2 and parts[0].isdigit() and parts[1].isdigit():
            month = int(parts[1])
            if 1 <= month <= 12:
                return f"{_MONTH_ABBR[month]} {parts[0]}"
        return iso

    @classmethod
    def format_date_range(
        cls,
        start: str | None,
        end: str | None,
        is_current: bool = False,
    ) -> str:
        """Return a formatted date range like ``Jun 2023 - Sep 2023``.

        ``is_current`` renders ``Present`` as the end regardless of *end*.
        """
        start_str = cls.format_date(start)
        end_str = "Present" if is_current else cls.format_date(end)

        if start_str and end_str:
            return f"{start_str} - {end_str}"
        return start_str or end_str or ""

    # ------------------------------------------------------------------
    # internal helpers
    # ------------------------------------------------------------------

    def _render_header(self, resume: ResumeDocument) -> RenderedHeader:
        contact = (resume.email, resume.phone, resume.location)
        links = (resume.website, resume.linkedin, resume.github)
        return RenderedHeader(
            name=_clean(resume.full_name) or PLACEHOLDER_NAME,
            contact=tuple(v for v in map(_clean, contact) if v),
            links=tuple(v for v in map(_clean, links) if v),
        )

    def _render_section(
        self, resume: ResumeDocument, section: SectionId
    ) -> RenderedSection | None:
        title = self.section_title(section)

        if section is SectionId.SUMMARY:
            text = _clean(resume.summary)
            if text is None:
                return None
            return RenderedSection(section=section, title=title, text=text)

        items = resume.section_items(section)
        if not items:
            return None
        build = _ENTRY_BUILDERS[section]
        entries = tuple(build(self, item) for item in items)
        return RenderedSection(section=section, title=title, entries=entries)

    def _experience_entry(self, item: ExperienceItem) -> RenderedEntry:
        return RenderedEntry(
            item_id=item.id,
            heading=item.position,
            subheading=item.company,
            location=_clean(item.location),
            dates=self.format_date_range(item.start_date, item.end_date, item.current),
            details=_lines(item.description),
        )

    def _education_entry(self, item: EducationItem) -> RenderedEntry:
        degree = item.degree
        if _clean(item.field):
            degree = f"{degree} in {item.field.strip()}" if degree else item.field.strip()
        gpa = _clean(item.gpa)
        return RenderedEntry(
            item_id=item.id,
            heading=item.institution,
            subheading=degree,
            location=_clean(item.location),
            dates=self.format_date_range(item.start_date, item.end_date, item.current),
            details=(f"GPA: {gpa}",) if gpa else (),
        )

    def _skills_entry(self, item: SkillCategoryItem) -> RenderedEntry:
        skills = ", ".join(s.strip() for s in item.skills if s.strip())
        return RenderedEntry(
            item_id=item.id,
            heading=item.category,
            details=(skills,) if skills else (),
        )

    def _project_entry(self, item: ProjectItem) -> RenderedEntry:
        details = list(_lines(item.description))
        technologies = [t.strip() for t in item.technologies if t.strip()]
        if technologies:
            details.append("Technologies: " + ", ".join(technologies))
        return RenderedEntry(
            item_id=item.id,
            heading=item.name,
            dates=self.format_date_range(item.start_date, item.end_date),
            details=tuple(details),
            url=_clean(item.url),
        )

    def _certification_entry(self, item: CertificationItem) -> RenderedEntry:
        return RenderedEntry(
            item_id=item.id,
            heading=item.name,
            subheading=item.issuer,
            dates=self.format_date(item.date),
            url=_clean(item.url),
        )

    def _achievement_entry(self, item: AchievementItem) -> RenderedEntry:
        return RenderedEntry(
            item_id=item.id,
            heading=item.title,
            dates=self.format_date(item.date),
            details=_lines(item.description),
        )

    def _language_entry(self, item: LanguageItem) -> RenderedEntry:
        return RenderedEntry(
            item_id=item.id,
            heading=item.language,
            subheading=str(item.proficiency),
        )

    def _interest_entry(self, item: InterestItem) -> RenderedEntry:
        return RenderedEntry(item_id=item.id, heading=item.interest)


def _lines(text: str | None) -> tuple[str, ...]:
    if not text:
        return ()
    return tuple(line.strip() for line in text.splitlines() if line.strip())


_ENTRY_BUILDERS: dict[SectionId, Callable[[ResumeLayout, SectionItem], RenderedEntry]] = {
    SectionId.EXPERIENCE: ResumeLayout._experience_entry,
    SectionId.EDUCATION: ResumeLayout._education_entry,
    SectionId.SKILLS: ResumeLayout._skills_entry,
    SectionId.PROJECTS: ResumeLayout._project_entry,
    SectionId.CERTIFICATIONS: ResumeLayout._certification_entry,
    SectionId.ACHIEVEMENTS: ResumeLayout._achievement_entry,
    SectionId.LANGUAGES: ResumeLayout._language_entry,
    SectionId.INTERESTS: ResumeLayout._interest_entry,
}
