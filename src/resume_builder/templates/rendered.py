"""Renderable tree produced by the template projection.

All nodes are frozen dataclasses holding tuples, so two renders of the same
resume compare equal and nothing downstream can mutate a render in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from resume_builder.models import SectionId, TemplateId

__all__ = [
    "LayoutStyle",
    "RenderedEntry",
    "RenderedHeader",
    "RenderedResume",
    "RenderedSection",
]


@dataclass(frozen=True, slots=True)
class LayoutStyle:
    """Presentation hints a front end or exporter applies to the tree.

    Attributes:
        header_alignment: ``"center"`` or ``"left"``.
        heading_case: ``"upper"`` or ``"title"`` for section headings.
        accent: Named accent colour, or None for monochrome.
        font_family: ``"serif"`` or ``"sans"``.
        rule_under_headings: Draw a horizontal rule below section headings.
    """

    header_alignment: str = "center"
    heading_case: str = "upper"
    accent: str | None = None
    font_family: str = "serif"
    rule_under_headings: bool = True


@dataclass(frozen=True, slots=True)
class RenderedHeader:
    name: str
    contact: tuple[str, ...] = ()
    links: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class RenderedEntry:
    """One item of a section, with empty optional fields already dropped.

    Attributes:
        item_id: Id of the source section item.
        heading: Primary line (position, institution, project name, ...).
        subheading: Secondary line (company, degree, issuer, proficiency).
        location: Location text, or None when blank.
        dates: Formatted date or date range, empty when there is none.
        details: Body lines (description lines, GPA, technologies).
        url: Link for the entry, or None when blank.
    """

    item_id: str
    heading: str
    subheading: str = ""
    location: str | None = None
    dates: str = ""
    details: tuple[str, ...] = ()
    url: str | None = None


@dataclass(frozen=True, slots=True)
class RenderedSection:
    section: SectionId
    title: str
    text: str | None = None
    entries: tuple[RenderedEntry, ...] = ()


@dataclass(frozen=True, slots=True)
class RenderedResume:
    template: TemplateId
    style: LayoutStyle
    header: RenderedHeader
    sections: tuple[RenderedSection, ...] = field(default_factory=tuple)

    def section_ids(self) -> list[SectionId]:
        return [s.section for s in self.sections]
