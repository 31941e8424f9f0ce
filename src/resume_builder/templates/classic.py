"""Classic resume layout.

Centered header, upper-case section headings with a rule underneath,
serif body. The summary section is titled "Professional Summary".
"""

from __future__ import annotations

from resume_builder.models import SectionId, TemplateId
from resume_builder.templates.base import ResumeLayout
from resume_builder.templates.rendered import LayoutStyle

__all__ = ["ClassicLayout"]

_STYLE = LayoutStyle(
    header_alignment="center",
    heading_case="upper",
    accent=None,
    font_family="serif",
    rule_under_headings=True,
)


class ClassicLayout(ResumeLayout):
    """Traditional single-column format."""

    @property
    def template_id(self) -> TemplateId:
        return TemplateId.CLASSIC

    @property
    def name(self) -> str:  # pragma: no cover
        return "Classic"

    @property
    def style(self) -> LayoutStyle:
        return _STYLE

    def section_title(self, section: SectionId) -> str:
        if section is SectionId.SUMMARY:
            return "Professional Summary"
        return super().section_title(section)
