"""Modern resume layout.

Left-aligned header on an accent band, title-case headings in the accent
colour, sans-serif body, no rules.
"""

from __future__ import annotations

from resume_builder.models import TemplateId
from resume_builder.templates.base import ResumeLayout
from resume_builder.templates.rendered import LayoutStyle

__all__ = ["ModernLayout"]

_STYLE = LayoutStyle(
    header_alignment="left",
    heading_case="title",
    accent="blue",
    font_family="sans",
    rule_under_headings=False,
)


class ModernLayout(ResumeLayout):
    """Contemporary design with a coloured header band."""

    @property
    def template_id(self) -> TemplateId:
        return TemplateId.MODERN

    @property
    def name(self) -> str:  # pragma: no cover
        return "Modern"

    @property
    def style(self) -> LayoutStyle:
        return _STYLE
