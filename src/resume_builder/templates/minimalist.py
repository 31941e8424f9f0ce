"""Minimalist resume layout.

Small, widely tracked upper-case headings in grey; no accent colour and
no rules.
"""

from __future__ import annotations

from resume_builder.models import TemplateId
from resume_builder.templates.base import ResumeLayout
from resume_builder.templates.rendered import LayoutStyle

__all__ = ["MinimalistLayout"]

_STYLE = LayoutStyle(
    header_alignment="left",
    heading_case="upper",
    accent="gray",
    font_family="sans",
    rule_under_headings=False,
)


class MinimalistLayout(ResumeLayout):
    """Simple and elegant."""

    @property
    def template_id(self) -> TemplateId:
        return TemplateId.MINIMALIST

    @property
    def name(self) -> str:  # pragma: no cover
        return "Minimalist"

    @property
    def style(self) -> LayoutStyle:
        return _STYLE
