"""Layout registry and the rendering projection entry point."""

from __future__ import annotations

from typing import TYPE_CHECKING

from resume_builder.models import TemplateId
from resume_builder.templates.base import ResumeLayout
from resume_builder.templates.classic import ClassicLayout
from resume_builder.templates.minimalist import MinimalistLayout
from resume_builder.templates.modern import ModernLayout
from resume_builder.templates.rendered import (
    LayoutStyle,
    RenderedEntry,
    RenderedHeader,
    RenderedResume,
    RenderedSection,
)

if TYPE_CHECKING:
    from resume_builder.models import ResumeDocument

__all__ = [
    "LayoutStyle",
    "RenderedEntry",
    "RenderedHeader",
    "RenderedResume",
    "RenderedSection",
    "ResumeLayout",
    "get_layout",
    "list_templates",
    "render",
]

_REGISTRY: dict[str, ResumeLayout] = {
    TemplateId.CLASSIC.value: ClassicLayout(),
    TemplateId.MODERN.value: ModernLayout(),
    TemplateId.MINIMALIST.value: MinimalistLayout(),
}


def get_layout(template_id: str | None) -> ResumeLayout:
    """Return the layout registered under *template_id*.

    Unknown or missing identifiers fall back to the classic layout.
    """
    return _REGISTRY.get(str(template_id or ""), _REGISTRY[TemplateId.CLASSIC.value])


def list_templates() -> list[str]:
    """Return names of all registered templates, in declaration order."""
    return list(_REGISTRY)


def render(resume: ResumeDocument, template_id: str | None = None) -> RenderedResume:
    """Render *resume* with *template_id*, defaulting to the resume's own template."""
    return get_layout(template_id or resume.template).render(resume)
