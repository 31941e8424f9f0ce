"""Resume export service.

Turns a rendered resume tree into a PyLaTeX ``Document`` so the same
content the preview shows can be downloaded as ``.tex`` source or compiled
to PDF.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import TYPE_CHECKING

from pylatex import Document, NoEscape, Package

from resume_builder.templates import render

if TYPE_CHECKING:
    from resume_builder.models import ResumeDocument
    from resume_builder.templates import (
        LayoutStyle,
        RenderedEntry,
        RenderedHeader,
        RenderedResume,
        RenderedSection,
    )

__all__ = [
    "build_latex",
    "escape_latex",
    "escape_url",
    "export_pdf",
    "export_tex",
]

# Characters that have special meaning in LaTeX.
_LATEX_SPECIAL = re.compile(r"[&%$#_{}~^\\]")
_LATEX_REPLACEMENTS = {
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
    "\\": r"\textbackslash{}",
}
_PROTOCOL = re.compile(r"^https?://")
# Percent-encoded inside \href targets; what remains only needs % and # escaped.
_URL_UNSAFE = re.compile(r"[{}\\\s^~`<>|\"]")

_ACCENT_RGB = {
    "blue": "37,99,235",
    "gray": "107,114,128",
}

_PACKAGES: list[Package] = [
    Package("latexsym"),
    Package("fullpage", options=NoEscape("empty")),
    Package("titlesec"),
    Package("enumitem"),
    Package("hyperref", options=NoEscape("hidelinks")),
    Package("fontenc", options=NoEscape("T1")),
    Package("xcolor"),
    Package("tabularx"),
]

_PREAMBLE_SETUP = r"""
\pagestyle{empty}
\urlstyle{same}
\raggedbottom
\raggedright
\setlength{\tabcolsep}{0in}
\setlength{\parindent}{0pt}
\pdfgentounicode=1
"""

_CUSTOM_COMMANDS = r"""
\newcommand{\resumeEntry}[4]{
  \vspace{-2pt}\item
    \begin{tabular*}{0.97\textwidth}[t]{l@{\extracolsep{\fill}}r}
      \textbf{#1} & #2 \\
      \textit{\small#3} & \textit{\small #4} \\
    \end{tabular*}\vspace{-7pt}
}
\newcommand{\resumeDetail}[1]{\item\small{#1}}
\newcommand{\resumeListStart}{\begin{itemize}[leftmargin=0.15in, label={}]}
\newcommand{\resumeListEnd}{\end{itemize}}
\newcommand{\resumeDetailStart}{\begin{itemize}[leftmargin=0.15in]}
\newcommand{\resumeDetailEnd}{\end{itemize}\vspace{-5pt}}
"""


def escape_latex(text: str) -> str:
    r"""Escape LaTeX special characters in *text*.

    Handles: ``& % $ # _ { } ~ ^ \``
    """
    # Single pass, so replacement text is never escaped again.
    return _LATEX_SPECIAL.sub(lambda m: _LATEX_REPLACEMENTS[m.group()], text)


def escape_url(url: str) -> str:
    r"""Make *url* safe as the target argument of ``\href``.

    Braces, backslashes, whitespace and other characters that cannot appear
    raw in a URL are percent-encoded, then ``%`` and ``#`` are escaped so
    the target can sit inside another command's argument.
    """
    encoded = _URL_UNSAFE.sub(
        lambda m: "".join(f"%{byte:02X}" for byte in m.group().encode()), url
    )
    return encoded.replace("%", r"\%").replace("#", r"\#")


def _strip_protocol(url: str) -> str:
    return _PROTOCOL.sub("", url)


def _link(url: str) -> str:
    return rf"\href{{{escape_url(url)}}}{{{escape_latex(_strip_protocol(url))}}}"


def _style_preamble(style: LayoutStyle) -> str:
    lines: list[str] = []
    if style.font_family == "sans":
        lines.append(r"\renewcommand{\familydefault}{\sfdefault}")

    rgb = _ACCENT_RGB.get(style.accent or "")
    if rgb:
        lines.append(rf"\definecolor{{accent}}{{RGB}}{{{rgb}}}")
        colour = r"\color{accent}"
    else:
        colour = ""

    shape = r"\scshape" if style.heading_case == "upper" else ""
    rule = r"[\titlerule]" if style.rule_under_headings else ""
    lines.append(
        rf"\titleformat{{\section}}{{{colour}{shape}\large\bfseries}}{{}}{{0em}}{{}}{rule}"
    )
    lines.append(r"\titlespacing{\section}{0pt}{8pt}{4pt}")
    return "\n".join(lines)


def _create_document(style: LayoutStyle) -> Document:
    doc = Document(
        documentclass="article",
        document_options=["letterpaper", "11pt"],
        page_numbers=False,
        indent=False,
        lmodern=False,
        textcomp=False,
        microtype=False,
        fontenc=None,
        inputenc=None,
    )
    for pkg in _PACKAGES:
        doc.packages.append(pkg)
    doc.preamble.append(NoEscape(_PREAMBLE_SETUP))
    doc.preamble.append(NoEscape(_style_preamble(style)))
    doc.preamble.append(NoEscape(_CUSTOM_COMMANDS))
    return doc


def _heading(header: RenderedHeader, style: LayoutStyle) -> str:
    parts = [escape_latex(value) for value in header.contact]
    parts.extend(_link(link) for link in header.links)
    env = "center" if style.header_alignment == "center" else "flushleft"
    heading = rf"\begin{{{env}}}"
    heading += rf"{{\Huge\bfseries {escape_latex(header.name)}}}"
    if parts:
        heading += r" \\ \vspace{2pt}\small " + r" $|$ ".join(parts)
    heading += rf"\end{{{env}}}"
    return heading


def _entry(entry: RenderedEntry) -> list[str]:
    esc = escape_latex
    heading = esc(entry.heading)
    if entry.url:
        heading += rf" $|$ {_link(entry.url)}"
    lines = [
        rf"\resumeEntry{{{heading}}}{{{esc(entry.dates)}}}"
        rf"{{{esc(entry.subheading)}}}{{{esc(entry.location or '')}}}"
    ]
    if entry.details:
        lines.append(r"\resumeDetailStart")
        lines.extend(rf"\resumeDetail{{{esc(detail)}}}" for detail in entry.details)
        lines.append(r"\resumeDetailEnd")
    return lines


def _section(section: RenderedSection) -> str:
    lines = [rf"\section{{{escape_latex(section.title)}}}"]
    if section.text is not None:
        lines.append(rf"\small{{{escape_latex(section.text)}}}")
    if section.entries:
        lines.append(r"\resumeListStart")
        for entry in section.entries:
            lines.extend(_entry(entry))
        lines.append(r"\resumeListEnd")
    return "\n".join(lines)


def build_latex(rendered: RenderedResume) -> Document:
    """Construct a PyLaTeX ``Document`` from a rendered resume."""
    doc = _create_document(rendered.style)
    doc.append(NoEscape(_heading(rendered.header, rendered.style)))
    for section in rendered.sections:
        doc.append(NoEscape(_section(section)))
    return doc


def export_tex(resume: ResumeDocument, template_id: str | None = None) -> str:
    """Return the full ``.tex`` source for *resume*."""
    return build_latex(render(resume, template_id)).dumps()


def export_pdf(
    resume: ResumeDocument,
    output_path: Path,
    template_id: str | None = None,
    *,
    compiler: str = "pdflatex",
) -> Path:
    """Compile *resume* to PDF.

    Requires *compiler* (``pdflatex`` or ``latexmk``) to be installed.

    Args:
        resume: Resume to export.
        output_path: Desired output file path **without** extension.
        template_id: Layout to use; defaults to the resume's own template.
        compiler: LaTeX compiler to invoke.

    Returns:
        The ``Path`` of the generated ``.pdf``.
    """
    doc = build_latex(render(resume, template_id))
    # PyLaTeX appends .pdf/.tex automatically
    doc.generate_pdf(str(output_path), clean_tex=False, compiler=compiler)
    return Path(f"{output_path}.pdf")
