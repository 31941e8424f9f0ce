"""Tests for LaTeX export of rendered resumes."""

from __future__ import annotations

import re
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from resume_builder.models import ResumeDocument
from resume_builder.services.resume_export import (
    build_latex,
    escape_latex,
    escape_url,
    export_pdf,
    export_tex,
)
from resume_builder.templates import render


def _resume(**overrides) -> ResumeDocument:
    data = {
        "title": "Export",
        "fullName": "Jane Doe",
        "email": "jane@test.com",
        "website": "https://jane.dev",
        "summary": "Ships fast.",
        "experience": [
            {
                "company": "R&D Labs",
                "position": "Engineer",
                "startDate": "2022-01",
                "current": True,
                "description": "Cut costs by 50%\nOwned the C# services",
            }
        ],
    }
    data.update(overrides)
    return ResumeDocument.model_validate(data)


class TestEscapeLatex:
    @pytest.mark.parametrize(
        ("raw", "escaped"),
        [
            ("A & B", r"A \& B"),
            ("50%", r"50\%"),
            ("$100", r"\$100"),
            ("#1", r"\#1"),
            ("snake_case", r"snake\_case"),
            ("{x}", r"\{x\}"),
            ("a~b", r"a\textasciitilde{}b"),
            ("x^2", r"x\textasciicircum{}2"),
            ("back\\slash", r"back\textbackslash{}slash"),
        ],
    )
    def test_special_characters(self, raw, escaped):
        assert escape_latex(raw) == escaped

    def test_plain_text_unchanged(self):
        assert escape_latex("Hello World") == "Hello World"


class TestEscapeUrl:
    @pytest.mark.parametrize(
        ("raw", "escaped"),
        [
            ("https://jane.dev", "https://jane.dev"),
            ("https://x.io/a%20b", r"https://x.io/a\%20b"),
            ("https://x.io/page#top", r"https://x.io/page\#top"),
            ("https://x.io/a b", r"https://x.io/a\%20b"),
            ("https://x.io/{x}", r"https://x.io/\%7Bx\%7D"),
            ("https://x.io/a\\b", r"https://x.io/a\%5Cb"),
        ],
    )
    def test_url_targets(self, raw, escaped):
        assert escape_url(raw) == escaped


class TestExportTex:
    def test_contains_content(self):
        tex = export_tex(_resume())

        assert r"\documentclass" in tex
        assert "Jane Doe" in tex
        assert "Professional Summary" in tex
        assert "Ships fast." in tex
        assert "Present" in tex

    def test_special_characters_escaped(self):
        tex = export_tex(_resume())

        assert r"R\&D Labs" in tex
        assert r"50\%" in tex
        assert r"C\# services" in tex

    def test_links_rendered_without_protocol(self):
        tex = export_tex(_resume())

        assert r"\href{https://jane.dev}{jane.dev}" in tex

    def test_link_cannot_break_out_of_href(self):
        tex = export_tex(_resume(website="https://x.io/}\\input{/etc/passwd}%"))

        assert r"\input{" not in tex
        assert r"\href{https://x.io/\%7D\%5Cinput\%7B/etc/passwd\%7D\%}" in tex
        assert r"\end{center}" in tex
        heading_line = next(line for line in tex.splitlines() if r"\end{center}" in line)
        assert not re.search(r"(?<!\\)%", heading_line.split(r"\end{center}")[0])

    def test_project_link_is_escaped(self):
        tex = export_tex(
            _resume(projects=[{"name": "Site", "url": "https://x.io/a b#c%20d"}])
        )

        assert r"\href{https://x.io/a\%20b\#c\%20d}" in tex

    def test_hidden_section_not_exported(self):
        tex = export_tex(_resume(showExperience=False))

        assert "R\\&D Labs" not in tex

    def test_template_override(self):
        classic = export_tex(_resume(), "classic")
        modern = export_tex(_resume(), "modern")

        assert r"\begin{center}" in classic
        assert r"\begin{flushleft}" in modern
        assert r"\sfdefault" in modern
        assert r"\definecolor{accent}" in modern
        assert r"\definecolor{accent}" not in classic

    def test_empty_resume_exports(self):
        tex = export_tex(ResumeDocument(title="Empty"))

        assert "Your Name" in tex
        assert r"\section" not in tex.split(r"\begin{document}")[1]

    def test_build_latex_from_rendered_tree(self):
        doc = build_latex(render(_resume(), "minimalist"))

        assert "Jane Doe" in doc.dumps()


class TestExportPdf:
    def test_export_pdf_invokes_compiler(self, tmp_path: Path):
        with patch("pylatex.Document.generate_pdf") as generate:
            result = export_pdf(_resume(), tmp_path / "resume")

        generate.assert_called_once()
        assert generate.call_args.kwargs["compiler"] == "pdflatex"
        assert result == tmp_path / "resume.pdf"

    def test_export_pdf_propagates_compiler_failure(self, tmp_path: Path):
        error = subprocess.CalledProcessError(1, "pdflatex")
        with (
            patch("pylatex.Document.generate_pdf", side_effect=error),
            pytest.raises(subprocess.CalledProcessError),
        ):
            export_pdf(_resume(), tmp_path / "resume")
