from __future__ import annotations

# Prompt construction and response parsing for the AI writing features
import json
import re
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from resume_builder.models import JobAnalysis
from resume_builder.services.llm_providers import LLMError

__all__ = [
    "BULLETS_SYSTEM_RULES",
    "JOB_ANALYSIS_SYSTEM_RULES",
    "SUMMARY_SYSTEM_RULES",
    "build_bullets_prompt",
    "build_job_analysis_prompt",
    "build_summary_prompt",
    "format_bullets",
    "normalize_bullets",
    "parse_job_analysis",
]

_EXPERIENCE_SNIPPET_CHARS = 500
_SKILLS_SNIPPET_CHARS = 300
_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)

SUMMARY_SYSTEM_RULES = (
    "You are a professional resume writer. Generate a compelling professional summary "
    "(2-3 sentences). Write a concise, achievement-focused professional summary that "
    "highlights key strengths and career goals. Use action verbs and quantify achievements "
    "where possible. Keep it under 100 words. Return the summary text only."
)

BULLETS_SYSTEM_RULES = (
    "You are a professional resume writer. Generate 3-5 achievement-focused bullet points "
    "for this work experience. Create impactful bullet points that start with strong action "
    "verbs, include quantifiable achievements where possible (numbers, percentages, scale), "
    "highlight key responsibilities and impact, are concise and results-oriented, and use "
    'past tense for completed roles. Format each bullet point starting with "• " on a new line.'
)

JOB_ANALYSIS_SYSTEM_RULES = (
    "You are an expert recruiter and ATS specialist. Compare the resume with the job "
    "description and respond with a single JSON object and nothing else, using exactly these "
    'keys: "matchScore" (integer 0-100), "overallAssessment" (string), "strengths", '
    '"missingKeywords", "skillsGap", "recommendations", "atsOptimization" (each a list of '
    "short strings). Base the analysis only on the provided text."
)


def _snippet(value: Any, limit: int) -> str:
    text = value if isinstance(value, str) else json.dumps(value, default=str)
    return text[:limit]


def normalize_bullets(text: str) -> list[str]:
    lines = [ln.strip() for ln in text.splitlines()]
    out: list[str] = []
    for ln in lines:
        if not ln:
            continue
        for prefix in ("- ", "• ", "* ", "•", "-"):
            if ln.startswith(prefix):
                ln = ln[len(prefix) :].strip()
                break
        out.append(ln)
    return out


def format_bullets(bullets: list[str]) -> str:
    """Join bullets one per line, each prefixed with ``• ``."""
    return "\n".join(f"• {bullet}" for bullet in bullets)


def build_summary_prompt(context: Mapping[str, Any]) -> str:
    experience = context.get("experience")
    skills = context.get("skills")
    return (
        "Candidate information:\n\n"
        f"Name: {context.get('full_name') or 'Candidate'}\n"
        "Experience: "
        f"{_snippet(experience, _EXPERIENCE_SNIPPET_CHARS) if experience else 'Entry level'}\n"
        f"Skills: {_snippet(skills, _SKILLS_SNIPPET_CHARS) if skills else 'Various skills'}"
    )


def build_bullets_prompt(context: Mapping[str, Any]) -> str:
    return (
        "Work experience:\n\n"
        f"Position: {context.get('position') or ''}\n"
        f"Company: {context.get('company') or ''}\n"
        f"Current Description: {context.get('current_description') or ''}"
    )


def build_job_analysis_prompt(resume_text: str, job_description: str) -> str:
    return f"Resume:\n{resume_text}\n\nJob description:\n{job_description.strip()}"


def parse_job_analysis(text: str) -> JobAnalysis:
    """Parse the model's JSON answer into a :class:`JobAnalysis`.

    Markdown code fences around the JSON are tolerated.

    Raises:
        LLMError: If the answer is not a JSON object of the expected shape.
    """
    cleaned = _FENCE.sub("", text.strip())
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise LLMError(f"LLM returned invalid JSON for job analysis: {e}") from e
    if not isinstance(payload, dict):
        raise LLMError("LLM job analysis is not a JSON object")
    try:
        return JobAnalysis.model_validate(payload)
    except ValidationError as e:
        raise LLMError(f"LLM job analysis has an unexpected shape: {e}") from e
