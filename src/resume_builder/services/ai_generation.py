"""AI writing features gated by AI credits.

One AI credit is reserved before the LLM is contacted and refunded if the
call fails or returns unusable output, so concurrent requests can never
spend more credits than the user holds. Premium users are never charged.
Generated text that targets a resume goes through the regular
partial-update path of the resume store.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any, TypedDict

from resume_builder.data.db import get_session
from resume_builder.data.models import User
from resume_builder.errors import (
    InsufficientCreditsError,
    ResumeNotFoundError,
    ResumeValidationError,
)
from resume_builder.models import JobAnalysis, ResumeDocument, update_item
from resume_builder.services import llm as prompts
from resume_builder.services.llm_providers import LLMError
from resume_builder.services.llm_service import LLMService
from resume_builder.services.resume_store import get_resume, update_resume
from resume_builder.services.users import consume_ai_credit, refund_ai_credit
from resume_builder.templates import RenderedResume, render

logger = logging.getLogger(__name__)

__all__ = [
    "BulletsContext",
    "SummaryContext",
    "analyze_job",
    "generate_bullets",
    "generate_summary",
    "resume_to_text",
]

INSUFFICIENT_AI_CREDITS = "Insufficient AI credits. Please upgrade to continue."


class SummaryContext(TypedDict, total=False):
    full_name: str
    experience: Any
    skills: Any


class BulletsContext(TypedDict, total=False):
    position: str
    company: str
    current_description: str


def _reserve_ai_credit(user_id: str) -> bool:
    """Take one AI credit up front; return whether the user is premium.

    Raises:
        ResumeNotFoundError: If the user is unknown.
        InsufficientCreditsError: If a non-premium user has no AI credits left.
    """
    with get_session() as session:
        user = session.get(User, user_id)
        if user is None:
            raise ResumeNotFoundError("User not found")
        if user.is_premium:
            return True
        if not consume_ai_credit(session, user_id):
            raise InsufficientCreditsError("ai", INSUFFICIENT_AI_CREDITS)
    return False


@contextmanager
def _ai_credit(user_id: str) -> Iterator[None]:
    """Hold one AI credit while the body runs; refund it if the body raises."""
    is_premium = _reserve_ai_credit(user_id)
    try:
        yield
    except Exception:
        if not is_premium:
            with get_session() as session:
                refund_ai_credit(session, user_id)
            logger.info("Refunded AI credit to %s after a failed generation", user_id)
        raise


def _complete(
    llm: LLMService | None,
    system_rules: str,
    user_content: str,
    *,
    max_tokens: int,
    temperature: float = 0.7,
) -> str:
    """Run one completion, normalising every failure to :class:`LLMError`."""
    try:
        service = llm or LLMService()
        text = service.generate_llm_response(
            system_instructions=system_rules,
            user_content=user_content,
            temperature=temperature,
            max_tokens=max_tokens,
        )
    except LLMError:
        raise
    except Exception as e:
        raise LLMError(f"LLM API call failed: {e}") from e

    text = (text or "").strip()
    if not text:
        raise LLMError("LLM returned an empty response")
    return text


def _owned_resume(resume_id: str, user_id: str) -> ResumeDocument:
    resume = get_resume(resume_id, user_id)
    if resume is None:
        raise ResumeNotFoundError("Resume not found")
    return resume


def generate_summary(
    user_id: str,
    context: Mapping[str, Any],
    *,
    resume_id: str | None = None,
    llm: LLMService | None = None,
) -> str:
    """Draft a professional summary.

    Args:
        user_id: Caller; charged one AI credit on success unless premium.
        context: ``full_name``, ``experience`` and ``skills`` hints.
        resume_id: When given, the summary is also saved on that resume.
        llm: LLM service to use; defaults to the provider from the environment.

    Returns:
        The generated summary text.
    """
    if resume_id is not None:
        _owned_resume(resume_id, user_id)

    with _ai_credit(user_id):
        summary = _complete(
            llm,
            prompts.SUMMARY_SYSTEM_RULES,
            prompts.build_summary_prompt(context),
            max_tokens=200,
        )

    if resume_id is not None:
        update_resume(resume_id, user_id, {"summary": summary})
    return summary


def generate_bullets(
    user_id: str,
    context: Mapping[str, Any],
    *,
    resume_id: str | None = None,
    experience_id: str | None = None,
    llm: LLMService | None = None,
) -> str:
    """Draft achievement bullets for one work experience.

    When *resume_id* and *experience_id* are given, missing context is taken
    from that experience item and the bullets replace its description.

    Returns:
        Bullet lines, each starting with ``• ``.
    """
    target: ResumeDocument | None = None
    merged_context = dict(context)
    if resume_id is not None and experience_id is not None:
        target = _owned_resume(resume_id, user_id)
        item = next((i for i in target.experience if i.id == experience_id), None)
        if item is None:
            raise ResumeNotFoundError("Experience item not found")
        merged_context.setdefault("position", item.position)
        merged_context.setdefault("company", item.company)
        merged_context.setdefault("current_description", item.description)

    with _ai_credit(user_id):
        text = _complete(
            llm,
            prompts.BULLETS_SYSTEM_RULES,
            prompts.build_bullets_prompt(merged_context),
            max_tokens=300,
        )
    bullets = prompts.format_bullets(prompts.normalize_bullets(text))

    if target is not None:
        experience = update_item(target.experience, experience_id, description=bullets)
        update_resume(
            target.id,
            user_id,
            {"experience": [entry.model_dump() for entry in experience]},
        )
    return bullets


def resume_to_text(rendered: RenderedResume) -> str:
    """Flatten a rendered resume into plain text for prompting."""
    lines = [rendered.header.name, *rendered.header.contact, *rendered.header.links]
    for section in rendered.sections:
        lines.append("")
        lines.append(section.title.upper())
        if section.text:
            lines.append(section.text)
        for entry in section.entries:
            parts = (entry.heading, entry.subheading, entry.location, entry.dates)
            head = " | ".join(part for part in parts if part)
            lines.append(head)
            lines.extend(f"- {detail}" for detail in entry.details)
    return "\n".join(lines)


def analyze_job(
    user_id: str,
    resume_id: str,
    job_description: str,
    *,
    llm: LLMService | None = None,
) -> JobAnalysis:
    """Score how well a resume matches *job_description*.

    Raises:
        ResumeValidationError: If the job description is blank.
        ResumeNotFoundError: If the resume does not exist for this user.
        InsufficientCreditsError: If the user has no AI credits left.
        LLMError: If the model call fails or its answer cannot be parsed.
    """
    if not job_description or not job_description.strip():
        raise ResumeValidationError("jobDescription is required")

    resume = _owned_resume(resume_id, user_id)
    prompt = prompts.build_job_analysis_prompt(resume_to_text(render(resume)), job_description)

    with _ai_credit(user_id):
        text = _complete(
            llm,
            prompts.JOB_ANALYSIS_SYSTEM_RULES,
            prompt,
            max_tokens=1500,
            temperature=0.3,
        )
        analysis = prompts.parse_job_analysis(text)

    logger.info("Job analysis for resume %s scored %d", resume_id, analysis.match_score)
    return analysis
