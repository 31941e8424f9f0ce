"""AI generation routes for the API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from resume_builder.api.dependencies import CurrentUserId, get_llm_service
from resume_builder.api.errors import to_http_exception
from resume_builder.api.schemas.ai import (
    GenerateBulletsRequest,
    GenerateBulletsResponse,
    GenerateSummaryRequest,
    GenerateSummaryResponse,
)
from resume_builder.errors import ResumeBuilderError
from resume_builder.services.ai_generation import generate_bullets, generate_summary
from resume_builder.services.llm_service import LLMService

router = APIRouter(prefix="/ai", tags=["ai"])

LLMDependency = Annotated[LLMService | None, Depends(get_llm_service)]


@router.post("/generate-summary", response_model=GenerateSummaryResponse)
def generate_summary_endpoint(
    data: GenerateSummaryRequest,
    user_id: CurrentUserId,
    llm: LLMDependency,
) -> GenerateSummaryResponse:
    """Draft a professional summary. Costs one AI credit unless premium."""
    try:
        summary = generate_summary(
            user_id,
            data.context.model_dump(exclude_none=True),
            resume_id=data.resume_id,
            llm=llm,
        )
    except ResumeBuilderError as e:
        raise to_http_exception(e) from e
    return GenerateSummaryResponse(summary=summary)


@router.post("/generate-bullets", response_model=GenerateBulletsResponse)
def generate_bullets_endpoint(
    data: GenerateBulletsRequest,
    user_id: CurrentUserId,
    llm: LLMDependency,
) -> GenerateBulletsResponse:
    """Draft 3-5 bullet points for a work experience. Costs one AI credit unless premium."""
    try:
        bullets = generate_bullets(
            user_id,
            data.context.model_dump(exclude_none=True),
            resume_id=data.resume_id,
            experience_id=data.experience_id,
            llm=llm,
        )
    except ResumeBuilderError as e:
        raise to_http_exception(e) from e
    return GenerateBulletsResponse(bullets=bullets)
