"""Resume routes for the API."""

from __future__ import annotations

import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Annotated, Any, Literal

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Body,
    Depends,
    HTTPException,
    Query,
    Response,
    status,
)
from fastapi import Path as PathParam
from fastapi.responses import FileResponse

from resume_builder.api.dependencies import CurrentUserId, get_llm_service
from resume_builder.api.errors import to_http_exception
from resume_builder.api.schemas.resumes import JobAnalysisRequest, ResumePreviewResponse
from resume_builder.errors import ResumeBuilderError
from resume_builder.models import JobAnalysis, ResumeDocument
from resume_builder.services.ai_generation import analyze_job
from resume_builder.services.llm_service import LLMService
from resume_builder.services.resume_export import export_pdf, export_tex
from resume_builder.services.resume_store import (
    create_resume,
    delete_resume,
    duplicate_resume,
    get_resume,
    list_resumes,
    update_resume,
)
from resume_builder.templates import render

router = APIRouter(prefix="/resumes", tags=["resumes"])

ResumeId = Annotated[str, PathParam(description="Resume ID")]


def _get_or_404(resume_id: str, user_id: str) -> ResumeDocument:
    resume = get_resume(resume_id, user_id)
    if resume is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Resume not found",
        )
    return resume


@router.get("", response_model=list[ResumeDocument])
def list_resumes_endpoint(user_id: CurrentUserId) -> list[ResumeDocument]:
    """List the caller's resumes, most recently updated first."""
    return list_resumes(user_id)


@router.get("/{resume_id}", response_model=ResumeDocument)
def get_resume_endpoint(resume_id: ResumeId, user_id: CurrentUserId) -> ResumeDocument:
    return _get_or_404(resume_id, user_id)


@router.post("", response_model=ResumeDocument, status_code=status.HTTP_201_CREATED)
def create_resume_endpoint(
    fields: Annotated[dict[str, Any], Body(description="Resume fields; title is required")],
    user_id: CurrentUserId,
) -> ResumeDocument:
    """Create a resume. Fields not supplied take their defaults."""
    try:
        return create_resume(user_id, fields)
    except ResumeBuilderError as e:
        raise to_http_exception(e) from e


@router.patch("/{resume_id}", response_model=ResumeDocument)
def update_resume_endpoint(
    resume_id: ResumeId,
    fields: Annotated[dict[str, Any], Body(description="Fields to replace")],
    user_id: CurrentUserId,
) -> ResumeDocument:
    """Partial update. Each supplied top-level field replaces the stored value."""
    try:
        updated = update_resume(resume_id, user_id, fields)
    except ResumeBuilderError as e:
        raise to_http_exception(e) from e
    if updated is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Resume not found",
        )
    return updated


@router.delete("/{resume_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_resume_endpoint(resume_id: ResumeId, user_id: CurrentUserId) -> Response:
    delete_resume(resume_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{resume_id}/duplicate",
    response_model=ResumeDocument,
    status_code=status.HTTP_201_CREATED,
)
def duplicate_resume_endpoint(resume_id: ResumeId, user_id: CurrentUserId) -> ResumeDocument:
    duplicated = duplicate_resume(resume_id, user_id)
    if duplicated is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Resume not found",
        )
    return duplicated


@router.get("/{resume_id}/preview", response_model=ResumePreviewResponse)
def preview_resume_endpoint(
    resume_id: ResumeId,
    user_id: CurrentUserId,
    template: Annotated[
        str | None, Query(description="Template to render with; defaults to the resume's")
    ] = None,
) -> ResumePreviewResponse:
    """Render the resume tree for a template preview."""
    resume = _get_or_404(resume_id, user_id)
    return ResumePreviewResponse.model_validate(render(resume, template))


@router.get(
    "/{resume_id}/export",
    responses={
        200: {"content": {"application/x-tex": {}, "application/pdf": {}}},
    },
)
def export_resume_endpoint(
    resume_id: ResumeId,
    user_id: CurrentUserId,
    background_tasks: BackgroundTasks,
    export_format: Annotated[
        Literal["tex", "pdf"], Query(alias="format", description="Output format")
    ] = "tex",
    template: Annotated[str | None, Query(description="Template override")] = None,
) -> Response:
    """Export the resume as LaTeX source or a compiled PDF."""
    resume = _get_or_404(resume_id, user_id)
    filename = f"resume-{resume.id}"

    if export_format == "tex":
        return Response(
            content=export_tex(resume, template),
            media_type="application/x-tex",
            headers={"Content-Disposition": f'attachment; filename="{filename}.tex"'},
        )

    tmp_dir = tempfile.mkdtemp()
    try:
        pdf_path = export_pdf(resume, Path(tmp_dir) / filename, template)
    except FileNotFoundError:
        shutil.rmtree(tmp_dir, ignore_errors=True)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="LaTeX compiler not found. Please install pdflatex.",
        ) from None
    except subprocess.CalledProcessError:
        shutil.rmtree(tmp_dir, ignore_errors=True)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="LaTeX compilation failed. Check that all required packages are installed.",
        ) from None

    background_tasks.add_task(shutil.rmtree, tmp_dir, True)
    return FileResponse(
        path=str(pdf_path),
        media_type="application/pdf",
        filename=f"{filename}.pdf",
    )


@router.post("/{resume_id}/analyze-job", response_model=JobAnalysis)
def analyze_job_endpoint(
    resume_id: ResumeId,
    data: JobAnalysisRequest,
    user_id: CurrentUserId,
    llm: Annotated[LLMService | None, Depends(get_llm_service)],
) -> JobAnalysis:
    """Score the resume against a job description. Costs one AI credit."""
    try:
        return analyze_job(user_id, resume_id, data.job_description, llm=llm)
    except ResumeBuilderError as e:
        raise to_http_exception(e) from e
