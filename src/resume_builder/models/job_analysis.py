"""Result of matching a resume against a job description."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

__all__ = ["JobAnalysis"]


class JobAnalysis(BaseModel):
    """Structured job-match analysis produced by the LLM."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    match_score: int = Field(0, ge=0, le=100)
    overall_assessment: str = ""
    strengths: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    skills_gap: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    ats_optimization: list[str] = Field(default_factory=list)

    @field_validator("match_score", mode="before")
    @classmethod
    def _clamp_score(cls, value: Any) -> Any:
        if value is None:
            return 0
        try:
            score = round(float(value))
        except (TypeError, ValueError, OverflowError):
            return value
        return max(0, min(100, score))

    @field_validator(
        "strengths",
        "missing_keywords",
        "skills_gap",
        "recommendations",
        "ats_optimization",
        mode="before",
    )
    @classmethod
    def _list_of_strings(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value
