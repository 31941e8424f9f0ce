"""Tests for credit-gated AI generation."""

from __future__ import annotations

import json

import pytest

from resume_builder.errors import (
    ExternalServiceError,
    InsufficientCreditsError,
    ResumeNotFoundError,
    ResumeValidationError,
)
from resume_builder.services.ai_generation import (
    analyze_job,
    generate_bullets,
    generate_summary,
    resume_to_text,
)
from resume_builder.services.llm_providers import LLMError, LLMProvider
from resume_builder.services.llm_service import LLMService
from resume_builder.services.resume_store import create_resume, get_resume
from resume_builder.services.users import ensure_user, get_user, set_premium
from resume_builder.templates import render

USER = "ai-user"


class MockProvider(LLMProvider):
    def __init__(self, response: str = "Mock LLM response", error: Exception | None = None):
        self.response = response
        self.error = error
        self.prompts: list[str] = []
        self.configs: list[dict] = []

    def send_prompt(self, prompt: str, config: dict) -> str:
        self.prompts.append(prompt)
        self.configs.append(config)
        if self.error is not None:
            raise self.error
        return self.response


def _llm(response: str = "Mock LLM response", error: Exception | None = None):
    provider = MockProvider(response, error)
    return LLMService(provider=provider), provider


@pytest.fixture
def user(tmp_db):
    return ensure_user(USER)


@pytest.fixture
def resume(user):
    return create_resume(
        USER,
        {
            "title": "AI Resume",
            "fullName": "Ada Lovelace",
            "experience": [
                {
                    "id": "exp-1",
                    "company": "Acme",
                    "position": "Engineer",
                    "description": "Wrote code",
                }
            ],
            "skills": [{"category": "Languages", "skills": ["Python"]}],
        },
    )


def _credits() -> int:
    return get_user(USER)["ai_credits"]


class TestGenerateSummary:
    def test_success_debits_one_credit(self, user):
        llm, provider = _llm("Seasoned engineer.")

        summary = generate_summary(USER, {"full_name": "Ada"}, llm=llm)

        assert summary == "Seasoned engineer."
        assert _credits() == 2
        assert "Name: Ada" in provider.prompts[0]
        assert provider.configs[0]["max_tokens"] == 200

    def test_saves_onto_resume(self, resume):
        llm, _ = _llm("Seasoned engineer.")

        generate_summary(USER, {}, resume_id=resume.id, llm=llm)

        assert get_resume(resume.id, USER).summary == "Seasoned engineer."

    def test_no_credits_means_no_call(self, user):
        for _ in range(3):
            generate_summary(USER, {}, llm=_llm()[0])
        llm, provider = _llm()

        with pytest.raises(InsufficientCreditsError) as exc_info:
            generate_summary(USER, {}, llm=llm)

        assert exc_info.value.kind == "ai"
        assert provider.prompts == []
        assert _credits() == 0

    def test_premium_is_never_charged(self, user):
        set_premium(USER, True)

        for _ in range(5):
            generate_summary(USER, {}, llm=_llm()[0])

        assert _credits() == 3

    def test_llm_failure_keeps_credits(self, user):
        llm, _ = _llm(error=LLMError("Gemini API call failed: timeout"))

        with pytest.raises(ExternalServiceError):
            generate_summary(USER, {}, llm=llm)

        assert _credits() == 3

    def test_unexpected_provider_error_is_wrapped(self, user):
        llm, _ = _llm(error=RuntimeError("socket closed"))

        with pytest.raises(LLMError, match="socket closed"):
            generate_summary(USER, {}, llm=llm)

        assert _credits() == 3

    def test_empty_output_is_a_failure(self, user):
        llm, _ = _llm("   ")

        with pytest.raises(LLMError, match="empty"):
            generate_summary(USER, {}, llm=llm)

        assert _credits() == 3

    def test_credit_is_held_while_the_model_runs(self, user):
        for _ in range(2):
            generate_summary(USER, {}, llm=_llm()[0])
        nested: list[Exception] = []

        class ReentrantProvider(MockProvider):
            def send_prompt(self, prompt: str, config: dict) -> str:
                try:
                    generate_summary(USER, {}, llm=_llm()[0])
                except InsufficientCreditsError as e:
                    nested.append(e)
                return super().send_prompt(prompt, config)

        summary = generate_summary(USER, {}, llm=LLMService(provider=ReentrantProvider("Last one")))

        assert summary == "Last one"
        assert len(nested) == 1
        assert _credits() == 0

    def test_unknown_user(self, tmp_db):
        with pytest.raises(ResumeNotFoundError):
            generate_summary("nobody", {}, llm=_llm()[0])

    def test_foreign_resume_rejected_before_call(self, resume):
        ensure_user("intruder")
        llm, provider = _llm()

        with pytest.raises(ResumeNotFoundError):
            generate_summary("intruder", {}, resume_id=resume.id, llm=llm)

        assert provider.prompts == []


class TestGenerateBullets:
    def test_bullets_are_normalized(self, user):
        llm, provider = _llm("- Built a thing\n\n• Shipped it\n* Measured it")

        bullets = generate_bullets(USER, {"position": "Engineer", "company": "Acme"}, llm=llm)

        assert bullets == "• Built a thing\n• Shipped it\n• Measured it"
        assert "Position: Engineer" in provider.prompts[0]
        assert provider.configs[0]["max_tokens"] == 300
        assert _credits() == 2

    def test_replaces_experience_description(self, resume):
        llm, provider = _llm("• Led migration")

        generate_bullets(USER, {}, resume_id=resume.id, experience_id="exp-1", llm=llm)

        stored = get_resume(resume.id, USER)
        assert stored.experience[0].description == "• Led migration"
        assert stored.experience[0].company == "Acme"
        assert "Current Description: Wrote code" in provider.prompts[0]

    def test_unknown_experience_item(self, resume):
        llm, provider = _llm()

        with pytest.raises(ResumeNotFoundError):
            generate_bullets(USER, {}, resume_id=resume.id, experience_id="nope", llm=llm)

        assert provider.prompts == []
        assert _credits() == 3


class TestAnalyzeJob:
    _ANSWER = json.dumps(
        {
            "matchScore": 81,
            "overallAssessment": "Strong match",
            "strengths": ["Python"],
            "missingKeywords": ["Go"],
            "skillsGap": ["Distributed systems"],
            "recommendations": ["Mention scale"],
            "atsOptimization": ["Add a skills section"],
        }
    )

    def test_returns_structured_analysis(self, resume):
        llm, provider = _llm(f"```json\n{self._ANSWER}\n```")

        analysis = analyze_job(USER, resume.id, "Python engineer wanted", llm=llm)

        assert analysis.match_score == 81
        assert analysis.missing_keywords == ["Go"]
        assert "Ada Lovelace" in provider.prompts[0]
        assert "Python engineer wanted" in provider.prompts[0]
        assert _credits() == 2

    def test_unparseable_answer_keeps_credits(self, resume):
        llm, _ = _llm("I think it's a decent match.")

        with pytest.raises(ExternalServiceError):
            analyze_job(USER, resume.id, "Python engineer wanted", llm=llm)

        assert _credits() == 3

    def test_infinite_score_keeps_credits(self, resume):
        llm, _ = _llm('{"matchScore": Infinity, "strengths": ["Python"]}')

        with pytest.raises(ExternalServiceError):
            analyze_job(USER, resume.id, "Python engineer wanted", llm=llm)

        assert _credits() == 3

    def test_blank_job_description(self, resume):
        with pytest.raises(ResumeValidationError):
            analyze_job(USER, resume.id, "   ", llm=_llm()[0])

    def test_missing_resume(self, user):
        with pytest.raises(ResumeNotFoundError):
            analyze_job(USER, "missing", "Python", llm=_llm()[0])


def test_resume_to_text(resume):
    text = resume_to_text(render(resume))

    assert text.startswith("Ada Lovelace")
    assert "EXPERIENCE" in text
    assert "Engineer | Acme" in text
    assert "- Wrote code" in text
    assert "Languages" in text
