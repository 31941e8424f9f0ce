"""Tests for AI generation API endpoints."""

from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from resume_builder.api.dependencies import get_llm_service
from resume_builder.api.main import app
from resume_builder.services.llm_providers import LLMError, LLMProvider
from resume_builder.services.llm_service import LLMService
from resume_builder.services.users import ensure_user, get_user, set_premium

USER = "ai-api-user"
HEADERS = {"X-User-Id": USER}


class MockProvider(LLMProvider):
    def __init__(self) -> None:
        self.response = "Mock LLM response"
        self.error: Exception | None = None
        self.prompts: list[str] = []

    def send_prompt(self, prompt: str, config: dict) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def provider() -> Generator[MockProvider]:
    provider = MockProvider()
    app.dependency_overrides[get_llm_service] = lambda: LLMService(provider=provider)
    yield provider
    app.dependency_overrides.pop(get_llm_service, None)


def _credits() -> int:
    return get_user(USER)["ai_credits"]


class TestGenerateSummary:
    def test_returns_summary(self, client: TestClient, provider: MockProvider) -> None:
        provider.response = "Backend engineer with 5 years of API work."

        response = client.post(
            "/api/ai/generate-summary",
            json={"context": {"fullName": "Ada", "skills": ["Python", "SQL"]}},
            headers=HEADERS,
        )

        assert response.status_code == 200
        assert response.json() == {"summary": "Backend engineer with 5 years of API work."}
        assert "Name: Ada" in provider.prompts[0]
        assert "Python" in provider.prompts[0]
        assert _credits() == 2

    def test_saves_summary_on_resume(self, client: TestClient, provider: MockProvider) -> None:
        resume_id = client.post("/api/resumes", json={"title": "R"}, headers=HEADERS).json()["id"]
        provider.response = "Saved summary."

        client.post(
            "/api/ai/generate-summary",
            json={"context": {}, "resumeId": resume_id},
            headers=HEADERS,
        )

        resume = client.get(f"/api/resumes/{resume_id}", headers=HEADERS).json()
        assert resume["summary"] == "Saved summary."

    def test_out_of_credits_is_403(self, client: TestClient, provider: MockProvider) -> None:
        for _ in range(3):
            client.post("/api/ai/generate-summary", json={}, headers=HEADERS)
        calls = len(provider.prompts)

        response = client.post("/api/ai/generate-summary", json={}, headers=HEADERS)

        assert response.status_code == 403
        assert len(provider.prompts) == calls

    def test_premium_user_keeps_credits(self, client: TestClient, provider: MockProvider) -> None:
        ensure_user(USER)
        set_premium(USER, True)

        for _ in range(4):
            assert (
                client.post("/api/ai/generate-summary", json={}, headers=HEADERS).status_code
                == 200
            )

        assert _credits() == 3

    def test_llm_failure_is_502(self, client: TestClient, provider: MockProvider) -> None:
        provider.error = LLMError("Gemini API call failed: quota")

        response = client.post("/api/ai/generate-summary", json={}, headers=HEADERS)

        assert response.status_code == 502
        assert _credits() == 3

    def test_requires_authentication(self, client: TestClient, provider: MockProvider) -> None:
        response = client.post("/api/ai/generate-summary", json={})

        assert response.status_code == 401
        assert provider.prompts == []


class TestGenerateBullets:
    def test_returns_normalized_bullets(self, client: TestClient, provider: MockProvider) -> None:
        provider.response = "- Cut latency by 40%\n- Led a team of 4"

        response = client.post(
            "/api/ai/generate-bullets",
            json={
                "context": {
                    "position": "Engineer",
                    "company": "Acme",
                    "currentDescription": "Backend work",
                }
            },
            headers=HEADERS,
        )

        assert response.status_code == 200
        assert response.json()["bullets"] == "• Cut latency by 40%\n• Led a team of 4"
        assert "Company: Acme" in provider.prompts[0]

    def test_updates_experience_item(self, client: TestClient, provider: MockProvider) -> None:
        resume_id = client.post(
            "/api/resumes",
            json={
                "title": "R",
                "experience": [{"id": "exp-9", "company": "Acme", "position": "Dev"}],
            },
            headers=HEADERS,
        ).json()["id"]
        provider.response = "• Shipped v2"

        response = client.post(
            "/api/ai/generate-bullets",
            json={"context": {}, "resumeId": resume_id, "experienceId": "exp-9"},
            headers=HEADERS,
        )

        assert response.status_code == 200
        resume = client.get(f"/api/resumes/{resume_id}", headers=HEADERS).json()
        assert resume["experience"][0]["description"] == "• Shipped v2"

    def test_unknown_resume_is_404(self, client: TestClient, provider: MockProvider) -> None:
        response = client.post(
            "/api/ai/generate-bullets",
            json={"context": {}, "resumeId": "missing", "experienceId": "exp-1"},
            headers=HEADERS,
        )

        assert response.status_code == 404
        assert provider.prompts == []
