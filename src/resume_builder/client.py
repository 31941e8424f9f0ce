"""HTTP client for the resume REST API."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import requests
from pydantic import TypeAdapter

from resume_builder.autosave import AutosaveCoordinator
from resume_builder.errors import (
    ExternalServiceError,
    ResumeNotFoundError,
    ResumeValidationError,
    UnauthorizedError,
)
from resume_builder.models import ResumeDocument

logger = logging.getLogger(__name__)

_PAYLOAD = TypeAdapter(dict[str, Any])


class ResumeApiClient:
    """Resume CRUD over HTTP for one signed-in user.

    Args:
        base_url: API root, e.g. ``http://localhost:8000/api``.
        user_id: Identity sent in the ``X-User-Id`` header.
        session: Optional preconfigured :class:`requests.Session`.
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str,
        user_id: str,
        *,
        session: requests.Session | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["X-User-Id"] = user_id

    def _request(self, method: str, path: str, json: Any = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, json=json, timeout=self.timeout)
        except requests.RequestException as e:
            raise ExternalServiceError(f"{method} {path} failed: {e}") from e

        if response.status_code == 401:
            raise UnauthorizedError("Session expired. Please sign in again.")
        if response.status_code == 404:
            raise ResumeNotFoundError(self._detail(response, "Resume not found"))
        if response.status_code in (400, 422):
            raise ResumeValidationError(self._detail(response, "Invalid resume data"))
        if not response.ok:
            logger.error("%s %s returned HTTP %d", method, path, response.status_code)
            raise ExternalServiceError(
                self._detail(response, f"Request failed with HTTP {response.status_code}")
            )

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    @staticmethod
    def _detail(response: requests.Response, default: str) -> str:
        try:
            body = response.json()
        except ValueError:
            return default
        detail = body.get("detail") if isinstance(body, dict) else None
        return str(detail) if detail else default

    def list(self) -> list[ResumeDocument]:
        return [ResumeDocument.model_validate(r) for r in self._request("GET", "/resumes")]

    def get(self, resume_id: str) -> ResumeDocument:
        return ResumeDocument.model_validate(self._request("GET", f"/resumes/{resume_id}"))

    def create(self, fields: Mapping[str, Any]) -> ResumeDocument:
        body = _PAYLOAD.dump_python(dict(fields), mode="json")
        return ResumeDocument.model_validate(self._request("POST", "/resumes", json=body))

    def patch(self, resume_id: str, fields: Mapping[str, Any]) -> ResumeDocument:
        body = _PAYLOAD.dump_python(dict(fields), mode="json")
        return ResumeDocument.model_validate(
            self._request("PATCH", f"/resumes/{resume_id}", json=body)
        )

    def delete(self, resume_id: str) -> None:
        self._request("DELETE", f"/resumes/{resume_id}")

    def duplicate(self, resume_id: str) -> ResumeDocument:
        return ResumeDocument.model_validate(
            self._request("POST", f"/resumes/{resume_id}/duplicate")
        )

    def autosave(self, resume: ResumeDocument, **kwargs: Any) -> AutosaveCoordinator:
        """Return a coordinator that saves edits to *resume* through :meth:`patch`."""
        return AutosaveCoordinator(
            resume, lambda fields: self.patch(resume.id, fields), **kwargs
        )
