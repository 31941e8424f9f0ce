"""Route handlers for the API."""

from resume_builder.api.routes import ai, auth, health, payments, resumes

__all__ = [
    "health",
    "auth",
    "resumes",
    "ai",
    "payments",
]
