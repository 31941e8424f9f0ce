"""Resume document store.

Owner-scoped CRUD over the ``resumes`` table. Every lookup filters on both
the resume id and the caller's user id, so a resume owned by someone else
looks exactly like one that does not exist.

Updates are shallow merges: each supplied top-level field replaces the
stored value wholesale (a new ``experience`` list replaces the old list,
it is not merged item by item). There is no version token; concurrent
writers to the same row are last-write-wins.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from resume_builder.data.db import get_session
from resume_builder.data.models import Resume
from resume_builder.errors import ResumeValidationError
from resume_builder.models import ResumeDocument
from resume_builder.services.users import get_or_create_user

logger = logging.getLogger(__name__)

__all__ = [
    "COPY_SUFFIX",
    "create_resume",
    "delete_resume",
    "duplicate_resume",
    "get_resume",
    "list_resumes",
    "normalize_fields",
    "update_resume",
]

COPY_SUFFIX = " (Copy)"
_TITLE_MAX_LENGTH = 255

# Set by the store, never by the caller.
_IDENTITY_FIELDS = frozenset({"id", "user_id", "created_at", "updated_at"})

# Accept both the camelCase wire names and the snake_case attribute names.
_FIELD_NAMES: dict[str, str] = {}
for _name, _info in ResumeDocument.model_fields.items():
    _FIELD_NAMES[_name] = _name
    if _info.alias:
        _FIELD_NAMES[_info.alias] = _name


def normalize_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Map a partial payload onto ResumeDocument attribute names.

    Unknown keys and identity keys are dropped.
    """
    normalized: dict[str, Any] = {}
    for key, value in fields.items():
        name = _FIELD_NAMES.get(key)
        if name is None:
            logger.debug("Ignoring unknown resume field %r", key)
            continue
        if name in _IDENTITY_FIELDS:
            continue
        normalized[name] = value
    return normalized


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _row_to_document(row: Resume) -> ResumeDocument:
    data = {name: getattr(row, name) for name in ResumeDocument.model_fields}
    data["created_at"] = _as_utc(row.created_at)
    data["updated_at"] = _as_utc(row.updated_at)
    return ResumeDocument.model_validate(data)


def _validate(data: Mapping[str, Any]) -> ResumeDocument:
    try:
        return ResumeDocument.model_validate(dict(data))
    except ValidationError as e:
        logger.warning("Validation failed for resume: %s", e)
        raise ResumeValidationError(str(e)) from e


def _columns(document: ResumeDocument, names: set[str] | None = None) -> dict[str, Any]:
    """JSON-ready column values for *document*, optionally limited to *names*."""
    include = None if names is None else names - _IDENTITY_FIELDS
    return document.model_dump(mode="json", exclude=set(_IDENTITY_FIELDS), include=include)


def _get_owned(session: Session, resume_id: str, user_id: str) -> Resume | None:
    return (
        session.query(Resume).filter(Resume.id == resume_id, Resume.user_id == user_id).first()
    )


def create_resume(user_id: str, fields: Mapping[str, Any]) -> ResumeDocument:
    """Create a resume for *user_id*.

    Args:
        user_id: Owner of the new resume.
        fields: Initial fields; ``title`` is required, everything else
            falls back to its declared default.

    Returns:
        The stored resume.

    Raises:
        ResumeValidationError: If the title is missing or any field is malformed.
    """
    document = _validate(normalize_fields(fields))

    try:
        with get_session() as session:
            get_or_create_user(session, user_id)
            now = datetime.now(UTC)
            row = Resume(user_id=user_id, created_at=now, updated_at=now, **_columns(document))
            session.add(row)
            session.flush()
            created = _row_to_document(row)
    except SQLAlchemyError:
        logger.exception("Failed to create resume for %s", user_id)
        raise

    logger.info("Created resume %s for %s", created.id, user_id)
    return created


def get_resume(resume_id: str, user_id: str) -> ResumeDocument | None:
    """Return the resume if it exists and is owned by *user_id*, else None."""
    with get_session() as session:
        row = _get_owned(session, resume_id, user_id)
        if row is None:
            return None
        return _row_to_document(row)


def list_resumes(user_id: str) -> list[ResumeDocument]:
    """Return all resumes owned by *user_id*, most recently updated first."""
    with get_session() as session:
        rows = (
            session.query(Resume)
            .filter(Resume.user_id == user_id)
            .order_by(Resume.updated_at.desc(), Resume.created_at.desc())
            .all()
        )
        return [_row_to_document(row) for row in rows]


def update_resume(
    resume_id: str, user_id: str, fields: Mapping[str, Any]
) -> ResumeDocument | None:
    """Shallow-merge *fields* into the stored resume.

    The merged record is validated as a whole before anything is written.

    Returns:
        The updated resume, or None if it does not exist for this owner.

    Raises:
        ResumeValidationError: If the merged record is invalid.
    """
    updates = normalize_fields(fields)

    try:
        with get_session() as session:
            row = _get_owned(session, resume_id, user_id)
            if row is None:
                return None

            current = _row_to_document(row)
            merged = _validate({**current.model_dump(exclude=set(_IDENTITY_FIELDS)), **updates})

            for name, value in _columns(merged, set(updates)).items():
                setattr(row, name, value)
            row.updated_at = datetime.now(UTC)
            session.flush()
            return _row_to_document(row)
    except SQLAlchemyError:
        logger.exception("Failed to update resume %s for %s", resume_id, user_id)
        raise


def delete_resume(resume_id: str, user_id: str) -> None:
    """Delete the resume if owned by *user_id*; a missing resume is not an error."""
    try:
        with get_session() as session:
            deleted = (
                session.query(Resume)
                .filter(Resume.id == resume_id, Resume.user_id == user_id)
                .delete(synchronize_session=False)
            )
    except SQLAlchemyError:
        logger.exception("Failed to delete resume %s for %s", resume_id, user_id)
        raise

    if deleted:
        logger.info("Deleted resume %s for %s", resume_id, user_id)


def _copy_title(title: str) -> str:
    base = title[: _TITLE_MAX_LENGTH - len(COPY_SUFFIX)]
    return f"{base}{COPY_SUFFIX}"


def duplicate_resume(resume_id: str, user_id: str) -> ResumeDocument | None:
    """Deep-copy a resume into a new record titled ``"<title> (Copy)"``.

    Returns:
        The new resume, or None if the source does not exist for this owner.
    """
    try:
        with get_session() as session:
            source = _get_owned(session, resume_id, user_id)
            if source is None:
                return None

            document = _row_to_document(source)
            copy = document.model_copy(update={"title": _copy_title(document.title)}, deep=True)

            now = datetime.now(UTC)
            row = Resume(user_id=user_id, created_at=now, updated_at=now, **_columns(copy))
            session.add(row)
            session.flush()
            duplicated = _row_to_document(row)
    except SQLAlchemyError:
        logger.exception("Failed to duplicate resume %s for %s", resume_id, user_id)
        raise

    logger.info("Duplicated resume %s into %s for %s", resume_id, duplicated.id, user_id)
    return duplicated
