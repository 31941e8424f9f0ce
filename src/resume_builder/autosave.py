"""Debounced, coalescing autosave for one resume being edited.

Edits land in local state immediately and are persisted as one partial
update once the user pauses for ``delay`` seconds. Every edit bumps a
sequence number; a save response is applied to local state only if no
edit happened after the save was sent, so a slow response can never
overwrite newer typing.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable, Mapping
from enum import StrEnum
from typing import Any, Protocol

from resume_builder.errors import ResumeNotFoundError, UnauthorizedError
from resume_builder.models import ResumeDocument
from resume_builder.services.resume_store import normalize_fields

logger = logging.getLogger(__name__)

__all__ = [
    "AutosaveCoordinator",
    "SaveStatus",
    "Scheduler",
    "ThreadingScheduler",
    "default_delay",
]

PersistFn = Callable[[dict[str, Any]], "ResumeDocument | Mapping[str, Any] | None"]
ErrorCallback = Callable[[Exception], None]


class SaveStatus(StrEnum):
    SAVED = "saved"
    SAVING = "saving"
    UNSAVED = "unsaved"


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Runs *callback* once after *delay* seconds unless the handle is cancelled."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


class ThreadingScheduler:
    def schedule(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


def default_delay() -> float:
    """Debounce delay from ``RESUME_AUTOSAVE_DELAY``, 1 second by default."""
    raw = os.environ.get("RESUME_AUTOSAVE_DELAY", "1.0")
    try:
        return max(0.0, float(raw))
    except ValueError:
        logger.warning("Ignoring invalid RESUME_AUTOSAVE_DELAY=%r", raw)
        return 1.0


def _as_state(value: ResumeDocument | Mapping[str, Any]) -> dict[str, Any]:
    if not isinstance(value, ResumeDocument):
        value = ResumeDocument.model_validate(dict(value))
    return value.model_dump()


class AutosaveCoordinator:
    """Coordinates local edits with a persistence function.

    Args:
        initial: Resume as last loaded from the server.
        persist: Called with the coalesced partial update; returns the
            canonical resume. ``None`` means the resume no longer exists.
        delay: Debounce delay in seconds; defaults to :func:`default_delay`.
        scheduler: Timer source; defaults to :class:`ThreadingScheduler`.
        on_error: Receives exceptions from failed saves.
        on_unauthorized: Receives :class:`UnauthorizedError` instead of
            *on_error*, so the caller can send the user back to login.
        on_status_change: Called with every new :class:`SaveStatus`.
    """

    def __init__(
        self,
        initial: ResumeDocument | Mapping[str, Any],
        persist: PersistFn,
        *,
        delay: float | None = None,
        scheduler: Scheduler | None = None,
        on_error: ErrorCallback | None = None,
        on_unauthorized: ErrorCallback | None = None,
        on_status_change: Callable[[SaveStatus], None] | None = None,
    ) -> None:
        self._state = _as_state(initial)
        self._persist = persist
        self.delay = default_delay() if delay is None else delay
        self._scheduler: Scheduler = scheduler or ThreadingScheduler()
        self._on_error = on_error
        self._on_unauthorized = on_unauthorized
        self._on_status_change = on_status_change

        self._lock = threading.RLock()
        self._pending: dict[str, Any] = {}
        self._timer: Cancellable | None = None
        self._edit_seq = 0
        self._saving = False
        self._resave_requested = False
        self._closed = False
        self._status = SaveStatus.SAVED
        self.last_error: Exception | None = None

    @property
    def status(self) -> SaveStatus:
        return self._status

    @property
    def state(self) -> dict[str, Any]:
        """Copy of the local resume state, including unsaved edits."""
        with self._lock:
            return dict(self._state)

    @property
    def pending(self) -> dict[str, Any]:
        with self._lock:
            return dict(self._pending)

    @property
    def closed(self) -> bool:
        return self._closed

    def _set_status(self, status: SaveStatus) -> None:
        if status == self._status:
            return
        self._status = status
        if self._on_status_change is not None:
            self._on_status_change(status)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _schedule(self) -> None:
        self._cancel_timer()
        self._timer = self._scheduler.schedule(self.delay, self._on_timer)

    def edit(self, fields: Mapping[str, Any]) -> None:
        """Apply *fields* locally and (re)start the debounce timer.

        Keys may use the camelCase wire names or attribute names; identity
        fields and unknown keys are ignored.

        Raises:
            RuntimeError: If the coordinator has been closed.
        """
        changes = normalize_fields(fields)
        with self._lock:
            if self._closed:
                raise RuntimeError("Autosave coordinator is closed")
            if not changes:
                return
            self._state.update(changes)
            self._pending.update(changes)
            self._edit_seq += 1
            self._set_status(SaveStatus.UNSAVED)
            self._schedule()

    def _on_timer(self) -> None:
        with self._lock:
            self._timer = None
        self._save()

    def flush(self) -> None:
        """Send pending edits now instead of waiting for the timer."""
        with self._lock:
            self._cancel_timer()
        self._save()

    def close(self, flush: bool = True) -> None:
        """Stop accepting edits, flushing or abandoning what is pending."""
        if flush:
            self.flush()
        with self._lock:
            self._cancel_timer()
            if not flush and self._pending:
                logger.info("Abandoning %d unsaved field(s)", len(self._pending))
                self._pending = {}
            self._closed = True

    def _save(self) -> None:
        with self._lock:
            if not self._pending:
                return
            if self._saving:
                # Saved once the in-flight request settles.
                self._resave_requested = True
                return
            batch = self._pending
            self._pending = {}
            sent_seq = self._edit_seq
            self._saving = True
            self._set_status(SaveStatus.SAVING)

        try:
            response = self._persist(dict(batch))
            if response is None:
                raise ResumeNotFoundError("Resume not found")
        except Exception as exc:
            with self._lock:
                self._saving = False
                self._pending = {**batch, **self._pending}
                self._set_status(SaveStatus.UNSAVED)
                self.last_error = exc
                resave = self._take_resave_request()
            self._report(exc)
            if resave:
                self._save()
            return

        with self._lock:
            self._saving = False
            self.last_error = None
            if sent_seq == self._edit_seq:
                self._state = _as_state(response)
                self._set_status(SaveStatus.SAVED)
            else:
                self._set_status(SaveStatus.UNSAVED)
            resave = self._take_resave_request()
        if resave:
            self._save()

    def _take_resave_request(self) -> bool:
        resave = self._resave_requested and self._timer is None and bool(self._pending)
        self._resave_requested = False
        return resave

    def _report(self, exc: Exception) -> None:
        if isinstance(exc, UnauthorizedError) and self._on_unauthorized is not None:
            self._on_unauthorized(exc)
        elif self._on_error is not None:
            self._on_error(exc)
        else:
            logger.error("Autosave failed: %s", exc)
