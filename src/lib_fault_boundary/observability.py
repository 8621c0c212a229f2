"""Structured logging helpers distilled into tiny orchestration phrases.

Purpose
    Keep every emission of logging data predictable, contextual, and ready for
    downstream aggregation pipelines without forcing applications to adopt a
    specific logging backend.

Contents
    - ``TRACE_ID``: context variable storing the active trace identifier.
    - ``get_logger``: returns the shared package logger (quiet by default).
    - ``bind_trace_id``: binds or clears the active trace identifier.
    - ``log_debug`` / ``log_info`` / ``log_error``: emit structured entries via a
      single private emitter.
    - ``make_event``: convenience builder for structured event payloads.
    - ``log_translated_error``: ready-made diagnostics sink for boundaries.

System Integration
    Boundaries log collaborator failures at debug level and hand the translated
    error to whatever sink the application wires in. The domain layer stays free
    from logging concerns.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, Final, Mapping

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .domain.errors import TranslatedError

TRACE_ID: ContextVar[str | None] = ContextVar("lib_fault_boundary_trace_id", default=None)
"""Current trace identifier propagated through logging helpers."""

_LOGGER: Final[logging.Logger] = logging.getLogger("lib_fault_boundary")
_LOGGER.addHandler(logging.NullHandler())


def get_logger() -> logging.Logger:
    """Expose the package logger so applications may attach handlers.

    Why
        Leaves the library silent by default while giving host applications full
        control over handler and formatter configuration.
    """

    return _LOGGER


def bind_trace_id(trace_id: str | None) -> None:
    """Bind or clear the active trace identifier.

    Why
        Correlates boundary events with external trace spans.
    What
        Stores ``trace_id`` in :data:`TRACE_ID`; ``None`` clears the binding.

    Examples
    --------
    >>> bind_trace_id('abc123')
    >>> TRACE_ID.get()
    'abc123'
    >>> bind_trace_id(None)
    >>> TRACE_ID.get() is None
    True
    """

    TRACE_ID.set(trace_id)


def log_debug(message: str, **fields: Any) -> None:
    """Emit a structured debug log entry that includes the trace context."""

    _emit(logging.DEBUG, message, fields)


def log_info(message: str, **fields: Any) -> None:
    """Emit a structured info log entry that includes the trace context."""

    _emit(logging.INFO, message, fields)


def log_error(message: str, **fields: Any) -> None:
    """Emit a structured error log entry that includes the trace context."""

    _emit(logging.ERROR, message, fields)


def make_event(
    operation: str,
    kind: str | None,
    payload: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a structured logging payload for boundary lifecycle events.

    Why
        Keeps event construction consistent so downstream log processors can rely
        on stable keys.
    Inputs
        operation: Logical operation being observed.
        kind: Error kind value, or ``None`` for successful events.
        payload: Optional mapping with extra diagnostic detail.

    Examples
    --------
    >>> make_event('open', 'device_unavailable', {'failure': 'Unlocked'})
    {'operation': 'open', 'kind': 'device_unavailable', 'failure': 'Unlocked'}
    """

    event: dict[str, Any] = {"operation": operation, "kind": kind}
    if payload:
        event |= dict(payload)
    return event


def log_translated_error(error: TranslatedError) -> None:
    """Diagnostics sink that records *error* through the package logger.

    Why
        Applications that only want "log and continue" can pass this function as
        the ``sink`` of any boundary.
    """

    log_error("translated_error", **error.as_event())


def _emit(level: int, message: str, fields: Mapping[str, Any]) -> None:
    """Send a log entry through the shared logger with contextual metadata."""

    _LOGGER.log(level, message, extra={"context": _with_trace(fields)})


def _with_trace(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Attach the current trace identifier to the provided structured fields."""

    context = {"trace_id": TRACE_ID.get()}
    context.update(fields)
    return context
