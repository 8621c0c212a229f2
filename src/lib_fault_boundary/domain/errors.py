"""Domain-level error taxonomy.

Purpose
-------
Expose the small, caller-facing error vocabulary shared by every translation
boundary, the CLI, and consuming applications. The taxonomy lives in the domain
layer to respect the Clean Architecture dependency rule (outer layers may
depend on inner layers, not vice versa).

Contents
--------
* :class:`ErrorKind` – enumerable classification callers branch on.
* :class:`TranslatedError` – the single exception type that crosses a
  boundary, carrying kind, operation, message, and the original cause.

System Role
-----------
Boundaries construct :class:`TranslatedError` when a collaborator fails; callers
catch it and decide a recovery action keyed only on :attr:`TranslatedError.kind`.
The ``cause`` is kept for logs and tracebacks, never for branching.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Caller-meaningful failure categories.

    Why
    ----
    Collaborators grow new failure types over time; callers should not. New
    members are added only when a genuinely different recovery action exists.

    Examples
    --------
    >>> ErrorKind("not_found") is ErrorKind.NOT_FOUND
    True
    """

    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    DEVICE_UNAVAILABLE = "device_unavailable"
    STORAGE_FAILURE = "storage_failure"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


class TranslatedError(Exception):
    """Normalised failure raised at a translation boundary.

    Why
    ----
    A single propagating failure type keeps intermediate layers free from the
    collaborator's vocabulary; only the boundary and the top-level handler need
    to know about :class:`ErrorKind`.

    What
    ----
    Stores ``kind``, ``operation``, ``message`` and the optional ``cause`` as
    read-only attributes. Assigning to any of them raises ``AttributeError``.

    Parameters
    ----------
    kind:
        :class:`ErrorKind` member (or its string value).
    operation:
        Name of the logical operation that was attempted.
    message:
        Human-readable detail.
    cause:
        Original collaborator failure, retained for diagnostics only.

    Examples
    --------
    >>> error = TranslatedError(ErrorKind.NOT_FOUND, "retrieve_section", "no section 'db'")
    >>> str(error)
    "retrieve_section: no section 'db' [not_found]"
    >>> error.kind is ErrorKind.NOT_FOUND
    True
    """

    def __init__(
        self,
        kind: ErrorKind | str,
        operation: str,
        message: str,
        *,
        cause: BaseException | None = None,
    ) -> None:
        resolved = ErrorKind(kind)
        super().__init__(f"{operation}: {message} [{resolved.value}]")
        self._kind = resolved
        self._operation = operation
        self._message = message
        self._cause = cause

    @property
    def kind(self) -> ErrorKind:
        return self._kind

    @property
    def operation(self) -> str:
        return self._operation

    @property
    def message(self) -> str:
        return self._message

    @property
    def cause(self) -> BaseException | None:
        return self._cause

    def as_event(self) -> dict[str, Any]:
        """Return a flat mapping suitable for structured log sinks.

        Examples
        --------
        >>> TranslatedError("timeout", "open", "no reply", cause=TimeoutError()).as_event()
        {'operation': 'open', 'kind': 'timeout', 'message': 'no reply', 'cause_type': 'TimeoutError'}
        """

        return {
            "operation": self._operation,
            "kind": self._kind.value,
            "message": self._message,
            "cause_type": type(self._cause).__name__ if self._cause is not None else None,
        }

    def __reduce__(self) -> tuple[Any, ...]:
        return (_rebuild, (self._kind.value, self._operation, self._message, self._cause))

    def __repr__(self) -> str:
        return (
            f"TranslatedError(kind={self._kind.value!r}, operation={self._operation!r}, "
            f"message={self._message!r})"
        )


def _rebuild(kind: str, operation: str, message: str, cause: BaseException | None) -> TranslatedError:
    """Restore a pickled :class:`TranslatedError` (keyword-only ``cause``)."""

    return TranslatedError(kind, operation, message, cause=cause)


__all__ = ["ErrorKind", "TranslatedError"]
