"""Translation boundary base class.

Purpose
-------
Provide the reusable mechanics every collaborator-specific boundary needs:
input rejection before delegation, failure interception and translation, and
guaranteed release of per-call resources.

Contents
--------
* :class:`TranslationBoundary` – base class holding the immutable failure table
  and optional diagnostics sink.
* :func:`translated` – method decorator running a whole method inside
  :meth:`TranslationBoundary.translating`.

System Role
-----------
Concrete boundaries in :mod:`lib_fault_boundary.adapters` subclass
:class:`TranslationBoundary` and are the only code aware of their collaborator's
concrete failure types. Instances hold no mutable state, so one instance may be
shared by concurrent callers without locking.
"""

from __future__ import annotations

import functools
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Mapping, TypeVar

from ..domain.errors import ErrorKind, TranslatedError
from ..observability import log_debug, log_error, make_event
from .ports import ErrorSink
from .translate import DEFAULT_FAILURES, FailureTable, translate

H = TypeVar("H")
F = TypeVar("F", bound=Callable[..., Any])


class TranslationBoundary:
    """Base class for boundaries that wrap one collaborator family.

    Parameters
    ----------
    failures:
        Failure table used by :func:`~lib_fault_boundary.application.translate.translate`.
        Defaults to :data:`DEFAULT_FAILURES`; subclasses usually pass their own.
    sink:
        Optional diagnostics consumer receiving every translated error.

    Examples
    --------
    >>> boundary = TranslationBoundary()
    >>> try:
    ...     with boundary.translating("read_blob"):
    ...         raise PermissionError("denied")
    ... except TranslatedError as error:
    ...     print(error.kind.value, error.operation)
    permission_denied read_blob
    """

    def __init__(
        self,
        failures: Mapping[type, ErrorKind] | None = None,
        *,
        sink: ErrorSink | None = None,
    ) -> None:
        if failures is None:
            table = DEFAULT_FAILURES
        elif isinstance(failures, FailureTable):
            table = failures
        else:
            table = FailureTable(failures)
        self._failures = table
        self._sink = sink

    @property
    def failures(self) -> FailureTable:
        return self._failures

    def require(self, operation: str, **arguments: Any) -> None:
        """Reject absent (``None``) or blank string *arguments* with ``INVALID_ARGUMENT``.

        Why
        ----
        Validation must fail before any collaborator call so rejected input never
        causes partial side effects.
        """

        for name, value in arguments.items():
            if value is None:
                raise self.fail(operation, ErrorKind.INVALID_ARGUMENT, f"argument {name!r} is required")
            if isinstance(value, str) and not value.strip():
                raise self.fail(operation, ErrorKind.INVALID_ARGUMENT, f"argument {name!r} must not be blank")

    def fail(
        self,
        operation: str,
        kind: ErrorKind,
        message: str,
        *,
        cause: BaseException | None = None,
    ) -> TranslatedError:
        """Build and report a :class:`TranslatedError` raised by the boundary itself.

        Returns the error so call sites read ``raise self.fail(...)``.
        """

        error = TranslatedError(kind, operation, message, cause=cause)
        self._report(error)
        return error

    @contextmanager
    def translating(self, operation: str) -> Iterator[None]:
        """Re-raise any collaborator failure inside the block as a translated error.

        Already translated errors pass through untouched. ``KeyboardInterrupt``
        and ``SystemExit`` are never intercepted.
        """

        try:
            yield
        except TranslatedError:
            raise
        except Exception as exc:
            error = translate(operation, exc, self._failures)
            log_debug(
                "collaborator_failed",
                **make_event(operation, error.kind.value, {"failure": type(exc).__name__}),
            )
            self._report(error)
            raise error from exc

    @contextmanager
    def scoped(
        self,
        operation: str,
        acquire: Callable[[], H],
        release: Callable[[H], None] | None = None,
    ) -> Iterator[H]:
        """Acquire a per-call resource and release it on every exit path.

        What
        ----
        Calls *acquire*, yields the handle, and calls *release* (default:
        ``handle.close()``) on every exit path. Only *acquire* and *release*
        are translated for *operation*; whatever the ``with`` block raises
        propagates unchanged, so collaborator calls made inside it need their
        own :meth:`translating` scope. When release fails while another error
        is already propagating, the release failure is logged and the original
        error wins.
        """

        closer = release or _close
        with self.translating(operation):
            resource = acquire()
        try:
            yield resource
        except BaseException:
            self._release_quietly(operation, closer, resource)
            raise
        with self.translating(operation):
            closer(resource)

    def _release_quietly(self, operation: str, closer: Callable[[H], None], resource: H) -> None:
        """Release *resource* while an error is already in flight."""

        try:
            closer(resource)
        except Exception as exc:
            log_error("release_failed", **make_event(operation, None, {"failure": type(exc).__name__, "error": str(exc)}))

    def _report(self, error: TranslatedError) -> None:
        """Forward *error* to the sink; a failing sink never masks the error."""

        if self._sink is None:
            return
        try:
            self._sink(error)
        except Exception as exc:
            log_error("sink_failed", **make_event(error.operation, error.kind.value, {"failure": type(exc).__name__}))


def translated(operation: str) -> Callable[[F], F]:
    """Run the decorated boundary method inside :meth:`TranslationBoundary.translating`.

    The decorated object must expose ``translating`` (a boundary or an object
    delegating to one).
    """

    def decorate(func: F) -> F:
        @functools.wraps(func)
        def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            with self.translating(operation):
                return func(self, *args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorate


def _close(resource: Any) -> None:
    """Default release strategy: call ``resource.close()``."""

    resource.close()


__all__ = ["TranslationBoundary", "translated"]
