"""Caller-side retry keyed only on :class:`ErrorKind`.

Boundaries never retry on their own; whether a failure is worth repeating is a
caller decision. This helper keeps that decision declarative: the caller names
the kinds it considers transient and everything else propagates immediately.
"""

from __future__ import annotations

import math
import time
from typing import Callable, Collection, TypeVar

from ..domain.errors import ErrorKind, TranslatedError
from ..observability import log_debug, make_event

T = TypeVar("T")


def call_with_retry(
    func: Callable[[], T],
    *,
    retry_on: Collection[ErrorKind],
    attempts: int = 3,
    delay: float = 0.0,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call *func* until it succeeds, retrying translated errors whose kind is in *retry_on*.

    Examples
    --------
    >>> calls = []
    >>> def flaky():
    ...     calls.append(1)
    ...     if len(calls) < 2:
    ...         raise TranslatedError(ErrorKind.DEVICE_UNAVAILABLE, "open", "locked")
    ...     return "ok"
    >>> call_with_retry(flaky, retry_on={ErrorKind.DEVICE_UNAVAILABLE})
    'ok'
    >>> len(calls)
    2
    """

    if attempts < 1:
        raise TranslatedError(ErrorKind.INVALID_ARGUMENT, "call_with_retry", f"attempts must be >= 1, got {attempts}")
    if not math.isfinite(delay) or delay < 0:
        raise TranslatedError(
            ErrorKind.INVALID_ARGUMENT, "call_with_retry", f"delay must be a finite number >= 0, got {delay}"
        )

    for attempt in range(1, attempts + 1):
        try:
            return func()
        except TranslatedError as error:
            if error.kind not in retry_on or attempt == attempts:
                raise
            log_debug("retrying", **make_event(error.operation, error.kind.value, {"attempt": attempt, "attempts": attempts}))
            if delay:
                sleep(delay)
    raise AssertionError("unreachable")  # pragma: no cover


__all__ = ["call_with_retry"]
