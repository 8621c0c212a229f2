"""Runtime settings read from ``LIB_FAULT_BOUNDARY_*`` environment variables.

Purpose
-------
Give the CLI and embedding applications one immutable :class:`Settings` value
for the knobs that sit around the boundaries (caller-side retry policy and the
trace identifier). The environment is treated like any other collaborator:
malformed values surface as ``INVALID_ARGUMENT`` translated errors.

Recognised variables
--------------------
* ``LIB_FAULT_BOUNDARY_RETRY__ATTEMPTS`` – int >= 1 (default 3).
* ``LIB_FAULT_BOUNDARY_RETRY__DELAY`` – finite seconds >= 0 (default 0).
* ``LIB_FAULT_BOUNDARY_RETRY__ON`` – comma-separated kind values (default
  ``device_unavailable,timeout``); ``none`` disables retries.
* ``LIB_FAULT_BOUNDARY_TRACE_ID`` – optional trace identifier, kept verbatim.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Final, Mapping

from .adapters.env.default import DefaultEnvLoader, default_env_prefix
from .application.boundary import TranslationBoundary
from .application.translate import FailureTable
from .domain.errors import ErrorKind

ENV_PREFIX: Final[str] = default_env_prefix("lib-fault-boundary")

DEFAULT_RETRY_ON: Final[frozenset[ErrorKind]] = frozenset({ErrorKind.DEVICE_UNAVAILABLE, ErrorKind.TIMEOUT})

_SETTINGS_FAILURES = FailureTable({ValueError: ErrorKind.INVALID_ARGUMENT, TypeError: ErrorKind.INVALID_ARGUMENT})
_VERBATIM_KEYS: Final[tuple[str, ...]] = ("TRACE_ID",)


@dataclass(frozen=True)
class Settings:
    """Immutable runtime settings."""

    retry_attempts: int = 3
    retry_delay: float = 0.0
    retry_on: frozenset[ErrorKind] = field(default=DEFAULT_RETRY_ON)
    trace_id: str | None = None


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Read :class:`Settings` from *environ* (defaults to :data:`os.environ`).

    Examples
    --------
    >>> load_settings({"LIB_FAULT_BOUNDARY_RETRY__ATTEMPTS": "5"}).retry_attempts
    5
    >>> load_settings({}).retry_on == DEFAULT_RETRY_ON
    True
    """

    boundary = TranslationBoundary(_SETTINGS_FAILURES)
    with boundary.translating("load_settings"):
        payload = DefaultEnvLoader(environ=environ).load(ENV_PREFIX, verbatim=_VERBATIM_KEYS)
        return _build(payload)


def _build(payload: Mapping[str, Any]) -> Settings:
    retry = payload.get("retry", {})
    if not isinstance(retry, Mapping):
        raise ValueError("RETRY must be configured through RETRY__* keys")
    trace_id = payload.get("trace_id")
    return Settings(
        retry_attempts=_attempts(retry.get("attempts", Settings.retry_attempts)),
        retry_delay=_delay(retry.get("delay", Settings.retry_delay)),
        retry_on=_kinds(retry.get("on", ",".join(sorted(kind.value for kind in DEFAULT_RETRY_ON)))),
        trace_id=None if trace_id is None else str(trace_id),
    )


def _attempts(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"RETRY__ATTEMPTS must be an integer >= 1, got {value!r}")
    return value


def _delay(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value) or value < 0:
        raise ValueError(f"RETRY__DELAY must be a finite number >= 0, got {value!r}")
    return float(value)


def _kinds(value: object) -> frozenset[ErrorKind]:
    if value is None:
        return frozenset()
    if not isinstance(value, str):
        raise ValueError(f"RETRY__ON must list error kinds, got {value!r}")
    return frozenset(ErrorKind(part.strip().lower()) for part in value.split(",") if part.strip())


__all__ = ["DEFAULT_RETRY_ON", "ENV_PREFIX", "Settings", "load_settings"]
