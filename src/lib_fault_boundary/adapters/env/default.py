"""Environment variable adapter.

Purpose
-------
Translate process environment variables into nested dictionaries consumed by
:func:`lib_fault_boundary.settings.load_settings`.

Key behaviours
--------------
* Enforces a prefix (``default_env_prefix``) so only relevant keys are captured.
* Supports ``__`` as a nesting delimiter (``RETRY__ATTEMPTS`` -> ``{"retry": {"attempts": ...}}``).
* Performs light type coercion for common scalar types (bools, ints, floats,
  ``null``/``none``).
* Raises ``ValueError`` when a key would turn a scalar into a mapping; settings
  translate it like any other collaborator failure.
"""

from __future__ import annotations

import os
from typing import Collection, Mapping

from ...observability import log_debug


def default_env_prefix(slug: str) -> str:
    """Return the canonical environment prefix for *slug*.

    Examples
    --------
    >>> default_env_prefix('lib-fault-boundary')
    'LIB_FAULT_BOUNDARY'
    """

    return slug.replace("-", "_").upper()


class DefaultEnvLoader:
    """Load environment variables that belong to one namespace."""

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        """Initialise the loader with a specific ``environ`` mapping for testability."""

        self._environ = os.environ if environ is None else environ

    def load(self, prefix: str, *, verbatim: Collection[str] = ()) -> dict[str, object]:
        """Return a nested mapping containing variables with the supplied *prefix*.

        Keys are stored in lowercase. Keys named in *verbatim* (without the
        prefix, case-insensitive) keep their raw string value instead of being
        coerced; identifiers such as ``TRACE_ID=007`` must not turn into numbers.

        Examples
        --------
        >>> env = {
        ...     'DEMO_RETRY__ATTEMPTS': '5',
        ...     'DEMO_RETRY__DELAY': '0.5',
        ... }
        >>> payload = DefaultEnvLoader(environ=env).load('DEMO')
        >>> payload['retry']['attempts'], payload['retry']['delay']
        (5, 0.5)
        >>> DefaultEnvLoader(environ={"DEMO_TRACE_ID": "007"}).load("DEMO", verbatim=["TRACE_ID"])
        {'trace_id': '007'}
        """

        prefix = f"{prefix}_" if prefix and not prefix.endswith("_") else prefix
        raw_keys = {key.upper() for key in verbatim}
        collected: dict[str, object] = {}
        for key, value in self._environ.items():
            if prefix and not key.startswith(prefix):
                continue
            stripped = key[len(prefix) :] if prefix else key
            if not stripped:
                continue
            assign_nested(collected, stripped, value if stripped.upper() in raw_keys else _coerce(value))
        log_debug("env_variables_loaded", operation="load_settings", kind=None, keys=sorted(collected.keys()))
        return collected


def assign_nested(target: dict[str, object], key: str, value: object) -> None:
    """Assign ``value`` inside ``target`` using ``__`` as a nesting delimiter.

    Examples
    --------
    >>> data: dict[str, object] = {}
    >>> assign_nested(data, 'RETRY__ATTEMPTS', 5)
    >>> data
    {'retry': {'attempts': 5}}
    """

    parts = key.split("__")
    cursor = target
    for part in parts[:-1]:
        cursor = _ensure_child_mapping(cursor, part)
    cursor[_resolve_key(cursor, parts[-1])] = value


def _resolve_key(mapping: dict[str, object], key: str) -> str:
    """Return an existing key that matches ``key`` (case-insensitive) or a new lowercase key."""

    lower = key.lower()
    for existing in mapping.keys():
        if existing.lower() == lower:
            return existing
    return lower


def _ensure_child_mapping(mapping: dict[str, object], key: str) -> dict[str, object]:
    """Ensure ``mapping[key]`` is a ``dict``, refusing to replace a scalar."""

    resolved = _resolve_key(mapping, key)
    if resolved not in mapping:
        mapping[resolved] = {}
    child = mapping[resolved]
    if not isinstance(child, dict):
        raise ValueError(f"Cannot override scalar with mapping for key {key}")
    return child


def _coerce(value: str) -> object:
    """Coerce textual environment values to Python primitives where possible.

    Examples
    --------
    >>> _coerce('true'), _coerce('10'), _coerce('3.5'), _coerce('hello')
    (True, 10, 3.5, 'hello')
    """

    lowered = value.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    if lowered in {"null", "none"}:
        return None
    try:
        if value.isdigit() or (value.startswith("-") and value[1:].isdigit()):
            return int(value)
        return float(value)
    except ValueError:
        return value
