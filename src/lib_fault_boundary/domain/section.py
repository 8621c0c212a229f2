"""Domain value object for a retrieved document section.

Purpose
-------
Anchor the immutable :class:`Section` returned by section-store boundaries. The
module belongs to the domain layer and performs no I/O.

Contents
--------
* :class:`Section` – ``Mapping`` implementation with dotted lookups, deep
  copies, and JSON export.
* :func:`_deepcopy_mapping` / :func:`_deepcopy_value` – internal helpers that
  clone nested mappings without relying on ``copy.deepcopy`` (which does not
  handle ``mappingproxy`` objects).

System Role
-----------
A present-but-empty section is a valid :class:`Section` with no entries. A
section that does not exist is never represented by an empty instance; the
boundary raises ``NOT_FOUND`` instead.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterator, TypeVar, overload

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Section(Mapping[str, Any]):
    """Immutable mapping holding the entries of one named section.

    Parameters
    ----------
    name:
        Section name as it appears in the document.
    _entries:
        Raw mapping produced by the document reader. It is wrapped in a
        ``mappingproxy`` during initialisation to enforce immutability.

    Examples
    --------
    >>> section = Section("service", {"timeout": 30, "endpoint": {"host": "api.demo"}})
    >>> section.get("endpoint.host")
    'api.demo'
    >>> section["timeout"]
    30
    >>> len(Section("empty", {}))
    0
    """

    name: str
    _entries: Mapping[str, Any]

    def __post_init__(self) -> None:
        object.__setattr__(self, "_entries", MappingProxyType(dict(self._entries)))

    def __getitem__(self, key: str) -> Any:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def as_dict(self) -> dict[str, Any]:
        """Return a deep, mutable ``dict`` copy of the entries.

        Examples
        --------
        >>> section = Section("db", {"hosts": ["a", "b"]})
        >>> clone = section.as_dict()
        >>> clone["hosts"].append("c")
        >>> section.as_dict()["hosts"]
        ['a', 'b']
        """

        return _deepcopy_mapping(self._entries)

    def to_json(self, *, indent: int | None = None) -> str:
        """Serialise the entries to JSON.

        Examples
        --------
        >>> Section("service", {"timeout": 5}).to_json()
        '{"timeout":5}'
        """

        return json.dumps(self.as_dict(), indent=indent, separators=(",", ":"), ensure_ascii=False, default=str)

    @overload
    def get(self, key: str, *, default: T) -> T:  # type: ignore[override]
        ...

    @overload
    def get(self, key: str, *, default: None = ...) -> Any | None:  # type: ignore[override]
        ...

    def get(self, key: str, *, default: Any = None) -> Any:
        """Resolve *key* as a dotted path and return ``default`` when missing.

        Examples
        --------
        >>> Section("service", {"retry": {"attempts": 3}}).get("retry.attempts")
        3
        >>> Section("service", {}).get("retry.attempts", default=1)
        1
        """

        return _resolve_dotted_path(self._entries, key, default)


def _resolve_dotted_path(source: Mapping[str, Any], dotted: str, default: Any) -> Any:
    """Resolve *dotted* within *source*, returning *default* when missing."""

    current: Any = source
    for part in dotted.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return default
        current = current[part]
    return current


def _deepcopy_mapping(mapping: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively clone a mapping so callers receive a mutable copy."""

    return {key: _deepcopy_value(value) for key, value in mapping.items()}


def _deepcopy_value(value: Any) -> Any:
    """Clone nested values while preserving container types where practical.

    Examples
    --------
    >>> _deepcopy_value({"nested": [1, 2]})
    {'nested': [1, 2]}
    >>> _deepcopy_value(("a", "b"))
    ('a', 'b')
    """

    if isinstance(value, Mapping):
        return _deepcopy_mapping(value)
    if isinstance(value, list):
        return [_deepcopy_value(item) for item in value]
    if isinstance(value, (set, tuple)):
        return type(value)(_deepcopy_value(item) for item in value)
    return value


__all__ = ["Section"]
