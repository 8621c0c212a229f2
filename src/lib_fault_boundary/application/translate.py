"""Failure-to-kind mapping policy.

Purpose
-------
Turn an arbitrary collaborator failure into exactly one
:class:`~lib_fault_boundary.domain.errors.TranslatedError`. The mapping is pure
(no I/O, no logging) so boundaries, tests, and callers can reuse it freely.

Contents
    - ``FailureTable``: immutable mapping from exception classes to kinds with
      MRO-aware lookup.
    - ``DEFAULT_FAILURES``: table covering the built-in OS failure vocabulary.
    - ``translate``: public entry point used by every boundary.

System Role
-----------
Sits between the domain taxonomy and the boundary base class. Totality is
guaranteed here: unmapped failures become ``ErrorKind.UNKNOWN`` rather than
escaping in their raw collaborator shape.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from ..domain.errors import ErrorKind, TranslatedError


class FailureTable(Mapping[type, ErrorKind]):
    """Immutable failure-category table.

    Why
    ----
    Collaborator failure hierarchies churn; keying on classes and walking the
    MRO lets a new subclass inherit its parent's kind without touching callers.

    Examples
    --------
    >>> table = FailureTable({OSError: ErrorKind.STORAGE_FAILURE, FileNotFoundError: ErrorKind.NOT_FOUND})
    >>> table.kind_for(FileNotFoundError("x"))
    <ErrorKind.NOT_FOUND: 'not_found'>
    >>> table.kind_for(IsADirectoryError("x"))
    <ErrorKind.STORAGE_FAILURE: 'storage_failure'>
    >>> table.kind_for(ValueError("x"))
    <ErrorKind.UNKNOWN: 'unknown'>
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[type, ErrorKind | str] | None = None) -> None:
        resolved: dict[type, ErrorKind] = {}
        for failure_type, kind in (entries or {}).items():
            if not (isinstance(failure_type, type) and issubclass(failure_type, BaseException)):
                raise TypeError(f"Failure table keys must be exception classes, got {failure_type!r}")
            resolved[failure_type] = ErrorKind(kind)
        self._entries = MappingProxyType(resolved)

    def __getitem__(self, failure_type: type) -> ErrorKind:
        return self._entries[failure_type]

    def __iter__(self) -> Iterator[type]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        body = ", ".join(f"{cls.__name__}: {kind.value}" for cls, kind in self._entries.items())
        return f"FailureTable({{{body}}})"

    def kind_for(self, failure: BaseException) -> ErrorKind:
        """Return the kind registered for the most specific class in *failure*'s MRO."""

        for klass in type(failure).__mro__:
            kind = self._entries.get(klass)
            if kind is not None:
                return kind
        return ErrorKind.UNKNOWN

    def extend(self, overrides: Mapping[type, ErrorKind | str]) -> FailureTable:
        """Return a new table with *overrides* layered over the current entries.

        Examples
        --------
        >>> base = FailureTable({OSError: ErrorKind.STORAGE_FAILURE})
        >>> widened = base.extend({KeyError: ErrorKind.NOT_FOUND})
        >>> len(base), len(widened)
        (1, 2)
        """

        merged: dict[type, ErrorKind | str] = dict(self._entries)
        merged.update(overrides)
        return FailureTable(merged)


DEFAULT_FAILURES = FailureTable(
    {
        OSError: ErrorKind.STORAGE_FAILURE,
        FileNotFoundError: ErrorKind.NOT_FOUND,
        NotADirectoryError: ErrorKind.NOT_FOUND,
        PermissionError: ErrorKind.PERMISSION_DENIED,
        TimeoutError: ErrorKind.TIMEOUT,
    }
)
"""Built-in OS failure vocabulary shared by file-backed boundaries."""


def translate(
    operation: str,
    failure: BaseException,
    table: Mapping[type, ErrorKind] | None = None,
) -> TranslatedError:
    """Map *failure* to a :class:`TranslatedError` for *operation*.

    Why
    ----
    Every boundary funnels failures through one total function so no raw
    collaborator type ever reaches a caller.

    What
    ----
    Looks up the kind in *table* (defaults to :data:`DEFAULT_FAILURES`), builds a
    message from the failure text, and attaches the failure as ``cause``. An
    already translated error is returned unchanged.

    Examples
    --------
    >>> error = translate("retrieve_section", FileNotFoundError(2, "No such file", "store.toml"))
    >>> error.kind.value, error.operation
    ('not_found', 'retrieve_section')
    >>> translate("open", RuntimeError("boom")).kind
    <ErrorKind.UNKNOWN: 'unknown'>
    """

    if isinstance(failure, TranslatedError):
        return failure
    kind = _as_table(table).kind_for(failure)
    return TranslatedError(kind, operation, _describe(failure), cause=failure)


def _as_table(table: Mapping[type, ErrorKind] | None) -> FailureTable:
    """Normalise *table* into a :class:`FailureTable` (``None`` means defaults)."""

    if table is None:
        return DEFAULT_FAILURES
    if isinstance(table, FailureTable):
        return table
    return FailureTable(table)


def _describe(failure: BaseException) -> str:
    """Return a short human-readable description of *failure*."""

    text = str(failure).strip()
    name = type(failure).__name__
    return f"{name}: {text}" if text else name


__all__ = ["DEFAULT_FAILURES", "FailureTable", "translate"]
