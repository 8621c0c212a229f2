"""Special-case objects used in place of absent results.

Purpose
-------
Give each operation whose natural "nothing there" outcome would otherwise be a
``None`` sentinel a neutral, fully valid substitute that satisfies the same
result contract. Callers iterate, measure, or index these values exactly like a
real result.

Contents
--------
* :data:`EMPTY_SECTIONS` – neutral result of listing sections.
* :data:`EMPTY_EVENTS` – neutral result of draining device events.
* :func:`or_special_case` – explicit substitution helper.

System Role
-----------
Substitution is reserved for *expected* absence. A failed operation raises
:class:`~lib_fault_boundary.domain.errors.TranslatedError` instead; the two
channels are never mixed.
"""

from __future__ import annotations

from typing import Final, TypeVar

T = TypeVar("T")

EMPTY_SECTIONS: Final[tuple[str, ...]] = ()
"""Result of ``list_sections`` for a valid document without tables."""

EMPTY_EVENTS: Final[tuple[str, ...]] = ()
"""Result of ``pending_events`` when the device has nothing queued."""


def or_special_case(value: T | None, neutral: T) -> T:
    """Return *value* unless the collaborator produced the ``None`` sentinel.

    Why
    ----
    Boundaries declare the substitution once per operation instead of leaving
    callers to guess what ``None`` meant.

    Examples
    --------
    >>> or_special_case(None, EMPTY_SECTIONS)
    ()
    >>> or_special_case(("db",), EMPTY_SECTIONS)
    ('db',)
    >>> or_special_case((), ("fallback",))
    ()
    """

    if value is None:
        return neutral
    return value


__all__ = ["EMPTY_EVENTS", "EMPTY_SECTIONS", "or_special_case"]
