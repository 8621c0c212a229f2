"""Application-layer ports describing collaborator responsibilities.

Purpose
-------
Define the structural contracts that collaborators must satisfy so boundaries
can wrap them without depending on concrete implementations. Every port is
untrusted: methods may raise anything and may return ``None`` where a result was
expected. Boundaries absorb both.

Contents
--------
* :class:`DocumentHandle` / :class:`DocumentReader` – structured document
  access used by section stores.
* :class:`DeviceHandle` / :class:`DeviceDriver` – device access used by device
  boundaries.
* :class:`ErrorSink` – diagnostics consumer receiving translated errors.

System Role
-----------
These protocols enforce Dependency Inversion (DIP). The reference adapters
implement them once against real resources; tests implement them again as
doubles that raise on demand.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..domain.errors import TranslatedError


@runtime_checkable
class DocumentHandle(Protocol):
    """An open structured document.

    Methods
    -------
    :meth:`read`
        Parsed top-level mapping, or ``None`` for an empty document.
    :meth:`close`
        Release the underlying resource.
    """

    def read(self) -> Mapping[str, Any] | None:
        """Return the parsed document or ``None`` when it holds nothing."""

    def close(self) -> None:
        """Release the handle."""


@runtime_checkable
class DocumentReader(Protocol):
    """Open structured documents by path."""

    def open(self, path: str) -> DocumentHandle:
        """Open *path*; raises the collaborator's own failure types."""


@runtime_checkable
class DeviceHandle(Protocol):
    """An open connection to a device."""

    def query(self, command: str) -> str:
        """Send *command* and return the device's reply."""

    def pending_events(self) -> Sequence[str] | None:
        """Drain queued events; ``None`` when nothing is queued."""

    def close(self) -> None:
        """Release the connection."""


@runtime_checkable
class DeviceDriver(Protocol):
    """Factory for device connections."""

    def open(self) -> DeviceHandle:
        """Connect to the device; raises the driver's own failure types."""


class ErrorSink(Protocol):
    """Consumer of translated errors (logging, reporting, metrics)."""

    def __call__(self, error: TranslatedError) -> None:
        """Receive *error*; must not raise."""
