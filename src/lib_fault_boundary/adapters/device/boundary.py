"""Device translation boundary.

Purpose
-------
Wrap a :class:`~lib_fault_boundary.application.ports.DeviceDriver` so that the
driver's whole failure family collapses onto the shared taxonomy. Three
unrelated driver failures raised while opening a device (``ResponseTimeout``,
``Unlocked``, ``GenericDeviceError``) all mean the same thing to a caller: the
device cannot be used right now.

Contents
--------
* :data:`DEVICE_FAILURES` – failure table for the driver family.
* :class:`DeviceBoundary` – opens sessions.
* :class:`DeviceSession` – boundary-wrapped handle.
"""

from __future__ import annotations

from typing import Any, ContextManager, Mapping

from ...application.boundary import TranslationBoundary, translated
from ...application.ports import DeviceDriver, DeviceHandle, ErrorSink
from ...application.translate import DEFAULT_FAILURES
from ...domain.errors import ErrorKind
from ...domain.special_case import EMPTY_EVENTS
from .driver import CommandRejected, DeviceError

DEVICE_FAILURES = DEFAULT_FAILURES.extend(
    {
        DeviceError: ErrorKind.DEVICE_UNAVAILABLE,
        CommandRejected: ErrorKind.INVALID_ARGUMENT,
    }
)
"""Driver failures mapped onto the shared taxonomy."""


class DeviceBoundary(TranslationBoundary):
    """Open translated sessions on a device driver.

    Examples
    --------
    >>> from lib_fault_boundary.adapters.device.driver import SimulatedDriver, Unlocked
    >>> boundary = DeviceBoundary(SimulatedDriver(open_failures=[Unlocked("locked")]))
    >>> try:
    ...     boundary.open()
    ... except Exception as error:
    ...     print(error.kind.value, error.operation)
    device_unavailable open
    >>> with boundary.session() as session:
    ...     session.query("*IDN?")
    'SIMULATED,DEVICE,0,1.0'
    """

    def __init__(
        self,
        driver: DeviceDriver,
        *,
        failures: Mapping[type, ErrorKind] | None = None,
        sink: ErrorSink | None = None,
    ) -> None:
        super().__init__(DEVICE_FAILURES.extend(failures) if failures else DEVICE_FAILURES, sink=sink)
        self.require("configure", driver=driver)
        self._driver = driver

    @translated("open")
    def open(self) -> DeviceSession:
        """Connect to the device and return a session the caller must close."""

        return DeviceSession(self, self._driver.open())

    def session(self) -> ContextManager[DeviceSession]:
        """Open a session bound to the ``with`` block; it is closed on every exit path."""

        return self.scoped("session", self.open)


class DeviceSession:
    """A device connection whose operations raise only translated errors."""

    def __init__(self, boundary: DeviceBoundary, handle: DeviceHandle) -> None:
        self._boundary = boundary
        self._handle = handle
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def translating(self, operation: str) -> ContextManager[None]:
        return self._boundary.translating(operation)

    @translated("query")
    def query(self, command: str) -> str:
        """Send *command* and return the reply.

        An absent or blank command is rejected with ``INVALID_ARGUMENT``
        before the driver sees it.
        """

        self._boundary.require("query", command=command)
        self._ensure_open("query")
        return self._handle.query(command)

    @translated("pending_events")
    def pending_events(self) -> tuple[str, ...]:
        """Drain queued events; :data:`EMPTY_EVENTS` when nothing is queued."""

        self._ensure_open("pending_events")
        events = self._handle.pending_events()
        if events is None:
            return EMPTY_EVENTS
        return tuple(events)

    def close(self) -> None:
        """Release the connection. Calling it again is a no-op."""

        if self._closed:
            return
        self._closed = True
        with self.translating("close"):
            self._handle.close()

    def __enter__(self) -> DeviceSession:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if exc_type is None:
            self.close()
        else:
            self._boundary._release_quietly("close", DeviceSession.close, self)

    def _ensure_open(self, operation: str) -> None:
        if self._closed:
            raise self._boundary.fail(operation, ErrorKind.DEVICE_UNAVAILABLE, "session is closed")


__all__ = ["DEVICE_FAILURES", "DeviceBoundary", "DeviceSession"]
