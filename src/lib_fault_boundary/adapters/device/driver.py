"""Simulated device driver.

Purpose
-------
Stand in for a vendor device driver so the device boundary, the CLI ``probe``
command, and the test-suite can exercise every failure path without hardware.
The driver speaks the vendor's failure vocabulary (:class:`DeviceError` and its
subclasses) and returns ``None`` from :meth:`SimulatedHandle.pending_events`
when nothing is queued, just like the drivers it imitates.

Contents
--------
* :class:`DeviceError` family – ``ResponseTimeout``, ``Unlocked``,
  ``GenericDeviceError``, ``DeviceBusy``, ``CommandRejected``.
* :class:`SimulatedDriver` – implements
  :class:`~lib_fault_boundary.application.ports.DeviceDriver`.
* :class:`SimulatedHandle` – implements
  :class:`~lib_fault_boundary.application.ports.DeviceHandle`.
"""

from __future__ import annotations

import threading
from collections import deque
from typing import Iterable, Mapping, Sequence

IDENTITY_COMMAND = "*IDN?"
DEFAULT_IDENTITY = "SIMULATED,DEVICE,0,1.0"


class DeviceError(Exception):
    """Base class for driver failures."""


class ResponseTimeout(DeviceError):
    """The device did not answer within the driver's deadline."""


class Unlocked(DeviceError):
    """The device is not locked for this client."""


class GenericDeviceError(DeviceError):
    """Unspecified driver failure."""


class DeviceBusy(DeviceError):
    """The device is executing another command."""


class CommandRejected(DeviceError):
    """The device refused the command."""


class SimulatedHandle:
    """Open connection to a :class:`SimulatedDriver`."""

    def __init__(self, driver: SimulatedDriver) -> None:
        self._driver = driver
        self.closed = False

    def query(self, command: str) -> str:
        if self.closed:
            raise GenericDeviceError("connection closed")
        return self._driver._answer(command)

    def pending_events(self) -> Sequence[str] | None:
        if self.closed:
            raise GenericDeviceError("connection closed")
        return self._driver._drain_events()

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._driver._release(self)


class SimulatedDriver:
    """In-memory device stub used for tests, demos, and offline development.

    Parameters
    ----------
    responses:
        Replies keyed by command. ``*IDN?`` answers :data:`DEFAULT_IDENTITY`
        unless overridden.
    open_failures:
        Failures raised by successive :meth:`open` calls before one succeeds.
    close_failure:
        Failure raised by every handle ``close`` (after the handle is released).
    events:
        Initially queued events.
    busy:
        When ``True`` every query raises :class:`DeviceBusy`.

    Examples
    --------
    >>> driver = SimulatedDriver(open_failures=[Unlocked("held by another client")])
    >>> try:
    ...     driver.open()
    ... except Unlocked as exc:
    ...     print(exc)
    held by another client
    >>> handle = driver.open()
    >>> handle.query("*IDN?")
    'SIMULATED,DEVICE,0,1.0'
    >>> handle.pending_events() is None
    True
    >>> handle.close()
    >>> driver.open_handles
    0
    """

    def __init__(
        self,
        *,
        responses: Mapping[str, str] | None = None,
        open_failures: Iterable[BaseException] = (),
        close_failure: BaseException | None = None,
        events: Iterable[str] = (),
        busy: bool = False,
    ) -> None:
        self._responses = {IDENTITY_COMMAND: DEFAULT_IDENTITY, **dict(responses or {})}
        self._open_failures = deque(open_failures)
        self._close_failure = close_failure
        self._events = deque(events)
        self._handles: list[SimulatedHandle] = []
        self._lock = threading.Lock()
        self.busy = busy
        self.open_calls = 0
        self.queries: list[str] = []

    @property
    def open_handles(self) -> int:
        with self._lock:
            return len(self._handles)

    def push_event(self, event: str) -> None:
        with self._lock:
            self._events.append(event)

    def open(self) -> SimulatedHandle:
        with self._lock:
            self.open_calls += 1
            if self._open_failures:
                raise self._open_failures.popleft()
            handle = SimulatedHandle(self)
            self._handles.append(handle)
            return handle

    def _answer(self, command: str) -> str:
        with self._lock:
            self.queries.append(command)
            if self.busy:
                raise DeviceBusy(f"device busy, cannot run {command!r}")
            try:
                return self._responses[command]
            except KeyError:
                raise CommandRejected(f"unknown command {command!r}") from None

    def _drain_events(self) -> Sequence[str] | None:
        with self._lock:
            if not self._events:
                return None
            drained = list(self._events)
            self._events.clear()
            return drained

    def _release(self, handle: SimulatedHandle) -> None:
        with self._lock:
            if handle in self._handles:
                self._handles.remove(handle)
        if self._close_failure is not None:
            raise self._close_failure


__all__ = [
    "CommandRejected",
    "DEFAULT_IDENTITY",
    "DeviceBusy",
    "DeviceError",
    "GenericDeviceError",
    "IDENTITY_COMMAND",
    "ResponseTimeout",
    "SimulatedDriver",
    "SimulatedHandle",
    "Unlocked",
]
