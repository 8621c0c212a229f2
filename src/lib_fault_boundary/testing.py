"""Test doubles for boundary consumers.

Purpose
    Let applications exercise every failure path of the bundled boundaries
    without touching disks or devices, and let the CLI demonstrate how an
    untranslated failure is rendered.

Contents
    - ``ScriptedDocumentReader`` / ``ScriptedDocument``: document reader double
      that returns a fixed payload or raises a scripted failure, recording
      every open and close.
    - ``RecordingSink``: diagnostics sink collecting translated errors.
    - ``FAILURE_MESSAGE`` / ``i_should_fail``: deterministic untranslated
      failure used by the CLI ``fail`` command.
"""

from __future__ import annotations

from typing import Any, Final, Mapping

from .domain.errors import TranslatedError

FAILURE_MESSAGE: Final[str] = "i should fail"


class ScriptedDocument:
    """Handle returned by :class:`ScriptedDocumentReader`."""

    def __init__(self, reader: ScriptedDocumentReader) -> None:
        self._reader = reader
        self.closed = False

    def read(self) -> Mapping[str, Any] | None:
        self._reader.reads += 1
        if self._reader.read_failure is not None:
            raise self._reader.read_failure
        return self._reader.document

    def close(self) -> None:
        self.closed = True
        self._reader.closes += 1
        if self._reader.close_failure is not None:
            raise self._reader.close_failure


class ScriptedDocumentReader:
    """Document reader double.

    Parameters
    ----------
    document:
        Payload returned by ``read`` (``None`` imitates an empty document).
    open_failure / read_failure / close_failure:
        Failures raised by the respective step.

    Examples
    --------
    >>> reader = ScriptedDocumentReader({"db": {"port": 1}})
    >>> handle = reader.open("store.toml")
    >>> handle.read()["db"]["port"]
    1
    >>> handle.close()
    >>> reader.opens, reader.closes
    (1, 1)
    """

    def __init__(
        self,
        document: Mapping[str, Any] | None = None,
        *,
        open_failure: BaseException | None = None,
        read_failure: BaseException | None = None,
        close_failure: BaseException | None = None,
    ) -> None:
        self.document = document
        self.open_failure = open_failure
        self.read_failure = read_failure
        self.close_failure = close_failure
        self.opens = 0
        self.reads = 0
        self.closes = 0
        self.paths: list[str] = []

    @property
    def open_handles(self) -> int:
        return self.opens - self.closes

    def open(self, path: str) -> ScriptedDocument:
        self.paths.append(path)
        if self.open_failure is not None:
            raise self.open_failure
        self.opens += 1
        return ScriptedDocument(self)


class RecordingSink:
    """Diagnostics sink that keeps every translated error it receives."""

    def __init__(self) -> None:
        self.errors: list[TranslatedError] = []

    def __call__(self, error: TranslatedError) -> None:
        self.errors.append(error)

    @property
    def kinds(self) -> list[str]:
        return [error.kind.value for error in self.errors]


def i_should_fail() -> None:
    """Raise an untranslated :class:`RuntimeError` carrying :data:`FAILURE_MESSAGE`.

    Used by the CLI ``fail`` command to show how failures that never crossed a
    boundary are reported (generic exit handling instead of a kind-specific
    exit code).

    Examples
    --------
    >>> i_should_fail()
    Traceback (most recent call last):
    ...
    RuntimeError: i should fail
    """

    raise RuntimeError(FAILURE_MESSAGE)


__all__ = [
    "FAILURE_MESSAGE",
    "RecordingSink",
    "ScriptedDocument",
    "ScriptedDocumentReader",
    "i_should_fail",
]
