"""Structured document readers.

Purpose
-------
Implement the :class:`~lib_fault_boundary.application.ports.DocumentReader`
port against the filesystem. Readers are small wrappers around
``tomllib``/``json``/``yaml.safe_load`` and deliberately speak their own failure
vocabulary (``OSError`` family, decoder errors, :class:`DocumentFormatError`);
translation is the section store boundary's job.

Contents
--------
* :class:`DocumentFormatError` – parsed content is not a mapping.
* :class:`UnsupportedFormat` – no parser for the file suffix.
* :class:`DocumentFile` – open handle returned by the reader.
* :class:`StructuredDocumentReader` – suffix-dispatching reader.
* :data:`SUPPORTED_SUFFIXES` – suffixes with a registered parser.

System Role
-----------
Wrapped by :class:`lib_fault_boundary.adapters.file_store.boundary.FileSectionStore`.
An empty YAML or JSON ``null`` document yields ``None``; the boundary decides
what that absence means.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import IO, Any, Callable, Mapping

try:  # Python >= 3.11
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for <3.11
    import tomli as tomllib  # type: ignore[no-redef]

import yaml

from ...observability import log_debug


class DocumentFormatError(ValueError):
    """Raised when a document parses but does not produce a mapping."""


class UnsupportedFormat(ValueError):
    """Raised when no parser is registered for a file suffix."""


def _parse_toml(payload: bytes) -> Any:
    return tomllib.loads(payload.decode("utf-8"))


def _parse_json(payload: bytes) -> Any:
    return json.loads(payload)


def _parse_yaml(payload: bytes) -> Any:
    return yaml.safe_load(payload)


_PARSERS: dict[str, Callable[[bytes], Any]] = {
    ".toml": _parse_toml,
    ".json": _parse_json,
    ".yaml": _parse_yaml,
    ".yml": _parse_yaml,
}

SUPPORTED_SUFFIXES: tuple[str, ...] = tuple(_PARSERS)


class DocumentFile:
    """Open document handle; :meth:`close` must be called exactly once by the owner."""

    def __init__(self, path: str, stream: IO[bytes], parser: Callable[[bytes], Any]) -> None:
        self.path = path
        self._stream = stream
        self._parser = parser

    @property
    def closed(self) -> bool:
        return self._stream.closed

    def read(self) -> Mapping[str, Any] | None:
        """Parse the document, returning ``None`` when it holds no content.

        Raises
        ------
        DocumentFormatError
            When the document parses to something other than a mapping.
        """

        payload = self._stream.read()
        log_debug("document_read", operation="read", kind=None, path=self.path, size=len(payload))
        data = self._parser(payload)
        if data is None:
            return None
        if not isinstance(data, Mapping):
            raise DocumentFormatError(f"File {self.path} did not produce a mapping")
        return data

    def close(self) -> None:
        self._stream.close()


class StructuredDocumentReader:
    """Open TOML, JSON, and YAML documents by suffix.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> path = Path(tmp.name) / "store.toml"
    >>> _ = path.write_text('[db]\\nport = 5432\\n', encoding="utf-8")
    >>> handle = StructuredDocumentReader().open(str(path))
    >>> handle.read()["db"]["port"]
    5432
    >>> handle.close()
    >>> tmp.cleanup()
    """

    @staticmethod
    def supports(path: str) -> bool:
        """Return ``True`` when a parser is registered for *path*'s suffix."""

        return Path(path).suffix.lower() in _PARSERS

    def open(self, path: str) -> DocumentFile:
        """Open *path* for reading.

        Raises
        ------
        UnsupportedFormat
            When the suffix has no parser.
        OSError
            Propagated unchanged from the filesystem (``FileNotFoundError``,
            ``PermissionError``, ``IsADirectoryError``...).
        """

        parser = _PARSERS.get(Path(path).suffix.lower())
        if parser is None:
            raise UnsupportedFormat(f"No parser registered for {path}")
        stream = open(path, "rb")
        return DocumentFile(path, stream, parser)


__all__ = [
    "DocumentFile",
    "DocumentFormatError",
    "StructuredDocumentReader",
    "SUPPORTED_SUFFIXES",
    "UnsupportedFormat",
]
