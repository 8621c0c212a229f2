"""Section store translation boundary over structured document files.

Purpose
-------
Expose ``open``/``list_sections``/``retrieve_section`` for a TOML, JSON, or
YAML document while re-expressing every reader failure in the caller's error
taxonomy.

Contents
--------
* :data:`STORE_FAILURES` – failure table for the document reader family.
* :class:`FileSectionStore` – the boundary.

System Role
-----------
This module is the only place that knows which parser exceptions the reader
can raise. Callers see :class:`~lib_fault_boundary.domain.section.Section`,
:data:`~lib_fault_boundary.domain.special_case.EMPTY_SECTIONS`, or a
:class:`~lib_fault_boundary.domain.errors.TranslatedError`.
"""

from __future__ import annotations

import json
from os import PathLike
from typing import Any, Mapping

import yaml

from ...application.boundary import TranslationBoundary
from ...application.ports import DocumentReader, ErrorSink
from ...application.translate import DEFAULT_FAILURES
from ...domain.errors import ErrorKind
from ...domain.section import Section
from ...domain.special_case import EMPTY_SECTIONS
from ...observability import log_debug, make_event
from .documents import DocumentFormatError, StructuredDocumentReader, UnsupportedFormat, tomllib

STORE_FAILURES = DEFAULT_FAILURES.extend(
    {
        tomllib.TOMLDecodeError: ErrorKind.STORAGE_FAILURE,
        json.JSONDecodeError: ErrorKind.STORAGE_FAILURE,
        yaml.YAMLError: ErrorKind.STORAGE_FAILURE,
        UnicodeDecodeError: ErrorKind.STORAGE_FAILURE,
        DocumentFormatError: ErrorKind.STORAGE_FAILURE,
        UnsupportedFormat: ErrorKind.INVALID_ARGUMENT,
    }
)
"""Document reader failures mapped onto the shared taxonomy."""


class FileSectionStore(TranslationBoundary):
    """Read named sections (top-level tables) from one document file.

    Parameters
    ----------
    path:
        Document path. Its suffix selects the parser when the default reader is
        used.
    reader:
        Collaborator implementing :class:`DocumentReader`; defaults to
        :class:`StructuredDocumentReader`.
    failures:
        Extra failure mappings layered over :data:`STORE_FAILURES`.
    sink:
        Optional diagnostics consumer.

    Examples
    --------
    >>> from pathlib import Path
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> path = Path(tmp.name) / "store.toml"
    >>> _ = path.write_text('[db]\\nport = 5432\\n[cache]\\n', encoding="utf-8")
    >>> store = FileSectionStore(path)
    >>> store.list_sections()
    ('db', 'cache')
    >>> store.retrieve_section("db")["port"]
    5432
    >>> tmp.cleanup()
    """

    def __init__(
        self,
        path: str | PathLike[str],
        *,
        reader: DocumentReader | None = None,
        failures: Mapping[type, ErrorKind] | None = None,
        sink: ErrorSink | None = None,
    ) -> None:
        super().__init__(STORE_FAILURES.extend(failures) if failures else STORE_FAILURES, sink=sink)
        self.require("configure", path=path)
        self._path = str(path)
        if reader is None:
            if not StructuredDocumentReader.supports(self._path):
                raise self.fail("configure", ErrorKind.INVALID_ARGUMENT, f"unsupported document format: {self._path}")
            reader = StructuredDocumentReader()
        self._reader = reader

    @property
    def path(self) -> str:
        return self._path

    def open(self) -> None:
        """Verify the document can be opened and parsed; returns nothing on success."""

        self._load("open")

    def list_sections(self) -> tuple[str, ...]:
        """Return section names in document order.

        An empty document or one without tables is a valid store and yields
        :data:`EMPTY_SECTIONS`. A missing file is still ``NOT_FOUND``.
        """

        document = self._load("list_sections")
        if document is None:
            return EMPTY_SECTIONS
        return tuple(str(name) for name, value in document.items() if _is_section(value))

    def retrieve_section(self, name: str) -> Section:
        """Return the section called *name*.

        Raises
        ------
        TranslatedError
            ``INVALID_ARGUMENT`` for an absent or blank name (the file is not
            touched), ``NOT_FOUND`` for a missing file or section,
            ``STORAGE_FAILURE`` for unreadable content or a non-table key.
        """

        operation = "retrieve_section"
        self.require(operation, name=name)
        document = self._load(operation)
        if document is None or name not in document:
            raise self.fail(operation, ErrorKind.NOT_FOUND, f"section {name!r} not found in {self._path}")
        entries = document[name]
        if not _is_section(entries):
            raise self.fail(operation, ErrorKind.STORAGE_FAILURE, f"key {name!r} in {self._path} is not a section")
        section = Section(name, entries or {})
        log_debug("section_retrieved", **make_event(operation, None, {"path": self._path, "keys": len(section)}))
        return section

    def _load(self, operation: str) -> Mapping[str, Any] | None:
        """Open, read, and close the document inside one cleanup scope."""

        with self.scoped(operation, lambda: self._reader.open(self._path)) as handle:
            with self.translating(operation):
                return handle.read()


def _is_section(value: Any) -> bool:
    """Tables count as sections; a bare YAML key (``None``) is an empty one."""

    return value is None or isinstance(value, Mapping)


__all__ = ["FileSectionStore", "STORE_FAILURES"]
