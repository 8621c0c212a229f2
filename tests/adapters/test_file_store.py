"""Section store boundary tests.

Cover the three outcome channels separately: well-formed results (including the
empty special case), translated failures, and early input rejection.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from lib_fault_boundary.adapters.file_store.boundary import FileSectionStore
from lib_fault_boundary.adapters.file_store.documents import DocumentFormatError, UnsupportedFormat
from lib_fault_boundary.domain.errors import ErrorKind, TranslatedError
from lib_fault_boundary.domain.section import Section
from lib_fault_boundary.domain.special_case import EMPTY_SECTIONS
from lib_fault_boundary.testing import RecordingSink, ScriptedDocumentReader
from tests.support import DocumentSandbox

PAYLOAD = {"db": {"host": "localhost", "port": 5432}, "cache": {"enabled": True}}


@pytest.fixture()
def sandbox(tmp_path: Path) -> DocumentSandbox:
    return DocumentSandbox(tmp_path)


@pytest.mark.parametrize("name", ["store.toml", "store.json", "store.yaml", "store.yml"])
def test_lists_and_retrieves_sections_in_every_format(sandbox: DocumentSandbox, name: str) -> None:
    store = FileSectionStore(sandbox.write_mapping(name, PAYLOAD))
    store.open()
    assert sorted(store.list_sections()) == ["cache", "db"]
    section = store.retrieve_section("db")
    assert isinstance(section, Section)
    assert section.name == "db"
    assert section["port"] == 5432


def test_sections_keep_document_order_and_skip_scalars(sandbox: DocumentSandbox) -> None:
    path = sandbox.write("store.toml", 'title = "demo"\n[zeta]\na = 1\n[alpha]\n')
    assert FileSectionStore(path).list_sections() == ("zeta", "alpha")


def test_retrieve_missing_file_is_not_found(tmp_path: Path) -> None:
    sink = RecordingSink()
    store = FileSectionStore(tmp_path / "missing.toml", sink=sink)
    with pytest.raises(TranslatedError) as info:
        store.retrieve_section("invalid - file")
    error = info.value
    assert error.kind is ErrorKind.NOT_FOUND
    assert error.operation == "retrieve_section"
    assert isinstance(error.cause, FileNotFoundError)
    assert error.__cause__ is error.cause
    assert sink.errors == [error]


def test_list_sections_on_missing_file_is_still_a_failure(tmp_path: Path) -> None:
    with pytest.raises(TranslatedError) as info:
        FileSectionStore(tmp_path / "missing.json").list_sections()
    assert info.value.kind is ErrorKind.NOT_FOUND
    assert info.value.operation == "list_sections"


@pytest.mark.parametrize(
    ("name", "content"),
    [
        ("empty.toml", ""),
        ("empty.json", "{}"),
        ("null.json", "null"),
        ("empty.yaml", "# nothing here\n"),
        ("scalars.toml", 'title = "demo"\n'),
    ],
)
def test_empty_store_lists_special_case(sandbox: DocumentSandbox, name: str, content: str) -> None:
    sections = FileSectionStore(sandbox.write(name, content)).list_sections()
    assert sections == EMPTY_SECTIONS
    assert sections is not None
    assert len(sections) == 0


def test_empty_yaml_uses_special_case_instance(sandbox: DocumentSandbox) -> None:
    assert FileSectionStore(sandbox.write("empty.yaml", "")).list_sections() is EMPTY_SECTIONS


def test_present_but_empty_section_is_valid(sandbox: DocumentSandbox) -> None:
    toml_store = FileSectionStore(sandbox.write("store.toml", "[cache]\n"))
    yaml_store = FileSectionStore(sandbox.write("store.yaml", "cache:\n"))
    assert len(toml_store.retrieve_section("cache")) == 0
    assert len(yaml_store.retrieve_section("cache")) == 0
    assert yaml_store.list_sections() == ("cache",)


def test_missing_section_is_not_found(sandbox: DocumentSandbox) -> None:
    store = FileSectionStore(sandbox.write_mapping("store.toml", PAYLOAD))
    with pytest.raises(TranslatedError) as info:
        store.retrieve_section("queue")
    assert info.value.kind is ErrorKind.NOT_FOUND
    assert info.value.cause is None


def test_missing_section_in_empty_document_is_not_found(sandbox: DocumentSandbox) -> None:
    with pytest.raises(TranslatedError) as info:
        FileSectionStore(sandbox.write("empty.yaml", "")).retrieve_section("db")
    assert info.value.kind is ErrorKind.NOT_FOUND


def test_scalar_key_is_not_a_section(sandbox: DocumentSandbox) -> None:
    store = FileSectionStore(sandbox.write("store.toml", 'title = "demo"\n'))
    with pytest.raises(TranslatedError) as info:
        store.retrieve_section("title")
    assert info.value.kind is ErrorKind.STORAGE_FAILURE


@pytest.mark.parametrize(
    ("name", "content"),
    [
        ("broken.toml", "[db\nport = "),
        ("broken.json", "{invalid}"),
        ("broken.yaml", "db: [unclosed"),
        ("list.json", "[1, 2]"),
    ],
)
def test_unreadable_content_is_storage_failure(sandbox: DocumentSandbox, name: str, content: str) -> None:
    store = FileSectionStore(sandbox.write(name, content))
    for call in (store.open, store.list_sections, lambda: store.retrieve_section("db")):
        with pytest.raises(TranslatedError) as info:
            call()
        assert info.value.kind is ErrorKind.STORAGE_FAILURE


def test_invalid_utf8_toml_is_storage_failure(tmp_path: Path) -> None:
    path = tmp_path / "store.toml"
    path.write_bytes(b"\xff\xfe[db]")
    with pytest.raises(TranslatedError) as info:
        FileSectionStore(path).list_sections()
    assert info.value.kind is ErrorKind.STORAGE_FAILURE
    assert isinstance(info.value.cause, UnicodeDecodeError)


def test_directory_path_is_storage_failure(tmp_path: Path) -> None:
    directory = tmp_path / "store.toml"
    directory.mkdir()
    with pytest.raises(TranslatedError) as info:
        FileSectionStore(directory).list_sections()
    assert info.value.kind is ErrorKind.STORAGE_FAILURE


@pytest.mark.parametrize("path", [None, "", "   "])
def test_absent_path_is_rejected_at_construction(path: object) -> None:
    with pytest.raises(TranslatedError) as info:
        FileSectionStore(path)  # type: ignore[arg-type]
    assert info.value.kind is ErrorKind.INVALID_ARGUMENT


def test_unsupported_suffix_is_rejected_at_construction(tmp_path: Path) -> None:
    with pytest.raises(TranslatedError) as info:
        FileSectionStore(tmp_path / "store.ini")
    assert info.value.kind is ErrorKind.INVALID_ARGUMENT
    assert info.value.operation == "configure"


@pytest.mark.parametrize("name", [None, "", "  "])
def test_absent_section_name_never_touches_the_reader(name: object) -> None:
    reader = ScriptedDocumentReader({"db": {}})
    store = FileSectionStore("store.toml", reader=reader)
    with pytest.raises(TranslatedError) as info:
        store.retrieve_section(name)  # type: ignore[arg-type]
    assert info.value.kind is ErrorKind.INVALID_ARGUMENT
    assert reader.paths == []


@pytest.mark.parametrize(
    ("failure", "kind"),
    [
        (FileNotFoundError("gone"), ErrorKind.NOT_FOUND),
        (PermissionError("denied"), ErrorKind.PERMISSION_DENIED),
        (IsADirectoryError("dir"), ErrorKind.STORAGE_FAILURE),
        (TimeoutError("nfs stalled"), ErrorKind.TIMEOUT),
        (json.JSONDecodeError("bad", "{", 0), ErrorKind.STORAGE_FAILURE),
        (yaml.YAMLError("bad"), ErrorKind.STORAGE_FAILURE),
        (UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte"), ErrorKind.STORAGE_FAILURE),
        (DocumentFormatError("not a mapping"), ErrorKind.STORAGE_FAILURE),
        (UnsupportedFormat("ini"), ErrorKind.INVALID_ARGUMENT),
        (RuntimeError("vendor bug"), ErrorKind.UNKNOWN),
        (KeyError("internal"), ErrorKind.UNKNOWN),
    ],
)
@pytest.mark.parametrize("step", ["open", "read"])
def test_no_collaborator_failure_leaks(failure: BaseException, kind: ErrorKind, step: str) -> None:
    reader = ScriptedDocumentReader({"db": {}}, **{f"{step}_failure": failure})
    store = FileSectionStore("store.toml", reader=reader)
    operations = {
        "open": store.open,
        "list_sections": store.list_sections,
        "retrieve_section": lambda: store.retrieve_section("db"),
    }
    for operation, call in operations.items():
        with pytest.raises(TranslatedError) as info:
            call()
        assert info.value.kind is kind
        assert info.value.operation == operation
        assert info.value.cause is failure
    assert reader.open_handles == 0


def test_handle_released_after_success() -> None:
    reader = ScriptedDocumentReader({"db": {"port": 1}})
    store = FileSectionStore("store.toml", reader=reader)
    store.list_sections()
    store.retrieve_section("db")
    assert reader.opens == 2
    assert reader.closes == 2


def test_handle_released_after_translated_error() -> None:
    reader = ScriptedDocumentReader({"db": {"port": 1}})
    store = FileSectionStore("store.toml", reader=reader)
    with pytest.raises(TranslatedError):
        store.retrieve_section("queue")
    assert reader.open_handles == 0


def test_close_failure_after_success_is_translated() -> None:
    reader = ScriptedDocumentReader({"db": {}}, close_failure=OSError("flush failed"))
    with pytest.raises(TranslatedError) as info:
        FileSectionStore("store.toml", reader=reader).list_sections()
    assert info.value.kind is ErrorKind.STORAGE_FAILURE
    assert reader.closes == 1


def test_read_failure_wins_over_close_failure() -> None:
    reader = ScriptedDocumentReader(
        {"db": {}},
        read_failure=PermissionError("denied"),
        close_failure=OSError("flush failed"),
    )
    with pytest.raises(TranslatedError) as info:
        FileSectionStore("store.toml", reader=reader).list_sections()
    assert info.value.kind is ErrorKind.PERMISSION_DENIED
    assert reader.closes == 1


def test_caller_supplied_failures_extend_the_table() -> None:
    class QuotaExceeded(Exception):
        pass

    reader = ScriptedDocumentReader(open_failure=QuotaExceeded("quota"))
    store = FileSectionStore("store.toml", reader=reader, failures={QuotaExceeded: ErrorKind.PERMISSION_DENIED})
    with pytest.raises(TranslatedError) as info:
        store.list_sections()
    assert info.value.kind is ErrorKind.PERMISSION_DENIED


def test_real_file_handles_are_closed(sandbox: DocumentSandbox, monkeypatch: pytest.MonkeyPatch) -> None:
    from lib_fault_boundary.adapters.file_store import documents

    opened: list[documents.DocumentFile] = []
    original_open = documents.StructuredDocumentReader.open

    def tracking_open(self: documents.StructuredDocumentReader, path: str) -> documents.DocumentFile:
        handle = original_open(self, path)
        opened.append(handle)
        return handle

    monkeypatch.setattr(documents.StructuredDocumentReader, "open", tracking_open)
    store = FileSectionStore(sandbox.write("broken.json", "{invalid}"))
    with pytest.raises(TranslatedError):
        store.list_sections()
    assert opened and all(handle.closed for handle in opened)
