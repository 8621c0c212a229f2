"""Adapter contract tests for the application-layer ports.

Verify the bundled collaborators and test doubles keep satisfying the
protocols in ``lib_fault_boundary.application.ports`` so boundaries can depend
on the ports alone.
"""

from __future__ import annotations

from pathlib import Path

from lib_fault_boundary.adapters.device.driver import SimulatedDriver
from lib_fault_boundary.adapters.file_store.documents import StructuredDocumentReader
from lib_fault_boundary.application import ports
from lib_fault_boundary.testing import ScriptedDocumentReader
from tests.support import ExplodingDriver


def test_structured_reader_contract(tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    path.write_text('{"db": {"port": 1}}', encoding="utf-8")
    reader = StructuredDocumentReader()
    assert isinstance(reader, ports.DocumentReader)
    handle = reader.open(str(path))
    try:
        assert isinstance(handle, ports.DocumentHandle)
        assert handle.read() == {"db": {"port": 1}}
    finally:
        handle.close()
    assert handle.closed


def test_scripted_reader_contract() -> None:
    reader = ScriptedDocumentReader({})
    assert isinstance(reader, ports.DocumentReader)
    handle = reader.open("store.toml")
    assert isinstance(handle, ports.DocumentHandle)
    handle.close()


def test_simulated_driver_contract() -> None:
    driver = SimulatedDriver()
    assert isinstance(driver, ports.DeviceDriver)
    handle = driver.open()
    assert isinstance(handle, ports.DeviceHandle)
    handle.close()


def test_exploding_driver_contract() -> None:
    driver = ExplodingDriver(RuntimeError("boom"))
    assert isinstance(driver, ports.DeviceDriver)
    assert isinstance(driver.open(), ports.DeviceHandle)
