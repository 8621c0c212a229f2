"""End-to-end flow through the public package surface.

An application wires both bundled boundaries, a diagnostics sink, and the
settings-driven retry policy, then handles every outcome by kind alone.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

import lib_fault_boundary as lfb
from lib_fault_boundary.adapters.device.driver import SimulatedDriver, Unlocked
from lib_fault_boundary.testing import RecordingSink


def _describe(error: lfb.TranslatedError) -> str:
    if error.kind is lfb.ErrorKind.NOT_FOUND:
        return "missing"
    if error.kind is lfb.ErrorKind.DEVICE_UNAVAILABLE:
        return "offline"
    return "other"


def test_application_handles_outcomes_by_kind(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    settings = lfb.load_settings({"LIB_FAULT_BOUNDARY_RETRY__ATTEMPTS": "2", "LIB_FAULT_BOUNDARY_TRACE_ID": "flow-1"})
    lfb.bind_trace_id(settings.trace_id)
    sink = RecordingSink()
    caplog.set_level(logging.DEBUG, logger="lib_fault_boundary")
    try:
        store = lfb.FileSectionStore(tmp_path / "store.toml", sink=sink)
        with pytest.raises(lfb.TranslatedError) as missing:
            store.retrieve_section("db")
        assert _describe(missing.value) == "missing"

        (tmp_path / "store.toml").write_text("[db]\nport = 5432\n", encoding="utf-8")
        assert store.retrieve_section("db")["port"] == 5432

        driver = SimulatedDriver(open_failures=[Unlocked("held"), Unlocked("held"), Unlocked("held")])
        device = lfb.DeviceBoundary(driver, sink=sink)

        def probe() -> tuple[str, ...]:
            with device.session() as session:
                return session.pending_events()

        with pytest.raises(lfb.TranslatedError) as offline:
            lfb.call_with_retry(probe, retry_on=settings.retry_on, attempts=settings.retry_attempts)
        assert _describe(offline.value) == "offline"
        assert driver.open_calls == 2
        assert lfb.call_with_retry(probe, retry_on=settings.retry_on, attempts=2) is lfb.EMPTY_EVENTS
    finally:
        lfb.bind_trace_id(None)

    assert sink.kinds == ["not_found", "device_unavailable", "device_unavailable", "device_unavailable"]
    traced = [record for record in caplog.records if getattr(record, "context", {}).get("trace_id") == "flow-1"]
    assert traced
    assert driver.open_handles == 0
