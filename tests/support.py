"""Shared fixtures-in-code for the boundary test-suite.

The helpers here stand in for collaborators whose failures the bundled
simulators cannot script (arbitrary exception types raised mid-operation) and
write sample documents in every supported format.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml


@dataclass
class DocumentSandbox:
    """Temporary directory that writes the same payload in any supported format."""

    root: Path

    def write(self, name: str, content: str) -> Path:
        path = self.root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def write_mapping(self, name: str, payload: Mapping[str, Any]) -> Path:
        suffix = Path(name).suffix.lower()
        if suffix == ".json":
            return self.write(name, json.dumps(payload))
        if suffix in {".yaml", ".yml"}:
            return self.write(name, yaml.safe_dump(dict(payload)))
        return self.write(name, _to_toml(payload))


def _to_toml(payload: Mapping[str, Any]) -> str:
    """Render a two-level mapping of scalars as TOML tables."""

    lines: list[str] = []
    for section, entries in payload.items():
        lines.append(f"[{section}]")
        for key, value in entries.items():
            lines.append(f"{key} = {json.dumps(value)}")
    return "\n".join(lines) + "\n"


@dataclass
class ExplodingHandle:
    """Device handle whose every operation raises the scripted failure."""

    failure: BaseException
    driver: ExplodingDriver

    def query(self, command: str) -> str:
        raise self.failure

    def pending_events(self) -> None:
        raise self.failure

    def close(self) -> None:
        self.driver.closes += 1


@dataclass
class ExplodingDriver:
    """Device driver that opens fine but fails on every handle operation."""

    failure: BaseException
    opens: int = 0
    closes: int = 0
    handles: list[ExplodingHandle] = field(default_factory=list)

    def open(self) -> ExplodingHandle:
        self.opens += 1
        handle = ExplodingHandle(self.failure, self)
        self.handles.append(handle)
        return handle
