from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import pytest

from hashline.engine.lifecycle import Lifecycle
from hashline.engine.table import TableStore
from hashline.plugin import HashlinePlugin
from hashline.tools.registry import ToolRegistry
from hashline.utils.files import read_file_safely


@dataclass
class CountingReader:
    """File reader that records every path it was asked to read."""

    calls: list[Path] = field(default_factory=list)

    def __call__(self, path: Path) -> str:
        self.calls.append(path)
        return read_file_safely(path)

    def count(self, path: Path | str) -> int:
        return sum(1 for p in self.calls if str(p) == str(path))


@pytest.fixture()
def workspace(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture()
def write_file(workspace: Path) -> Callable[[str, str], Path]:
    def _write(name: str, content: str) -> Path:
        path = workspace / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content.encode("utf-8"))
        return path

    return _write


@pytest.fixture()
def reader() -> CountingReader:
    return CountingReader()


@pytest.fixture()
def store(reader: CountingReader) -> TableStore:
    return TableStore(reader)


@pytest.fixture()
def lifecycle(store: TableStore) -> Lifecycle:
    return Lifecycle(store)


@pytest.fixture()
def plugin(workspace: Path, store: TableStore) -> HashlinePlugin:
    return HashlinePlugin(workspace, store=store)


@pytest.fixture()
def registry(workspace: Path, plugin: HashlinePlugin) -> ToolRegistry:
    return ToolRegistry(workspace, plugin=plugin)
