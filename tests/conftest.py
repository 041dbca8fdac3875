from __future__ import annotations

import os
from pathlib import Path

import pytest

from readhook.config import Settings
from readhook.framework import ReadHookFramework


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in list(os.environ):
        if name.upper().startswith("READHOOK_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("READHOOK_LOAD_ENTRYPOINTS", "false")
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def framework() -> ReadHookFramework:
    instance = ReadHookFramework(Settings(load_entrypoints=False))
    instance.load_plugins()
    return instance
