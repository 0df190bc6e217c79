from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from macro_state.epoch import reset_epoch
from macro_state.state_store import MacroStateStore


@pytest.fixture(autouse=True)
def _isolated_build(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Give every test its own state directory and a fresh build epoch."""
    state_dir = tmp_path / "macro_state"
    state_dir.mkdir()
    monkeypatch.setenv("MACRO_STATE_DIR", str(state_dir))
    # setenv first so teardown removes the variable even if a test or the CLI sets it.
    monkeypatch.setenv("MACRO_STATE_EPOCH", "")
    monkeypatch.delenv("MACRO_STATE_EPOCH")
    reset_epoch()
    yield state_dir
    reset_epoch()


@pytest.fixture
def state_dir(_isolated_build: Path) -> Path:
    return _isolated_build


@pytest.fixture
def store(state_dir: Path) -> MacroStateStore:
    return MacroStateStore(state_dir)
