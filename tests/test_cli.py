from __future__ import annotations

import json
from pathlib import Path

import pytest

from macro_state.__main__ import main


@pytest.fixture(autouse=True)
def _pinned_epoch(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MACRO_STATE_EPOCH", "cli-build")


def test_write_read_roundtrip(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["write", "greeting", "hello\nworld"]) == 0
    assert main(["read", "greeting"]) == 0
    assert capsys.readouterr().out == "hello\nworld"


def test_has_init_and_clear(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["has", "k"]) == 0
    assert main(["init", "k", "default"]) == 0
    assert main(["init", "k", "other"]) == 0
    assert main(["has", "k"]) == 0
    assert main(["clear", "k"]) == 0
    assert main(["has", "k"]) == 0
    assert capsys.readouterr().out == "false\ndefaultdefaulttrue\nfalse\n"


def test_append_and_read_list(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["append", "items", "first"]) == 0
    assert main(["append", "items", "second"]) == 0
    assert main(["read-list", "items"]) == 0
    assert main(["read-list", "never"]) == 0
    assert capsys.readouterr().out == "first\nsecond\n"


def test_read_missing_key_fails(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["read", "missing"]) == 1
    assert capsys.readouterr().out == ""


def test_json_output(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--json", "read", "missing"]) == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload["ok"] is False
    assert payload["error_kind"] == "not_found"
    assert payload["key"] == "missing"


def test_keys_path_and_epoch(capsys: pytest.CaptureFixture[str], state_dir: Path) -> None:
    main(["write", "b", "1"])
    main(["write", "a", "1"])
    capsys.readouterr()

    assert main(["keys"]) == 0
    assert capsys.readouterr().out == "a\nb\n"

    assert main(["path", "a"]) == 0
    assert capsys.readouterr().out == f"{state_dir / 'macro_state_a_cli-build'}\n"

    assert main(["--json", "epoch"]) == 0
    assert json.loads(capsys.readouterr().out) == {"epoch": "cli-build"}


def test_state_dir_and_epoch_flags(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    other = tmp_path / "other-root"
    other.mkdir()
    assert main(["--state-dir", str(other), "--epoch", "flag-build", "write", "k", "v"]) == 0
    assert (other / "macro_state_k_flag-build").read_text(encoding="utf-8") == "v"


def test_missing_state_dir_fails(tmp_path: Path) -> None:
    assert main(["--state-dir", str(tmp_path / "nope"), "write", "k", "v"]) == 1


def test_invalid_epoch_fails() -> None:
    assert main(["--epoch", "bad/epoch", "write", "k", "v"]) == 1
