from __future__ import annotations

import threading
from pathlib import Path

import pytest

from macro_state.addressing import key_from_file_name, resolve, state_file_name, state_file_path
from macro_state.epoch import current_epoch, reset_epoch


def test_epoch_is_memoized() -> None:
    first = current_epoch()
    assert first.isdigit()
    assert current_epoch() == first
    assert current_epoch() == first


def test_epoch_is_captured_once_under_concurrency() -> None:
    barrier = threading.Barrier(16)
    seen: list[str] = []
    lock = threading.Lock()

    def worker() -> None:
        barrier.wait()
        value = current_epoch()
        with lock:
            seen.append(value)

    threads = [threading.Thread(target=worker) for _ in range(16)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(seen) == 16
    assert len(set(seen)) == 1


def test_epoch_override_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MACRO_STATE_EPOCH", "ci-build-77")
    assert current_epoch() == "ci-build-77"
    # Memoized: later environment changes do not affect this process's epoch.
    monkeypatch.setenv("MACRO_STATE_EPOCH", "ci-build-78")
    assert current_epoch() == "ci-build-77"
    reset_epoch()
    assert current_epoch() == "ci-build-78"


def test_invalid_epoch_override_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MACRO_STATE_EPOCH", "../escape")
    with pytest.raises(ValueError, match="MACRO_STATE_EPOCH"):
        current_epoch()


def test_resolve_is_deterministic(tmp_path: Path) -> None:
    assert resolve("k", root=tmp_path) == resolve("k", root=tmp_path)
    assert resolve("k", root=tmp_path).path == tmp_path / f"macro_state_k_{current_epoch()}"


def test_same_key_different_epochs_resolve_apart(tmp_path: Path) -> None:
    first = state_file_path("k", root=tmp_path, epoch="1")
    second = state_file_path("k", root=tmp_path, epoch="2")
    assert first != second
    assert first.name == "macro_state_k_1"
    assert second.name == "macro_state_k_2"


def test_key_from_file_name() -> None:
    name = state_file_name("some key", "123")
    assert name == "macro_state_some key_123"
    assert key_from_file_name(name, "123") == "some key"
    assert key_from_file_name(name, "456") is None
    assert key_from_file_name("unrelated.txt", "123") is None
    assert key_from_file_name(".macro_state_k_123.abc.tmp", "123") is None
    assert key_from_file_name(state_file_name("", "123"), "123") == ""
