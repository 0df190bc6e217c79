from __future__ import annotations

from pathlib import Path

from .epoch import current_epoch
from .models import STATE_FILE_PREFIX, StateLocation, state_file_name

__all__ = ["key_from_file_name", "resolve", "state_file_name", "state_file_path"]


def resolve(key: str, *, root: Path, epoch: str | None = None) -> StateLocation:
    """Map a key to its location under *root* for the given (or current) epoch.

    Pure apart from the one-time epoch capture. Keys are embedded into the
    file name verbatim; characters the filesystem rejects are not validated
    here and fail later as I/O errors.
    """
    return StateLocation(root=root, key=key, epoch=current_epoch() if epoch is None else epoch)


def state_file_path(key: str, *, root: Path, epoch: str | None = None) -> Path:
    return resolve(key, root=root, epoch=epoch).path


def key_from_file_name(name: str, epoch: str) -> str | None:
    """Return the key encoded in *name*, or None if it is not a state file of *epoch*."""
    suffix = f"_{epoch}"
    if not name.startswith(STATE_FILE_PREFIX) or not name.endswith(suffix):
        return None
    if len(name) < len(STATE_FILE_PREFIX) + len(suffix):
        return None
    return name[len(STATE_FILE_PREFIX) : len(name) - len(suffix)]
