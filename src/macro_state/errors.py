from __future__ import annotations

from .models import ErrorKind


class MacroStateError(Exception):
    """Base class for failures of a state operation on a single key."""

    kind: ErrorKind = ErrorKind.IO_FAILURE

    def __init__(self, key: str, cause: object) -> None:
        self.key = key
        self.cause = cause
        super().__init__(f"macro state key {key!r}: {cause}")


class StateNotFoundError(MacroStateError):
    """No value is stored for the key in the current epoch."""

    kind = ErrorKind.NOT_FOUND


class StateIOError(MacroStateError):
    """The storage backend failed (missing root, permissions, disk full...)."""

    kind = ErrorKind.IO_FAILURE
