from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

STATE_FILE_PREFIX = "macro_state_"


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    IO_FAILURE = "io_failure"


def state_file_name(key: str, epoch: str) -> str:
    return f"{STATE_FILE_PREFIX}{key}_{epoch}"


@dataclass(frozen=True)
class StateLocation:
    """Storage address of one key within one build epoch."""

    root: Path
    key: str
    epoch: str

    @property
    def file_name(self) -> str:
        return state_file_name(self.key, self.epoch)

    @property
    def path(self) -> Path:
        return self.root / self.file_name
