from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path

_EPOCH_RE = re.compile(r"^[A-Za-z0-9.-]+$")


@dataclass(frozen=True)
class RuntimeSettings:
    """Runtime settings loaded from environment with fail-fast validation."""

    state_dir: str = ""
    epoch_override: str | None = None

    @classmethod
    def from_env(cls) -> "RuntimeSettings":
        return cls(
            state_dir=os.getenv("MACRO_STATE_DIR", ""),
            epoch_override=os.getenv("MACRO_STATE_EPOCH"),
        ).normalized()

    @property
    def state_dir_path(self) -> Path | None:
        """Return the storage root as a Path, or None when it is not configured."""
        return Path(self.state_dir) if self.state_dir else None

    def normalized(self) -> "RuntimeSettings":
        """Validate and normalize all fields. Raises ValueError on invalid configuration."""
        state_dir = self.state_dir.strip()

        epoch_override = self.epoch_override.strip() if self.epoch_override is not None else ""
        if epoch_override and not _EPOCH_RE.match(epoch_override):
            raise ValueError(
                f"MACRO_STATE_EPOCH must only contain [A-Za-z0-9.-], got: {self.epoch_override!r}"
            )

        return RuntimeSettings(
            state_dir=state_dir,
            epoch_override=epoch_override or None,
        )
