"""Build epoch: the value that scopes every state file to one build run."""

from __future__ import annotations

import logging
import threading
import time

from .settings import RuntimeSettings

logger = logging.getLogger(__name__)

_epoch: str | None = None
_epoch_lock = threading.Lock()


def current_epoch() -> str:
    """Return the epoch of this process, capturing it on first use.

    The first call reads ``MACRO_STATE_EPOCH`` and falls back to a
    nanosecond clock reading. Every later call returns the identical value.

    Raises:
        ValueError: If ``MACRO_STATE_EPOCH`` is set to an invalid value.
    """
    global _epoch
    if _epoch is None:
        with _epoch_lock:
            if _epoch is None:
                override = RuntimeSettings.from_env().epoch_override
                if override is not None:
                    _epoch = override
                    logger.debug("Using build epoch %s from MACRO_STATE_EPOCH", _epoch)
                else:
                    _epoch = str(time.time_ns())
                    logger.debug("Captured build epoch %s", _epoch)
    return _epoch


def reset_epoch() -> None:
    """Forget the memoized epoch so the next call starts a new build run."""
    global _epoch
    with _epoch_lock:
        _epoch = None
