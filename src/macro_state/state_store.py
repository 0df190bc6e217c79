from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from .addressing import key_from_file_name, resolve
from .codec import decode_items, encode_item
from .epoch import current_epoch
from .errors import MacroStateError, StateIOError, StateNotFoundError
from .models import StateLocation
from .settings import RuntimeSettings

logger = logging.getLogger(__name__)

# Mode a plain create would give new files; mkstemp always uses 0600.
_umask = os.umask(0)
os.umask(_umask)
_FILE_MODE = 0o666 & ~_umask

# ---------------------------------------------------------------------------
# File helpers
# ---------------------------------------------------------------------------


def _atomic_write_text(path: Path, content: str) -> None:
    """Write *content* to *path* atomically.

    Writes to a temporary file in the same directory, then renames
    (``os.replace``) into place.  The directory must already exist.
    """
    fd, tmp_path = tempfile.mkstemp(
        dir=str(path.parent),
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as tmp_handle:
            tmp_handle.write(content)
            tmp_handle.flush()
            os.fsync(tmp_handle.fileno())
        os.chmod(tmp_path, _FILE_MODE)
        os.replace(tmp_path, str(path))
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def _read_text(path: Path) -> str:
    with path.open("r", encoding="utf-8", newline="") as handle:
        return handle.read()


# ---------------------------------------------------------------------------
# MacroStateStore
# ---------------------------------------------------------------------------


class MacroStateStore:
    """Flat-file key-value store scoped to one build epoch.

    Every key maps to one file ``macro_state_<key>_<epoch>`` directly under
    *root*.  Nothing is cached in memory; each call reads or writes the
    file.  There is no locking: concurrent writers to the same key race and
    the last filesystem operation wins.
    """

    def __init__(self, root: Path | None, *, epoch: str | None = None) -> None:
        self.root = root
        self._epoch = epoch

    @property
    def epoch(self) -> str:
        """The epoch this store addresses; the process epoch unless pinned."""
        return self._epoch if self._epoch is not None else current_epoch()

    def location(self, key: str) -> StateLocation:
        """Return the location of *key*.

        Raises:
            StateIOError: If no storage root is configured or the epoch is invalid.
        """
        if self.root is None:
            raise StateIOError(key, "no state directory configured (set MACRO_STATE_DIR)")
        try:
            epoch = self.epoch
        except ValueError as exc:
            raise StateIOError(key, exc) from exc
        return resolve(key, root=self.root, epoch=epoch)

    # ------------------------------------------------------------------
    # Scalar values
    # ------------------------------------------------------------------

    def write(self, key: str, value: str) -> None:
        """Store *value* as the whole content of *key*, replacing any prior value.

        Raises:
            StateIOError: If the root is missing, not writable, or the write fails.
        """
        path = self.location(key).path
        try:
            _atomic_write_text(path, value)
        except (OSError, ValueError) as exc:
            raise StateIOError(key, exc) from exc
        logger.debug("Wrote %d chars to %s", len(value), path)

    def read(self, key: str) -> str:
        """Return the value stored for *key* verbatim.

        Raises:
            StateNotFoundError: If nothing is stored for *key* in this epoch.
            StateIOError: If the value exists but cannot be read.
        """
        path = self.location(key).path
        try:
            return _read_text(path)
        except FileNotFoundError as exc:
            raise StateNotFoundError(key, exc) from exc
        except (OSError, ValueError) as exc:
            raise StateIOError(key, exc) from exc

    def has(self, key: str) -> bool:
        """Return True iff ``read(key)`` would succeed. Never raises."""
        try:
            self.read(key)
        except MacroStateError as exc:
            logger.debug("has(%r) is false: %s", key, exc)
            return False
        return True

    def clear(self, key: str) -> None:
        """Remove the value for *key* if present. Never raises."""
        try:
            path = self.location(key).path
            path.unlink(missing_ok=True)
        except (MacroStateError, OSError, ValueError) as exc:
            logger.debug("Ignoring failure to clear %r: %s", key, exc)

    def init(self, key: str, default_value: str) -> str:
        """Return the existing value for *key*, storing *default_value* first if there is none.

        Raises:
            StateIOError: If the default has to be written and the write fails.
        """
        try:
            return self.read(key)
        except MacroStateError:
            self.write(key, default_value)
            return default_value

    # ------------------------------------------------------------------
    # List values
    # ------------------------------------------------------------------

    def append(self, key: str, item: str) -> None:
        """Append *item* as one more list element, creating the value if absent.

        Raises:
            StateIOError: If the file cannot be opened or written.
        """
        path = self.location(key).path
        try:
            with path.open("a", encoding="utf-8", newline="") as handle:
                handle.write(encode_item(item))
        except (OSError, ValueError) as exc:
            raise StateIOError(key, exc) from exc
        logger.debug("Appended item to %s", path)

    def read_list(self, key: str) -> list[str]:
        """Return the items appended under *key*; an unreadable or absent key is an empty list."""
        try:
            raw = self.read(key)
        except MacroStateError as exc:
            logger.debug("read_list(%r) is empty: %s", key, exc)
            return []
        return decode_items(raw)

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def keys(self) -> list[str]:
        """Return the sorted keys holding a value in this store's epoch.

        Never raises; an unset, missing or unreadable root lists no keys.
        """
        if self.root is None:
            return []
        found = []
        try:
            epoch = self.epoch
            for entry in self.root.iterdir():
                if not entry.is_file():
                    continue
                key = key_from_file_name(entry.name, epoch)
                if key is not None:
                    found.append(key)
        except (OSError, ValueError) as exc:
            logger.debug("Cannot list keys under %s: %s", self.root, exc)
            return []
        return sorted(found)


# ---------------------------------------------------------------------------
# Environment-bound convenience functions
# ---------------------------------------------------------------------------


def default_store() -> MacroStateStore:
    """Build a store rooted at ``MACRO_STATE_DIR`` using the process epoch."""
    try:
        settings = RuntimeSettings.from_env()
    except ValueError:
        # An invalid MACRO_STATE_EPOCH is reported by each operation as a StateIOError.
        settings = RuntimeSettings(state_dir=os.getenv("MACRO_STATE_DIR", "")).normalized()
    return MacroStateStore(settings.state_dir_path)


def state_file_path(key: str) -> Path:
    return default_store().location(key).path


def write_state(key: str, value: str) -> None:
    default_store().write(key, value)


def read_state(key: str) -> str:
    return default_store().read(key)


def has_state(key: str) -> bool:
    return default_store().has(key)


def clear_state(key: str) -> None:
    default_store().clear(key)


def init_state(key: str, default_value: str) -> str:
    return default_store().init(key, default_value)


def append_state(key: str, item: str) -> None:
    default_store().append(key, item)


def read_state_list(key: str) -> list[str]:
    return default_store().read_list(key)


def state_keys() -> list[str]:
    return default_store().keys()
