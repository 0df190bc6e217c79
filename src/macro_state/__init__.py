from importlib.metadata import version

from .adapter import StateAdapter, StateResult
from .addressing import resolve, state_file_name
from .codec import decode_items, encode_item, encode_items
from .epoch import current_epoch, reset_epoch
from .errors import MacroStateError, StateIOError, StateNotFoundError
from .models import ErrorKind, StateLocation
from .settings import RuntimeSettings
from .state_store import (
    MacroStateStore,
    append_state,
    clear_state,
    default_store,
    has_state,
    init_state,
    read_state,
    read_state_list,
    state_file_path,
    state_keys,
    write_state,
)


def get_version() -> str:
    try:
        return version("macro-state")
    except Exception:
        return "0.0.0"


__all__ = [
    "ErrorKind",
    "MacroStateError",
    "MacroStateStore",
    "RuntimeSettings",
    "StateAdapter",
    "StateIOError",
    "StateLocation",
    "StateNotFoundError",
    "StateResult",
    "append_state",
    "clear_state",
    "current_epoch",
    "decode_items",
    "default_store",
    "encode_item",
    "encode_items",
    "get_version",
    "has_state",
    "init_state",
    "read_state",
    "read_state_list",
    "reset_epoch",
    "resolve",
    "state_file_name",
    "state_file_path",
    "state_keys",
    "write_state",
]
