"""Recoverable-result boundary for code generators.

Generators embed state operations into their output and need to turn a
failure into a diagnostic rather than abort the build, so every call here
returns a ``StateResult`` instead of raising store errors.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict

from .canonical import to_canonical_json
from .errors import MacroStateError
from .models import ErrorKind
from .state_store import MacroStateStore, default_store

logger = logging.getLogger(__name__)


class StateResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    operation: str
    key: str
    ok: bool
    value: str | bool | list[str] | None = None
    error_kind: ErrorKind | None = None
    diagnostic: str | None = None

    def to_json(self) -> str:
        return to_canonical_json(self)

    @classmethod
    def failure(cls, operation: str, key: str, exc: MacroStateError) -> "StateResult":
        diagnostic = f"{operation} failed for macro state key {key!r}: {exc.cause}"
        logger.debug(diagnostic)
        return cls(operation=operation, key=key, ok=False, error_kind=exc.kind, diagnostic=diagnostic)


class StateAdapter:
    """Result-returning facade over a ``MacroStateStore``."""

    def __init__(self, store: MacroStateStore | None = None) -> None:
        self.store = store if store is not None else default_store()

    def write(self, key: str, value: str) -> StateResult:
        try:
            self.store.write(key, value)
        except MacroStateError as exc:
            return StateResult.failure("write", key, exc)
        return StateResult(operation="write", key=key, ok=True)

    def read(self, key: str) -> StateResult:
        try:
            value = self.store.read(key)
        except MacroStateError as exc:
            return StateResult.failure("read", key, exc)
        return StateResult(operation="read", key=key, ok=True, value=value)

    def has(self, key: str) -> StateResult:
        return StateResult(operation="has", key=key, ok=True, value=self.store.has(key))

    def clear(self, key: str) -> StateResult:
        self.store.clear(key)
        return StateResult(operation="clear", key=key, ok=True)

    def init(self, key: str, default_value: str) -> StateResult:
        try:
            value = self.store.init(key, default_value)
        except MacroStateError as exc:
            return StateResult.failure("init", key, exc)
        return StateResult(operation="init", key=key, ok=True, value=value)

    def append(self, key: str, item: str) -> StateResult:
        try:
            self.store.append(key, item)
        except MacroStateError as exc:
            return StateResult.failure("append", key, exc)
        return StateResult(operation="append", key=key, ok=True)

    def read_list(self, key: str) -> StateResult:
        return StateResult(operation="read_list", key=key, ok=True, value=self.store.read_list(key))
