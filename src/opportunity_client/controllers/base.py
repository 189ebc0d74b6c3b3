from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from typing import Any, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

StateT = TypeVar("StateT")


class FetchStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class OptionsStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class SubmitStatus(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"


class StateController(Generic[StateT]):
    """Holds one immutable state snapshot and notifies listeners on change."""

    def __init__(self, initial_state: StateT) -> None:
        self._state = initial_state
        self._listeners: list[Callable[[StateT], None]] = []

    @property
    def state(self) -> StateT:
        return self._state

    def subscribe(self, listener: Callable[[StateT], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _update(self, **changes: Any) -> StateT:
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:  # noqa: BLE001
                logger.exception("state listener %r failed", listener)
        return self._state
