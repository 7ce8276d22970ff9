"""Observable holder for immutable store snapshots."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from typing import Any, Generic, TypeVar

import structlog

from course_catalog.libs.backend_client import BackendAPIError

logger = structlog.get_logger(__name__)

StateT = TypeVar("StateT")

Listener = Callable[[StateT, StateT], None]


class ObservableStore(Generic[StateT]):
    """
    Base class for stores whose state is a frozen dataclass.

    Every change builds a new snapshot and swaps it in whole, so readers
    see either the previous state or the next one. Listeners are called
    with (new_state, old_state) after each swap.
    """

    def __init__(self, initial_state: StateT) -> None:
        self._state = initial_state
        self._listeners: list[Listener[StateT]] = []

    @property
    def state(self) -> StateT:
        return self._state

    @property
    def error(self) -> str | None:
        return self._state.error  # type: ignore[attr-defined]

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading  # type: ignore[attr-defined]

    def subscribe(self, listener: Listener[StateT]) -> Callable[[], None]:
        """Register listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def clear_error(self) -> None:
        self._set(error=None)

    def _set(self, **changes: Any) -> None:
        previous = self._state
        self._state = replace(previous, **changes)
        for listener in list(self._listeners):
            listener(self._state, previous)

    async def _fail(self, message: str, exc: Exception, **context: Any) -> None:
        """Record a failed backend call as the store's user-facing error."""
        status_code = exc.status_code if isinstance(exc, BackendAPIError) else None
        await logger.awarning(
            "store_operation_failed",
            store=type(self).__name__,
            message=message,
            status_code=status_code,
            error=str(exc),
            **context,
        )
        self._set(error=message, is_loading=False)
