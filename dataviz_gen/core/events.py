from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from typing import Any


LOADING_SHOWN = "loading_shown"
LOADING_HIDDEN = "loading_hidden"
RENDER_ERROR = "error"


class EventBus:
    """Synchronous publish/subscribe hub for UI-facing signals."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Callable[[Any], None]]] = defaultdict(list)

    def subscribe(self, event: str, callback: Callable[[Any], None]) -> None:
        self._listeners[event].append(callback)

    def unsubscribe(self, event: str, callback: Callable[[Any], None]) -> None:
        if callback in self._listeners.get(event, []):
            self._listeners[event].remove(callback)

    def emit(self, event: str, payload: Any = None) -> None:
        for callback in list(self._listeners.get(event, [])):
            callback(payload)
