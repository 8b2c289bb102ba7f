"""
In-process publish/subscribe for game notifications.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from services.diagnostics import DiagnosticSink


logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class EventBus:
    """
    Explicit listener registry keyed by event name.

    Each listener runs in isolation: one that raises is logged and reported,
    and the remaining listeners are still called.
    """

    def __init__(self, diagnostics: Optional[DiagnosticSink] = None):
        self.diagnostics = diagnostics
        self._listeners: Dict[str, List[Listener]] = {}

    def on(self, event: str, callback: Listener) -> None:
        self._listeners.setdefault(event, []).append(callback)

    def off(self, event: str, callback: Listener) -> None:
        listeners = self._listeners.get(event)
        if listeners and callback in listeners:
            listeners.remove(callback)

    def emit(self, event: str, payload: Any = None) -> None:
        # Copy so listeners may unsubscribe while being notified
        for callback in list(self._listeners.get(event, [])):
            try:
                callback(payload)
            except Exception as e:
                logger.exception(f"Error in listener for {event}")
                if self.diagnostics is not None:
                    self.diagnostics.report(f"Listener for {event} failed", e)

    def remove_all_listeners(self) -> None:
        self._listeners.clear()

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))

    def has_listeners(self, event: str) -> bool:
        return self.listener_count(event) > 0
