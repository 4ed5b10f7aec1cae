"""Event emitter for agent loop events.

Supports sync and async callbacks and wildcard listeners. A failing callback
is logged and never interrupts the loop.
"""

from __future__ import annotations

import inspect
import logging
import threading
from collections.abc import Awaitable
from typing import Any, Callable

from synapse_agent.events.events import AgentEvent

logger = logging.getLogger(__name__)

EventCallback = Callable[[Any], None] | Callable[[Any], Awaitable[None]]
WildcardCallback = (
    Callable[[AgentEvent | str, Any], None]
    | Callable[[AgentEvent | str, Any], Awaitable[None]]
)


class EventEmitter:
    """Thread-safe event emitter keyed by AgentEvent."""

    def __init__(self) -> None:
        self._listeners: dict[AgentEvent | str, list[EventCallback]] = {}
        self._wildcard_listeners: list[WildcardCallback] = []
        self._lock = threading.Lock()

    def on(self, event_type: AgentEvent | str, callback: EventCallback) -> Callable[[], None]:
        """Register a callback for an event type.

        Returns:
            An unsubscribe function that removes this callback.
        """
        with self._lock:
            self._listeners.setdefault(event_type, []).append(callback)

        def unsubscribe() -> None:
            self.off(event_type, callback)

        return unsubscribe

    def off(self, event_type: AgentEvent | str, callback: EventCallback) -> None:
        with self._lock:
            listeners = self._listeners.get(event_type, [])
            if callback in listeners:
                listeners.remove(callback)

    def on_any(self, callback: WildcardCallback) -> Callable[[], None]:
        """Register a callback receiving ``(event_type, data)`` for every event."""
        with self._lock:
            self._wildcard_listeners.append(callback)

        def unsubscribe() -> None:
            self.off_any(callback)

        return unsubscribe

    def off_any(self, callback: WildcardCallback) -> None:
        with self._lock:
            if callback in self._wildcard_listeners:
                self._wildcard_listeners.remove(callback)

    async def emit_async(self, event_type: AgentEvent | str, data: Any = None) -> None:
        """Emit an event, awaiting async callbacks in registration order."""
        with self._lock:
            callbacks = list(self._listeners.get(event_type, []))
            wildcard_callbacks = list(self._wildcard_listeners)

        for callback in callbacks:
            try:
                result = callback(data)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Exception in async event callback for %s", event_type)

        for callback in wildcard_callbacks:
            try:
                result = callback(event_type, data)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Exception in async wildcard callback for %s", event_type)


__all__ = ["EventCallback", "EventEmitter", "WildcardCallback"]
