"""Bridge from loop events to the logging module."""

from __future__ import annotations

import logging
from typing import Any, Callable

from synapse_agent.events.emitter import EventEmitter
from synapse_agent.events.events import AgentEvent

logger = logging.getLogger("synapse_agent.agent")


class LoggingObserver:
    """Logs every loop event; tool starts at INFO, everything else at DEBUG.

    Example:
        emitter = EventEmitter()
        LoggingObserver().attach(emitter)
        agent = Agent(..., emitter=emitter)
    """

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log or logger
        self._unsubscribe: Callable[[], None] | None = None

    def attach(self, emitter: EventEmitter) -> "LoggingObserver":
        self.detach()
        self._unsubscribe = emitter.on_any(self)
        return self

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def __call__(self, event_type: AgentEvent | str, data: Any) -> None:
        name = event_type.value if isinstance(event_type, AgentEvent) else str(event_type)
        payload = data.model_dump(exclude={"event_type", "timestamp"}) if hasattr(data, "model_dump") else data

        if event_type == AgentEvent.TOOL_START:
            self.log.info("Calling tool %s (%s)", payload.get("tool_name"), payload.get("tool_call_id"))
        else:
            self.log.debug("%s: %s", name, payload)


__all__ = ["LoggingObserver"]
