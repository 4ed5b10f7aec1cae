"""Agent loop events.

This subpackage provides:
- AgentEvent, the points in the loop that emit events
- Event payload models
- EventEmitter for subscribing to them
- LoggingObserver, which forwards events to logging
"""

from synapse_agent.events.emitter import EventEmitter
from synapse_agent.events.events import (
    AgentEvent,
    BaseEvent,
    IntegrationEndEvent,
    IterationStartEvent,
    RunEndEvent,
    RunErrorEvent,
    RunStartEvent,
    ToolEndEvent,
    ToolStartEvent,
    ValidationRetryEvent,
    ValidationStartEvent,
)
from synapse_agent.events.observer import LoggingObserver

__all__ = [
    "AgentEvent",
    "BaseEvent",
    "EventEmitter",
    "IntegrationEndEvent",
    "IterationStartEvent",
    "LoggingObserver",
    "RunEndEvent",
    "RunErrorEvent",
    "RunStartEvent",
    "ToolEndEvent",
    "ToolStartEvent",
    "ValidationRetryEvent",
    "ValidationStartEvent",
]
