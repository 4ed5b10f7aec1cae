"""Agent loop event types.

Each event is a pydantic model emitted by the agent loop through an
EventEmitter.

Event Categories:
- Lifecycle Events: RunStartEvent, RunEndEvent, RunErrorEvent
- Iteration Events: IterationStartEvent, IntegrationEndEvent
- Tool Events: ToolStartEvent, ToolEndEvent
- Validation Events: ValidationStartEvent, ValidationRetryEvent
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field


class AgentEvent(str, Enum):
    """Points in the agent loop where events are emitted."""

    RUN_START = "run_start"
    RUN_END = "run_end"
    RUN_ERROR = "run_error"

    ITERATION_START = "iteration_start"
    INTEGRATION_END = "integration_end"

    TOOL_START = "tool_start"
    TOOL_END = "tool_end"

    VALIDATION_START = "validation_start"
    VALIDATION_RETRY = "validation_retry"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Base Event
# =============================================================================


class BaseEvent(BaseModel):
    """Base class for all loop events.

    Attributes:
        run_id: Unique identifier for the current agent run.
    """

    run_id: str


# =============================================================================
# Lifecycle Events
# =============================================================================


class RunStartEvent(BaseEvent):
    """Emitted when ``Agent.handle`` starts.

    Attributes:
        input_keys: Names of the caller-supplied inputs.
        timestamp: When the run started.
    """

    input_keys: list[str] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=_utc_now)
    event_type: Literal["run_start"] = "run_start"


class RunEndEvent(BaseEvent):
    """Emitted with the final (validated) answer.

    Attributes:
        iterations: Number of integration exchanges in the run.
        tool_rounds: Number of tool calls dispatched.
        output: The value returned to the caller.
        timestamp: When the run ended.
    """

    iterations: int
    tool_rounds: int
    output: Any = None
    timestamp: datetime = Field(default_factory=_utc_now)
    event_type: Literal["run_end"] = "run_end"


class RunErrorEvent(BaseEvent):
    """Emitted when the run terminates with an error.

    Attributes:
        error: Error message.
        error_type: Class name of the error.
    """

    error: str
    error_type: str
    timestamp: datetime = Field(default_factory=_utc_now)
    event_type: Literal["run_error"] = "run_error"


# =============================================================================
# Iteration Events
# =============================================================================


class IterationStartEvent(BaseEvent):
    """Emitted before memory is loaded for an iteration."""

    iteration: int
    event_type: Literal["iteration_start"] = "iteration_start"


class IntegrationEndEvent(BaseEvent):
    """Emitted after the integration returns a response.

    Attributes:
        iteration: The iteration number, starting at 1.
        finish_reason: The finish signal as returned.
        message_count: Number of messages sent.
    """

    iteration: int
    finish_reason: str
    message_count: int
    event_type: Literal["integration_end"] = "integration_end"


# =============================================================================
# Tool Events
# =============================================================================


class ToolStartEvent(BaseEvent):
    """Emitted before a tool call is dispatched."""

    tool_call_id: str
    tool_name: str
    arguments: str
    event_type: Literal["tool_start"] = "tool_start"


class ToolEndEvent(BaseEvent):
    """Emitted after a tool call returns and its turn is stored.

    Attributes:
        tool_call_id: ID of the dispatched call.
        tool_name: Name of the tool.
        result: The tool output as text.
    """

    tool_call_id: str
    tool_name: str
    result: str
    event_type: Literal["tool_end"] = "tool_end"


# =============================================================================
# Validation Events
# =============================================================================


class ValidationStartEvent(BaseEvent):
    """Emitted before the raw answer is validated against the output schema."""

    attempt: int
    event_type: Literal["validation_start"] = "validation_start"


class ValidationRetryEvent(BaseEvent):
    """Emitted when validation failed and the model is asked to correct itself.

    Attributes:
        attempt: The retry number, starting at 1.
        errors: Validation errors of the rejected answer.
    """

    attempt: int
    errors: list[str]
    event_type: Literal["validation_retry"] = "validation_retry"


__all__ = [
    "AgentEvent",
    "BaseEvent",
    "IntegrationEndEvent",
    "IterationStartEvent",
    "RunEndEvent",
    "RunErrorEvent",
    "RunStartEvent",
    "ToolEndEvent",
    "ToolStartEvent",
    "ValidationRetryEvent",
    "ValidationStartEvent",
]
