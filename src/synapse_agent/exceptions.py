"""Error types for synapse_agent.

Every error raised by the agent core derives from SynapseError so callers
can catch the whole family at once. None of them are retried by the core.
"""

from __future__ import annotations

from typing import Any

MESSAGE_BLOCK_EXAMPLE = "<message type='assistant'>Foo {{ bar }}</message>"


class SynapseError(Exception):
    """Base class for all synapse_agent errors."""


# =============================================================================
# Template / parsing errors
# =============================================================================


class InvalidTemplateError(SynapseError):
    """Raised when a rendered prompt contains a malformed message block."""

    def __init__(self, reason: str = "Each message block must define a type.") -> None:
        self.reason = reason
        super().__init__(f"{reason}\nExample:\n{MESSAGE_BLOCK_EXAMPLE}")


class MalformedPayloadError(SynapseError):
    """Raised when a base64(JSON) block attribute cannot be decoded."""

    attribute = "payload"

    def __init__(self, value: str, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"Malformed {self.attribute} attribute: {reason}")


class MalformedToolPayloadError(MalformedPayloadError):
    """Raised when a block's ``tool`` attribute cannot be decoded."""

    attribute = "tool"


class MalformedImagePayloadError(MalformedPayloadError):
    """Raised when a user block's ``image`` attribute cannot be decoded."""

    attribute = "image"


# =============================================================================
# Tool errors
# =============================================================================


class MalformedToolArgumentsError(SynapseError):
    """Raised when a tool call's argument payload is not a JSON object."""

    def __init__(self, tool_name: str, arguments: Any, reason: str) -> None:
        self.tool_name = tool_name
        self.arguments = arguments
        super().__init__(f"Malformed arguments for tool '{tool_name}': {reason}")


class UnknownToolError(SynapseError):
    """Raised when a tool is not found in the registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool not found: {name}")


class ToolAlreadyRegisteredError(SynapseError):
    """Raised when trying to register a tool that already exists."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool already registered: {name}")


class ToolExecutionFailedError(SynapseError):
    """Wraps an exception raised by a tool's own implementation."""

    def __init__(self, tool_name: str, original: BaseException) -> None:
        self.tool_name = tool_name
        self.original = original
        super().__init__(f"Error calling tool: {original}")


# =============================================================================
# Loop errors
# =============================================================================


class UnrecognizedFinishSignalError(SynapseError):
    """Raised when an integration returns a finish reason the loop does not know."""

    def __init__(self, finish_reason: Any) -> None:
        self.finish_reason = finish_reason
        super().__init__(f"Unrecognized finish signal from integration: {finish_reason!r}")


class IterationLimitExceededError(SynapseError):
    """Raised when the model keeps requesting tools past the configured limit."""

    def __init__(self, max_tool_rounds: int) -> None:
        self.max_tool_rounds = max_tool_rounds
        super().__init__(f"Tool call limit of {max_tool_rounds} rounds exceeded")


class OutputValidationError(SynapseError):
    """Raised when the final answer does not match the output schema."""

    def __init__(self, errors: list[str], raw: str) -> None:
        self.errors = errors
        self.raw = raw
        super().__init__("Output validation failed: " + "; ".join(errors))


class MissingResolverError(SynapseError):
    """Raised when an agent has no collaborator for a required capability."""

    def __init__(self, capability: str, method: str) -> None:
        self.capability = capability
        self.method = method
        super().__init__(
            f"No {capability} configured. Pass one to the Agent constructor "
            f"or override {method}()."
        )


# =============================================================================
# Integration registry errors
# =============================================================================


class IntegrationNotFoundError(SynapseError):
    """Raised when an integration provider is not registered."""


class InvalidModelStringError(SynapseError):
    """Raised when a model string is not in 'provider:model' format."""


__all__ = [
    "IntegrationNotFoundError",
    "InvalidModelStringError",
    "InvalidTemplateError",
    "IterationLimitExceededError",
    "MalformedImagePayloadError",
    "MalformedPayloadError",
    "MalformedToolArgumentsError",
    "MalformedToolPayloadError",
    "MissingResolverError",
    "OutputValidationError",
    "SynapseError",
    "ToolAlreadyRegisteredError",
    "ToolExecutionFailedError",
    "UnknownToolError",
    "UnrecognizedFinishSignalError",
]
