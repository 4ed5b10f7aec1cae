"""Tool dispatcher for synapse_agent.

Resolves a model-issued tool call against the registry, decodes its
arguments and runs the tool. Failures are raised, never turned into
tool output.
"""

from __future__ import annotations

import json
from typing import Any

from synapse_agent.exceptions import MalformedToolArgumentsError, ToolExecutionFailedError
from synapse_agent.tools.definition import ToolDefinition
from synapse_agent.tools.registry import ToolRegistry
from synapse_agent.types.messages import ToolCall


class ToolDispatcher:
    """Executes tool calls against a ToolRegistry.

    The dispatcher holds no per-call state.
    """

    def __init__(self, registry: ToolRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    def resolve(self, name: str) -> ToolDefinition:
        """Look up a registered tool.

        Raises:
            UnknownToolError: If no tool is registered under ``name``.
        """
        return self._registry.get_or_raise(name)

    @staticmethod
    def decode_arguments(tool_name: str, raw: str | None) -> dict[str, Any]:
        """Decode a raw argument payload into a dict.

        An empty payload means no arguments.

        Raises:
            MalformedToolArgumentsError: If the payload is not a JSON object.
        """
        if raw is None or not raw.strip():
            return {}
        try:
            arguments = json.loads(raw)
        except json.JSONDecodeError as e:
            raise MalformedToolArgumentsError(tool_name, raw, str(e)) from e
        if not isinstance(arguments, dict):
            raise MalformedToolArgumentsError(
                tool_name, raw, f"expected a JSON object, got {type(arguments).__name__}"
            )
        return arguments

    async def execute(self, name: str, arguments: dict[str, Any]) -> str:
        """Run a tool with decoded arguments and return its result as text.

        Raises:
            UnknownToolError: If the tool is not registered.
            ToolExecutionFailedError: If the tool itself raised.
        """
        tool = self.resolve(name)
        try:
            result = await tool.run(arguments)
        except Exception as e:
            raise ToolExecutionFailedError(name, e) from e
        return _sanitize_result(result)

    async def dispatch(self, tool_call: ToolCall) -> str:
        """Resolve, decode and execute a model-issued tool call.

        The tool is resolved before its arguments are decoded, so an unknown
        tool fails without touching the payload.
        """
        self.resolve(tool_call.name)
        arguments = self.decode_arguments(tool_call.name, tool_call.arguments)
        return await self.execute(tool_call.name, arguments)


def _sanitize_result(result: Any) -> str:
    """Convert tool result to string."""
    if result is None:
        return ""
    if isinstance(result, str):
        return result
    try:
        return json.dumps(result)
    except (TypeError, ValueError):
        return str(result)


__all__ = ["ToolDispatcher"]
