"""Tool definition classes.

A ToolDefinition pairs a callable with the name, description and JSON Schema
advertised to the model.
"""

from __future__ import annotations

import inspect
import re
from typing import Any, Callable

_TOOL_NAME_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


class ToolDefinition:
    """Definition of a tool that can be called by an agent.

    Attributes:
        name: The tool name (alphanumeric and underscores only).
        description: Human-readable description for the LLM.
        parameters: JSON Schema for the tool's parameters.
        execute: The callable that implements the tool.
        is_async: Whether the execute function is async.
    """

    def __init__(
        self,
        name: str,
        description: str,
        execute: Callable[..., Any],
        parameters: dict[str, Any] | None = None,
        is_async: bool | None = None,
    ) -> None:
        """Initialize ToolDefinition.

        Args:
            name: Tool name (alphanumeric and underscores only).
            description: Description for the LLM.
            execute: The function that implements the tool.
            parameters: JSON Schema for parameters. Defaults to empty dict.
            is_async: Whether execute is an async function. Detected when omitted.

        Raises:
            ValueError: If name contains invalid characters.
        """
        if not _TOOL_NAME_RE.match(name):
            raise ValueError(
                f"Tool name '{name}' is invalid. "
                "Must contain only alphanumeric characters and underscores, "
                "and cannot start with a digit."
            )

        self.name = name
        self.description = description
        self.execute = execute
        self.parameters = parameters if parameters is not None else {}
        self.is_async = inspect.iscoroutinefunction(execute) if is_async is None else is_async

    async def run(self, params: dict[str, Any]) -> Any:
        """Execute the tool with decoded arguments.

        Args:
            params: Dictionary of parameter values.

        Returns:
            The result from the tool execution.
        """
        result = self.execute(**params)
        if self.is_async or inspect.isawaitable(result):
            return await result
        return result

    def to_openai_schema(self) -> dict[str, Any]:
        """Convert to OpenAI function calling format.

        Returns:
            Dictionary in OpenAI's function calling format.
        """
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters if self.parameters else {"type": "object", "properties": {}},
            },
        }

    def to_anthropic_schema(self) -> dict[str, Any]:
        """Convert to Anthropic tool format.

        Returns:
            Dictionary in Anthropic's tool format.
        """
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.parameters if self.parameters else {"type": "object", "properties": {}},
        }

    def __repr__(self) -> str:
        return f"ToolDefinition(name={self.name!r})"


__all__ = ["ToolDefinition"]
