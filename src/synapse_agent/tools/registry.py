"""Tool registry (the agent's tool catalogue)."""

from __future__ import annotations

from collections.abc import Iterator

from synapse_agent.exceptions import ToolAlreadyRegisteredError, UnknownToolError
from synapse_agent.tools.definition import ToolDefinition


class ToolRegistry:
    """Registry mapping tool names to tool definitions."""

    def __init__(self, tools: list[ToolDefinition] | None = None) -> None:
        self._tools: dict[str, ToolDefinition] = {}
        for t in tools or []:
            self.register(t)

    def register(self, tool: ToolDefinition, prefix: str | None = None) -> None:
        """Register a tool.

        With a prefix the tool is registered as a renamed copy, so the name
        advertised to the model is the name dispatch looks up.

        Args:
            tool: The tool definition to register
            prefix: Optional namespace prefix

        Raises:
            ToolAlreadyRegisteredError: If tool with same name already registered
        """
        if prefix:
            tool = ToolDefinition(
                name=f"{prefix}_{tool.name}",
                description=tool.description,
                execute=tool.execute,
                parameters=tool.parameters,
                is_async=tool.is_async,
            )
        if tool.name in self._tools:
            raise ToolAlreadyRegisteredError(tool.name)
        self._tools[tool.name] = tool

    def unregister(self, name: str) -> None:
        """Unregister a tool by name.

        Raises:
            UnknownToolError: If tool not found
        """
        if name not in self._tools:
            raise UnknownToolError(name)
        del self._tools[name]

    def get(self, name: str) -> ToolDefinition | None:
        """Get a tool by name, returns None if not found."""
        return self._tools.get(name)

    def get_or_raise(self, name: str) -> ToolDefinition:
        """Get a tool by name.

        Raises:
            UnknownToolError: If tool not found
        """
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(name)
        return tool

    def list(self) -> list[ToolDefinition]:
        """List all registered tools."""
        return list(self._tools.values())

    def list_names(self) -> list[str]:
        """List all registered tool names."""
        return list(self._tools.keys())

    def clear(self) -> None:
        """Clear all registered tools."""
        self._tools.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(list(self._tools.values()))


__all__ = ["ToolRegistry"]
