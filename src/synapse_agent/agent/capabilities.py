"""Capability interfaces an agent resolves its collaborators through.

An Agent satisfies all four. Code that only needs one collaborator can
depend on the narrower protocol.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from synapse_agent.integrations.base import Integration
    from synapse_agent.memory.base import Memory
    from synapse_agent.output.schema import OutputSchema
    from synapse_agent.tools.definition import ToolDefinition


@runtime_checkable
class IntegrationProvider(Protocol):
    def resolve_integration(self) -> "Integration": ...


@runtime_checkable
class MemoryProvider(Protocol):
    def resolve_memory(self) -> "Memory": ...


@runtime_checkable
class ToolProvider(Protocol):
    def resolve_tools(self) -> list["ToolDefinition"]: ...


@runtime_checkable
class OutputSchemaProvider(Protocol):
    def resolve_output_schema(self) -> "OutputSchema | None": ...


__all__ = [
    "IntegrationProvider",
    "MemoryProvider",
    "OutputSchemaProvider",
    "ToolProvider",
]
