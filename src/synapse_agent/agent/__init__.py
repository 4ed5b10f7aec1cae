"""Agent core.

This subpackage provides:
- Agent, the main entry point
- AgentLoop, one invocation over resolved collaborators
- Capability protocols for the resolver hooks
"""

from synapse_agent.agent.capabilities import (
    IntegrationProvider,
    MemoryProvider,
    OutputSchemaProvider,
    ToolProvider,
)
from synapse_agent.agent.core import Agent
from synapse_agent.agent.loop import AgentLoop, LoopResult

__all__ = [
    "Agent",
    "AgentLoop",
    "IntegrationProvider",
    "LoopResult",
    "MemoryProvider",
    "OutputSchemaProvider",
    "ToolProvider",
]
