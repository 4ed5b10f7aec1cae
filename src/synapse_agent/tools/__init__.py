"""Tool system for agent tool definitions and execution.

This subpackage provides:
- ToolDefinition and the @tool decorator
- ToolRegistry, the agent's tool catalogue
- ToolDispatcher for resolving and running model-issued tool calls
- FirecrawlTool, a ready-made web scraping tool
"""

from synapse_agent.exceptions import (
    MalformedToolArgumentsError,
    ToolAlreadyRegisteredError,
    ToolExecutionFailedError,
    UnknownToolError,
)
from synapse_agent.tools.decorator import tool
from synapse_agent.tools.definition import ToolDefinition
from synapse_agent.tools.dispatcher import ToolDispatcher
from synapse_agent.tools.firecrawl import FirecrawlTool
from synapse_agent.tools.registry import ToolRegistry

__all__ = [
    "FirecrawlTool",
    "MalformedToolArgumentsError",
    "ToolAlreadyRegisteredError",
    "ToolDefinition",
    "ToolDispatcher",
    "ToolExecutionFailedError",
    "ToolRegistry",
    "UnknownToolError",
    "tool",
]
