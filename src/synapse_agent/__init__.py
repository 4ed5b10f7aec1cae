"""synapse_agent - template-driven, tool-calling LLM agents.

synapse_agent provides:
- Prompt templates: Jinja2 views rendered into <message> blocks
- Tool System: @tool decorator, registry and dispatcher
- Integrations: OpenAI and Anthropic over httpx
- Memory: in-process and JSONL file backends
- Output validation: pydantic schemas with model-driven correction

Quick Start:
    >>> from synapse_agent import Agent, CollectionMemory, OpenAIIntegration
    >>> agent = Agent(integration=OpenAIIntegration(), memory=CollectionMemory())
    >>> answer = await agent.handle({"input": "Hello!"})

With Tools:
    >>> from synapse_agent import Agent, tool
    >>>
    >>> @tool()
    ... def get_weather(city: str) -> str:
    ...     '''Get weather for a city.'''
    ...     return f"Sunny in {city}"
    >>>
    >>> agent = Agent(integration=..., memory=..., tools=[get_weather])
    >>> answer = agent.handle_sync({"input": "What's the weather in Paris?"})
"""

from ._version import __version__, __version_info__

# =============================================================================
# Lazy imports for top-level convenience
# =============================================================================
# __getattr__ keeps `import synapse_agent` from pulling in httpx and jinja2.


def __getattr__(name: str) -> object:
    """Lazy import for top-level classes."""
    if name in ("Agent", "AgentLoop"):
        from . import agent

        return getattr(agent, name)

    if name in (
        "Integration",
        "OpenAIIntegration",
        "AnthropicIntegration",
        "IntegrationRegistry",
        "get_default_registry",
    ):
        from . import integrations

        return getattr(integrations, name)

    if name in ("Memory", "CollectionMemory", "FileMemory"):
        from . import memory

        return getattr(memory, name)

    if name in ("tool", "ToolDefinition", "ToolRegistry", "ToolDispatcher", "FirecrawlTool"):
        from . import tools

        return getattr(tools, name)

    if name in ("Message", "Role", "FinishReason", "ToolCall", "Response"):
        from . import types

        return getattr(types, name)

    if name in ("parse_prompt", "JinjaTemplateRenderer"):
        from . import prompt

        return getattr(prompt, name)

    if name in ("OutputSchema", "SchemaRule"):
        from . import output

        return getattr(output, name)

    if name in ("EventEmitter", "AgentEvent", "LoggingObserver"):
        from . import events

        return getattr(events, name)

    if name in ("SynapseConfig", "load_config"):
        from . import config

        return getattr(config, name)

    if name == "MultiQueryRetrieverAgent":
        from .agents import MultiQueryRetrieverAgent

        return MultiQueryRetrieverAgent

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Version
    "__version__",
    "__version_info__",
    # Core
    "Agent",
    "AgentLoop",
    "MultiQueryRetrieverAgent",
    # Integrations
    "Integration",
    "OpenAIIntegration",
    "AnthropicIntegration",
    "IntegrationRegistry",
    "get_default_registry",
    # Memory
    "Memory",
    "CollectionMemory",
    "FileMemory",
    # Tools
    "tool",
    "ToolDefinition",
    "ToolRegistry",
    "ToolDispatcher",
    "FirecrawlTool",
    # Types
    "Message",
    "Role",
    "FinishReason",
    "ToolCall",
    "Response",
    # Prompt
    "parse_prompt",
    "JinjaTemplateRenderer",
    # Output
    "OutputSchema",
    "SchemaRule",
    # Events
    "EventEmitter",
    "AgentEvent",
    "LoggingObserver",
    # Config
    "SynapseConfig",
    "load_config",
]
