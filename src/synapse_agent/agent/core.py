"""Agent class - the main entry point for synapse_agent.

An Agent renders a prompt template, sends it to an integration, runs the
tools the model asks for and returns the (optionally validated) answer.
Collaborators are passed to the constructor or supplied by overriding the
``resolve_*`` hooks in a subclass; constructor values take precedence.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
from typing import TYPE_CHECKING, Any

from synapse_agent.agent.loop import AgentLoop
from synapse_agent.exceptions import MissingResolverError
from synapse_agent.integrations.base import Integration
from synapse_agent.memory.base import Memory
from synapse_agent.output.schema import OutputSchema
from synapse_agent.prompt.renderer import JinjaTemplateRenderer, TemplateRenderer
from synapse_agent.tools.definition import ToolDefinition
from synapse_agent.tools.dispatcher import ToolDispatcher
from synapse_agent.tools.registry import ToolRegistry

if TYPE_CHECKING:
    from synapse_agent.config.loader import SynapseConfig
    from synapse_agent.events.emitter import EventEmitter

_UNSET: Any = object()


class Agent:
    """Template-driven tool-calling agent.

    Subclasses usually set ``prompt_view`` and override the ``resolve_*``
    hooks:

        class SearchAgent(Agent):
            prompt_view = "search.j2"

            def resolve_integration(self) -> Integration:
                return OpenAIIntegration()

            def resolve_memory(self) -> Memory:
                return CollectionMemory()

    Attributes:
        prompt_view: Template rendered on every iteration.
        extra_inputs: Template inputs merged after the caller's input.
    """

    prompt_view: str = "simple_prompt.j2"
    extra_inputs: dict[str, Any] = {}

    def __init__(
        self,
        integration: Integration | None = None,
        memory: Memory | None = None,
        tools: list[ToolDefinition] | ToolRegistry | None = None,
        output_schema: OutputSchema | None = _UNSET,
        renderer: TemplateRenderer | None = None,
        prompt_view: str | None = None,
        extra_inputs: dict[str, Any] | None = None,
        max_tool_rounds: int | None = None,
        max_validation_retries: int = 3,
        emitter: "EventEmitter | None" = None,
    ) -> None:
        """Initialize the agent.

        Args:
            integration: Model backend. Otherwise ``resolve_integration()``.
            memory: Conversation memory. Otherwise ``resolve_memory()``.
            tools: Tools or a ready registry. Otherwise ``resolve_tools()``.
            output_schema: Schema for the final answer, or None to skip
                validation. Otherwise ``resolve_output_schema()``.
            renderer: Template renderer. Defaults to JinjaTemplateRenderer.
            prompt_view: Overrides the class-level prompt_view.
            extra_inputs: Merged over the class-level extra_inputs.
            max_tool_rounds: Maximum tool calls per invocation; None is unbounded.
            max_validation_retries: Correction attempts for invalid answers.
            emitter: Receives loop events.

        Raises:
            ValueError: If max_tool_rounds is not positive or
                max_validation_retries is negative.
        """
        if max_tool_rounds is not None and max_tool_rounds <= 0:
            raise ValueError("max_tool_rounds must be a positive integer")
        if max_validation_retries < 0:
            raise ValueError("max_validation_retries must not be negative")

        self._integration = integration
        self._memory = memory
        self._tools: ToolRegistry | None = (
            tools if isinstance(tools, ToolRegistry) or tools is None else ToolRegistry(tools)
        )
        self._output_schema = output_schema
        self._renderer = renderer
        if prompt_view is not None:
            self.prompt_view = prompt_view
        self.extra_inputs = {**type(self).extra_inputs, **(extra_inputs or {})}
        self.max_tool_rounds = max_tool_rounds
        self.max_validation_retries = max_validation_retries
        self.emitter = emitter

    @classmethod
    def from_config(cls, config: "SynapseConfig | None" = None, **kwargs: Any) -> "Agent":
        """Build an agent from a SynapseConfig.

        Keyword arguments are passed to the constructor and win over
        config values.
        """
        from synapse_agent.config.loader import create_integration, load_config

        config = config or load_config()
        kwargs.setdefault("integration", create_integration(config))
        if config.template_dirs:
            kwargs.setdefault("renderer", JinjaTemplateRenderer(template_dirs=config.template_dirs))
        kwargs.setdefault("max_tool_rounds", config.max_tool_rounds)
        kwargs.setdefault("max_validation_retries", config.max_validation_retries)
        return cls(**kwargs)

    # =========================================================================
    # Resolver hooks
    # =========================================================================

    def resolve_integration(self) -> Integration:
        raise MissingResolverError("integration", "resolve_integration")

    def resolve_memory(self) -> Memory:
        raise MissingResolverError("memory", "resolve_memory")

    def resolve_tools(self) -> list[ToolDefinition]:
        return []

    def resolve_output_schema(self) -> OutputSchema | None:
        return None

    def resolve_renderer(self) -> TemplateRenderer:
        return JinjaTemplateRenderer()

    # =========================================================================
    # Resolved collaborators
    # =========================================================================

    @property
    def integration(self) -> Integration:
        if self._integration is None:
            self._integration = self.resolve_integration()
        return self._integration

    @property
    def memory(self) -> Memory:
        if self._memory is None:
            self._memory = self.resolve_memory()
        return self._memory

    @property
    def tools(self) -> ToolRegistry:
        if self._tools is None:
            self._tools = ToolRegistry(self.resolve_tools())
        return self._tools

    @property
    def output_schema(self) -> OutputSchema | None:
        if self._output_schema is _UNSET:
            self._output_schema = self.resolve_output_schema()
        return self._output_schema

    @property
    def renderer(self) -> TemplateRenderer:
        if self._renderer is None:
            self._renderer = self.resolve_renderer()
        return self._renderer

    def _build_loop(self) -> AgentLoop:
        return AgentLoop(
            integration=self.integration,
            memory=self.memory,
            dispatcher=ToolDispatcher(self.tools),
            renderer=self.renderer,
            prompt_view=self.prompt_view,
            output_schema=self.output_schema,
            extra_inputs=self.extra_inputs,
            max_tool_rounds=self.max_tool_rounds,
            max_validation_retries=self.max_validation_retries,
            emitter=self.emitter,
        )

    # =========================================================================
    # Public API
    # =========================================================================

    def get_prompt(self, input: dict[str, Any]) -> str:
        """Render the prompt the next iteration would send, from loaded memory."""
        return self._build_loop().render_prompt(input)

    async def handle(
        self,
        input: dict[str, Any],
        extra_args: dict[str, Any] | None = None,
    ) -> Any:
        """Run the agent on one input.

        Args:
            input: Template inputs. ``image`` is encoded for the user block.
            extra_args: Request options passed through to the integration.

        Returns:
            The answer text, or the validated dict when an output schema is set.
        """
        return await self._build_loop().run(input, extra_args)

    def handle_sync(
        self,
        input: dict[str, Any],
        extra_args: dict[str, Any] | None = None,
    ) -> Any:
        """Synchronous wrapper for handle()."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is None:
            return asyncio.run(self.handle(input, extra_args))

        # Already inside an event loop: run on a fresh loop in a worker thread.
        with concurrent.futures.ThreadPoolExecutor() as executor:
            future = executor.submit(asyncio.run, self.handle(input, extra_args))
            return future.result()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(prompt_view={self.prompt_view!r})"


__all__ = ["Agent"]
