"""The agent loop.

AgentLoop holds the resolved collaborators of one ``Agent.handle`` call and
runs the render -> parse -> complete -> dispatch cycle until the model stops
asking for tools, then validates the answer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

from synapse_agent.events.emitter import EventEmitter
from synapse_agent.events.events import (
    AgentEvent,
    BaseEvent,
    IntegrationEndEvent,
    IterationStartEvent,
    RunEndEvent,
    RunErrorEvent,
    RunStartEvent,
    ToolEndEvent,
    ToolStartEvent,
    ValidationRetryEvent,
    ValidationStartEvent,
)
from synapse_agent.exceptions import (
    IterationLimitExceededError,
    OutputValidationError,
    UnrecognizedFinishSignalError,
)
from synapse_agent.integrations.base import Integration
from synapse_agent.memory.base import Memory
from synapse_agent.output.schema import OutputSchema
from synapse_agent.prompt.parser import encode_payload, parse_prompt
from synapse_agent.prompt.renderer import TemplateRenderer
from synapse_agent.tools.dispatcher import ToolDispatcher
from synapse_agent.types.messages import FinishReason, Message, Role

REVALIDATE_VIEW = "revalidate_response.j2"


@dataclass
class LoopResult:
    """Outcome of the tool loop, before output validation.

    Attributes:
        content: The raw final answer ("" when the model sent none).
        iterations: Number of integration exchanges.
        tool_rounds: Number of tool calls dispatched.
    """

    content: str
    iterations: int
    tool_rounds: int


@dataclass
class AgentLoop:
    """One agent invocation over already-resolved collaborators."""

    integration: Integration
    memory: Memory
    dispatcher: ToolDispatcher
    renderer: TemplateRenderer
    prompt_view: str
    output_schema: OutputSchema | None = None
    extra_inputs: dict[str, Any] = field(default_factory=dict)
    max_tool_rounds: int | None = None
    max_validation_retries: int = 3
    emitter: EventEmitter | None = None
    run_id: str = field(default_factory=lambda: uuid4().hex)

    async def _emit(self, event_type: AgentEvent, event: BaseEvent) -> None:
        if self.emitter is not None:
            await self.emitter.emit_async(event_type, event)

    # =========================================================================
    # Prompt
    # =========================================================================

    def build_inputs(self, input: dict[str, Any]) -> dict[str, Any]:
        """Merge everything a prompt template can see.

        Later sources win on key collisions: caller input, the agent's extra
        inputs, memory inputs, then ``output_rules`` and ``tools``.
        """
        caller_input = dict(input)
        image = caller_input.get("image")
        if image is not None:
            if isinstance(image, str):
                image = {"url": image}
            caller_input["image"] = encode_payload(image)

        return {
            **caller_input,
            **self.extra_inputs,
            **self.memory.as_inputs(),
            "output_rules": self.output_schema.rules_prompt() if self.output_schema else "",
            "tools": self.dispatcher.registry.list_names(),
        }

    def render_prompt(self, input: dict[str, Any]) -> str:
        return self.renderer.render(self.prompt_view, self.build_inputs(input))

    # =========================================================================
    # Tool loop
    # =========================================================================

    async def run_tool_loop(
        self,
        input: dict[str, Any],
        extra_args: dict[str, Any] | None = None,
    ) -> LoopResult:
        """Run until the integration reports STOP.

        Each tool call is stored in memory as a tool Message, so the next
        rendered prompt carries its result.

        Raises:
            IterationLimitExceededError: If a tool call arrives after
                max_tool_rounds rounds.
            UnrecognizedFinishSignalError: If the finish reason is neither
                TOOL_CALL nor STOP.
        """
        tools = self.dispatcher.registry.list()
        iteration = 0
        tool_rounds = 0

        while True:
            iteration += 1
            await self._emit(
                AgentEvent.ITERATION_START,
                IterationStartEvent(run_id=self.run_id, iteration=iteration),
            )

            await self.memory.load()
            messages = parse_prompt(self.render_prompt(input))
            response = await self.integration.handle_completion(messages, tools, extra_args)

            await self._emit(
                AgentEvent.INTEGRATION_END,
                IntegrationEndEvent(
                    run_id=self.run_id,
                    iteration=iteration,
                    finish_reason=str(response.finish_reason),
                    message_count=len(messages),
                ),
            )

            if response.finish_reason == FinishReason.TOOL_CALL:
                if self.max_tool_rounds is not None and tool_rounds >= self.max_tool_rounds:
                    raise IterationLimitExceededError(self.max_tool_rounds)

                tool_call = response.tool_call
                await self._emit(
                    AgentEvent.TOOL_START,
                    ToolStartEvent(
                        run_id=self.run_id,
                        tool_call_id=tool_call.id,
                        tool_name=tool_call.name,
                        arguments=tool_call.arguments,
                    ),
                )

                result = await self.dispatcher.dispatch(tool_call)
                await self.memory.create(
                    Message(
                        role=Role.TOOL,
                        content=response.content,
                        tool_call_id=tool_call.id,
                        tool_name=tool_call.name,
                        tool_arguments=tool_call.arguments,
                        tool_content=result,
                    )
                )
                tool_rounds += 1

                await self._emit(
                    AgentEvent.TOOL_END,
                    ToolEndEvent(
                        run_id=self.run_id,
                        tool_call_id=tool_call.id,
                        tool_name=tool_call.name,
                        result=result,
                    ),
                )
                continue

            if response.finish_reason == FinishReason.STOP:
                return LoopResult(
                    content=response.content or "",
                    iterations=iteration,
                    tool_rounds=tool_rounds,
                )

            raise UnrecognizedFinishSignalError(response.finish_reason)

    # =========================================================================
    # Output validation
    # =========================================================================

    async def validate_output(
        self,
        raw: str,
        extra_args: dict[str, Any] | None = None,
    ) -> Any:
        """Validate the raw answer, asking the model to fix it on failure.

        Without an output schema the raw text is returned unchanged.

        Raises:
            OutputValidationError: If the answer still fails after
                max_validation_retries corrections.
        """
        if self.output_schema is None:
            return raw

        attempt = 0
        while True:
            await self._emit(
                AgentEvent.VALIDATION_START,
                ValidationStartEvent(run_id=self.run_id, attempt=attempt),
            )
            try:
                return self.output_schema.validate(raw)
            except OutputValidationError as e:
                if attempt >= self.max_validation_retries:
                    raise
                attempt += 1
                await self._emit(
                    AgentEvent.VALIDATION_RETRY,
                    ValidationRetryEvent(run_id=self.run_id, attempt=attempt, errors=e.errors),
                )
                prompt = self.renderer.render(
                    REVALIDATE_VIEW,
                    {
                        "response": raw,
                        "errors": e.errors,
                        "output_rules": self.output_schema.rules_prompt(),
                    },
                )
                response = await self.integration.handle_validation_completion(
                    Message(role=Role.USER, content=prompt.strip()),
                    extra_args,
                )
                raw = response.content or ""

    # =========================================================================
    # Run
    # =========================================================================

    async def run(
        self,
        input: dict[str, Any],
        extra_args: dict[str, Any] | None = None,
    ) -> Any:
        await self._emit(
            AgentEvent.RUN_START,
            RunStartEvent(run_id=self.run_id, input_keys=sorted(input)),
        )
        try:
            result = await self.run_tool_loop(input, extra_args)
            output = await self.validate_output(result.content, extra_args)
        except Exception as e:
            await self._emit(
                AgentEvent.RUN_ERROR,
                RunErrorEvent(run_id=self.run_id, error=str(e), error_type=type(e).__name__),
            )
            raise

        await self._emit(
            AgentEvent.RUN_END,
            RunEndEvent(
                run_id=self.run_id,
                iterations=result.iterations,
                tool_rounds=result.tool_rounds,
                output=output,
            ),
        )
        return output


__all__ = ["AgentLoop", "LoopResult", "REVALIDATE_VIEW"]
