"""Shared test doubles."""

from typing import Any

import pytest

from synapse_agent.integrations.base import Integration
from synapse_agent.prompt.renderer import JinjaTemplateRenderer
from synapse_agent.types.messages import Message, Response, ToolCall, ToolFunction


class ScriptedIntegration(Integration):
    """Integration that replays queued responses and records every call."""

    def __init__(self, responses: list[Response]) -> None:
        super().__init__(api_key="test-key")
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []
        self.validation_calls: list[Message] = []

    @property
    def name(self) -> str:
        return "scripted"

    async def handle_completion(self, messages, tools, extra_args=None) -> Response:
        self.calls.append({"messages": messages, "tools": tools, "extra_args": extra_args})
        return self.responses.pop(0)

    async def handle_validation_completion(self, message, extra_args=None) -> Response:
        self.validation_calls.append(message)
        return self.responses.pop(0)


def stop(content: str | None) -> Response:
    return Response(content=content, finish_reason="stop")


def tool_call(call_id: str, name: str, arguments: str = "{}") -> Response:
    return Response(
        content=None,
        finish_reason="tool_calls",
        tool_call=ToolCall(id=call_id, function=ToolFunction(name=name, arguments=arguments)),
    )


@pytest.fixture
def renderer():
    """A renderer with a minimal in-memory prompt template."""
    return JinjaTemplateRenderer(
        templates={
            "test_prompt.j2": (
                '<message type="system">tools: {{ tools | join(",") }}</message>\n'
                '<message type="user">{{ input }}</message>\n'
                '{% include "parts/memory_as_messages.j2" %}'
            ),
        }
    )
