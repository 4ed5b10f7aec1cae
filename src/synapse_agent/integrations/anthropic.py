"""Anthropic Messages API integration."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from synapse_agent.exceptions import MalformedToolArgumentsError
from synapse_agent.integrations.base import Integration
from synapse_agent.types.messages import (
    FinishReason,
    ImageSegment,
    Message,
    Response,
    Role,
    ToolCall,
    ToolFunction,
)

if TYPE_CHECKING:
    from synapse_agent.tools.definition import ToolDefinition

logger = logging.getLogger(__name__)

_STOP_REASONS = {
    "tool_use": FinishReason.TOOL_CALL.value,
    "end_turn": FinishReason.STOP.value,
    "stop_sequence": FinishReason.STOP.value,
}


class AnthropicIntegration(Integration):
    """Claude models through the Messages API.

    System messages are lifted into the top-level ``system`` field and a tool
    turn is replayed as an assistant ``tool_use`` block followed by a user
    ``tool_result`` block.
    """

    ENV_KEY = "ANTHROPIC_API_KEY"
    DEFAULT_BASE_URL = "https://api.anthropic.com"
    DEFAULT_MODEL = "claude-3-5-sonnet-latest"
    DEFAULT_MAX_TOKENS = 4096

    @property
    def name(self) -> str:
        return "anthropic"

    def _get_headers(self) -> dict[str, str]:
        """Get headers for Anthropic API requests."""
        return {
            "x-api-key": self.api_key or "",
            "anthropic-version": "2023-06-01",
            "content-type": "application/json",
        }

    @staticmethod
    def _tool_input(name: str, arguments: str | None) -> dict[str, Any]:
        if not arguments or not arguments.strip():
            return {}
        try:
            decoded = json.loads(arguments)
        except json.JSONDecodeError as e:
            raise MalformedToolArgumentsError(name, arguments, str(e)) from e
        if not isinstance(decoded, dict):
            raise MalformedToolArgumentsError(
                name, arguments, f"expected a JSON object, got {type(decoded).__name__}"
            )
        return decoded

    def _convert_messages_to_anthropic(
        self, messages: list[Message]
    ) -> tuple[str | None, list[dict[str, Any]]]:
        """Split Messages into the system prompt and Anthropic message dicts."""
        system_parts: list[str] = []
        anthropic_messages: list[dict[str, Any]] = []

        for msg in messages:
            if msg.role == Role.SYSTEM:
                system_parts.append(msg.text())
                continue

            if msg.role == Role.TOOL:
                if msg.tool_name:
                    anthropic_messages.append({
                        "role": "assistant",
                        "content": [{
                            "type": "tool_use",
                            "id": msg.tool_call_id,
                            "name": msg.tool_name,
                            "input": self._tool_input(msg.tool_name, msg.tool_arguments),
                        }],
                    })
                content = msg.tool_content
                anthropic_messages.append({
                    "role": "user",
                    "content": [{
                        "type": "tool_result",
                        "tool_use_id": msg.tool_call_id,
                        "content": content if isinstance(content, str) else json.dumps(content),
                    }],
                })
                continue

            if isinstance(msg.content, list):
                blocks: list[dict[str, Any]] = []
                for segment in msg.content:
                    if isinstance(segment, ImageSegment):
                        blocks.append({"type": "image", "source": {"type": "url", "url": segment.url}})
                    else:
                        blocks.append({"type": "text", "text": segment.text})
                anthropic_messages.append({"role": msg.role.value, "content": blocks})
            else:
                anthropic_messages.append({"role": msg.role.value, "content": msg.content or ""})

        system = "\n\n".join(part for part in system_parts if part) or None
        return system, anthropic_messages

    def _build_request_body(
        self,
        messages: list[Message],
        tools: list["ToolDefinition"],
        extra_args: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        system, anthropic_messages = self._convert_messages_to_anthropic(messages)
        body: dict[str, Any] = {
            "model": self._model,
            "messages": anthropic_messages,
            "max_tokens": self.DEFAULT_MAX_TOKENS,
        }
        if system:
            body["system"] = system
        if tools:
            body["tools"] = [t.to_anthropic_schema() for t in tools]
        if extra_args:
            body.update(extra_args)
        return body

    @staticmethod
    def _convert_anthropic_response(data: dict[str, Any]) -> Response:
        text_content = ""
        tool_call: ToolCall | None = None

        for block in data.get("content", []):
            if block.get("type") == "text":
                text_content += block.get("text", "")
            elif block.get("type") == "tool_use" and tool_call is None:
                tool_call = ToolCall(
                    id=block["id"],
                    function=ToolFunction(
                        name=block["name"],
                        arguments=json.dumps(block.get("input") or {}),
                    ),
                )

        raw_reason = data.get("stop_reason") or ""
        return Response(
            role=data.get("role", "assistant"),
            content=text_content or None,
            finish_reason=_STOP_REASONS.get(raw_reason, raw_reason),
            tool_call=tool_call,
        )

    async def handle_completion(
        self,
        messages: list[Message],
        tools: list["ToolDefinition"],
        extra_args: dict[str, Any] | None = None,
    ) -> Response:
        body = self._build_request_body(messages, tools, extra_args)
        async with self._client() as client:
            response = await client.post(
                f"{self.base_url}/v1/messages",
                headers=self._get_headers(),
                json=body,
            )
            if response.is_error:
                logger.warning("Anthropic API error %d: %s", response.status_code, response.text)
            response.raise_for_status()
            return self._convert_anthropic_response(response.json())


__all__ = ["AnthropicIntegration"]
