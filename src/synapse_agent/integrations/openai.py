"""OpenAI integration.

This module implements the OpenAI chat completions integration, with tool
calling and embeddings, over httpx.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from synapse_agent.integrations.base import Integration
from synapse_agent.types.messages import (
    EmbeddingResponse,
    FinishReason,
    Message,
    Response,
    Role,
    ToolCall,
    ToolFunction,
)

if TYPE_CHECKING:
    from synapse_agent.tools.definition import ToolDefinition

logger = logging.getLogger(__name__)

_FINISH_REASONS = {
    "tool_calls": FinishReason.TOOL_CALL.value,
    "stop": FinishReason.STOP.value,
}


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


class OpenAIIntegration(Integration):
    """OpenAI chat completions integration."""

    ENV_KEY = "OPENAI_API_KEY"
    DEFAULT_BASE_URL = "https://api.openai.com/v1"
    DEFAULT_MODEL = "gpt-4o-mini"
    DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        embedding_model: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(api_key=api_key, base_url=base_url, model=model, **kwargs)
        self._embedding_model = embedding_model or self.DEFAULT_EMBEDDING_MODEL

    @property
    def name(self) -> str:
        return "openai"

    def _get_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _convert_messages_to_openai(self, messages: list[Message]) -> list[dict[str, Any]]:
        """Convert Messages to OpenAI message format.

        A tool turn becomes two OpenAI messages: the assistant's tool call and
        the tool's result.
        """
        result: list[dict[str, Any]] = []

        for msg in messages:
            if msg.role == Role.TOOL:
                if msg.tool_name:
                    result.append({
                        "role": "assistant",
                        "content": msg.text() or None,
                        "tool_calls": [
                            {
                                "id": msg.tool_call_id,
                                "type": "function",
                                "function": {
                                    "name": msg.tool_name,
                                    "arguments": msg.tool_arguments or "{}",
                                },
                            }
                        ],
                    })
                tool_msg: dict[str, Any] = {"role": "tool", "content": _stringify(msg.tool_content)}
                if msg.tool_call_id:
                    tool_msg["tool_call_id"] = msg.tool_call_id
                result.append(tool_msg)
                continue

            openai_msg: dict[str, Any] = {"role": msg.role.value}
            if isinstance(msg.content, list):
                openai_msg["content"] = [segment.model_dump() for segment in msg.content]
            else:
                openai_msg["content"] = msg.content or ""
            result.append(openai_msg)

        return result

    def _build_request_body(
        self,
        messages: list[Message],
        tools: list["ToolDefinition"],
        extra_args: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": self._model,
            "messages": self._convert_messages_to_openai(messages),
        }
        if tools:
            body["tools"] = [t.to_openai_schema() for t in tools]
        if extra_args:
            body.update(extra_args)
        return body

    @staticmethod
    def _convert_openai_response(data: dict[str, Any]) -> Response:
        choices = data.get("choices") or []
        if not choices:
            return Response(content=None, finish_reason="")

        choice = choices[0]
        message = choice.get("message") or {}
        raw_reason = choice.get("finish_reason") or ""

        tool_call: ToolCall | None = None
        if message.get("tool_calls"):
            first = message["tool_calls"][0]
            function = first.get("function") or {}
            tool_call = ToolCall(
                id=first["id"],
                function=ToolFunction(
                    name=function["name"],
                    arguments=function.get("arguments") or "",
                ),
            )

        return Response(
            role=message.get("role", "assistant"),
            content=message.get("content"),
            finish_reason=_FINISH_REASONS.get(raw_reason, raw_reason),
            tool_call=tool_call,
        )

    async def _post(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        async with self._client() as client:
            response = await client.post(
                f"{self.base_url}{path}",
                headers=self._get_headers(),
                json=body,
            )
            if response.is_error:
                logger.warning("OpenAI API error %d: %s", response.status_code, response.text)
            response.raise_for_status()
            return response.json()

    async def handle_completion(
        self,
        messages: list[Message],
        tools: list["ToolDefinition"],
        extra_args: dict[str, Any] | None = None,
    ) -> Response:
        body = self._build_request_body(messages, tools, extra_args)
        data = await self._post("/chat/completions", body)
        return self._convert_openai_response(data)

    async def create_embeddings(
        self,
        text: str,
        extra_args: dict[str, Any] | None = None,
    ) -> EmbeddingResponse:
        body: dict[str, Any] = {"model": self._embedding_model, "input": text}
        if extra_args:
            body.update(extra_args)
        data = await self._post("/embeddings", body)
        return EmbeddingResponse(embedding=data["data"][0]["embedding"])


__all__ = ["OpenAIIntegration"]
