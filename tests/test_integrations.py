"""Tests for the OpenAI and Anthropic integrations and the registry."""

import json

import httpx
import pytest

from synapse_agent.exceptions import (
    IntegrationNotFoundError,
    InvalidModelStringError,
    MalformedToolArgumentsError,
)
from synapse_agent.integrations import (
    AnthropicIntegration,
    IntegrationRegistry,
    OpenAIIntegration,
    get_default_registry,
)
from synapse_agent.tools import tool
from synapse_agent.types import FinishReason, ImageSegment, Message, Role, TextSegment


@tool()
def search(query: str) -> str:
    """Search the web."""
    return query


def tool_turn() -> Message:
    return Message(
        role=Role.TOOL,
        tool_call_id="call_1",
        tool_name="search",
        tool_arguments='{"query": "x"}',
        tool_content="result",
    )


class Recorder:
    """httpx MockTransport handler that records requests."""

    def __init__(self, payload: dict, status_code: int = 200) -> None:
        self.payload = payload
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def body(self) -> dict:
        return json.loads(self.requests[-1].content)


def openai_reply(message: dict, finish_reason: str) -> dict:
    return {"choices": [{"index": 0, "message": message, "finish_reason": finish_reason}]}


class TestOpenAIIntegration:
    """Tests for OpenAIIntegration."""

    def make(self, recorder: Recorder) -> OpenAIIntegration:
        return OpenAIIntegration(api_key="sk-test", transport=httpx.MockTransport(recorder))

    def test_api_key_from_env(self, monkeypatch):
        """The API key falls back to OPENAI_API_KEY."""
        monkeypatch.setenv("OPENAI_API_KEY", "from-env")
        assert OpenAIIntegration().api_key == "from-env"

    @pytest.mark.asyncio
    async def test_stop_response(self):
        """A plain answer maps to a STOP response."""
        recorder = Recorder(openai_reply({"role": "assistant", "content": "42"}, "stop"))
        response = await self.make(recorder).handle_completion(
            [Message(role=Role.USER, content="?")], []
        )
        assert response.finish_reason == FinishReason.STOP
        assert response.content == "42"
        assert response.tool_call is None

        request = recorder.requests[0]
        assert request.url == "https://api.openai.com/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-test"
        assert recorder.body["model"] == "gpt-4o-mini"
        assert "tools" not in recorder.body

    @pytest.mark.asyncio
    async def test_tool_call_response(self):
        """The first tool call of the reply maps onto Response.tool_call."""
        recorder = Recorder(
            openai_reply(
                {
                    "role": "assistant",
                    "content": None,
                    "tool_calls": [
                        {"id": "call_1", "type": "function", "function": {"name": "search", "arguments": '{"query": "x"}'}},
                        {"id": "call_2", "type": "function", "function": {"name": "other", "arguments": "{}"}},
                    ],
                },
                "tool_calls",
            )
        )
        response = await self.make(recorder).handle_completion(
            [Message(role=Role.USER, content="?")], [search]
        )
        assert response.finish_reason == FinishReason.TOOL_CALL
        assert response.tool_call.id == "call_1"
        assert response.tool_call.name == "search"
        assert response.tool_call.arguments == '{"query": "x"}'
        assert recorder.body["tools"][0]["function"]["name"] == "search"

    @pytest.mark.asyncio
    async def test_unknown_finish_reason_passed_through(self):
        """Unknown finish reasons are returned raw."""
        recorder = Recorder(openai_reply({"role": "assistant", "content": "..."}, "length"))
        response = await self.make(recorder).handle_completion([Message(role=Role.USER, content="?")], [])
        assert response.finish_reason == "length"

    @pytest.mark.asyncio
    async def test_extra_args_merged(self):
        """extra_args are merged into the request body."""
        recorder = Recorder(openai_reply({"role": "assistant", "content": "ok"}, "stop"))
        await self.make(recorder).handle_completion(
            [Message(role=Role.USER, content="?")], [], {"temperature": 0, "model": "gpt-4o"}
        )
        assert recorder.body["temperature"] == 0
        assert recorder.body["model"] == "gpt-4o"

    @pytest.mark.asyncio
    async def test_message_conversion(self):
        """Tool turns expand to an assistant tool call and a tool result."""
        recorder = Recorder(openai_reply({"role": "assistant", "content": "ok"}, "stop"))
        image_msg = Message(
            role=Role.USER,
            content=[TextSegment(text="look"), ImageSegment(image_url={"url": "http://x/y.png"})],
        )
        await self.make(recorder).handle_completion(
            [Message(role=Role.SYSTEM, content="sys"), image_msg, tool_turn()], []
        )
        messages = recorder.body["messages"]
        assert messages[0] == {"role": "system", "content": "sys"}
        assert messages[1]["content"] == [
            {"type": "text", "text": "look"},
            {"type": "image_url", "image_url": {"url": "http://x/y.png"}},
        ]
        assert messages[2] == {
            "role": "assistant",
            "content": None,
            "tool_calls": [
                {
                    "id": "call_1",
                    "type": "function",
                    "function": {"name": "search", "arguments": '{"query": "x"}'},
                }
            ],
        }
        assert messages[3] == {"role": "tool", "content": "result", "tool_call_id": "call_1"}

    @pytest.mark.asyncio
    async def test_http_error_raises(self):
        """HTTP errors are raised."""
        recorder = Recorder({"error": {"message": "bad key"}}, status_code=401)
        with pytest.raises(httpx.HTTPStatusError):
            await self.make(recorder).handle_completion([Message(role=Role.USER, content="?")], [])

    @pytest.mark.asyncio
    async def test_validation_completion(self):
        """handle_validation_completion sends one message and no tools."""
        recorder = Recorder(openai_reply({"role": "assistant", "content": "{}"}, "stop"))
        await self.make(recorder).handle_validation_completion(Message(role=Role.USER, content="fix"))
        assert recorder.body["messages"] == [{"role": "user", "content": "fix"}]
        assert "tools" not in recorder.body

    @pytest.mark.asyncio
    async def test_create_embeddings(self):
        """create_embeddings returns the first embedding vector."""
        recorder = Recorder({"data": [{"embedding": [0.1, 0.2]}]})
        result = await self.make(recorder).create_embeddings("hello")
        assert result.embedding == [0.1, 0.2]
        assert recorder.requests[0].url.path == "/v1/embeddings"
        assert recorder.body == {"model": "text-embedding-3-small", "input": "hello"}


class TestAnthropicIntegration:
    """Tests for AnthropicIntegration."""

    def make(self, recorder: Recorder) -> AnthropicIntegration:
        return AnthropicIntegration(api_key="ak-test", transport=httpx.MockTransport(recorder))

    @pytest.mark.asyncio
    async def test_stop_response(self):
        """end_turn maps to STOP and text blocks are joined."""
        recorder = Recorder(
            {
                "role": "assistant",
                "content": [{"type": "text", "text": "4"}, {"type": "text", "text": "2"}],
                "stop_reason": "end_turn",
            }
        )
        response = await self.make(recorder).handle_completion(
            [Message(role=Role.SYSTEM, content="be brief"), Message(role=Role.USER, content="?")], []
        )
        assert response.finish_reason == FinishReason.STOP
        assert response.content == "42"

        request = recorder.requests[0]
        assert request.url == "https://api.anthropic.com/v1/messages"
        assert request.headers["x-api-key"] == "ak-test"
        assert request.headers["anthropic-version"] == "2023-06-01"
        assert recorder.body["system"] == "be brief"
        assert recorder.body["messages"] == [{"role": "user", "content": "?"}]
        assert recorder.body["max_tokens"] == 4096

    @pytest.mark.asyncio
    async def test_tool_use_response(self):
        """tool_use maps to TOOL_CALL with JSON-encoded input."""
        recorder = Recorder(
            {
                "role": "assistant",
                "content": [{"type": "tool_use", "id": "toolu_1", "name": "search", "input": {"query": "x"}}],
                "stop_reason": "tool_use",
            }
        )
        response = await self.make(recorder).handle_completion(
            [Message(role=Role.USER, content="?")], [search]
        )
        assert response.finish_reason == FinishReason.TOOL_CALL
        assert response.tool_call.id == "toolu_1"
        assert json.loads(response.tool_call.arguments) == {"query": "x"}
        assert recorder.body["tools"][0]["name"] == "search"
        assert "input_schema" in recorder.body["tools"][0]

    @pytest.mark.asyncio
    async def test_message_conversion(self):
        """Tool turns become tool_use and tool_result blocks; images become URL sources."""
        recorder = Recorder({"role": "assistant", "content": [], "stop_reason": "stop_sequence"})
        image_msg = Message(
            role=Role.USER,
            content=[TextSegment(text="look"), ImageSegment(image_url={"url": "http://x/y.png"})],
        )
        response = await self.make(recorder).handle_completion([image_msg, tool_turn()], [], {"max_tokens": 100})
        assert response.finish_reason == FinishReason.STOP
        assert response.content is None

        messages = recorder.body["messages"]
        assert messages[0]["content"] == [
            {"type": "text", "text": "look"},
            {"type": "image", "source": {"type": "url", "url": "http://x/y.png"}},
        ]
        assert messages[1] == {
            "role": "assistant",
            "content": [{"type": "tool_use", "id": "call_1", "name": "search", "input": {"query": "x"}}],
        }
        assert messages[2] == {
            "role": "user",
            "content": [{"type": "tool_result", "tool_use_id": "call_1", "content": "result"}],
        }
        assert recorder.body["max_tokens"] == 100
        assert "system" not in recorder.body

    @pytest.mark.asyncio
    @pytest.mark.parametrize("arguments", ["{not json", "[1, 2]"])
    async def test_malformed_stored_arguments_raise(self, arguments):
        """A tool turn whose stored arguments are not a JSON object is not replayed."""
        recorder = Recorder({"role": "assistant", "content": [], "stop_reason": "end_turn"})
        turn = tool_turn().model_copy(update={"tool_arguments": arguments})
        with pytest.raises(MalformedToolArgumentsError, match="search"):
            await self.make(recorder).handle_completion([turn], [])
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_unknown_stop_reason_passed_through(self):
        """Unmapped stop reasons are returned raw."""
        recorder = Recorder({"role": "assistant", "content": [], "stop_reason": "max_tokens"})
        response = await self.make(recorder).handle_completion([Message(role=Role.USER, content="?")], [])
        assert response.finish_reason == "max_tokens"

    @pytest.mark.asyncio
    async def test_embeddings_not_supported(self):
        """Anthropic has no embeddings endpoint."""
        with pytest.raises(NotImplementedError):
            await AnthropicIntegration(api_key="x").create_embeddings("hi")


class TestIntegrationRegistry:
    """Tests for IntegrationRegistry."""

    def test_get_integration(self):
        """A model string instantiates the registered class with its model."""
        registry = IntegrationRegistry()
        registry.register("openai", OpenAIIntegration)
        integration = registry.get_integration("openai:gpt-4o", api_key="k")
        assert isinstance(integration, OpenAIIntegration)
        assert integration.model == "gpt-4o"
        assert integration.api_key == "k"

    def test_model_with_colons(self):
        """Only the first colon separates provider and model."""
        registry = IntegrationRegistry()
        registry.register("openai", OpenAIIntegration)
        assert registry.get_integration("openai:ft:gpt-4o:org").model == "ft:gpt-4o:org"

    @pytest.mark.parametrize("model_string", ["", "openai", ":gpt-4o", "openai:"])
    def test_invalid_model_string(self, model_string):
        """Malformed model strings are rejected."""
        with pytest.raises(InvalidModelStringError):
            IntegrationRegistry().get_integration(model_string)

    def test_unknown_provider(self):
        """Unknown providers raise IntegrationNotFoundError."""
        with pytest.raises(IntegrationNotFoundError):
            IntegrationRegistry().get_integration("nope:model")

    def test_register_validation(self):
        """Only named Integration subclasses can be registered."""
        registry = IntegrationRegistry()
        with pytest.raises(ValueError):
            registry.register(" ", OpenAIIntegration)
        with pytest.raises(TypeError):
            registry.register("x", dict)

    def test_default_registry(self):
        """The default registry knows openai and anthropic."""
        registry = get_default_registry()
        assert registry is get_default_registry()
        assert {"openai", "anthropic"} <= set(registry.list_integrations())
