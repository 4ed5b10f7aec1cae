"""Tests for the prompt parser and its base64(JSON) codec."""

import base64
import json

import pytest

from synapse_agent.exceptions import (
    InvalidTemplateError,
    MalformedImagePayloadError,
    MalformedToolPayloadError,
)
from synapse_agent.prompt import decode_payload, encode_payload, parse_prompt
from synapse_agent.types import ImageSegment, Role, TextSegment


def b64(obj) -> str:
    return base64.b64encode(json.dumps(obj).encode()).decode()


class TestPlainText:
    """Prompts without message blocks."""

    def test_no_blocks_is_single_user_message(self):
        """Text without blocks becomes one trimmed user message."""
        messages = parse_prompt("  \n What is 2+2?  \n")
        assert len(messages) == 1
        assert messages[0].role is Role.USER
        assert messages[0].content == "What is 2+2?"

    def test_empty_prompt(self):
        """An empty prompt is one empty user message."""
        messages = parse_prompt("")
        assert [(m.role, m.content) for m in messages] == [(Role.USER, "")]


class TestMessageBlocks:
    """Prompts with message blocks."""

    def test_single_assistant_block(self):
        """A tagged block becomes a message with that role."""
        messages = parse_prompt('<message type="assistant">Hi</message>')
        assert len(messages) == 1
        assert messages[0].role is Role.ASSISTANT
        assert messages[0].content == "Hi"

    def test_blocks_in_order(self):
        """Blocks are returned in match order with text outside ignored."""
        prompt = (
            "preamble\n"
            "<message type='system'>\n  Be brief.\n</message>\n"
            "between\n"
            '<message type="user">Question?</message>'
        )
        messages = parse_prompt(prompt)
        assert [(m.role, m.content) for m in messages] == [
            (Role.SYSTEM, "Be brief."),
            (Role.USER, "Question?"),
        ]

    def test_multiline_content(self):
        """Content may span lines."""
        messages = parse_prompt('<message type="user">line one\nline two</message>')
        assert messages[0].content == "line one\nline two"

    def test_empty_content(self):
        """An empty block is a valid empty message."""
        messages = parse_prompt('<message type="assistant"></message>')
        assert messages[0].content == ""

    def test_non_greedy_match(self):
        """Each block ends at its own closing tag."""
        messages = parse_prompt(
            '<message type="user">a</message><message type="assistant">b</message>'
        )
        assert [m.content for m in messages] == ["a", "b"]

    def test_missing_type_raises(self):
        """A block without type raises InvalidTemplateError."""
        prompt = '<message type="user">ok</message><message>no role</message>'
        with pytest.raises(InvalidTemplateError) as exc_info:
            parse_prompt(prompt)
        assert "<message type='assistant'>" in str(exc_info.value)

    def test_unknown_type_raises(self):
        """A type outside the known roles raises InvalidTemplateError."""
        with pytest.raises(InvalidTemplateError):
            parse_prompt('<message type="narrator">x</message>')

    def test_attributes_in_any_order(self):
        """Attributes are matched by name, not position."""
        payload = b64({"id": "t1", "name": "search", "arguments": "{}"})
        messages = parse_prompt(f'<message tool="{payload}" type="tool">done</message>')
        assert messages[0].role is Role.TOOL
        assert messages[0].tool_call_id == "t1"


class TestToolAttribute:
    """The base64(JSON) tool attribute."""

    def test_tool_fields(self):
        """Tool metadata is decoded onto the message."""
        payload = b64({"id": "t1", "name": "search", "arguments": "{}"})
        messages = parse_prompt(f'<message type="tool" tool="{payload}">result</message>')
        msg = messages[0]
        assert msg.tool_call_id == "t1"
        assert msg.tool_name == "search"
        assert msg.tool_arguments == "{}"
        assert msg.content == "result"

    def test_tool_content_carried(self):
        """The tool content field is preserved."""
        payload = b64({"id": "t1", "name": "search", "arguments": "{}", "content": "found"})
        msg = parse_prompt(f'<message type="tool" tool="{payload}"></message>')[0]
        assert msg.tool_content == "found"

    def test_object_arguments_reserialised(self):
        """Non-string arguments become JSON text."""
        payload = b64({"id": "t1", "name": "echo", "arguments": {"x": 1}})
        msg = parse_prompt(f'<message type="tool" tool="{payload}">r</message>')[0]
        assert json.loads(msg.tool_arguments) == {"x": 1}

    def test_bad_base64_raises(self):
        """Undecodable base64 raises MalformedToolPayloadError."""
        with pytest.raises(MalformedToolPayloadError):
            parse_prompt('<message type="tool" tool="!!not-base64!!">r</message>')

    def test_bad_json_raises(self):
        """Base64 of non-JSON raises MalformedToolPayloadError."""
        payload = base64.b64encode(b"{not json").decode()
        with pytest.raises(MalformedToolPayloadError):
            parse_prompt(f'<message type="tool" tool="{payload}">r</message>')

    def test_missing_id_raises(self):
        """A tool payload without id raises MalformedToolPayloadError."""
        payload = b64({"name": "search"})
        with pytest.raises(MalformedToolPayloadError):
            parse_prompt(f'<message type="tool" tool="{payload}">r</message>')

    def test_empty_tool_attribute_raises(self):
        """An empty tool attribute is decoded, and fails, like any other."""
        with pytest.raises(MalformedToolPayloadError):
            parse_prompt('<message type="tool" tool="">r</message>')


class TestImageAttribute:
    """The base64(JSON) image attribute."""

    def test_user_image(self):
        """A user block image becomes text and image segments."""
        payload = b64({"url": "http://x/y.png"})
        msg = parse_prompt(f'<message type="user" image="{payload}">What is this?</message>')[0]
        assert msg.content == [
            TextSegment(text="What is this?"),
            ImageSegment(image_url={"url": "http://x/y.png"}),
        ]
        assert msg.image().url == "http://x/y.png"

    def test_image_ignored_on_other_roles(self):
        """The image attribute is ignored outside user blocks."""
        payload = b64({"url": "http://x/y.png"})
        msg = parse_prompt(f'<message type="assistant" image="{payload}">Hi</message>')[0]
        assert msg.content == "Hi"

    def test_malformed_image_on_other_roles_not_decoded(self):
        """A broken image attribute outside user blocks is never decoded."""
        msg = parse_prompt('<message type="system" image="%%%">Hi</message>')[0]
        assert msg.content == "Hi"

    def test_malformed_user_image_raises(self):
        """A broken image attribute on a user block raises."""
        with pytest.raises(MalformedImagePayloadError):
            parse_prompt('<message type="user" image="%%%">Hi</message>')

    def test_empty_user_image_raises(self):
        """An empty image attribute on a user block raises."""
        with pytest.raises(MalformedImagePayloadError):
            parse_prompt('<message type="user" image="">Hi</message>')


class TestPayloadCodec:
    """encode_payload / decode_payload."""

    def test_round_trip(self):
        """Encoding then decoding yields the original payload."""
        payload = {"id": "t1", "arguments": {"q": "ünïcode"}}
        assert decode_payload(encode_payload(payload)) == payload

    def test_urlsafe_alphabet_accepted(self):
        """URL-safe base64 without padding decodes."""
        payload = {"url": "http://x/?a=>>>"}
        encoded = base64.urlsafe_b64encode(json.dumps(payload).encode()).decode().rstrip("=")
        assert decode_payload(encoded) == payload

    def test_non_object_rejected(self):
        """A JSON array is not a valid payload."""
        with pytest.raises(MalformedToolPayloadError):
            decode_payload(b64([1, 2]), MalformedToolPayloadError)
