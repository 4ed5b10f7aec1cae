"""Prompt parser.

Turns rendered template text into an ordered list of Messages. Templates tag
each turn with a message block::

    <message type="user" image="BASE64_JSON">What is in this picture?</message>
    <message type="tool" tool="BASE64_JSON">...</message>

Text without any message block is a single user turn.
"""

from __future__ import annotations

import base64
import json
import re
from typing import Any

from synapse_agent.exceptions import (
    InvalidTemplateError,
    MalformedImagePayloadError,
    MalformedPayloadError,
    MalformedToolPayloadError,
)
from synapse_agent.types.messages import ImageSegment, Message, Role, TextSegment

# Non-greedy so a block always ends at the first closing tag.
_BLOCK_RE = re.compile(
    r"<message(?P<attrs>\s[^>]*)?>(?P<content>.*?)</message>",
    re.DOTALL,
)
_ATTR_RE = re.compile(r"""(?P<name>[\w-]+)\s*=\s*(?P<quote>['"])(?P<value>.*?)(?P=quote)""", re.DOTALL)
_URLSAFE = str.maketrans("-_", "+/")
_ROLES = {r.value: r for r in Role}


def encode_payload(payload: Any) -> str:
    """Encode a JSON-serialisable value as base64(JSON) for a block attribute."""
    return base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")


def decode_payload(
    value: str,
    error: type[MalformedPayloadError] = MalformedPayloadError,
) -> dict[str, Any]:
    """Decode a base64(JSON) block attribute into a dict.

    Both the standard and the URL-safe base64 alphabets are accepted, and
    missing padding is tolerated.

    Raises:
        MalformedPayloadError: (or the given subclass) if the value is not
            base64, not JSON, or not a JSON object.
    """
    normalized = value.strip().translate(_URLSAFE)
    normalized += "=" * (-len(normalized) % 4)
    try:
        decoded = json.loads(base64.b64decode(normalized, validate=True).decode("utf-8"))
    except ValueError as e:
        raise error(value, str(e)) from e
    if not isinstance(decoded, dict):
        raise error(value, f"expected a JSON object, got {type(decoded).__name__}")
    return decoded


def _parse_attributes(raw: str | None) -> dict[str, str]:
    if not raw:
        return {}
    return {m.group("name"): m.group("value") for m in _ATTR_RE.finditer(raw)}


def _block_to_message(attrs: dict[str, str], content: str) -> Message:
    role_name = attrs.get("type")
    if not role_name:
        raise InvalidTemplateError()
    role = _ROLES.get(role_name)
    if role is None:
        raise InvalidTemplateError(f"Unknown message type '{role_name}'.")

    data: dict[str, Any] = {"role": role, "content": content}

    if "tool" in attrs:
        tool = decode_payload(attrs["tool"], MalformedToolPayloadError)
        if not tool.get("id"):
            raise MalformedToolPayloadError(attrs["tool"], "missing tool call id")
        arguments = tool.get("arguments")
        if arguments is not None and not isinstance(arguments, str):
            arguments = json.dumps(arguments)
        data["tool_call_id"] = str(tool["id"])
        data["tool_name"] = tool.get("name")
        data["tool_arguments"] = arguments
        data["tool_content"] = tool.get("content")

    # Image references only mean something on user turns.
    if "image" in attrs and role == Role.USER:
        image = decode_payload(attrs["image"], MalformedImagePayloadError)
        data["content"] = [TextSegment(text=content), ImageSegment(image_url=image)]

    return Message(**data)


def parse_prompt(prompt: str) -> list[Message]:
    """Parse rendered prompt text into Messages, in block order.

    Args:
        prompt: The rendered template text.

    Returns:
        One Message per message block, or a single user Message holding the
        trimmed text when the prompt has no blocks.

    Raises:
        InvalidTemplateError: If a block has no (or an unknown) type.
        MalformedToolPayloadError: If a tool attribute cannot be decoded.
        MalformedImagePayloadError: If a user block's image attribute cannot
            be decoded.
    """
    messages = [
        _block_to_message(_parse_attributes(match.group("attrs")), match.group("content").strip())
        for match in _BLOCK_RE.finditer(prompt)
    ]

    if not messages:
        messages.append(Message(role=Role.USER, content=prompt.strip()))

    return messages


__all__ = ["decode_payload", "encode_payload", "parse_prompt"]
