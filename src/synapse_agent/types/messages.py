"""Message types for synapse_agent.

This module defines the value objects that flow through the agent loop:
- Role and FinishReason enums
- ContentSegment types (TextSegment, ImageSegment) for structured user content
- Message, one immutable conversation turn
- ToolCall and Response, what an integration hands back to the loop
- EmbeddingResponse for embedding requests
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Role(str, Enum):
    """The author of a conversation turn."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class FinishReason(str, Enum):
    """Finish signals the agent loop knows how to act on.

    Integrations normalise their provider-specific values onto these; any
    other value is passed through raw and rejected by the loop.
    """

    TOOL_CALL = "tool_calls"
    STOP = "stop"


class TextSegment(BaseModel):
    """A text part of structured message content.

    Attributes:
        type: Discriminator field, always "text".
        text: The text content.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class ImageSegment(BaseModel):
    """An image reference part of structured message content.

    Attributes:
        type: Discriminator field, always "image_url".
        image_url: The decoded image reference, e.g. ``{"url": "http://..."}``.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["image_url"] = "image_url"
    image_url: dict[str, Any]

    @property
    def url(self) -> str | None:
        """The image URL, if the reference carries one."""
        value = self.image_url.get("url")
        return value if isinstance(value, str) else None


ContentSegment = Annotated[
    Union[TextSegment, ImageSegment],
    Field(discriminator="type"),
]


class Message(BaseModel):
    """One conversation turn.

    Messages are immutable; a correction is a new Message.

    Attributes:
        role: Who produced the turn.
        content: Plain text, or a text+image segment list for user turns.
        tool_call_id: ID of the tool call this turn invokes or answers.
        tool_name: Name of the invoked tool.
        tool_arguments: Raw (JSON text) tool arguments.
        tool_content: Raw tool output.
        finish_reason: Finish signal reported with the turn, if any.
    """

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str | list[ContentSegment] | None = None
    tool_call_id: str | None = None
    tool_name: str | None = None
    tool_arguments: str | None = None
    tool_content: Any = None
    finish_reason: str | None = None

    @model_validator(mode="after")
    def _check_invariants(self) -> "Message":
        has_tool_detail = (
            self.tool_name is not None
            or self.tool_arguments is not None
            or self.tool_content is not None
        )
        if has_tool_detail and self.tool_call_id is None:
            raise ValueError("tool_name, tool_arguments and tool_content require tool_call_id")
        if isinstance(self.content, list) and self.role != Role.USER:
            raise ValueError("structured content is only allowed on user messages")
        return self

    @property
    def is_tool_turn(self) -> bool:
        """True when the message carries tool call metadata."""
        return self.tool_call_id is not None

    def text(self) -> str:
        """Return the plain text of the message."""
        if self.content is None:
            return ""
        if isinstance(self.content, str):
            return self.content
        return " ".join(s.text for s in self.content if isinstance(s, TextSegment))

    def image(self) -> ImageSegment | None:
        """Return the image segment of structured content, if any."""
        if isinstance(self.content, list):
            for segment in self.content:
                if isinstance(segment, ImageSegment):
                    return segment
        return None

    def tool_payload(self) -> dict[str, Any] | None:
        """Return the tool metadata as the dict carried by a block's tool attribute."""
        if self.tool_call_id is None:
            return None
        return {
            "id": self.tool_call_id,
            "name": self.tool_name,
            "arguments": self.tool_arguments,
            "content": self.tool_content,
        }


class ToolFunction(BaseModel):
    """The function part of a tool call.

    Attributes:
        name: Name of the tool to call.
        arguments: Raw encoded arguments, normally JSON text.
    """

    name: str = Field(..., min_length=1)
    arguments: str = ""


class ToolCall(BaseModel):
    """A tool call requested by the model.

    Attributes:
        id: Unique identifier for this tool call.
        function: The tool name and its raw arguments.
    """

    id: str = Field(..., min_length=1)
    function: ToolFunction

    @property
    def name(self) -> str:
        """Shortcut for ``function.name``."""
        return self.function.name

    @property
    def arguments(self) -> str:
        """Shortcut for ``function.arguments``."""
        return self.function.arguments


class Response(BaseModel):
    """The outcome of one integration exchange.

    Attributes:
        role: Role of the reply, normally "assistant".
        content: Text content of the reply, if any.
        finish_reason: Normalised finish signal (see FinishReason).
        tool_call: The requested tool call when finish_reason is "tool_calls".
    """

    role: Role = Role.ASSISTANT
    content: str | None = None
    finish_reason: str
    tool_call: ToolCall | None = None

    @model_validator(mode="after")
    def _tool_call_required(self) -> "Response":
        if self.finish_reason == FinishReason.TOOL_CALL.value and self.tool_call is None:
            raise ValueError("a tool_calls response must carry a tool_call")
        return self


class EmbeddingResponse(BaseModel):
    """An embedding vector returned by an integration.

    Attributes:
        embedding: The embedding values.
    """

    embedding: list[float]


__all__ = [
    "ContentSegment",
    "EmbeddingResponse",
    "FinishReason",
    "ImageSegment",
    "Message",
    "Response",
    "Role",
    "TextSegment",
    "ToolCall",
    "ToolFunction",
]
