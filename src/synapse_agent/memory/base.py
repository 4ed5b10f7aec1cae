"""Memory port for synapse_agent.

A Memory is the append-only conversation log the agent loop reads before
each prompt and writes tool turns to.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from synapse_agent.prompt.parser import encode_payload
from synapse_agent.types.messages import Message, Role


class Memory(ABC):
    """Abstract base class for memory backends."""

    @abstractmethod
    async def load(self) -> None:
        """Refresh state from the backing store. May be a no-op."""

    @abstractmethod
    async def create(self, message: Message) -> None:
        """Append one message."""

    @abstractmethod
    def get(self) -> list[Message]:
        """Return the loaded messages, oldest first."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove all messages."""

    def as_inputs(self) -> dict[str, Any]:
        """Template inputs built from the loaded messages.

        Returns:
            ``memory``: a plain-text transcript, and
            ``memory_with_messages``: one dict per message with ``role``,
            ``content`` and base64(JSON) ``tool``/``image`` attributes ready
            to be written into message blocks.
        """
        messages = self.get()
        return {
            "memory": format_transcript(messages),
            "memory_with_messages": [message_to_block_inputs(m) for m in messages],
        }

    def __len__(self) -> int:
        return len(self.get())


def message_to_block_inputs(message: Message) -> dict[str, Any]:
    """Flatten a Message into the values a message block template needs."""
    tool = message.tool_payload()
    image = message.image()
    return {
        "role": message.role.value,
        "content": message.text(),
        "tool": encode_payload(tool) if tool is not None else None,
        "image": encode_payload(image.image_url) if image is not None else None,
    }


def format_transcript(messages: list[Message]) -> str:
    lines: list[str] = []
    for message in messages:
        if message.role == Role.TOOL:
            output = message.tool_content if message.tool_content is not None else message.text()
            lines.append(f"tool({message.tool_name or ''}): {output}")
        else:
            lines.append(f"{message.role.value}: {message.text()}")
    return "\n".join(lines)


__all__ = ["Memory", "format_transcript", "message_to_block_inputs"]
