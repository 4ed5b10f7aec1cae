"""In-process memory backend."""

from __future__ import annotations

from synapse_agent.memory.base import Memory
from synapse_agent.types.messages import Message


class CollectionMemory(Memory):
    """Keeps the conversation in a list for the lifetime of the object."""

    def __init__(self, messages: list[Message] | None = None) -> None:
        self._messages: list[Message] = list(messages or [])

    async def load(self) -> None:
        return None

    async def create(self, message: Message) -> None:
        self._messages.append(message)

    def get(self) -> list[Message]:
        return list(self._messages)

    async def clear(self) -> None:
        self._messages.clear()


__all__ = ["CollectionMemory"]
