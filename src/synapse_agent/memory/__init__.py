"""Conversation memory.

This subpackage provides:
- Memory, the port the agent loop reads from and appends to
- CollectionMemory, an in-process backend
- FileMemory, a JSONL file backend
"""

from synapse_agent.memory.base import Memory, format_transcript, message_to_block_inputs
from synapse_agent.memory.collection import CollectionMemory
from synapse_agent.memory.file import FileMemory

__all__ = [
    "CollectionMemory",
    "FileMemory",
    "Memory",
    "format_transcript",
    "message_to_block_inputs",
]
