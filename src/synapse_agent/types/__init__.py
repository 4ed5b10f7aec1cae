"""Core type definitions.

This subpackage provides:
- Message, the immutable conversation turn
- Role and FinishReason enums
- TextSegment and ImageSegment for structured user content
- ToolCall and Response for integration results
"""

from synapse_agent.types.messages import (
    ContentSegment,
    EmbeddingResponse,
    FinishReason,
    ImageSegment,
    Message,
    Response,
    Role,
    TextSegment,
    ToolCall,
    ToolFunction,
)

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
