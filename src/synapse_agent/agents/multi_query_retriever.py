"""Agent that rewrites a question into several retrieval queries."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from synapse_agent.agent.core import Agent
from synapse_agent.memory.base import Memory
from synapse_agent.memory.collection import CollectionMemory
from synapse_agent.output.schema import OutputSchema


class MultiQueryAnswer(BaseModel):
    answer: list[str] = Field(..., description="the array that holds the new queries.")


class MultiQueryRetrieverAgent(Agent):
    """Generates alternative phrasings of a question for vector search.

    ``handle({"input": question})`` returns ``{"answer": [query, ...]}``.

    Args:
        query_count: How many queries the model is asked for.
        **kwargs: Passed to Agent.
    """

    prompt_view = "multi_query_retriever.j2"

    def __init__(self, query_count: int = 5, **kwargs: Any) -> None:
        extra_inputs = {"query_count": query_count, **(kwargs.pop("extra_inputs", None) or {})}
        super().__init__(extra_inputs=extra_inputs, **kwargs)

    def resolve_memory(self) -> Memory:
        return CollectionMemory()

    def resolve_output_schema(self) -> OutputSchema | None:
        return OutputSchema(MultiQueryAnswer)


__all__ = ["MultiQueryAnswer", "MultiQueryRetrieverAgent"]
