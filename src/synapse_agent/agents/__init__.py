"""Prebuilt agents."""

from synapse_agent.agents.multi_query_retriever import MultiQueryAnswer, MultiQueryRetrieverAgent

__all__ = ["MultiQueryAnswer", "MultiQueryRetrieverAgent"]
