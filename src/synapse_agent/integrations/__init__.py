"""Model backend integrations.

This subpackage provides:
- Integration, the abstract port the agent loop talks to
- OpenAIIntegration and AnthropicIntegration over httpx
- IntegrationRegistry for "provider:model" lookup
"""

from synapse_agent.integrations.anthropic import AnthropicIntegration
from synapse_agent.integrations.base import Integration
from synapse_agent.integrations.openai import OpenAIIntegration
from synapse_agent.integrations.registry import IntegrationRegistry, get_default_registry

__all__ = [
    "AnthropicIntegration",
    "Integration",
    "IntegrationRegistry",
    "OpenAIIntegration",
    "get_default_registry",
]
