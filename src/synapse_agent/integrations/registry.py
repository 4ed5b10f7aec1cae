"""Integration registry.

This module provides:
- IntegrationRegistry for registering and looking up integration classes
- get_default_registry() for accessing a global registry with the bundled
  integrations already registered
"""

from __future__ import annotations

from typing import Any

from synapse_agent.exceptions import IntegrationNotFoundError, InvalidModelStringError
from synapse_agent.integrations.base import Integration


# =============================================================================
# Integration Registry
# =============================================================================


class IntegrationRegistry:
    """Maps provider names to Integration classes.

    Integrations are instantiated from model strings in the format
    "provider:model".
    """

    def __init__(self) -> None:
        self._integrations: dict[str, type[Integration]] = {}

    def register(self, name: str, integration_class: type[Integration]) -> None:
        """Register an integration class by name.

        Raises:
            ValueError: If name is empty or whitespace-only.
            TypeError: If integration_class is not an Integration subclass.
        """
        if not name or not name.strip():
            raise ValueError("Integration name cannot be empty or whitespace-only")

        if not isinstance(integration_class, type) or not issubclass(
            integration_class, Integration
        ):
            raise TypeError("integration_class must be a subclass of Integration")

        self._integrations[name] = integration_class

    def unregister(self, name: str) -> None:
        if name not in self._integrations:
            raise IntegrationNotFoundError(name)
        del self._integrations[name]

    def is_registered(self, name: str) -> bool:
        return name in self._integrations

    def get_integration_class(self, name: str) -> type[Integration]:
        if name not in self._integrations:
            raise IntegrationNotFoundError(name)
        return self._integrations[name]

    def list_integrations(self) -> list[str]:
        return list(self._integrations.keys())

    def get_integration(self, model_string: str, **kwargs: Any) -> Integration:
        """Parse a model string and instantiate its integration.

        Args:
            model_string: "provider:model", split on the first colon only.
            **kwargs: Passed to the integration constructor.

        Raises:
            InvalidModelStringError: If model_string is malformed.
            IntegrationNotFoundError: If the provider is not registered.
        """
        if not model_string or ":" not in model_string:
            raise InvalidModelStringError(model_string)

        provider_name, model_name = model_string.split(":", 1)
        if not provider_name or not model_name:
            raise InvalidModelStringError(model_string)

        integration_class = self.get_integration_class(provider_name)
        return integration_class(model=model_name, **kwargs)


# =============================================================================
# Default Registry Singleton
# =============================================================================

_default_registry: IntegrationRegistry | None = None


def get_default_registry() -> IntegrationRegistry:
    """Get the global registry, with openai and anthropic registered."""
    global _default_registry
    if _default_registry is None:
        from synapse_agent.integrations.anthropic import AnthropicIntegration
        from synapse_agent.integrations.openai import OpenAIIntegration

        _default_registry = IntegrationRegistry()
        _default_registry.register("openai", OpenAIIntegration)
        _default_registry.register("anthropic", AnthropicIntegration)
    return _default_registry


__all__ = [
    "IntegrationRegistry",
    "get_default_registry",
]
