"""Configuration loader for synapse_agent.

Provides the pydantic config schema, loading from a JSON file, and helpers
that turn a config into the agent's collaborators.
"""

from __future__ import annotations

import json
import warnings
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from synapse_agent.integrations.base import Integration
    from synapse_agent.integrations.registry import IntegrationRegistry


class SynapseConfig(BaseModel):
    """Configuration schema for synapse agents.

    Attributes:
        version: Config schema version.
        integration: Model string in "provider:model" form.
        api_key: API key; integrations otherwise read their env variable.
        base_url: Override for the integration's API base URL.
        template_dirs: Extra template directories, searched before the
            bundled templates. Relative paths resolve against the config file.
        max_tool_rounds: Upper bound on tool calls per invocation.
        max_validation_retries: Correction attempts for invalid answers.
        timeout: Integration request timeout in seconds.
    """

    version: str = "1.0"
    integration: str = Field("openai:gpt-4o-mini", description="Model string e.g. 'openai:gpt-4o'")
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    template_dirs: list[str] = Field(default_factory=list)
    max_tool_rounds: Optional[int] = Field(None, gt=0)
    max_validation_retries: int = Field(3, ge=0)
    timeout: float = Field(60.0, gt=0)


def get_default_config_path() -> Path:
    """Returns the default configuration path ~/.synapse/config.json."""
    return Path.home() / ".synapse" / "config.json"


def load_config(config_path: Path | str | None = None) -> SynapseConfig:
    """Load configuration from a JSON file.

    Relative ``template_dirs`` are resolved against the directory holding
    the config file.

    Args:
        config_path: Path to config file. If None, uses default path.

    Raises:
        FileNotFoundError: If config file does not exist.
        json.JSONDecodeError: If config file contains invalid JSON.
        pydantic.ValidationError: If config values don't match schema.
    """
    if config_path is None:
        config_path = get_default_config_path()
    config_path = Path(config_path).expanduser().resolve()

    with open(config_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    config = SynapseConfig(**data)
    config.template_dirs = resolve_template_dirs(config, config_path.parent)
    return config


def resolve_template_dirs(config: SynapseConfig, config_dir: Path) -> list[str]:
    """Resolve template directories relative to config_dir, warning on missing ones."""
    resolved: list[str] = []
    for entry in config.template_dirs:
        path = (config_dir / Path(entry).expanduser()).resolve()
        if not path.is_dir():
            warnings.warn(f"Template directory not found: {path}")
        resolved.append(str(path))
    return resolved


def create_integration(
    config: SynapseConfig,
    registry: "IntegrationRegistry | None" = None,
) -> "Integration":
    """Instantiate the integration named by ``config.integration``.

    Raises:
        InvalidModelStringError: If the model string is malformed.
        IntegrationNotFoundError: If the provider is not registered.
    """
    from synapse_agent.integrations.registry import get_default_registry

    registry = registry or get_default_registry()
    kwargs: dict[str, Any] = {"timeout": config.timeout}
    if config.api_key is not None:
        kwargs["api_key"] = config.api_key
    if config.base_url is not None:
        kwargs["base_url"] = config.base_url
    return registry.get_integration(config.integration, **kwargs)


__all__ = [
    "SynapseConfig",
    "create_integration",
    "get_default_config_path",
    "load_config",
    "resolve_template_dirs",
]
