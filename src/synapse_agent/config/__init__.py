"""Configuration loading for synapse_agent.

This subpackage provides:
- SynapseConfig: Pydantic model for configuration schema
- Config loading from JSON files
- create_integration for building the configured integration
"""

from synapse_agent.config.loader import (
    SynapseConfig,
    create_integration,
    get_default_config_path,
    load_config,
    resolve_template_dirs,
)

__all__ = [
    "SynapseConfig",
    "create_integration",
    "get_default_config_path",
    "load_config",
    "resolve_template_dirs",
]
