"""Output validation for final answers."""

from synapse_agent.output.schema import OutputSchema, SchemaRule, extract_json

__all__ = ["OutputSchema", "SchemaRule", "extract_json"]
