"""Output schema validation for final answers.

An OutputSchema wraps a pydantic model. It renders the rules block that is
appended to the prompt and validates the JSON the model answers with.
"""

from __future__ import annotations

import json
import re
from typing import Any

from pydantic import BaseModel, Field, ValidationError, create_model

from synapse_agent.exceptions import OutputValidationError

_JSON_FENCE_RE = re.compile(r"```json\s*(.*?)```", re.DOTALL | re.IGNORECASE)

_RULE_TYPES: dict[str, Any] = {
    "string": str,
    "number": float,
    "integer": int,
    "boolean": bool,
    "array": list[Any],
    "object": dict[str, Any],
}


class SchemaRule(BaseModel):
    """One field of an output schema.

    Attributes:
        name: Field name in the JSON answer.
        type: JSON type name (string, number, integer, boolean, array, object).
        description: What the field should contain.
        required: Whether the field must be present.
    """

    name: str = Field(..., min_length=1)
    type: str = "string"
    description: str = ""
    required: bool = True


def extract_json(raw: str) -> str:
    """Return the body of the first ```json fence, or the whole text."""
    match = _JSON_FENCE_RE.search(raw)
    if match:
        return match.group(1).strip()
    return raw.strip()


def _format_errors(error: ValidationError) -> list[str]:
    messages = []
    for err in error.errors():
        loc = ".".join(str(part) for part in err["loc"])
        messages.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return messages


class OutputSchema:
    """Validates final answers against a pydantic model."""

    def __init__(self, model: type[BaseModel]) -> None:
        self.model = model

    @classmethod
    def from_rules(cls, rules: list[SchemaRule], name: str = "Output") -> "OutputSchema":
        """Build a schema from a list of rules.

        Raises:
            ValueError: If a rule names an unknown type.
        """
        fields: dict[str, Any] = {}
        for rule in rules:
            if rule.type not in _RULE_TYPES:
                raise ValueError(f"Unknown output rule type: {rule.type}")
            annotation = _RULE_TYPES[rule.type]
            if rule.required:
                fields[rule.name] = (annotation, Field(..., description=rule.description))
            else:
                fields[rule.name] = (
                    annotation | None,
                    Field(None, description=rule.description),
                )
        return cls(create_model(name, **fields))

    def rules(self) -> dict[str, str]:
        """Map each field to ``"(type) description"``."""
        properties = self.model.model_json_schema().get("properties", {})
        rules: dict[str, str] = {}
        for field_name, prop in properties.items():
            field_type = prop.get("type")
            if field_type is None and "anyOf" in prop:
                field_type = next(
                    (p["type"] for p in prop["anyOf"] if p.get("type") not in (None, "null")),
                    "any",
                )
            rules[field_name] = f"({field_type or 'any'}) {prop.get('description', '')}".rstrip()
        return rules

    def rules_prompt(self) -> str:
        return "```json\n" + json.dumps(self.rules(), indent=2) + "\n```"

    def validate(self, raw: str | None) -> dict[str, Any]:
        """Validate a model answer.

        Args:
            raw: The answer text, optionally wrapping its JSON in a ```json fence.

        Returns:
            The validated answer as a dict.

        Raises:
            OutputValidationError: If the answer is not valid JSON or does
                not match the schema.
        """
        raw = raw or ""
        try:
            data = json.loads(extract_json(raw))
        except json.JSONDecodeError as e:
            raise OutputValidationError([f"Invalid JSON: {e.msg}"], raw) from e

        if not isinstance(data, dict):
            raise OutputValidationError(["Answer must be a JSON object"], raw)

        try:
            return self.model.model_validate(data).model_dump()
        except ValidationError as e:
            raise OutputValidationError(_format_errors(e), raw) from e


__all__ = ["OutputSchema", "SchemaRule", "extract_json"]
