"""Tool decorator for auto-generating ToolDefinition from functions.

This module provides the @tool decorator that creates a ToolDefinition
from a function's signature, type hints, and docstring. Parameter
descriptions are read from a Google-style ``Args:`` section when present.
"""

from __future__ import annotations

import inspect
import re
import types
from typing import Any, Callable, TypeVar, Union, get_args, get_origin, get_type_hints

from synapse_agent.tools.definition import ToolDefinition

R = TypeVar("R")

_ARG_LINE_RE = re.compile(r"^\s*(\w+)(?:\s*\([^)]*\))?:\s*(.+)$")


def tool(
    name: str | None = None,
    description: str | None = None,
) -> Callable[[Callable[..., R]], ToolDefinition]:
    """Decorator to create a ToolDefinition from a function.

    Args:
        name: Tool name (defaults to function name)
        description: Tool description (defaults to docstring first line)

    Returns:
        A decorator that converts a function to a ToolDefinition

    Example:
        @tool()
        def search(query: str) -> str:
            '''Search the web.

            Args:
                query: The search terms.
            '''
            return "..."

        assert search.name == "search"
        assert search.parameters["properties"]["query"]["description"] == "The search terms."
    """

    def decorator(fn: Callable[..., R]) -> ToolDefinition:
        tool_name = name if name is not None else fn.__name__

        tool_description = description
        if tool_description is None:
            if fn.__doc__:
                tool_description = fn.__doc__.strip().split("\n")[0].strip()
            else:
                tool_description = ""

        return ToolDefinition(
            name=tool_name,
            description=tool_description,
            parameters=build_parameters_schema(fn),
            execute=fn,
            is_async=inspect.iscoroutinefunction(fn),
        )

    return decorator


def _docstring_arg_descriptions(fn: Callable[..., Any]) -> dict[str, str]:
    doc = inspect.getdoc(fn) or ""
    descriptions: dict[str, str] = {}
    in_args = False
    for line in doc.splitlines():
        stripped = line.strip()
        if stripped in ("Args:", "Arguments:", "Parameters:"):
            in_args = True
            continue
        if in_args:
            if not stripped:
                continue
            if not line.startswith((" ", "\t")):
                break
            match = _ARG_LINE_RE.match(line)
            if match:
                descriptions[match.group(1)] = match.group(2).strip()
    return descriptions


def build_parameters_schema(fn: Callable[..., Any]) -> dict[str, Any]:
    """Build JSON Schema from function type hints."""
    sig = inspect.signature(fn)
    hints: dict[str, Any] = {}
    try:
        hints = get_type_hints(fn)
    except (NameError, TypeError):
        pass
    arg_docs = _docstring_arg_descriptions(fn)

    properties: dict[str, Any] = {}
    required: list[str] = []

    for param_name, param in sig.parameters.items():
        if param_name == "self":
            continue

        # Skip *args and **kwargs
        if param.kind in (
            inspect.Parameter.VAR_POSITIONAL,
            inspect.Parameter.VAR_KEYWORD,
        ):
            continue

        prop_schema = _type_to_json_schema(hints.get(param_name, Any))
        if param_name in arg_docs:
            prop_schema["description"] = arg_docs[param_name]
        properties[param_name] = prop_schema

        if param.default is inspect.Parameter.empty:
            required.append(param_name)
        elif param.default is not None:
            properties[param_name]["default"] = param.default

    return {
        "type": "object",
        "properties": properties,
        "required": required,
    }


def _type_to_json_schema(type_hint: Any) -> dict[str, Any]:
    """Convert a Python type hint to JSON Schema."""
    if type_hint is type(None):
        return {"type": "null"}

    if type_hint is bool:
        return {"type": "boolean"}
    if type_hint is str:
        return {"type": "string"}
    if type_hint is int:
        return {"type": "integer"}
    if type_hint is float:
        return {"type": "number"}

    origin = get_origin(type_hint)
    args = get_args(type_hint)

    if origin in (Union, types.UnionType):
        non_none_args = [a for a in args if a is not type(None)]
        if len(non_none_args) == 1 and type(None) in args:
            inner_schema = _type_to_json_schema(non_none_args[0])
            inner_schema["nullable"] = True
            return inner_schema
        return {"anyOf": [_type_to_json_schema(a) for a in args]}

    if origin is list or type_hint is list:
        if args:
            return {"type": "array", "items": _type_to_json_schema(args[0])}
        return {"type": "array"}

    if origin is dict or type_hint is dict:
        return {"type": "object"}

    if type_hint is Any:
        return {}

    return {"type": "object"}


__all__ = ["build_parameters_schema", "tool"]
