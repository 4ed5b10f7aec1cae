"""Template rendering for agent prompts.

The agent loop only needs ``render(view, context) -> str``. The default
implementation is backed by Jinja2 and searches, in order, templates passed
in memory, user template directories and the templates bundled with
synapse_agent.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from jinja2 import ChoiceLoader, DictLoader, Environment, FileSystemLoader, PackageLoader

from synapse_agent.prompt.parser import encode_payload


class TemplateRenderer(ABC):
    """Abstract template renderer used by the agent loop."""

    @abstractmethod
    def render(self, view: str, context: dict[str, Any]) -> str:
        """Render the named template with the given context.

        Args:
            view: Template identifier.
            context: Merged input map.

        Returns:
            The rendered prompt text.
        """
        ...


class JinjaTemplateRenderer(TemplateRenderer):
    """Jinja2-backed renderer.

    Templates get a ``b64json`` filter that produces the base64(JSON)
    encoding the prompt parser expects in ``tool`` and ``image`` attributes.

    Args:
        template_dirs: Extra directories to search before the bundled templates.
        templates: In-memory templates by name, searched first.
    """

    def __init__(
        self,
        template_dirs: list[str | Path] | None = None,
        templates: dict[str, str] | None = None,
    ) -> None:
        loaders: list[Any] = []
        if templates:
            loaders.append(DictLoader(templates))
        if template_dirs:
            loaders.append(FileSystemLoader([str(Path(d).expanduser()) for d in template_dirs]))
        loaders.append(PackageLoader("synapse_agent", "prompt/templates"))

        # Prompts are plain text, not HTML.
        self._env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._env.filters["b64json"] = encode_payload

    @property
    def environment(self) -> Environment:
        """The underlying Jinja environment."""
        return self._env

    def render(self, view: str, context: dict[str, Any]) -> str:
        return self._env.get_template(view).render(**context)


__all__ = ["JinjaTemplateRenderer", "TemplateRenderer"]
