"""Base integration abstract class.

An integration performs one request/response exchange with a language-model
backend. The agent loop only relies on ``handle_completion`` returning a
Response whose finish_reason is normalised onto FinishReason values.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import httpx

from synapse_agent.types.messages import EmbeddingResponse, Message, Response

if TYPE_CHECKING:
    from synapse_agent.tools.definition import ToolDefinition


class Integration(ABC):
    """Abstract base class for model backends.

    Subclasses set ENV_KEY to the environment variable holding the API key.
    """

    ENV_KEY: str = ""
    DEFAULT_BASE_URL: str = ""
    DEFAULT_MODEL: str = ""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize the integration.

        Args:
            api_key: API key for authentication. Falls back to ENV_KEY env var.
            base_url: Optional base URL for API requests.
            model: Model name. Defaults to DEFAULT_MODEL.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).
            **kwargs: Additional integration-specific arguments.
        """
        self._api_key = api_key
        self._base_url = base_url
        self._model = model or self.DEFAULT_MODEL
        self._timeout = timeout
        self._transport = transport
        self._kwargs = kwargs

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the integration name."""
        ...

    @property
    def model(self) -> str:
        return self._model

    @property
    def api_key(self) -> str | None:
        """Get API key from constructor or environment variable."""
        if self._api_key is not None:
            return self._api_key
        return os.environ.get(self.ENV_KEY) if self.ENV_KEY else None

    @property
    def base_url(self) -> str:
        return (self._base_url or self.DEFAULT_BASE_URL).rstrip("/")

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self._timeout)

    @abstractmethod
    async def handle_completion(
        self,
        messages: list[Message],
        tools: list["ToolDefinition"],
        extra_args: dict[str, Any] | None = None,
    ) -> Response:
        """Submit a prompt and the tool catalogue, and return the model's reply.

        Args:
            messages: The parsed prompt.
            tools: The tools the model may call.
            extra_args: Request options passed through to the backend.

        Returns:
            The Response, with finish_reason normalised where known.
        """
        ...

    async def handle_validation_completion(
        self,
        message: Message,
        extra_args: dict[str, Any] | None = None,
    ) -> Response:
        """Ask the model to correct an answer that failed output validation."""
        return await self.handle_completion([message], [], extra_args)

    async def create_embeddings(
        self,
        text: str,
        extra_args: dict[str, Any] | None = None,
    ) -> EmbeddingResponse:
        """Embed a text. Not every integration supports embeddings."""
        raise NotImplementedError(f"{self.name} does not support embeddings")


__all__ = ["Integration"]
