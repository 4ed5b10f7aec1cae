"""Firecrawl scrape tool.

Fetches a web page through the Firecrawl ``/v1/scrape`` endpoint and asks
Firecrawl to extract the content relevant to a prompt.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from synapse_agent.tools.definition import ToolDefinition

logger = logging.getLogger(__name__)

NO_RELEVANT_CONTENT = "No Relevant Content On Page"


class FirecrawlTool(ToolDefinition):
    """Scrape a URL and extract content related to a prompt."""

    ENV_KEY = "FIRECRAWL_API_KEY"
    DEFAULT_BASE_URL = "https://api.firecrawl.dev"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            name="firecrawl_scrape",
            description=(
                "Useful for getting the contents of a webpage. "
                "Returns a markdown list of the content related to the extraction prompt."
            ),
            execute=self.scrape,
            parameters={
                "type": "object",
                "properties": {
                    "url": {"type": "string", "description": "The URL to scrape."},
                    "extraction_prompt": {
                        "type": "string",
                        "description": "What to extract from the page.",
                    },
                },
                "required": ["url", "extraction_prompt"],
            },
            is_async=True,
        )
        self._api_key = api_key
        self._base_url = base_url or self.DEFAULT_BASE_URL
        self._timeout = timeout
        self._transport = transport

    @property
    def api_key(self) -> str | None:
        if self._api_key is not None:
            return self._api_key
        return os.environ.get(self.ENV_KEY)

    def build_request_body(self, url: str, extraction_prompt: str) -> dict[str, Any]:
        return {
            "url": url,
            "formats": ["extract"],
            "extract": {
                "schema": {
                    "type": "object",
                    "properties": {
                        "result": {
                            "description": (
                                f"detailed markdown list related to **{extraction_prompt}** "
                                f"if no relevant content is found return `{NO_RELEVANT_CONTENT}` "
                                "DO NOT respond with only a URL or Link."
                            ),
                            "type": "string",
                        },
                    },
                    "required": ["result"],
                },
            },
        }

    async def scrape(self, url: str, extraction_prompt: str) -> str:
        """Scrape ``url`` and return the extracted result text."""
        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.post(
                f"{self._base_url}/v1/scrape",
                headers={
                    "Authorization": f"Bearer {self.api_key or ''}",
                    "Content-Type": "application/json",
                },
                json=self.build_request_body(url, extraction_prompt),
                timeout=self._timeout,
            )
            if response.is_error:
                logger.warning("Firecrawl error %d for %s", response.status_code, url)
            response.raise_for_status()
            payload = response.json()

        extract = (payload.get("data") or {}).get("extract") or {}
        return extract.get("result") or NO_RELEVANT_CONTENT


__all__ = ["FirecrawlTool"]
