"""Streaming clients for the generation backend."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import Any

import httpx

from screenwright.agents.models import GenerationRequest
from screenwright.config import get_logger
from screenwright.exceptions import GenerationError

logger = get_logger(__name__)

STREAM_PATH = "/chat/generate-stream"
DONE_MARKER = "[DONE]"


class GenerationClient(ABC):
    """Source of streamed generation text."""

    @abstractmethod
    def stream(self, request: GenerationRequest) -> AsyncIterator[str]:
        """Yield text chunks of the response to ``request``.

        Raises:
            GenerationError: If the backend cannot be reached or fails
        """

    async def generate(self, request: GenerationRequest) -> str:
        """Collect the whole streamed response."""
        chunks = [chunk async for chunk in self.stream(request)]
        return "".join(chunks)


def parse_stream_line(line: str) -> str | None:
    """Extract the text carried by one line of the event stream.

    Returns:
        The chunk text, ``""`` for lines without text, or None once the
        terminator is reached
    """
    line = line.strip()
    if not line or line.startswith(":"):
        return ""
    if line.startswith("data:"):
        line = line[5:].strip()
    elif line.startswith(("event:", "id:", "retry:")):
        return ""
    if line == DONE_MARKER:
        return None

    try:
        data = json.loads(line)
    except json.JSONDecodeError:
        return line

    if isinstance(data, dict):
        if data.get("error"):
            raise GenerationError(message=str(data["error"]))
        for key in ("content", "delta", "text"):
            value = data.get(key)
            if isinstance(value, str):
                return value
        return ""
    if isinstance(data, str):
        return data
    return line


class HttpGenerationClient(GenerationClient):
    """Client that streams generations from the backend over HTTP."""

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API base URL, e.g. ``http://localhost:3001/api``
            api_key: Bearer token sent with every request
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport
        self.client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: Any) -> HttpGenerationClient:
        """Create a client from ``ScreenwrightSettings``."""
        return cls(
            base_url=settings.api_base_url,
            api_key=settings.api_key,
            timeout=settings.api_timeout,
        )

    def _init_http_client(self) -> None:
        if self.client is None:
            self.client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout), transport=self.transport
            )

    async def __aenter__(self) -> HttpGenerationClient:
        """Enter async context manager."""
        self._init_http_client()
        return self

    async def __aexit__(self, *_: Any) -> None:
        """Exit async context manager and cleanup."""
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self.client:
            await self.client.aclose()
            self.client = None

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "text/event-stream"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def stream(self, request: GenerationRequest) -> AsyncIterator[str]:
        """Stream the response to ``request`` chunk by chunk."""
        if not self.client:
            self._init_http_client()

        if not self.client:
            raise RuntimeError("HTTP client not initialized")

        url = f"{self.base_url}{STREAM_PATH}"
        logger.debug("Starting generation stream", url=url, model=request.model_id)

        try:
            async with self.client.stream(
                "POST", url, json=request.to_payload(), headers=self._headers()
            ) as response:
                if response.status_code >= 400:
                    body = (await response.aread()).decode("utf-8", "replace")
                    raise GenerationError(
                        message=_error_message(body),
                        status_code=response.status_code,
                    )

                async for line in response.aiter_lines():
                    chunk = parse_stream_line(line)
                    if chunk is None:
                        break
                    if chunk:
                        yield chunk
        except httpx.HTTPError as e:
            logger.error("Generation stream failed", url=url, error=str(e))
            raise GenerationError(original_error=e) from e


def _error_message(body: str) -> str:
    """Pick the backend's error message out of an error response body."""
    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        return body.strip() or "Failed to generate content"
    if isinstance(data, dict):
        for key in ("error", "message"):
            if isinstance(data.get(key), str) and data[key]:
                return data[key]
    return "Failed to generate content"
