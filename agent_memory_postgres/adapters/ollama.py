"""Reachability probe for the local Ollama embedding service."""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)

DEFAULT_OLLAMA_URL = "http://localhost:11434/api/tags"
DEFAULT_TIMEOUT_SECONDS = 5.0


class OllamaProbe:
    """Issues one GET against the model listing endpoint."""

    def __init__(
        self,
        url: str = DEFAULT_OLLAMA_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the probe.

        Args:
            url: Endpoint to request.
            timeout: Request timeout in seconds.
            transport: Optional transport override (tests use
                ``httpx.MockTransport``).
        """
        self.url = url
        self._timeout = httpx.Timeout(timeout)
        self._transport = transport

    async def check(self) -> int:
        """Request the endpoint.

        Returns:
            The HTTP status code of a successful response.

        Raises:
            httpx.HTTPError: On connection failure, timeout, or a non-2xx
                status.
        """
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.get(self.url)
            response.raise_for_status()
        logger.debug(f"Embedding service reachable at {self.url} ({response.status_code})")
        return response.status_code
