# Copyright 2025 Loopper-AI
# HTTP client for sending signed documents to the search endpoint

from __future__ import annotations

import asyncio
import logging

import aiohttp

from ..exceptions import TransportError
from ..models import ForwardResult, OutboundRequest

logger = logging.getLogger(__name__)


class HttpClient:
    """Async HTTP client shared by every pipeline of one batch.

    Use as an async context manager; the session is closed on exit.
    """

    def __init__(self, timeout: float | None = None):
        self.timeout = timeout
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> HttpClient:
        self._session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout))
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._session:
            await self._session.close()
            self._session = None

    async def send(self, request: OutboundRequest) -> ForwardResult:
        """Send a signed request and buffer the full response body.

        Non-2xx responses come back as ForwardResult(success=False).
        Connection level errors are raised as TransportError.
        """
        if self._session is None:
            raise RuntimeError("Client not initialized. Use async context manager.")

        try:
            async with self._session.request(
                request.method,
                request.url,
                data=request.body.encode("utf-8"),
                headers=request.headers,
                skip_auto_headers=("User-Agent",),
            ) as resp:
                chunks: list[bytes] = []
                async for chunk in resp.content.iter_any():
                    chunks.append(chunk)
                body = b"".join(chunks).decode("utf-8", errors="replace")

        except aiohttp.ClientError as exc:
            logger.error("ClientError: url=%s error=%s", request.url, exc)
            raise TransportError(f"ClientError: {exc}") from exc

        except asyncio.TimeoutError as exc:
            logger.error("Timeout: url=%s", request.url)
            raise TransportError("Request timed out") from exc

        if 200 <= resp.status < 300:
            return ForwardResult(success=True, status_code=resp.status, response_body=body)

        logger.error("HTTP %s: url=%s body=%s", resp.status, request.url, body[:500])
        return ForwardResult(success=False, status_code=resp.status, response_body=body, error=f"HTTP {resp.status}")
