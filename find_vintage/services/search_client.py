"""HTTP transport for provider requests."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

import httpx

from find_vintage.logging import logger
from find_vintage.services.exceptions import HttpStatusError, NetworkError
from find_vintage.services.request_builder import ProviderRequest

DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(slots=True)
class ProviderResponse:
    status_code: int
    body: bytes


class SearchClient:
    """Send one request, no retries; failures come back as typed errors."""

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._client = http_client

    async def send(
        self, request: ProviderRequest, timeout: float = DEFAULT_TIMEOUT_SECONDS
    ) -> ProviderResponse:
        try:
            response = await asyncio.wait_for(
                self._client.request(
                    request.method,
                    request.url,
                    headers=request.headers,
                    content=request.body,
                    timeout=timeout,
                ),
                timeout=timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            logger.warning("provider_timeout", host=request.url.host, timeout=timeout)
            raise NetworkError("timeout") from exc
        except httpx.RequestError as exc:
            logger.warning("provider_request_failed", host=request.url.host, error=str(exc))
            raise NetworkError(f"Request to provider failed: {exc}") from exc

        if not 200 <= response.status_code <= 299:
            error = HttpStatusError(response.status_code, response.content)
            logger.warning(
                "provider_http_error",
                host=request.url.host,
                status_code=response.status_code,
                body=error.body_preview,
            )
            raise error

        return ProviderResponse(status_code=response.status_code, body=response.content)


__all__ = ["DEFAULT_TIMEOUT_SECONDS", "ProviderResponse", "SearchClient"]
