"""Provider request assembly for both supported wire formats."""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass
from typing import Any

import httpx

from find_vintage.config import SearchConfig
from find_vintage.services.exceptions import ConfigurationError


@dataclass(slots=True)
class ProviderRequest:
    method: str
    url: httpx.URL
    headers: httpx.Headers
    body: bytes


class RequestBuilder:
    """Build the HTTP request for ``config.mode``; never performs I/O."""

    def build(self, payload: bytes, config: SearchConfig) -> ProviderRequest:
        api_key = config.api_key_value()
        if not api_key:
            raise ConfigurationError("Provider API key is not configured.")

        if config.mode == "web_detection":
            return self._annotate_request(payload, config, api_key)
        if config.mode == "custom_search":
            return self._upload_request(payload, config, api_key)
        raise ConfigurationError(f"Unsupported search mode: {config.mode}")

    def _annotate_request(self, payload: bytes, config: SearchConfig, api_key: str) -> ProviderRequest:
        if not config.features:
            raise ConfigurationError("At least one detection feature is required.")
        body: dict[str, Any] = {
            "requests": [
                {
                    "image": {"content": base64.b64encode(payload).decode("ascii")},
                    "features": [{"type": feature} for feature in config.features],
                }
            ]
        }
        headers = self._base_headers()
        headers["Content-Type"] = "application/json"
        return ProviderRequest(
            method="POST",
            url=httpx.URL(config.resolved_endpoint).copy_merge_params({"key": api_key}),
            headers=headers,
            body=json.dumps(body).encode("utf-8"),
        )

    def _upload_request(self, payload: bytes, config: SearchConfig, api_key: str) -> ProviderRequest:
        if not config.engine_id:
            raise ConfigurationError("Search engine id (cx) is required for custom search.")
        params = {"key": api_key, "cx": config.engine_id, "searchType": "image"}
        headers = self._base_headers()
        headers["Content-Type"] = "image/jpeg"
        return ProviderRequest(
            method="POST",
            url=httpx.URL(config.resolved_endpoint).copy_merge_params(params),
            headers=headers,
            body=bytes(payload),
        )

    @staticmethod
    def _base_headers() -> httpx.Headers:
        return httpx.Headers({"Accept": "application/json"})


__all__ = ["ProviderRequest", "RequestBuilder"]
