"""One search orchestrator per Telegram chat."""

from __future__ import annotations

from typing import Any

import httpx

from find_vintage.config import SearchConfig
from find_vintage.services.orchestrator import SearchOrchestrator


class OrchestratorRegistry:
    """Lazily creates orchestrators so single-flight applies per chat.

    Extra keyword arguments (encoder, parser, ...) are forwarded to every
    ``SearchOrchestrator`` the registry creates.
    """

    def __init__(self, config: SearchConfig, http_client: httpx.AsyncClient, **orchestrator_options: Any) -> None:
        self._config = config.require_credentials()
        self._http_client = http_client
        self._options = orchestrator_options
        self._orchestrators: dict[int, SearchOrchestrator] = {}

    def for_chat(self, chat_id: int) -> SearchOrchestrator:
        orchestrator = self._orchestrators.get(chat_id)
        if orchestrator is None:
            orchestrator = SearchOrchestrator(self._config, self._http_client, **self._options)
            self._orchestrators[chat_id] = orchestrator
        return orchestrator

    def get(self, chat_id: int) -> SearchOrchestrator | None:
        return self._orchestrators.get(chat_id)

    def __len__(self) -> int:
        return len(self._orchestrators)


__all__ = ["OrchestratorRegistry"]
