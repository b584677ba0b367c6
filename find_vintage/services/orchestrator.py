"""Image search façade: encode, build, send, parse, deliver one outcome."""

from __future__ import annotations

import asyncio
from time import perf_counter
from typing import Callable

import httpx
from PIL import Image

from find_vintage.config import SearchConfig
from find_vintage.domain.models import (
    FailureKind,
    SearchFailure,
    SearchOutcome,
    SearchSuccess,
)
from find_vintage.logging import logger
from find_vintage.services.encoder import CapturedImage, ImageEncoder
from find_vintage.services.exceptions import ParseError, SearchError
from find_vintage.services.request_builder import RequestBuilder
from find_vintage.services.response_parser import ResponseParser
from find_vintage.services.search_client import SearchClient

OutcomeListener = Callable[[SearchOutcome], None]
SearchingListener = Callable[[bool], None]


class SearchOrchestrator:
    """Single-flight search pipeline for one caller.

    Each ``start_search`` takes a new call token. A run only applies its
    outcome while its token is still current, so a superseded or cancelled
    search never reaches ``on_outcome`` and never flips ``is_searching``.
    All token reads and writes happen on the event loop without an await in
    between.
    """

    def __init__(
        self,
        config: SearchConfig,
        http_client: httpx.AsyncClient,
        *,
        encoder: ImageEncoder | None = None,
        builder: RequestBuilder | None = None,
        client: SearchClient | None = None,
        parser: ResponseParser | None = None,
        on_outcome: OutcomeListener | None = None,
        on_searching_changed: SearchingListener | None = None,
    ) -> None:
        self._config = config.require_credentials()
        self._encoder = encoder or ImageEncoder(max_side_length=config.max_side_length)
        self._builder = builder or RequestBuilder()
        self._client = client or SearchClient(http_client)
        self._parser = parser or ResponseParser()
        self._on_outcome = on_outcome
        self._on_searching_changed = on_searching_changed
        self._token = 0
        self._task: asyncio.Task[SearchOutcome | None] | None = None
        self._searching = False

    @property
    def config(self) -> SearchConfig:
        return self._config

    @property
    def is_searching(self) -> bool:
        return self._searching

    def start_search(self, image: CapturedImage) -> asyncio.Task[SearchOutcome | None]:
        """Schedule a search, superseding any search still in flight.

        The returned task resolves to the outcome, or ``None`` when a newer
        search or ``cancel_search`` made this one stale.
        """

        snapshot = _snapshot(image)
        token = self._token + 1
        run = self._run(token, snapshot)
        try:
            task = asyncio.create_task(run, name=f"image-search-{token}")
        except RuntimeError:
            run.close()
            raise
        self._token = token
        if self._task is not None and not self._task.done():
            logger.info("image_search_superseding", token=token)
        self._task = task
        self._set_searching(True)
        return task

    def cancel_search(self) -> bool:
        if not self._searching:
            return False
        self._token += 1
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
        logger.info("image_search_cancelled", token=self._token)
        self._set_searching(False)
        return True

    async def search(self, image: CapturedImage) -> SearchOutcome:
        """Run the pipeline once without touching single-flight state."""

        started = perf_counter()
        config = self._config
        try:
            payload = await asyncio.to_thread(self._encoder.encode, image, config.image_quality)
            request = self._builder.build(payload, config)
            response = await self._client.send(request, timeout=config.request_timeout_seconds)
        except SearchError as exc:
            logger.warning("image_search_failed", kind=exc.kind.value, error=str(exc))
            return exc.to_failure()

        parsed = self._parser.parse(response.body, config.mode)
        if parsed.error is not None:
            logger.warning("image_search_failed", kind=FailureKind.PARSE.value, error=parsed.error)
            return ParseError(parsed.error).to_failure()

        results = tuple(parsed.results[: config.limit])
        elapsed_ms = int((perf_counter() - started) * 1000)
        if not results:
            logger.info("image_search_no_matches", mode=config.mode, elapsed_ms=elapsed_ms)
            return SearchFailure(kind=FailureKind.NO_MATCHES, message="No similar items were found.")

        logger.info(
            "image_search_completed",
            mode=config.mode,
            results=len(results),
            total=len(parsed.results),
            elapsed_ms=elapsed_ms,
        )
        return SearchSuccess(results=results)

    async def _run(self, token: int, image: CapturedImage) -> SearchOutcome | None:
        try:
            outcome = await self.search(image)
        except Exception:
            logger.exception("image_search_crashed", token=token)
            outcome = SearchFailure(
                kind=FailureKind.INTERNAL,
                message="Search failed unexpectedly.",
            )

        if token != self._token:
            logger.info("image_search_superseded", token=token, current=self._token)
            return None

        self._task = None
        self._set_searching(False)
        if self._on_outcome is not None:
            self._on_outcome(outcome)
        return outcome

    def _set_searching(self, value: bool) -> None:
        if self._searching == value:
            return
        self._searching = value
        if self._on_searching_changed is not None:
            self._on_searching_changed(value)


def _snapshot(image: CapturedImage) -> CapturedImage:
    if image is None:
        raise ValueError("An image is required to start a search.")
    if isinstance(image, Image.Image):
        return image.copy()
    if isinstance(image, (bytes, bytearray, memoryview)):
        raw = bytes(image)
        if not raw:
            raise ValueError("An image is required to start a search.")
        return raw
    raise TypeError(f"Unsupported image type: {type(image).__name__}")


__all__ = ["OutcomeListener", "SearchOrchestrator", "SearchingListener"]
