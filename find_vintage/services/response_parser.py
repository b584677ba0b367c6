"""Normalise provider payloads into ordered ``SearchResult`` lists.

Two response shapes are understood:

* web detection (annotate endpoint): ``responses[0].webDetection`` with
  ``webEntities`` followed by ``visuallySimilarImages``;
* item list (custom search endpoint): a flat ``items`` array.

Parsing never raises. A body that is not a JSON object yields an empty list
with ``error`` set, which callers must keep apart from a genuine zero-match
response. Individual entries missing required fields are skipped.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from find_vintage.config import SearchMode
from find_vintage.domain.models import SearchResult

WEB_SEARCH_URL = "https://www.google.com/search?q="
WEB_ENTITY_TAG = "Web Entity"
SIMILAR_IMAGE_TITLE = "similar image"
SIMILAR_IMAGE_TAG = "visually similar"
UNRANKED_SCORE = 1.0


@dataclass(slots=True)
class ParsedResponse:
    results: list[SearchResult] = field(default_factory=list)
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class ResponseParser:
    def parse(self, body: bytes, mode: SearchMode) -> ParsedResponse:
        try:
            payload = json.loads(body)
        except (ValueError, RecursionError) as exc:
            return ParsedResponse(error=f"Provider response is not valid JSON: {exc}")
        if not isinstance(payload, dict):
            return ParsedResponse(
                error=f"Provider response has unexpected type: {type(payload).__name__}"
            )

        if mode == "custom_search":
            return ParsedResponse(results=self._parse_items(payload))
        return self._parse_web_detection(payload)

    def _parse_web_detection(self, payload: dict[str, Any]) -> ParsedResponse:
        responses = payload.get("responses")
        if not isinstance(responses, list) or not responses:
            return ParsedResponse()
        first = responses[0]
        if not isinstance(first, dict):
            return ParsedResponse()

        provider_error = first.get("error")
        if isinstance(provider_error, dict) and provider_error.get("message"):
            return ParsedResponse(error=f"Provider reported an error: {provider_error['message']}")

        detection = first.get("webDetection")
        if not isinstance(detection, dict):
            return ParsedResponse()

        results: list[SearchResult] = []
        for entity in _as_list(detection.get("webEntities")):
            result = _entity_result(entity)
            if result is not None:
                results.append(result)
        for image in _as_list(detection.get("visuallySimilarImages")):
            result = _similar_image_result(image)
            if result is not None:
                results.append(result)
        return ParsedResponse(results=results)

    def _parse_items(self, payload: dict[str, Any]) -> list[SearchResult]:
        results: list[SearchResult] = []
        for item in _as_list(payload.get("items")):
            if not isinstance(item, dict):
                continue
            title = _text(item.get("title"))
            link = _text(item.get("link"))
            if not title or not link:
                continue
            snippet = item.get("snippet")
            results.append(
                SearchResult(
                    title=title,
                    target_url=link,
                    description=snippet if isinstance(snippet, str) else "",
                    score=UNRANKED_SCORE,
                )
            )
        return results


def _entity_result(entity: Any) -> SearchResult | None:
    if not isinstance(entity, dict):
        return None
    description = _text(entity.get("description"))
    if not description or not isinstance(entity.get("entityId"), str):
        return None
    return SearchResult(
        title=description,
        target_url=f"{WEB_SEARCH_URL}{description}",
        description=WEB_ENTITY_TAG,
    )


def _similar_image_result(image: Any) -> SearchResult | None:
    if not isinstance(image, dict):
        return None
    url = _text(image.get("url"))
    if not url:
        return None
    return SearchResult(title=SIMILAR_IMAGE_TITLE, target_url=url, description=SIMILAR_IMAGE_TAG)


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _text(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


__all__ = ["ParsedResponse", "ResponseParser"]
