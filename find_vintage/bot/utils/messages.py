"""Render search outcomes as plain-text Telegram replies."""

from __future__ import annotations

from find_vintage.domain.models import SearchFailure, SearchOutcome, SearchResult, SearchSuccess
from find_vintage.i18n import I18nService

# Telegram messages are limited to 4096 characters.
TELEGRAM_MESSAGE_LIMIT = 3900


def format_result(index: int, result: SearchResult, i18n: I18nService, locale: str) -> str:
    lines = [f"{index}. {result.title}"]
    if result.description:
        lines.append(result.description)
    if result.target_url:
        lines.append(result.target_url)
    if result.score is not None:
        lines.append(i18n.gettext("search.score", locale=locale, percent=int(result.score * 100)))
    return "\n".join(lines)


def format_failure(failure: SearchFailure, i18n: I18nService, locale: str) -> str:
    key = f"search.failure.{failure.kind.value}"
    if failure.status_code is not None:
        return i18n.gettext(key, locale=locale, status_code=failure.status_code)
    return i18n.gettext(key, locale=locale)


def format_outcome(outcome: SearchOutcome, i18n: I18nService, locale: str) -> list[str]:
    """Split an outcome into messages that each fit a Telegram reply."""

    if not isinstance(outcome, SearchSuccess):
        return [format_failure(outcome, i18n, locale)]

    header = i18n.gettext("search.header", locale=locale, count=len(outcome.results))
    messages: list[str] = []
    buffer = header
    for index, result in enumerate(outcome.results, start=1):
        block = format_result(index, result, i18n, locale)
        if len(buffer) + len(block) + 2 > TELEGRAM_MESSAGE_LIMIT:
            messages.append(buffer)
            buffer = block[:TELEGRAM_MESSAGE_LIMIT]
        else:
            buffer = f"{buffer}\n\n{block}"
    messages.append(buffer)
    return messages


__all__ = ["format_failure", "format_outcome", "format_result"]
