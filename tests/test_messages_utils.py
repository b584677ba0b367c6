"""Tests for rendering search outcomes as Telegram text."""

from __future__ import annotations

from find_vintage.bot.utils import messages
from find_vintage.domain.models import FailureKind, SearchFailure, SearchResult, SearchSuccess
from find_vintage.i18n import I18nService


def test_success_lists_results_in_order():
    outcome = SearchSuccess(
        results=(
            SearchResult(title="denim jacket", target_url="https://www.google.com/search?q=denim jacket", description="Web Entity"),
            SearchResult(title="Vintage Tee", target_url="https://x/1", score=1.0),
        )
    )

    [text] = messages.format_outcome(outcome, I18nService(), "en")

    assert text.startswith("Found 2 similar item(s):")
    assert text.index("1. denim jacket") < text.index("2. Vintage Tee")
    assert "Web Entity" in text
    assert "Confidence: 100%" in text


def test_failure_messages_differ_by_kind():
    i18n = I18nService()
    no_matches = messages.format_outcome(SearchFailure(FailureKind.NO_MATCHES, "none"), i18n, "en")
    http_error = messages.format_outcome(
        SearchFailure(FailureKind.HTTP_STATUS, "HTTP 503", status_code=503), i18n, "en"
    )

    assert no_matches != http_error
    assert "503" in http_error[0]


def test_failure_message_localised():
    [text] = messages.format_outcome(SearchFailure(FailureKind.NO_MATCHES, "none"), I18nService(), "ja")

    assert text == "類似画像が見つかりませんでした"


def test_long_outcomes_are_split(monkeypatch):
    monkeypatch.setattr(messages, "TELEGRAM_MESSAGE_LIMIT", 120)
    outcome = SearchSuccess(
        results=tuple(SearchResult(title=f"item {i}", target_url=f"https://x/{i}" * 3) for i in range(6))
    )

    chunks = messages.format_outcome(outcome, I18nService(), "en")

    assert len(chunks) > 1
    assert all(len(chunk) <= 120 for chunk in chunks)
    joined = "\n\n".join(chunks)
    assert all(f"item {i}" in joined for i in range(6))
