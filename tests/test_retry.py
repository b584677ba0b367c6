"""Tests for the async retry helper."""

from __future__ import annotations

import pytest

from find_vintage.utils import retry as retry_module
from find_vintage.utils.retry import retry_async


class RecordingLogger:
    def __init__(self) -> None:
        self.events = []

    def warning(self, event, **kwargs):
        self.events.append((event, kwargs))


@pytest.fixture(autouse=True)
def _no_sleep(monkeypatch):
    async def _sleep(_delay):
        return None

    monkeypatch.setattr(retry_module.asyncio, "sleep", _sleep)


@pytest.mark.asyncio
async def test_retry_succeeds_after_transient_failures():
    attempts = []
    logger = RecordingLogger()

    async def operation():
        attempts.append(1)
        if len(attempts) < 3:
            raise ConnectionError("flaky")
        return "ok"

    result = await retry_async(operation, max_attempts=3, logger=logger, operation_name="send")

    assert result == "ok"
    assert len(attempts) == 3
    assert [event for event, _ in logger.events] == ["retrying_operation", "retrying_operation"]
    assert logger.events[1][1]["delay"] == 1.0


@pytest.mark.asyncio
async def test_retry_reraises_after_last_attempt():
    async def operation():
        raise ConnectionError("down")

    with pytest.raises(ConnectionError):
        await retry_async(operation, max_attempts=2)


@pytest.mark.asyncio
async def test_non_matching_errors_are_not_retried():
    attempts = []

    async def operation():
        attempts.append(1)
        raise ValueError("permanent")

    with pytest.raises(ValueError):
        await retry_async(operation, max_attempts=3, retry_on=(ConnectionError,))

    assert len(attempts) == 1
