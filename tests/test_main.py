"""Tests for logging configuration and async main bootstrap."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
import structlog
from pydantic import SecretStr

from find_vintage import main as main_module
from find_vintage.config import SearchConfig
from find_vintage.logging import configure_logging
from find_vintage.services.exceptions import ConfigurationError


def test_configure_logging_outputs_json(capsys):
    configure_logging()
    logger = structlog.get_logger()
    logger.info("unit-test", foo="bar")
    out = capsys.readouterr().out
    assert "unit-test" in out
    assert '"foo": "bar"' in out


def test_configure_logging_accepts_level_names(capsys):
    configure_logging("warning")
    logger = structlog.get_logger()
    logger.info("hidden-event")
    logger.warning("shown-event")
    out = capsys.readouterr().out
    assert "hidden-event" not in out
    assert "shown-event" in out
    configure_logging()


class DummyDispatcher:
    def __init__(self) -> None:
        self.included = []
        self.started = False

    def include_router(self, router):
        self.included.append(router)

    async def start_polling(self, bot, **kwargs):
        self.started = True
        self.bot = bot
        self.start_kwargs = kwargs


class DummyBot:
    def __init__(self, token: str, session=None) -> None:
        self.token = token
        self.session = session


def _settings(**overrides) -> SimpleNamespace:
    values = dict(
        environment="prod",
        log_level="INFO",
        telegram_token=SecretStr("token"),
        telegram_proxy=None,
        default_language="ja",
        search=SearchConfig(api_key=SecretStr("vision-key")),
    )
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.mark.asyncio
async def test_main_bootstrap(monkeypatch):
    dispatcher = DummyDispatcher()
    monkeypatch.setattr(main_module, "get_settings", lambda: _settings())
    monkeypatch.setattr(main_module, "configure_logging", lambda *args, **kwargs: None)
    monkeypatch.setattr(main_module, "Bot", DummyBot)
    monkeypatch.setattr(main_module, "Dispatcher", lambda: dispatcher)

    await main_module.main()

    assert dispatcher.started is True
    assert dispatcher.bot.token == "token"
    assert dispatcher.bot.session is None
    assert len(dispatcher.included) == 1
    registry = dispatcher.start_kwargs["registry"]
    assert registry.for_chat(1).config.api_key_value() == "vision-key"
    assert dispatcher.start_kwargs["i18n"].default_locale == "ja"


@pytest.mark.asyncio
async def test_main_requires_telegram_token(monkeypatch):
    monkeypatch.setattr(main_module, "get_settings", lambda: _settings(telegram_token=None))
    monkeypatch.setattr(main_module, "configure_logging", lambda *args, **kwargs: None)

    with pytest.raises(ConfigurationError):
        await main_module.main()
