"""Application entrypoint."""

from __future__ import annotations

import asyncio

import httpx
from aiogram import Bot, Dispatcher
from aiogram.client.session.aiohttp import AiohttpSession

from find_vintage.bot.registry import OrchestratorRegistry
from find_vintage.bot.routers import setup_routers
from find_vintage.config import get_settings
from find_vintage.i18n import I18nService
from find_vintage.logging import configure_logging, logger
from find_vintage.services.exceptions import ConfigurationError


async def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level, json_output=settings.environment != "dev")
    if settings.telegram_token is None:
        raise ConfigurationError("FIND_VINTAGE_TELEGRAM_TOKEN is required to run the bot")

    session = (
        AiohttpSession(proxy=settings.telegram_proxy) if settings.telegram_proxy else None
    )
    bot = Bot(token=settings.telegram_token.get_secret_value(), session=session)
    dp = Dispatcher()
    dp.include_router(setup_routers())

    i18n = I18nService(default_locale=settings.default_language)
    async with httpx.AsyncClient() as http_client:
        registry = OrchestratorRegistry(settings.search, http_client)
        logger.info(
            "bot_starting",
            environment=settings.environment,
            mode=settings.search.mode,
            limit=settings.search.limit,
        )
        await dp.start_polling(bot, registry=registry, i18n=i18n)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
