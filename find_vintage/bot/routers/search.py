"""Telegram handlers: photos in, similar items out."""

from __future__ import annotations

import asyncio
import contextlib
from io import BytesIO

from aiogram import Bot, F, Router
from aiogram.enums import ChatAction
from aiogram.exceptions import TelegramAPIError
from aiogram.filters import Command, CommandStart
from aiogram.types import Message

from find_vintage.bot.registry import OrchestratorRegistry
from find_vintage.bot.utils.messages import format_outcome
from find_vintage.bot.utils.telegram import answer_with_retry
from find_vintage.i18n import I18nService
from find_vintage.logging import logger

router = Router()
TYPING_REFRESH_SECONDS = 4


class PhotoDownloadError(RuntimeError):
    """Raised when a photo cannot be fetched from Telegram."""


def _locale_for(message: Message, i18n: I18nService) -> str:
    language_code = getattr(message.from_user, "language_code", None)
    return i18n.resolve_locale(language_code)


@router.message(CommandStart())
async def handle_start(message: Message, i18n: I18nService) -> None:
    locale = _locale_for(message, i18n)
    name = getattr(message.from_user, "full_name", None) or "there"
    await answer_with_retry(message, i18n.gettext("start.greeting", locale=locale, name=name), parse_mode=None)


@router.message(Command("cancel"))
async def handle_cancel(message: Message, registry: OrchestratorRegistry, i18n: I18nService) -> None:
    locale = _locale_for(message, i18n)
    orchestrator = registry.get(message.chat.id)
    cancelled = orchestrator is not None and orchestrator.cancel_search()
    key = "search.cancelled" if cancelled else "search.nothing_to_cancel"
    await answer_with_retry(message, i18n.gettext(key, locale=locale), parse_mode=None)


@router.message(F.photo)
async def handle_photo(message: Message, registry: OrchestratorRegistry, i18n: I18nService) -> None:
    locale = _locale_for(message, i18n)
    try:
        raw = await _download_photo(message)
    except PhotoDownloadError as exc:
        logger.info("photo_download_failed", chat_id=message.chat.id, error=str(exc))
        await answer_with_retry(message, i18n.gettext("search.download_failed", locale=locale), parse_mode=None)
        return

    orchestrator = registry.for_chat(message.chat.id)
    task = orchestrator.start_search(raw)
    logger.info("photo_search_started", chat_id=message.chat.id, size=len(raw))

    typing_task = asyncio.create_task(_send_typing_action(message))
    try:
        outcome = await asyncio.shield(task)
    except asyncio.CancelledError:
        if not task.cancelled():
            raise
        # /cancel from the same chat; the cancel handler already replied.
        return
    finally:
        typing_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await typing_task

    if outcome is None:
        return
    for text in format_outcome(outcome, i18n, locale):
        await answer_with_retry(message, text, parse_mode=None)


async def _download_photo(message: Message) -> bytes:
    if not message.photo:
        raise PhotoDownloadError("Photo payload missing")
    bot: Bot | None = message.bot
    if bot is None:
        raise PhotoDownloadError("Bot reference is not available")
    photo = message.photo[-1]
    try:
        file = await bot.get_file(photo.file_id)
        buffer = BytesIO()
        await bot.download_file(file.file_path, buffer)
    except Exception as exc:  # pragma: no cover - network dependent
        raise PhotoDownloadError("Unable to download photo from Telegram") from exc
    data = buffer.getvalue()
    if not data:
        raise PhotoDownloadError("Downloaded photo is empty")
    return data


async def _send_typing_action(message: Message) -> None:
    try:
        while True:
            await message.bot.send_chat_action(message.chat.id, ChatAction.TYPING)
            await asyncio.sleep(TYPING_REFRESH_SECONDS)
    except asyncio.CancelledError:
        pass
    except TelegramAPIError as exc:
        logger.info("typing_action_failed", chat_id=message.chat.id, error=str(exc))
