"""Telegram bot handlers — the UI layer of tofuboi.

Registers the command and message handlers and builds the Application.
Any plain text message is treated as a transcript request and handed to
handle_transcript_request().

Key functions: create_bot(), text_handler().
"""

import logging

from telegram import Update
from telegram.ext import (
    Application,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from .config import config
from .handlers.message_sender import safe_reply
from .handlers.transcript_handler import handle_transcript_request

logger = logging.getLogger(__name__)

MSG_NOT_AUTHORIZED = "You are not authorized to use this bot."
MSG_NOT_TEXT = "Please provide a valid YouTube video ID."

HELP_TEXT = (
    "Send a YouTube video ID or link, optionally followed by a language code.\n\n"
    "Examples:\n"
    "  dQw4w9WgXcQ\n"
    "  https://www.youtube.com/watch?v=dQw4w9WgXcQ es\n\n"
    "If the language is not available, a fallback language is used instead."
)


def is_user_allowed(user_id: int | None) -> bool:
    return user_id is not None and config.is_user_allowed(user_id)


async def help_command(update: Update, _context: ContextTypes.DEFAULT_TYPE) -> None:
    user = update.effective_user
    if not update.message:
        return
    if not user or not is_user_allowed(user.id):
        await safe_reply(update.message, MSG_NOT_AUTHORIZED)
        return
    await safe_reply(update.message, HELP_TEXT)


async def text_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    user = update.effective_user
    message = update.message
    if not message:
        return
    if not user or not is_user_allowed(user.id):
        await safe_reply(message, MSG_NOT_AUTHORIZED)
        return

    logger.debug("Transcript request from user %d: %r", user.id, message.text)
    await handle_transcript_request(
        context.bot,
        message,
        budget=config.message_budget,
        default_lang=config.default_language,
        preferred=config.fallback_languages,
    )


async def unsupported_content_handler(
    update: Update, _context: ContextTypes.DEFAULT_TYPE
) -> None:
    """Reply to stickers, photos and other non-text content."""
    user = update.effective_user
    if not update.message or not user or not is_user_allowed(user.id):
        return
    await safe_reply(update.message, MSG_NOT_TEXT)


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    logger.error("Unhandled error for update %s", update, exc_info=context.error)


def create_bot() -> Application:
    application = (
        Application.builder()
        .token(config.telegram_bot_token)
        .concurrent_updates(True)
        .build()
    )

    application.add_handler(CommandHandler("start", help_command))
    application.add_handler(CommandHandler("help", help_command))
    application.add_handler(
        MessageHandler(filters.TEXT & ~filters.COMMAND, text_handler)
    )
    # Catch-all: non-text content (images, stickers, voice, etc.)
    application.add_handler(
        MessageHandler(
            ~filters.COMMAND & ~filters.TEXT & ~filters.StatusUpdate.ALL,
            unsupported_content_handler,
        )
    )
    application.add_error_handler(error_handler)

    return application
