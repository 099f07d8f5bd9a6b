"""Plain-text message sending for transcript delivery.

Transcript text goes out verbatim (no MarkdownV2 conversion) so that the
bytes Telegram receives are exactly the bytes the chunker budgeted for.

Functions:
  - rate_limit_send: Rate limiter to avoid Telegram flood control
  - send_text: Rate-limited send that raises SendFailure on error
  - make_sender: Bind send_text to one chat for deliver_fragments()
  - safe_reply: Best-effort reply for status and error lines
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

from telegram import Bot, LinkPreviewOptions, Message
from telegram.error import RetryAfter, TelegramError

from ..errors import SendFailure

logger = logging.getLogger(__name__)

# Disable link previews in all messages to reduce visual noise
NO_LINK_PREVIEW = LinkPreviewOptions(is_disabled=True)

# Rate limiting: last send time per chat to avoid Telegram flood control
_last_send_time: dict[int, float] = {}
MESSAGE_SEND_INTERVAL = 1.1  # seconds between messages to same chat


async def rate_limit_send(chat_id: int) -> None:
    """Wait if necessary to avoid Telegram flood control (max 1 msg/sec per chat)."""
    now = time.monotonic()
    if chat_id in _last_send_time:
        elapsed = now - _last_send_time[chat_id]
        if elapsed < MESSAGE_SEND_INTERVAL:
            await asyncio.sleep(MESSAGE_SEND_INTERVAL - elapsed)
    _last_send_time[chat_id] = time.monotonic()


def _retry_seconds(exc: RetryAfter) -> float:
    delay = exc.retry_after
    return delay.total_seconds() if hasattr(delay, "total_seconds") else float(delay)


async def send_text(bot: Bot, chat_id: int, text: str, **kwargs: Any) -> Message:
    """Send one message as plain text, honouring flood control once.

    A RetryAfter is waited out and the send retried a single time; any other
    TelegramError (or a second RetryAfter) becomes SendFailure.
    """
    kwargs.setdefault("link_preview_options", NO_LINK_PREVIEW)
    await rate_limit_send(chat_id)
    try:
        try:
            return await bot.send_message(chat_id=chat_id, text=text, **kwargs)
        except RetryAfter as e:
            wait = _retry_seconds(e)
            logger.warning("Flood control for chat %s, waiting %.1fs", chat_id, wait)
            await asyncio.sleep(wait)
            return await bot.send_message(chat_id=chat_id, text=text, **kwargs)
    except TelegramError as e:
        logger.warning("Failed to send message to %s: %s", chat_id, e)
        raise SendFailure(str(e)) from e


def make_sender(
    bot: Bot, chat_id: int, **kwargs: Any
) -> Callable[[str], Awaitable[Message]]:
    """Return a one-argument send callable bound to a chat."""

    async def _send(text: str) -> Message:
        return await send_text(bot, chat_id, text, **kwargs)

    return _send


async def safe_reply(message: Message, text: str, **kwargs: Any) -> Message | None:
    """Reply with plain text, logging instead of raising on failure.

    Used for status and error lines where there is nothing left to abort.
    """
    kwargs.setdefault("link_preview_options", NO_LINK_PREVIEW)
    try:
        return await message.reply_text(text, **kwargs)
    except TelegramError as e:
        logger.warning("Failed to reply in chat %s: %s", message.chat_id, e)
        return None
