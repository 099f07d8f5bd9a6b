"""Transcript request flow — fetch, fall back, chunk and send.

One incoming text message is one request: ``<video id or URL> [language]``.
The steps run strictly in sequence so the chat sees transcript messages in
transcript order:

  parse_request → fetch_with_fallback → notice → decode → deliver_fragments

Every failure is rendered as a single human-readable line in the chat; nothing
is retried beyond the one fallback-language fetch.
"""

import logging
from collections.abc import Sequence

from telegram import Bot, Message

from ..chunker import deliver_fragments
from ..errors import BudgetTooSmall, SendFailure, TranscriptError
from ..transcript import decode_fragment, fetch_with_fallback
from .message_sender import make_sender, safe_reply

logger = logging.getLogger(__name__)

MSG_NO_VIDEO_ID = "Please provide a video ID."
MSG_EMPTY_TRANSCRIPT = "Transcript could not be retrieved or is empty."


def parse_request(text: str | None, default_lang: str) -> tuple[str, str] | None:
    """Split message text into (video, language); None if there is no video."""
    parts = (text or "").split()
    if not parts:
        return None
    lang = parts[1] if len(parts) > 1 else default_lang
    return parts[0], lang


async def handle_transcript_request(
    bot: Bot,
    message: Message,
    *,
    budget: int,
    default_lang: str,
    preferred: Sequence[str],
) -> None:
    """Serve one transcript request coming from ``message``."""
    request = parse_request(message.text, default_lang)
    if request is None:
        await safe_reply(message, MSG_NO_VIDEO_ID)
        return
    video, lang = request
    chat_id = message.chat_id

    try:
        entries, notice = await fetch_with_fallback(video, lang, preferred)
    except TranscriptError as e:
        logger.info("Fetch failed for %s (lang=%s): %s", video, lang, e)
        await safe_reply(message, f"Error fetching transcript: {e}")
        return

    if notice:
        await safe_reply(message, notice)

    fragments = (decode_fragment(entry.text) for entry in entries)
    try:
        sent = await deliver_fragments(fragments, make_sender(bot, chat_id), budget)
    except BudgetTooSmall as e:
        logger.error("Budget %d too small for transcript %s: %s", budget, video, e)
        await safe_reply(message, f"Error processing transcript: {e}")
        return
    except SendFailure as e:
        logger.error("Delivery of %s to chat %s aborted: %s", video, chat_id, e)
        await safe_reply(message, f"Error sending transcript: {e}")
        return

    if sent == 0:
        await safe_reply(message, MSG_EMPTY_TRANSCRIPT)
        return
    logger.info("Sent transcript %s to chat %s in %d message(s)", video, chat_id, sent)
