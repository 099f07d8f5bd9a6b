"""YouTube transcript fetching over httpx.

Scrapes the caption track list out of the watch page, then downloads the
timed-text XML for the chosen track. When the requested language is missing
the fetch raises LanguageUnavailable, and fetch_with_fallback() retries once
with the language chosen by select_fallback_language().

Key functions: extract_video_id(), fetch_transcript(), fetch_with_fallback(),
decode_fragment().
"""

import html
import json
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

import httpx

from .errors import (
    FetchFailure,
    InvalidVideoId,
    LanguageUnavailable,
    TooManyRequests,
    TranscriptNotAvailable,
    TranscriptsDisabled,
    VideoUnavailable,
)
from .language import DEFAULT_PREFERRED_LANGUAGES, select_fallback_language

logger = logging.getLogger(__name__)

WATCH_URL = "https://www.youtube.com/watch"
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/85.0.4183.83 Safari/537.36,gzip(gfe)"
)
FETCH_TIMEOUT = 30.0

_VIDEO_ID_LEN = 11
_VIDEO_ID_RE = re.compile(
    r"(?:youtube\.com/(?:[^/]+/.+/|(?:v|e(?:mbed)?)/|.*[?&]v=)|youtu\.be/)"
    r"([^\"&?/\s]{11})",
    re.IGNORECASE,
)
_TEXT_RE = re.compile(r'<text start="([^"]*)" dur="([^"]*)">([^<]*)</text>')


@dataclass(frozen=True)
class TranscriptEntry:
    """One timed caption line, text still HTML-escaped as YouTube serves it."""

    text: str
    offset: float
    duration: float
    lang: str


def extract_video_id(value: str) -> str:
    """Return the 11-char video ID from a bare ID or any common YouTube URL."""
    value = value.strip()
    if len(value) == _VIDEO_ID_LEN:
        return value
    match = _VIDEO_ID_RE.search(value)
    if match:
        return match.group(1)
    raise InvalidVideoId(value)


def decode_fragment(text: str) -> str:
    """Decode HTML entities in a caption line.

    Timed-text XML double-escapes apostrophes (``&amp;#39;``), so a single
    unescape pass leaves ``&#39;`` behind.
    """
    return html.unescape(text).replace("&#39;", "'")


def _parse_caption_tracks(page: str, video_id: str) -> list[dict]:
    parts = page.split('"captions":')
    if len(parts) <= 1:
        if 'class="g-recaptcha"' in page:
            raise TooManyRequests()
        if '"playabilityStatus":' not in page:
            raise VideoUnavailable(video_id)
        raise TranscriptsDisabled(video_id)

    raw = parts[1].split(',"videoDetails')[0].replace("\n", "")
    try:
        captions = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Unparseable captions block for %s", video_id)
        raise TranscriptsDisabled(video_id) from None

    renderer = captions.get("playerCaptionsTracklistRenderer")
    if not renderer:
        raise TranscriptsDisabled(video_id)
    tracks = renderer.get("captionTracks") or []
    if not tracks:
        raise TranscriptNotAvailable(video_id)
    return tracks


def _parse_entries(xml: str, lang: str) -> list[TranscriptEntry]:
    return [
        TranscriptEntry(
            text=text,
            offset=float(start or 0),
            duration=float(dur or 0),
            lang=lang,
        )
        for start, dur, text in _TEXT_RE.findall(xml)
    ]


async def _fetch(
    video_id: str, lang: str | None, client: httpx.AsyncClient
) -> list[TranscriptEntry]:
    headers = {"User-Agent": USER_AGENT}
    if lang:
        headers["Accept-Language"] = lang

    try:
        page = await client.get(WATCH_URL, params={"v": video_id}, headers=headers)
        page.raise_for_status()
    except httpx.HTTPError as e:
        raise FetchFailure(f"Failed to load video page for {video_id}: {e}") from e

    tracks = _parse_caption_tracks(page.text, video_id)
    available = [t.get("languageCode", "") for t in tracks]

    if lang:
        track = next((t for t in tracks if t.get("languageCode") == lang), None)
        if track is None:
            raise LanguageUnavailable(lang, available, video_id)
    else:
        track = tracks[0]

    track_lang = track.get("languageCode") or lang or ""
    base_url = track.get("baseUrl")
    if not base_url:
        raise TranscriptNotAvailable(video_id)

    try:
        resp = await client.get(base_url, headers=headers)
    except httpx.HTTPError as e:
        raise FetchFailure(f"Failed to download transcript for {video_id}: {e}") from e
    if not resp.is_success:
        logger.warning(
            "Timed-text request for %s returned %d", video_id, resp.status_code
        )
        raise TranscriptNotAvailable(video_id)

    entries = _parse_entries(resp.text, track_lang)
    logger.info(
        "Fetched %d transcript entries for %s (lang=%s)",
        len(entries),
        video_id,
        track_lang,
    )
    return entries


async def fetch_transcript(
    video: str,
    lang: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> list[TranscriptEntry]:
    """Fetch the transcript of a video (ID or URL) in the given language.

    Raises a TranscriptError subclass on failure; LanguageUnavailable carries
    the languages the video does offer.
    """
    video_id = extract_video_id(video)
    if client is not None:
        return await _fetch(video_id, lang, client)
    async with httpx.AsyncClient(
        timeout=FETCH_TIMEOUT, follow_redirects=True
    ) as own_client:
        return await _fetch(video_id, lang, own_client)


async def fetch_with_fallback(
    video: str,
    lang: str,
    preferred: Sequence[str] = DEFAULT_PREFERRED_LANGUAGES,
    client: httpx.AsyncClient | None = None,
) -> tuple[list[TranscriptEntry], str | None]:
    """Fetch a transcript, retrying once in a fallback language if needed.

    Returns (entries, notice). The notice is None when the requested language
    was served, otherwise a user-facing line naming the fallback. Only
    LanguageUnavailable triggers the retry; a failure of the retry propagates.
    """
    if client is None:
        async with httpx.AsyncClient(
            timeout=FETCH_TIMEOUT, follow_redirects=True
        ) as own_client:
            return await fetch_with_fallback(video, lang, preferred, own_client)

    try:
        return await fetch_transcript(video, lang, client), None
    except LanguageUnavailable as e:
        fallback = select_fallback_language(e.available, preferred)
        logger.info(
            "Language %s unavailable for %s, falling back to %s (available: %s)",
            lang,
            e.video_id,
            fallback,
            e.available,
        )
        entries = await fetch_transcript(e.video_id, fallback, client)
        notice = (
            f"Requested language '{lang}' not available. "
            f"Using fallback language '{fallback}'. "
            f"Available languages: {', '.join(e.available)}"
        )
        return entries, notice
