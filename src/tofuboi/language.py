"""Fallback caption language selection.

Used once per request when the requested transcript language is not offered
by the video. Pure and total: always returns a language code.
"""

from collections.abc import Sequence

DEFAULT_PREFERRED_LANGUAGES: tuple[str, ...] = ("en", "zh-HK", "zh-TW")

# Returned when the video lists no languages at all
LAST_RESORT_LANGUAGE = "en"


def select_fallback_language(
    available: Sequence[str],
    preferred: Sequence[str] = DEFAULT_PREFERRED_LANGUAGES,
) -> str:
    """Pick the language to retry with.

    First match wins: an exact hit from ``preferred`` (in preference order),
    then the first available Chinese variant (``zh`` prefix), then the first
    available language, then "en".
    """
    for lang in preferred:
        if lang in available:
            return lang
    for lang in available:
        if lang.startswith("zh"):
            return lang
    if available:
        return available[0]
    return LAST_RESORT_LANGUAGE
