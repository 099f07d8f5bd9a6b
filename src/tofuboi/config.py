"""Application configuration — reads env vars and exposes a singleton.

Loads TELEGRAM_BOT_TOKEN, the optional ALLOWED_USERS list, the per-message
byte budget and the language settings from environment variables (with .env
support). .env loading priority: local .env (cwd) > $TOFUBOI_DIR/.env
(default ~/.tofuboi).

Key class: Config (singleton instantiated as `config`).
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from .errors import InvalidBudget
from .language import DEFAULT_PREFERRED_LANGUAGES
from .utils import parse_csv, tofuboi_dir

logger = logging.getLogger(__name__)

# Telegram's hard limit for a text message
TELEGRAM_MAX_MESSAGE_BYTES = 4096


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        self.config_dir = tofuboi_dir()

        # Load .env: local (cwd) takes priority over config_dir
        # load_dotenv default override=False means first-loaded wins
        local_env = Path(".env")
        global_env = self.config_dir / ".env"
        if local_env.is_file():
            load_dotenv(local_env)
            logger.debug("Loaded env from %s", local_env.resolve())
        if global_env.is_file():
            load_dotenv(global_env)
            logger.debug("Loaded env from %s", global_env)

        self.telegram_bot_token: str = os.getenv("TELEGRAM_BOT_TOKEN") or ""
        if not self.telegram_bot_token:
            raise ValueError("TELEGRAM_BOT_TOKEN environment variable is required")

        # Empty means the bot answers everyone
        try:
            self.allowed_users: set[int] = {
                int(uid) for uid in parse_csv(os.getenv("ALLOWED_USERS", ""))
            }
        except ValueError as e:
            raise ValueError(
                f"ALLOWED_USERS contains non-numeric value: {e}. "
                "Expected comma-separated Telegram user IDs."
            ) from e

        raw_budget = os.getenv(
            "TOFUBOI_MESSAGE_BUDGET", str(TELEGRAM_MAX_MESSAGE_BYTES)
        )
        try:
            self.message_budget = int(raw_budget)
        except ValueError as e:
            raise ValueError(
                f"TOFUBOI_MESSAGE_BUDGET must be an integer, got {raw_budget!r}"
            ) from e
        if self.message_budget <= 0:
            raise InvalidBudget(self.message_budget)

        self.default_language = os.getenv("TOFUBOI_DEFAULT_LANG", "en").strip() or "en"
        self.fallback_languages: tuple[str, ...] = tuple(
            parse_csv(os.getenv("TOFUBOI_FALLBACK_LANGS", ""))
        ) or DEFAULT_PREFERRED_LANGUAGES

        logger.debug(
            "Config initialized: dir=%s, token=%s..., allowed_users=%d, "
            "budget=%d, default_lang=%s",
            self.config_dir,
            self.telegram_bot_token[:8],
            len(self.allowed_users),
            self.message_budget,
            self.default_language,
        )

    def is_user_allowed(self, user_id: int) -> bool:
        """Check if a user may use the bot (everyone, when no list is set)."""
        return not self.allowed_users or user_id in self.allowed_users


config = Config()
