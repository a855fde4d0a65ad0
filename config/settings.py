"""
Configuration Management

Loads the relay configuration from environment variables (and a local
.env file, if present) into a single immutable Settings object.
"""

import os
import logging
from dataclasses import dataclass, field, replace
from dotenv import load_dotenv

from monitoring.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.orangecarrier.com"
DEFAULT_ALERT_NOTICE = "⚡️ New call received!\n⏳ please waiting..............."
DEFAULT_CAPTION_NOTICE = "▶️ Play audio for OTP"

REQUIRED_VARS = (
    "ORANGECARRIER_EMAIL",
    "ORANGECARRIER_PASSWORD",
    "TELEGRAM_BOT_TOKEN",
    "TELEGRAM_CHAT_ID",
)

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    username: str
    password: str
    bot_token: str
    chat_id: str
    base_url: str = DEFAULT_BASE_URL
    refresh_interval_minutes: float = 5
    main_channel_name: str = ""
    main_channel_url: str = ""
    admin_name: str = ""
    admin_url: str = ""
    alert_notice: str = DEFAULT_ALERT_NOTICE
    caption_notice: str = DEFAULT_CAPTION_NOTICE
    caption_footer: str = ""
    headless: bool = False
    max_login_attempts: int = 2
    media_delay_seconds: float = 20
    max_concurrent_media: int = 5
    log_file: str = "bot_log.txt"
    auth_markers: tuple = field(default=("Dashboard", "Account Code"))

    @property
    def login_url(self):
        return f"{self.base_url}/login"

    @property
    def live_calls_url(self):
        return f"{self.base_url}/live/calls"

    @property
    def sound_url(self):
        return f"{self.base_url}/live/calls/sound"

    def action_links(self):
        """
        Inline buttons attached to every Telegram message.

        Returns:
            list: (text, url) pairs; links missing a name or URL are left out
        """
        links = []
        if self.main_channel_name and self.main_channel_url:
            links.append((f"📢 {self.main_channel_name}", self.main_channel_url))
        if self.admin_name and self.admin_url:
            links.append((f"👮 {self.admin_name}", self.admin_url))
        return links

    def with_overrides(self, **overrides):
        """Return a copy with the given non-None fields replaced."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


def _get_float(env, name, default):
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got '{raw}'") from e
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def _get_int(env, name, default):
    value = _get_float(env, name, default)
    if value != int(value):
        raise ConfigError(f"{name} must be a whole number, got {value}")
    return int(value)


def load_settings(env=None, dotenv=True):
    """
    Build Settings from environment variables.

    Args:
        env (dict, optional): Mapping to read instead of os.environ
        dotenv (bool): Load a .env file into os.environ first

    Returns:
        Settings: The loaded configuration

    Raises:
        ConfigError: If a required variable is missing or a value is invalid
    """
    if env is None:
        if dotenv:
            load_dotenv()
        env = os.environ

    missing = [name for name in REQUIRED_VARS if not env.get(name)]
    if missing:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

    settings = Settings(
        username=env["ORANGECARRIER_EMAIL"],
        password=env["ORANGECARRIER_PASSWORD"],
        bot_token=env["TELEGRAM_BOT_TOKEN"],
        chat_id=env["TELEGRAM_CHAT_ID"],
        base_url=env.get("BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        refresh_interval_minutes=_get_float(env, "REFRESH_INTERVAL_MINUTES", 5),
        main_channel_name=env.get("MAIN_CHANNEL_NAME", ""),
        main_channel_url=env.get("MAIN_CHANNEL_URL", ""),
        admin_name=env.get("ADMIN_NAME", ""),
        admin_url=env.get("ADMIN_URL", ""),
        alert_notice=env.get("ALERT_NOTICE", DEFAULT_ALERT_NOTICE),
        caption_notice=env.get("CAPTION_NOTICE", DEFAULT_CAPTION_NOTICE),
        caption_footer=env.get("CAPTION_FOOTER", ""),
        headless=env.get("HEADLESS", "false").strip().lower() in _TRUE_VALUES,
        max_login_attempts=_get_int(env, "MAX_LOGIN_ATTEMPTS", 2),
        media_delay_seconds=_get_float(env, "MEDIA_DELAY_SECONDS", 20),
        max_concurrent_media=_get_int(env, "MAX_CONCURRENT_MEDIA", 5),
        log_file=env.get("LOG_FILE", "bot_log.txt"),
    )
    logger.debug(f"Loaded settings for {settings.base_url} (chat {settings.chat_id})")
    return settings
