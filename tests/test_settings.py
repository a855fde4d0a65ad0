"""Tests for environment configuration."""

import pytest

from config.settings import DEFAULT_ALERT_NOTICE, load_settings
from monitoring.errors import ConfigError

BASE_ENV = {
    "ORANGECARRIER_EMAIL": "user@example.com",
    "ORANGECARRIER_PASSWORD": "secret",
    "TELEGRAM_BOT_TOKEN": "123:abc",
    "TELEGRAM_CHAT_ID": "-100",
}


def test_defaults():
    settings = load_settings(env=dict(BASE_ENV))

    assert settings.username == "user@example.com"
    assert settings.refresh_interval_minutes == 5
    assert settings.max_login_attempts == 2
    assert settings.media_delay_seconds == 20
    assert settings.headless is False
    assert settings.alert_notice == DEFAULT_ALERT_NOTICE
    assert settings.login_url == "https://www.orangecarrier.com/login"
    assert settings.live_calls_url == "https://www.orangecarrier.com/live/calls"
    assert settings.sound_url == "https://www.orangecarrier.com/live/calls/sound"
    assert settings.action_links() == []


def test_overrides_from_env():
    env = dict(
        BASE_ENV,
        REFRESH_INTERVAL_MINUTES="2.5",
        MAX_LOGIN_ATTEMPTS="4",
        HEADLESS="True",
        BASE_URL="https://dash.example.com/",
        MAIN_CHANNEL_NAME="Main",
        MAIN_CHANNEL_URL="https://t.me/main",
        ADMIN_NAME="Admin",
    )
    settings = load_settings(env=env)

    assert settings.refresh_interval_minutes == 2.5
    assert settings.max_login_attempts == 4
    assert settings.headless is True
    assert settings.login_url == "https://dash.example.com/login"
    # admin link has no URL, so it is left out
    assert settings.action_links() == [("📢 Main", "https://t.me/main")]


def test_missing_required_variables():
    env = dict(BASE_ENV)
    del env["TELEGRAM_BOT_TOKEN"]
    del env["ORANGECARRIER_PASSWORD"]

    with pytest.raises(ConfigError) as exc:
        load_settings(env=env)
    assert "ORANGECARRIER_PASSWORD" in str(exc.value)
    assert "TELEGRAM_BOT_TOKEN" in str(exc.value)


@pytest.mark.parametrize(
    "name, value",
    [
        ("REFRESH_INTERVAL_MINUTES", "soon"),
        ("REFRESH_INTERVAL_MINUTES", "0"),
        ("MAX_LOGIN_ATTEMPTS", "1.5"),
        ("MAX_CONCURRENT_MEDIA", "-1"),
    ],
)
def test_invalid_numbers(name, value):
    with pytest.raises(ConfigError):
        load_settings(env=dict(BASE_ENV, **{name: value}))


def test_with_overrides_ignores_none():
    settings = load_settings(env=dict(BASE_ENV))
    changed = settings.with_overrides(headless=True, max_login_attempts=None)

    assert changed.headless is True
    assert changed.max_login_attempts == 2
    assert settings.headless is False
