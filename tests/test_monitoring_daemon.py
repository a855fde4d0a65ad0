"""Tests for daemon wiring."""

import asyncio

from monitoring.call_extractor import CallEvent
from monitoring.notification_pipeline import NotificationPipeline
from services.monitoring_daemon import build_pipeline_factory, run_daemon
from tests.conftest import FakeConverter, FakeNotifier


class NoSessionManager:
    def __init__(self):
        self.attempts_requested = None

    async def acquire(self, max_attempts=None):
        self.attempts_requested = max_attempts
        return None


async def test_run_daemon_exits_when_login_fails(settings):
    manager = NoSessionManager()

    code = await run_daemon(
        settings, session_manager=manager, notifier=FakeNotifier(), converter=FakeConverter()
    )

    assert code == 1
    assert manager.attempts_requested == settings.max_login_attempts


async def test_pipeline_factory_shares_one_media_semaphore(settings, session):
    factory = build_pipeline_factory(settings, session, FakeNotifier(), FakeConverter())
    event = CallEvent(country="USA", raw_number="1", cli_number="C", audio_ref="", dedup_key="C_1")

    first = factory(event)
    second = factory(event)

    assert isinstance(first, NotificationPipeline)
    assert first.media_delay == settings.media_delay_seconds
    assert isinstance(first.media_slots, asyncio.Semaphore)
    assert first.media_slots is second.media_slots
