"""
Call Monitor

Watches the live calls page and launches a NotificationPipeline for every
call it has not seen before.

Each tick snapshots the page, extracts calls, records new keys in the
DeduplicationStore and only then spawns the pipeline task, so a call that
is still being relayed is never picked up twice. A separate task reloads
the page every few minutes to keep the dashboard session alive.
"""

import asyncio
import logging

from monitoring.call_extractor import extract_calls
from monitoring.dedup_store import DeduplicationStore
from utils.phone_format import mask_number

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.1
ERROR_BACKOFF = 15


class CallMonitor:
    """Polling loop plus keep-alive refresh for one dashboard session."""

    def __init__(
        self,
        session,
        pipeline_factory,
        sound_url,
        refresh_interval_minutes=5,
        dedup_store=None,
        poll_interval=POLL_INTERVAL,
        error_backoff=ERROR_BACKOFF,
    ):
        self.session = session
        self.pipeline_factory = pipeline_factory
        self.sound_url = sound_url
        self.refresh_interval_minutes = refresh_interval_minutes
        self.dedup_store = dedup_store if dedup_store is not None else DeduplicationStore()
        self.poll_interval = poll_interval
        self.error_backoff = error_backoff
        self.tasks = set()

    def _on_pipeline_done(self, task):
        self.tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"❌ Call processing failed for {task.get_name()}: {exc}")

    def _launch(self, event):
        pipeline = self.pipeline_factory(event)
        task = asyncio.create_task(pipeline.run(), name=event.dedup_key)
        self.tasks.add(task)
        task.add_done_callback(self._on_pipeline_done)
        return task

    async def poll_once(self):
        """
        Run one poll tick.

        Returns:
            list: Pipeline tasks started during this tick
        """
        html_content = await self.session.browser.snapshot()
        events = extract_calls(html_content, self.sound_url)

        launched = []
        for event in events:
            if not self.dedup_store.add_if_absent(event.dedup_key):
                continue
            logger.info(f"📞 New call detected: {event.country} / {mask_number(event.cli_number)}")
            launched.append(self._launch(event))
        return launched

    async def refresh_periodically(self):
        """Reload the page every refresh_interval_minutes, forever."""
        interval = self.refresh_interval_minutes * 60
        while True:
            await asyncio.sleep(interval)
            logger.info(f"🕒 {self.refresh_interval_minutes} minutes passed. Refreshing page...")
            try:
                await self.session.browser.refresh()
                logger.info("✅ Page refreshed successfully.")
            except Exception as e:
                logger.error(f"🔴 Page refresh failed: {e}")

    async def run(self, max_ticks=None):
        """
        Poll until the process stops (or max_ticks ticks have run).
        """
        refresher = asyncio.create_task(self.refresh_periodically(), name="page-refresh")
        logger.info("🚀 Monitoring started...")
        ticks = 0
        try:
            while max_ticks is None or ticks < max_ticks:
                ticks += 1
                try:
                    await self.poll_once()
                except Exception as e:
                    logger.error(f"🔴 Unexpected error in monitoring loop: {e}", exc_info=True)
                    await asyncio.sleep(self.error_backoff)
                await asyncio.sleep(self.poll_interval)
        finally:
            refresher.cancel()

    async def wait_for_pipelines(self):
        """Wait for every in-flight pipeline to finish."""
        pending = [t for t in self.tasks if not t.done()]
        while pending:
            await asyncio.gather(*pending, return_exceptions=True)
            pending = [t for t in self.tasks if not t.done()]
