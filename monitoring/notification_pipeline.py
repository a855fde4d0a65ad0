"""
Notification Pipeline

Relays one call to Telegram in two phases:

1. Instant alert: flag, country and masked number, sent as soon as the
   call shows up on the dashboard.
2. Media: after a fixed delay (the dashboard needs time to finish the
   recording) the WAV is downloaded, converted to MP3 and sent, and the
   instant alert is deleted.

States: NEW -> NOTIFIED -> SCHEDULED -> FETCHING -> CONVERTING -> SENT
-> CLEANED, with FAILED reachable from any non-terminal state. Nothing is
retried and no error escapes run(); every outcome ends up in the log and
on the NotificationRecord.
"""

import asyncio
import logging
import os
import tempfile
from contextlib import nullcontext
from dataclasses import dataclass, field
from enum import Enum

from monitoring.audio_fetcher import download_audio
from utils.country_flags import get_country_flag
from utils.phone_format import mask_number

logger = logging.getLogger(__name__)

MEDIA_DELAY_SECONDS = 20


class PipelineState(Enum):
    NEW = "new"
    NOTIFIED = "notified"
    SCHEDULED = "scheduled"
    FETCHING = "fetching"
    CONVERTING = "converting"
    SENT = "sent"
    CLEANED = "cleaned"
    FAILED = "failed"


TERMINAL_STATES = {PipelineState.CLEANED, PipelineState.FAILED}


@dataclass
class NotificationRecord:
    event: object
    external_message_id: int = None
    state: PipelineState = PipelineState.NEW
    history: list = field(default_factory=lambda: [PipelineState.NEW])
    error: str = None

    @property
    def done(self):
        return self.state in TERMINAL_STATES


def format_alert(event, notice):
    """Text of the instant alert."""
    return (
        f"{get_country_flag(event.country)} Country: {event.country}\n"
        f"📞 Number: {mask_number(event.raw_number)}\n"
        f"{notice}"
    )


def format_caption(event, notice, footer=""):
    """Caption attached to the recording."""
    caption = (
        f"{get_country_flag(event.country)} Country: {event.country}\n"
        f"📞 Number: {mask_number(event.raw_number)}\n"
        f"{notice}"
    )
    if footer:
        caption += f"\n{footer}"
    return caption


class NotificationPipeline:
    """Drives one CallEvent through the alert and media phases."""

    def __init__(
        self,
        event,
        session,
        notifier,
        converter,
        settings,
        media_delay=MEDIA_DELAY_SECONDS,
        fetch_audio=download_audio,
        media_slots=None,
    ):
        self.event = event
        self.session = session
        self.notifier = notifier
        self.converter = converter
        self.settings = settings
        self.media_delay = media_delay
        self.fetch_audio = fetch_audio
        self.media_slots = media_slots
        self.record = NotificationRecord(event=event)

    @property
    def label(self):
        return f"{mask_number(self.event.cli_number)} ({mask_number(self.event.raw_number)})"

    def _advance(self, state):
        self.record.state = state
        self.record.history.append(state)
        logger.debug(f"Pipeline {self.label} -> {state.value}")

    def _fail(self, reason):
        self.record.error = reason
        self._advance(PipelineState.FAILED)
        logger.error(f"❌ Error processing call for {self.label}: {reason}")
        return self.record

    async def run(self):
        """
        Run the pipeline to a terminal state.

        Returns:
            NotificationRecord: Final record (state CLEANED or FAILED)
        """
        try:
            return await self._run()
        except Exception as e:
            logger.exception(f"Unexpected pipeline error for {self.label}")
            return self._fail(f"unexpected error: {e}")

    async def _run(self):
        action_links = self.settings.action_links()

        alert = format_alert(self.event, self.settings.alert_notice)
        message_id = await asyncio.to_thread(self.notifier.send_text, alert, action_links)
        if message_id is None:
            return self._fail("instant notification not sent")
        self.record.external_message_id = message_id
        self._advance(PipelineState.NOTIFIED)
        logger.info(f"✅ Instant notification sent for {self.label} (Message ID: {message_id})")

        self._advance(PipelineState.SCHEDULED)
        logger.info(f"📞 Scheduling audio for {self.label} in {self.media_delay}s...")
        await asyncio.sleep(self.media_delay)

        slots = self.media_slots if self.media_slots is not None else nullcontext()
        async with slots:
            with tempfile.TemporaryDirectory(prefix="call_") as workdir:
                delivered = await self._deliver_media(workdir, action_links)

        if delivered:
            self._advance(PipelineState.CLEANED)
            logger.info(f"🗑 Call {self.label} relayed, temporary files deleted.")
        return self.record

    async def _deliver_media(self, workdir, action_links):
        wav_path = os.path.join(workdir, "recording.wav")
        mp3_path = os.path.join(workdir, "recording.mp3")

        self._advance(PipelineState.FETCHING)
        try:
            await asyncio.to_thread(
                self.fetch_audio,
                self.event.audio_ref,
                self.session.cookie_header(),
                wav_path,
            )
        except Exception as e:
            self._fail(f"audio download failed: {e}")
            return False

        self._advance(PipelineState.CONVERTING)
        result = await self.converter.convert(wav_path, mp3_path)
        if not result.ok:
            self._fail(f"conversion failed: {result.error}")
            return False

        caption = format_caption(
            self.event, self.settings.caption_notice, self.settings.caption_footer
        )
        sent = await asyncio.to_thread(
            self.notifier.send_audio, caption, result.output_path, action_links
        )
        if not sent:
            self._fail("audio not sent")
            return False
        self._advance(PipelineState.SENT)

        deleted = await asyncio.to_thread(
            self.notifier.delete_message, self.record.external_message_id
        )
        if not deleted:
            logger.warning(f"Alert {self.record.external_message_id} for {self.label} was not deleted")

        return True
