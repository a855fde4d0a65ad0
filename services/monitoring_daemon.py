"""
Monitoring Daemon

Background service that logs in to the carrier dashboard once and then
relays every new live call to Telegram until the process is stopped.
"""

import sys
import asyncio
import logging
from functools import partial

from config.settings import load_settings
from monitoring.audio_converter import AudioConverter
from monitoring.errors import ConfigError
from monitoring.monitor import CallMonitor
from monitoring.notification_pipeline import NotificationPipeline
from monitoring.session_manager import SessionManager
from monitoring.telegram_notifier import TelegramNotifier

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_file, debug=False):
    """Log to the console and to log_file."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.FileHandler(log_file, encoding="utf-8"), logging.StreamHandler()],
        force=True,
    )


def build_pipeline_factory(settings, session, notifier, converter):
    """Return a callable creating one NotificationPipeline per CallEvent."""
    media_slots = asyncio.Semaphore(settings.max_concurrent_media)
    return partial(
        NotificationPipeline,
        session=session,
        notifier=notifier,
        converter=converter,
        settings=settings,
        media_delay=settings.media_delay_seconds,
        media_slots=media_slots,
    )


async def run_daemon(settings, session_manager=None, notifier=None, converter=None):
    """
    Log in and monitor forever.

    Returns:
        int: Process exit code (1 if login failed)
    """
    session_manager = session_manager or SessionManager(settings)
    notifier = notifier or TelegramNotifier(settings.bot_token, settings.chat_id)
    converter = converter or AudioConverter()

    session = await session_manager.acquire(settings.max_login_attempts)
    if session is None:
        logger.error("🔴 Could not login after multiple attempts.")
        return 1

    monitor = CallMonitor(
        session=session,
        pipeline_factory=build_pipeline_factory(settings, session, notifier, converter),
        sound_url=settings.sound_url,
        refresh_interval_minutes=settings.refresh_interval_minutes,
    )
    try:
        await monitor.run()
    finally:
        logger.info("Stopping the bot.")
        await session.browser.close()
    return 0


def main(overrides=None, debug=False):
    """
    Daemon entry point.

    Args:
        overrides (dict, optional): Settings fields to replace (from the CLI)
        debug (bool): Enable debug logging
    """
    try:
        settings = load_settings()
    except ConfigError as e:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.error(f"Configuration error: {e}")
        return 1

    settings = settings.with_overrides(**(overrides or {}))
    setup_logging(settings.log_file, debug=debug)

    logger.info("Starting Monitoring Daemon")
    logger.info("Press Ctrl+C to stop")

    try:
        return asyncio.run(run_daemon(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0
    finally:
        logger.info("Monitoring Daemon stopped")


if __name__ == "__main__":
    sys.exit(main())
