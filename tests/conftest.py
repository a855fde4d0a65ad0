"""
Shared fixtures and fakes for the call relay tests.

None of these touch the network, a real browser or ffmpeg.
"""

import os

import pytest

from config.settings import Settings
from monitoring.audio_converter import ConversionResult
from monitoring.session_manager import Session


LIVE_CALLS_HTML = """
<html><body>
<table id="LiveCalls">
  <tr><th>Termination</th><th>DID</th><th>CLI</th><th></th></tr>
  <tr>
    <td>USA MOBILE 1</td><td>15551234567</td><td>CLI1</td>
    <td><button class="btn" onclick="Play('did9','uuid9')">Play</button></td>
  </tr>
</table>
</body></html>
"""


class FakeBrowser:
    """Stands in for BrowserHandle; returns queued snapshots."""

    def __init__(self, pages=None, refresh_errors=0):
        self.pages = list(pages or [])
        self.last_page = ""
        self.refresh_calls = 0
        self.refresh_errors = refresh_errors
        self.closed = False

    async def snapshot(self):
        if self.pages:
            page = self.pages.pop(0)
            if isinstance(page, Exception):
                raise page
            self.last_page = page
        return self.last_page

    async def refresh(self):
        self.refresh_calls += 1
        if self.refresh_calls <= self.refresh_errors:
            raise RuntimeError("reload timed out")

    async def close(self):
        self.closed = True


class FakeNotifier:
    """Records every Telegram call."""

    def __init__(self, message_id=101, audio_ok=True, delete_ok=True):
        self.message_id = message_id
        self.audio_ok = audio_ok
        self.delete_ok = delete_ok
        self.texts = []
        self.audios = []
        self.deleted = []

    def send_text(self, text, action_links=None):
        self.texts.append((text, action_links))
        return self.message_id

    def send_audio(self, caption, file_path, action_links=None):
        self.audios.append((caption, file_path, os.path.exists(file_path)))
        return self.audio_ok

    def delete_message(self, message_id):
        self.deleted.append(message_id)
        return self.delete_ok


class FakeConverter:
    def __init__(self, ok=True):
        self.ok = ok
        self.calls = []

    async def convert(self, source_path, target_path):
        self.calls.append((source_path, target_path))
        if not self.ok:
            return ConversionResult(ok=False, error="ffmpeg exited with 1")
        with open(target_path, "wb") as f:
            f.write(b"ID3fake")
        return ConversionResult(ok=True, output_path=target_path)


class FakeFetcher:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def __call__(self, audio_url, cookie_header, dest_path):
        self.calls.append((audio_url, cookie_header, dest_path))
        with open(dest_path, "wb") as f:
            f.write(b"RIFFfake")
        if self.error:
            raise self.error
        return 8


@pytest.fixture
def settings():
    return Settings(
        username="user@example.com",
        password="secret",
        bot_token="123:abc",
        chat_id="-100",
        main_channel_name="Main",
        main_channel_url="https://t.me/main",
        admin_name="Admin",
        admin_url="https://t.me/admin",
    )


@pytest.fixture
def live_calls_html():
    return LIVE_CALLS_HTML


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def converter():
    return FakeConverter()


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def session():
    return Session(browser=FakeBrowser(), cookies=[{"name": "sid", "value": "abc"}])
