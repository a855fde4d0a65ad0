"""Tests for recording download and conversion."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from monitoring.audio_converter import AudioConverter
from monitoring.audio_fetcher import download_audio
from monitoring.errors import AudioFetchError

AUDIO_URL = "https://www.orangecarrier.com/live/calls/sound?did=1&uuid=2"


def streaming_response(chunks, error=None):
    resp = MagicMock()
    resp.__enter__.return_value = resp
    resp.iter_content.return_value = chunks
    if error:
        resp.raise_for_status.side_effect = error
    return resp


def test_download_audio_writes_file_with_session_cookies(tmp_path):
    dest = tmp_path / "call.wav"
    with patch("monitoring.audio_fetcher.requests.get") as get:
        get.return_value = streaming_response([b"RIFF", b"", b"data"])
        written = download_audio(AUDIO_URL, "sid=abc", str(dest))

    assert written == 8
    assert dest.read_bytes() == b"RIFFdata"
    headers = get.call_args.kwargs["headers"]
    assert headers["Cookie"] == "sid=abc"
    assert "Mozilla" in headers["User-Agent"]
    assert get.call_args.kwargs["timeout"] == 30


def test_download_audio_http_error(tmp_path):
    with patch("monitoring.audio_fetcher.requests.get") as get:
        get.return_value = streaming_response([], error=requests.HTTPError("403 Forbidden"))
        with pytest.raises(AudioFetchError, match="403"):
            download_audio(AUDIO_URL, "sid=abc", str(tmp_path / "call.wav"))


def test_download_audio_timeout(tmp_path):
    with patch("monitoring.audio_fetcher.requests.get", side_effect=requests.Timeout("slow")):
        with pytest.raises(AudioFetchError):
            download_audio(AUDIO_URL, "sid=abc", str(tmp_path / "call.wav"))


def test_download_audio_empty_body(tmp_path):
    with patch("monitoring.audio_fetcher.requests.get") as get:
        get.return_value = streaming_response([])
        with pytest.raises(AudioFetchError, match="Empty"):
            download_audio(AUDIO_URL, "sid=abc", str(tmp_path / "call.wav"))


async def test_convert_success(tmp_path):
    with patch("monitoring.audio_converter.AudioSegment") as segment:
        audio = segment.from_file.return_value
        result = await AudioConverter().convert(tmp_path / "a.wav", tmp_path / "a.mp3")

    assert result.ok
    assert result.output_path == str(tmp_path / "a.mp3")
    segment.from_file.assert_called_once_with(str(tmp_path / "a.wav"))
    audio.export.assert_called_once_with(str(tmp_path / "a.mp3"), format="mp3", codec="libmp3lame")
    audio.export.return_value.close.assert_called_once_with()


async def test_convert_failure_is_reported_not_raised(tmp_path):
    with patch("monitoring.audio_converter.AudioSegment") as segment:
        segment.from_file.side_effect = Exception("Decoding failed. ffmpeg returned error code: 1")
        result = await AudioConverter().convert(tmp_path / "a.wav", tmp_path / "a.mp3")

    assert not result.ok
    assert result.output_path is None
    assert "Decoding failed" in result.error
