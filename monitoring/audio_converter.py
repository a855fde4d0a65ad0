"""
Audio Converter

Transcodes the dashboard's WAV recordings to MP3 for Telegram, using
pydub (ffmpeg underneath). Conversion runs in a worker thread and is
awaited; the outcome comes back as a ConversionResult instead of raising.
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from pydub import AudioSegment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionResult:
    ok: bool
    output_path: str = None
    error: str = None


class AudioConverter:
    """WAV -> MP3 (or any ffmpeg-supported format) converter."""

    def __init__(self, target_format="mp3", codec="libmp3lame", ffmpeg_path=None):
        self.target_format = target_format
        self.codec = codec
        if ffmpeg_path:
            AudioSegment.converter = ffmpeg_path

    def _convert(self, source_path, target_path):
        audio = AudioSegment.from_file(source_path)
        audio.export(target_path, format=self.target_format, codec=self.codec).close()

    async def convert(self, source_path, target_path):
        """
        Convert source_path into target_path.

        Returns:
            ConversionResult: ok=True with the output path, or ok=False with the error
        """
        try:
            await asyncio.to_thread(self._convert, str(source_path), str(target_path))
        except Exception as e:
            logger.error(f"❌ FFmpeg conversion error: {e}")
            return ConversionResult(ok=False, error=str(e))

        logger.info(f"🔄 Converted to {self.target_format.upper()}: {Path(target_path).name}")
        return ConversionResult(ok=True, output_path=str(target_path))
