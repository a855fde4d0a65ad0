"""
Recording Download

Fetches a call recording with the dashboard session cookies.
"""

import logging
import requests

from monitoring.browser import USER_AGENT
from monitoring.errors import AudioFetchError

logger = logging.getLogger(__name__)

DOWNLOAD_TIMEOUT = 30
CHUNK_SIZE = 64 * 1024


def download_audio(audio_url, cookie_header, dest_path, timeout=DOWNLOAD_TIMEOUT):
    """
    Download a recording to dest_path.

    Args:
        audio_url (str): Recording URL
        cookie_header (str): Cookie header from the authenticated session
        dest_path (str): Where to write the file
        timeout (int): Per-request timeout in seconds

    Returns:
        int: Number of bytes written

    Raises:
        AudioFetchError: On HTTP errors, network errors or an empty body
    """
    headers = {"Cookie": cookie_header, "User-Agent": USER_AGENT}
    written = 0
    try:
        with requests.get(audio_url, headers=headers, timeout=timeout, stream=True) as resp:
            resp.raise_for_status()
            with open(dest_path, "wb") as f:
                for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
                        written += len(chunk)
    except (requests.RequestException, OSError) as e:
        raise AudioFetchError(f"Could not download {audio_url}: {e}") from e

    if written == 0:
        raise AudioFetchError(f"Empty recording returned by {audio_url}")

    logger.info(f"🎧 Audio file downloaded ({written} bytes)")
    return written
