"""
Call Extractor

Parses the live calls page into CallEvent objects.

Table structure (both the live table and the "last activity" table):
Termination | DID | CLI | ... | [Play button]

The play button carries the recording reference in its onclick handler,
e.g. onclick="Play('12345','1761406796.3808732')".
"""

import re
import logging
from dataclasses import dataclass
from urllib.parse import urlencode
from bs4 import BeautifulSoup

from utils.phone_format import extract_country

logger = logging.getLogger(__name__)

ROW_SELECTOR = "#LiveCalls tr, #last-activity tbody.lastdata tr"
PLAY_BUTTON_SELECTOR = "button[onclick*='Play']"

PLAY_PATTERN = re.compile(r"""Play\(['"]([^'"]+)['"],\s*['"]([^'"]+)['"]\)""")


@dataclass(frozen=True)
class CallEvent:
    country: str
    raw_number: str
    cli_number: str
    audio_ref: str
    dedup_key: str
    did: str = ""
    uuid: str = ""


def build_audio_ref(sound_url, did, uuid):
    """Build the recording download URL for a call."""
    return f"{sound_url}?{urlencode({'did': did, 'uuid': uuid})}"


def parse_play_reference(onclick):
    """
    Pull (did, uuid) out of a Play('<did>','<uuid>') handler.

    Returns:
        tuple: (did, uuid), or None if the handler is not well formed
    """
    if not onclick:
        return None
    match = PLAY_PATTERN.search(onclick)
    if not match:
        return None
    return match.group(1), match.group(2)


def extract_calls(html_content, sound_url):
    """
    Extract call events from the rendered live calls page.

    Args:
        html_content (str): Page source snapshot
        sound_url (str): Base URL of the recording endpoint

    Returns:
        list: CallEvent objects in page order (may be empty)
    """
    if not html_content:
        return []

    soup = BeautifulSoup(html_content, "html.parser")
    calls = []

    for row in soup.select(ROW_SELECTOR):
        columns = row.find_all("td")
        if len(columns) <= 2:
            continue

        play_button = row.select_one(PLAY_BUTTON_SELECTOR)
        if play_button is None:
            continue

        reference = parse_play_reference(play_button.get("onclick", ""))
        if reference is None:
            logger.debug(f"Skipping row with malformed play handler: {play_button.get('onclick')}")
            continue
        did, uuid = reference

        cli_number = columns[2].get_text().strip()
        calls.append(
            CallEvent(
                country=extract_country(columns[0].get_text().strip()),
                raw_number=columns[1].get_text().strip(),
                cli_number=cli_number,
                audio_ref=build_audio_ref(sound_url, did, uuid),
                dedup_key=f"{cli_number}_{uuid}",
                did=did,
                uuid=uuid,
            )
        )

    return calls
