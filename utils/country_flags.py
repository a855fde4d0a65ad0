"""
Country Flag Lookup

Maps a country name as shown on the dashboard to its flag emoji.
"""

import logging
import pycountry

logger = logging.getLogger(__name__)

DEFAULT_FLAG = "🌍"

# Names the dashboard uses that pycountry does not resolve directly
ALIASES = {
    "USA": "US",
    "UK": "GB",
    "ENGLAND": "GB",
    "GREAT BRITAIN": "GB",
    "RUSSIA": "RU",
    "SOUTH KOREA": "KR",
    "NORTH KOREA": "KP",
    "IRAN": "IR",
    "SYRIA": "SY",
    "VIETNAM": "VN",
    "LAOS": "LA",
    "BOLIVIA": "BO",
    "VENEZUELA": "VE",
    "TANZANIA": "TZ",
    "MOLDOVA": "MD",
    "IVORY COAST": "CI",
    "CONGO DR": "CD",
    "DR CONGO": "CD",
    "UAE": "AE",
    "PALESTINE": "PS",
    "TURKEY": "TR",
}


def country_code_to_flag(country_code):
    """Convert an ISO 3166-1 alpha-2 code to a flag emoji."""
    if not country_code or len(country_code) != 2 or not country_code.isalpha():
        return DEFAULT_FLAG
    return "".join(chr(0x1F1E6 + ord(c) - ord("A")) for c in country_code.upper())


def _lookup_alpha2(name):
    if name in ALIASES:
        return ALIASES[name]
    try:
        return pycountry.countries.lookup(name).alpha_2
    except LookupError:
        pass
    try:
        matches = pycountry.countries.search_fuzzy(name)
    except LookupError:
        return None
    return matches[0].alpha_2 if matches else None


def get_country_flag(country_name):
    """
    Get the flag emoji for a country name.

    Args:
        country_name (str): Country name, ISO code or common alias

    Returns:
        str: Flag emoji, or a globe if the country is unknown
    """
    name = (country_name or "").strip().upper()
    if not name:
        return DEFAULT_FLAG

    code = _lookup_alpha2(name)
    if not code:
        logger.debug(f"No flag found for country '{country_name}'")
        return DEFAULT_FLAG
    return country_code_to_flag(code)
