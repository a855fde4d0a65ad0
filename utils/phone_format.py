"""
Phone Number Formatting

Helpers for turning dashboard text into display values: masking the
middle digits of a number and pulling the country name out of the
"termination" column (e.g. "UNITED STATES MOBILE 123" -> "UNITED STATES").
"""

import re

STOP_WORDS = {"MOBILE", "FIXED"}

_DIGIT = re.compile(r"\d")


def mask_number(number):
    """
    Hide the middle digits of a phone number.

    Args:
        number: Phone number (str or int)

    Returns:
        str: First 3 digits + "***" + last 4 digits for numbers longer
        than 7 characters, otherwise the trimmed number unchanged
    """
    num_str = str(number).strip()
    if len(num_str) > 7:
        return f"{num_str[:3]}***{num_str[-4:]}"
    return num_str


def extract_country(termination):
    """
    Extract the country name from a termination description.

    Tokens are taken until one is MOBILE/FIXED (any case) or contains a
    digit. If nothing precedes the stopping token, the whole text is
    returned.

    Args:
        termination (str): Text of the first table column

    Returns:
        str: Country name
    """
    country_parts = []
    for part in termination.split():
        if part.upper() in STOP_WORDS or _DIGIT.search(part):
            break
        country_parts.append(part)
    return " ".join(country_parts) if country_parts else termination
