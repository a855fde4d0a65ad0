"""
Utility modules for the call relay.
"""

from .phone_format import mask_number, extract_country
from .country_flags import get_country_flag, country_code_to_flag

__all__ = ['mask_number', 'extract_country', 'get_country_flag', 'country_code_to_flag']
