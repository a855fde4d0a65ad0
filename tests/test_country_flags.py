"""Tests for country flag lookup."""

from utils.country_flags import DEFAULT_FLAG, country_code_to_flag, get_country_flag


def test_country_code_to_flag():
    assert country_code_to_flag("us") == "🇺🇸"
    assert country_code_to_flag("GB") == "🇬🇧"


def test_country_code_to_flag_rejects_bad_codes():
    assert country_code_to_flag("") == DEFAULT_FLAG
    assert country_code_to_flag("USA") == DEFAULT_FLAG
    assert country_code_to_flag(None) == DEFAULT_FLAG


def test_flag_by_country_name_any_case():
    assert get_country_flag("France") == "🇫🇷"
    assert get_country_flag("UNITED STATES") == "🇺🇸"
    assert get_country_flag(" germany ") == "🇩🇪"


def test_flag_by_alias():
    assert get_country_flag("USA") == "🇺🇸"
    assert get_country_flag("UK") == "🇬🇧"
    assert get_country_flag("RUSSIA") == "🇷🇺"


def test_unknown_country_gets_globe():
    assert get_country_flag("ZZZZQ") == DEFAULT_FLAG
    assert get_country_flag("") == DEFAULT_FLAG
    assert get_country_flag(None) == DEFAULT_FLAG
