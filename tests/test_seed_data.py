"""Tests for the country seed data loader (quiethours/seed_data.py)."""

from quiethours.seed_data import get_country_name, get_country_names
from quiethours.slug import slugify


def test_country_names_loads():
    names = get_country_names()
    assert isinstance(names, dict)
    assert names["CA"] == "Canada"
    assert names["US"] == "United States"


def test_country_name_case_insensitive():
    assert get_country_name("us") == "United States"


def test_unknown_code_falls_back_to_code():
    assert get_country_name("ZZ") == "ZZ"


def test_country_slug_from_name():
    assert slugify(get_country_name("US")) == "united-states"
    assert slugify(get_country_name("CA")) == "canada"


def test_seed_covers_every_iso_code():
    names = get_country_names()
    assert len(names) == 249
    assert all(len(code) == 2 and code.isupper() for code in names)


def test_codes_beyond_north_america():
    assert get_country_name("TW") == "Taiwan"
    assert get_country_name("AE") == "United Arab Emirates"
    assert get_country_name("CN") == "China"
    assert slugify(get_country_name("CI")) == "cote-d-ivoire"
    assert slugify(get_country_name("KR")) == "south-korea"
