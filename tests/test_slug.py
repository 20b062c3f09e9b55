"""Tests for slug generation and composite location keys (quiethours/slug.py)."""

import pytest

from quiethours.slug import (
    REGION_ONLY_TOKEN,
    build_slug_key,
    collation_key,
    ensure_unique_slug,
    parse_slug_key,
    slugify,
)


class TestSlugify:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("Québec City", "quebec-city"),
            ("St. John's (Downtown)", "st-john-s-downtown"),
            ("Montréal", "montreal"),
            ("  New   York  ", "new-york"),
            ("Winston-Salem", "winston-salem"),
            ("Coeur d'Alene", "coeur-d-alene"),
            ("--", ""),
            ("", ""),
        ],
    )
    def test_examples(self, value, expected):
        assert slugify(value) == expected

    @pytest.mark.parametrize("value", ["Québec City", "St. John's (Downtown)", "São Paulo", "Zürich 8001"])
    def test_idempotent(self, value):
        once = slugify(value)
        assert slugify(once) == once

    def test_ascii_only(self):
        assert slugify("Ñandú Ōsaka") == "nandu-osaka"


class TestSlugKey:
    def test_city_key(self):
        assert build_slug_key("canada", "ontario", "toronto") == "canada__ontario__toronto"

    def test_region_only_key_uses_sentinel(self):
        key = build_slug_key("united-states", "massachusetts")
        assert key == f"united-states__massachusetts__{REGION_ONLY_TOKEN}"
        assert key != build_slug_key("united-states", "massachusetts", "boston")

    def test_blank_city_is_region_only(self):
        assert build_slug_key("united-states", "colorado", "  ") == build_slug_key("united-states", "colorado")

    def test_parse_round_trip(self):
        parsed = parse_slug_key("canada__ontario__toronto")
        assert parsed.country_slug == "canada"
        assert parsed.region_slug == "ontario"
        assert parsed.city_slug == "toronto"

    def test_parse_region_only(self):
        parsed = parse_slug_key(build_slug_key("united-states", "colorado"))
        assert parsed.city_slug is None
        assert parsed.region_slug == "colorado"


class TestEnsureUniqueSlug:
    def test_monotonic_suffixes(self):
        used: set[str] = set()
        results = [ensure_unique_slug("toronto", used) for _ in range(4)]
        assert results == ["toronto", "toronto-2", "toronto-3", "toronto-4"]
        assert used == set(results)

    def test_skips_taken_suffix(self):
        used = {"springfield", "springfield-2"}
        assert ensure_unique_slug("springfield", used) == "springfield-3"
        assert "springfield-3" in used


def test_collation_key_ignores_accents_and_case():
    names = ["Saskatchewan", "québec", "Ontario"]
    assert sorted(names, key=collation_key) == ["Ontario", "québec", "Saskatchewan"]
