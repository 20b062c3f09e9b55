"""URL slugs and composite location keys.

A location is addressed by ``country__region__city``; region-only records
(state-level fireworks rules) use ``REGION_ONLY_TOKEN`` in the city slot.
"""

from __future__ import annotations

import re
import unicodedata
from typing import NamedTuple

LOCATION_KEY_DELIMITER = "__"
REGION_ONLY_TOKEN = "region-root"

_NON_ALPHANUMERIC_RE = re.compile(r"[^a-z0-9]+")


class ParsedSlugKey(NamedTuple):
    country_slug: str
    region_slug: str
    city_slug: str | None


def strip_diacritics(text: str) -> str:
    """'Québec' -> 'Quebec'."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def collation_key(text: str) -> str:
    """Sort key for display names: accent- and case-insensitive."""
    return strip_diacritics(text).casefold()


def slugify(value: str) -> str:
    """Return a lowercase, hyphenated, ASCII-only slug.

    "Québec City" -> "quebec-city", "St. John's (Downtown)" -> "st-john-s-downtown".
    Never fails; pathological input yields an empty string.
    """
    s = strip_diacritics(value).lower()
    s = _NON_ALPHANUMERIC_RE.sub("-", s)
    return s.strip("-")


def build_slug_key(country_slug: str, region_slug: str, city_slug: str | None = None) -> str:
    country = (country_slug or "").lower()
    region = (region_slug or "").lower()
    city = city_slug.lower() if city_slug and city_slug.strip() else REGION_ONLY_TOKEN
    return LOCATION_KEY_DELIMITER.join([country, region, city])


def parse_slug_key(key: str) -> ParsedSlugKey:
    parts = key.split(LOCATION_KEY_DELIMITER)
    parts += [""] * (3 - len(parts))
    country, region, city = parts[0], parts[1], parts[2]
    return ParsedSlugKey(country, region, None if city in ("", REGION_ONLY_TOKEN) else city)


def ensure_unique_slug(slug: str, used: set[str]) -> str:
    """Return ``slug`` or the first free ``slug-2``, ``slug-3``, ... and record it in ``used``."""
    candidate = slug
    suffix = 2
    while candidate in used:
        candidate = f"{slug}-{suffix}"
        suffix += 1
    used.add(candidate)
    return candidate
