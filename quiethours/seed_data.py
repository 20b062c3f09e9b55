"""Thin loader for country seed data from country_seeds.json.

ISO-3166 alpha-2 codes and their English display names live in
quiethours/country_seeds.json. Country slugs are derived from these names
("US" -> "United States" -> "united-states").
"""

from __future__ import annotations

import json
from pathlib import Path

_DATA: dict | None = None


def _load() -> dict:
    global _DATA
    if _DATA is None:
        path = Path(__file__).with_name("country_seeds.json")
        with open(path, encoding="utf-8") as f:
            _DATA = json.load(f)
    return _DATA


def get_country_names() -> dict[str, str]:
    """Return {iso2_code: display_name}."""
    return _load()["countries"]


def get_country_name(code: str) -> str:
    """Display name for an ISO-2 code, or the code itself when unknown."""
    return get_country_names().get(code.strip().upper(), code)
