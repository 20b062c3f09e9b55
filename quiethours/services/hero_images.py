"""Download quiet-hours hero images and write the ``heroImages.json`` map.

Images land in ``settings.hero_dir`` as ``hero-<country>-<region>-<city><ext>``
and are mapped by slug key to their public ``/hero/...`` path. A failed
download is logged and skipped; the record's remote URL remains the fallback.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path, PurePosixPath
from urllib.parse import urlparse

import httpx

from quiethours.services.loader import HERO_MAP_FILENAME
from quiethours.slug import build_slug_key

logger = logging.getLogger(__name__)

HERO_URL_PREFIX = "/hero/"
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif"}


def hero_filename(record) -> str:
    suffix = PurePosixPath(urlparse(record.hero_image_url).path).suffix.lower()
    if suffix not in IMAGE_EXTENSIONS:
        suffix = ".jpg"
    parts = [record.country_slug, record.region_slug, record.city_slug or record.region_slug]
    return "hero-" + "-".join(parts) + suffix


async def fetch_hero_images(records, hero_dir: Path, client: httpx.AsyncClient) -> dict[str, str]:
    """Download every record's ``hero_image_url``; returns slug key -> public path."""
    hero_dir.mkdir(parents=True, exist_ok=True)
    hero_map: dict[str, str] = {}
    for record in records:
        if not record.hero_image_url:
            continue
        key = build_slug_key(*record.slug_key_parts)
        filename = hero_filename(record)
        try:
            resp = await client.get(record.hero_image_url)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Failed to download hero image for %s: %s", key, e)
            continue
        (hero_dir / filename).write_bytes(resp.content)
        hero_map[key] = HERO_URL_PREFIX + filename
        logger.info("Saved hero image %s", filename)
    return hero_map


def write_hero_map(hero_map: dict[str, str], data_dir: Path) -> Path:
    path = data_dir / HERO_MAP_FILENAME
    with open(path, "w", encoding="utf-8") as f:
        json.dump(hero_map, f, indent=2, ensure_ascii=False)
        f.write("\n")
    return path
