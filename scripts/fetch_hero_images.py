#!/usr/bin/env python3
"""Download hero images for quiet-hours records that set hero_image_url.

Writes the images under public/hero/ (HERO_DIR) and the slug-key map to
<data_dir>/heroImages.json. Download failures are reported and skipped.

    python scripts/fetch_hero_images.py
"""

import asyncio
import sys
from pathlib import Path

import httpx

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from quiethours.config import settings  # noqa: E402
from quiethours.logging_config import configure_logging  # noqa: E402
from quiethours.services.hero_images import fetch_hero_images, write_hero_map  # noqa: E402
from quiethours.services.loader import get_loader  # noqa: E402


async def main() -> int:
    configure_logging(json_format=False)
    try:
        dataset = await get_loader("quiet-hours").ensure_dataset()
    except Exception as exc:
        print(f"[quiet_hours] Failed to load dataset: {exc}", file=sys.stderr)
        return 1

    async with httpx.AsyncClient(timeout=30.0, follow_redirects=True) as client:
        hero_map = await fetch_hero_images(dataset.records, settings.hero_dir, client)

    path = write_hero_map(hero_map, settings.data_dir)
    print(f"Wrote {len(hero_map)} hero image(s) to {path.name}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
