#!/usr/bin/env python3
"""Write <topic>SlugIndex.json for every topic from its loaded dataset.

    python scripts/build_slug_index.py
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from quiethours.config import settings  # noqa: E402
from quiethours.logging_config import configure_logging  # noqa: E402
from quiethours.normalizers.registry import list_topics  # noqa: E402
from quiethours.services.compiler import write_slug_index  # noqa: E402


async def main() -> int:
    configure_logging(json_format=False)
    for topic in list_topics():
        try:
            path = await write_slug_index(topic.topic_id, settings.data_dir)
        except Exception as exc:
            print(f"[{topic.name}] Failed to build slug index: {exc}", file=sys.stderr)
            return 1
        print(f"[{topic.name}] Wrote {path.name}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
