#!/usr/bin/env python3
"""Check every topic dataset for consistency issues before publishing.

Checks (per record):
  A) Slug key collisions
  B) city_slug / region_slug / country_slug must equal the re-slugified display name
  C) Timezone must be a known IANA zone
  D) last_verified must not be in the future
  E) (country, region, city) must be unique within the topic

Every topic is checked even when an earlier one fails. Exits 1 when any
topic has issues or cannot be loaded.

    python scripts/validate_data.py
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from quiethours.logging_config import configure_logging  # noqa: E402
from quiethours.normalizers.registry import list_topics  # noqa: E402
from quiethours.services.validator import format_issue_table, validate_topic  # noqa: E402


async def main() -> int:
    configure_logging(json_format=False)
    failed = False

    for topic in list_topics():
        prefix = f"[{topic.name}]"
        try:
            result = await validate_topic(topic.topic_id)
        except Exception as exc:
            print(f"{prefix} Failed to load dataset: {exc}", file=sys.stderr)
            failed = True
            continue

        print(f"{prefix} Validated {result.count} record(s) from {result.source.upper()} source.")
        if result.issues:
            failed = True
            print(f"{prefix} Found {len(result.issues)} validation issue(s).", file=sys.stderr)
            print(format_issue_table(result.issues), file=sys.stderr)
        else:
            print(f"{prefix} All records passed validation.")

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
