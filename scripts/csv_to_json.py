#!/usr/bin/env python3
"""Compile each topic's CSV source into its normalized JSON artifact.

A topic is skipped when it has no CSV, or when its JSON already exists and
FORCE_CSV_EXPORT is not true. Any normalization or schema failure aborts
with exit code 1.

    FORCE_CSV_EXPORT=true python scripts/csv_to_json.py
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from quiethours.config import settings  # noqa: E402
from quiethours.logging_config import configure_logging  # noqa: E402
from quiethours.normalizers.registry import list_topics  # noqa: E402
from quiethours.services.compiler import CompileOutcome, compile_topic  # noqa: E402


async def main() -> int:
    configure_logging(json_format=False)
    converted = []

    for topic in list_topics():
        try:
            outcome = await asyncio.to_thread(
                compile_topic, topic, settings.data_dir, settings.force_csv_export
            )
        except Exception as exc:
            print(f"[{topic.name}] Conversion failed: {exc}", file=sys.stderr)
            return 1
        if outcome is CompileOutcome.CONVERTED:
            converted.append(topic.name)

    if not converted:
        print("No CSV datasets converted. Nothing to do.")
    else:
        print(f"Converted: {', '.join(converted)}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
