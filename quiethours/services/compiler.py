"""Build-time artifact writers: CSV -> JSON datasets and slug index files."""

from __future__ import annotations

import enum
import json
import logging
from pathlib import Path

from quiethours.normalizers.registry import TopicDefinition, get_topic
from quiethours.services.loader import (
    DatasetLoader,
    build_slug_index,
    normalize_records,
    read_csv_records,
)

logger = logging.getLogger(__name__)

__all__ = ["CompileOutcome", "build_slug_index", "compile_topic", "write_slug_index"]


class CompileOutcome(str, enum.Enum):
    CONVERTED = "converted"
    SKIPPED_NO_CSV = "skipped_no_csv"
    SKIPPED_EXISTS = "skipped_exists"


def _write_json(path: Path, payload) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
        f.write("\n")


def compile_topic(topic: TopicDefinition, data_dir: Path, force: bool = False) -> CompileOutcome:
    """Convert ``<topic>.csv`` into the normalized ``<topic>.json`` artifact.

    Skips when there is no CSV, or when the JSON already exists and
    ``force`` is off. Normalization or validation errors propagate and
    nothing is written.
    """
    data_dir = Path(data_dir)
    csv_path = data_dir / topic.csv_filename
    json_path = data_dir / topic.json_filename

    if not csv_path.exists():
        logger.info("[%s] No CSV source at %s, skipping conversion", topic.name, topic.csv_filename)
        return CompileOutcome.SKIPPED_NO_CSV
    if json_path.exists() and not force:
        logger.info(
            "[%s] %s already exists, set FORCE_CSV_EXPORT=true to overwrite",
            topic.name, topic.json_filename,
        )
        return CompileOutcome.SKIPPED_EXISTS

    records = normalize_records(topic, read_csv_records(csv_path), topic.csv_filename)
    _write_json(json_path, [record.model_dump(exclude_none=True) for record in records])
    logger.info(
        "[%s] Converted %d record(s) from %s to %s",
        topic.name, len(records), topic.csv_filename, topic.json_filename,
    )
    return CompileOutcome.CONVERTED


async def write_slug_index(topic_id: str, data_dir: Path | None = None) -> Path:
    """Load a topic's dataset and write its derived ``<topic>SlugIndex.json``.

    Always derives from the dataset, never from an existing index file.
    """
    topic = get_topic(topic_id)
    loader = DatasetLoader(topic, data_dir)
    dataset = await loader.ensure_dataset()
    index = build_slug_index(dataset.records)
    payload = {key: entry.model_dump(exclude_none=True) for key, entry in index.items()}
    _write_json(loader.slug_index_path, payload)
    logger.info("[%s] Wrote %d slug index entries to %s", topic.name, len(index), topic.slug_index_filename)
    return loader.slug_index_path
