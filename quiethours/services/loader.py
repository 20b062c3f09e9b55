"""Lazy, process-lifetime dataset and slug-index loading per topic.

Each topic reads ``<data_dir>/<topic>.json`` when present and falls back to
``<topic>.csv``. Every record goes through the topic normalizer and the
whole list through the dataset schema; any failure aborts the load, so
readers never see a partially valid dataset. Results are cached until
``clear_cache()``.
"""

from __future__ import annotations

import asyncio
import csv
import json
import logging
from dataclasses import dataclass
from pathlib import Path

from quiethours.config import settings
from quiethours.errors import DataSourceNotFoundError, NormalizationError
from quiethours.metrics import DATASET_LOADS_TOTAL, DATASET_RECORDS
from quiethours.normalizers.registry import TopicDefinition, get_topic
from quiethours.schemas import BaseTopicRecord, SlugIndexEntry, validate_dataset
from quiethours.slug import build_slug_key, parse_slug_key

logger = logging.getLogger(__name__)

HERO_MAP_FILENAME = "heroImages.json"


@dataclass(frozen=True)
class LoadedDataset:
    topic: str
    records: tuple[BaseTopicRecord, ...]
    source: str  # "json" | "csv"

    def __len__(self) -> int:
        return len(self.records)


def read_csv_records(path: Path) -> list[dict[str, str]]:
    """Parse a CSV file with a header row; cells trimmed, blank lines skipped."""
    with open(path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames:
            reader.fieldnames = [name.strip() for name in reader.fieldnames]
        rows = []
        for row in reader:
            cleaned = {
                key: (value or "").strip()
                for key, value in row.items()
                if key is not None
            }
            if not any(cleaned.values()):
                continue
            rows.append(cleaned)
    return rows


def read_json_records(path: Path) -> list[dict]:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise NormalizationError(f"{path.name} must contain a JSON array of records")
    return data


def normalize_records(topic: TopicDefinition, raw_records: list[dict], origin: str) -> list:
    """Run every raw record through the topic normalizer, failing on the first bad one."""
    normalized = []
    for position, raw in enumerate(raw_records, start=1):
        if not isinstance(raw, dict):
            raise NormalizationError(f"[{topic.name}] {origin} record {position} is not an object")
        try:
            normalized.append(topic.normalize(raw))
        except NormalizationError as exc:
            exc.add_note(f"[{topic.name}] while normalizing {origin} record {position}")
            raise
    return validate_dataset(topic.record_model, normalized, label=f"{topic.name} dataset")


class DatasetLoader:
    """Load, normalize, validate and cache one topic's dataset and slug index."""

    def __init__(self, topic: TopicDefinition, data_dir: Path | None = None):
        self.topic = topic
        self.data_dir = Path(data_dir) if data_dir is not None else Path(settings.data_dir)
        self._dataset: LoadedDataset | None = None
        self._slug_index: dict[str, SlugIndexEntry] | None = None
        self._lock: asyncio.Lock | None = None

    @property
    def json_path(self) -> Path:
        return self.data_dir / self.topic.json_filename

    @property
    def csv_path(self) -> Path:
        return self.data_dir / self.topic.csv_filename

    @property
    def slug_index_path(self) -> Path:
        return self.data_dir / self.topic.slug_index_filename

    def _get_lock(self) -> asyncio.Lock:
        """Lazy-init the asyncio lock (must be created within an event loop)."""
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    def _load_dataset(self) -> LoadedDataset:
        if self.json_path.exists():
            raw = read_json_records(self.json_path)
            records = normalize_records(self.topic, raw, self.topic.json_filename)
            source = "json"
        elif self.csv_path.exists():
            raw = read_csv_records(self.csv_path)
            records = normalize_records(self.topic, raw, self.topic.csv_filename)
            source = "csv"
        else:
            raise DataSourceNotFoundError(
                f"No data source found for {self.topic.label.lower()}: expected "
                f"{self.topic.json_filename} or {self.topic.csv_filename} in {self.data_dir}"
            )
        return LoadedDataset(topic=self.topic.topic_id, records=tuple(records), source=source)

    async def ensure_dataset(self) -> LoadedDataset:
        """Return the cached dataset, loading it once on first use.

        Concurrent first callers wait on the same lock, so the files are
        read and validated only once.
        """
        if self._dataset is not None:
            return self._dataset
        async with self._get_lock():
            if self._dataset is None:
                try:
                    dataset = await asyncio.to_thread(self._load_dataset)
                except Exception:
                    DATASET_LOADS_TOTAL.labels(topic=self.topic.topic_id, status="failed").inc()
                    logger.exception("Failed to load %s dataset", self.topic.name)
                    raise
                DATASET_LOADS_TOTAL.labels(topic=self.topic.topic_id, status="loaded").inc()
                DATASET_RECORDS.labels(topic=self.topic.topic_id, source=dataset.source).set(len(dataset))
                logger.info(
                    "Loaded %d %s record(s) from %s source",
                    len(dataset), self.topic.name, dataset.source.upper(),
                )
                self._dataset = dataset
        return self._dataset

    def _read_slug_index(self) -> dict[str, SlugIndexEntry]:
        with open(self.slug_index_path, encoding="utf-8") as f:
            data = json.load(f)
        index = {}
        for key, raw in data.items():
            entry = SlugIndexEntry.model_validate(raw)
            parsed = parse_slug_key(key)
            if parsed != (entry.country_slug, entry.region_slug, entry.city_slug or None):
                raise NormalizationError(
                    f"{self.slug_index_path.name}: key {key!r} does not match its entry slugs"
                )
            index[key] = entry
        return index

    async def ensure_slug_index(self) -> dict[str, SlugIndexEntry]:
        """Precomputed ``<topic>SlugIndex.json`` when present, else derived from the dataset."""
        if self._slug_index is not None:
            return self._slug_index
        if self.slug_index_path.exists():
            async with self._get_lock():
                if self._slug_index is None:
                    self._slug_index = await asyncio.to_thread(self._read_slug_index)
                    logger.info(
                        "Read %d %s slug index entries from %s",
                        len(self._slug_index), self.topic.name, self.slug_index_path.name,
                    )
            return self._slug_index

        dataset = await self.ensure_dataset()
        if self._slug_index is None:
            self._slug_index = build_slug_index(dataset.records)
            logger.info("Derived %d %s slug index entries", len(self._slug_index), self.topic.name)
        return self._slug_index


def build_slug_index(records) -> dict[str, SlugIndexEntry]:
    """Map ``country__region__city`` keys to lightweight location entries."""
    index: dict[str, SlugIndexEntry] = {}
    for record in records:
        key = build_slug_key(*record.slug_key_parts)
        index[key] = SlugIndexEntry.from_record(record)
    return index


_LOADERS: dict[str, DatasetLoader] = {}
_HERO_MAPS: dict[Path, dict[str, str]] = {}


def get_loader(topic_id: str) -> DatasetLoader:
    """Process-wide loader for a topic (raises UnknownTopicError for unknown ids)."""
    loader = _LOADERS.get(topic_id)
    if loader is None:
        loader = DatasetLoader(get_topic(topic_id))
        _LOADERS[topic_id] = loader
    return loader


def clear_cache() -> None:
    """Drop every cached loader and hero map. Useful for tests and forced reloads."""
    _LOADERS.clear()
    _HERO_MAPS.clear()


def read_hero_map(path: Path) -> dict[str, str]:
    """Slug key to public image path. A missing or unreadable map is empty."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable hero image map %s: %s", path.name, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring hero image map %s: expected a JSON object", path.name)
        return {}
    return {key: value for key, value in data.items() if isinstance(value, str) and value}


def get_hero_map(data_dir: Path | None = None) -> dict[str, str]:
    """Process-wide ``heroImages.json`` for a data directory, read once."""
    path = Path(data_dir if data_dir is not None else settings.data_dir) / HERO_MAP_FILENAME
    hero_map = _HERO_MAPS.get(path)
    if hero_map is None:
        hero_map = read_hero_map(path)
        _HERO_MAPS[path] = hero_map
    return hero_map
