"""Read API over the cached topic datasets.

Pure reads: nothing here touches the filesystem after the loader has
cached a topic. Lookups are linear scans; datasets hold tens to low
hundreds of records.
"""

from __future__ import annotations

import logging

from quiethours.normalizers.registry import get_topic
from quiethours.schemas import (
    BaseTopicRecord,
    CitySummary,
    CountrySummary,
    FireworksRegionSummary,
    LocationParams,
    RegionSummary,
    SlugIndexEntry,
)
from quiethours.seed_data import get_country_name
from quiethours.services.loader import LoadedDataset, get_hero_map, get_loader
from quiethours.slug import build_slug_key, collation_key

logger = logging.getLogger(__name__)


async def get_dataset(topic_id: str = "quiet-hours") -> LoadedDataset:
    return await get_loader(topic_id).ensure_dataset()


async def get_slug_index(topic_id: str = "quiet-hours") -> dict[str, SlugIndexEntry]:
    return await get_loader(topic_id).ensure_slug_index()


async def get_record(
    topic_id: str,
    country_slug: str,
    region_slug: str,
    city_slug: str | None = None,
) -> BaseTopicRecord | None:
    """Find one record by slugs.

    ``city_slug=None`` matches the region-level record (no city), it is not
    a wildcard. Returns None when nothing matches.
    """
    dataset = await get_dataset(topic_id)
    for record in dataset.records:
        if (
            record.country_slug == country_slug
            and record.region_slug == region_slug
            and record.city_slug == (city_slug or None)
        ):
            return record
    return None


async def get_hero_image_path(country_slug: str, region_slug: str, city_slug: str | None = None) -> str | None:
    """Hero image for a quiet-hours location.

    The downloaded copy listed in ``heroImages.json`` wins; otherwise the
    record's own ``hero_image_url``. None when neither exists or the
    quiet-hours dataset cannot be loaded.
    """
    local = get_hero_map().get(build_slug_key(country_slug, region_slug, city_slug))
    if local:
        return local
    try:
        record = await get_record("quiet-hours", country_slug, region_slug, city_slug)
    except (OSError, ValueError) as exc:
        logger.warning("No hero image for %s/%s: %s", country_slug, region_slug, exc)
        return None
    return record.hero_image_url if record is not None else None


async def list_params(topic_id: str) -> list[LocationParams]:
    """Every (country, region, city?) path of a topic, in dataset order."""
    dataset = await get_dataset(topic_id)
    return [
        LocationParams(
            country_slug=record.country_slug,
            region_slug=record.region_slug,
            city_slug=record.city_slug,
            jurisdiction_level=getattr(record, "jurisdiction_level", None),
        )
        for record in dataset.records
    ]


def summarize_countries(records) -> list[CountrySummary]:
    grouped: dict[str, CountrySummary] = {}
    for record in records:
        existing = grouped.get(record.country_slug)
        if existing is None:
            grouped[record.country_slug] = CountrySummary(
                country=record.country,
                country_name=get_country_name(record.country),
                country_slug=record.country_slug,
                count=1,
                last_verified=record.last_verified,
            )
            continue
        existing.count += 1
        # YYYY-MM-DD compares chronologically as a string
        if record.last_verified > existing.last_verified:
            existing.last_verified = record.last_verified
    return sorted(grouped.values(), key=lambda s: collation_key(s.country_name))


def summarize_regions(records, country_slug: str) -> list[RegionSummary]:
    grouped: dict[str, RegionSummary] = {}
    for record in records:
        if record.country_slug != country_slug:
            continue
        existing = grouped.get(record.region_slug)
        if existing is None:
            grouped[record.region_slug] = RegionSummary(
                region=record.region,
                region_slug=record.region_slug,
                count=1,
                last_verified=record.last_verified,
            )
            continue
        existing.count += 1
        if record.last_verified > existing.last_verified:
            existing.last_verified = record.last_verified
    return sorted(grouped.values(), key=lambda s: collation_key(s.region))


def summarize_cities(records, country_slug: str, region_slug: str) -> list[CitySummary]:
    cities = [
        CitySummary(city=record.city, city_slug=record.city_slug, last_verified=record.last_verified)
        for record in records
        if record.country_slug == country_slug
        and record.region_slug == region_slug
        and record.city
        and record.city_slug
    ]
    return sorted(cities, key=lambda s: collation_key(s.city))


async def get_countries(topic_id: str = "quiet-hours") -> list[CountrySummary]:
    dataset = await get_dataset(topic_id)
    return summarize_countries(dataset.records)


async def get_regions_by_country(topic_id: str, country_slug: str) -> list[RegionSummary]:
    dataset = await get_dataset(topic_id)
    return summarize_regions(dataset.records, country_slug)


async def get_cities_by_region(topic_id: str, country_slug: str, region_slug: str) -> list[CitySummary]:
    dataset = await get_dataset(topic_id)
    records = dataset.records
    if topic_id == "fireworks":
        records = [r for r in records if r.jurisdiction_level == "city"]
    return summarize_cities(records, country_slug, region_slug)


async def get_fireworks_regions_by_country(country_slug: str) -> list[FireworksRegionSummary]:
    """Region summaries plus whether a state-level rule exists and how many city overrides."""
    dataset = await get_dataset("fireworks")
    summaries = summarize_regions(dataset.records, country_slug)

    city_counts: dict[str, int] = {}
    state_presence: set[str] = set()
    for record in dataset.records:
        if record.country_slug != country_slug:
            continue
        if record.jurisdiction_level == "state" or not record.city_slug:
            state_presence.add(record.region_slug)
        if record.jurisdiction_level == "city" and record.city_slug:
            city_counts[record.region_slug] = city_counts.get(record.region_slug, 0) + 1

    return [
        FireworksRegionSummary(
            **summary.model_dump(),
            has_state_rule=summary.region_slug in state_presence,
            city_count=city_counts.get(summary.region_slug, 0),
        )
        for summary in summaries
    ]


def get_canonical_path(topic_id: str, entry: BaseTopicRecord | SlugIndexEntry) -> str:
    """Site path of a record or slug index entry.

    Quiet-hours pages live at the site root; other topics under their id.
    """
    topic = get_topic(topic_id)
    if topic.require_city and not entry.city_slug:
        raise ValueError(f"city_slug is required to build a canonical {topic.name} path")
    return topic.path_for(entry.country_slug, entry.region_slug, entry.city_slug)
