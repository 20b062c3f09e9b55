"""Cross-topic views: the client search index and per-location topic navigation."""

from __future__ import annotations

import asyncio

from quiethours.normalizers.registry import get_topic, list_topics
from quiethours.schemas import TopicNavEntry, TopicSearchEntry
from quiethours.services.queries import get_dataset, get_record, get_regions_by_country


def _label(record) -> str:
    return f"{record.city}, {record.region}" if record.city else record.region


async def get_topic_search_index() -> list[TopicSearchEntry]:
    """Flatten every topic's records into one list for fuzzy matching."""
    topics = list_topics()
    datasets = await asyncio.gather(*[get_dataset(topic.topic_id) for topic in topics])

    entries: list[TopicSearchEntry] = []
    for topic, dataset in zip(topics, datasets):
        for record in dataset.records:
            entries.append(
                TopicSearchEntry(
                    topic=topic.topic_id,
                    country=record.country,
                    region=record.region,
                    city=record.city,
                    path=topic.path_for(record.country_slug, record.region_slug, record.city_slug),
                    last_verified=record.last_verified,
                    label=_label(record),
                    level="city" if record.city else "region",
                    jurisdiction_level=getattr(record, "jurisdiction_level", None),
                )
            )
    return entries


def _nav_entry(topic_id: str, record_or_date, level: str, country_slug: str,
               region_slug: str, city_slug: str | None = None) -> TopicNavEntry:
    topic = get_topic(topic_id)
    last_verified = getattr(record_or_date, "last_verified", record_or_date)
    return TopicNavEntry(
        topic=topic_id,
        label=topic.label,
        href=topic.path_for(country_slug, region_slug, city_slug),
        level=level,
        last_verified=last_verified,
    )


async def get_topic_nav_entries(
    country_slug: str,
    region_slug: str,
    city_slug: str | None = None,
) -> list[TopicNavEntry]:
    """Which topics have content for a location.

    For a city, each topic with that city links to its city page; fireworks
    falls back to the region-level rule. For a region, quiet hours comes
    first (when the region has cities) followed by the fireworks region page.
    """
    entries: list[TopicNavEntry] = []

    if city_slug:
        quiet, parking, bulk, fireworks_city = await asyncio.gather(
            get_record("quiet-hours", country_slug, region_slug, city_slug),
            get_record("parking-rules", country_slug, region_slug, city_slug),
            get_record("bulk-trash", country_slug, region_slug, city_slug),
            get_record("fireworks", country_slug, region_slug, city_slug),
        )
        for topic_id, record in (("quiet-hours", quiet), ("parking-rules", parking), ("bulk-trash", bulk)):
            if record is not None:
                entries.append(_nav_entry(topic_id, record, "city", country_slug, region_slug, city_slug))

        if fireworks_city is not None:
            entries.append(_nav_entry("fireworks", fireworks_city, "city", country_slug, region_slug, city_slug))
        else:
            fireworks_region = await get_record("fireworks", country_slug, region_slug)
            if fireworks_region is not None:
                entries.append(_nav_entry("fireworks", fireworks_region, "region", country_slug, region_slug))
        return entries

    regions = await get_regions_by_country("quiet-hours", country_slug)
    region = next((r for r in regions if r.region_slug == region_slug), None)
    if region is not None:
        entries.append(_nav_entry("quiet-hours", region.last_verified, "region", country_slug, region_slug))

    fireworks_region = await get_record("fireworks", country_slug, region_slug)
    if fireworks_region is not None:
        entries.append(_nav_entry("fireworks", fireworks_region, "region", country_slug, region_slug))
    return entries
