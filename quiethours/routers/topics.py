from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from quiethours.errors import UnknownTopicError
from quiethours.normalizers.registry import TopicDefinition, get_topic, list_topics
from quiethours.schemas import (
    CitySummary,
    CountrySummary,
    DatasetOut,
    LocationParams,
    SlugIndexEntry,
    TopicNavEntry,
    TopicSearchEntry,
)
from quiethours.services import queries, search

router = APIRouter(prefix="/api/topics", tags=["topics"])


def get_topic_definition(topic_id: str) -> TopicDefinition:
    try:
        return get_topic(topic_id)
    except UnknownTopicError:
        raise HTTPException(404, f"Unknown topic: {topic_id}") from None


@router.get("")
async def list_topic_definitions():
    return [
        {
            "topic_id": topic.topic_id,
            "name": topic.name,
            "label": topic.label,
            "href": "/" + topic.path_prefix if topic.path_prefix else "/",
        }
        for topic in list_topics()
    ]


@router.get("/search-index", response_model=list[TopicSearchEntry])
async def search_index():
    return await search.get_topic_search_index()


@router.get("/nav/{country_slug}/{region_slug}", response_model=list[TopicNavEntry])
async def nav_entries(country_slug: str, region_slug: str, city_slug: str | None = None):
    return await search.get_topic_nav_entries(country_slug, region_slug, city_slug)


@router.get("/hero/{country_slug}/{region_slug}/{city_slug}")
async def hero_image(country_slug: str, region_slug: str, city_slug: str):
    path = await queries.get_hero_image_path(country_slug, region_slug, city_slug)
    if path is None:
        raise HTTPException(404, "No hero image for this location")
    return {"hero_image": path}


@router.get("/{topic_id}/dataset", response_model=DatasetOut)
async def dataset(topic: TopicDefinition = Depends(get_topic_definition)):
    loaded = await queries.get_dataset(topic.topic_id)
    return DatasetOut(
        topic=topic.topic_id,
        source=loaded.source,
        count=len(loaded),
        records=[record.model_dump(exclude_none=True) for record in loaded.records],
    )


@router.get("/{topic_id}/params", response_model=list[LocationParams])
async def params(topic: TopicDefinition = Depends(get_topic_definition)):
    return await queries.list_params(topic.topic_id)


@router.get("/{topic_id}/slug-index", response_model=dict[str, SlugIndexEntry])
async def slug_index(topic: TopicDefinition = Depends(get_topic_definition)):
    return await queries.get_slug_index(topic.topic_id)


@router.get("/{topic_id}/countries", response_model=list[CountrySummary])
async def countries(topic: TopicDefinition = Depends(get_topic_definition)):
    return await queries.get_countries(topic.topic_id)


@router.get("/{topic_id}/countries/{country_slug}/regions")
async def regions(country_slug: str, topic: TopicDefinition = Depends(get_topic_definition)):
    if topic.topic_id == "fireworks":
        return await queries.get_fireworks_regions_by_country(country_slug)
    return await queries.get_regions_by_country(topic.topic_id, country_slug)


@router.get(
    "/{topic_id}/countries/{country_slug}/regions/{region_slug}/cities",
    response_model=list[CitySummary],
)
async def cities(
    country_slug: str, region_slug: str, topic: TopicDefinition = Depends(get_topic_definition)
):
    return await queries.get_cities_by_region(topic.topic_id, country_slug, region_slug)


async def _record_or_404(topic: TopicDefinition, country_slug, region_slug, city_slug=None):
    record = await queries.get_record(topic.topic_id, country_slug, region_slug, city_slug)
    if record is None:
        raise HTTPException(404, f"No {topic.label.lower()} record for this location")
    return {
        "path": queries.get_canonical_path(topic.topic_id, record),
        "record": record.model_dump(exclude_none=True),
    }


@router.get("/{topic_id}/records/{country_slug}/{region_slug}")
async def region_record(
    country_slug: str, region_slug: str, topic: TopicDefinition = Depends(get_topic_definition)
):
    if topic.require_city:
        raise HTTPException(404, f"{topic.label} records are city-level only")
    return await _record_or_404(topic, country_slug, region_slug)


@router.get("/{topic_id}/records/{country_slug}/{region_slug}/{city_slug}")
async def city_record(
    country_slug: str,
    region_slug: str,
    city_slug: str,
    topic: TopicDefinition = Depends(get_topic_definition),
):
    return await _record_or_404(topic, country_slug, region_slug, city_slug)
