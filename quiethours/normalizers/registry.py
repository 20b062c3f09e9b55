from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from quiethours.errors import UnknownTopicError
from quiethours.schemas import BaseTopicRecord


@dataclass(frozen=True)
class TopicDefinition:
    topic_id: str
    name: str
    label: str
    json_filename: str
    csv_filename: str
    slug_index_filename: str
    record_model: type[BaseTopicRecord]
    normalize: Callable[[dict], BaseTopicRecord]
    path_prefix: str = ""
    require_city: bool = True

    def path_for(self, country_slug: str, region_slug: str, city_slug: str | None = None) -> str:
        parts = [self.path_prefix, country_slug, region_slug]
        if city_slug:
            parts.append(city_slug)
        return "/" + "/".join(part.strip("/") for part in parts if part)


TOPIC_REGISTRY: dict[str, TopicDefinition] = {}


def register_topic(
    topic_id: str,
    *,
    name: str,
    label: str,
    record_model: type[BaseTopicRecord],
    json_filename: str,
    csv_filename: str,
    slug_index_filename: str,
    path_prefix: str = "",
    require_city: bool = True,
):
    """Decorator to register a topic normalizer and its dataset files."""
    def decorator(fn):
        TOPIC_REGISTRY[topic_id] = TopicDefinition(
            topic_id=topic_id,
            name=name,
            label=label,
            json_filename=json_filename,
            csv_filename=csv_filename,
            slug_index_filename=slug_index_filename,
            record_model=record_model,
            normalize=fn,
            path_prefix=path_prefix,
            require_city=require_city,
        )
        return fn
    return decorator


def get_topic(topic_id: str) -> TopicDefinition:
    """Return the registered topic, raising UnknownTopicError otherwise."""
    try:
        return TOPIC_REGISTRY[topic_id]
    except KeyError:
        raise UnknownTopicError(topic_id) from None


def list_topics() -> list[TopicDefinition]:
    """All registered topics, in registration order."""
    return list(TOPIC_REGISTRY.values())
