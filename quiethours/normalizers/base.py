"""Fields shared by every topic: identity, slugs, timezone, verification, citation."""

from __future__ import annotations

from pydantic import ValidationError

from quiethours.errors import NormalizationError, RecordValidationError
from quiethours.normalizers.coerce import maybe_string, normalize_date, require_string
from quiethours.schemas import BaseTopicRecord
from quiethours.slug import slugify


def normalize_base_record(
    record: dict,
    *,
    require_city: bool = False,
    fallback_source_title: str | None = None,
    fallback_source_url: str | None = None,
) -> dict:
    """Coerce the shared fields of a raw record and check them against BaseTopicRecord.

    Explicit ``*_slug`` values win over slugs derived from display names.
    Returns a plain dict so topic normalizers can extend it before their
    own schema check.
    """
    country = require_string(record.get("country"), "country").upper()
    region = require_string(record.get("region"), "region")
    city = maybe_string(record.get("city"))

    if require_city and not city:
        raise NormalizationError("city is required for this record", field="city")

    country_slug_source = (
        maybe_string(record.get("country_slug"))
        or maybe_string(record.get("country_name"))
        or country
    )
    region_slug_source = maybe_string(record.get("region_slug")) or region
    city_slug_source = (maybe_string(record.get("city_slug")) or city) if city else None

    timezone = require_string(record.get("timezone"), "timezone")
    source_title = maybe_string(record.get("source_title")) or fallback_source_title
    source_url = maybe_string(record.get("source_url")) or fallback_source_url
    if not source_title or not source_url:
        raise NormalizationError("source_title and source_url are required", field="source_url")

    base = {
        "country": country,
        "region": region,
        "city": city,
        "country_slug": slugify(country_slug_source),
        "region_slug": slugify(region_slug_source),
        "city_slug": slugify(city_slug_source) if city_slug_source else None,
        "timezone": timezone,
        "last_verified": normalize_date(record.get("last_verified")),
        "source_title": source_title,
        "source_url": source_url,
        "complaint_channel": maybe_string(record.get("complaint_channel")),
        "complaint_url": maybe_string(record.get("complaint_url")),
        "fine_range": maybe_string(record.get("fine_range")),
        "notes_admin": maybe_string(record.get("notes_admin")),
    }

    try:
        BaseTopicRecord.model_validate(base)
    except ValidationError as exc:
        raise RecordValidationError.from_pydantic(exc, label="base record") from exc
    return base


def build_record(model: type[BaseTopicRecord], candidate: dict, label: str):
    """Validate a fully coerced candidate against its topic model."""
    try:
        return model.model_validate(candidate)
    except ValidationError as exc:
        raise RecordValidationError.from_pydantic(exc, label=label) from exc
