from __future__ import annotations

import json

from quiethours.normalizers.base import build_record, normalize_base_record
from quiethours.normalizers.coerce import (
    LINE_DELIMITERS,
    maybe_string,
    require_string,
    to_optional_number,
    to_string_list,
)
from quiethours.normalizers.registry import register_topic
from quiethours.schemas import QuietHoursRecord


def _template_input(record: dict) -> dict:
    """Nested templates object, a JSON-encoded CSV cell, or nothing."""
    templates = record.get("templates")
    if isinstance(templates, dict):
        return templates
    if isinstance(templates, str) and templates.strip().startswith("{"):
        try:
            decoded = json.loads(templates)
        except json.JSONDecodeError:
            return {}
        return decoded if isinstance(decoded, dict) else {}
    return {}


@register_topic(
    "quiet-hours",
    name="quiet_hours",
    label="Quiet Hours",
    record_model=QuietHoursRecord,
    json_filename="quiet_hours.json",
    csv_filename="quiet_hours.csv",
    slug_index_filename="quietHoursSlugIndex.json",
)
def normalize_quiet_hours_record(record: dict) -> QuietHoursRecord:
    bylaw_title = require_string(record.get("bylaw_title"), "bylaw_title")
    bylaw_url = require_string(record.get("bylaw_url"), "bylaw_url")
    base = normalize_base_record(
        record,
        require_city=True,
        fallback_source_title=bylaw_title,
        fallback_source_url=bylaw_url,
    )
    templates = _template_input(record)

    candidate = {
        **base,
        "default_quiet_hours": require_string(record.get("default_quiet_hours"), "default_quiet_hours"),
        "weekend_quiet_hours": maybe_string(record.get("weekend_quiet_hours")),
        "holiday_quiet_hours": maybe_string(record.get("holiday_quiet_hours")),
        "residential_decibel_limit_day": to_optional_number(record.get("residential_decibel_limit_day")),
        "residential_decibel_limit_night": to_optional_number(record.get("residential_decibel_limit_night")),
        "construction_hours_weekday": require_string(
            record.get("construction_hours_weekday"), "construction_hours_weekday"
        ),
        "construction_hours_weekend": require_string(
            record.get("construction_hours_weekend"), "construction_hours_weekend"
        ),
        "lawn_equipment_hours": require_string(record.get("lawn_equipment_hours"), "lawn_equipment_hours"),
        "party_music_rules": require_string(record.get("party_music_rules"), "party_music_rules"),
        "complaint_channel": base["complaint_channel"] or "Not specified",
        "complaint_url": require_string(base["complaint_url"], "complaint_url"),
        "fine_range": require_string(base["fine_range"], "fine_range"),
        "first_offense_fine": to_optional_number(record.get("first_offense_fine")),
        "bylaw_title": bylaw_title,
        "bylaw_url": bylaw_url,
        "seo_text": maybe_string(record.get("seo_text")),
        "tips": to_string_list(record.get("tips"), LINE_DELIMITERS),
        "templates": {
            "neighbor_message": require_string(
                templates.get("neighbor_message", record.get("neighbor_message")),
                "templates.neighbor_message",
            ),
            "landlord_message": require_string(
                templates.get("landlord_message", record.get("landlord_message")),
                "templates.landlord_message",
            ),
        },
        "lat": to_optional_number(record.get("lat")),
        "lng": to_optional_number(record.get("lng")),
        "hero_image_url": maybe_string(record.get("hero_image_url")),
    }
    return build_record(QuietHoursRecord, candidate, label="quiet hours record")
