from __future__ import annotations

from quiethours.errors import NormalizationError
from quiethours.normalizers.base import build_record, normalize_base_record
from quiethours.normalizers.coerce import (
    maybe_string,
    require_string,
    to_boolean,
    to_boolean_or_sentinel,
    to_override_list,
    to_string_list,
)
from quiethours.normalizers.registry import register_topic
from quiethours.schemas import FireworksRecord

_JURISDICTION_LEVELS = ("state", "county", "city")


def _jurisdiction_level(value) -> str:
    level = require_string(value, "jurisdiction_level").lower()
    if level not in _JURISDICTION_LEVELS:
        raise NormalizationError(
            "jurisdiction_level must be state, county, or city", field="jurisdiction_level"
        )
    return level


@register_topic(
    "fireworks",
    name="fireworks",
    label="Fireworks",
    record_model=FireworksRecord,
    json_filename="fireworks.json",
    csv_filename="fireworks.csv",
    slug_index_filename="fireworksSlugIndex.json",
    path_prefix="fireworks",
    require_city=False,
)
def normalize_fireworks_record(record: dict) -> FireworksRecord:
    """Normalize a fireworks rule; only city-level records carry a city."""
    jurisdiction_level = _jurisdiction_level(record.get("jurisdiction_level"))
    base = normalize_base_record(record, require_city=jurisdiction_level == "city")

    prohibited_types = to_string_list(record.get("prohibited_types"))
    if not prohibited_types:
        raise NormalizationError(
            "prohibited_types must include at least one entry", field="prohibited_types"
        )

    candidate = {
        **base,
        "jurisdiction_level": jurisdiction_level,
        "allowed_consumer_fireworks": to_boolean_or_sentinel(
            record.get("allowed_consumer_fireworks"), "allowed_consumer_fireworks", "restricted"
        ),
        "sale_periods": require_string(record.get("sale_periods"), "sale_periods"),
        "use_hours": require_string(record.get("use_hours"), "use_hours"),
        "permit_required": to_boolean(record.get("permit_required"), "permit_required"),
        "age_restrictions": require_string(record.get("age_restrictions"), "age_restrictions"),
        "prohibited_types": prohibited_types,
        "enforcement_notes": require_string(record.get("enforcement_notes"), "enforcement_notes"),
        "county_overrides": to_override_list(record.get("county_overrides"), "county"),
        "city_overrides": to_override_list(record.get("city_overrides"), "city"),
        "notes_public": maybe_string(record.get("notes_public")),
    }
    return build_record(FireworksRecord, candidate, label="fireworks record")
