from __future__ import annotations

from quiethours.normalizers.base import build_record, normalize_base_record
from quiethours.normalizers.coerce import (
    maybe_string,
    require_string,
    to_boolean,
    to_boolean_or_sentinel,
)
from quiethours.normalizers.registry import register_topic
from quiethours.schemas import ParkingRulesRecord


@register_topic(
    "parking-rules",
    name="parking_rules",
    label="Parking",
    record_model=ParkingRulesRecord,
    json_filename="parking_rules.json",
    csv_filename="parking_rules.csv",
    slug_index_filename="parkingSlugIndex.json",
    path_prefix="parking-rules",
)
def normalize_parking_record(record: dict) -> ParkingRulesRecord:
    base = normalize_base_record(record, require_city=True)
    candidate = {
        **base,
        "overnight_parking_allowed": to_boolean_or_sentinel(
            record.get("overnight_parking_allowed"), "overnight_parking_allowed", "varies"
        ),
        "overnight_hours": require_string(record.get("overnight_hours"), "overnight_hours"),
        "permit_required": to_boolean(record.get("permit_required"), "permit_required"),
        "permit_url": maybe_string(record.get("permit_url")),
        "winter_ban": to_boolean(record.get("winter_ban"), "winter_ban"),
        "winter_ban_months": require_string(record.get("winter_ban_months"), "winter_ban_months"),
        "winter_ban_hours": require_string(record.get("winter_ban_hours"), "winter_ban_hours"),
        "snow_emergency_rules": require_string(record.get("snow_emergency_rules"), "snow_emergency_rules"),
        "towing_enforced": to_boolean(record.get("towing_enforced"), "towing_enforced"),
        "tow_zones_map_url": maybe_string(record.get("tow_zones_map_url")),
        "ticket_amounts": require_string(record.get("ticket_amounts"), "ticket_amounts"),
        "notes_public": maybe_string(record.get("notes_public")),
    }
    return build_record(ParkingRulesRecord, candidate, label="parking record")
