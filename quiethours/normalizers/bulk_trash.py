from __future__ import annotations

from quiethours.errors import NormalizationError
from quiethours.normalizers.base import build_record, normalize_base_record
from quiethours.normalizers.coerce import maybe_string, require_string, to_string_list
from quiethours.normalizers.registry import register_topic
from quiethours.schemas import BulkTrashRecord


@register_topic(
    "bulk-trash",
    name="bulk_trash",
    label="Bulk Trash",
    record_model=BulkTrashRecord,
    json_filename="bulk_trash.json",
    csv_filename="bulk_trash.csv",
    slug_index_filename="bulkTrashSlugIndex.json",
    path_prefix="bulk-trash",
)
def normalize_bulk_trash_record(record: dict) -> BulkTrashRecord:
    base = normalize_base_record(record, require_city=True)
    eligible_items = to_string_list(record.get("eligible_items"))
    not_accepted = to_string_list(record.get("not_accepted_items"))

    if not eligible_items:
        raise NormalizationError("eligible_items must include at least one entry", field="eligible_items")
    if not not_accepted:
        raise NormalizationError(
            "not_accepted_items must include at least one entry", field="not_accepted_items"
        )

    candidate = {
        **base,
        "service_type": require_string(record.get("service_type"), "service_type").lower(),
        "schedule_pattern": require_string(record.get("schedule_pattern"), "schedule_pattern"),
        "request_url": maybe_string(record.get("request_url")),
        "eligible_items": eligible_items,
        "not_accepted_items": not_accepted,
        "limits": require_string(record.get("limits"), "limits"),
        "fees": require_string(record.get("fees"), "fees"),
        "holiday_shifts": require_string(record.get("holiday_shifts"), "holiday_shifts"),
        "illegal_dumping_reporting": require_string(
            record.get("illegal_dumping_reporting"), "illegal_dumping_reporting"
        ),
        "notes_public": maybe_string(record.get("notes_public")),
    }
    return build_record(BulkTrashRecord, candidate, label="bulk trash record")
