"""Pre-publish consistency checks over loaded topic datasets.

Unlike the normalizers these never stop at the first problem: every issue
is collected so one run reports everything that needs fixing.
"""

from __future__ import annotations

import logging
import zoneinfo
from dataclasses import dataclass, field
from datetime import date

from quiethours.metrics import VALIDATION_ISSUES
from quiethours.normalizers.registry import TopicDefinition, get_topic
from quiethours.seed_data import get_country_name
from quiethours.services.loader import get_loader
from quiethours.slug import build_slug_key, slugify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationIssue:
    topic: str
    country: str
    region: str
    city: str | None
    issue: str


@dataclass
class TopicValidationResult:
    topic: str
    count: int
    source: str
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues


def validate_records(
    topic: TopicDefinition,
    records,
    today: str | None = None,
    known_timezones: set[str] | None = None,
) -> list[ValidationIssue]:
    """Run every consistency check over one topic's records."""
    if today is None:
        today = date.today().isoformat()
    if known_timezones is None:
        known_timezones = zoneinfo.available_timezones()

    issues: list[ValidationIssue] = []
    seen_keys: set[str] = set()
    seen_locations: set[str] = set()

    for record in records:
        def report(message: str, city: str | None = record.city) -> None:
            issues.append(ValidationIssue(topic.name, record.country, record.region, city, message))

        key = build_slug_key(*record.slug_key_parts)
        if key in seen_keys:
            report(f"Duplicate slug combination detected for {key}")
        else:
            seen_keys.add(key)

        if topic.require_city and not record.city:
            report("city is required but missing for this dataset", city=None)

        if record.city:
            expected = slugify(record.city)
            if expected != record.city_slug:
                report(f"city_slug mismatch: expected {expected}")

        expected = slugify(record.region)
        if expected != record.region_slug:
            report(f"region_slug mismatch: expected {expected}")

        expected = slugify(get_country_name(record.country))
        if expected != record.country_slug:
            report(f"country_slug mismatch: expected {expected}")

        # An empty set means the platform has no tz database to check against.
        if known_timezones and record.timezone not in known_timezones:
            report(f'Unknown IANA timezone "{record.timezone}"')

        if record.last_verified > today:
            report("last_verified is in the future")

        location = f"{record.country}__{record.region}__{record.city or '<region>'}".lower()
        if location in seen_locations:
            report("Duplicate location detected (country, region, city combination must be unique)")
        else:
            seen_locations.add(location)

    return issues


def format_issue_table(issues: list[ValidationIssue]) -> str:
    """Aligned plain-text table of issues (country / region / city / issue)."""
    headers = ("country", "region", "city", "issue")
    rows = [(i.country, i.region, i.city or "-", i.issue) for i in issues]
    widths = [max(len(row[col]) for row in [headers, *rows]) for col in range(len(headers))]
    lines = ["  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip() for row in [headers, *rows]]
    lines.insert(1, "  ".join("-" * width for width in widths))
    return "\n".join(lines)


async def validate_topic(topic_id: str) -> TopicValidationResult:
    """Load one topic through the shared loader and validate it."""
    topic = get_topic(topic_id)
    dataset = await get_loader(topic_id).ensure_dataset()
    issues = validate_records(topic, dataset.records)
    VALIDATION_ISSUES.labels(topic=topic_id).set(len(issues))
    if issues:
        logger.warning("%s: %d validation issue(s)", topic.name, len(issues))
    return TopicValidationResult(topic=topic.name, count=len(dataset), source=dataset.source, issues=issues)
