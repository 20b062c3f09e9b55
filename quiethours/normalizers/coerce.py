"""Value coercion for loosely-typed CSV/JSON input.

CSV cells are always strings; hand-authored JSON may already carry
booleans, numbers, lists and nested objects. Every helper accepts both.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timezone

from quiethours.errors import NormalizationError

TRUE_VALUES = {"true", "1", "yes", "y", "on"}
FALSE_VALUES = {"false", "0", "no", "n", "off"}

# Delimiters for list-valued cells
ITEM_DELIMITERS = re.compile(r"[\n|,]")
LINE_DELIMITERS = re.compile(r"[\n|]")

_NUMBER_NOISE_RE = re.compile(r"[,_\s]")

# Tried in order after ISO-8601
_DATE_FORMATS = [
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y",
    "%B %d, %Y",
]


def maybe_string(value) -> str | None:
    """Trimmed string, or None for None / empty-after-trim."""
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def require_string(value, field: str) -> str:
    s = maybe_string(value)
    if s is None:
        raise NormalizationError(f"{field} is required", field=field)
    return s


def to_optional_number(value) -> float | int | None:
    """Finite number, or None when empty or not numeric.

    Strings may carry thousands separators, underscores or spaces: "1,000" -> 1000.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    cleaned = _NUMBER_NOISE_RE.sub("", str(value))
    if not cleaned:
        return None
    try:
        number = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() and "." not in cleaned else number


def to_boolean(value, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        token = value.strip().lower()
        if token in TRUE_VALUES:
            return True
        if token in FALSE_VALUES:
            return False
    raise NormalizationError(f"Unable to coerce {field} into a boolean (got {value!r})", field=field)


def to_boolean_or_sentinel(value, field: str, sentinel: str) -> bool | str:
    """Like to_boolean, but a case-insensitive ``sentinel`` token ("varies", "restricted") passes through."""
    if isinstance(value, str) and value.strip().lower() == sentinel:
        return sentinel
    return to_boolean(value, field)


def to_string_list(value, delimiters: re.Pattern = ITEM_DELIMITERS) -> list[str]:
    """List of trimmed, non-empty strings from a list or a delimited string."""
    if isinstance(value, (list, tuple)):
        items = (maybe_string(item) for item in value)
        return [item for item in items if item]
    if isinstance(value, str):
        return [segment.strip() for segment in delimiters.split(value) if segment.strip()]
    return []


def _override_from_mapping(entry: dict, kind: str) -> dict | None:
    name = maybe_string(entry.get(kind)) or maybe_string(entry.get("name"))
    rules = maybe_string(entry.get("rules"))
    if not name or not rules:
        return None
    return {kind: name, "rules": rules}


def _override_from_segment(segment: str, kind: str) -> dict | None:
    # Only the first colon separates the name; the rule text may contain more.
    name, sep, rules = segment.partition(":")
    name, rules = name.strip(), rules.strip()
    if not sep or not name or not rules:
        return None
    return {kind: name, "rules": rules}


def to_override_list(value, kind: str) -> list[dict] | None:
    """Parse county/city overrides.

    Accepts a list of {kind|name, rules} mappings or the CSV mini-grammar
    "Name: rule text|Other Name: more rules". Malformed entries are dropped;
    an empty result is None, never [].
    """
    if not value:
        return None
    entries: list[dict | None]
    if isinstance(value, (list, tuple)):
        entries = [_override_from_mapping(item, kind) if isinstance(item, dict) else None for item in value]
    elif isinstance(value, str):
        entries = [_override_from_segment(seg.strip(), kind) for seg in value.split("|") if seg.strip()]
    else:
        return None
    result = [entry for entry in entries if entry]
    return result or None


def _calendar_date(value: datetime) -> str:
    # Offset-aware timestamps are dated in UTC.
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date().isoformat()


def normalize_date(value, field: str = "last_verified") -> str:
    """Parse a date-ish value and return it as zero-padded YYYY-MM-DD."""
    if isinstance(value, datetime):
        return _calendar_date(value)
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str):
        raise NormalizationError(f"{field} must be a string or date", field=field)
    text = value.strip()
    if not text:
        raise NormalizationError(f"{field} is required", field=field)

    try:
        return _calendar_date(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date().isoformat()
        except ValueError:
            continue
    raise NormalizationError(f"Invalid {field} date value: {value!r}", field=field)
