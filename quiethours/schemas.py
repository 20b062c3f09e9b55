from __future__ import annotations

from datetime import date
from typing import Annotated, Literal

from pydantic import (
    AfterValidator,
    AnyUrl,
    BaseModel,
    Field,
    StringConstraints,
    TypeAdapter,
    ValidationError,
    model_validator,
)
from pydantic_core import PydanticCustomError

from quiethours.errors import DatasetValidationError

TopicId = Literal["quiet-hours", "parking-rules", "bulk-trash", "fireworks"]
DataSource = Literal["json", "csv"]
JurisdictionLevel = Literal["state", "county", "city"]
ServiceType = Literal["curbside", "appointment", "dropoff", "mixed"]

_URL_ADAPTER = TypeAdapter(AnyUrl)


def _check_url(value: str) -> str:
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError:
        raise ValueError("must be a valid URL") from None
    return value


def _check_calendar_date(value: str) -> str:
    # Zero-padded YYYY-MM-DD sorts chronologically as a plain string.
    try:
        date.fromisoformat(value)
    except ValueError:
        raise ValueError("last_verified is not a real calendar date") from None
    return value


NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
IsoCountryCode = Annotated[str, StringConstraints(strip_whitespace=True, pattern=r"^[A-Z]{2}$")]
Slug = NonEmptyStr
IanaTimezone = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, pattern=r"^[A-Za-z0-9_/\-+]+$")
]
IsoDate = Annotated[
    str,
    StringConstraints(strip_whitespace=True, pattern=r"^\d{4}-\d{2}-\d{2}$"),
    AfterValidator(_check_calendar_date),
]
Url = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1), AfterValidator(_check_url)]
NonNegative = Annotated[float, Field(ge=0)]

_RECORD_CONFIG = {"frozen": True, "extra": "ignore"}


# --- Base records ---
class BaseTopicRecord(BaseModel):
    """Identity, timezone, verification stamp and citation shared by every topic."""

    country: IsoCountryCode
    region: NonEmptyStr
    city: NonEmptyStr | None = None
    country_slug: Slug
    region_slug: Slug
    city_slug: Slug | None = None
    timezone: IanaTimezone
    last_verified: IsoDate
    source_title: NonEmptyStr
    source_url: Url
    complaint_channel: NonEmptyStr | None = None
    complaint_url: Url | None = None
    fine_range: NonEmptyStr | None = None
    notes_admin: str | None = None

    model_config = _RECORD_CONFIG

    def invariant_problems(self) -> list[str]:
        problems = []
        if self.city and not self.city_slug:
            problems.append("city_slug is required when city is present")
        if not self.city and self.city_slug:
            problems.append("city_slug should be omitted when city is not provided")
        return problems

    @model_validator(mode="after")
    def _check_invariants(self):
        problems = self.invariant_problems()
        if problems:
            raise PydanticCustomError("record_invariant", "; ".join(problems))
        return self

    @property
    def slug_key_parts(self) -> tuple[str, str, str | None]:
        return self.country_slug, self.region_slug, self.city_slug


class CityTopicRecord(BaseTopicRecord):
    city: NonEmptyStr
    city_slug: Slug


# --- Quiet hours ---
class MessageTemplates(BaseModel):
    neighbor_message: NonEmptyStr
    landlord_message: NonEmptyStr

    model_config = _RECORD_CONFIG


class QuietHoursRecord(CityTopicRecord):
    default_quiet_hours: NonEmptyStr
    weekend_quiet_hours: NonEmptyStr | None = None
    holiday_quiet_hours: NonEmptyStr | None = None
    residential_decibel_limit_day: NonNegative | None = None
    residential_decibel_limit_night: NonNegative | None = None
    construction_hours_weekday: NonEmptyStr
    construction_hours_weekend: NonEmptyStr
    lawn_equipment_hours: NonEmptyStr
    party_music_rules: NonEmptyStr
    complaint_channel: NonEmptyStr
    complaint_url: Url
    fine_range: NonEmptyStr
    first_offense_fine: NonNegative | None = None
    bylaw_title: NonEmptyStr
    bylaw_url: Url
    seo_text: NonEmptyStr | None = None  # rendered under the hero image
    tips: list[NonEmptyStr] = Field(min_length=1)
    templates: MessageTemplates
    lat: float | None = None
    lng: float | None = None
    hero_image_url: Url | None = None


# --- Parking ---
class ParkingRulesRecord(CityTopicRecord):
    overnight_parking_allowed: bool | Literal["varies"]
    overnight_hours: NonEmptyStr
    permit_required: bool
    permit_url: Url | None = None
    winter_ban: bool
    winter_ban_months: NonEmptyStr
    winter_ban_hours: NonEmptyStr
    snow_emergency_rules: NonEmptyStr
    towing_enforced: bool
    tow_zones_map_url: Url | None = None
    ticket_amounts: NonEmptyStr
    notes_public: str | None = None


# --- Bulk trash ---
class BulkTrashRecord(CityTopicRecord):
    service_type: ServiceType
    schedule_pattern: NonEmptyStr
    request_url: Url | None = None
    eligible_items: list[NonEmptyStr] = Field(min_length=1)
    not_accepted_items: list[NonEmptyStr] = Field(min_length=1)
    limits: NonEmptyStr
    fees: NonEmptyStr
    holiday_shifts: NonEmptyStr
    illegal_dumping_reporting: NonEmptyStr  # free text or a URL
    notes_public: str | None = None


# --- Fireworks ---
class CountyOverride(BaseModel):
    county: NonEmptyStr
    rules: NonEmptyStr

    model_config = _RECORD_CONFIG


class CityOverride(BaseModel):
    city: NonEmptyStr
    rules: NonEmptyStr

    model_config = _RECORD_CONFIG


class FireworksRecord(BaseTopicRecord):
    """Fireworks rules; state and county records carry no city."""

    jurisdiction_level: JurisdictionLevel
    allowed_consumer_fireworks: bool | Literal["restricted"]
    sale_periods: NonEmptyStr
    use_hours: NonEmptyStr
    permit_required: bool
    age_restrictions: NonEmptyStr
    prohibited_types: list[NonEmptyStr] = Field(min_length=1)
    enforcement_notes: NonEmptyStr
    county_overrides: list[CountyOverride] | None = None
    city_overrides: list[CityOverride] | None = None
    notes_public: str | None = None

    def invariant_problems(self) -> list[str]:
        problems = super().invariant_problems()
        if self.jurisdiction_level == "city" and not self.city:
            problems.append("city is required when jurisdiction_level is city")
        if self.jurisdiction_level != "city" and self.city:
            problems.append("city should be omitted unless jurisdiction_level is city")
        return problems


def validate_dataset(model: type[BaseTopicRecord], records: list, label: str = "dataset") -> list:
    """Validate a whole dataset: at least one record, every record schema-valid.

    Accepts model instances (kept as-is) or plain dicts.
    """
    adapter = TypeAdapter(Annotated[list[model], Field(min_length=1)])
    try:
        return adapter.validate_python(records)
    except ValidationError as exc:
        raise DatasetValidationError.from_pydantic(exc, label=label) from exc


# --- Slug index ---
class SlugIndexEntry(BaseModel):
    country: str
    region: str
    city: str | None = None
    country_slug: str
    region_slug: str
    city_slug: str | None = None
    last_verified: str

    model_config = _RECORD_CONFIG

    @classmethod
    def from_record(cls, record: BaseTopicRecord) -> SlugIndexEntry:
        return cls(
            country=record.country,
            region=record.region,
            city=record.city,
            country_slug=record.country_slug,
            region_slug=record.region_slug,
            city_slug=record.city_slug,
            last_verified=record.last_verified,
        )


# --- Listings ---
class CountrySummary(BaseModel):
    country: str
    country_name: str
    country_slug: str
    count: int
    last_verified: str


class RegionSummary(BaseModel):
    region: str
    region_slug: str
    count: int
    last_verified: str


class FireworksRegionSummary(RegionSummary):
    has_state_rule: bool
    city_count: int


class CitySummary(BaseModel):
    city: str
    city_slug: str
    last_verified: str


class LocationParams(BaseModel):
    country_slug: str
    region_slug: str
    city_slug: str | None = None
    jurisdiction_level: JurisdictionLevel | None = None


# --- Search / navigation ---
class TopicSearchEntry(BaseModel):
    topic: TopicId
    country: str
    region: str
    city: str | None = None
    path: str
    last_verified: str
    label: str
    level: Literal["city", "region"]
    jurisdiction_level: JurisdictionLevel | None = None


class TopicNavEntry(BaseModel):
    topic: TopicId
    label: str
    href: str
    level: Literal["city", "region"]
    last_verified: str


class DatasetOut(BaseModel):
    topic: TopicId
    source: DataSource
    count: int
    records: list[dict]
