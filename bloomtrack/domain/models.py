"""
Domain models for bloom, abortion and harvest data.

These models represent the core domain entities and should be independent
of any infrastructure concerns (storage backends, HTTP, etc.).

Stored and serialized payloads use camelCase keys; attributes are snake_case
and can be populated by either name.
"""
from datetime import date, datetime
from enum import Enum
from typing import List, Literal, Optional, Union
from pydantic import BaseModel, Field, field_validator


class Variety(str, Enum):
    """Dragon-fruit varieties grown on the farm."""
    RED = "Red"
    WHITE = "White"
    YELLOW = "Yellow"


class LocationType(str, Enum):
    """Structural type of a growing location."""
    GREENHOUSE = "Greenhouse"
    TRELLIS = "Trellis"
    DOUBLE_POLE = "Double Pole"


class Zone(str, Enum):
    """Farm zone."""
    NORTH = "North"
    SOUTH = "South"


# Hard ceiling for stored maturity periods; writes are held to a lower configured limit
MAX_MATURITY_PERIOD_DAYS = 3650


def _calendar_date(value):
    # Older records may carry a full ISO timestamp where a date is expected
    if isinstance(value, str) and len(value) > 10 and value[10] in "T ":
        return value[:10]
    return value


class BloomEntry(BaseModel):
    """One flowering event at one location."""
    id: str
    bloom_date: date = Field(alias="date")
    location: str = Field(description="Location identifier, not checked against the catalog")
    variety: Variety
    count: int = Field(gt=0, description="Number of flowers")
    maturity_period_days: int = Field(
        alias="maturityPeriodDays",
        gt=0,
        le=MAX_MATURITY_PERIOD_DAYS,
        description="Days from bloom to expected harvest, fixed at creation"
    )
    image_uri: Optional[str] = Field(default=None, alias="imageUri")
    notes: Optional[str] = None
    created_at: datetime = Field(alias="createdAt")

    @field_validator("bloom_date", mode="before")
    @classmethod
    def normalize_bloom_date(cls, value):
        return _calendar_date(value)

    class Config:
        populate_by_name = True
        frozen = True


class AbortionEntry(BaseModel):
    """Partial loss of flowers from one bloom."""
    id: str
    abortion_date: date = Field(alias="abortionDate")
    bloom_entry_id: str = Field(alias="bloomEntryId")
    aborted_count: int = Field(alias="abortedCount", gt=0)
    notes: Optional[str] = None
    image_uri: Optional[str] = Field(default=None, alias="imageUri")
    created_at: datetime = Field(alias="createdAt")

    @field_validator("abortion_date", mode="before")
    @classmethod
    def normalize_abortion_date(cls, value):
        return _calendar_date(value)

    class Config:
        populate_by_name = True
        frozen = True


class HarvestEntry(BaseModel):
    """Fruit collected from one bloom."""
    id: str
    harvest_date: date = Field(alias="harvestDate")
    bloom_entry_id: str = Field(alias="bloomEntryId")
    harvested_count: int = Field(alias="harvestedCount", gt=0)
    notes: Optional[str] = None
    image_uri: Optional[str] = Field(default=None, alias="imageUri")
    created_at: datetime = Field(alias="createdAt")

    @field_validator("harvest_date", mode="before")
    @classmethod
    def normalize_harvest_date(cls, value):
        return _calendar_date(value)

    class Config:
        populate_by_name = True
        frozen = True


class FarmLocation(BaseModel):
    """A generated growing location. Never persisted."""
    id: str
    type: LocationType
    zone: Zone
    name: str

    class Config:
        frozen = True


class AppSettings(BaseModel):
    """User-editable settings record."""
    default_variety: Variety = Field(default=Variety.RED, alias="defaultVariety")
    maturity_period_days: int = Field(
        default=26,
        alias="maturityPeriodDays",
        gt=0,
        le=MAX_MATURITY_PERIOD_DAYS,
    )
    last_sync_date: Optional[date] = Field(default=None, alias="lastSyncDate")
    enable_notifications: bool = Field(default=True, alias="enableNotifications")

    class Config:
        populate_by_name = True


class HarvestForecast(BaseModel):
    """Derived harvest projection for a bloom with outstanding fruit."""
    id: str
    bloom_entry: BloomEntry = Field(alias="bloomEntry")
    expected_harvest_date: date = Field(alias="expectedHarvestDate")
    expected_count: int = Field(alias="expectedCount", description="Original flower count")
    total_aborted: int = Field(alias="totalAborted")
    total_harvested: int = Field(alias="totalHarvested")
    remaining_count: int = Field(alias="remainingCount")
    is_ready_today: bool = Field(alias="isReadyToday")
    days_until_harvest: int = Field(
        alias="daysUntilHarvest",
        description="Positive for future harvests, negative when overdue"
    )

    class Config:
        populate_by_name = True


class HarvestSections(BaseModel):
    """Forecasts split the way the harvest screen presents them."""
    ready_today: List[HarvestForecast] = Field(alias="readyToday")
    overdue: List[HarvestForecast]
    upcoming: List[HarvestForecast]

    class Config:
        populate_by_name = True


class DailyHarvestProjection(BaseModel):
    """Expected fruit count for a single calendar day."""
    projection_date: date = Field(alias="date")
    expected_count: int = Field(alias="expectedCount")

    class Config:
        populate_by_name = True


class AbortionRate(BaseModel):
    """Abortion rate for one location or variety."""
    key: str
    name: str
    total: int
    aborted: int
    rate: float = Field(ge=0.0, le=100.0, description="Aborted share of bloomed flowers, in percent")


class UpcomingHarvest(BaseModel):
    """Dashboard row for a harvest due within the upcoming window."""
    bloom: BloomEntry
    harvest_date: date = Field(alias="harvestDate")
    remaining_count: int = Field(alias="remainingCount")

    class Config:
        populate_by_name = True


class DashboardStats(BaseModel):
    """Day-scoped summary counters."""
    today_blooms: int = Field(alias="todayBlooms")
    today_abortions: int = Field(alias="todayAbortions")
    ready_to_harvest_today: int = Field(alias="readyToHarvestToday")
    total_active_blooms: int = Field(alias="totalActiveBlooms")
    upcoming_harvests: int = Field(alias="upcomingHarvests")
    upcoming: List[UpcomingHarvest] = Field(default_factory=list)

    class Config:
        populate_by_name = True


class HistoryEntry(BaseModel):
    """One row of the combined event history."""
    type: Literal["bloom", "abortion", "harvest"]
    entry_date: date = Field(alias="date")
    entry: Union[BloomEntry, AbortionEntry, HarvestEntry]
    related_bloom: Optional[BloomEntry] = Field(default=None, alias="relatedBloom")
    location: Optional[str] = None
    location_name: Optional[str] = Field(default=None, alias="locationName")

    class Config:
        populate_by_name = True


class ExportSnapshot(BaseModel):
    """Full data export."""
    blooms: List[BloomEntry]
    abortions: List[AbortionEntry]
    harvests: List[HarvestEntry]
    settings: AppSettings
    export_date: datetime = Field(alias="exportDate")

    class Config:
        populate_by_name = True


class BloomStatus(BaseModel):
    """A bloom together with its current accounting totals."""
    bloom: BloomEntry
    total_aborted: int = Field(alias="totalAborted")
    total_harvested: int = Field(alias="totalHarvested")
    remaining_count: int = Field(alias="remainingCount")

    class Config:
        populate_by_name = True
