"""
Application service: Orchestration layer for bloom tracking operations.
"""
import logging
import uuid
from datetime import date, datetime, timezone
from typing import Any, Literal, Optional

from pydantic import ValidationError

from bloomtrack.domain.models import (
    AbortionEntry,
    AbortionRate,
    AppSettings,
    BloomEntry,
    BloomStatus,
    DailyHarvestProjection,
    DashboardStats,
    ExportSnapshot,
    HarvestEntry,
    HarvestForecast,
    HarvestSections,
    HistoryEntry,
    Variety,
)
from bloomtrack.exceptions import BloomNotFoundError, EntryValidationError
from bloomtrack.infrastructure.event_store import EventStore
from bloomtrack.services.domain.abortion_analytics import AbortionAnalytics
from bloomtrack.services.domain.dashboard import DashboardAggregator
from bloomtrack.services.domain.entry_validation import (
    parse_maturity_period,
    parse_positive_count,
    validate_against_remaining,
    validate_bloom,
)
from bloomtrack.services.domain.harvest_forecaster import HarvestForecaster
from bloomtrack.services.domain.location_catalog import location_display_name
from bloomtrack.services.domain.yield_ledger import YieldLedger
from bloomtrack.utils.dates import format_display_date

logger = logging.getLogger(__name__)

HistoryType = Literal["bloom", "abortion", "harvest"]
HistorySort = Literal["date", "location"]


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FarmService:
    """
    Application service for bloom, abortion and harvest tracking.

    Loads the event collections, builds one yield ledger per request and
    hands it to the domain services. No business logic lives here, only
    coordination between the storage and domain layers.
    """

    def __init__(
        self,
        store: EventStore,
        forecaster: HarvestForecaster,
        analytics: AbortionAnalytics,
        dashboard: DashboardAggregator,
    ):
        """
        Initialize the service with dependencies.

        Args:
            store: Event store for loading and saving entries
            forecaster: Harvest forecaster
            analytics: Abortion-rate analytics
            dashboard: Dashboard aggregator
        """
        self.store = store
        self.forecaster = forecaster
        self.analytics = analytics
        self.dashboard = dashboard

    async def load_ledger(self) -> YieldLedger:
        """Load every collection and build the yield ledger."""
        blooms, abortions, harvests = await self.store.load_all()
        return YieldLedger(blooms, abortions, harvests)

    # ------------------------------------------------------------
    # Forecasts, analytics, dashboard
    # ------------------------------------------------------------

    async def get_harvest_forecasts(self, today: date) -> list[HarvestForecast]:
        ledger = await self.load_ledger()
        return self.forecaster.build_forecasts(ledger, today)

    async def get_harvest_sections(self, today: date) -> HarvestSections:
        ledger = await self.load_ledger()
        return self.forecaster.build_sections(ledger, today)

    async def get_daily_projection(
        self,
        today: date,
        days: Optional[int] = None,
    ) -> list[DailyHarvestProjection]:
        ledger = await self.load_ledger()
        return self.forecaster.daily_projection(ledger, today, days)

    async def get_dashboard(self, today: date) -> DashboardStats:
        ledger = await self.load_ledger()
        return self.dashboard.summarize(ledger, today)

    async def get_abortion_rates_by_location(self, limit: Optional[int] = None) -> list[AbortionRate]:
        ledger = await self.load_ledger()
        return self.analytics.by_location(ledger, limit)

    async def get_abortion_rates_by_variety(self, limit: Optional[int] = None) -> list[AbortionRate]:
        ledger = await self.load_ledger()
        return self.analytics.by_variety(ledger, limit)

    async def get_blooms_with_remaining(self) -> list[BloomStatus]:
        """Blooms that still have flowers or fruit left, for the entry pickers."""
        ledger = await self.load_ledger()
        return [
            BloomStatus(
                bloom=y.bloom,
                total_aborted=y.total_aborted,
                total_harvested=y.total_harvested,
                remaining_count=y.remaining,
            )
            for y in ledger.outstanding()
        ]

    # ------------------------------------------------------------
    # Recording entries
    # ------------------------------------------------------------

    async def record_bloom(
        self,
        location: str,
        count: Any,
        bloom_date: date,
        variety: Optional[Variety] = None,
        maturity_period_days: Any = None,
        notes: Optional[str] = None,
        image_uri: Optional[str] = None,
    ) -> BloomEntry:
        """
        Validate and save a new bloom.

        Variety and maturity period fall back to the stored settings. The
        maturity period is copied onto the entry, so later settings changes
        do not move existing forecasts.

        Raises:
            EntryValidationError: On invalid input
            StorageWriteError: If the save fails
        """
        app_settings = await self.store.load_settings()
        if maturity_period_days is None:
            maturity_period_days = app_settings.maturity_period_days
        count, maturity_period_days = validate_bloom(count, maturity_period_days, location)

        entry = BloomEntry(
            id=_new_id(),
            bloom_date=bloom_date,
            location=location.strip(),
            variety=variety or app_settings.default_variety,
            count=count,
            maturity_period_days=maturity_period_days,
            image_uri=image_uri or None,
            notes=notes or None,
            created_at=_utcnow(),
        )
        await self.store.append_entry(entry)
        return entry

    async def record_abortion(
        self,
        bloom_entry_id: str,
        aborted_count: Any,
        abortion_date: date,
        notes: Optional[str] = None,
        image_uri: Optional[str] = None,
    ) -> AbortionEntry:
        """
        Validate and save an abortion against an existing bloom.

        Raises:
            BloomNotFoundError: If the bloom does not exist
            EntryValidationError: If the count is invalid or exceeds remaining
            StorageWriteError: If the save fails
        """
        ledger = await self.load_ledger()
        count = validate_against_remaining(
            ledger, bloom_entry_id, aborted_count, "abortedCount", "flowers"
        )
        entry = AbortionEntry(
            id=_new_id(),
            abortion_date=abortion_date,
            bloom_entry_id=bloom_entry_id,
            aborted_count=count,
            notes=notes or None,
            image_uri=image_uri or None,
            created_at=_utcnow(),
        )
        await self.store.append_entry(entry)
        return entry

    async def record_harvest(
        self,
        bloom_entry_id: str,
        harvested_count: Any,
        harvest_date: date,
        notes: Optional[str] = None,
        image_uri: Optional[str] = None,
    ) -> HarvestEntry:
        """
        Validate and save a harvest against an existing bloom.

        Raises:
            BloomNotFoundError: If the bloom does not exist
            EntryValidationError: If the count is invalid or exceeds remaining
            StorageWriteError: If the save fails
        """
        ledger = await self.load_ledger()
        count = validate_against_remaining(
            ledger, bloom_entry_id, harvested_count, "harvestedCount", "fruits"
        )
        entry = HarvestEntry(
            id=_new_id(),
            harvest_date=harvest_date,
            bloom_entry_id=bloom_entry_id,
            harvested_count=count,
            notes=notes or None,
            image_uri=image_uri or None,
            created_at=_utcnow(),
        )
        await self.store.append_entry(entry)
        return entry

    async def correct_bloom(self, bloom_id: str, changes: dict[str, Any]) -> BloomEntry:
        """
        Rewrite a bloom to fix a data-entry mistake.

        The id and creation timestamp are kept. The corrected count may not
        drop below what has already been aborted and harvested.

        Args:
            bloom_id: Bloom to correct
            changes: Field values to replace (attribute names)

        Raises:
            BloomNotFoundError: If the bloom does not exist
            EntryValidationError: On invalid corrected values
            StorageWriteError: If the save fails
        """
        ledger = await self.load_ledger()
        current = ledger.get(bloom_id)
        if current is None:
            raise BloomNotFoundError(bloom_id)

        updates = {k: v for k, v in changes.items() if v is not None and k not in ("id", "created_at")}
        if "count" in updates:
            updates["count"] = parse_positive_count(updates["count"], "count")
        if "maturity_period_days" in updates:
            updates["maturity_period_days"] = parse_maturity_period(updates["maturity_period_days"])
        if "location" in updates:
            if not str(updates["location"]).strip():
                raise EntryValidationError("A location is required")
            updates["location"] = str(updates["location"]).strip()

        try:
            corrected = BloomEntry.model_validate({**current.bloom.model_dump(), **updates})
        except ValidationError as e:
            raise EntryValidationError(f"Invalid bloom correction: {e.error_count()} error(s)") from e
        accounted = current.total_aborted + current.total_harvested
        if corrected.count < accounted:
            raise EntryValidationError(
                f"count cannot be lower than the {accounted} flowers already aborted or harvested"
            )

        if not await self.store.update_bloom_entry(corrected):
            raise BloomNotFoundError(bloom_id)
        return corrected

    # ------------------------------------------------------------
    # Listing and history
    # ------------------------------------------------------------

    async def list_blooms(self) -> list[BloomEntry]:
        return await self.store.load_bloom_entries()

    async def list_abortions(self) -> list[AbortionEntry]:
        return await self.store.load_abortion_entries()

    async def list_harvests(self) -> list[HarvestEntry]:
        return await self.store.load_harvest_entries()

    async def get_history(
        self,
        entry_type: Optional[HistoryType] = None,
        search: Optional[str] = None,
        sort_by: HistorySort = "date",
    ) -> list[HistoryEntry]:
        """
        Combined history of all entries.

        Args:
            entry_type: Only include one kind of entry
            search: Case-insensitive match on location id, location name,
                variety or display date; orphaned entries never match
            sort_by: "date" (newest first) or "location" (alphabetical)

        Returns:
            List of HistoryEntry
        """
        ledger = await self.load_ledger()
        entries: list[HistoryEntry] = []

        for bloom in ledger.blooms:
            entries.append(HistoryEntry(
                type="bloom",
                entry_date=bloom.bloom_date,
                entry=bloom,
                location=bloom.location,
                location_name=location_display_name(bloom.location),
            ))
        for abortion in ledger.abortions:
            entries.append(self._related_history_entry("abortion", abortion.abortion_date, abortion, ledger))
        for harvest in ledger.harvests:
            entries.append(self._related_history_entry("harvest", harvest.harvest_date, harvest, ledger))

        if entry_type:
            entries = [e for e in entries if e.type == entry_type]

        if search and search.strip():
            needle = search.strip().lower()
            entries = [e for e in entries if self._matches(e, needle)]

        if sort_by == "location":
            entries.sort(key=lambda e: e.location or "")
        else:
            entries.sort(key=lambda e: e.entry_date, reverse=True)

        logger.debug(f"History: {len(entries)} entries (type={entry_type}, search={search!r})")
        return entries

    @staticmethod
    def _related_history_entry(
        kind: HistoryType,
        entry_date: date,
        entry: Any,
        ledger: YieldLedger,
    ) -> HistoryEntry:
        bloom = ledger.bloom(entry.bloom_entry_id)
        return HistoryEntry(
            type=kind,
            entry_date=entry_date,
            entry=entry,
            related_bloom=bloom,
            location=bloom.location if bloom else None,
            location_name=location_display_name(bloom.location) if bloom else None,
        )

    @staticmethod
    def _matches(entry: HistoryEntry, needle: str) -> bool:
        bloom = entry.entry if entry.type == "bloom" else entry.related_bloom
        if bloom is None:
            return False
        haystack = (
            bloom.location,
            entry.location_name or "",
            bloom.variety.value,
            format_display_date(entry.entry_date),
        )
        return any(needle in field.lower() for field in haystack)

    # ------------------------------------------------------------
    # Settings and data management
    # ------------------------------------------------------------

    async def get_settings(self) -> AppSettings:
        return await self.store.load_settings()

    async def update_settings(self, changes: dict[str, Any]) -> AppSettings:
        """
        Merge changes into the stored settings and save them.

        Raises:
            EntryValidationError: If the merged settings are invalid
            StorageWriteError: If the save fails
        """
        current = await self.store.load_settings()
        updates = {k: v for k, v in changes.items() if v is not None}
        if "maturity_period_days" in updates:
            updates["maturity_period_days"] = parse_maturity_period(updates["maturity_period_days"])
        try:
            merged = AppSettings.model_validate({**current.model_dump(), **updates})
        except ValidationError as e:
            raise EntryValidationError(f"Invalid settings: {e.error_count()} error(s)") from e
        await self.store.save_settings(merged)
        logger.info(f"Settings updated: {sorted(updates)}")
        return merged

    async def export_data(self, today: date) -> ExportSnapshot:
        """
        Snapshot every collection and the settings, and record the export
        date as the last sync date.

        Raises:
            StorageWriteError: If stamping the sync date fails
        """
        blooms, abortions, harvests = await self.store.load_all()
        app_settings = await self.store.load_settings()
        app_settings = app_settings.model_copy(update={"last_sync_date": today})
        await self.store.save_settings(app_settings)

        logger.info(
            f"Exported {len(blooms)} blooms, {len(abortions)} abortions, {len(harvests)} harvests"
        )
        return ExportSnapshot(
            blooms=blooms,
            abortions=abortions,
            harvests=harvests,
            settings=app_settings,
            export_date=_utcnow(),
        )

    async def clear_all_data(self) -> None:
        await self.store.clear_all_data()
