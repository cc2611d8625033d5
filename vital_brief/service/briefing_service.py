import datetime as dt
from typing import List, Optional

import dateutil.tz
from loguru import logger

from vital_brief.config import VitalBriefSettings
from vital_brief.service.daily_record_source import DailyRecordSource
from vital_brief.service.insight_analysis.baselining.baseline_calculator import compute_baselines
from vital_brief.service.insight_analysis.common.data_models import DailyRecordWithDeltas, TodayBrief
from vital_brief.service.insight_analysis.deltas.delta_calculator import compute_deltas, compute_deltas_for_records
from vital_brief.service.insight_analysis.insights.insight_generator import generate_insights
from vital_brief.service.record_store import DailyRecordStore


class BriefingService:
    """Service that keeps the record history fresh and computes the daily brief.

    It pulls a trailing window of daily records from a source, caches them in the
    record store, and runs the insight engine over the cached batch.
    """

    def __init__(self, source: DailyRecordSource, store: DailyRecordStore, settings: VitalBriefSettings):
        """
        Initialize the briefing service.

        Args:
            source: Supplier of daily records.
            store: Local cache of the record history.
            settings: Application settings (window size and baseline threshold).
        """
        self.source = source
        self.store = store
        self.settings = settings

    async def refresh(self, end_date: Optional[dt.date] = None) -> int:
        """
        Fetch the trailing window of records and replace the cached history with it.

        Args:
            end_date: Most recent day to fetch (optional, defaults to today).

        Returns:
            Number of records stored.
        """
        logger.info(f"Refreshing the last {self.settings.history_days} days of records")
        records = await self.source.fetch_records(self.settings.history_days, end_date)
        await self.store.save_records(records)
        await self.store.save_sync_timestamp(dt.datetime.now(dateutil.tz.tzlocal()))
        logger.info(f"Stored {len(records)} records")
        return len(records)

    async def today_brief(self) -> Optional[TodayBrief]:
        """
        Compute baselines, deltas and insights for the most recent cached day.

        Returns:
            TodayBrief, or None if no records have been cached yet.
        """
        records = await self.store.load_records()
        if not records:
            logger.warning("No cached records, nothing to brief on")
            return None

        today = max(records, key=lambda record: record.date)
        baselines = compute_baselines(
            records, threshold=self.settings.min_baseline_samples, lookback_days=self.settings.history_days
        )
        deltas = compute_deltas(today, baselines)
        insights = generate_insights(today, deltas, baselines)
        last_sync = await self.store.load_sync_timestamp()

        logger.info(f"Built brief for {today.id} with {len(insights)} insights")
        return TodayBrief(record=today, baselines=baselines, deltas=deltas, insights=insights, last_sync=last_sync)

    async def trends(self) -> List[DailyRecordWithDeltas]:
        """
        Compute the deltas of every cached day against the baselines of the whole history.

        Returns:
            Records with their deltas, newest first.
        """
        records = await self.store.load_records()
        baselines = compute_baselines(
            records, threshold=self.settings.min_baseline_samples, lookback_days=self.settings.history_days
        )
        return compute_deltas_for_records(records, baselines)
