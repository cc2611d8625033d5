"""
Daily record sources.

A source supplies one DailyRecord per calendar day for a trailing window of
days. Days without any data are still returned, with every metric absent.
"""

import datetime as dt
import random
from typing import List, Optional, Protocol

from loguru import logger

from vital_brief.service.insight_analysis.common.data_models import DailyRecord, RecordSources
from vital_brief.utils import trailing_days

MOCK_SOURCE_LABEL = "mock"


class DailyRecordSource(Protocol):
    async def fetch_records(self, days: int, end_date: Optional[dt.date] = None) -> List[DailyRecord]:
        """Fetch one record per day for the last `days` days ending on end_date, newest first."""
        ...


class MockDailyRecordSource:
    """
    Generates plausible sample records for demos and tests.

    Values vary around typical resting values. The generator is seeded, so the
    same seed and date range always produce the same records.
    """

    def __init__(self, seed: int = 42):
        self.seed = seed
        logger.info(f"Initialized MockDailyRecordSource with seed {seed}")

    def _build_record(self, rng: random.Random, date: dt.date) -> DailyRecord:
        has_workout = rng.random() < 0.5
        return DailyRecord(
            date=date,
            sleep_minutes=420 + rng.uniform(-30, 30),
            hrv_ms=45 + rng.uniform(-5, 5),
            resting_hr_bpm=58 + rng.uniform(-3, 3),
            steps=8000 + rng.uniform(-1000, 1000),
            active_energy_kcal=500 + rng.uniform(-50, 50),
            workout_minutes=rng.uniform(20, 60) if has_workout else None,
            workout_count=1 if has_workout else 0,
            sources=RecordSources(
                sleep=MOCK_SOURCE_LABEL,
                hrv=MOCK_SOURCE_LABEL,
                resting_hr=MOCK_SOURCE_LABEL,
                steps=MOCK_SOURCE_LABEL,
                active_energy=MOCK_SOURCE_LABEL,
                workout=MOCK_SOURCE_LABEL if has_workout else None,
            ),
        )

    async def fetch_records(self, days: int, end_date: Optional[dt.date] = None) -> List[DailyRecord]:
        rng = random.Random(self.seed)
        records = [self._build_record(rng, date) for date in trailing_days(days, end_date)]
        logger.info(f"Generated {len(records)} mock daily records")
        return records
