"""
Data models for the daily insight analysis framework.

This module provides Pydantic models for:
- Daily records (one calendar day of measurements)
- Baseline and delta representation
- Insight cards and the assembled daily brief
"""

import datetime as dt
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RecordSources(BaseModel):
    """Source label per metric, informational only."""

    model_config = ConfigDict(frozen=True)

    sleep: Optional[str] = None
    hrv: Optional[str] = None
    resting_hr: Optional[str] = None
    steps: Optional[str] = None
    active_energy: Optional[str] = None
    workout: Optional[str] = None


class DailyRecord(BaseModel):
    """One calendar day of measurements. Absent values mean "not measured that day"."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    sleep_minutes: Optional[float] = None  # Total minutes asleep
    hrv_ms: Optional[float] = None  # Heart rate variability in milliseconds
    resting_hr_bpm: Optional[float] = None  # Resting heart rate in BPM
    steps: Optional[float] = None  # Daily step count
    active_energy_kcal: Optional[float] = None  # Active energy burned in kcal
    workout_minutes: Optional[float] = None  # Total workout duration in minutes
    workout_count: int = 0  # Number of workouts
    sources: RecordSources = Field(default_factory=RecordSources)

    @property
    def id(self) -> str:
        """Calendar-day key in YYYY-MM-DD format."""
        return self.date.isoformat()

    def metric_value(self, metric: str) -> Optional[float]:
        return getattr(self, metric)


class BaselineSet(BaseModel):
    """Median reference value per metric over the lookback window."""

    model_config = ConfigDict(frozen=True)

    sleep_minutes: Optional[float] = None
    hrv_ms: Optional[float] = None
    resting_hr_bpm: Optional[float] = None
    steps: Optional[float] = None
    active_energy_kcal: Optional[float] = None
    workout_minutes: Optional[float] = None

    lookback_days: int = 28
    min_samples: int = 7

    def metric_value(self, metric: str) -> Optional[float]:
        return getattr(self, metric)


class DeltaSet(BaseModel):
    """Signed difference between a daily record and a baseline set (record - baseline)."""

    model_config = ConfigDict(frozen=True)

    sleep_minutes: Optional[float] = None
    hrv_ms: Optional[float] = None
    resting_hr_bpm: Optional[float] = None
    steps: Optional[float] = None
    active_energy_kcal: Optional[float] = None
    workout_minutes: Optional[float] = None

    def metric_value(self, metric: str) -> Optional[float]:
        return getattr(self, metric)


class DailyRecordWithDeltas(BaseModel):
    """A daily record paired with its deltas against a shared baseline set."""

    model_config = ConfigDict(frozen=True)

    record: DailyRecord
    deltas: DeltaSet

    @property
    def id(self) -> str:
        return self.record.id


# Insight models


class InsightType(str, Enum):
    """Closed set of insight card types."""

    RECOVERY_SIGNALS = "recovery_signals"
    ACTIVITY_LOAD = "activity_load"
    NOTABLE_CHANGE = "notable_change"


class Confidence(str, Enum):
    """Confidence level derived from data completeness."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class InsightCard(BaseModel):
    """A deterministic, human-readable observation about today."""

    model_config = ConfigDict(frozen=True)

    type: InsightType
    title: str
    explanation: str
    confidence: Confidence


class TodayBrief(BaseModel):
    """Everything computed for the most recent day of a batch."""

    model_config = ConfigDict(frozen=True)

    record: DailyRecord
    baselines: BaselineSet
    deltas: DeltaSet
    insights: List[InsightCard] = Field(default_factory=list)
    last_sync: Optional[dt.datetime] = None
