import datetime as dt
from typing import List, Optional

from vital_brief.service.insight_analysis.common.data_models import DailyRecord

TODAY = dt.date(2025, 5, 28)


def make_history(
    days: int = 28,
    end_date: dt.date = TODAY,
    sleep_minutes: Optional[float] = 420,
    hrv_ms: Optional[float] = 45,
    resting_hr_bpm: Optional[float] = 58,
    steps: Optional[float] = 8000,
    active_energy_kcal: Optional[float] = 500,
    workout_minutes: Optional[float] = 30,
) -> List[DailyRecord]:
    """Build `days` identical records ending on end_date, newest first."""
    return [
        DailyRecord(
            date=end_date - dt.timedelta(days=i),
            sleep_minutes=sleep_minutes,
            hrv_ms=hrv_ms,
            resting_hr_bpm=resting_hr_bpm,
            steps=steps,
            active_energy_kcal=active_energy_kcal,
            workout_minutes=workout_minutes,
            workout_count=1 if workout_minutes else 0,
        )
        for i in range(days)
    ]
