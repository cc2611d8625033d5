import asyncio
import datetime as dt
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from garminconnect import Garmin, GarminConnectAuthenticationError, GarminConnectTooManyRequestsError
from garth.exc import GarthHTTPError
from loguru import logger

from vital_brief.service.errors import RecordSourceError
from vital_brief.service.insight_analysis.common.data_models import DailyRecord, RecordSources
from vital_brief.utils import trailing_days

SOURCE_LABEL = "garmin_connect"

# Configuration
RETRIES = 3
BACKOFF = 5  # seconds (multiplier for retry)


def _safe_get(data_dict: Any, key_path: List[Any], default: Any = None) -> Any:
    """Safely get a nested value from a dictionary or list."""
    try:
        value = data_dict
        for key in key_path:
            if value is None:
                return default
            value = value[key]
        return value if value is not None else default
    except (KeyError, IndexError, TypeError):
        return default


def _positive(value: Any) -> Optional[float]:
    """Garmin reports unmeasured totals as 0 or null; both mean absent."""
    if isinstance(value, (int, float)) and value > 0:
        return float(value)
    return None


def parse_sleep_minutes(sleep_data: Any) -> Optional[float]:
    seconds = _positive(_safe_get(sleep_data, ["dailySleepDTO", "sleepTimeSeconds"]))
    return seconds / 60 if seconds is not None else None


def parse_hrv_ms(hrv_data: Any) -> Optional[float]:
    return _positive(_safe_get(hrv_data, ["hrvSummary", "lastNightAvg"]))


def parse_resting_hr(rhr_data: Any) -> Optional[float]:
    return _positive(_safe_get(rhr_data, ["allMetrics", "metricsMap", "WELLNESS_RESTING_HEART_RATE", 0, "value"]))


def parse_steps(stats: Any) -> Optional[float]:
    return _positive(_safe_get(stats, ["totalSteps"]))


def parse_active_energy(stats: Any) -> Optional[float]:
    return _positive(_safe_get(stats, ["activeKilocalories"]))


def parse_workouts(activities_data: Any) -> Tuple[Optional[float], int]:
    """
    Sum the duration of all activities recorded on a day.

    Args:
        activities_data: Response of the activities-for-date endpoint.

    Returns:
        Tuple of (total minutes or None when there were no activities, activity count).
    """
    activities = _safe_get(activities_data, ["ActivitiesForDay", "payload"], [])
    if not isinstance(activities, list) or not activities:
        return None, 0

    total_seconds = sum(
        activity.get("duration") or 0 for activity in activities if isinstance(activity, dict)
    )
    return total_seconds / 60, len(activities)


class GarminDailyRecordSource:
    """Fetches daily records from Garmin Connect."""

    def __init__(
        self,
        token_store_dir: Path,
        retries: int = RETRIES,
        backoff_s: float = BACKOFF,
        client: Optional[Garmin] = None,
    ):
        """
        Initialize the source with a token store directory.

        Args:
            token_store_dir: Directory holding the Garmin Connect session tokens.
            retries: Attempts per metric and day before giving up on it.
            backoff_s: Multiplier in seconds for the linear retry backoff.
            client: Already authenticated client (optional, created from the tokens otherwise).
        """
        self.token_store_dir = token_store_dir
        self.retries = retries
        self.backoff_s = backoff_s
        self._client = client
        logger.info(f"Initialized GarminDailyRecordSource with token store at {token_store_dir}")

    def _create_client(self) -> Garmin:
        """
        Create a Garmin client from the stored session tokens.

        Raises:
            RecordSourceError: If no tokens are stored or the login fails.
        """
        if not self.token_store_dir.exists() or not any(self.token_store_dir.iterdir()):
            raise RecordSourceError(f"No Garmin Connect tokens found in {self.token_store_dir}")

        try:
            garmin = Garmin()
            garmin.login(self.token_store_dir.as_posix())
            logger.info("Successfully created Garmin client")
            return garmin
        except (FileNotFoundError, GarthHTTPError, GarminConnectAuthenticationError) as e:
            logger.error(f"Failed to create Garmin client: {str(e)}")
            raise RecordSourceError(f"Garmin Connect login failed: {e}") from e

    @property
    def client(self) -> Garmin:
        if self._client is None:
            self._client = self._create_client()
        return self._client

    async def _fetch_with_retry(self, name: str, fn: Callable[[str], Any], date: str) -> Any:
        """
        Call one blocking client endpoint in a worker thread, retrying with linear backoff.

        Returns:
            The endpoint response, or None when every attempt failed.
        """
        for attempt in range(self.retries):
            try:
                return await asyncio.to_thread(fn, date)
            except GarminConnectTooManyRequestsError:
                sleep_seconds = self.backoff_s * (attempt + 1)
                logger.warning(f"Rate limit hit – retrying {name} for {date} in {sleep_seconds}s…")
                await asyncio.sleep(sleep_seconds)
            except Exception as exc:
                if attempt < self.retries - 1:
                    sleep_seconds = self.backoff_s * (attempt + 1)
                    logger.warning(f"Error fetching {name} for {date}: {str(exc)}. Retrying in {sleep_seconds}s...")
                    await asyncio.sleep(sleep_seconds)
                else:
                    logger.error(f"Failed to fetch {name} for {date} after {self.retries} attempts: {str(exc)}")
                    return None

        logger.warning(f"Skipping {name} for {date} after {self.retries} attempts due to rate limiting")
        return None

    async def fetch_record(self, date: dt.date) -> DailyRecord:
        """
        Fetch all metrics of one day concurrently and build its DailyRecord.

        Args:
            date: Calendar day to fetch.

        Returns:
            DailyRecord with the metrics Garmin Connect reported for that day.
        """
        client = self.client
        date_str = date.isoformat()

        api_map: Dict[str, Callable[[str], Any]] = {
            "sleep": client.get_sleep_data,
            "hrv": client.get_hrv_data,
            "resting_hr": client.get_rhr_day,
            "stats": client.get_stats,
            "activities": client.get_activities_fordate,
        }
        responses = await asyncio.gather(
            *(self._fetch_with_retry(name, fn, date_str) for name, fn in api_map.items())
        )
        raw = dict(zip(api_map.keys(), responses))

        sleep_minutes = parse_sleep_minutes(raw["sleep"])
        hrv_ms = parse_hrv_ms(raw["hrv"])
        resting_hr = parse_resting_hr(raw["resting_hr"])
        steps = parse_steps(raw["stats"])
        active_energy = parse_active_energy(raw["stats"])
        workout_minutes, workout_count = parse_workouts(raw["activities"])

        def _label(value: Optional[float]) -> Optional[str]:
            return SOURCE_LABEL if value is not None else None

        return DailyRecord(
            date=date,
            sleep_minutes=sleep_minutes,
            hrv_ms=hrv_ms,
            resting_hr_bpm=resting_hr,
            steps=steps,
            active_energy_kcal=active_energy,
            workout_minutes=workout_minutes,
            workout_count=workout_count,
            sources=RecordSources(
                sleep=_label(sleep_minutes),
                hrv=_label(hrv_ms),
                resting_hr=_label(resting_hr),
                steps=_label(steps),
                active_energy=_label(active_energy),
                workout=_label(workout_minutes),
            ),
        )

    async def fetch_records(self, days: int, end_date: Optional[dt.date] = None) -> List[DailyRecord]:
        """
        Retrieve one DailyRecord per day for the trailing period.

        Args:
            days: Number of days to retrieve.
            end_date: Most recent day to retrieve (optional, defaults to today).

        Returns:
            Records ordered newest first.
        """
        dates = trailing_days(days, end_date)
        if not dates:
            return []
        logger.info(f"Retrieving Garmin data from {dates[-1]} to {dates[0]}")

        records = []
        for date in dates:
            records.append(await self.fetch_record(date))
            logger.debug(f"Retrieved data for {date}")

        logger.info(f"Retrieved data for {len(records)} days")
        return records
