"""
Constants for the daily insight analysis framework.

This module defines constants used throughout the analysis framework, including:
- Configuration constants for baseline calculations
- Thresholds used by the insight detectors
- The fixed list of metrics that carry a baseline
"""


# Baseline configuration constants
class BaselineConfig:
    """Configuration for baseline calculations."""

    DEFAULT_LOOKBACK_DAYS = 28  # Size of the rolling window of daily records
    MIN_DAYS_FOR_BASELINE = 7  # Minimum number of days with a value needed to establish a baseline


# Thresholds for the rule-based insight detectors
class InsightThresholds:
    """Threshold values for deltas against the baseline."""

    # Recovery signals
    SLEEP_IMPROVED_MINUTES = 30  # Sleep delta above this is "improved sleep"
    HRV_ELEVATED_MS = 2  # HRV delta above this is "elevated HRV"
    RESTING_HR_LOWER_BPM = -3  # Resting HR delta below this is "lower resting HR"

    # Activity & load
    STEPS_CHANGE = 2000  # Steps delta beyond +/- this value
    ACTIVE_ENERGY_CHANGE_KCAL = 100  # Active energy delta beyond +/- this value


class InsightConfig:
    """Configuration for insight generation."""

    MAX_CARDS = 3  # Upper bound on the number of cards returned per call
    BASELINE_LABEL = "28-day baseline"


# Metrics that carry a baseline and a delta
class Metrics:
    """Metric field names shared by daily records, baselines and deltas."""

    SLEEP_MINUTES = "sleep_minutes"
    HRV_MS = "hrv_ms"
    RESTING_HR_BPM = "resting_hr_bpm"
    STEPS = "steps"
    ACTIVE_ENERGY_KCAL = "active_energy_kcal"
    WORKOUT_MINUTES = "workout_minutes"

    # Fixed order, also used to break ties between equally large deltas
    ALL = [
        SLEEP_MINUTES,
        HRV_MS,
        RESTING_HR_BPM,
        STEPS,
        ACTIVE_ENERGY_KCAL,
        WORKOUT_MINUTES,
    ]

    # Metrics whose presence on a record drives the confidence level
    CORE = [SLEEP_MINUTES, HRV_MS, RESTING_HR_BPM]

    # Human readable names used in insight text
    DISPLAY_NAMES = {
        SLEEP_MINUTES: "sleep",
        HRV_MS: "HRV",
        RESTING_HR_BPM: "resting HR",
        STEPS: "steps",
        ACTIVE_ENERGY_KCAL: "energy",
        WORKOUT_MINUTES: "workouts",
    }

    # Units used when rendering values
    UNITS = {
        SLEEP_MINUTES: "min",
        HRV_MS: "ms",
        RESTING_HR_BPM: "bpm",
        STEPS: "steps",
        ACTIVE_ENERGY_KCAL: "kcal",
        WORKOUT_MINUTES: "min",
    }
