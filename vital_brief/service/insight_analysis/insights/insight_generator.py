"""
Insight generator.

This module turns the deltas of one day into a short, ordered list of insight
cards. Three rule-based detectors are evaluated in a fixed order, each one
contributing at most one card:

1. Recovery signals: sleep, HRV and resting heart rate against their baselines
2. Activity & load: steps and active energy against their baselines
3. Notable change: the metric with the largest absolute delta

Every card produced by one call shares a single confidence level derived from
how many of the core recovery metrics were measured on the day.
"""

from typing import Callable, List, Optional, Sequence, Tuple

from loguru import logger

from vital_brief.service.insight_analysis.common.constants import InsightConfig, InsightThresholds, Metrics
from vital_brief.service.insight_analysis.common.data_models import (
    BaselineSet,
    Confidence,
    DailyRecord,
    DeltaSet,
    InsightCard,
    InsightType,
)

Predicate = Callable[[DeltaSet], bool]
Builder = Callable[[DeltaSet, Confidence], Optional[InsightCard]]


def determine_confidence(record: DailyRecord) -> Confidence:
    """
    Determine the confidence level from the completeness of the record.

    Only raw presence on the record counts, not the presence of baselines or deltas.

    Args:
        record: The daily record the insights are about.

    Returns:
        HIGH when sleep, HRV and resting HR are all present, MEDIUM for two of them, LOW otherwise.
    """
    present = sum(1 for metric in Metrics.CORE if record.metric_value(metric) is not None)

    if present >= 3:
        return Confidence.HIGH
    if present == 2:
        return Confidence.MEDIUM
    return Confidence.LOW


# Recovery signals


def _has_recovery_deltas(deltas: DeltaSet) -> bool:
    return deltas.sleep_minutes is not None and deltas.hrv_ms is not None and deltas.resting_hr_bpm is not None


def _build_recovery_signals(deltas: DeltaSet, confidence: Confidence) -> Optional[InsightCard]:
    signals = []
    if deltas.sleep_minutes > InsightThresholds.SLEEP_IMPROVED_MINUTES:
        signals.append("improved sleep")
    if deltas.hrv_ms > InsightThresholds.HRV_ELEVATED_MS:
        signals.append("elevated HRV")
    if deltas.resting_hr_bpm < InsightThresholds.RESTING_HR_LOWER_BPM:
        signals.append("lower resting HR")

    if not signals:
        return None

    return InsightCard(
        type=InsightType.RECOVERY_SIGNALS,
        title="Recovery Signals",
        explanation=(
            f"Today shows positive recovery markers: {', '.join(signals)} vs. your {InsightConfig.BASELINE_LABEL}."
        ),
        confidence=confidence,
    )


# Activity & load


def _has_activity_deltas(deltas: DeltaSet) -> bool:
    return deltas.steps is not None and deltas.active_energy_kcal is not None


def _build_activity_load(deltas: DeltaSet, confidence: Confidence) -> Optional[InsightCard]:
    # Both directions are checked unconditionally; mixed directions are reported as they are
    marks = []
    if deltas.steps > InsightThresholds.STEPS_CHANGE:
        marks.append("higher step count")
    if deltas.active_energy_kcal > InsightThresholds.ACTIVE_ENERGY_CHANGE_KCAL:
        marks.append("more energy burn")
    if deltas.steps < -InsightThresholds.STEPS_CHANGE:
        marks.append("lower step count")
    if deltas.active_energy_kcal < -InsightThresholds.ACTIVE_ENERGY_CHANGE_KCAL:
        marks.append("less energy burn")

    if not marks:
        return None

    return InsightCard(
        type=InsightType.ACTIVITY_LOAD,
        title="Activity & Load",
        explanation=f"Your activity today shows {', '.join(marks)} compared to baseline.",
        confidence=confidence,
    )


# Notable change


def find_largest_delta(deltas: DeltaSet) -> Optional[Tuple[str, float]]:
    """
    Find the metric with the largest absolute delta.

    Ties go to the metric that comes first in Metrics.ALL.

    Args:
        deltas: Deltas of the day.

    Returns:
        Tuple of (metric name, signed delta), or None if no delta is present.
    """
    largest: Optional[Tuple[str, float]] = None
    for metric in Metrics.ALL:
        value = deltas.metric_value(metric)
        if value is None:
            continue
        if largest is None or abs(largest[1]) < abs(value):
            largest = (metric, value)
    return largest


def _has_any_delta(deltas: DeltaSet) -> bool:
    return any(deltas.metric_value(metric) is not None for metric in Metrics.ALL)


def _build_notable_change(deltas: DeltaSet, confidence: Confidence) -> Optional[InsightCard]:
    largest = find_largest_delta(deltas)
    if largest is None:
        return None

    metric, value = largest
    direction = "higher" if value >= 0 else "lower"
    return InsightCard(
        type=InsightType.NOTABLE_CHANGE,
        title="Notable Change",
        explanation=f"Your {Metrics.DISPLAY_NAMES[metric]} is noticeably {direction} today vs. your recent average.",
        confidence=confidence,
    )


DETECTORS: Sequence[Tuple[Predicate, Builder]] = (
    (_has_recovery_deltas, _build_recovery_signals),
    (_has_activity_deltas, _build_activity_load),
    (_has_any_delta, _build_notable_change),
)


def generate_insights(record: DailyRecord, deltas: DeltaSet, baselines: BaselineSet) -> List[InsightCard]:
    """
    Generate the insight cards for a day.

    Args:
        record: The daily record, conventionally today.
        deltas: Deltas of the record against the baselines.
        baselines: Baselines the deltas were computed from. A delta can only be present
            when its baseline is, so the detectors read the deltas alone.

    Returns:
        Ordered list of at most InsightConfig.MAX_CARDS cards.
    """
    confidence = determine_confidence(record)

    insights: List[InsightCard] = []
    for predicate, builder in DETECTORS:
        if not predicate(deltas):
            continue
        card = builder(deltas, confidence)
        if card is not None:
            insights.append(card)

    logger.debug(f"Generated {len(insights)} insights for {record.id} with {confidence.value} confidence")
    return insights[: InsightConfig.MAX_CARDS]
