"""
Markdown rendering of daily briefs and trends.

This module contains the helpers used to present computed baselines, deltas
and insights as a Markdown report.
"""

import datetime as dt
from typing import List, Optional, Sequence

from vital_brief.service.insight_analysis.common.constants import Metrics
from vital_brief.service.insight_analysis.common.data_models import DailyRecordWithDeltas, TodayBrief

MISSING = "—"

METRIC_LABELS = {
    Metrics.SLEEP_MINUTES: "Sleep",
    Metrics.HRV_MS: "HRV",
    Metrics.RESTING_HR_BPM: "Resting HR",
    Metrics.STEPS: "Steps",
    Metrics.ACTIVE_ENERGY_KCAL: "Active Energy",
    Metrics.WORKOUT_MINUTES: "Workouts",
}

METRIC_DECIMALS = {
    Metrics.SLEEP_MINUTES: 0,
    Metrics.HRV_MS: 1,
    Metrics.RESTING_HR_BPM: 0,
    Metrics.STEPS: 0,
    Metrics.ACTIVE_ENERGY_KCAL: 0,
    Metrics.WORKOUT_MINUTES: 0,
}


def format_value(value: Optional[float], decimals: int = 0) -> str:
    """
    Format a metric value with thousands separators.

    Args:
        value: Value to format, possibly absent.
        decimals: Number of decimal places.

    Returns:
        Formatted value, or an em dash if the value is absent.
    """
    if value is None:
        return MISSING
    return f"{value:,.{decimals}f}"


def format_delta(delta: Optional[float], decimals: int = 0) -> str:
    """Format a delta with an explicit sign for non-negative values."""
    if delta is None:
        return MISSING
    sign = "+" if delta >= 0 else ""
    return f"{sign}{format_value(delta, decimals)}"


def _format_timestamp(timestamp: Optional[dt.datetime]) -> str:
    if timestamp is None:
        return "never"
    return timestamp.strftime("%Y-%m-%d %H:%M")


def format_markdown(brief: TodayBrief) -> str:
    """
    Formats a daily brief into a Markdown report.

    Args:
        brief: The computed brief for the most recent day.

    Returns:
        A string containing the formatted Markdown report.
    """
    record = brief.record
    md: List[str] = [f"# Daily Brief: {record.date.strftime('%A')}, {record.id}\n"]
    md.append(f"_Last sync: {_format_timestamp(brief.last_sync)}_\n")

    md += [
        "## Today vs. Baseline",
        f"| Metric | Today | {brief.baselines.lookback_days}-day Median | Delta |",
        "|--------|-------|------------------|-------|",
    ]
    for metric in Metrics.ALL:
        decimals = METRIC_DECIMALS[metric]
        unit = Metrics.UNITS[metric]
        md.append(
            f"| {METRIC_LABELS[metric]} ({unit}) "
            f"| {format_value(record.metric_value(metric), decimals)} "
            f"| {format_value(brief.baselines.metric_value(metric), decimals)} "
            f"| {format_delta(brief.deltas.metric_value(metric), decimals)} |"
        )
    md.append(f"| Workout Count | {record.workout_count} | {MISSING} | {MISSING} |")
    md.append("")

    md.append("## Insights\n")
    if brief.insights:
        for card in brief.insights:
            md.append(f"### {card.title} ({card.confidence.value} confidence)")
            md.append(card.explanation)
            md.append("")
    else:
        md.append("- Not enough data for insights yet.")
        md.append("")

    return "\n".join(md)


def format_trends_markdown(trends: Sequence[DailyRecordWithDeltas]) -> str:
    """
    Formats the per-day deltas of a history into a Markdown table.

    Args:
        trends: Records with their deltas, in display order.

    Returns:
        A string containing the formatted Markdown table.
    """
    if not trends:
        return "# Trends\n\nNo data available."

    md: List[str] = [
        "# Trends\n",
        "| Day | " + " | ".join(f"{METRIC_LABELS[metric]} Δ" for metric in Metrics.ALL) + " |",
        "|-----|" + "|".join(["-----" for _ in Metrics.ALL]) + "|",
    ]
    for item in trends:
        cells = [format_delta(item.deltas.metric_value(metric), METRIC_DECIMALS[metric]) for metric in Metrics.ALL]
        md.append(f"| {item.record.date.strftime('%a %m/%d')} | " + " | ".join(cells) + " |")

    return "\n".join(md)
