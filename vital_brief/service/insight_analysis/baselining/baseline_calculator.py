"""
Baseline calculator for daily health metrics.

This module provides functionality for calculating personal baselines from a
window of daily records, allowing for meaningful comparison of the most recent
day against a user's typical values.
"""

from typing import Dict, List, Optional, Sequence

from loguru import logger

from vital_brief.service.insight_analysis.common.constants import BaselineConfig, Metrics
from vital_brief.service.insight_analysis.common.data_models import BaselineSet, DailyRecord
from vital_brief.service.insight_analysis.common.statistics import median


def collect_metric_values(records: Sequence[DailyRecord], metric: str) -> List[float]:
    """
    Collect all measured values of one metric across a batch of records.

    Args:
        records: Daily records, in any order.
        metric: Metric field name (one of Metrics.ALL).

    Returns:
        List of the non-absent values.
    """
    return [value for value in (record.metric_value(metric) for record in records) if value is not None]


def compute_baselines(
    records: Sequence[DailyRecord],
    threshold: int = BaselineConfig.MIN_DAYS_FOR_BASELINE,
    lookback_days: int = BaselineConfig.DEFAULT_LOOKBACK_DAYS,
) -> BaselineSet:
    """
    Calculate the median baseline of every metric over a batch of daily records.

    Each metric is processed independently: a baseline is only established when
    at least `threshold` records carry a value for it, otherwise it stays absent.
    An empty batch yields a baseline set with every field absent.

    Args:
        records: Batch of daily records (order is irrelevant).
        threshold: Minimum number of values needed to establish a baseline.
        lookback_days: Size of the window the batch represents, kept for reference.

    Returns:
        BaselineSet with one optional median per metric.
    """
    baselines: Dict[str, Optional[float]] = {}

    for metric in Metrics.ALL:
        values = collect_metric_values(records, metric)

        if len(values) >= threshold:
            baselines[metric] = median(values)
        else:
            logger.debug(f"Not enough {metric} data for a baseline: {len(values)} of {threshold} required")
            baselines[metric] = None

    return BaselineSet(lookback_days=lookback_days, min_samples=threshold, **baselines)
