"""
Delta calculator.

Compares a daily record against a baseline set, metric by metric. A delta only
exists when both the measured value and its baseline exist.
"""

from typing import List, Optional, Sequence

from vital_brief.service.insight_analysis.common.constants import Metrics
from vital_brief.service.insight_analysis.common.data_models import (
    BaselineSet,
    DailyRecord,
    DailyRecordWithDeltas,
    DeltaSet,
)


def _difference(value: Optional[float], baseline: Optional[float]) -> Optional[float]:
    if value is None or baseline is None:
        return None
    return value - baseline


def compute_deltas(record: DailyRecord, baselines: BaselineSet) -> DeltaSet:
    """
    Calculate the signed difference between a record and the baselines.

    Args:
        record: The daily record to compare, conventionally today.
        baselines: Baselines computed over the batch the record belongs to.

    Returns:
        DeltaSet where each field is record - baseline, or None if either side is absent.
    """
    return DeltaSet(
        **{
            metric: _difference(record.metric_value(metric), baselines.metric_value(metric))
            for metric in Metrics.ALL
        }
    )


def compute_deltas_for_records(
    records: Sequence[DailyRecord], baselines: BaselineSet
) -> List[DailyRecordWithDeltas]:
    """Pair every record with its deltas against the same baseline set, keeping the input order."""
    return [DailyRecordWithDeltas(record=record, deltas=compute_deltas(record, baselines)) for record in records]
