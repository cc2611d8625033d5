"""
Daily insight analysis framework.

Pure computations over a batch of daily records: median baselines, deltas of a
day against those baselines, and rule-based insight cards.
"""

from vital_brief.service.insight_analysis.baselining.baseline_calculator import compute_baselines
from vital_brief.service.insight_analysis.common.statistics import median
from vital_brief.service.insight_analysis.deltas.delta_calculator import compute_deltas, compute_deltas_for_records
from vital_brief.service.insight_analysis.insights.insight_generator import generate_insights

__all__ = [
    "compute_baselines",
    "compute_deltas",
    "compute_deltas_for_records",
    "generate_insights",
    "median",
]
