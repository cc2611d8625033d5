"""
Unit tests for the insight generator.

These tests cover the confidence scoring, each of the three detectors, and
complete runs of the engine from a batch of records to insight cards.
"""

import datetime as dt

import pytest

from tests import TODAY, make_history
from vital_brief.service.insight_analysis.baselining.baseline_calculator import compute_baselines
from vital_brief.service.insight_analysis.common.constants import InsightConfig
from vital_brief.service.insight_analysis.common.data_models import (
    BaselineSet,
    Confidence,
    DailyRecord,
    DeltaSet,
    InsightType,
)
from vital_brief.service.insight_analysis.deltas.delta_calculator import compute_deltas
from vital_brief.service.insight_analysis.insights.insight_generator import (
    DETECTORS,
    determine_confidence,
    find_largest_delta,
    generate_insights,
)


def _run_engine(records):
    today = max(records, key=lambda record: record.date)
    baselines = compute_baselines(records)
    deltas = compute_deltas(today, baselines)
    return generate_insights(today, deltas, baselines)


def _card(insights, insight_type):
    return next((card for card in insights if card.type == insight_type), None)


class TestConfidence:
    @pytest.mark.parametrize(
        "sleep, hrv, rhr, expected",
        [
            (420, 45, 58, Confidence.HIGH),
            (420, 45, None, Confidence.MEDIUM),
            (None, 45, 58, Confidence.MEDIUM),
            (420, None, 58, Confidence.MEDIUM),
            (420, None, None, Confidence.LOW),
            (None, None, 58, Confidence.LOW),
            (None, None, None, Confidence.LOW),
        ],
    )
    def test_confidence_from_core_metric_presence(self, sleep, hrv, rhr, expected):
        record = DailyRecord(date=TODAY, sleep_minutes=sleep, hrv_ms=hrv, resting_hr_bpm=rhr)
        assert determine_confidence(record) == expected

    def test_other_metrics_do_not_count(self):
        record = DailyRecord(date=TODAY, steps=9000, active_energy_kcal=600, workout_minutes=45)
        assert determine_confidence(record) == Confidence.LOW

    def test_uses_record_presence_not_delta_presence(self):
        record = DailyRecord(date=TODAY, sleep_minutes=420, hrv_ms=45, resting_hr_bpm=58)

        insights = generate_insights(record, DeltaSet(steps=5000.0), BaselineSet())

        assert [card.confidence for card in insights] == [Confidence.HIGH]


class TestRecoverySignals:
    def test_all_three_signals(self):
        record = DailyRecord(date=TODAY, sleep_minutes=460, hrv_ms=50, resting_hr_bpm=52)
        deltas = DeltaSet(sleep_minutes=40, hrv_ms=5, resting_hr_bpm=-6)

        card = _card(generate_insights(record, deltas, BaselineSet()), InsightType.RECOVERY_SIGNALS)

        assert card is not None
        assert card.title == "Recovery Signals"
        assert card.explanation == (
            "Today shows positive recovery markers: improved sleep, elevated HRV, lower resting HR "
            "vs. your 28-day baseline."
        )
        assert card.confidence == Confidence.HIGH

    def test_thresholds_are_strict(self):
        record = DailyRecord(date=TODAY, sleep_minutes=450, hrv_ms=47, resting_hr_bpm=55)
        deltas = DeltaSet(sleep_minutes=30, hrv_ms=2, resting_hr_bpm=-3)

        insights = generate_insights(record, deltas, BaselineSet())

        assert _card(insights, InsightType.RECOVERY_SIGNALS) is None

    def test_no_card_when_a_core_delta_is_missing(self):
        record = DailyRecord(date=TODAY, sleep_minutes=480, hrv_ms=60)
        deltas = DeltaSet(sleep_minutes=60, hrv_ms=15, resting_hr_bpm=None)

        insights = generate_insights(record, deltas, BaselineSet())

        assert _card(insights, InsightType.RECOVERY_SIGNALS) is None
        assert _card(insights, InsightType.NOTABLE_CHANGE) is not None

    def test_single_signal(self):
        record = DailyRecord(date=TODAY, sleep_minutes=420, hrv_ms=45, resting_hr_bpm=50)
        deltas = DeltaSet(sleep_minutes=0, hrv_ms=0, resting_hr_bpm=-8)

        card = _card(generate_insights(record, deltas, BaselineSet()), InsightType.RECOVERY_SIGNALS)

        assert card.explanation == "Today shows positive recovery markers: lower resting HR vs. your 28-day baseline."


class TestActivityLoad:
    def test_higher_activity(self):
        deltas = DeltaSet(steps=3000, active_energy_kcal=200)

        card = _card(generate_insights(DailyRecord(date=TODAY), deltas, BaselineSet()), InsightType.ACTIVITY_LOAD)

        assert card.title == "Activity & Load"
        assert card.explanation == "Your activity today shows higher step count, more energy burn compared to baseline."

    def test_lower_activity(self):
        deltas = DeltaSet(steps=-3000, active_energy_kcal=-200)

        card = _card(generate_insights(DailyRecord(date=TODAY), deltas, BaselineSet()), InsightType.ACTIVITY_LOAD)

        assert card.explanation == "Your activity today shows lower step count, less energy burn compared to baseline."

    def test_mixed_directions_are_reported_as_is(self):
        deltas = DeltaSet(steps=2500, active_energy_kcal=-150)

        card = _card(generate_insights(DailyRecord(date=TODAY), deltas, BaselineSet()), InsightType.ACTIVITY_LOAD)

        assert card.explanation == "Your activity today shows higher step count, less energy burn compared to baseline."

    def test_no_card_within_thresholds(self):
        deltas = DeltaSet(steps=2000, active_energy_kcal=-100)

        insights = generate_insights(DailyRecord(date=TODAY), deltas, BaselineSet())

        assert _card(insights, InsightType.ACTIVITY_LOAD) is None

    def test_requires_both_deltas(self):
        deltas = DeltaSet(steps=9000, active_energy_kcal=None)

        insights = generate_insights(DailyRecord(date=TODAY), deltas, BaselineSet())

        assert _card(insights, InsightType.ACTIVITY_LOAD) is None


class TestNotableChange:
    def test_largest_absolute_delta_wins(self):
        deltas = DeltaSet(sleep_minutes=-120, steps=100, hrv_ms=3)

        card = _card(generate_insights(DailyRecord(date=TODAY), deltas, BaselineSet()), InsightType.NOTABLE_CHANGE)

        assert card.title == "Notable Change"
        assert card.explanation == "Your sleep is noticeably lower today vs. your recent average."

    def test_positive_delta_is_higher(self):
        deltas = DeltaSet(workout_minutes=45)

        card = _card(generate_insights(DailyRecord(date=TODAY), deltas, BaselineSet()), InsightType.NOTABLE_CHANGE)

        assert card.explanation == "Your workouts is noticeably higher today vs. your recent average."

    def test_zero_delta_is_higher(self):
        assert find_largest_delta(DeltaSet(hrv_ms=0.0)) == ("hrv_ms", 0.0)
        card = generate_insights(DailyRecord(date=TODAY), DeltaSet(hrv_ms=0.0), BaselineSet())[0]
        assert "HRV is noticeably higher" in card.explanation

    def test_ties_go_to_the_first_metric(self):
        deltas = DeltaSet(resting_hr_bpm=-10, steps=10, active_energy_kcal=10)

        assert find_largest_delta(deltas) == ("resting_hr_bpm", -10)

    def test_no_deltas_no_card(self):
        assert find_largest_delta(DeltaSet()) is None
        assert generate_insights(DailyRecord(date=TODAY), DeltaSet(), BaselineSet()) == []


class TestGenerateInsights:
    def test_order_and_cap(self):
        record = DailyRecord(date=TODAY, sleep_minutes=500, hrv_ms=55, resting_hr_bpm=50)
        deltas = DeltaSet(
            sleep_minutes=80, hrv_ms=10, resting_hr_bpm=-8, steps=4000, active_energy_kcal=300, workout_minutes=20
        )

        insights = generate_insights(record, deltas, BaselineSet())

        assert [card.type for card in insights] == [
            InsightType.RECOVERY_SIGNALS,
            InsightType.ACTIVITY_LOAD,
            InsightType.NOTABLE_CHANGE,
        ]
        assert len(insights) <= InsightConfig.MAX_CARDS
        assert insights[2].explanation == "Your steps is noticeably higher today vs. your recent average."

    def test_detectors_are_fixed_in_order(self):
        assert len(DETECTORS) == 3

    def test_all_absent_record_gives_no_insights(self):
        record = DailyRecord(date=TODAY)
        baselines = compute_baselines(make_history())

        assert generate_insights(record, compute_deltas(record, baselines), baselines) == []

    def test_deterministic(self, history):
        assert _run_engine(history) == _run_engine(history)


class TestScenarios:
    def test_recovery_scenario_with_boundary_deltas(self):
        records = make_history()
        records[0] = DailyRecord(date=TODAY, sleep_minutes=450, hrv_ms=48, resting_hr_bpm=55, steps=8000,
                                 active_energy_kcal=500, workout_minutes=30, workout_count=1)

        baselines = compute_baselines(records)
        deltas = compute_deltas(records[0], baselines)
        insights = generate_insights(records[0], deltas, baselines)

        assert (deltas.sleep_minutes, deltas.hrv_ms, deltas.resting_hr_bpm) == (30, 3, -3)
        recovery = _card(insights, InsightType.RECOVERY_SIGNALS)
        assert recovery.explanation == "Today shows positive recovery markers: elevated HRV vs. your 28-day baseline."
        assert all(card.confidence == Confidence.HIGH for card in insights)

    def test_recovery_scenario_all_signals(self):
        records = make_history()
        records[0] = DailyRecord(date=TODAY, sleep_minutes=451, hrv_ms=48, resting_hr_bpm=54)

        insights = _run_engine(records)

        recovery = _card(insights, InsightType.RECOVERY_SIGNALS)
        assert "improved sleep, elevated HRV, lower resting HR" in recovery.explanation
        assert recovery.confidence == Confidence.HIGH
        assert _card(insights, InsightType.NOTABLE_CHANGE).explanation.startswith("Your sleep is noticeably higher")

    def test_short_sleep_only_batch(self):
        records = [DailyRecord(date=TODAY - dt.timedelta(days=i), sleep_minutes=420 + i) for i in range(5)]

        baselines = compute_baselines(records)
        deltas = compute_deltas(records[0], baselines)

        assert baselines == BaselineSet()
        assert deltas == DeltaSet()
        assert generate_insights(records[0], deltas, baselines) == []

    def test_activity_scenario(self):
        record = DailyRecord(date=TODAY, steps=5500, active_energy_kcal=650)
        baselines = BaselineSet(steps=8000, active_energy_kcal=500)
        deltas = compute_deltas(record, baselines)

        insights = generate_insights(record, deltas, baselines)

        assert [card.type for card in insights] == [InsightType.ACTIVITY_LOAD, InsightType.NOTABLE_CHANGE]
        assert insights[0].explanation == (
            "Your activity today shows more energy burn, lower step count compared to baseline."
        )
        assert insights[1].explanation == "Your steps is noticeably lower today vs. your recent average."
        assert all(card.confidence == Confidence.LOW for card in insights)
