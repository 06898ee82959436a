"""Tests for full plan generation and text output."""

from datetime import timedelta

import pytest

from ironplan import generate_plan
from ironplan.errors import ValidationError
from ironplan.models import (
    Assessment,
    DeloadTiming,
    FatigueState,
    ProgressionType,
    TrainingGoal,
    TrainingLevel,
)
from ironplan.periodization import PeriodizationPlanner


class TestGeneratePlan:
    def test_plan_covers_every_week(self, monday):
        plan = generate_plan('advanced', 'strength', 5, monday, 10)
        assert plan.level is TrainingLevel.ADVANCED
        assert plan.goal is TrainingGoal.STRENGTH
        assert plan.duration_weeks == 10
        assert [w.week_number for w in plan.micro_cycles] == list(range(1, 11))
        assert plan.start_date == monday
        assert plan.end_date == monday + timedelta(days=69)

    def test_mesocycles_follow_configured_duration(self, monday):
        plan = generate_plan('advanced', 'strength', None, monday, 10)
        assert [len(m.micro_cycles) for m in plan.meso_cycles] == [4, 4, 2]
        assert [m.number for m in plan.meso_cycles] == [1, 2, 3]
        assert plan.meso_cycles[0].includes_deload
        assert not plan.meso_cycles[2].includes_deload
        assert plan.meso_cycles[2].deload_strategy is None
        assert plan.meso_cycles[1].start_date == monday + timedelta(days=28)

    def test_plan_carries_config_details(self, monday):
        plan = generate_plan('advanced', 'strength', 5, monday, 4)
        assert plan.frequency == 5
        assert plan.progression_model.type is ProgressionType.WAVE
        assert plan.progression_model.autoregulated
        assert plan.progression_model.fatigue_threshold == 9
        assert plan.nutrition_strategy.protein_per_kg == 2.2
        assert 'cluster_sets' in plan.special_techniques

    def test_assessment_is_passed_through(self, monday):
        assessment = Assessment(body_weight_kg=82.5, strength_baseline={'back_squat': 140})
        plan = generate_plan('intermediate', 'strength', 4, monday, 6, assessment=assessment)
        assert plan.assessment is assessment

    def test_fatigue_personalizes_deload_strategy(self, catalog, monday):
        state = FatigueState(current_fatigue=10, recovery_score=3)
        plan = generate_plan('intermediate', 'strength', 4, monday, 6, fatigue_state=state)
        strategy = plan.meso_cycles[0].deload_strategy
        base = catalog.lookup('intermediate', 'strength').deload_strategy
        assert strategy.timing is DeloadTiming.REACTIVE
        assert strategy.volume_reduction == base.volume_reduction + 10
        assert strategy.duration_days == base.duration_days + 4
        assert strategy.notes.startswith("Very high fatigue")

    def test_without_fatigue_reading_uses_config_strategy(self, catalog, monday):
        plan = generate_plan('intermediate', 'strength', 4, monday, 6)
        assert plan.meso_cycles[0].deload_strategy == catalog.lookup('intermediate', 'strength').deload_strategy

    def test_invalid_level(self, monday):
        with pytest.raises(ValidationError):
            generate_plan('pro', 'strength', 4, monday, 4)


class TestFormatPlanText:
    def test_contains_header_and_weeks(self, monday):
        planner = PeriodizationPlanner()
        text = planner.format_plan_text(planner.generate_plan('advanced', 'strength', 5, monday, 4))
        assert "TRAINING PLAN: ADVANCED / STRENGTH" in text
        assert "Week 1 - Hypertrophy" in text
        assert "Week 4 - Deload [DELOAD]" in text
        assert "Deload: combined" in text
