"""Tests for microcycle generation and deload scheduling."""

from dataclasses import replace
from datetime import timedelta

import pytest

from ironplan.errors import ConfigIntegrityError, ValidationError
from ironplan.models import (
    AutoregulationStrategy,
    DeloadType,
    FatigueState,
    TrainingGoal,
    TrainingLevel,
    TrainingPhase,
)
from ironplan.periodization import CycleGenerator, PlanRequest
from ironplan.periodization.cycles import NEUTRAL_RECOVERY
from ironplan.settings import EngineSettings

P = TrainingPhase


def generate(level, goal, weeks, monday, fatigue_state=None, settings=None, frequency=None, config=None):
    generator = CycleGenerator(settings=settings)
    request = PlanRequest(level, goal, monday, weeks, frequency=frequency)
    return generator.generate(request, fatigue_state, config)


class TestScheduling:
    def test_advanced_strength_four_weeks(self, monday):
        weeks = generate('advanced', 'strength', 4, monday)
        assert [w.phase for w in weeks] == [P.HYPERTROPHY, P.STRENGTH, P.POWER, P.DELOAD]
        assert [w.is_deload for w in weeks] == [False, False, False, True]
        assert [w.volume for w in weeks] == [20, 17, 12, 7]
        assert weeks[3].volume < weeks[0].volume

    @pytest.mark.parametrize('level', list(TrainingLevel))
    @pytest.mark.parametrize('goal', list(TrainingGoal))
    def test_every_config_generates_requested_weeks(self, catalog, monday, level, goal):
        config = catalog.lookup(level, goal)
        weeks = generate(level, goal, 16, monday)

        assert [w.week_number for w in weeks] == list(range(1, 17))
        for week in weeks:
            assert week.is_deload == (week.week_number % config.deload_frequency == 0)
            assert (week.phase is P.DELOAD) == week.is_deload
            assert not week.forced_deload

        training = [w for w in weeks if not w.is_deload]
        for week in weeks:
            if week.is_deload:
                assert week.volume < min(w.volume for w in training)

    @pytest.mark.parametrize('level', list(TrainingLevel))
    @pytest.mark.parametrize('goal', list(TrainingGoal))
    def test_loads_stay_inside_config_ranges(self, catalog, monday, level, goal):
        config = catalog.lookup(level, goal)
        for week in generate(level, goal, 12, monday):
            assert week.volume <= config.volume_range[1]
            assert week.intensity <= config.intensity_range[1]
            assert 1 <= week.rpe_range[0] <= week.rpe_range[1] <= 10
            assert 0 <= week.rir_range[0] <= week.rir_range[1]
            if not week.is_deload:
                assert config.volume_range[0] <= week.volume
                assert config.intensity_range[0] <= week.intensity

    def test_phase_sequence_restarts_each_mesocycle(self, monday):
        # Advanced strength: 4-week mesocycles, deload every 4 weeks
        weeks = generate('advanced', 'strength', 8, monday)
        assert [w.phase for w in weeks[4:]] == [P.HYPERTROPHY, P.STRENGTH, P.POWER, P.DELOAD]

    def test_off_schedule_deload_slot_runs_as_maintenance(self, monday):
        # Intermediate hypertrophy: five phases in a six-week mesocycle
        weeks = generate('intermediate', 'hypertrophy', 6, monday)
        assert weeks[4].phase is P.MAINTENANCE
        assert not weeks[4].is_deload
        assert weeks[5].phase is P.DELOAD

    def test_weeks_are_consecutive(self, monday):
        weeks = generate('beginner', 'general_fitness', 5, monday)
        for i, week in enumerate(weeks):
            assert week.start_date == monday + timedelta(days=7 * i)
            assert week.end_date == week.start_date + timedelta(days=6)

    def test_week_names_and_notes(self, monday):
        week = generate('advanced', 'strength', 1, monday)[0]
        assert week.name == "Week 1 - Hypertrophy"
        assert "hypertrophy" in week.notes


class TestWeekDetails:
    def test_deload_uses_recommended_type(self, catalog, monday):
        # Advanced strength deloads combined: 60% of min volume, 80% of min intensity
        config = catalog.lookup('advanced', 'strength')
        assert config.recommended_deload_type is DeloadType.COMBINED
        deload = generate('advanced', 'strength', 4, monday)[3]
        assert deload.volume == 7
        assert deload.intensity == 60

    def test_frequency_deload_cuts_one_day(self, catalog, monday):
        config = next(c for c in catalog if c.recommended_deload_type is DeloadType.FREQUENCY)
        weeks = generate(config.level, config.goal, config.deload_frequency, monday)
        assert weeks[-1].frequency == weeks[0].frequency - 1

    def test_requested_frequency_is_clamped(self, monday):
        # Advanced strength trains 4-6 days
        assert generate('advanced', 'strength', 1, monday, frequency=2)[0].frequency == 4
        assert generate('advanced', 'strength', 1, monday, frequency=7)[0].frequency == 6
        assert generate('advanced', 'strength', 1, monday, frequency=5)[0].frequency == 5

    def test_default_frequency_is_range_midpoint(self, monday):
        assert generate('advanced', 'strength', 1, monday)[0].frequency == 5

    def test_config_tempo_and_rest(self, monday):
        week = generate('intermediate', 'strength', 1, monday)[0]
        assert week.tempo == "3-0-1-0"
        assert week.rest_guidelines.compound == (90, 150)
        assert week.rest_guidelines.isolation == (60, 120)

    def test_default_tempo_and_rest(self, monday):
        week = generate('beginner', 'strength', 1, monday)[0]
        assert week.tempo == "2-0-2-0"
        assert week.rest_guidelines.compound == (60, 120)
        assert week.rest_guidelines.isolation == (30, 90)

    def test_beginners_get_no_techniques(self, monday):
        for week in generate('beginner', 'hypertrophy', 8, monday):
            assert week.technique_emphasis == ()

    def test_techniques_are_capped_by_level(self, catalog, monday):
        caps = {TrainingLevel.INTERMEDIATE: 2, TrainingLevel.ADVANCED: 3, TrainingLevel.ELITE: 4}
        for level, cap in caps.items():
            config = catalog.lookup(level, 'hypertrophy')
            for week in generate(level, 'hypertrophy', 6, monday):
                assert len(week.technique_emphasis) <= cap
                assert set(week.technique_emphasis) <= set(config.special_techniques)

    def test_hypertrophy_goal_adds_goal_focus(self, monday):
        week = generate('intermediate', 'hypertrophy', 1, monday)[0]
        assert 'volume' in week.primary_focus
        assert len(week.primary_focus) == len(set(week.primary_focus))


class TestAutoregulatedDeload:
    """Intermediate strength: fatigue-based, threshold 8, deload every 6 weeks."""

    def test_high_fatigue_forces_one_early_deload(self, monday):
        weeks = generate('intermediate', 'strength', 12, monday, FatigueState(current_fatigue=9))
        forced = [w for w in weeks if w.forced_deload]
        assert [w.week_number for w in forced] == [1]
        assert weeks[0].is_deload and weeks[0].phase is P.DELOAD
        assert weeks[5].is_deload and not weeks[5].forced_deload

    def test_substitute_mode_keeps_the_phase_sequence(self, monday):
        weeks = generate('intermediate', 'strength', 6, monday, FatigueState(current_fatigue=9))
        assert [w.phase for w in weeks] == [
            P.DELOAD, P.STRENGTH, P.STRENGTH, P.POWER, P.MAINTENANCE, P.DELOAD,
        ]

    def test_insert_mode_shifts_the_phase_sequence(self, monday):
        settings = EngineSettings(forced_deload_mode='insert')
        weeks = generate('intermediate', 'strength', 6, monday, FatigueState(current_fatigue=9),
                         settings=settings)
        assert [w.phase for w in weeks] == [
            P.DELOAD, P.HYPERTROPHY, P.STRENGTH, P.STRENGTH, P.POWER, P.DELOAD,
        ]

    def test_moderate_fatigue_does_not_force(self, monday):
        weeks = generate('intermediate', 'strength', 6, monday, FatigueState(current_fatigue=5))
        assert not any(w.forced_deload for w in weeks)

    def test_long_high_fatigue_run_forces(self, monday):
        state = FatigueState(current_fatigue=5, recovery_score=8, consecutive_high_fatigue_weeks=3)
        weeks = generate('intermediate', 'strength', 6, monday, state)
        assert weeks[0].forced_deload

    def test_stored_percent_reading_is_normalized(self, monday):
        """A stored 90/100 reading is 9.0, above the threshold of 8."""
        weeks = generate('intermediate', 'strength', 6, monday, FatigueState.from_stored(90, 100))
        assert weeks[0].forced_deload

    def test_other_strategies_ignore_fatigue(self, catalog, monday):
        config = catalog.lookup('advanced', 'strength')
        assert config.autoregulation is AutoregulationStrategy.PERFORMANCE_BASED
        weeks = generate('advanced', 'strength', 4, monday, FatigueState(current_fatigue=10))
        assert not any(w.forced_deload for w in weeks)

    def test_forced_deload_lands_on_first_unscheduled_week(self, catalog, monday):
        config = replace(catalog.lookup('intermediate', 'strength'), deload_frequency=1)
        weeks = generate('intermediate', 'strength', 3, monday, FatigueState(current_fatigue=9),
                         config=config)
        assert all(w.is_deload for w in weeks)
        assert not any(w.forced_deload for w in weeks)


class TestGenerationErrors:
    @pytest.mark.parametrize('field, value', [
        ('meso_cycle_duration', 0),
        ('deload_frequency', 0),
        ('phase_sequence', ()),
        ('intensity_range', (90, 70)),
    ])
    def test_malformed_config(self, catalog, monday, field, value):
        config = replace(catalog.lookup('beginner', 'strength'), **{field: value})
        with pytest.raises(ConfigIntegrityError):
            generate('beginner', 'strength', 4, monday, config=config)

    def test_zero_weeks(self, monday):
        with pytest.raises(ConfigIntegrityError):
            generate('beginner', 'strength', 0, monday)

    def test_bad_frequency(self, monday):
        with pytest.raises(ValidationError):
            PlanRequest('beginner', 'strength', monday, 4, frequency=8)

    @pytest.mark.parametrize('weeks', [4.5, '6', True])
    def test_non_integer_weeks(self, monday, weeks):
        with pytest.raises(ConfigIntegrityError):
            PlanRequest('beginner', 'strength', monday, weeks)


class TestMissingRecoveryReading:
    def test_decider_sees_neutral_recovery(self, catalog, monday):
        generator = CycleGenerator()
        seen = []

        def needs_deload(fatigue, recovery, *args):
            seen.append(recovery)
            return False

        generator.decider.needs_deload = needs_deload
        config = catalog.lookup('intermediate', 'strength')
        assert not generator.autoregulated_deload_due(config, FatigueState(current_fatigue=5))
        assert seen == [NEUTRAL_RECOVERY]
