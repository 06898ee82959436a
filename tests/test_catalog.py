"""Tests for the level x goal periodization catalog."""

from dataclasses import replace

import pytest

from ironplan.errors import ConfigIntegrityError, MissingConfigError, ValidationError
from ironplan.models import (
    AutoregulationStrategy,
    DeloadType,
    PeriodizationType,
    TrainingGoal,
    TrainingLevel,
    TrainingPhase,
)
from ironplan.periodization.catalog import ConfigCatalog, _parse_catalog, validate_config


class TestCatalogCoverage:
    def test_every_level_goal_pair_has_a_config(self, catalog):
        assert len(catalog) == len(TrainingLevel) * len(TrainingGoal)
        for level in TrainingLevel:
            for goal in TrainingGoal:
                config = catalog.lookup(level, goal)
                assert config.level is level
                assert config.goal is goal

    def test_every_config_is_well_formed(self, catalog):
        for config in catalog:
            validate_config(config)
            assert config.meso_cycle_duration > 0
            assert config.deload_frequency > 0
            assert config.phase_sequence

    def test_lookup_accepts_strings(self, catalog):
        assert catalog.lookup('advanced', 'strength') is catalog.lookup(
            TrainingLevel.ADVANCED, TrainingGoal.STRENGTH)


class TestCatalogValues:
    def test_advanced_strength(self, catalog):
        config = catalog.lookup('advanced', 'strength')
        assert config.periodization_type is PeriodizationType.CONJUGATE
        assert config.meso_cycle_duration == 4
        assert config.deload_frequency == 4
        assert config.phase_sequence == (
            TrainingPhase.HYPERTROPHY,
            TrainingPhase.STRENGTH,
            TrainingPhase.POWER,
            TrainingPhase.DELOAD,
        )
        assert config.fatigue_threshold == 9
        assert config.autoregulation is AutoregulationStrategy.PERFORMANCE_BASED

    def test_intermediate_hypertrophy_threshold(self, catalog):
        assert catalog.fatigue_threshold('intermediate', 'hypertrophy') == 7

    def test_level_defaults_fill_missing_fields(self, catalog):
        config = catalog.lookup('beginner', 'strength')
        assert config.rir_range == (2, 4)
        assert config.rpe_range == (6, 8)
        assert config.special_techniques == ()
        assert config.nutrition_strategy.protein_per_kg == 1.6

    def test_entry_overrides_level_defaults(self, catalog):
        config = catalog.lookup('beginner', 'hypertrophy')
        assert config.rir_range == (1, 3)
        assert config.rpe_range == (7, 9)

    def test_recommended_deload_type_comes_from_strategy(self, catalog):
        config = catalog.lookup('intermediate', 'hypertrophy')
        assert config.recommended_deload_type is DeloadType.VOLUME
        assert config.deload_strategy.volume_reduction == 60


class TestCatalogErrors:
    def test_unknown_level_is_a_validation_error(self, catalog):
        with pytest.raises(ValidationError):
            catalog.lookup('legendary', 'strength')

    def test_unknown_goal_is_a_validation_error(self, catalog):
        with pytest.raises(ValidationError):
            catalog.lookup('beginner', 'juggling')

    def test_unmapped_pair_is_missing_config(self, catalog):
        partial = ConfigCatalog({
            (TrainingLevel.BEGINNER, TrainingGoal.STRENGTH): catalog.lookup('beginner', 'strength'),
        })
        with pytest.raises(MissingConfigError) as excinfo:
            partial.lookup('elite', 'power')
        assert excinfo.value.level == 'elite'
        assert excinfo.value.goal == 'power'

    def test_missing_config_is_a_lookup_error(self, catalog):
        with pytest.raises(LookupError):
            ConfigCatalog({}).lookup('beginner', 'strength')

    def test_malformed_entry_raises_integrity_error(self):
        raw = {'configs': {'beginner': {'strength': {'type': 'linear'}}}}
        with pytest.raises(ConfigIntegrityError):
            _parse_catalog(raw)

    def test_inverted_range_fails_validation(self, catalog):
        config = replace(catalog.lookup('beginner', 'strength'), volume_range=(20, 10))
        with pytest.raises(ConfigIntegrityError):
            validate_config(config)

    def test_empty_phase_sequence_fails_validation(self, catalog):
        config = replace(catalog.lookup('beginner', 'strength'), phase_sequence=())
        with pytest.raises(ConfigIntegrityError):
            validate_config(config)

    def test_catalog_is_read_only(self, catalog):
        with pytest.raises(TypeError):
            catalog._configs[(TrainingLevel.BEGINNER, TrainingGoal.STRENGTH)] = None
