"""Tests for engine settings loading."""

import pytest

from ironplan.errors import ValidationError
from ironplan.settings import EngineSettings, load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ('IRONPLAN_CONFIG', 'IRONPLAN_LOG_LEVEL',
                 'IRONPLAN_FORCED_DELOAD_MODE', 'IRONPLAN_EXERCISE_CATALOG'):
        monkeypatch.delenv(name, raising=False)


class TestLoadSettings:
    def test_defaults_without_file(self, tmp_path):
        settings = load_settings(tmp_path / 'missing.yaml')
        assert settings == EngineSettings()

    def test_values_from_file(self, tmp_path):
        path = tmp_path / 'engine.yaml'
        path.write_text("recovery_weight: 0.5\nforced_deload_mode: insert\n")
        settings = load_settings(path)
        assert settings.recovery_weight == 0.5
        assert settings.forced_deload_mode == 'insert'

    def test_unknown_keys_are_ignored(self, tmp_path):
        path = tmp_path / 'engine.yaml'
        path.write_text("recovery_weight: 0.4\nturbo_mode: true\n")
        assert load_settings(path).recovery_weight == 0.4

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / 'engine.yaml'
        path.write_text("forced_deload_mode: insert\nlog_level: INFO\n")
        monkeypatch.setenv('IRONPLAN_FORCED_DELOAD_MODE', 'substitute')
        monkeypatch.setenv('IRONPLAN_LOG_LEVEL', 'DEBUG')
        settings = load_settings(path)
        assert settings.forced_deload_mode == 'substitute'
        assert settings.log_level == 'DEBUG'

    def test_config_path_from_environment(self, tmp_path, monkeypatch):
        path = tmp_path / 'custom.yaml'
        path.write_text("max_alternatives: 1\n")
        monkeypatch.setenv('IRONPLAN_CONFIG', str(path))
        assert load_settings().max_alternatives == 1


class TestValidation:
    def test_unknown_forced_deload_mode(self):
        with pytest.raises(ValidationError):
            EngineSettings(forced_deload_mode='append')

    def test_non_positive_fatigue_scale(self):
        with pytest.raises(ValidationError):
            EngineSettings(external_fatigue_scale=0)

    def test_bad_override_is_rejected(self, tmp_path, monkeypatch):
        monkeypatch.setenv('IRONPLAN_FORCED_DELOAD_MODE', 'sometimes')
        with pytest.raises(ValidationError):
            load_settings(tmp_path / 'missing.yaml')
