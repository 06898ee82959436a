"""Tests for the per-trainee fatigue history."""

import threading
from datetime import timedelta

import pytest

from ironplan.errors import ValidationError
from ironplan.periodization import FatigueHistory


@pytest.fixture
def history(monday):
    history = FatigueHistory()
    for week, score in enumerate([4.0, 8.5, 7.5, 8.2, 9.1]):
        history.record('athlete-1', monday + timedelta(weeks=week), score, recovery_score=5.0)
    return history


class TestConsecutiveWeeks:
    def test_counts_trailing_run_above_threshold(self, history):
        assert history.consecutive_high_fatigue_weeks('athlete-1', 8.0) == 2
        assert history.consecutive_high_fatigue_weeks('athlete-1', 7.0) == 4
        assert history.consecutive_high_fatigue_weeks('athlete-1', 9.5) == 0

    def test_gap_between_weeks_ends_the_run(self, monday):
        history = FatigueHistory()
        for week in (0, 10, 20):
            history.record('a', monday + timedelta(weeks=week), 9.0)
        assert history.consecutive_high_fatigue_weeks('a', 7.0) == 1

    def test_missing_week_inside_run(self, monday):
        history = FatigueHistory()
        for week in (0, 1, 3, 4):
            history.record('a', monday + timedelta(weeks=week), 9.0)
        assert history.consecutive_high_fatigue_weeks('a', 7.0) == 2
        assert history.latest_state('a', threshold=7.0).consecutive_high_fatigue_weeks == 2

    def test_unknown_trainee(self, history):
        assert history.consecutive_high_fatigue_weeks('nobody', 5.0) == 0

    def test_rerecording_a_week_replaces_it(self, history, monday):
        history.record('athlete-1', monday + timedelta(weeks=4), 3.0)
        assert len(history.records('athlete-1')) == 5
        assert history.consecutive_high_fatigue_weeks('athlete-1', 8.0) == 0

    def test_out_of_order_records_are_sorted(self, monday):
        history = FatigueHistory()
        history.record('a', monday + timedelta(weeks=1), 9.0)
        history.record('a', monday, 2.0)
        assert [r.fatigue_score for r in history.records('a')] == [2.0, 9.0]

    def test_invalid_score(self, monday):
        with pytest.raises(ValidationError):
            FatigueHistory().record('a', monday, -1.0)


class TestLatestState:
    def test_latest_reading(self, history):
        state = history.latest_state('athlete-1', threshold=8.0)
        assert state.current_fatigue == 9.1
        assert state.recovery_score == 5.0
        assert state.consecutive_high_fatigue_weeks == 2

    def test_neutral_defaults_without_history(self):
        state = FatigueHistory().latest_state('new-trainee', threshold=7.0)
        assert state.current_fatigue == 3.0
        assert state.recovery_score is None
        assert state.consecutive_high_fatigue_weeks == 0


class TestPersistence:
    def test_save_and_load(self, history, tmp_path):
        path = tmp_path / 'fatigue.yaml'
        history.save(path)

        loaded = FatigueHistory.load(path)
        assert loaded.records('athlete-1') == history.records('athlete-1')

    def test_load_missing_file_is_empty(self, tmp_path):
        history = FatigueHistory.load(tmp_path / 'missing.yaml')
        assert history.records('athlete-1') == []

    def test_save_without_path(self, history):
        with pytest.raises(ValueError):
            history.save()


class TestConcurrentWriters:
    def test_parallel_writers_keep_every_week(self, monday):
        history = FatigueHistory()

        def write(offset):
            for week in range(offset, 40, 4):
                with history.writer('athlete-1'):
                    history.record('athlete-1', monday + timedelta(weeks=week), 5.0)

        threads = [threading.Thread(target=write, args=(i,)) for i in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        records = history.records('athlete-1')
        assert len(records) == 40
        assert records == sorted(records, key=lambda r: r.week_start)
