"""
Fatigue History

Per-trainee weekly fatigue log. It feeds the consecutive high-fatigue
counter and the fatigue reading used by autoregulated generation.

Writers for the same trainee are serialized: hold ``writer(trainee_id)``
across read-score-append so the consecutive counter stays correct.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, Iterator, List, Optional

import yaml

from ..models import FatigueState, TrainingResponse, check_range

logger = logging.getLogger(__name__)

ONE_WEEK = timedelta(weeks=1)


@dataclass(frozen=True)
class FatigueRecord:
    week_start: date
    fatigue_score: float
    recovery_score: Optional[float] = None


class FatigueHistory:
    """
    In-memory fatigue log, optionally persisted to YAML.

    Usage:
        history = FatigueHistory.load('fatigue.yaml')
        with history.writer('athlete-1'):
            state = history.latest_state('athlete-1', threshold=7.0)
            ...
            history.record('athlete-1', date(2024, 3, 4), fatigue_score=6.1)
        history.save()
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else None
        self._records: Dict[str, List[FatigueRecord]] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, trainee_id: str) -> threading.RLock:
        with self._registry_lock:
            if trainee_id not in self._locks:
                self._locks[trainee_id] = threading.RLock()
            return self._locks[trainee_id]

    @contextmanager
    def writer(self, trainee_id: str) -> Iterator['FatigueHistory']:
        """Hold the trainee's write lock for a read-score-append sequence."""
        lock = self._lock_for(trainee_id)
        with lock:
            yield self

    def record(
        self,
        trainee_id: str,
        week_start: date,
        fatigue_score: float,
        recovery_score: Optional[float] = None
    ) -> FatigueRecord:
        """
        Append (or replace) the record for a week.

        Args:
            trainee_id: Trainee identifier
            week_start: First day of the logged week
            fatigue_score: Fatigue on the 0-10 scale
            recovery_score: Recovery on the 0-10 scale, if measured

        Returns:
            The stored record
        """
        check_range('fatigue_score', fatigue_score, 0, float('inf'))
        if recovery_score is not None:
            check_range('recovery_score', recovery_score, 0, 10)

        entry = FatigueRecord(week_start, fatigue_score, recovery_score)
        with self._lock_for(trainee_id):
            records = [r for r in self._records.get(trainee_id, []) if r.week_start != week_start]
            records.append(entry)
            records.sort(key=lambda r: r.week_start)
            self._records[trainee_id] = records

        logger.debug(f"Recorded fatigue {fatigue_score:.2f} for {trainee_id} week of {week_start}")
        return entry

    def records(self, trainee_id: str) -> List[FatigueRecord]:
        with self._lock_for(trainee_id):
            return list(self._records.get(trainee_id, []))

    def consecutive_high_fatigue_weeks(self, trainee_id: str, threshold: float) -> int:
        """
        Count the most recent run of adjacent weeks with fatigue above threshold.

        A missing week ends the run.
        """
        count = 0
        later = None
        for entry in reversed(self.records(trainee_id)):
            if entry.fatigue_score <= threshold:
                break
            if later is not None and later.week_start - entry.week_start != ONE_WEEK:
                break
            count += 1
            later = entry
        return count

    def latest_state(
        self,
        trainee_id: str,
        threshold: Optional[float] = None,
        training_response: Optional[TrainingResponse] = None
    ) -> FatigueState:
        """
        Latest fatigue reading for autoregulation.

        Returns neutral defaults when the trainee has no records.
        """
        records = self.records(trainee_id)
        if not records:
            logger.debug(f"No fatigue history for {trainee_id}; using neutral defaults")
            return FatigueState(training_response=training_response)

        last = records[-1]
        consecutive = 0
        if threshold is not None:
            consecutive = self.consecutive_high_fatigue_weeks(trainee_id, threshold)
        return FatigueState(
            current_fatigue=last.fatigue_score,
            recovery_score=last.recovery_score,
            training_response=training_response,
            consecutive_high_fatigue_weeks=consecutive,
        )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path) -> 'FatigueHistory':
        history = cls(path)
        path = Path(path)
        if not path.exists():
            return history

        with open(path) as f:
            raw = yaml.safe_load(f) or {}

        for trainee_id, entries in raw.items():
            for entry in entries or []:
                history.record(
                    str(trainee_id),
                    _as_date(entry['week_start']),
                    float(entry['fatigue_score']),
                    entry.get('recovery_score'),
                )
        logger.info(f"Loaded fatigue history for {len(raw)} trainees from {path}")
        return history

    def save(self, path: Optional[Path] = None):
        path = Path(path) if path else self.path
        if path is None:
            raise ValueError("No path given for saving fatigue history")

        with self._registry_lock:
            trainee_ids = list(self._records)
        data = {}
        for trainee_id in trainee_ids:
            data[trainee_id] = [
                {
                    'week_start': r.week_start.isoformat(),
                    'fatigue_score': r.fatigue_score,
                    'recovery_score': r.recovery_score,
                }
                for r in self.records(trainee_id)
            ]

        with open(path, 'w') as f:
            yaml.safe_dump(data, f, sort_keys=True)


def _as_date(value) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))
