"""
Fatigue and Recovery Scoring

Pure scoring functions over logged markers. Both scores live on a 0-10
scale; fatigue is not clamped upward, recovery is capped at 10.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType

from ..models import (
    FatigueMarkers,
    RecoveryMarkers,
    TrainingGoal,
    TrainingLevel,
    check_range,
    parse_enum,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkerWeights:
    """Goal-specific weight for each fatigue marker."""
    rpe_increase: float = 1.0
    strength_decrease: float = 1.0
    soreness: float = 1.0
    sleep_quality: float = 1.0
    motivation: float = 1.0
    resting_heart_rate_delta: float = 1.0
    mood_score: float = 1.0
    stress_score: float = 1.0
    appetite_change: float = 1.0
    technical_proficiency: float = 1.0


DEFAULT_WEIGHTS = MarkerWeights()

# Goals without an entry score with DEFAULT_WEIGHTS
GOAL_WEIGHTS = MappingProxyType({
    TrainingGoal.STRENGTH: MarkerWeights(
        rpe_increase=1.5, strength_decrease=2.0, soreness=0.8, sleep_quality=1.0,
        motivation=1.0, resting_heart_rate_delta=0.7, mood_score=0.8, stress_score=1.0,
        appetite_change=0.6, technical_proficiency=1.5,
    ),
    TrainingGoal.HYPERTROPHY: MarkerWeights(
        rpe_increase=1.0, strength_decrease=1.0, soreness=1.2, sleep_quality=1.2,
        motivation=1.0, resting_heart_rate_delta=0.8, mood_score=0.8, stress_score=1.0,
        appetite_change=1.0, technical_proficiency=0.8,
    ),
    TrainingGoal.POWER: MarkerWeights(
        rpe_increase=1.5, strength_decrease=1.8, soreness=0.7, sleep_quality=1.2,
        motivation=1.2, resting_heart_rate_delta=0.8, mood_score=0.8, stress_score=1.0,
        appetite_change=0.6, technical_proficiency=1.8,
    ),
    TrainingGoal.ENDURANCE: MarkerWeights(
        rpe_increase=1.0, strength_decrease=0.7, soreness=0.8, sleep_quality=1.0,
        motivation=1.0, resting_heart_rate_delta=1.5, mood_score=0.8, stress_score=1.0,
        appetite_change=0.8, technical_proficiency=0.7,
    ),
})

# Beginners register more fatigue for the same markers
LEVEL_MULTIPLIERS = MappingProxyType({
    TrainingLevel.BEGINNER: 1.2,
    TrainingLevel.INTERMEDIATE: 1.0,
    TrainingLevel.ADVANCED: 0.9,
    TrainingLevel.ELITE: 0.8,
})


def weights_for(goal) -> MarkerWeights:
    goal = parse_enum(TrainingGoal, goal, 'training goal')
    return GOAL_WEIGHTS.get(goal, DEFAULT_WEIGHTS)


class FatigueScorer:
    """
    Scores accumulated fatigue from weekly markers.

    Sleep, motivation, mood and technical proficiency are inverted (a low
    value adds fatigue); appetite contributes its absolute deviation and
    resting heart rate delta is scaled down by 10.
    """

    def score(
        self,
        markers: FatigueMarkers,
        level,
        goal,
        individual_tolerance: float = 1.0
    ) -> float:
        """
        Compute a fatigue score.

        Args:
            markers: Validated fatigue markers
            level: Training level (scales the result)
            goal: Training goal (selects the weight table)
            individual_tolerance: Per-trainee multiplier, 1.0 for typical

        Returns:
            Fatigue score, nominally 0-10

        Raises:
            ValidationError: If level, goal or tolerance is invalid
        """
        level = parse_enum(TrainingLevel, level, 'training level')
        w = weights_for(goal)
        check_range('individual_tolerance', individual_tolerance, 0.1, 5.0)

        m = markers
        weighted = (
            m.rpe_increase * w.rpe_increase
            + m.strength_decrease * w.strength_decrease
            + m.soreness * w.soreness
            + (10 - m.sleep_quality) * w.sleep_quality
            + (10 - m.motivation) * w.motivation
            + m.resting_heart_rate_delta * w.resting_heart_rate_delta / 10
            + (10 - m.mood_score) * w.mood_score
            + m.stress_score * w.stress_score
            + abs(m.appetite_change) * w.appetite_change
            + (10 - m.technical_proficiency) * w.technical_proficiency
        )

        fatigue = weighted / 10 * LEVEL_MULTIPLIERS[level] * individual_tolerance
        logger.debug(f"Fatigue score {fatigue:.2f} ({level.value}, weighted sum {weighted:.1f})")
        return fatigue


class RecoveryScorer:
    """Scores recovery capacity from sleep, lifestyle and recovery practices."""

    SHORT_SLEEP_HOURS = 7
    SHORT_SLEEP_WEIGHT = 1.0
    FULL_SLEEP_WEIGHT = 1.5
    SLEEP_QUALITY_WEIGHT = 1.5
    NUTRITION_WEIGHT = 1.0
    HYDRATION_WEIGHT = 0.8
    STRESS_MANAGEMENT_WEIGHT = 1.0
    PRACTICE_BONUS = 2.0
    MAX_SCORE = 10.0

    def score(self, markers: RecoveryMarkers) -> float:
        """
        Compute a recovery score.

        Args:
            markers: Validated recovery markers

        Returns:
            Recovery score in [0, 10]
        """
        m = markers
        sleep_weight = (
            self.SHORT_SLEEP_WEIGHT if m.sleep_hours < self.SHORT_SLEEP_HOURS
            else self.FULL_SLEEP_WEIGHT
        )
        total = (
            m.sleep_hours * sleep_weight
            + m.sleep_quality * self.SLEEP_QUALITY_WEIGHT
            + m.nutrition * self.NUTRITION_WEIGHT
            + m.hydration * self.HYDRATION_WEIGHT
            + m.stress_management * self.STRESS_MANAGEMENT_WEIGHT
            + m.practice_count * self.PRACTICE_BONUS
        )
        return min(self.MAX_SCORE, total / 5)


_fatigue_scorer = FatigueScorer()
_recovery_scorer = RecoveryScorer()


def score_fatigue(markers: FatigueMarkers, level, goal, individual_tolerance: float = 1.0) -> float:
    return _fatigue_scorer.score(markers, level, goal, individual_tolerance)


def score_recovery(markers: RecoveryMarkers) -> float:
    return _recovery_scorer.score(markers)
