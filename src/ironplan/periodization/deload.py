"""
Deload Decisions

Decides when a trainee needs a deload, tailors the deload prescription to
current fatigue and recovery, and turns scores into a fatigue management
snapshot for display.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Tuple

from ..models import (
    DeloadStrategy,
    FatigueManagementState,
    PeriodizationConfig,
    RecommendedAction,
    TrainingResponse,
)
from ..settings import EngineSettings
from .catalog import ConfigCatalog, get_catalog

logger = logging.getLogger(__name__)

CONSECUTIVE_HIGH_FATIGUE_LIMIT = 3
OVERRIDE_RATIO = 1.2


class DeloadDecider:
    """
    Combines fatigue, recovery and training response into a deload trigger.

    The combined score discounts fatigue by recovery and by recent gains:

        combined = fatigue - recovery * recovery_weight
                   - avg(strength_gain, muscle_growth) * training_response_weight
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or EngineSettings()

    def combined_score(
        self,
        fatigue_score: float,
        recovery_score: float,
        training_response: Optional[TrainingResponse]
    ) -> float:
        combined = fatigue_score - recovery_score * self.settings.recovery_weight
        if training_response is not None:
            gains = (training_response.strength_gain + training_response.muscle_growth) / 2
            combined -= gains * self.settings.training_response_weight
        return combined

    def needs_deload(
        self,
        fatigue_score: float,
        recovery_score: float,
        training_response: Optional[TrainingResponse],
        config: PeriodizationConfig,
        consecutive_high_fatigue_weeks: int = 0
    ) -> bool:
        """
        Decide whether a deload is due.

        Args:
            fatigue_score: Current fatigue (0-10)
            recovery_score: Current recovery (0-10)
            training_response: Latest training response, if any
            config: Periodization config supplying the fatigue threshold
            consecutive_high_fatigue_weeks: Weeks in a row above threshold

        Returns:
            True if any deload condition holds
        """
        threshold = config.fatigue_threshold

        if fatigue_score > threshold * OVERRIDE_RATIO:
            logger.debug(f"Deload: fatigue {fatigue_score:.2f} above {OVERRIDE_RATIO}x threshold")
            return True

        combined = self.combined_score(fatigue_score, recovery_score, training_response)
        if combined > threshold:
            logger.debug(f"Deload: combined score {combined:.2f} above threshold {threshold}")
            return True

        if consecutive_high_fatigue_weeks >= CONSECUTIVE_HIGH_FATIGUE_LIMIT:
            logger.debug(f"Deload: {consecutive_high_fatigue_weeks} consecutive high-fatigue weeks")
            return True

        if training_response is not None and self._overtraining_signs(
            fatigue_score, training_response, threshold
        ):
            logger.debug("Deload: overtraining signs (low motivation, stalled strength)")
            return True

        return False

    def _overtraining_signs(
        self,
        fatigue_score: float,
        response: TrainingResponse,
        threshold: float
    ) -> bool:
        return (
            response.motivation < 5
            and response.strength_gain < 3
            and fatigue_score > threshold * 0.8
        )


class DeloadStrategyPersonalizer:
    """Adjusts a base deload strategy to current fatigue and recovery."""

    def __init__(self, catalog: Optional[ConfigCatalog] = None):
        self.catalog = catalog or get_catalog()

    def personalize(
        self,
        fatigue_score: float,
        recovery_score: float,
        level,
        goal,
        base_strategy: Optional[DeloadStrategy] = None
    ) -> DeloadStrategy:
        """
        Personalize a deload strategy.

        Args:
            fatigue_score: Current fatigue (0-10)
            recovery_score: Current recovery (0-10)
            level: Training level
            goal: Training goal
            base_strategy: Strategy to adjust. If None, uses the catalog
                default for the level and goal.

        Returns:
            Adjusted DeloadStrategy with reductions in [0, 100],
            frequency reduction >= 0 and duration >= 3 days
        """
        config = self.catalog.lookup(level, goal)
        threshold = config.fatigue_threshold
        base = base_strategy or config.deload_strategy

        volume = base.volume_reduction
        intensity = base.intensity_reduction
        frequency = base.frequency_reduction
        duration = base.duration_days

        notes = []
        if fatigue_score > threshold * 1.2:
            volume += 10
            intensity += 5
            frequency += 1
            duration += 2
            notes.append("very high fatigue, aggressive deload")
        elif fatigue_score < threshold * 0.8:
            volume -= 10
            intensity -= 5
            duration -= 2
            notes.append("moderate fatigue, light deload")

        if recovery_score < 5:
            duration += 2
            notes.append("low recovery capacity, extended deload")
        elif recovery_score > 8:
            duration -= 1
            notes.append("good recovery capacity, shorter deload")

        return replace(
            base,
            volume_reduction=_clamp(volume, 0, 100),
            intensity_reduction=_clamp(intensity, 0, 100),
            frequency_reduction=max(0, frequency),
            duration_days=max(3, duration),
            notes="; ".join(notes).capitalize() if notes else base.notes,
        )


# Threshold multipliers, lowest first; fatigue at or past the last one means deload
ACTION_BANDS: Tuple[Tuple[float, RecommendedAction], ...] = (
    (0.6, RecommendedAction.PROCEED),
    (0.8, RecommendedAction.REDUCE_VOLUME),
    (1.0, RecommendedAction.REDUCE_INTENSITY),
    (1.2, RecommendedAction.ACTIVE_RECOVERY),
    (1.4, RecommendedAction.REST),
)

ACTION_RECOMMENDATIONS = {
    RecommendedAction.PROCEED: [
        "Continue with your normal training.",
        "Fatigue is low; you can train at full intensity.",
    ],
    RecommendedAction.REDUCE_VOLUME: [
        "Reduce training volume by 20-30%.",
        "Keep intensity but do fewer total sets.",
        "Prioritize compound movements and cut isolation work.",
    ],
    RecommendedAction.REDUCE_INTENSITY: [
        "Reduce training intensity by 10-15%.",
        "Use lighter loads and keep more reps in reserve.",
        "Consider more repetitions with less weight.",
    ],
    RecommendedAction.ACTIVE_RECOVERY: [
        "Do active recovery sessions.",
        "Focus on mobility, stretching and very low intensity work.",
        "Consider swimming, walking or yoga.",
    ],
    RecommendedAction.REST: [
        "Take 1-2 full rest days.",
        "Prioritize sleep and nutrition.",
        "Consider sauna, contrast baths or massage.",
    ],
    RecommendedAction.DELOAD: [
        "Run a deload week.",
        "Cut volume and/or intensity substantially for 5-7 days.",
        "Recover fully before returning to normal training.",
    ],
}


def recommended_action(fatigue_score: float, threshold: float) -> RecommendedAction:
    for ratio, action in ACTION_BANDS:
        if fatigue_score < threshold * ratio:
            return action
    return RecommendedAction.DELOAD


def assess_fatigue(
    fatigue_score: float,
    recovery_score: float,
    level,
    goal,
    catalog: Optional[ConfigCatalog] = None
) -> FatigueManagementState:
    """
    Build a fatigue management snapshot.

    Args:
        fatigue_score: Current fatigue (0-10)
        recovery_score: Current recovery (0-10)
        level: Training level
        goal: Training goal
        catalog: Config catalog (default: packaged catalog)

    Returns:
        FatigueManagementState; deload snapshots carry a personalized strategy
    """
    catalog = catalog or get_catalog()
    config = catalog.lookup(level, goal)
    action = recommended_action(fatigue_score, config.fatigue_threshold)

    deload_strategy = None
    if action is RecommendedAction.DELOAD:
        deload_strategy = DeloadStrategyPersonalizer(catalog).personalize(
            fatigue_score, recovery_score, level, goal
        )
        logger.info(
            f"Fatigue {fatigue_score:.2f} exceeds {config.level.value}/{config.goal.value} "
            f"deload band; {deload_strategy.duration_days}-day {deload_strategy.type.value} deload"
        )

    recommendations: List[str] = list(ACTION_RECOMMENDATIONS[action])

    return FatigueManagementState(
        current_fatigue=fatigue_score,
        recovery_capacity=recovery_score,
        performance_decrement=min(100.0, fatigue_score * 10),
        readiness_to_train=max(1.0, 10 - fatigue_score),
        recommended_action=action,
        recommendations=tuple(recommendations),
        deload_strategy=deload_strategy,
    )


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
