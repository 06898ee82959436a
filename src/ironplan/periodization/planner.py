"""
Periodization Planner

Builds a complete macrocycle (Plan) from a trainee's level and goal and
renders it as text.
"""

import logging
from datetime import date, timedelta
from typing import List, Optional

from ..models import (
    Assessment,
    AutoregulationStrategy,
    DeloadStrategy,
    FatigueState,
    PeriodizationConfig,
    Plan,
    ProgressionModel,
    TrainingResponse,
)
from ..settings import EngineSettings
from .catalog import ConfigCatalog, get_catalog
from .cycles import CycleGenerator, PlanRequest
from .deload import DeloadDecider, DeloadStrategyPersonalizer

logger = logging.getLogger(__name__)


class PeriodizationPlanner:
    """
    Generates periodized training plans.

    Integrates:
    - Config catalog (level x goal parameters)
    - Cycle generation (weekly phases and loads)
    - Deload scheduling and fatigue autoregulation
    """

    def __init__(
        self,
        catalog: Optional[ConfigCatalog] = None,
        settings: Optional[EngineSettings] = None
    ):
        self.catalog = catalog or get_catalog()
        self.settings = settings or EngineSettings()
        self.generator = CycleGenerator(self.catalog, self.settings)

    def generate_plan(
        self,
        level,
        goal,
        frequency: Optional[int],
        start_date: date,
        duration_weeks: int,
        assessment: Optional[Assessment] = None,
        fatigue_state: Optional[FatigueState] = None
    ) -> Plan:
        """
        Generate a plan.

        Args:
            level: Training level
            goal: Training goal
            frequency: Requested training days per week (clamped to the
                config's frequency range); None for the range midpoint
            start_date: First day of week 1
            duration_weeks: Number of weeks to schedule
            assessment: Optional baseline assessment, carried on the plan
            fatigue_state: Latest fatigue reading for autoregulation

        Returns:
            Plan with mesocycles covering every week

        Raises:
            ValidationError: On unknown level/goal or bad frequency
            MissingConfigError: If no config exists for level and goal
            ConfigIntegrityError: If the config or duration is malformed
        """
        request = PlanRequest(
            level=level,
            goal=goal,
            start_date=start_date,
            duration_weeks=duration_weeks,
            frequency=frequency,
            assessment=assessment,
        )
        config = self.catalog.lookup(request.level, request.goal)
        weeks = self.generator.generate(request, fatigue_state, config)
        mesos = self.generator.group_mesocycles(config, weeks, fatigue_state)

        plan = Plan(
            level=request.level,
            goal=request.goal,
            frequency=self.generator.base_frequency(config, request),
            start_date=start_date,
            end_date=start_date + timedelta(days=7 * duration_weeks - 1),
            periodization_type=config.periodization_type,
            meso_cycles=tuple(mesos),
            progression_model=self._progression_model(config),
            special_techniques=config.special_techniques,
            nutrition_strategy=config.nutrition_strategy,
            exercise_rotation=config.exercise_rotation,
            autoregulation=config.autoregulation,
            assessment=assessment,
        )
        logger.info(
            f"Plan {plan.level.value}/{plan.goal.value}: {len(mesos)} mesocycles, "
            f"{plan.start_date} to {plan.end_date}"
        )
        return plan

    def _progression_model(self, config: PeriodizationConfig) -> ProgressionModel:
        return ProgressionModel(
            type=config.progression_type,
            volume_progression_rate=config.volume_progression_rate,
            intensity_progression_rate=config.intensity_progression_rate,
            deload_type=config.recommended_deload_type,
            autoregulated=config.autoregulation is not AutoregulationStrategy.NONE,
            fatigue_threshold=config.fatigue_threshold,
        )

    def format_plan_text(self, plan: Plan) -> str:
        """
        Format plan as readable text.

        Args:
            plan: Generated plan

        Returns:
            Formatted string
        """
        lines = []
        lines.append("=" * 60)
        lines.append(f"TRAINING PLAN: {plan.level.value.upper()} / {plan.goal.value.upper()}")
        lines.append("=" * 60)
        lines.append(f"Dates: {plan.start_date} to {plan.end_date} ({plan.duration_weeks} weeks)")
        lines.append(f"Periodization: {plan.periodization_type.value}, {plan.frequency} days/week")
        model = plan.progression_model
        lines.append(
            f"Progression: {model.type.value} (+{model.volume_progression_rate:g}% volume, "
            f"+{model.intensity_progression_rate:g}% intensity per cycle)"
        )
        if plan.nutrition_strategy:
            n = plan.nutrition_strategy
            lines.append(f"Nutrition: {n.calorie_balance}, {n.protein_per_kg:g} g/kg protein, carbs {n.carb_timing}")
        lines.append("")

        for meso in plan.meso_cycles:
            lines.append(f"{meso.name.upper()} ({meso.start_date} to {meso.end_date})")
            lines.append("-" * 60)
            for week in meso.micro_cycles:
                marker = " [DELOAD]" if week.is_deload else ""
                lines.append(f"  {week.name}{marker}")
                lines.append(
                    f"     {week.volume} sets/muscle | {week.intensity}% 1RM | "
                    f"{week.frequency}x/week | RIR {week.rir_range[0]}-{week.rir_range[1]} | "
                    f"RPE {week.rpe_range[0]}-{week.rpe_range[1]} | tempo {week.tempo}"
                )
                if week.technique_emphasis:
                    lines.append(f"     Techniques: {', '.join(week.technique_emphasis)}")
                lines.append(f"     Focus: {', '.join(week.primary_focus)}")
            if meso.deload_strategy:
                lines.append(f"  Deload: {_describe_strategy(meso.deload_strategy)}")
                if meso.deload_strategy.notes:
                    lines.append(f"    {meso.deload_strategy.notes}")
            lines.append("")

        return "\n".join(lines)


def _describe_strategy(strategy: DeloadStrategy) -> str:
    parts: List[str] = [f"{strategy.type.value}, {strategy.duration_days} days ({strategy.timing.value})"]
    if strategy.volume_reduction:
        parts.append(f"-{strategy.volume_reduction:g}% volume")
    if strategy.intensity_reduction:
        parts.append(f"-{strategy.intensity_reduction:g}% intensity")
    if strategy.frequency_reduction:
        parts.append(f"-{strategy.frequency_reduction} days/week")
    return ", ".join(parts)


# ============================================================================
# Module-level entry points
# ============================================================================

def generate_plan(
    level,
    goal,
    frequency: Optional[int],
    start_date: date,
    duration_weeks: int,
    assessment: Optional[Assessment] = None,
    fatigue_state: Optional[FatigueState] = None,
    settings: Optional[EngineSettings] = None
) -> Plan:
    return PeriodizationPlanner(settings=settings).generate_plan(
        level, goal, frequency, start_date, duration_weeks, assessment, fatigue_state
    )


def needs_deload(
    fatigue_score: float,
    recovery_score: float,
    training_response: Optional[TrainingResponse],
    config: PeriodizationConfig,
    consecutive_high_fatigue_weeks: int = 0,
    settings: Optional[EngineSettings] = None
) -> bool:
    return DeloadDecider(settings).needs_deload(
        fatigue_score, recovery_score, training_response, config, consecutive_high_fatigue_weeks
    )


def personalize_deload(
    fatigue_score: float,
    recovery_score: float,
    level,
    goal,
    base_strategy: Optional[DeloadStrategy] = None
) -> DeloadStrategy:
    return DeloadStrategyPersonalizer().personalize(
        fatigue_score, recovery_score, level, goal, base_strategy
    )
