"""
Weekly Split

Lays out a training week: which split to run for the trainee's frequency,
which muscle groups each day trains, and what kind of session it is.
"""

import logging
import random
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from ..models import (
    DayType,
    Exercise,
    MuscleGroup,
    TrainingGoal,
    TrainingLevel,
    WorkoutDayPlan,
    check_range,
    parse_enum,
)
from ..settings import EngineSettings
from .selector import ExerciseSelector

logger = logging.getLogger(__name__)

M = MuscleGroup

FULL_BODY = (M.CHEST, M.BACK, M.LEGS, M.SHOULDERS, M.ARMS, M.CORE)
UPPER = (M.CHEST, M.BACK, M.SHOULDERS, M.ARMS)
LOWER = (M.LEGS, M.GLUTES, M.CORE)
PUSH = (M.CHEST, M.SHOULDERS, M.TRICEPS)
PULL = (M.BACK, M.BICEPS)


class SplitType(Enum):
    FULL_BODY = "full_body"
    UPPER_LOWER = "upper_lower"
    PUSH_PULL_LEGS = "push_pull_legs"
    BODY_PART = "body_part"


SPLIT_DAYS = {
    SplitType.UPPER_LOWER: (
        ("Upper A", UPPER),
        ("Lower A", LOWER),
        ("Upper B", UPPER),
        ("Lower B", LOWER),
    ),
    SplitType.PUSH_PULL_LEGS: (
        ("Push", PUSH),
        ("Pull", PULL),
        ("Legs", LOWER),
        ("Full Body", (M.CHEST, M.BACK, M.LEGS, M.SHOULDERS, M.ARMS)),
    ),
    SplitType.BODY_PART: (
        ("Chest", (M.CHEST,)),
        ("Back", (M.BACK,)),
        ("Legs", (M.LEGS, M.GLUTES)),
        ("Shoulders", (M.SHOULDERS,)),
        ("Arms", (M.ARMS,)),
        ("Core", (M.CORE, M.ABS)),
    ),
}


def split_type_for(frequency: int, goal: TrainingGoal) -> SplitType:
    if frequency <= 3:
        return SplitType.FULL_BODY
    if frequency == 4:
        return SplitType.UPPER_LOWER if goal is TrainingGoal.STRENGTH else SplitType.PUSH_PULL_LEGS
    return SplitType.BODY_PART


def days_for(split: SplitType, frequency: int) -> List[Tuple[str, Tuple[MuscleGroup, ...]]]:
    """Day names and muscle groups for each training day of the week."""
    if split is SplitType.FULL_BODY:
        return [(f"Full Body {i + 1}", FULL_BODY) for i in range(frequency)]

    template = SPLIT_DAYS[split]
    return [template[i % len(template)] for i in range(frequency)]


def day_type_for(goal: TrainingGoal, muscle_groups: Sequence[MuscleGroup]) -> DayType:
    """
    Session type for a day.

    Weight loss runs metabolic sessions on leg days and circuits otherwise;
    power and sport goals run power sessions on leg days and athletic
    sessions otherwise.
    """
    leg_day = M.LEGS in muscle_groups
    if goal is TrainingGoal.STRENGTH:
        return DayType.STRENGTH
    if goal is TrainingGoal.ENDURANCE:
        return DayType.ENDURANCE
    if goal is TrainingGoal.WEIGHT_LOSS:
        return DayType.METABOLIC if leg_day else DayType.CIRCUIT
    if goal is TrainingGoal.GENERAL_FITNESS:
        return DayType.FUNCTIONAL
    if goal in (TrainingGoal.POWER, TrainingGoal.SPORT_SPECIFIC):
        return DayType.POWER if leg_day else DayType.ATHLETIC
    return DayType.HYPERTROPHY


def build_week(
    exercises: Iterable[Exercise],
    level,
    goal,
    frequency: int,
    limitations: Iterable[str] = (),
    equipment: Optional[Iterable[str]] = None,
    rng: Optional[random.Random] = None,
    settings: Optional[EngineSettings] = None
) -> List[WorkoutDayPlan]:
    """
    Build a week of workouts.

    Args:
        exercises: Exercise catalog
        level: Training level
        goal: Training goal
        frequency: Training days per week (1-7)
        limitations: Injuries or conditions to avoid
        equipment: Equipment on hand, or None for a full gym
        rng: Random source for exercise draws
        settings: Engine settings

    Returns:
        One WorkoutDayPlan per training day

    Raises:
        ValidationError: On bad level, goal or frequency
        InsufficientExerciseDataError: If the catalog cannot fill a day
    """
    level = parse_enum(TrainingLevel, level, 'training level')
    goal = parse_enum(TrainingGoal, goal, 'training goal')
    check_range('frequency', frequency, 1, 7)

    exercises = list(exercises)
    limitations = list(limitations)
    equipment = list(equipment) if equipment is not None else None
    selector = ExerciseSelector(settings, rng)

    split = split_type_for(frequency, goal)
    logger.info(f"Building {frequency}-day {split.value} week for {level.value}/{goal.value}")

    week = []
    for name, groups in days_for(split, frequency):
        day_type = day_type_for(goal, groups)
        week.append(WorkoutDayPlan(
            name=name,
            day_type=day_type,
            target_muscle_groups=list(groups),
            exercises=selector.select_for_day(
                exercises, groups, level, limitations, day_type, equipment
            ),
        ))
    return week


def format_week_text(week: List[WorkoutDayPlan]) -> str:
    """
    Format a week of workouts as readable text.

    Args:
        week: Day plans from build_week

    Returns:
        Formatted string
    """
    lines = []
    for day in week:
        lines.append("=" * 60)
        lines.append(f"{day.name.upper()} ({day.day_type.value})")
        lines.append(f"Targets: {', '.join(g.value for g in day.target_muscle_groups)}")
        lines.append("=" * 60)
        for i, item in enumerate(day.exercises, 1):
            lines.append(f"{i}. {item.exercise.name}")
            lines.append(f"   {item.sets} x {item.reps}, rest {item.rest_seconds}s")
            if item.alternatives:
                lines.append(f"   Alternatives: {', '.join(item.alternatives)}")
        lines.append("")
    return "\n".join(lines)
