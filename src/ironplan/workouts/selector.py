"""
Exercise Selection

Fills a training day from an exercise catalog. Filters are applied in
order and each is relaxed when it leaves too few candidates:

1. Equipment on hand (bodyweight movements always qualify)
2. Muscle groups, broadened to related groups, then to the whole catalog
3. Difficulty vs. training level
4. Contraindications vs. the trainee's limitations
"""

import logging
import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from ..errors import InsufficientExerciseDataError
from ..models import (
    DayType,
    Difficulty,
    Exercise,
    MuscleGroup,
    TrainingLevel,
    WorkoutExercise,
    parse_enum,
    sealed,
)
from ..settings import EngineSettings

logger = logging.getLogger(__name__)

M = MuscleGroup

RELATED_MUSCLE_GROUPS = sealed({
    M.CHEST: (M.SHOULDERS, M.TRICEPS),
    M.BACK: (M.SHOULDERS, M.BICEPS),
    M.SHOULDERS: (M.CHEST, M.BACK, M.TRICEPS),
    M.ARMS: (M.BICEPS, M.TRICEPS, M.FOREARMS),
    M.BICEPS: (M.BACK, M.FOREARMS),
    M.TRICEPS: (M.CHEST, M.SHOULDERS),
    M.FOREARMS: (M.BICEPS, M.BACK),
    M.LEGS: (M.GLUTES, M.CORE),
    M.QUADRICEPS: (M.LEGS, M.GLUTES),
    M.HAMSTRINGS: (M.LEGS, M.GLUTES),
    M.GLUTES: (M.LEGS, M.CORE),
    M.CALVES: (M.LEGS,),
    M.CORE: (M.ABS, M.LOWER_BACK),
    M.ABS: (M.CORE, M.LOWER_BACK),
    M.LOWER_BACK: (M.CORE, M.GLUTES),
}, MuscleGroup, 'RELATED_MUSCLE_GROUPS')


@dataclass(frozen=True)
class SetScheme:
    sets: int
    reps: str
    rest_seconds: int


# (compound, isolation)
SET_SCHEMES = sealed({
    DayType.STRENGTH: (SetScheme(5, "5", 180), SetScheme(4, "6-8", 120)),
    DayType.HYPERTROPHY: (SetScheme(4, "8-12", 90), SetScheme(3, "10-15", 60)),
    DayType.ENDURANCE: (SetScheme(3, "15-20", 45), SetScheme(3, "15-20", 45)),
    DayType.CIRCUIT: (SetScheme(3, "12-15", 30), SetScheme(3, "12-15", 30)),
    DayType.METABOLIC: (SetScheme(3, "12-15", 30), SetScheme(3, "12-15", 30)),
    DayType.POWER: (SetScheme(5, "3-5", 180), SetScheme(4, "6-8", 120)),
    DayType.ATHLETIC: (SetScheme(4, "6-10", 90), SetScheme(4, "6-10", 90)),
    DayType.FUNCTIONAL: (SetScheme(3, "10-12", 60), SetScheme(3, "10-12", 60)),
    DayType.GENERAL: (SetScheme(3, "8-12", 60), SetScheme(3, "8-12", 60)),
}, DayType, 'SET_SCHEMES')

# (two or fewer target groups, more than two)
EXERCISE_COUNTS = sealed({
    DayType.STRENGTH: (6, 8),
    DayType.HYPERTROPHY: (7, 9),
    DayType.ENDURANCE: (10, 10),
    DayType.CIRCUIT: (10, 10),
    DayType.METABOLIC: (10, 10),
    DayType.POWER: (6, 6),
    DayType.ATHLETIC: (6, 6),
    DayType.FUNCTIONAL: (8, 8),
    DayType.GENERAL: (7, 7),
}, DayType, 'EXERCISE_COUNTS')


class ExerciseSelector:
    """
    Selects and prescribes exercises for one day.

    Pass a seeded ``random.Random`` for reproducible selections.
    """

    def __init__(
        self,
        settings: Optional[EngineSettings] = None,
        rng: Optional[random.Random] = None
    ):
        self.settings = settings or EngineSettings()
        self.rng = rng or random.Random()

    def select_for_day(
        self,
        catalog: Iterable[Exercise],
        target_muscle_groups: Sequence,
        level,
        limitations: Iterable[str] = (),
        day_type=DayType.GENERAL,
        equipment: Optional[Iterable[str]] = None
    ) -> List[WorkoutExercise]:
        """
        Select exercises for a training day.

        Args:
            catalog: Available exercises
            target_muscle_groups: Muscle groups the day should train
            level: Trainee's training level
            limitations: Injuries or conditions to avoid (matched against
                exercise contraindications)
            day_type: Kind of session; sets count and set/rep scheme
            equipment: Equipment on hand, or None to skip the equipment filter

        Returns:
            Prescribed exercises, each with up to three alternatives

        Raises:
            InsufficientExerciseDataError: If no exercise survives the
                fully relaxed filters
        """
        catalog = list(catalog)
        if not catalog:
            raise InsufficientExerciseDataError("Exercise catalog is empty")

        targets = [parse_enum(MuscleGroup, g, 'muscle group') for g in target_muscle_groups]
        level = parse_enum(TrainingLevel, level, 'training level')
        day_type = parse_enum(DayType, day_type, 'day type')
        limitations = {item.lower() for item in limitations}

        pool = self._filter_equipment(catalog, equipment)
        pool = self._filter_muscle_groups(pool, targets)
        pool = self._filter_difficulty(pool, level)
        pool = self._filter_limitations(pool, limitations)

        if not pool:
            raise InsufficientExerciseDataError(
                f"No exercises available for {[g.value for g in targets]}"
            )

        count = self.exercise_count(day_type, len(targets), level, len(pool))
        selected = self._draw(pool, targets, count)

        logger.debug(
            f"Selected {len(selected)} of {len(pool)} candidates for "
            f"{day_type.value} day ({', '.join(g.value for g in targets)})"
        )
        return [self._prescribe(exercise, day_type, pool) for exercise in selected]

    def exercise_count(self, day_type: DayType, group_count: int, level: TrainingLevel, pool_size: int) -> int:
        """
        Target number of exercises for a day.

        Base count by day type, minus two for beginners (never below 4),
        plus one for advanced and elite, capped by the pool and floored at
        the minimum exercise count.
        """
        few, many = EXERCISE_COUNTS[day_type]
        count = few if group_count <= 2 else many

        if level is TrainingLevel.BEGINNER:
            count = max(4, count - 2)
        elif level in (TrainingLevel.ADVANCED, TrainingLevel.ELITE):
            count += 1

        count = min(count, pool_size)
        return max(self.settings.min_exercises, count)

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def _filter_equipment(self, catalog: List[Exercise], equipment: Optional[Iterable[str]]) -> List[Exercise]:
        if equipment is None:
            return catalog

        available = {item.lower() for item in equipment} | {'bodyweight'}
        filtered = [
            e for e in catalog
            if e.is_bodyweight or {item.lower() for item in e.equipment} <= available
        ]
        if len(filtered) < self.settings.min_candidate_pool:
            logger.debug(f"Equipment filter left {len(filtered)} exercises; ignoring equipment")
            return catalog
        return filtered

    def _filter_muscle_groups(self, pool: List[Exercise], targets: List[MuscleGroup]) -> List[Exercise]:
        filtered = _matching(pool, set(targets))
        if len(filtered) >= self.settings.min_candidate_pool:
            return filtered

        broadened = set(targets)
        for group in targets:
            broadened.update(RELATED_MUSCLE_GROUPS[group])
        filtered = _matching(pool, broadened)
        logger.debug(
            f"Broadened muscle groups to {sorted(g.value for g in broadened)}: "
            f"{len(filtered)} exercises"
        )
        if len(filtered) >= self.settings.min_exercises:
            return filtered

        logger.debug("Related muscle groups still too few; using whole catalog")
        return pool

    def _filter_difficulty(self, pool: List[Exercise], level: TrainingLevel) -> List[Exercise]:
        if level is TrainingLevel.BEGINNER:
            excluded = Difficulty.ADVANCED
        elif level in (TrainingLevel.ADVANCED, TrainingLevel.ELITE):
            excluded = Difficulty.BEGINNER
        else:
            return pool

        filtered = [e for e in pool if e.difficulty is not excluded]
        if len(filtered) < self.settings.min_candidate_pool:
            logger.debug(f"Difficulty filter left {len(filtered)} exercises; dropping it")
            return pool
        return filtered

    def _filter_limitations(self, pool: List[Exercise], limitations: set) -> List[Exercise]:
        if not limitations:
            return pool

        filtered = [
            e for e in pool
            if not limitations & {c.lower() for c in e.contraindications}
        ]
        if len(filtered) < self.settings.min_candidate_pool:
            logger.debug(f"Limitation filter left {len(filtered)} exercises; dropping it")
            return pool
        return filtered

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def _draw(self, pool: List[Exercise], targets: List[MuscleGroup], count: int) -> List[Exercise]:
        remaining = list(pool)
        selected = []

        # One exercise per targeted group first
        for group in targets:
            candidates = [e for e in remaining if group in e.primary_muscle_groups]
            if not candidates:
                continue
            choice = candidates[self.rng.randrange(len(candidates))]
            selected.append(choice)
            remaining.remove(choice)

        while len(selected) < count and remaining:
            selected.append(remaining.pop(self.rng.randrange(len(remaining))))

        return selected

    def _prescribe(self, exercise: Exercise, day_type: DayType, pool: List[Exercise]) -> WorkoutExercise:
        compound, isolation = SET_SCHEMES[day_type]
        scheme = compound if exercise.is_compound else isolation
        return WorkoutExercise(
            exercise=exercise,
            sets=scheme.sets,
            reps=scheme.reps,
            rest_seconds=scheme.rest_seconds,
            alternatives=self._alternatives(exercise, pool),
        )

    def _alternatives(self, exercise: Exercise, pool: List[Exercise]) -> tuple:
        primary = set(exercise.primary_muscle_groups)
        alternatives = [
            e.id for e in pool
            if e.id != exercise.id
            and e.is_compound == exercise.is_compound
            and primary & set(e.primary_muscle_groups)
        ]
        return tuple(alternatives[:self.settings.max_alternatives])


def _matching(pool: List[Exercise], groups: set) -> List[Exercise]:
    return [e for e in pool if groups.intersection(e.muscle_groups)]


def select_exercises_for_day(
    catalog: Iterable[Exercise],
    target_muscle_groups: Sequence,
    level,
    limitations: Iterable[str] = (),
    day_type=DayType.GENERAL,
    equipment: Optional[Iterable[str]] = None,
    rng: Optional[random.Random] = None,
    settings: Optional[EngineSettings] = None
) -> List[WorkoutExercise]:
    return ExerciseSelector(settings, rng).select_for_day(
        catalog, target_muscle_groups, level, limitations, day_type, equipment
    )
