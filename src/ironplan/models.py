"""
Core types for the planning engine.

Enums name the closed categories (levels, goals, phases, muscle groups, day
types); dataclasses carry markers, configs and generated plans. Marker
records validate their ranges on construction so scoring never sees an
out-of-range value.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from .errors import ConfigIntegrityError, ValidationError


class TrainingLevel(Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    ELITE = "elite"


class TrainingGoal(Enum):
    STRENGTH = "strength"
    HYPERTROPHY = "hypertrophy"
    ENDURANCE = "endurance"
    POWER = "power"
    WEIGHT_LOSS = "weight_loss"
    BODY_RECOMPOSITION = "body_recomposition"
    GENERAL_FITNESS = "general_fitness"
    SPORT_SPECIFIC = "sport_specific"


class TrainingPhase(Enum):
    ANATOMICAL_ADAPTATION = "anatomical_adaptation"
    HYPERTROPHY = "hypertrophy"
    STRENGTH = "strength"
    POWER = "power"
    PEAKING = "peaking"
    MAINTENANCE = "maintenance"
    DELOAD = "deload"
    RECOVERY = "recovery"
    ACCUMULATION = "accumulation"
    INTENSIFICATION = "intensification"
    REALIZATION = "realization"
    METABOLIC = "metabolic"
    ENDURANCE = "endurance"

    @property
    def title(self) -> str:
        return self.value.replace("_", " ").title()


class PeriodizationType(Enum):
    LINEAR = "linear"
    UNDULATING = "undulating"
    BLOCK = "block"
    CONJUGATE = "conjugate"
    CONCURRENT = "concurrent"
    WAVE = "wave"


class DeloadType(Enum):
    VOLUME = "volume"
    INTENSITY = "intensity"
    FREQUENCY = "frequency"
    COMBINED = "combined"


class DeloadTiming(Enum):
    PLANNED = "planned"
    AUTOREGULATED = "autoregulated"
    REACTIVE = "reactive"


class ExerciseRotation(Enum):
    FIXED = "fixed"
    ROTATING = "rotating"
    UNDULATING = "undulating"


class AutoregulationStrategy(Enum):
    NONE = "none"
    FATIGUE_BASED = "fatigue_based"
    PERFORMANCE_BASED = "performance_based"
    READINESS_BASED = "readiness_based"


class ProgressionType(Enum):
    LINEAR = "linear"
    DOUBLE = "double"
    TRIPLE = "triple"
    WAVE = "wave"
    STEP = "step"


class RecommendedAction(Enum):
    PROCEED = "proceed"
    REDUCE_VOLUME = "reduce_volume"
    REDUCE_INTENSITY = "reduce_intensity"
    ACTIVE_RECOVERY = "active_recovery"
    REST = "rest"
    DELOAD = "deload"


class Difficulty(Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class MuscleGroup(Enum):
    CHEST = "chest"
    BACK = "back"
    SHOULDERS = "shoulders"
    ARMS = "arms"
    BICEPS = "biceps"
    TRICEPS = "triceps"
    FOREARMS = "forearms"
    LEGS = "legs"
    QUADRICEPS = "quadriceps"
    HAMSTRINGS = "hamstrings"
    GLUTES = "glutes"
    CALVES = "calves"
    CORE = "core"
    ABS = "abs"
    LOWER_BACK = "lower_back"


class DayType(Enum):
    STRENGTH = "strength"
    HYPERTROPHY = "hypertrophy"
    ENDURANCE = "endurance"
    CIRCUIT = "circuit"
    METABOLIC = "metabolic"
    POWER = "power"
    ATHLETIC = "athletic"
    FUNCTIONAL = "functional"
    GENERAL = "general"


def parse_enum(enum_cls, value, name: Optional[str] = None):
    """
    Coerce a raw value into a member of ``enum_cls``.

    Args:
        enum_cls: Target Enum class
        value: Enum member or its string value
        name: Field name used in the error message

    Returns:
        The matching enum member

    Raises:
        ValidationError: If the value names no member
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(m.value for m in enum_cls)
        label = name or enum_cls.__name__
        raise ValidationError(f"Invalid {label}: {value!r} (expected one of: {choices})") from None


def check_range(name: str, value, low: float, high: float):
    """Reject non-numeric, non-finite or out-of-range marker values."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be finite, got {value!r}")
    if value < low or value > high:
        raise ValidationError(f"{name}={value} outside allowed range [{low}, {high}]")


def sealed(table: Mapping, keys, name: str) -> Mapping:
    """Freeze a lookup table, requiring an entry for every member of ``keys``."""
    missing = [k.value for k in keys if k not in table]
    if missing:
        raise ConfigIntegrityError(f"{name} has no entry for: {', '.join(missing)}")
    return MappingProxyType(table)


# ============================================================================
# Markers
# ============================================================================

@dataclass(frozen=True)
class FatigueMarkers:
    """
    Per-period fatigue signals logged by the trainee.

    Defaults describe a neutral, unremarkable week.
    """
    rpe_increase: float = 0.0
    strength_decrease: float = 0.0
    soreness: float = 3.0
    sleep_quality: float = 7.0
    motivation: float = 7.0
    resting_heart_rate_delta: float = 0.0
    mood_score: float = 7.0
    stress_score: float = 3.0
    appetite_change: float = 0.0
    technical_proficiency: float = 7.0

    RANGES = MappingProxyType({
        'rpe_increase': (0, 10),
        'strength_decrease': (0, 100),
        'soreness': (1, 10),
        'sleep_quality': (1, 10),
        'motivation': (1, 10),
        'resting_heart_rate_delta': (-50, 50),
        'mood_score': (1, 10),
        'stress_score': (1, 10),
        'appetite_change': (-5, 5),
        'technical_proficiency': (1, 10),
    })

    def __post_init__(self):
        for name, (low, high) in self.RANGES.items():
            check_range(name, getattr(self, name), low, high)


@dataclass(frozen=True)
class RecoveryMarkers:
    """Recovery inputs: sleep, lifestyle scores and recovery practices."""
    sleep_hours: float = 7.0
    sleep_quality: float = 7.0
    nutrition: float = 7.0
    hydration: float = 7.0
    stress_management: float = 7.0
    active_recovery: bool = False
    mobility_work: bool = False
    supplementation: bool = False
    massage: bool = False
    cold_therapy: bool = False
    heat_therapy: bool = False

    RANGES = MappingProxyType({
        'sleep_hours': (0, 24),
        'sleep_quality': (1, 10),
        'nutrition': (1, 10),
        'hydration': (1, 10),
        'stress_management': (1, 10),
    })
    PRACTICES = (
        'active_recovery', 'mobility_work', 'supplementation',
        'massage', 'cold_therapy', 'heat_therapy',
    )

    def __post_init__(self):
        for name, (low, high) in self.RANGES.items():
            check_range(name, getattr(self, name), low, high)
        for name in self.PRACTICES:
            if not isinstance(getattr(self, name), bool):
                raise ValidationError(f"{name} must be a boolean")

    @property
    def practice_count(self) -> int:
        return sum(1 for name in self.PRACTICES if getattr(self, name))


@dataclass(frozen=True)
class TrainingResponse:
    """How the trainee responded to the last block (1-10 scores, adherence in %)."""
    muscle_growth: float = 5.0
    strength_gain: float = 5.0
    technical_improvement: float = 5.0
    work_capacity: float = 5.0
    motivation: float = 5.0
    enjoyment: float = 5.0
    adherence: float = 100.0

    def __post_init__(self):
        for name in ('muscle_growth', 'strength_gain', 'technical_improvement',
                     'work_capacity', 'motivation', 'enjoyment'):
            check_range(name, getattr(self, name), 1, 10)
        check_range('adherence', self.adherence, 0, 100)


# ============================================================================
# Deload and fatigue state
# ============================================================================

@dataclass(frozen=True)
class DeloadStrategy:
    """A deload prescription: what to cut, by how much, and for how long."""
    type: DeloadType
    volume_reduction: float
    intensity_reduction: float
    frequency_reduction: int
    duration_days: int
    timing: DeloadTiming
    notes: str = ""

    def __post_init__(self):
        check_range('volume_reduction', self.volume_reduction, 0, 100)
        check_range('intensity_reduction', self.intensity_reduction, 0, 100)
        if self.frequency_reduction < 0:
            raise ValidationError("frequency_reduction must be >= 0")
        if self.duration_days < 3:
            raise ValidationError("duration_days must be >= 3")


@dataclass(frozen=True)
class FatigueManagementState:
    """Snapshot of where the trainee stands and what to do next."""
    current_fatigue: float
    recovery_capacity: float
    performance_decrement: float
    readiness_to_train: float
    recommended_action: RecommendedAction
    recommendations: Tuple[str, ...] = ()
    deload_strategy: Optional[DeloadStrategy] = None


@dataclass(frozen=True)
class FatigueState:
    """
    Fatigue reading consumed by autoregulated generation.

    ``current_fatigue`` is on the canonical 0-10 scale used by the
    fatigue scorer. Readings stored on another scale go through
    ``from_stored``.
    """
    current_fatigue: float = 3.0
    recovery_score: Optional[float] = None
    training_response: Optional[TrainingResponse] = None
    consecutive_high_fatigue_weeks: int = 0

    def __post_init__(self):
        check_range('current_fatigue', self.current_fatigue, 0, math.inf)
        if self.consecutive_high_fatigue_weeks < 0:
            raise ValidationError("consecutive_high_fatigue_weeks must be >= 0")

    @classmethod
    def from_stored(cls, value: float, scale: float = 100, **kwargs) -> 'FatigueState':
        """
        Build a state from a reading stored on a 0..scale range.

        Args:
            value: Stored fatigue reading
            scale: Upper bound of the stored scale (100 for percent readings)

        Returns:
            FatigueState with the reading converted to 0-10
        """
        if scale <= 0:
            raise ValidationError(f"scale must be positive, got {scale}")
        check_range('stored fatigue', value, 0, scale)
        return cls(current_fatigue=value * 10.0 / scale, **kwargs)


# ============================================================================
# Periodization config and generated plan
# ============================================================================

@dataclass(frozen=True)
class NutritionStrategy:
    calorie_balance: str
    protein_per_kg: float
    carb_timing: str


@dataclass(frozen=True)
class PeriodizationConfig:
    """Immutable periodization parameters for one level x goal pair."""
    level: TrainingLevel
    goal: TrainingGoal
    periodization_type: PeriodizationType
    meso_cycle_duration: int
    deload_frequency: int
    volume_range: Tuple[float, float]
    intensity_range: Tuple[float, float]
    frequency_range: Tuple[int, int]
    phase_sequence: Tuple[TrainingPhase, ...]
    rpe_range: Tuple[float, float]
    deload_strategy: DeloadStrategy
    fatigue_threshold: float
    rir_range: Optional[Tuple[float, float]] = None
    tempo: Mapping[TrainingPhase, str] = field(default_factory=lambda: MappingProxyType({}))
    rest_periods: Mapping[TrainingPhase, Tuple[int, int]] = field(
        default_factory=lambda: MappingProxyType({}))
    exercise_rotation: ExerciseRotation = ExerciseRotation.FIXED
    special_techniques: Tuple[str, ...] = ()
    autoregulation: AutoregulationStrategy = AutoregulationStrategy.NONE
    progression_type: ProgressionType = ProgressionType.LINEAR
    volume_progression_rate: float = 3.0
    intensity_progression_rate: float = 1.5
    nutrition_strategy: Optional[NutritionStrategy] = None

    DEFAULT_TEMPO = "2-0-2-0"
    DEFAULT_REST = (60, 120)

    @property
    def recommended_deload_type(self) -> DeloadType:
        return self.deload_strategy.type

    def tempo_for(self, phase: TrainingPhase) -> str:
        return self.tempo.get(phase, self.DEFAULT_TEMPO)

    def rest_for(self, phase: TrainingPhase) -> Tuple[int, int]:
        return self.rest_periods.get(phase, self.DEFAULT_REST)


@dataclass(frozen=True)
class RestGuidelines:
    compound: Tuple[int, int]
    isolation: Tuple[int, int]


@dataclass(frozen=True)
class MicroCycle:
    """One scheduled training week."""
    week_number: int
    name: str
    phase: TrainingPhase
    is_deload: bool
    volume: int
    intensity: int
    frequency: int
    rir_range: Tuple[int, int]
    rpe_range: Tuple[int, int]
    tempo: str
    rest_guidelines: RestGuidelines
    technique_emphasis: Tuple[str, ...]
    primary_focus: Tuple[str, ...]
    secondary_focus: Tuple[str, ...]
    progression_strategy: str
    adaptation_markers: Tuple[str, ...]
    notes: str
    start_date: date
    end_date: date
    forced_deload: bool = False

    @property
    def effective_load(self) -> float:
        """Weekly sets scaled by relative intensity."""
        return self.volume * self.intensity / 100.0


@dataclass(frozen=True)
class MesoCycle:
    number: int
    name: str
    micro_cycles: Tuple[MicroCycle, ...]
    phase_sequence: Tuple[TrainingPhase, ...]
    includes_deload: bool
    deload_strategy: Optional[DeloadStrategy]
    start_date: date
    end_date: date


@dataclass(frozen=True)
class ProgressionModel:
    type: ProgressionType
    volume_progression_rate: float
    intensity_progression_rate: float
    deload_type: DeloadType
    autoregulated: bool
    fatigue_threshold: float


@dataclass(frozen=True)
class Assessment:
    """Baseline numbers supplied by the assessment flow. Passed through untouched."""
    body_weight_kg: Optional[float] = None
    body_fat_percentage: Optional[float] = None
    strength_baseline: Mapping[str, float] = field(default_factory=dict)
    notes: str = ""


@dataclass(frozen=True)
class Plan:
    """A generated macrocycle."""
    level: TrainingLevel
    goal: TrainingGoal
    frequency: int
    start_date: date
    end_date: date
    periodization_type: PeriodizationType
    meso_cycles: Tuple[MesoCycle, ...]
    progression_model: ProgressionModel
    special_techniques: Tuple[str, ...]
    nutrition_strategy: Optional[NutritionStrategy]
    exercise_rotation: ExerciseRotation
    autoregulation: AutoregulationStrategy
    assessment: Optional[Assessment] = None

    @property
    def micro_cycles(self) -> List[MicroCycle]:
        return [week for meso in self.meso_cycles for week in meso.micro_cycles]

    @property
    def duration_weeks(self) -> int:
        return sum(len(meso.micro_cycles) for meso in self.meso_cycles)


# ============================================================================
# Exercises
# ============================================================================

@dataclass(frozen=True)
class Exercise:
    """An entry from the external exercise catalog."""
    id: str
    name: str
    category: str
    primary_muscle_groups: Tuple[MuscleGroup, ...]
    secondary_muscle_groups: Tuple[MuscleGroup, ...] = ()
    equipment: Tuple[str, ...] = ()
    difficulty: Difficulty = Difficulty.INTERMEDIATE
    is_compound: bool = False
    contraindications: Tuple[str, ...] = ()

    @property
    def muscle_groups(self) -> Tuple[MuscleGroup, ...]:
        return self.primary_muscle_groups + self.secondary_muscle_groups

    @property
    def is_bodyweight(self) -> bool:
        return not self.equipment or 'bodyweight' in self.equipment

    @classmethod
    def from_dict(cls, data: Dict) -> 'Exercise':
        """
        Build an exercise from a catalog record.

        Args:
            data: Mapping with id, name, category, primary_muscle_groups and
                optional secondary_muscle_groups, equipment, difficulty,
                is_compound, contraindications

        Returns:
            Exercise instance
        """
        try:
            exercise_id = str(data['id'])
            name = data['name']
        except KeyError as e:
            raise ValidationError(f"Exercise record missing field {e}") from None

        primary = tuple(parse_enum(MuscleGroup, m, 'muscle group')
                        for m in data.get('primary_muscle_groups') or [])
        if not primary:
            raise ValidationError(f"Exercise {exercise_id} has no primary muscle group")

        is_compound = data.get('is_compound', False)
        if not isinstance(is_compound, bool):
            raise ValidationError(
                f"Exercise {exercise_id}: is_compound must be a boolean, got {is_compound!r}"
            )

        return cls(
            id=exercise_id,
            name=name,
            category=data.get('category', 'general'),
            primary_muscle_groups=primary,
            secondary_muscle_groups=tuple(
                parse_enum(MuscleGroup, m, 'muscle group')
                for m in data.get('secondary_muscle_groups') or []
            ),
            equipment=tuple(data.get('equipment') or ()),
            difficulty=parse_enum(Difficulty, data.get('difficulty', 'intermediate'), 'difficulty'),
            is_compound=is_compound,
            contraindications=tuple(data.get('contraindications') or ()),
        )


@dataclass(frozen=True)
class WorkoutExercise:
    exercise: Exercise
    sets: int
    reps: str
    rest_seconds: int
    alternatives: Tuple[str, ...] = ()


@dataclass
class WorkoutDayPlan:
    """One training day as rendered by the UI."""
    name: str
    day_type: DayType
    target_muscle_groups: List[MuscleGroup]
    exercises: List[WorkoutExercise] = field(default_factory=list)
