"""
ironplan - periodization and fatigue-autoregulation planning engine.

Turns a trainee's level and goal into a multi-week training plan, keeps
it honest against measured fatigue and recovery, and fills each training
day with concrete exercises.
"""

from .errors import (
    ConfigIntegrityError,
    InsufficientExerciseDataError,
    IronplanError,
    MissingConfigError,
    ValidationError,
)
from .models import (
    DayType,
    DeloadStrategy,
    Exercise,
    FatigueMarkers,
    FatigueState,
    RecoveryMarkers,
    TrainingGoal,
    TrainingLevel,
    TrainingPhase,
    TrainingResponse,
)
from .periodization import (
    ConfigCatalog,
    FatigueHistory,
    assess_fatigue,
    generate_plan,
    get_catalog,
    needs_deload,
    personalize_deload,
    score_fatigue,
    score_recovery,
)
from .settings import EngineSettings, load_settings
from .workouts import build_week, load_exercises, select_exercises_for_day

__version__ = "0.1.0"

__all__ = [
    'generate_plan',
    'score_fatigue',
    'score_recovery',
    'needs_deload',
    'personalize_deload',
    'select_exercises_for_day',
    'assess_fatigue',
    'build_week',
    'load_exercises',
    'get_catalog',
    'ConfigCatalog',
    'FatigueHistory',
    'EngineSettings',
    'load_settings',
    'DayType',
    'DeloadStrategy',
    'Exercise',
    'FatigueMarkers',
    'FatigueState',
    'RecoveryMarkers',
    'TrainingGoal',
    'TrainingLevel',
    'TrainingPhase',
    'TrainingResponse',
    'IronplanError',
    'MissingConfigError',
    'ValidationError',
    'ConfigIntegrityError',
    'InsufficientExerciseDataError',
]
