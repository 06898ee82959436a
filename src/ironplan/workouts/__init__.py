"""
Workout construction: exercise catalogs, per-day selection and weekly splits.
"""

from .exercises import load_exercises
from .selector import ExerciseSelector, select_exercises_for_day
from .split import build_week, format_week_text

__all__ = [
    'load_exercises',
    'ExerciseSelector',
    'select_exercises_for_day',
    'build_week',
    'format_week_text',
]
