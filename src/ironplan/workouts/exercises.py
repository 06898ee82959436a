"""
Exercise catalog loading.

The catalog is a YAML list of exercise records:

    - id: back_squat
      name: Back Squat
      category: strength
      primary_muscle_groups: [legs, quadriceps]
      secondary_muscle_groups: [glutes, core]
      equipment: [barbell, rack]
      difficulty: intermediate
      is_compound: true
      contraindications: [knee_injury, lower_back_pain]
"""

import logging
from pathlib import Path
from typing import List, Optional

import yaml

from ..errors import ValidationError
from ..models import Exercise

logger = logging.getLogger(__name__)

DEFAULT_EXERCISES_PATH = Path(__file__).parent.parent / "data" / "exercises.yaml"


def load_exercises(path: Optional[Path] = None) -> List[Exercise]:
    """
    Load an exercise catalog from YAML.

    Args:
        path: Catalog file. If None, uses the packaged sample catalog.

    Returns:
        List of Exercise

    Raises:
        ValidationError: If a record is malformed or an id repeats
    """
    path = Path(path) if path else DEFAULT_EXERCISES_PATH
    with open(path) as f:
        records = yaml.safe_load(f) or []

    if not isinstance(records, list):
        raise ValidationError(f"{path}: expected a list of exercises")

    exercises = []
    seen = set()
    for record in records:
        exercise = Exercise.from_dict(record)
        if exercise.id in seen:
            raise ValidationError(f"{path}: duplicate exercise id '{exercise.id}'")
        seen.add(exercise.id)
        exercises.append(exercise)

    logger.info(f"Loaded {len(exercises)} exercises from {path}")
    return exercises
