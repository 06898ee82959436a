"""Shared fixtures for ironplan tests."""

import random
from datetime import date

import pytest

from ironplan.models import Difficulty, Exercise, MuscleGroup
from ironplan.periodization import get_catalog
from ironplan.settings import EngineSettings
from ironplan.workouts import load_exercises

M = MuscleGroup


def make_exercise(exercise_id, primary, secondary=(), equipment=('dumbbells',),
                  difficulty=Difficulty.INTERMEDIATE, compound=True, contraindications=()):
    return Exercise(
        id=exercise_id,
        name=exercise_id.replace('_', ' ').title(),
        category='strength',
        primary_muscle_groups=tuple(primary),
        secondary_muscle_groups=tuple(secondary),
        equipment=tuple(equipment),
        difficulty=difficulty,
        is_compound=compound,
        contraindications=tuple(contraindications),
    )


@pytest.fixture
def catalog():
    return get_catalog()


@pytest.fixture
def settings():
    return EngineSettings()


@pytest.fixture
def exercises():
    """Packaged sample exercise catalog."""
    return load_exercises()


@pytest.fixture
def small_catalog():
    """Three chest-free exercises; any chest day has to fall back to these."""
    return [
        make_exercise('goblet_squat', [M.LEGS, M.QUADRICEPS], [M.GLUTES]),
        make_exercise('barbell_row', [M.BACK], [M.BICEPS], equipment=('barbell',)),
        make_exercise('plank', [M.CORE], equipment=('bodyweight',), compound=False),
    ]


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def monday():
    return date(2024, 3, 4)
