#!/usr/bin/env python3
"""
ironplan CLI

Command-line interface to the planning engine.

Usage:
    ironplan plan --level LEVEL --goal GOAL [--frequency N] [--start DATE] [--weeks N]
                  [--fatigue N [--fatigue-scale S]]
    ironplan config --level LEVEL --goal GOAL
    ironplan fatigue MARKERS_FILE --level LEVEL --goal GOAL [--tolerance X]
    ironplan week --level LEVEL --goal GOAL --frequency N [--limitation L ...] [--equipment E ...]
"""

import logging
import random
import sys
from datetime import date, timedelta
from typing import Optional, Tuple

import click
import yaml

from ..errors import IronplanError, ValidationError
from ..models import (
    FatigueMarkers,
    FatigueState,
    RecoveryMarkers,
    TrainingGoal,
    TrainingLevel,
    TrainingResponse,
)
from ..periodization import (
    DeloadDecider,
    PeriodizationPlanner,
    assess_fatigue,
    get_catalog,
    score_fatigue,
    score_recovery,
)
from ..settings import configure_logging, load_settings
from ..workouts import build_week, format_week_text, load_exercises

logger = logging.getLogger(__name__)

LEVELS = click.Choice([level.value for level in TrainingLevel])
GOALS = click.Choice([goal.value for goal in TrainingGoal])


@click.group()
@click.option('--config', 'config_path', type=click.Path(), help='Settings YAML file')
@click.pass_context
def cli(ctx, config_path: Optional[str]):
    """
    ironplan - periodized training plans with fatigue autoregulation.
    """
    settings = load_settings(config_path)
    configure_logging(settings)
    ctx.obj = settings


def _fail(e: Exception):
    logger.error(f"{type(e).__name__}: {e}")
    click.echo(f"❌ Error: {e}")
    sys.exit(1)


@cli.command()
@click.option('--level', type=LEVELS, required=True, help='Training level')
@click.option('--goal', type=GOALS, required=True, help='Training goal')
@click.option('--frequency', type=int, help='Training days per week')
@click.option('--start', 'start_str', type=str, help='Start date (YYYY-MM-DD), default: next Monday')
@click.option('--weeks', type=int, default=12, show_default=True, help='Plan length in weeks')
@click.option('--fatigue', type=float, help='Latest stored fatigue reading')
@click.option('--fatigue-scale', type=float, help='Scale of the stored reading (default: from settings)')
@click.option('--recovery', type=float, help='Latest recovery score (0-10)')
@click.pass_obj
def plan(settings, level: str, goal: str, frequency: Optional[int], start_str: Optional[str],
         weeks: int, fatigue: Optional[float], fatigue_scale: Optional[float], recovery: Optional[float]):
    """Generate a periodized training plan."""
    try:
        if start_str:
            start = date.fromisoformat(start_str)
        else:
            today = date.today()
            start = today + timedelta(days=7 - today.weekday())

        fatigue_state = None
        if fatigue is not None:
            fatigue_state = FatigueState.from_stored(
                fatigue, fatigue_scale or settings.external_fatigue_scale, recovery_score=recovery
            )

        planner = PeriodizationPlanner(settings=settings)
        training_plan = planner.generate_plan(
            level, goal, frequency, start, weeks, fatigue_state=fatigue_state
        )
        click.echo(planner.format_plan_text(training_plan))

    except (IronplanError, ValueError) as e:
        _fail(e)


@cli.command()
@click.option('--level', type=LEVELS, required=True, help='Training level')
@click.option('--goal', type=GOALS, required=True, help='Training goal')
def config(level: str, goal: str):
    """Show the periodization parameters for a level and goal."""
    try:
        cfg = get_catalog().lookup(level, goal)
    except IronplanError as e:
        _fail(e)
        return

    click.echo(f"\n📋 {level.upper()} / {goal.upper()}")
    click.echo(f"   Type: {cfg.periodization_type.value}")
    click.echo(f"   Mesocycle: {cfg.meso_cycle_duration} weeks, deload every {cfg.deload_frequency} weeks")
    click.echo(f"   Volume: {cfg.volume_range[0]:g}-{cfg.volume_range[1]:g} sets/muscle/week")
    click.echo(f"   Intensity: {cfg.intensity_range[0]:g}-{cfg.intensity_range[1]:g}% 1RM")
    click.echo(f"   Frequency: {cfg.frequency_range[0]}-{cfg.frequency_range[1]} days/week")
    click.echo(f"   Phases: {' → '.join(p.value for p in cfg.phase_sequence)}")
    click.echo(f"   RPE: {cfg.rpe_range[0]:g}-{cfg.rpe_range[1]:g}")
    click.echo(f"   Autoregulation: {cfg.autoregulation.value}")
    click.echo(f"   Deload: {cfg.recommended_deload_type.value}, fatigue threshold {cfg.fatigue_threshold:g}")
    if cfg.special_techniques:
        click.echo(f"   Techniques: {', '.join(cfg.special_techniques)}")


@cli.command()
@click.argument('markers_file', type=click.Path(exists=True))
@click.option('--level', type=LEVELS, required=True, help='Training level')
@click.option('--goal', type=GOALS, required=True, help='Training goal')
@click.option('--tolerance', type=float, default=1.0, show_default=True, help='Individual fatigue tolerance')
@click.option('--consecutive', type=int, default=0, show_default=True,
              help='Consecutive high-fatigue weeks so far')
@click.pass_obj
def fatigue(settings, markers_file: str, level: str, goal: str, tolerance: float, consecutive: int):
    """
    Score fatigue and recovery from a markers file.

    The file holds optional 'fatigue', 'recovery' and 'response' sections
    whose keys match the marker fields.
    """
    try:
        with open(markers_file) as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, dict):
            raise ValidationError(f"{markers_file} must hold a mapping of marker sections")

        fatigue_markers = FatigueMarkers(**(raw.get('fatigue') or {}))
        recovery_markers = RecoveryMarkers(**(raw.get('recovery') or {}))
        response = TrainingResponse(**raw['response']) if raw.get('response') else None

        fatigue_score = score_fatigue(fatigue_markers, level, goal, tolerance)
        recovery_score = score_recovery(recovery_markers)
        state = assess_fatigue(fatigue_score, recovery_score, level, goal)
        deload = DeloadDecider(settings).needs_deload(
            fatigue_score, recovery_score, response, get_catalog().lookup(level, goal), consecutive
        )

    except TypeError as e:
        _fail(ValidationError(f"Unknown marker in {markers_file}: {e}"))
        return
    except IronplanError as e:
        _fail(e)
        return

    click.echo(f"\n📊 Fatigue: {state.current_fatigue:.2f}   Recovery: {state.recovery_capacity:.2f}")
    click.echo(f"   Readiness: {state.readiness_to_train:.1f}/10")
    click.echo(f"   Performance decrement: {state.performance_decrement:.0f}%")
    click.echo(f"   Action: {state.recommended_action.value}")
    for line in state.recommendations:
        click.echo(f"     • {line}")

    if deload:
        click.secho("\n⚠️  Deload recommended", fg='yellow')
    if state.deload_strategy:
        s = state.deload_strategy
        click.echo(
            f"   {s.type.value} deload for {s.duration_days} days: "
            f"-{s.volume_reduction:g}% volume, -{s.intensity_reduction:g}% intensity, "
            f"-{s.frequency_reduction} days/week"
        )
        if s.notes:
            click.echo(f"   {s.notes}")


@cli.command()
@click.option('--level', type=LEVELS, required=True, help='Training level')
@click.option('--goal', type=GOALS, required=True, help='Training goal')
@click.option('--frequency', type=click.IntRange(1, 7), required=True, help='Training days per week')
@click.option('--limitation', 'limitations', multiple=True, help='Injury or condition to avoid')
@click.option('--equipment', multiple=True, help='Available equipment (default: full gym)')
@click.option('--catalog', 'catalog_path', type=click.Path(exists=True), help='Exercise catalog YAML')
@click.option('--seed', type=int, help='Random seed for reproducible selection')
@click.pass_obj
def week(settings, level: str, goal: str, frequency: int, limitations: Tuple[str, ...],
         equipment: Tuple[str, ...], catalog_path: Optional[str], seed: Optional[int]):
    """Build a week of workouts."""
    try:
        exercises = load_exercises(catalog_path or settings.exercise_catalog_path)
        days = build_week(
            exercises,
            level,
            goal,
            frequency,
            limitations=limitations,
            equipment=equipment or None,
            rng=random.Random(seed),
            settings=settings,
        )
        click.echo(format_week_text(days))

    except IronplanError as e:
        _fail(e)


if __name__ == '__main__':
    cli()
