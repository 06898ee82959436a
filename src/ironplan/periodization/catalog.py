"""
Periodization Catalog

Static level x goal lookup of periodization parameters. The catalog is
parsed from a YAML data file once per process and exposed read-only.
"""

import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple

import yaml

from ..errors import ConfigIntegrityError, MissingConfigError, ValidationError
from ..models import (
    AutoregulationStrategy,
    DeloadStrategy,
    DeloadTiming,
    DeloadType,
    ExerciseRotation,
    NutritionStrategy,
    PeriodizationConfig,
    PeriodizationType,
    ProgressionType,
    TrainingGoal,
    TrainingLevel,
    TrainingPhase,
    parse_enum,
)

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent.parent / "data" / "periodization.yaml"
DEFAULT_DELOAD_DURATION_DAYS = 7


class ConfigCatalog:
    """
    Read-only map of (level, goal) to PeriodizationConfig.

    Usage:
        catalog = ConfigCatalog.from_yaml()
        config = catalog.lookup('advanced', 'strength')
    """

    def __init__(self, configs: Mapping[Tuple[TrainingLevel, TrainingGoal], PeriodizationConfig]):
        self._configs = MappingProxyType(dict(configs))

    @classmethod
    def from_yaml(cls, path: Optional[Path] = None) -> 'ConfigCatalog':
        """
        Load a catalog from a YAML file.

        Args:
            path: Catalog file. If None, uses the packaged catalog.

        Returns:
            ConfigCatalog instance

        Raises:
            ConfigIntegrityError: If an entry cannot be parsed
        """
        path = Path(path) if path else DEFAULT_CATALOG_PATH
        with open(path) as f:
            raw = yaml.safe_load(f) or {}

        configs = _parse_catalog(raw)
        logger.info(f"Loaded {len(configs)} periodization configs from {path}")
        return cls(configs)

    def lookup(self, level, goal) -> PeriodizationConfig:
        """
        Get the config for a level and goal.

        Args:
            level: TrainingLevel or its string value
            goal: TrainingGoal or its string value

        Returns:
            PeriodizationConfig

        Raises:
            ValidationError: If level or goal is not a known category
            MissingConfigError: If the pair has no entry
        """
        level = parse_enum(TrainingLevel, level, 'training level')
        goal = parse_enum(TrainingGoal, goal, 'training goal')
        try:
            return self._configs[(level, goal)]
        except KeyError:
            raise MissingConfigError(level.value, goal.value) from None

    def fatigue_threshold(self, level, goal) -> float:
        return self.lookup(level, goal).fatigue_threshold

    def __iter__(self) -> Iterator[PeriodizationConfig]:
        return iter(self._configs.values())

    def __len__(self) -> int:
        return len(self._configs)

    def __contains__(self, key) -> bool:
        return key in self._configs


@lru_cache(maxsize=None)
def get_catalog() -> ConfigCatalog:
    """Process-wide catalog loaded from the packaged data file."""
    return ConfigCatalog.from_yaml()


def _parse_catalog(raw: Dict) -> Dict[Tuple[TrainingLevel, TrainingGoal], PeriodizationConfig]:
    level_defaults = raw.get('level_defaults', {})
    goal_defaults = raw.get('goal_defaults', {})
    configs = {}

    for level_name, goals in (raw.get('configs') or {}).items():
        for goal_name, entry in (goals or {}).items():
            try:
                level = parse_enum(TrainingLevel, level_name, 'training level')
                goal = parse_enum(TrainingGoal, goal_name, 'training goal')
                merged = dict(goal_defaults.get(goal_name, {}))
                merged.update(level_defaults.get(level_name, {}))
                merged.update(entry)
                configs[(level, goal)] = _build_config(level, goal, merged)
            except (KeyError, TypeError, ValueError) as e:
                if isinstance(e, ConfigIntegrityError):
                    raise
                raise ConfigIntegrityError(
                    f"Bad catalog entry {level_name}/{goal_name}: {e}"
                ) from e

    return configs


def _build_config(level: TrainingLevel, goal: TrainingGoal, entry: Dict) -> PeriodizationConfig:
    deload = entry['deload']
    deload_strategy = DeloadStrategy(
        type=parse_enum(DeloadType, deload['type'], 'deload type'),
        volume_reduction=deload.get('volume_reduction', 0),
        intensity_reduction=deload.get('intensity_reduction', 0),
        frequency_reduction=deload.get('frequency_reduction', 0),
        duration_days=deload.get('duration_days', DEFAULT_DELOAD_DURATION_DAYS),
        timing=parse_enum(DeloadTiming, deload.get('timing', entry.get('deload_timing', 'planned'))),
    )

    nutrition = entry.get('nutrition') or {}
    nutrition_strategy = NutritionStrategy(
        calorie_balance=nutrition.get('calorie_balance', entry.get('calorie_balance', 'maintenance')),
        protein_per_kg=float(nutrition.get('protein_per_kg', entry.get('protein_per_kg', 1.6))),
        carb_timing=nutrition.get('carb_timing', 'constant'),
    )

    rir = entry.get('rir')

    return PeriodizationConfig(
        level=level,
        goal=goal,
        periodization_type=parse_enum(PeriodizationType, entry['type'], 'periodization type'),
        meso_cycle_duration=int(entry['meso_cycle_duration']),
        deload_frequency=int(entry['deload_frequency']),
        volume_range=_pair(entry['volume']),
        intensity_range=_pair(entry['intensity']),
        frequency_range=_pair(entry['frequency'], int),
        phase_sequence=tuple(parse_enum(TrainingPhase, p, 'phase') for p in entry['phases']),
        rir_range=_pair(rir) if rir is not None else None,
        rpe_range=_pair(entry.get('rpe', [7, 9])),
        tempo=MappingProxyType({
            parse_enum(TrainingPhase, phase, 'phase'): str(tempo)
            for phase, tempo in (entry.get('tempo') or {}).items()
        }),
        rest_periods=MappingProxyType({
            parse_enum(TrainingPhase, phase, 'phase'): _pair(rest, int)
            for phase, rest in (entry.get('rest') or {}).items()
        }),
        exercise_rotation=parse_enum(ExerciseRotation, entry.get('rotation', 'fixed')),
        special_techniques=tuple(entry.get('special_techniques') or ()),
        autoregulation=parse_enum(AutoregulationStrategy, entry.get('autoregulation', 'none')),
        progression_type=parse_enum(ProgressionType, entry.get('progression', 'linear')),
        volume_progression_rate=float(entry.get('volume_progression_rate', 3.0)),
        intensity_progression_rate=float(entry.get('intensity_progression_rate', 1.5)),
        nutrition_strategy=nutrition_strategy,
        deload_strategy=deload_strategy,
        fatigue_threshold=float(entry['fatigue_threshold']),
    )


def _pair(value, cast=float) -> Tuple:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValidationError(f"Expected a [min, max] pair, got {value!r}")
    return cast(value[0]), cast(value[1])


def validate_config(config: PeriodizationConfig):
    """
    Check a config before generating from it.

    Raises:
        ConfigIntegrityError: On non-positive durations, empty phase
            sequence, or any range whose min exceeds its max
    """
    if config.meso_cycle_duration <= 0:
        raise ConfigIntegrityError(
            f"meso_cycle_duration must be > 0, got {config.meso_cycle_duration}")
    if config.deload_frequency <= 0:
        raise ConfigIntegrityError(
            f"deload_frequency must be > 0, got {config.deload_frequency}")
    if not config.phase_sequence:
        raise ConfigIntegrityError("phase_sequence must not be empty")

    ranges = {
        'volume_range': config.volume_range,
        'intensity_range': config.intensity_range,
        'frequency_range': config.frequency_range,
        'rpe_range': config.rpe_range,
    }
    if config.rir_range is not None:
        ranges['rir_range'] = config.rir_range
    for phase, rest in config.rest_periods.items():
        ranges[f'rest[{phase.value}]'] = rest

    for name, (low, high) in ranges.items():
        if low > high:
            raise ConfigIntegrityError(f"{name} min {low} exceeds max {high}")
