"""
Cycle Generator

Turns a periodization config into an ordered week-by-week schedule of
microcycles, grouped into mesocycles.

Each week walks one step through the config's phase sequence (restarting
at every mesocycle). Weeks on a multiple of the deload frequency are
deload weeks. With fatigue-based autoregulation, a high fatigue reading
forces one early deload at the first unscheduled week.
"""

import logging
import math
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import List, Optional, Sequence, Tuple

from ..errors import ConfigIntegrityError
from ..models import (
    Assessment,
    AutoregulationStrategy,
    DeloadStrategy,
    DeloadTiming,
    DeloadType,
    FatigueState,
    MesoCycle,
    MicroCycle,
    PeriodizationConfig,
    RestGuidelines,
    TrainingGoal,
    TrainingLevel,
    TrainingPhase,
    check_range,
    parse_enum,
    sealed,
)
from ..settings import EngineSettings
from .catalog import ConfigCatalog, get_catalog, validate_config
from .deload import DeloadDecider, DeloadStrategyPersonalizer
from .phases import (
    ADAPTATION_MARKERS,
    LOAD_POSITIONS,
    PHASE_OBJECTIVES,
    PHASE_TECHNIQUES,
    focus_for,
    progression_strategy,
)

logger = logging.getLogger(__name__)

DEFAULT_RIR_RANGE = (1.0, 3.0)
NEUTRAL_RECOVERY = 5.0
MIN_ISOLATION_REST = 30

TECHNIQUE_CAPS = sealed({
    TrainingLevel.BEGINNER: 1,
    TrainingLevel.INTERMEDIATE: 2,
    TrainingLevel.ADVANCED: 3,
    TrainingLevel.ELITE: 4,
}, TrainingLevel, 'TECHNIQUE_CAPS')


@dataclass(frozen=True)
class DeloadVariant:
    """
    How a deload week is loaded for one deload type.

    Volume is a fraction of the range minimum. Intensity is either a
    position within the range or a fraction of its minimum. RIR is offset
    from the range max, RPE from the range min.
    """
    volume_factor: float
    rir_offset: int
    rpe_offset: int
    intensity_position: Optional[float] = None
    intensity_factor: Optional[float] = None
    frequency_cut: int = 0


DELOAD_VARIANTS = sealed({
    DeloadType.VOLUME: DeloadVariant(volume_factor=0.5, intensity_position=0.7,
                                     rir_offset=1, rpe_offset=-1),
    DeloadType.INTENSITY: DeloadVariant(volume_factor=0.7, intensity_factor=0.8,
                                        rir_offset=2, rpe_offset=-2),
    DeloadType.FREQUENCY: DeloadVariant(volume_factor=0.7, intensity_position=0.5,
                                        rir_offset=0, rpe_offset=0, frequency_cut=1),
    DeloadType.COMBINED: DeloadVariant(volume_factor=0.6, intensity_factor=0.8,
                                       rir_offset=1, rpe_offset=-1),
}, DeloadType, 'DELOAD_VARIANTS')


@dataclass(frozen=True)
class PlanRequest:
    """Inputs for one plan generation."""
    level: TrainingLevel
    goal: TrainingGoal
    start_date: date
    duration_weeks: int
    frequency: Optional[int] = None
    assessment: Optional[Assessment] = None

    def __post_init__(self):
        object.__setattr__(self, 'level', parse_enum(TrainingLevel, self.level, 'training level'))
        object.__setattr__(self, 'goal', parse_enum(TrainingGoal, self.goal, 'training goal'))
        if self.frequency is not None:
            check_range('frequency', self.frequency, 1, 7)
        weeks = self.duration_weeks
        if isinstance(weeks, bool) or not isinstance(weeks, int) or weeks < 1:
            raise ConfigIntegrityError(f"duration_weeks must be an integer >= 1, got {weeks!r}")


@dataclass(frozen=True)
class _Load:
    volume: int
    intensity: int
    frequency: int
    rir: float
    rpe: float


class CycleGenerator:
    """
    Generates microcycles for a plan request.

    Usage:
        generator = CycleGenerator()
        weeks = generator.generate(PlanRequest('advanced', 'strength', date.today(), 8))
    """

    def __init__(
        self,
        catalog: Optional[ConfigCatalog] = None,
        settings: Optional[EngineSettings] = None
    ):
        self.catalog = catalog or get_catalog()
        self.settings = settings or EngineSettings()
        self.decider = DeloadDecider(self.settings)
        self.personalizer = DeloadStrategyPersonalizer(self.catalog)

    def generate(
        self,
        request: PlanRequest,
        fatigue_state: Optional[FatigueState] = None,
        config: Optional[PeriodizationConfig] = None
    ) -> List[MicroCycle]:
        """
        Generate the week-by-week schedule.

        Args:
            request: Level, goal, start date, duration and frequency
            fatigue_state: Latest fatigue reading (canonical 0-10 scale).
                Only consulted when the config uses fatigue-based autoregulation.
            config: Config to generate from (default: catalog lookup)

        Returns:
            MicroCycles for weeks 1..duration_weeks

        Raises:
            MissingConfigError: If the catalog has no entry for level and goal
            ConfigIntegrityError: If the config or duration is malformed
        """
        config = config or self.catalog.lookup(request.level, request.goal)
        validate_config(config)

        forced_pending = self.autoregulated_deload_due(config, fatigue_state)
        insert = self.settings.forced_deload_mode == 'insert'
        sequence = config.phase_sequence

        weeks = []
        step = 0
        for week_number in range(1, request.duration_weeks + 1):
            if (week_number - 1) % config.meso_cycle_duration == 0:
                step = 0

            scheduled = week_number % config.deload_frequency == 0
            forced = forced_pending and not scheduled
            if forced_pending and (forced or scheduled):
                forced_pending = False

            is_deload = scheduled or forced
            if is_deload:
                phase = TrainingPhase.DELOAD
            else:
                phase = sequence[step % len(sequence)]
                if phase is TrainingPhase.DELOAD:
                    # Off-schedule deload slot runs at maintenance loads
                    phase = TrainingPhase.MAINTENANCE

            if forced:
                logger.info(
                    f"Autoregulated deload forced at week {week_number} "
                    f"({config.level.value}/{config.goal.value})"
                )
            if not (forced and insert):
                step += 1

            weeks.append(self._build_week(config, request, week_number, phase, is_deload, forced))

        logger.info(
            f"Generated {len(weeks)} weeks for {config.level.value}/{config.goal.value}: "
            f"{sum(1 for w in weeks if w.is_deload)} deload"
        )
        return weeks

    def autoregulated_deload_due(
        self,
        config: PeriodizationConfig,
        fatigue_state: Optional[FatigueState]
    ) -> bool:
        """
        Whether a fatigue reading forces an early deload.

        Only fatigue-based configs react. The reading forces a deload when it
        is above the config's fatigue threshold or the deload decider fires.
        """
        if config.autoregulation is not AutoregulationStrategy.FATIGUE_BASED or fatigue_state is None:
            return False

        fatigue = fatigue_state.current_fatigue
        if fatigue > config.fatigue_threshold:
            return True

        recovery = fatigue_state.recovery_score
        return self.decider.needs_deload(
            fatigue,
            recovery if recovery is not None else NEUTRAL_RECOVERY,
            fatigue_state.training_response,
            config,
            fatigue_state.consecutive_high_fatigue_weeks,
        )

    def group_mesocycles(
        self,
        config: PeriodizationConfig,
        weeks: Sequence[MicroCycle],
        fatigue_state: Optional[FatigueState] = None
    ) -> List[MesoCycle]:
        """
        Split generated weeks into mesocycles of the configured duration.

        Mesocycles containing a deload carry a deload strategy: personalized
        from the fatigue reading under fatigue-based autoregulation, the
        config default otherwise.
        """
        mesos = []
        size = config.meso_cycle_duration
        for index in range(0, len(weeks), size):
            block = tuple(weeks[index:index + size])
            includes_deload = any(w.is_deload for w in block)
            strategy = None
            if includes_deload:
                strategy = self._deload_strategy(config, fatigue_state,
                                                  reactive=any(w.forced_deload for w in block))
            number = index // size + 1
            mesos.append(MesoCycle(
                number=number,
                name=f"Mesocycle {number}",
                micro_cycles=block,
                phase_sequence=tuple(w.phase for w in block),
                includes_deload=includes_deload,
                deload_strategy=strategy,
                start_date=block[0].start_date,
                end_date=block[-1].end_date,
            ))
        return mesos

    def _deload_strategy(
        self,
        config: PeriodizationConfig,
        fatigue_state: Optional[FatigueState],
        reactive: bool
    ) -> DeloadStrategy:
        if config.autoregulation is not AutoregulationStrategy.FATIGUE_BASED or fatigue_state is None:
            return config.deload_strategy

        recovery = fatigue_state.recovery_score
        strategy = self.personalizer.personalize(
            fatigue_state.current_fatigue,
            recovery if recovery is not None else NEUTRAL_RECOVERY,
            config.level,
            config.goal,
            config.deload_strategy,
        )
        if reactive:
            strategy = replace(strategy, timing=DeloadTiming.REACTIVE)
        return strategy

    # ------------------------------------------------------------------
    # Week construction
    # ------------------------------------------------------------------

    def _build_week(
        self,
        config: PeriodizationConfig,
        request: PlanRequest,
        week_number: int,
        phase: TrainingPhase,
        is_deload: bool,
        forced: bool
    ) -> MicroCycle:
        load = self._deload_load(config, request) if is_deload else self._phase_load(config, request, phase)
        primary, secondary = focus_for(phase, config.goal)
        start = request.start_date + timedelta(days=7 * (week_number - 1))

        notes = f"Week {week_number} of the {phase.title.lower()} phase. Objective: {PHASE_OBJECTIVES[phase]}."
        if forced:
            notes += " Deload brought forward by fatigue autoregulation."

        return MicroCycle(
            week_number=week_number,
            name=f"Week {week_number} - {phase.title}",
            phase=phase,
            is_deload=is_deload,
            volume=load.volume,
            intensity=load.intensity,
            frequency=load.frequency,
            rir_range=(max(0, math.floor(load.rir - 1)), math.ceil(load.rir + 1)),
            rpe_range=(max(1, math.floor(load.rpe - 1)), min(10, math.ceil(load.rpe + 1))),
            tempo=config.tempo_for(phase),
            rest_guidelines=self._rest_guidelines(config, phase),
            technique_emphasis=self._techniques(config, phase),
            primary_focus=primary,
            secondary_focus=secondary,
            progression_strategy=progression_strategy(phase, config.progression_type),
            adaptation_markers=ADAPTATION_MARKERS[phase],
            notes=notes,
            start_date=start,
            end_date=start + timedelta(days=6),
            forced_deload=forced,
        )

    def _phase_load(self, config: PeriodizationConfig, request: PlanRequest, phase: TrainingPhase) -> _Load:
        position = LOAD_POSITIONS[phase]
        rir_range = config.rir_range or DEFAULT_RIR_RANGE

        volume = _round(_at(config.volume_range, position.volume))
        intensity = _round(_at(config.intensity_range, position.intensity))
        return _Load(
            volume=int(_clamp(volume, *config.volume_range)),
            intensity=int(_clamp(intensity, *config.intensity_range)),
            frequency=self.base_frequency(config, request),
            rir=_at(rir_range, position.rir),
            rpe=_at(config.rpe_range, position.rpe),
        )

    def _deload_load(self, config: PeriodizationConfig, request: PlanRequest) -> _Load:
        variant = DELOAD_VARIANTS[config.recommended_deload_type]
        rir_range = config.rir_range or DEFAULT_RIR_RANGE
        vol_min, vol_max = config.volume_range
        int_min, int_max = config.intensity_range

        if variant.intensity_position is not None:
            intensity = _at(config.intensity_range, variant.intensity_position)
        else:
            intensity = int_min * variant.intensity_factor

        frequency = self.base_frequency(config, request)
        if variant.frequency_cut:
            frequency = max(1, frequency - variant.frequency_cut)

        return _Load(
            volume=int(_clamp(_round(vol_min * variant.volume_factor), 0, vol_max)),
            intensity=int(_clamp(_round(intensity), 0, int_max)),
            frequency=frequency,
            rir=rir_range[1] + variant.rir_offset,
            rpe=config.rpe_range[0] + variant.rpe_offset,
        )

    def base_frequency(self, config: PeriodizationConfig, request: PlanRequest) -> int:
        low, high = config.frequency_range
        if request.frequency is None:
            return _round((low + high) / 2)
        return int(_clamp(request.frequency, low, high))

    def _rest_guidelines(self, config: PeriodizationConfig, phase: TrainingPhase) -> RestGuidelines:
        low, high = config.rest_for(phase)
        return RestGuidelines(
            compound=(low, high),
            isolation=(max(MIN_ISOLATION_REST, low - 30), max(MIN_ISOLATION_REST, high - 30)),
        )

    def _techniques(self, config: PeriodizationConfig, phase: TrainingPhase) -> Tuple[str, ...]:
        allowed = set(config.special_techniques)
        matching = [t for t in PHASE_TECHNIQUES[phase] if t in allowed]
        return tuple(matching[:TECHNIQUE_CAPS[config.level]])


def _at(bounds: Tuple[float, float], position: float) -> float:
    low, high = bounds
    return low + (high - low) * position


def _round(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
