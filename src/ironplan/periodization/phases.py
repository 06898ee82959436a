"""
Per-phase lookup tables.

Every table is keyed by TrainingPhase (or TrainingGoal) and must map every
member; an incomplete table fails at import rather than falling through to
a default at generation time.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Tuple

from ..models import ProgressionType, TrainingGoal, TrainingPhase, sealed

P = TrainingPhase
G = TrainingGoal


@dataclass(frozen=True)
class LoadPosition:
    """Fractional position (0 = range min, 1 = range max) for each load parameter."""
    volume: float
    intensity: float
    rir: float
    rpe: float


MIDPOINT = LoadPosition(0.5, 0.5, 0.5, 0.5)

LOAD_POSITIONS = {
    P.ANATOMICAL_ADAPTATION: LoadPosition(volume=0.3, intensity=0.0, rir=1.0, rpe=0.0),
    P.HYPERTROPHY: LoadPosition(volume=1.0, intensity=0.4, rir=0.3, rpe=0.7),
    P.STRENGTH: LoadPosition(volume=0.6, intensity=0.7, rir=0.2, rpe=0.8),
    P.POWER: LoadPosition(volume=0.0, intensity=1.0, rir=0.0, rpe=1.0),
    P.PEAKING: MIDPOINT,
    P.MAINTENANCE: MIDPOINT,
    # Deload weeks are loaded by deload type, not by position
    P.DELOAD: MIDPOINT,
    P.RECOVERY: MIDPOINT,
    P.ACCUMULATION: LoadPosition(volume=1.0, intensity=0.3, rir=0.5, rpe=0.5),
    P.INTENSIFICATION: LoadPosition(volume=0.7, intensity=0.6, rir=0.3, rpe=0.7),
    P.REALIZATION: LoadPosition(volume=0.4, intensity=1.0, rir=0.0, rpe=1.0),
    P.METABOLIC: LoadPosition(volume=1.0, intensity=0.3, rir=0.3, rpe=0.7),
    P.ENDURANCE: LoadPosition(volume=1.0, intensity=0.0, rir=1.0, rpe=0.0),
}

PHASE_TECHNIQUES = {
    P.ANATOMICAL_ADAPTATION: ('tempo_training', 'isometrics'),
    P.HYPERTROPHY: ('drop_sets', 'super_sets', 'giant_sets', 'myo_reps',
                    'mechanical_drop_sets', 'pre_exhaustion', 'partial_reps'),
    P.STRENGTH: ('cluster_sets', 'rest_pause', 'accommodating_resistance',
                 'wave_loading', 'heavy_negatives'),
    P.POWER: ('contrast_method', 'complex_training', 'accommodating_resistance', 'plyometrics'),
    P.PEAKING: ('heavy_singles', 'wave_loading', 'cluster_sets'),
    P.MAINTENANCE: ('auto_regulation', 'undulating_periodization'),
    P.DELOAD: ('light_technique', 'active_recovery'),
    P.RECOVERY: ('mobility_work', 'active_recovery'),
    P.ACCUMULATION: ('german_volume_training', 'high_rep_sets', 'time_under_tension'),
    P.INTENSIFICATION: ('cluster_sets', 'wave_loading', 'heavy_negatives'),
    P.REALIZATION: ('heavy_singles', 'contrast_method', 'peaking_techniques'),
    P.METABOLIC: ('drop_sets', 'super_sets', 'giant_sets', 'tabata'),
    P.ENDURANCE: ('circuit_training', 'amrap', 'emom', 'high_rep_sets'),
}

PHASE_PRIMARY_FOCUS = {
    P.ANATOMICAL_ADAPTATION: ('technique', 'movement patterns', 'stability'),
    P.HYPERTROPHY: ('volume', 'time under tension', 'muscle pump'),
    P.STRENGTH: ('intensity', 'neural activation', 'maximal strength'),
    P.POWER: ('speed', 'explosiveness', 'power'),
    P.PEAKING: ('maximal performance', 'competition readiness'),
    P.MAINTENANCE: ('general progression',),
    P.DELOAD: ('recovery', 'technique', 'mobility'),
    P.RECOVERY: ('recovery', 'mobility'),
    P.ACCUMULATION: ('volume', 'work capacity'),
    P.INTENSIFICATION: ('intensity', 'load progression'),
    P.REALIZATION: ('maximal strength', 'performance'),
    P.METABOLIC: ('density', 'muscular endurance', 'caloric burn'),
    P.ENDURANCE: ('muscular endurance', 'work capacity'),
}

PHASE_SECONDARY_FOCUS = {
    P.ANATOMICAL_ADAPTATION: ('muscular endurance', 'mind-muscle connection'),
    P.HYPERTROPHY: ('strength', 'nutrition', 'recovery'),
    P.STRENGTH: ('hypertrophy', 'technique', 'nervous system'),
    P.POWER: ('strength', 'coordination', 'nervous system'),
    P.PEAKING: ('recovery', 'nervous system'),
    P.MAINTENANCE: ('technique', 'recovery'),
    P.DELOAD: ('nutrition', 'sleep', 'stress'),
    P.RECOVERY: ('nutrition', 'sleep'),
    P.ACCUMULATION: ('technique', 'recovery'),
    P.INTENSIFICATION: ('technique', 'recovery'),
    P.REALIZATION: ('technique', 'nervous system'),
    P.METABOLIC: ('hypertrophy', 'cardiovascular', 'fat burning'),
    P.ENDURANCE: ('cardiovascular', 'technique'),
}

GOAL_PRIMARY_FOCUS = {
    G.STRENGTH: ('maximal strength', 'neural efficiency'),
    G.HYPERTROPHY: ('muscle development', 'metabolic stimulus'),
    G.ENDURANCE: ('muscular endurance', 'aerobic capacity'),
    G.POWER: (),
    G.WEIGHT_LOSS: ('caloric expenditure', 'muscle preservation'),
    G.BODY_RECOMPOSITION: (),
    G.GENERAL_FITNESS: (),
    G.SPORT_SPECIFIC: (),
}

GOAL_SECONDARY_FOCUS = {
    G.STRENGTH: ('hypertrophy', 'CNS recovery'),
    G.HYPERTROPHY: ('nutrition', 'inter-session recovery'),
    G.ENDURANCE: ('cardiovascular capacity', 'energy efficiency'),
    G.POWER: (),
    G.WEIGHT_LOSS: ('caloric deficit', 'NEAT activity'),
    G.BODY_RECOMPOSITION: (),
    G.GENERAL_FITNESS: (),
    G.SPORT_SPECIFIC: (),
}

PHASE_OBJECTIVES = {
    P.ANATOMICAL_ADAPTATION: 'prepare the body for harder training by building a base of strength and endurance',
    P.HYPERTROPHY: 'increase muscle size with moderate-high volume and moderate intensity',
    P.STRENGTH: 'develop maximal strength with high intensity and moderate volume',
    P.POWER: 'develop power and speed with very high intensity and low volume',
    P.PEAKING: 'maximize performance for a specific event with very high intensity and low volume',
    P.MAINTENANCE: 'maintain gains with moderate volume and intensity',
    P.DELOAD: 'recover and regenerate with reduced volume and intensity',
    P.RECOVERY: 'recover fully with minimal activity',
    P.ACCUMULATION: 'accumulate training volume to create a growth stimulus',
    P.INTENSIFICATION: 'raise training intensity to drive adaptation',
    P.REALIZATION: 'realize the strength built in earlier phases',
    P.METABOLIC: 'maximize caloric expenditure and metabolic stress with short rests and high density',
    P.ENDURANCE: 'improve muscular endurance with high volume and moderate-low intensity',
}

ADAPTATION_MARKERS = {
    P.ANATOMICAL_ADAPTATION: ('Better technique', 'Less muscle soreness', 'Improved coordination'),
    P.HYPERTROPHY: ('Increased muscle size', 'Better pump', 'Can complete more volume'),
    P.STRENGTH: ('Higher top loads', 'Better neuromuscular efficiency', 'Less fatigue at submaximal loads'),
    P.POWER: ('Faster bar speed', 'Better explosive power', 'Shorter ground contact'),
    P.PEAKING: ('Top performance on test lifts', 'Sharp, fast heavy singles'),
    P.MAINTENANCE: ('Performance holding steady', 'Consistent session quality'),
    P.DELOAD: ('Lower perceived fatigue', 'Better sleep quality', 'Motivation returning'),
    P.RECOVERY: ('Lower perceived fatigue', 'Normal resting heart rate'),
    P.ACCUMULATION: ('Tolerating higher weekly volume', 'Recovering between sessions'),
    P.INTENSIFICATION: ('Heavier working sets', 'Stable technique under load'),
    P.REALIZATION: ('New rep or load records', 'Sharp, fast heavy singles'),
    P.METABOLIC: ('Better lactate tolerance', 'Faster recovery between sets', 'Higher work capacity'),
    P.ENDURANCE: ('More reps at fixed load', 'Faster recovery between sets'),
}

PHASE_PROGRESSION = {
    P.ANATOMICAL_ADAPTATION: 'Technical progression and neuromuscular adaptation',
    P.HYPERTROPHY: 'Linear volume progression',
    P.STRENGTH: 'Intensity progression with controlled volume',
    P.POWER: 'Progress bar speed, then load',
    P.PEAKING: 'Taper volume while holding intensity',
    P.MAINTENANCE: 'Balanced volume and intensity progression',
    P.DELOAD: 'Planned reduction to support recovery',
    P.RECOVERY: 'No progression; recover',
    P.ACCUMULATION: 'Progressive increase in total volume',
    P.INTENSIFICATION: 'Progressive increase in intensity',
    P.REALIZATION: 'Express accumulated strength at peak loads',
    P.METABOLIC: 'Shorter rests and higher density',
    P.ENDURANCE: 'Add reps and work at steady loads',
}

PROGRESSION_BY_MODEL = MappingProxyType({
    (P.HYPERTROPHY, ProgressionType.DOUBLE): 'Double progression: add reps, then weight',
    (P.HYPERTROPHY, ProgressionType.TRIPLE): 'Triple progression: add reps, then sets, then weight',
    (P.STRENGTH, ProgressionType.WAVE): 'Wave loading: alternate heavy and light days',
    (P.STRENGTH, ProgressionType.STEP): 'Step loading: small, consistent increments',
})


LOAD_POSITIONS = sealed(LOAD_POSITIONS, P, 'LOAD_POSITIONS')
PHASE_TECHNIQUES = sealed(PHASE_TECHNIQUES, P, 'PHASE_TECHNIQUES')
PHASE_PRIMARY_FOCUS = sealed(PHASE_PRIMARY_FOCUS, P, 'PHASE_PRIMARY_FOCUS')
PHASE_SECONDARY_FOCUS = sealed(PHASE_SECONDARY_FOCUS, P, 'PHASE_SECONDARY_FOCUS')
GOAL_PRIMARY_FOCUS = sealed(GOAL_PRIMARY_FOCUS, G, 'GOAL_PRIMARY_FOCUS')
GOAL_SECONDARY_FOCUS = sealed(GOAL_SECONDARY_FOCUS, G, 'GOAL_SECONDARY_FOCUS')
PHASE_OBJECTIVES = sealed(PHASE_OBJECTIVES, P, 'PHASE_OBJECTIVES')
ADAPTATION_MARKERS = sealed(ADAPTATION_MARKERS, P, 'ADAPTATION_MARKERS')
PHASE_PROGRESSION = sealed(PHASE_PROGRESSION, P, 'PHASE_PROGRESSION')


def focus_for(phase: TrainingPhase, goal: TrainingGoal) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
    """Primary and secondary focus tags: phase base list plus goal additions, deduplicated."""
    primary = _unique(PHASE_PRIMARY_FOCUS[phase] + GOAL_PRIMARY_FOCUS[goal])
    secondary = _unique(PHASE_SECONDARY_FOCUS[phase] + GOAL_SECONDARY_FOCUS[goal])
    return primary, secondary


def progression_strategy(phase: TrainingPhase, model: ProgressionType) -> str:
    return PROGRESSION_BY_MODEL.get((phase, model), PHASE_PROGRESSION[phase])


def _unique(items: Tuple[str, ...]) -> Tuple[str, ...]:
    return tuple(dict.fromkeys(items))
