"""
Periodization and fatigue autoregulation.

Turns a trainee's level and goal into a multi-week plan (phases, loads,
deload timing) and reconciles it against measured fatigue and recovery.
"""

from .catalog import ConfigCatalog, get_catalog
from .fatigue import FatigueScorer, RecoveryScorer, score_fatigue, score_recovery
from .deload import DeloadDecider, DeloadStrategyPersonalizer, assess_fatigue
from .cycles import CycleGenerator, PlanRequest
from .history import FatigueHistory
from .planner import PeriodizationPlanner, generate_plan, needs_deload, personalize_deload

__all__ = [
    'ConfigCatalog',
    'get_catalog',
    'FatigueScorer',
    'RecoveryScorer',
    'score_fatigue',
    'score_recovery',
    'DeloadDecider',
    'DeloadStrategyPersonalizer',
    'assess_fatigue',
    'CycleGenerator',
    'PlanRequest',
    'FatigueHistory',
    'PeriodizationPlanner',
    'generate_plan',
    'needs_deload',
    'personalize_deload',
]
