"""
Engine settings.

Defaults live on the dataclass; a YAML file (config/engine.yaml, or the
path in IRONPLAN_CONFIG) overrides them, and environment variables
override the file.
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from .errors import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "engine.yaml"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

FORCED_DELOAD_MODES = ('substitute', 'insert')


@dataclass(frozen=True)
class EngineSettings:
    """Tunable engine parameters."""
    # Deload decision weights
    recovery_weight: float = 0.3
    training_response_weight: float = 0.2

    # Autoregulation
    forced_deload_mode: str = 'substitute'
    external_fatigue_scale: float = 100.0

    # Exercise selection
    min_candidate_pool: int = 5
    min_exercises: int = 3
    max_alternatives: int = 3
    exercise_catalog_path: Optional[str] = None

    log_level: str = 'INFO'

    def __post_init__(self):
        if self.forced_deload_mode not in FORCED_DELOAD_MODES:
            raise ValidationError(
                f"forced_deload_mode must be one of {FORCED_DELOAD_MODES}, "
                f"got {self.forced_deload_mode!r}"
            )
        if self.external_fatigue_scale <= 0:
            raise ValidationError("external_fatigue_scale must be positive")
        if self.min_exercises < 1 or self.min_candidate_pool < 1:
            raise ValidationError("min_exercises and min_candidate_pool must be >= 1")
        if self.max_alternatives < 0:
            raise ValidationError("max_alternatives must be >= 0")


def load_settings(config_path: Optional[str] = None) -> EngineSettings:
    """
    Load settings from YAML and environment.

    Args:
        config_path: Path to a settings YAML file. If None, uses
            IRONPLAN_CONFIG or config/engine.yaml when present.

    Returns:
        EngineSettings instance
    """
    load_dotenv()

    if config_path is None:
        config_path = os.getenv("IRONPLAN_CONFIG", DEFAULT_CONFIG_PATH)
    config_path = Path(config_path)

    values = {}
    if config_path.exists():
        with open(config_path) as f:
            values = yaml.safe_load(f) or {}
        logger.debug(f"Loaded settings from {config_path}")

    known = {f.name for f in fields(EngineSettings)}
    for key in list(values):
        if key not in known:
            logger.warning(f"Ignoring unknown setting '{key}' in {config_path}")
            values.pop(key)

    settings = EngineSettings(**values)

    overrides = {}
    if os.getenv("IRONPLAN_LOG_LEVEL"):
        overrides['log_level'] = os.getenv("IRONPLAN_LOG_LEVEL")
    if os.getenv("IRONPLAN_FORCED_DELOAD_MODE"):
        overrides['forced_deload_mode'] = os.getenv("IRONPLAN_FORCED_DELOAD_MODE")
    if os.getenv("IRONPLAN_EXERCISE_CATALOG"):
        overrides['exercise_catalog_path'] = os.getenv("IRONPLAN_EXERCISE_CATALOG")

    return replace(settings, **overrides) if overrides else settings


def configure_logging(settings: EngineSettings):
    """Set up root logging for command-line use."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=LOG_FORMAT
    )
