"""
Planning engine errors.

Every error is terminal for the operation that raised it. Nothing is
retried internally and no partial plan is returned.
"""


class IronplanError(Exception):
    """Base class for all planning engine errors."""


class MissingConfigError(IronplanError, LookupError):
    """No periodization config exists for the requested level and goal."""

    def __init__(self, level, goal):
        self.level = level
        self.goal = goal
        super().__init__(f"No periodization config for level={level!r}, goal={goal!r}")


class ValidationError(IronplanError, ValueError):
    """An input value is outside its declared range."""


class ConfigIntegrityError(IronplanError, ValueError):
    """A periodization config or lookup table is malformed."""


class InsufficientExerciseDataError(IronplanError):
    """The exercise catalog cannot supply any exercise for a day."""
