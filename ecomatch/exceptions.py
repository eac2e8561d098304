"""Engine error taxonomy.

Only input validation is raised.  Non-convergence (IRR) and insufficient
history (forecasting) are reported as flags on the result models.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional


class EngineError(Exception):
    """Base class for every error raised by the engine."""


class InputValidationError(EngineError, ValueError):
    """An input violates a documented domain constraint."""

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"{field} {reason}, got {value!r}")


class UnknownFactorError(InputValidationError):
    """A factor key has no row in its table and no fallback is defined."""

    def __init__(self, field: str, value: Any, valid_keys: Iterable[str]):
        self.valid_keys: List[str] = list(valid_keys)
        super().__init__(
            field,
            value,
            f"is not a known type (valid: {', '.join(self.valid_keys)})",
        )


class CoordinateOutOfRangeError(InputValidationError):
    """Latitude outside [-90, 90] or longitude outside [-180, 180]."""

    def __init__(self, field: str, value: float, lo: float, hi: float, *, reason: Optional[str] = None):
        super().__init__(field, value, reason or f"out of range [{lo:g}, {hi:g}]")
