"""ecomatch — calculation core of the circular-economy marketplace.

Emissions accounting, circularity indicators, transport estimates, match
scoring, forecasting and financial metrics as pure functions returning
pydantic results with audit ``formula`` strings.
"""

from .exceptions import (
    CoordinateOutOfRangeError,
    EngineError,
    InputValidationError,
    UnknownFactorError,
)
from .factors import DEFAULT_FACTORS, FactorTables
from .config import EngineSettings, configure_logging, get_settings
from .services import *  # noqa: F401,F403
from .services import __all__ as _service_exports

__version__ = "0.1.0"

__all__ = [
    "EngineError",
    "InputValidationError",
    "UnknownFactorError",
    "CoordinateOutOfRangeError",
    "FactorTables",
    "DEFAULT_FACTORS",
    "EngineSettings",
    "get_settings",
    "configure_logging",
    *_service_exports,
]
