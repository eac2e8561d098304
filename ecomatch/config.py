"""Engine settings read from the environment.

Values come from ``os.getenv`` after ``load_dotenv()``, so a ``.env`` file
next to the calling service works the same way it does for the API.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Callable, TypeVar

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from . import constants as C
from .exceptions import InputValidationError, UnknownFactorError

T = TypeVar("T")

_ENV_PREFIX = "ECOMATCH_"


class EngineSettings(BaseModel):
    """Tunables that deployments may override without a code change."""

    model_config = ConfigDict(frozen=True)

    road_circuity_factor: float = Field(
        default=C.ROAD_CIRCUITY_FACTOR,
        gt=0.0,
        description="Road distance / great-circle distance",
    )
    transport_cost_per_km: float = Field(
        default=C.TRANSPORT_COST_PER_KM_INR,
        ge=0.0,
        description="Default haulage rate in INR per road km",
    )
    default_grid_type: str = Field(
        default=C.GridType.MIXED.value,
        description="Grid mix used when a facility does not declare one",
    )
    min_match_score: float = Field(
        default=C.MIN_MATCH_SCORE,
        ge=0.0,
        le=100.0,
        description="Candidates scoring below this are not proposed",
    )
    max_matches: int = Field(
        default=C.MAX_MATCHES,
        ge=1,
        description="Maximum number of ranked candidates returned",
    )
    log_level: str = Field(default="WARNING")


def _env(name: str, default: T, cast: Callable[[str], T]) -> T:
    raw = os.getenv(_ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise InputValidationError(_ENV_PREFIX + name, raw, "is not a valid value") from exc


def load_settings() -> EngineSettings:
    """Build settings from the current environment (no caching).

    Out-of-range or unknown values raise ``InputValidationError`` naming the
    offending ``ECOMATCH_*`` variable.
    """
    load_dotenv()
    try:
        settings = EngineSettings(
            road_circuity_factor=_env("ROAD_CIRCUITY_FACTOR", C.ROAD_CIRCUITY_FACTOR, float),
            transport_cost_per_km=_env("TRANSPORT_COST_PER_KM", C.TRANSPORT_COST_PER_KM_INR, float),
            default_grid_type=_env("DEFAULT_GRID_TYPE", C.GridType.MIXED.value, str),
            min_match_score=_env("MIN_MATCH_SCORE", C.MIN_MATCH_SCORE, float),
            max_matches=_env("MAX_MATCHES", C.MAX_MATCHES, int),
            log_level=_env("LOG_LEVEL", "WARNING", str).upper(),
        )
    except ValidationError as exc:
        err = exc.errors()[0]
        raise InputValidationError(
            _ENV_PREFIX + str(err["loc"][0]).upper(), err.get("input"), err["msg"].lower()
        ) from exc

    if settings.road_circuity_factor < 1.0:
        raise InputValidationError(
            _ENV_PREFIX + "ROAD_CIRCUITY_FACTOR",
            settings.road_circuity_factor,
            "must be >= 1 (road distance cannot be shorter than great circle)",
        )
    if settings.default_grid_type not in C.GRID_EMISSION_FACTORS:
        raise UnknownFactorError(
            _ENV_PREFIX + "DEFAULT_GRID_TYPE", settings.default_grid_type, C.GRID_EMISSION_FACTORS
        )
    return settings



@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    """Process-wide settings, read once."""
    return load_settings()


def configure_logging(level: str | None = None) -> None:
    """Basic logging setup for scripts and workers embedding the engine."""
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
