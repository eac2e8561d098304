"""Shared numeric helpers: rounding, clamping, validation, audit formatting.

Every engine module rounds through :func:`round_half_away` so golden outputs
stay identical regardless of binary floating-point display quirks.
"""

from __future__ import annotations

import math
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Iterable

from ..exceptions import InputValidationError


def round_half_away(value: float, decimals: int = 2) -> float:
    """Round *value* to *decimals* places, ties away from zero.

    Works on the shortest decimal repr of the float, so ``2.675`` rounds to
    ``2.68`` (Python's built-in ``round`` gives ``2.67``).
    """
    if math.isnan(value) or math.isinf(value):
        return value
    with localcontext() as ctx:
        ctx.prec = 60
        quantum = Decimal(1).scaleb(-decimals)
        rounded = float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))
    # normalise -0.0
    return rounded + 0.0


def round2(value: float) -> float:
    return round_half_away(value, 2)


def round1(value: float) -> float:
    return round_half_away(value, 1)


def clamp(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    """Clamp *value* to [lo, hi]."""
    return max(lo, min(hi, value))


def fmt(value: float) -> str:
    """Render a number for an audit formula string.

    Integral values print without a trailing ``.0`` (``80`` not ``80.0``);
    everything else uses the shortest round-tripping repr.
    """
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int):
        return str(value)
    if math.isfinite(value) and float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def fmt_list(values: Iterable[float]) -> str:
    return ", ".join(fmt(v) for v in values)


# ── Validation ──────────────────────────────────────────────────────────

def require_finite(value: float, name: str) -> None:
    if not math.isfinite(value):
        raise InputValidationError(name, value, "must be a finite number")


def require_positive(value: float, name: str) -> None:
    require_finite(value, name)
    if value <= 0:
        raise InputValidationError(name, value, "must be > 0")


def require_non_negative(value: float, name: str) -> None:
    require_finite(value, name)
    if value < 0:
        raise InputValidationError(name, value, "must be >= 0")


def require_between(value: float, name: str, lo: float, hi: float) -> None:
    require_finite(value, name)
    if value < lo or value > hi:
        raise InputValidationError(name, value, f"must be within [{fmt(lo)}, {fmt(hi)}]")
