"""Predictive Engine — smoothing forecasts, confidence intervals, OLS trend.

Rules
-----
- NO API calls (the ML microservice is a separate system)
- Fewer than 3 observations → an explicit ``insufficient_data`` result,
  never an exception and never a numeric estimate
- Pure deterministic math
"""

from __future__ import annotations

import logging
import math
import statistics
from statistics import NormalDist
from typing import List, Optional, Sequence, Tuple, Union

from ..constants import (
    LARGE_SAMPLE_SIZE,
    MIN_FORECAST_POINTS,
    SMOOTHING_ALPHA_STABLE,
    SMOOTHING_ALPHA_VOLATILE,
    VOLATILITY_CV_THRESHOLD,
    Z_SCORE_95,
    Z_SCORES,
)
from ..exceptions import InputValidationError
from ..schemas.predictive_schema import (
    ConfidenceIntervalResult,
    ForecastPoint,
    RegressionResult,
    SampleConfidenceResult,
    SmoothingResult,
    TrendParameters,
)
from .numeric import fmt, require_finite, require_non_negative, require_positive, round2

logger = logging.getLogger(__name__)

_DEFAULT_BETA = 0.1
_DEFAULT_GAMMA = 0.1
_TREND_BAND = 0.02  # slope within ±2% of the mean per period counts as stable
_HW_MIN_BASE_RATIO = 0.01  # L + T never drops below 1% of L in the seasonal model

Point = Union[float, Tuple[float, float]]


def _insufficient(n: int, needed: int = MIN_FORECAST_POINTS) -> str:
    return f"Insufficient data: {n} data point(s) provided, at least {needed} required"


def z_for_confidence(confidence_level: float) -> float:
    """Two-sided z-score for *confidence_level* (0.95 → 1.96)."""
    if not 0 < confidence_level < 1:
        raise InputValidationError("confidence_level", confidence_level, "must be within (0, 1)")
    for level, z in Z_SCORES.items():
        if math.isclose(level, confidence_level):
            return z
    return NormalDist().inv_cdf((1 + confidence_level) / 2)


def _auto_alpha(series: Sequence[float]) -> float:
    """0.7 for volatile series (mean step / mean > 0.3), else 0.3."""
    diffs = [abs(b - a) for a, b in zip(series, series[1:])]
    avg = statistics.fmean(series)
    cv = (statistics.fmean(diffs) / avg) if avg > 0 else 0.0
    return SMOOTHING_ALPHA_VOLATILE if cv > VOLATILITY_CV_THRESHOLD else SMOOTHING_ALPHA_STABLE


def _check_smoothing_constant(value: float, name: str) -> None:
    require_finite(value, name)
    if value <= 0 or value >= 1:
        raise InputValidationError(name, value, "must be within (0, 1)")


# ===================================================================== #
#  Recursions — each returns (fitted one-step values, forecast fn)        #
# ===================================================================== #

def _simple(series: Sequence[float], alpha: float):
    fitted = [series[0]]
    for t in range(1, len(series)):
        fitted.append(alpha * series[t - 1] + (1 - alpha) * fitted[t - 1])
    last = alpha * series[-1] + (1 - alpha) * fitted[-1]
    return fitted, (lambda h: last), {"level": last}


def _holt(series: Sequence[float], alpha: float, beta: float):
    level = series[0]
    trend = series[1] - series[0]
    fitted = [series[0]]
    for t in range(1, len(series)):
        fitted.append(level + trend)
        prev_level = level
        level = alpha * series[t] + (1 - alpha) * (level + trend)
        trend = beta * (level - prev_level) + (1 - beta) * trend
    return fitted, (lambda h: level + h * trend), {"level": level, "trend": trend}


def _holt_winters(series: Sequence[float], alpha: float, beta: float, gamma: float, m: int):
    first = statistics.fmean(series[:m])
    second = statistics.fmean(series[m:2 * m])
    level = first
    trend = (second - first) / m
    seasonals = [series[i] / first for i in range(m)]

    fitted = []
    for t, y in enumerate(series):
        idx = t % m
        fitted.append((level + trend) * seasonals[idx])
        prev_level = level
        level = alpha * (y / seasonals[idx]) + (1 - alpha) * (level + trend)
        trend = beta * (level - prev_level) + (1 - beta) * trend
        # L + T stays >= 1% of L, so the level stays positive
        trend = max(trend, (_HW_MIN_BASE_RATIO - 1) * level)
        seasonals[idx] = gamma * (y / level) + (1 - gamma) * seasonals[idx]

    n = len(series)

    def forecast(h: int) -> float:
        return (level + h * trend) * seasonals[(n + h - 1) % m]

    return fitted, forecast, {"level": level, "trend": trend, "seasonals": list(seasonals)}


def _variance_multiplier(h: int, alpha: float, beta: float) -> float:
    """Forecast-error variance growth ``1 + Σ_{j<h} (α(1 + jβ))²``.

    Exact for simple (β = 0) and Holt smoothing; used as the approximation
    for the multiplicative seasonal model.
    """
    return 1 + sum((alpha * (1 + j * beta)) ** 2 for j in range(1, h))


def exponential_smoothing(
    series: Sequence[float],
    alpha: Optional[float] = None,
    trend: Optional[TrendParameters] = None,
    *,
    steps_ahead: int = 3,
    confidence_level: float = 0.95,
) -> SmoothingResult:
    """Exponential-smoothing forecast with prediction bounds.

    ``F(t+1) = α × A(t) + (1 − α) × F(t)`` by default; *trend* switches to
    Holt's linear method (``beta``) or multiplicative Holt-Winters
    (``season_length``, needs two full seasons of strictly positive data).
    When *alpha* is omitted it is picked from the series' volatility.
    Predictions and lower bounds are floored at 0 for non-negative history.
    """
    data = [float(v) for v in series]
    for i, v in enumerate(data):
        require_finite(v, f"series[{i}]")
    if steps_ahead < 1:
        raise InputValidationError("steps_ahead", steps_ahead, "must be >= 1")
    z = z_for_confidence(confidence_level)

    n = len(data)
    if n < MIN_FORECAST_POINTS:
        return SmoothingResult(method="none", insufficient_data=True, message=_insufficient(n))

    if alpha is None:
        alpha = _auto_alpha(data)
    _check_smoothing_constant(alpha, "alpha")

    beta: Optional[float] = None
    gamma: Optional[float] = None
    season_length: Optional[int] = None

    if trend is not None and trend.season_length is not None:
        season_length = trend.season_length
        beta = trend.beta if trend.beta is not None else _DEFAULT_BETA
        gamma = trend.gamma if trend.gamma is not None else _DEFAULT_GAMMA
        needed = 2 * season_length
        if n < needed:
            return SmoothingResult(
                method="none",
                season_length=season_length,
                insufficient_data=True,
                message=_insufficient(n, needed) + " (two full seasons)",
            )
        for i, v in enumerate(data):
            if v <= 0:
                raise InputValidationError(
                    f"series[{i}]", v, "must be > 0 for multiplicative seasonality"
                )
        method = "holt_winters"
        fitted, forecast_fn, state = _holt_winters(data, alpha, beta, gamma, season_length)
        formula = (
            f"L(t) = {fmt(alpha)} × A(t)/S(t-m) + {fmt(round2(1 - alpha))} × (L(t-1) + T(t-1)); "
            f"T(t) = {fmt(beta)} × (L(t) - L(t-1)) + {fmt(round2(1 - beta))} × T(t-1); "
            f"S(t) = {fmt(gamma)} × A(t)/L(t) + {fmt(round2(1 - gamma))} × S(t-m); "
            f"F(t+h) = ({fmt(round2(state['level']))} + h × {fmt(round2(state['trend']))}) × S, m={season_length}"
        )
    elif trend is not None and trend.beta is not None:
        beta = trend.beta
        method = "holt"
        fitted, forecast_fn, state = _holt(data, alpha, beta)
        formula = (
            f"L(t) = {fmt(alpha)} × A(t) + {fmt(round2(1 - alpha))} × (L(t-1) + T(t-1)); "
            f"T(t) = {fmt(beta)} × (L(t) - L(t-1)) + {fmt(round2(1 - beta))} × T(t-1); "
            f"F(t+h) = {fmt(round2(state['level']))} + h × {fmt(round2(state['trend']))}"
        )
    else:
        method = "simple"
        fitted, forecast_fn, state = _simple(data, alpha)
        formula = f"F(t+1) = {fmt(alpha)} × A(t) + {fmt(round2(1 - alpha))} × F(t)"

    errors = [a - f for a, f in zip(data, fitted)]
    mae = round2(statistics.fmean(abs(e) for e in errors))
    sigma = math.sqrt(statistics.fmean(e * e for e in errors))
    floor = 0.0 if min(data) >= 0 else -math.inf

    points: List[ForecastPoint] = []
    for h in range(1, steps_ahead + 1):
        predicted = max(floor, forecast_fn(h))
        margin = z * sigma * math.sqrt(_variance_multiplier(h, alpha, beta or 0.0))
        points.append(
            ForecastPoint(
                period=h,
                predicted_value=round2(predicted),
                lower_bound=round2(max(floor, predicted - margin)),
                upper_bound=round2(predicted + margin),
                confidence_level=confidence_level,
            )
        )

    logger.debug("[Predictive] %s alpha=%s mae=%s -> %s", method, alpha, mae, [p.predicted_value for p in points])

    return SmoothingResult(
        method=method,
        alpha=alpha,
        beta=beta,
        gamma=gamma,
        season_length=season_length,
        smoothed=[round2(v) for v in fitted],
        forecast=points,
        last_forecast=points[0].predicted_value,
        mae=mae,
        residual_std=round2(sigma),
        formula=formula,
    )


# ===================================================================== #
#  Confidence intervals                                                   #
# ===================================================================== #

def confidence_interval(mean: float, std_dev: float, z_score: float = Z_SCORE_95) -> ConfidenceIntervalResult:
    """``[mean − z × σ, mean + z × σ]``."""
    require_finite(mean, "mean")
    require_non_negative(std_dev, "std_dev")
    require_positive(z_score, "z_score")

    margin = z_score * std_dev
    lower = round2(mean - margin)
    upper = round2(mean + margin)
    return ConfidenceIntervalResult(
        mean=mean,
        std_dev=std_dev,
        z_score=z_score,
        margin_of_error=round2(margin),
        lower=lower,
        upper=upper,
        formula=f"CI = {fmt(mean)} ± {fmt(z_score)} × {fmt(std_dev)} = [{fmt(lower)}, {fmt(upper)}]",
    )


def confidence_interval_from_sample(data: Sequence[float]) -> SampleConfidenceResult:
    """95% interval of the sample mean: ``x̄ ± z × (s / √n)``.

    Below 30 observations z is widened by ``(1 + 1/(4n))`` and the result is
    flagged as not reliable.
    """
    values = [float(v) for v in data]
    for i, v in enumerate(values):
        require_finite(v, f"data[{i}]")
    n = len(values)
    if n < MIN_FORECAST_POINTS:
        return SampleConfidenceResult(n=n, insufficient_data=True, message=_insufficient(n))

    mean = statistics.fmean(values)
    std_dev = statistics.stdev(values)
    z = Z_SCORE_95 if n >= LARGE_SAMPLE_SIZE else Z_SCORE_95 * (1 + 1 / (4 * n))
    moe = z * std_dev / math.sqrt(n)

    lower, upper = round2(mean - moe), round2(mean + moe)
    return SampleConfidenceResult(
        n=n,
        mean=round2(mean),
        std_dev=round2(std_dev),
        z_score=round2(z),
        margin_of_error=round2(moe),
        lower=lower,
        upper=upper,
        is_reliable=n >= LARGE_SAMPLE_SIZE,
        formula=(
            f"CI = {fmt(round2(mean))} ± {fmt(round2(z))} × ({fmt(round2(std_dev))}/√{n}) "
            f"= [{fmt(lower)}, {fmt(upper)}]"
        ),
    )


# ===================================================================== #
#  Linear regression                                                      #
# ===================================================================== #

def _split_points(points: Sequence[Point]) -> Tuple[List[float], List[float]]:
    xs: List[float] = []
    ys: List[float] = []
    for i, p in enumerate(points):
        if isinstance(p, (tuple, list)):
            if len(p) != 2:
                raise InputValidationError(f"points[{i}]", p, "must be a y value or an (x, y) pair")
            x, y = float(p[0]), float(p[1])
        else:
            x, y = float(i), float(p)
        require_finite(x, f"points[{i}].x")
        require_finite(y, f"points[{i}].y")
        xs.append(x)
        ys.append(y)
    return xs, ys


def linear_regression(points: Sequence[Point], steps_ahead: int = 3) -> RegressionResult:
    """Ordinary least squares ``ŷ = β0 + β1·x``.

    *points* are y values at x = 0, 1, 2, … or explicit ``(x, y)`` pairs.
    Predictions continue one unit past the last x and are floored at 0
    (emission and waste quantities cannot go negative).
    """
    if steps_ahead < 0:
        raise InputValidationError("steps_ahead", steps_ahead, "must be >= 0")
    xs, ys = _split_points(points)
    n = len(ys)
    if n < MIN_FORECAST_POINTS:
        return RegressionResult(n=n, insufficient_data=True, message=_insufficient(n))

    x_mean = statistics.fmean(xs)
    y_mean = statistics.fmean(ys)
    s_xy = sum((x - x_mean) * (y - y_mean) for x, y in zip(xs, ys))
    s_xx = sum((x - x_mean) ** 2 for x in xs)
    slope = s_xy / s_xx if s_xx != 0 else 0.0
    intercept = y_mean - slope * x_mean

    residuals = [y - (intercept + slope * x) for x, y in zip(xs, ys)]
    ss_res = sum(r * r for r in residuals)
    ss_tot = sum((y - y_mean) ** 2 for y in ys)
    r_squared = round2(1 - ss_res / ss_tot) if ss_tot != 0 else 0.0

    last_x = max(xs)
    predictions = [round2(max(0.0, intercept + slope * (last_x + s))) for s in range(1, steps_ahead + 1)]

    if slope < -y_mean * _TREND_BAND:
        direction = "improving"
    elif slope > y_mean * _TREND_BAND:
        direction = "worsening"
    else:
        direction = "stable"

    b0, b1 = round2(intercept), round2(slope)
    return RegressionResult(
        n=n,
        slope=b1,
        intercept=b0,
        r_squared=r_squared,
        predictions=predictions,
        residuals=[round2(r) for r in residuals],
        trend_direction=direction,
        is_reliable=r_squared > 0.5,
        formula=f"ŷ = {fmt(b0)} + {fmt(b1)}x (R²={fmt(r_squared)})",
    )
