"""Matching Engine — multi-factor supply/demand compatibility scoring.

Each sub-score maps one aspect of a waste listing vs a need listing onto
0-100; ``weighted_match_score`` combines the five into the ranking score
the marketplace sorts by.

Rules
-----
- NO API calls
- NO DB reads (reliability inputs are passed in, not queried)
- Exact tier values and breakpoints are part of the contract
"""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Sequence, Union

from ..constants import DEFAULT_MATCH_WEIGHTS, NEUTRAL_RELIABILITY, WEIGHT_SUM_TOLERANCE
from ..exceptions import InputValidationError
from ..schemas.matching_schema import (
    FACTOR_NAMES,
    FactorScore,
    MatchFactors,
    MatchScoreResult,
    MatchWeights,
)
from .numeric import (
    clamp,
    fmt,
    require_between,
    require_finite,
    require_non_negative,
    require_positive,
    round1,
    round_half_away,
)

logger = logging.getLogger(__name__)


# ===================================================================== #
#  Composite score                                                        #
# ===================================================================== #

def _resolve_weights(weights: Union[MatchWeights, Mapping[str, float], None]) -> Dict[str, float]:
    if weights is None:
        return dict(DEFAULT_MATCH_WEIGHTS)
    if not isinstance(weights, MatchWeights):
        weights = MatchWeights.model_validate(weights)
    resolved = {}
    for name in FACTOR_NAMES:
        value = getattr(weights, name)
        resolved[name] = DEFAULT_MATCH_WEIGHTS[name] if value is None else value
    return resolved


def weighted_match_score(
    factors: Union[MatchFactors, Mapping[str, float]],
    weights: Union[MatchWeights, Mapping[str, float], None] = None,
) -> MatchScoreResult:
    """``Score = Σ factor_i × weight_i`` over the five named factors.

    Weights must sum to 1.0 within 0.01; every factor must lie in [0, 100].
    The score is clamped to [0, 100] and rounded to 1 decimal.
    """
    if not isinstance(factors, MatchFactors):
        factors = MatchFactors.model_validate(factors)
    w = _resolve_weights(weights)

    weight_sum = sum(w.values())
    if abs(weight_sum - 1.0) > WEIGHT_SUM_TOLERANCE:
        raise InputValidationError("weights", round_half_away(weight_sum, 4), "must sum to 1.0")

    for name in FACTOR_NAMES:
        value = getattr(factors, name)
        require_finite(value, name)
        if value < 0 or value > 100:
            raise InputValidationError(name, value, "must be within [0, 100]")

    weighted = {name: getattr(factors, name) * w[name] for name in FACTOR_NAMES}
    score = clamp(round1(sum(weighted.values())), 0.0, 100.0)

    terms = " + ".join(f"{fmt(getattr(factors, n))}×{fmt(w[n])}" for n in FACTOR_NAMES)
    formula = f"Score = {terms} = {fmt(score)}"
    logger.debug("[Matching] %s", formula)

    return MatchScoreResult(
        score=score,
        weighted_factors=weighted,
        weights=w,
        formula=formula,
    )


# ===================================================================== #
#  Sub-scores                                                             #
# ===================================================================== #

def price_score(listed_price: float, budget_min: float, budget_max: float) -> FactorScore:
    """Price compatibility.

    - free material (price 0) → 100
    - within budget → ``min(100, 100 × (1 + (max − listed) / max))``
    - over budget → ``100 × (1 − |listed − mid| / mid)``, mid = (min + max) / 2
    """
    require_non_negative(listed_price, "listed_price")
    require_positive(budget_max, "budget_max")
    require_finite(budget_min, "budget_min")

    if listed_price == 0:
        return FactorScore(score=100.0, formula="Free material → Score = 100")

    budget_mid = (budget_min + budget_max) / 2
    if budget_mid <= 0:
        return FactorScore(score=0.0, formula="Budget = 0 → Score = 0")

    if listed_price <= budget_max:
        raw = min(100.0, 100 * (1 + (budget_max - listed_price) / budget_max))
    else:
        raw = 100 * (1 - abs(listed_price - budget_mid) / budget_mid)

    score = clamp(round1(raw), 0.0, 100.0)
    return FactorScore(
        score=score,
        formula=f"PriceScore(listed={fmt(listed_price)}, budget={fmt(budget_min)}-{fmt(budget_max)}) = {fmt(score)}",
    )


def distance_score(distance_km: float, max_acceptable_km: float) -> FactorScore:
    """Three-zone proximity score.

    - ≤ 50% of max → 100
    - 50–100% of max → linear 100 → 50
    - beyond max → ``max(0, 100 × (1.2 − d / max))``; reaches 0 at 1.2 × max
    """
    require_non_negative(distance_km, "distance_km")
    require_positive(max_acceptable_km, "max_acceptable_km")

    half = 0.5 * max_acceptable_km
    if distance_km <= half:
        raw = 100.0
    elif distance_km <= max_acceptable_km:
        raw = 100 * (1 - 0.5 * (distance_km - half) / half)
    else:
        raw = max(0.0, 100 * (1.2 - distance_km / max_acceptable_km))

    score = clamp(round1(raw), 0.0, 100.0)
    return FactorScore(
        score=score,
        formula=f"DistScore({fmt(distance_km)}km / max {fmt(max_acceptable_km)}km) = {fmt(score)}",
    )


def quantity_fit(listed: float, required_min: float, required_max: float) -> FactorScore:
    """Listed quantity vs the buyer's required range.

    Inside the range → 100; below → proportional to ``listed / min``; above →
    100 plus a surplus bonus of at most 20 points, capped at 100 overall.
    """
    require_positive(listed, "listed")
    require_positive(required_min, "required_min")
    require_finite(required_max, "required_max")
    if required_max < required_min:
        raise InputValidationError(
            "required_max", required_max, f"must be >= required_min ({fmt(required_min)})"
        )

    if required_min <= listed <= required_max:
        raw = 100.0
    elif listed < required_min:
        raw = listed / required_min * 100
    else:
        required_mid = (required_min + required_max) / 2
        bonus = min(20.0, 10 * (1 - required_mid / listed))
        raw = min(100.0, 100 + bonus)

    score = clamp(round1(raw), 0.0, 100.0)
    return FactorScore(
        score=score,
        formula=f"QtyFit(listed={fmt(listed)}, needed={fmt(required_min)}-{fmt(required_max)}) = {fmt(score)}",
    )


def material_compatibility(
    listed_category: str,
    needed_category: str,
    needed_sub_types: Optional[Sequence[str]] = None,
    listed_sub_type: Optional[str] = None,
    excluded_types: Optional[Sequence[str]] = None,
) -> FactorScore:
    """Category / sub-type compatibility tiers.

    ==========================================  =====
    category mismatch                            0
    excluded sub-type                            0
    preferred sub-type                           100
    sub-type listed but not preferred            70
    no sub-type preference declared              90
    preference declared, listing has no subtype  80
    ==========================================  =====
    """
    if listed_category != needed_category:
        return FactorScore(
            score=0.0,
            formula=f"Material mismatch: {listed_category} ≠ {needed_category} → 0",
        )

    if excluded_types and listed_sub_type and listed_sub_type in excluded_types:
        return FactorScore(score=0.0, formula=f"Excluded subtype: {listed_sub_type} → 0")

    score = 80.0
    if needed_sub_types and listed_sub_type:
        score = 100.0 if listed_sub_type in needed_sub_types else 70.0
    elif not needed_sub_types:
        score = 90.0

    wanted = ",".join(needed_sub_types) if needed_sub_types else "any"
    return FactorScore(
        score=score,
        formula=(
            f"Material({listed_category}/{listed_sub_type or 'any'} vs "
            f"{needed_category}/{wanted}) = {fmt(score)}"
        ),
    )


def reliability_score(
    seller_rating: Optional[float] = None,
    buyer_rating: Optional[float] = None,
) -> FactorScore:
    """Trading-history score from average 1–5 star ratings.

    Each side maps to ``rating × 20``; a side with no completed trades
    counts as neutral (50).  The result is the mean, rounded to a whole point.
    """
    sides = []
    for name, rating in (("seller_rating", seller_rating), ("buyer_rating", buyer_rating)):
        if rating is None:
            sides.append(NEUTRAL_RELIABILITY)
        else:
            require_between(rating, name, 1.0, 5.0)
            sides.append(rating * 20)

    score = clamp(round_half_away((sides[0] + sides[1]) / 2, 0), 0.0, 100.0)
    return FactorScore(
        score=score,
        formula=f"Reliability = ({fmt(sides[0])} + {fmt(sides[1])}) / 2 = {fmt(score)}",
    )
