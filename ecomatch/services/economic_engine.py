"""Economic Engine — abatement cost, IRR, eco-efficiency.

Rules
-----
- NO API calls
- Non-convergence is a result flag, not an exception
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

from ..constants import IRR_DERIVATIVE_EPSILON, IRR_INITIAL_GUESS, IRR_MAX_RATE
from ..exceptions import InputValidationError
from ..schemas.economic_schema import AbatementCostResult, EcoEfficiencyResult, IRRResult
from .numeric import fmt, fmt_list, require_finite, require_positive, round2, round_half_away

logger = logging.getLogger(__name__)


def abatement_cost(
    cost_baseline: float,
    cost_intervention: float,
    emissions_baseline: float,
    emissions_intervention: float,
) -> AbatementCostResult:
    """``CAC = (cost_intervention − cost_baseline) / (E_baseline − E_intervention)``.

    Undefined unless the intervention actually reduces emissions.
    """
    for name, value in (
        ("cost_baseline", cost_baseline),
        ("cost_intervention", cost_intervention),
        ("emissions_baseline", emissions_baseline),
        ("emissions_intervention", emissions_intervention),
    ):
        require_finite(value, name)

    reduced = emissions_baseline - emissions_intervention
    if reduced <= 0:
        raise InputValidationError(
            "emissions_intervention",
            emissions_intervention,
            f"must be below emissions_baseline ({fmt(emissions_baseline)}); intervention must reduce emissions",
        )

    cost_delta = cost_intervention - cost_baseline
    cac = round2(cost_delta / reduced)
    return AbatementCostResult(
        cac_inr_per_kg=cac,
        emissions_reduced=round2(reduced),
        cost_delta=round2(cost_delta),
        formula=(
            f"CAC = ({fmt(cost_intervention)} - {fmt(cost_baseline)}) / "
            f"({fmt(emissions_baseline)} - {fmt(emissions_intervention)}) = ₹{fmt(cac)}/kg CO2"
        ),
    )


def _npv_and_derivative(flows: Sequence[float], rate: float) -> tuple[float, float]:
    # Discount factor built by repeated division so large rates underflow
    # towards 0 instead of overflowing (1 + r) ** t.
    growth = 1 + rate
    discount = 1.0
    npv = 0.0
    d_npv = 0.0
    for t, cf in enumerate(flows):
        npv += cf * discount
        d_npv -= t * cf * discount / growth
        discount /= growth
    return npv, d_npv


def net_present_value(cash_flows: Sequence[float], rate: float) -> float:
    """``NPV = Σ CF_t / (1 + r)^t`` with t starting at 0."""
    if rate <= -1:
        raise InputValidationError("rate", rate, "must be > -1")
    npv, _ = _npv_and_derivative([float(cf) for cf in cash_flows], rate)
    return npv


def _validate_cash_flows(cash_flows: Sequence[float]) -> None:
    if len(cash_flows) < 2:
        raise InputValidationError("cash_flows", list(cash_flows), "must contain at least 2 entries")
    for i, cf in enumerate(cash_flows):
        require_finite(cf, f"cash_flows[{i}]")
    first_positive = cash_flows[0] > 0
    if not any((cf > 0) != first_positive for cf in cash_flows[1:]):
        raise InputValidationError(
            "cash_flows", list(cash_flows), "must change sign at least once relative to the first entry"
        )


def internal_rate_of_return(
    cash_flows: Sequence[float],
    max_iterations: int = 100,
    tolerance: float = 0.0001,
) -> IRRResult:
    """Newton-Raphson root of ``NPV(r) = 0`` starting from r = 0.1.

    Stops with ``converged=False`` when the derivative vanishes, the rate
    leaves the domain (r ≤ −1), a step runs past ``IRR_MAX_RATE`` or the
    iteration cap is hit. The last in-range estimate is kept.
    """
    flows = [float(cf) for cf in cash_flows]
    _validate_cash_flows(flows)
    if max_iterations < 1:
        raise InputValidationError("max_iterations", max_iterations, "must be >= 1")
    require_positive(tolerance, "tolerance")

    rate = IRR_INITIAL_GUESS
    converged = False
    iterations = 0

    for iterations in range(1, max_iterations + 1):
        npv, d_npv = _npv_and_derivative(flows, rate)
        if not math.isfinite(d_npv) or abs(d_npv) < IRR_DERIVATIVE_EPSILON:
            break
        new_rate = rate - npv / d_npv
        if not math.isfinite(new_rate) or new_rate <= -1 or abs(new_rate) > IRR_MAX_RATE:
            break
        if abs(new_rate - rate) < tolerance:
            rate = new_rate
            converged = True
            break
        rate = new_rate

    irr_percent = round2(rate * 100)
    if converged:
        outcome = f"{fmt(irr_percent)}% (converged)"
    else:
        outcome = "n/a (did not converge)"
        logger.debug("[Economic] IRR did not converge after %d iterations (last=%s)", iterations, rate)

    return IRRResult(
        irr=round_half_away(rate, 4),
        irr_percent=irr_percent,
        converged=converged,
        iterations=iterations,
        formula=f"0 = Σ CF_t / (1 + IRR)^t over [{fmt_list(flows)}] → IRR = {outcome}",
    )



def _efficiency_band(value: float) -> str:
    if value > 1000:
        return "Excellent eco-efficiency"
    if value > 500:
        return "Good eco-efficiency"
    if value > 100:
        return "Moderate — room for improvement"
    return "Poor eco-efficiency"


def eco_efficiency(product_value_inr: float, environmental_impact_kg_co2: float) -> EcoEfficiencyResult:
    """``EcoEff = product value (INR) / environmental impact (kg CO2)``.

    Bands: > 1000 excellent, > 500 good, > 100 moderate, otherwise poor.
    """
    require_positive(product_value_inr, "product_value_inr")
    require_positive(environmental_impact_kg_co2, "environmental_impact_kg_co2")

    raw = product_value_inr / environmental_impact_kg_co2
    value = round2(raw)
    return EcoEfficiencyResult(
        eco_efficiency=value,
        interpretation=_efficiency_band(raw),
        formula=(
            f"EcoEff = ₹{fmt(product_value_inr)} / {fmt(environmental_impact_kg_co2)} kg CO2 "
            f"= {fmt(value)} INR/kg CO2"
        ),
    )
