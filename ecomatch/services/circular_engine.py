"""Circular-Economy Engine — MCI, recycling credits, symbiosis efficiency.

Rules
-----
- NO API calls
- NO DB writes
- Pure deterministic math
"""

from __future__ import annotations

import logging

from ..factors import DEFAULT_FACTORS, FactorKey, FactorTables, key_of
from ..schemas.circular_schema import (
    MCIInput,
    MCIResult,
    RecyclingCreditResult,
    SymbiosisEfficiencyResult,
)
from .numeric import clamp, fmt, require_non_negative, require_positive, round2

logger = logging.getLogger(__name__)


def _mci_band(mci: float) -> str:
    if mci >= 0.8:
        return "Highly circular — industry leader"
    if mci >= 0.5:
        return "Moderately circular — good progress"
    if mci >= 0.3:
        return "Low circularity — significant improvement needed"
    return "Very linear — urgent action needed"


def _ise_band(ise: float) -> str:
    if ise >= 0.8:
        return "Excellent symbiosis efficiency"
    if ise >= 0.5:
        return "Good efficiency — consider closer partners"
    if ise >= 0.3:
        return "Moderate — explore local exchange networks"
    return "Poor — significant opportunity for improvement"


def material_circularity_indicator(inputs: MCIInput) -> MCIResult:
    """``MCI = 1 − (virgin / total) × (waste / total_input)``, clamped to [0, 1].

    Interpretation bands: ≥ 0.8 highly circular, ≥ 0.5 moderately circular,
    ≥ 0.3 low circularity, otherwise very linear.
    """
    require_positive(inputs.total_material_kg, "total_material_kg")
    require_positive(inputs.total_material_input_kg, "total_material_input_kg")
    require_non_negative(inputs.virgin_material_kg, "virgin_material_kg")
    require_non_negative(inputs.waste_generated_kg, "waste_generated_kg")

    virgin_ratio = inputs.virgin_material_kg / inputs.total_material_kg
    waste_ratio = inputs.waste_generated_kg / inputs.total_material_input_kg
    mci = clamp(round2(1 - virgin_ratio * waste_ratio), 0.0, 1.0)

    return MCIResult(
        mci=mci,
        virgin_ratio=round2(virgin_ratio),
        waste_ratio=round2(waste_ratio),
        interpretation=_mci_band(mci),
        formula=(
            f"MCI = 1 - ({fmt(inputs.virgin_material_kg)}/{fmt(inputs.total_material_kg)}) × "
            f"({fmt(inputs.waste_generated_kg)}/{fmt(inputs.total_material_input_kg)}) = {fmt(mci)}"
        ),
    )


def recycling_substitution_credit(
    material_type: FactorKey,
    quantity_kg: float,
    *,
    factors: FactorTables = DEFAULT_FACTORS,
) -> RecyclingCreditResult:
    """``Credit_kg_CO2 = Q × (EF_virgin − EF_recycled)`` plus water, energy
    and landfill volume avoided.

    Unknown materials use the ``mixed`` row; only a non-positive quantity fails.
    """
    require_positive(quantity_kg, "quantity_kg")

    row_key, row = factors.material_row(material_type)
    volume_factor = factors.landfill_volume_factor(row_key)

    co2_credit_kg = round2(quantity_kg * row["credit"])
    return RecyclingCreditResult(
        material_type=row_key,
        co2_credit_kg=co2_credit_kg,
        water_saved_liters=round2(quantity_kg * row["water_per_kg"]),
        energy_saved_kwh=round2(quantity_kg * row["energy_per_kg"]),
        landfill_avoided_m3=round2(quantity_kg * volume_factor),
        material_factors={
            "virgin": row["virgin"],
            "recycled": row["recycled"],
            "credit": row["credit"],
        },
        used_fallback=row_key != key_of(material_type),
        formula=(
            f"Credit = {fmt(quantity_kg)} kg × ({fmt(row['virgin'])} - {fmt(row['recycled'])}) "
            f"= {fmt(co2_credit_kg)} kg CO2"
        ),
    )


def industrial_symbiosis_efficiency(
    exchanged_kg: float,
    total_kg: float,
    actual_distance_km: float,
    optimal_distance_km: float = 50.0,
) -> SymbiosisEfficiencyResult:
    """``ISE = min(1, (exchanged / total) × min(1, optimal / actual))``."""
    require_positive(total_kg, "total_kg")
    require_positive(actual_distance_km, "actual_distance_km")
    require_non_negative(exchanged_kg, "exchanged_kg")
    require_positive(optimal_distance_km, "optimal_distance_km")

    exchange_ratio = exchanged_kg / total_kg
    distance_ratio = min(1.0, optimal_distance_km / actual_distance_km)
    ise = round2(min(1.0, exchange_ratio * distance_ratio))

    return SymbiosisEfficiencyResult(
        ise=ise,
        exchange_ratio=round2(exchange_ratio),
        distance_ratio=round2(distance_ratio),
        interpretation=_ise_band(ise),
        formula=(
            f"ISE = ({fmt(exchanged_kg)}/{fmt(total_kg)}) × "
            f"min(1, {fmt(optimal_distance_km)}/{fmt(actual_distance_km)}) = {fmt(ise)}"
        ),
    )


def circularity_rate(generated_kg: float, exchanged_kg: float, recycled_kg: float) -> float:
    """Share of generated waste diverted (exchanged + recycled), in percent.

    Never raises: no generation → 0, over-diversion is capped at 100.
    """
    if not generated_kg or generated_kg <= 0:
        return 0.0
    diverted = (exchanged_kg or 0.0) + (recycled_kg or 0.0)
    return round2(clamp(diverted / generated_kg * 100, 0.0, 100.0))
