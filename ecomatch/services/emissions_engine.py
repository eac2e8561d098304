"""Emissions Engine — Scope 1/2/3 carbon accounting.

Converts energy, fuel, water and waste quantities into kg CO2e using the
injected factor tables.

Rules
-----
- NO API calls
- NO DB writes
- NO LLMs
- Pure deterministic math, every result carries its audit formula
"""

from __future__ import annotations

import logging
from typing import Optional

from ..constants import (
    GWP_100_CH4,
    IntensityUnit,
    LiquidFuel,
    MassFuel,
    MOLECULAR_RATIO_CH4_C,
)
from ..config import get_settings
from ..exceptions import InputValidationError
from ..factors import DEFAULT_FACTORS, FactorKey, FactorTables, key_of
from ..schemas.emissions_schema import (
    CarbonIntensityResult,
    ElectricityEmissionsResult,
    EmissionsInput,
    EmissionsResult,
    FuelEmissionsResult,
    IncinerationResult,
    LandfillMethaneResult,
    LandfillParameters,
    MethaneCo2eResult,
    TotalCarbonResult,
)
from .numeric import (
    fmt,
    require_between,
    require_non_negative,
    require_positive,
    round2,
    round_half_away,
)

logger = logging.getLogger(__name__)

_DEFAULT_LANDFILL = LandfillParameters()


# ===================================================================== #
#  Energy & fuel                                                          #
# ===================================================================== #

def electricity_emissions(
    kwh: float,
    grid_factor: Optional[float] = None,
    *,
    grid_type: Optional[FactorKey] = None,
    factors: FactorTables = DEFAULT_FACTORS,
) -> ElectricityEmissionsResult:
    """Scope 2: ``CO2_kg = kWh × grid_factor``.

    An explicit *grid_factor* wins; otherwise it is looked up by *grid_type*
    (default: the configured grid, ``mixed`` out of the box).
    """
    require_non_negative(kwh, "kwh")
    if grid_factor is None:
        if grid_type is None:
            grid_type = get_settings().default_grid_type
        grid_factor = factors.grid_factor(grid_type)
        grid_label = key_of(grid_type)
    else:
        require_non_negative(grid_factor, "grid_factor")
        grid_label = "custom"

    co2_kg = round2(kwh * grid_factor)
    formula = f"CO2_kg = {fmt(kwh)} kWh × {fmt(grid_factor)} kg_CO2/kWh = {fmt(co2_kg)}"
    logger.debug("[Emissions] %s", formula)

    return ElectricityEmissionsResult(
        co2_kg=co2_kg,
        kwh=kwh,
        grid_factor=grid_factor,
        grid_type=grid_label,
        formula=formula,
    )


def liquid_fuel_emissions(
    liters: float,
    fuel_type: FactorKey,
    *,
    factors: FactorTables = DEFAULT_FACTORS,
) -> FuelEmissionsResult:
    """Scope 1 liquid fuel: ``CO2_kg = liters × EF_per_liter``."""
    require_non_negative(liters, "liters")
    factor = factors.liquid_fuel_factor(fuel_type)
    co2_kg = round2(liters * factor)

    return FuelEmissionsResult(
        co2_kg=co2_kg,
        fuel_type=key_of(fuel_type),
        quantity=liters,
        unit="liters",
        factor=factor,
        formula=f"CO2_kg = {fmt(liters)} L × {fmt(factor)} kg_CO2/L = {fmt(co2_kg)}",
    )


def gaseous_fuel_emissions(
    kg: float,
    fuel_type: FactorKey,
    *,
    factors: FactorTables = DEFAULT_FACTORS,
) -> FuelEmissionsResult:
    """Scope 1 gaseous fuel: ``CO2_kg = mass_kg × EF_per_kg``."""
    require_non_negative(kg, "kg")
    factor = factors.mass_fuel_factor(fuel_type)
    co2_kg = round2(kg * factor)

    return FuelEmissionsResult(
        co2_kg=co2_kg,
        fuel_type=key_of(fuel_type),
        quantity=kg,
        unit="kg",
        factor=factor,
        formula=f"CO2_kg = {fmt(kg)} kg × {fmt(factor)} kg_CO2/kg = {fmt(co2_kg)}",
    )


def coal_emissions(kg: float, *, factors: FactorTables = DEFAULT_FACTORS) -> FuelEmissionsResult:
    """Scope 1 coal, by mass."""
    return gaseous_fuel_emissions(kg, MassFuel.COAL, factors=factors)


def total_carbon(scope1: float, scope2: float, scope3: float) -> TotalCarbonResult:
    """``E_total = Scope1 + Scope2 + Scope3``.  No netting, no overlap logic."""
    require_non_negative(scope1, "scope1")
    require_non_negative(scope2, "scope2")
    require_non_negative(scope3, "scope3")

    total = round2(scope1 + scope2 + scope3)
    return TotalCarbonResult(
        scope1=scope1,
        scope2=scope2,
        scope3=scope3,
        total_co2e=total,
        formula=(
            f"E_total = {fmt(scope1)} (Scope1) + {fmt(scope2)} (Scope2) "
            f"+ {fmt(scope3)} (Scope3) = {fmt(total)} kg CO2e"
        ),
    )


def calculate_facility_emissions(
    inputs: EmissionsInput,
    *,
    factors: FactorTables = DEFAULT_FACTORS,
) -> EmissionsResult:
    """Full Scope 1/2/3 footprint for one facility period.

    Scope 1 = liquid + mass fuels, Scope 2 = electricity,
    Scope 3 = water supply/treatment + landfilled waste (methane CO2e).
    Zero inputs contribute 0 without a formula line.
    """
    formulas = []
    breakdown = {
        "electricity": 0.0,
        "diesel": 0.0,
        "petrol": 0.0,
        "lpg": 0.0,
        "natural_gas": 0.0,
        "coal": 0.0,
        "water": 0.0,
        "waste": 0.0,
    }

    if inputs.electricity_kwh > 0:
        r = electricity_emissions(inputs.electricity_kwh, grid_type=inputs.grid_type, factors=factors)
        breakdown["electricity"] = r.co2_kg
        formulas.append(r.formula)

    for fuel in LiquidFuel:
        liters = getattr(inputs.fuel_liters, fuel.value)
        if liters > 0:
            r = liquid_fuel_emissions(liters, fuel, factors=factors)
            breakdown[fuel.value] = r.co2_kg
            formulas.append(r.formula)

    for fuel in MassFuel:
        kg = getattr(inputs.fuel_kg, fuel.value)
        if kg > 0:
            r = gaseous_fuel_emissions(kg, fuel, factors=factors)
            breakdown[fuel.value] = r.co2_kg
            formulas.append(r.formula)

    if inputs.water_liters > 0:
        m3 = inputs.water_liters / 1000
        water_co2 = round2(m3 * factors.water_per_m3)
        breakdown["water"] = water_co2
        formulas.append(
            f"CO2e_water = {fmt(inputs.water_liters)} L / 1000 × {fmt(factors.water_per_m3)} kg/m³ = {fmt(water_co2)}"
        )

    if inputs.waste_kg > 0:
        r = landfill_methane(inputs.waste_kg, organic_fraction=inputs.organic_fraction)
        breakdown["waste"] = r.co2e_kg
        formulas.append(r.formula)

    scope1 = round2(
        breakdown["diesel"] + breakdown["petrol"] + breakdown["lpg"]
        + breakdown["natural_gas"] + breakdown["coal"]
    )
    scope2 = breakdown["electricity"]
    scope3 = round2(breakdown["water"] + breakdown["waste"])
    total = total_carbon(scope1, scope2, scope3)
    formulas.append(total.formula)

    logger.debug("[Emissions] facility total=%s breakdown=%s", total.total_co2e, breakdown)

    return EmissionsResult(
        scope1=scope1,
        scope2=scope2,
        scope3=scope3,
        total_co2e=total.total_co2e,
        breakdown=breakdown,
        formulas=formulas,
    )


def carbon_intensity(
    total_co2e: float,
    denominator: float,
    unit: FactorKey = IntensityUnit.REVENUE_LAKHS,
) -> CarbonIntensityResult:
    """``CI = total_kg / denominator`` (default: per lakh INR revenue)."""
    require_non_negative(total_co2e, "total_co2e")
    require_positive(denominator, "denominator")
    unit_key = key_of(unit)
    valid_units = [u.value for u in IntensityUnit]
    if unit_key not in valid_units:
        raise InputValidationError("unit", unit_key, f"must be one of [{', '.join(valid_units)}]")

    ci = round2(total_co2e / denominator)
    unit_label = f"kg_CO2/{unit_key}"
    return CarbonIntensityResult(
        carbon_intensity=ci,
        unit=unit_label,
        formula=f"CI = {fmt(total_co2e)} kg / {fmt(denominator)} {unit_key} = {fmt(ci)} {unit_label}",
    )


# ===================================================================== #
#  Waste                                                                  #
# ===================================================================== #

def landfill_methane(
    waste_kg: float,
    params: LandfillParameters = _DEFAULT_LANDFILL,
    *,
    organic_fraction: float = 1.0,
) -> LandfillMethaneResult:
    """IPCC first-order-decay landfill methane.

    ``CH4 = organic_kg × DOC × DOCf × F × 16/12 × MCF × (1 − R) × (1 − OX)``,
    then converted with :func:`methane_to_co2e`.
    """
    require_non_negative(waste_kg, "waste_kg")
    require_between(organic_fraction, "organic_fraction", 0.0, 1.0)

    ch4_per_kg = (
        params.doc
        * params.doc_fraction
        * params.f_ch4
        * MOLECULAR_RATIO_CH4_C
        * params.mcf
        * (1 - params.recovery)
        * (1 - params.oxidation)
    )
    organic_kg = waste_kg * organic_fraction
    ch4_kg = round2(organic_kg * ch4_per_kg)
    co2e = methane_to_co2e(ch4_kg)

    return LandfillMethaneResult(
        organic_waste_kg=round2(organic_kg),
        ch4_kg=ch4_kg,
        co2e_kg=co2e.co2e_kg,
        ch4_per_kg=ch4_per_kg,
        parameters=params,
        formula=(
            f"CH4 = {fmt(round2(organic_kg))} kg × {fmt(round_half_away(ch4_per_kg, 4))} = {fmt(ch4_kg)} kg CH4 "
            f"→ {fmt(co2e.co2e_kg)} kg CO2e"
        ),
    )


def methane_to_co2e(ch4_kg: float) -> MethaneCo2eResult:
    """``CO2e = CH4 × 25`` (GWP-100, IPCC AR5)."""
    require_non_negative(ch4_kg, "ch4_kg")
    co2e = round2(ch4_kg * GWP_100_CH4)
    return MethaneCo2eResult(
        co2e_kg=co2e,
        gwp=GWP_100_CH4,
        formula=f"CO2e = {fmt(ch4_kg)} kg CH4 × {GWP_100_CH4} = {fmt(co2e)} kg",
    )


def incineration_emissions(
    waste_kg: float,
    waste_type: FactorKey = "mixed",
    energy_recovery: float = 0.0,
    *,
    factors: FactorTables = DEFAULT_FACTORS,
) -> IncinerationResult:
    """``CO2 = waste_kg × composition_factor × (1 − energy_recovery)``.

    Unknown waste types use the ``mixed`` composition row.
    """
    require_non_negative(waste_kg, "waste_kg")
    require_between(energy_recovery, "energy_recovery", 0.0, 1.0)

    row, factor = factors.incineration_factor(waste_type)
    co2_kg = round2(waste_kg * factor * (1 - energy_recovery))

    return IncinerationResult(
        co2_kg=co2_kg,
        waste_type=row,
        composition_factor=factor,
        energy_recovery=energy_recovery,
        formula=f"CO2 = {fmt(waste_kg)} kg × {fmt(factor)} × (1 - {fmt(energy_recovery)}) = {fmt(co2_kg)} kg",
    )
