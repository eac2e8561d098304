"""Emissions engine tests — scope 1/2/3 formulas, landfill methane, incineration."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from pydantic import ValidationError

from ecomatch.constants import GridType, LiquidFuel, MassFuel
from ecomatch.exceptions import InputValidationError, UnknownFactorError
from ecomatch.factors import DEFAULT_FACTORS
from ecomatch.schemas.emissions_schema import EmissionsInput, FuelKg, FuelLiters
from ecomatch.services.emissions_engine import (
    calculate_facility_emissions,
    carbon_intensity,
    coal_emissions,
    electricity_emissions,
    gaseous_fuel_emissions,
    incineration_emissions,
    landfill_methane,
    liquid_fuel_emissions,
    methane_to_co2e,
    total_carbon,
)


# ---------------------------------------------------------------------------
# Electricity / fuels
# ---------------------------------------------------------------------------

class TestElectricity:
    def test_default_grid_is_mixed(self):
        """1000 kWh on the national-average grid → 710 kg."""
        r = electricity_emissions(1000)
        assert r.co2_kg == 710.0
        assert r.grid_type == "mixed"
        assert r.formula == "CO2_kg = 1000 kWh × 0.71 kg_CO2/kWh = 710"

    def test_grid_type_lookup(self):
        assert electricity_emissions(1000, grid_type=GridType.RENEWABLE_HEAVY).co2_kg == 250.0
        assert electricity_emissions(1000, grid_type="coal_heavy").co2_kg == 820.0

    def test_explicit_factor_wins(self):
        r = electricity_emissions(200, 0.5, grid_type="coal_heavy")
        assert r.co2_kg == 100.0
        assert r.grid_type == "custom"

    def test_zero_kwh_is_zero(self):
        assert electricity_emissions(0).co2_kg == 0.0

    def test_negative_kwh_rejected(self):
        with pytest.raises(InputValidationError) as exc:
            electricity_emissions(-1)
        assert exc.value.field == "kwh"
        assert "-1" in str(exc.value)

    def test_unknown_grid_lists_valid_keys(self):
        with pytest.raises(UnknownFactorError) as exc:
            electricity_emissions(10, grid_type="nuclear")
        assert "mixed" in exc.value.valid_keys
        assert "nuclear" in str(exc.value)


class TestFuels:
    def test_diesel(self):
        r = liquid_fuel_emissions(100, LiquidFuel.DIESEL)
        assert r.co2_kg == 268.0
        assert r.unit == "liters"

    def test_petrol_and_lpg(self):
        assert liquid_fuel_emissions(10, "petrol").co2_kg == 23.1
        assert liquid_fuel_emissions(10, "lpg").co2_kg == 15.1

    def test_unknown_liquid_fuel(self):
        with pytest.raises(UnknownFactorError):
            liquid_fuel_emissions(10, "kerosene")

    def test_natural_gas_by_mass(self):
        r = gaseous_fuel_emissions(10, MassFuel.NATURAL_GAS)
        assert r.co2_kg == 27.5
        assert r.unit == "kg"

    def test_legacy_camel_case_key(self):
        assert gaseous_fuel_emissions(10, "naturalGas").co2_kg == 27.5

    def test_coal(self):
        assert coal_emissions(100).co2_kg == 286.0

    def test_negative_fuel_rejected(self):
        with pytest.raises(InputValidationError):
            liquid_fuel_emissions(-5, "diesel")


class TestTotals:
    def test_total_is_scope_sum(self):
        r = total_carbon(1.5, 2.25, 3.0)
        assert r.total_co2e == 6.75
        assert r.formula == "E_total = 1.5 (Scope1) + 2.25 (Scope2) + 3 (Scope3) = 6.75 kg CO2e"

    def test_negative_scope_rejected(self):
        with pytest.raises(InputValidationError):
            total_carbon(1, -2, 3)

    def test_carbon_intensity_default_unit(self):
        r = carbon_intensity(1000, 50)
        assert r.carbon_intensity == 20.0
        assert r.unit == "kg_CO2/revenue_lakhs"

    def test_carbon_intensity_zero_denominator(self):
        with pytest.raises(InputValidationError):
            carbon_intensity(1000, 0)

    def test_carbon_intensity_unknown_unit(self):
        with pytest.raises(InputValidationError):
            carbon_intensity(1000, 10, "per_hectare")


# ---------------------------------------------------------------------------
# Waste
# ---------------------------------------------------------------------------

class TestLandfill:
    def test_default_parameters(self):
        """1 t of organic waste → 40.5 kg CH4 → 1012.5 kg CO2e."""
        r = landfill_methane(1000)
        assert r.ch4_per_kg == pytest.approx(0.0405)
        assert r.ch4_kg == 40.5
        assert r.co2e_kg == 1012.5

    def test_organic_fraction_scales(self):
        r = landfill_methane(1000, organic_fraction=0.5)
        assert r.organic_waste_kg == 500.0
        assert r.ch4_kg == 20.25

    def test_formula_shows_yield(self):
        assert "0.0405" in landfill_methane(1000).formula

    def test_methane_gwp(self):
        r = methane_to_co2e(2)
        assert r.co2e_kg == 50.0
        assert r.gwp == 25

    def test_organic_fraction_out_of_range(self):
        with pytest.raises(InputValidationError):
            landfill_methane(100, organic_fraction=1.5)


class TestIncineration:
    def test_with_energy_recovery(self):
        r = incineration_emissions(100, "plastic", energy_recovery=0.2)
        assert r.co2_kg == 184.0
        assert r.waste_type == "plastic"

    def test_unknown_type_uses_mixed_row(self):
        r = incineration_emissions(100, "rubber")
        assert r.waste_type == "mixed"
        assert r.co2_kg == 150.0

    def test_recovery_above_one_rejected(self):
        with pytest.raises(InputValidationError):
            incineration_emissions(100, "paper", energy_recovery=1.2)


# ---------------------------------------------------------------------------
# Facility footprint
# ---------------------------------------------------------------------------

class TestFacilityEmissions:
    def test_scopes(self):
        inputs = EmissionsInput(
            electricity_kwh=1000,
            fuel_liters=FuelLiters(diesel=100),
            water_liters=10000,
        )
        r = calculate_facility_emissions(inputs)
        assert r.scope1 == 268.0
        assert r.scope2 == 710.0
        assert r.scope3 == 3.44
        assert r.total_co2e == 981.44
        assert r.breakdown["water"] == 3.44
        assert r.breakdown["coal"] == 0.0

    def test_waste_lands_in_scope3(self):
        r = calculate_facility_emissions(EmissionsInput(waste_kg=1000))
        assert r.scope3 == 1012.5
        assert r.breakdown["waste"] == 1012.5

    def test_mass_fuels_in_scope1(self):
        r = calculate_facility_emissions(EmissionsInput(fuel_kg=FuelKg(natural_gas=10, coal=100)))
        assert r.scope1 == 313.5

    def test_empty_input_is_zero(self):
        r = calculate_facility_emissions(EmissionsInput())
        assert r.total_co2e == 0.0
        assert len(r.formulas) == 1

    def test_negative_input_rejected_at_construction(self):
        with pytest.raises(ValidationError):
            EmissionsInput(electricity_kwh=-10)

    def test_unknown_grid_type(self):
        with pytest.raises(UnknownFactorError):
            calculate_facility_emissions(EmissionsInput(electricity_kwh=10, grid_type="martian"))

    def test_injected_factor_tables(self):
        custom = DEFAULT_FACTORS.with_overrides(grid={"mixed": 1.0})
        r = calculate_facility_emissions(EmissionsInput(electricity_kwh=100), factors=custom)
        assert r.scope2 == 100.0
        # defaults untouched
        assert DEFAULT_FACTORS.grid["mixed"] == 0.71

    def test_deterministic(self):
        inputs = EmissionsInput(electricity_kwh=1234.5, fuel_liters=FuelLiters(petrol=12.3))
        assert calculate_facility_emissions(inputs) == calculate_facility_emissions(inputs)
