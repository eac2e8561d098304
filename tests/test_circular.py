"""Circular-economy engine tests — MCI, recycling credit, ISE, circularity rate."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from ecomatch.constants import MaterialType
from ecomatch.exceptions import InputValidationError
from ecomatch.schemas.circular_schema import MCIInput
from ecomatch.services.circular_engine import (
    circularity_rate,
    industrial_symbiosis_efficiency,
    material_circularity_indicator,
    recycling_substitution_credit,
)


def _mci(virgin, total, waste, total_input):
    return material_circularity_indicator(
        MCIInput(
            virgin_material_kg=virgin,
            total_material_kg=total,
            waste_generated_kg=waste,
            total_material_input_kg=total_input,
        )
    )


class TestMaterialCircularityIndicator:
    def test_basic(self):
        """1 − 0.6 × 0.2 = 0.88."""
        r = _mci(600, 1000, 200, 1000)
        assert r.mci == 0.88
        assert r.interpretation.startswith("Highly circular")
        assert r.formula == "MCI = 1 - (600/1000) × (200/1000) = 0.88"

    def test_band_boundary(self):
        r = _mci(1000, 1000, 500, 1000)
        assert r.mci == 0.5
        assert r.interpretation.startswith("Moderately circular")

    def test_clamped_at_zero(self):
        """Waste larger than the input drives the raw value negative."""
        r = _mci(1000, 1000, 3000, 1000)
        assert r.mci == 0.0
        assert r.interpretation.startswith("Very linear")

    def test_fully_circular(self):
        assert _mci(0, 1000, 500, 1000).mci == 1.0

    def test_zero_total_rejected(self):
        with pytest.raises(InputValidationError):
            _mci(0, 0, 10, 100)


class TestRecyclingCredit:
    def test_plastic(self):
        r = recycling_substitution_credit(MaterialType.PLASTIC, 1000)
        assert r.co2_credit_kg == 1800.0
        assert r.water_saved_liters == 10000.0
        assert r.energy_saved_kwh == 2000.0
        assert r.landfill_avoided_m3 == 2.0
        assert r.used_fallback is False
        assert r.formula == "Credit = 1000 kg × (2.5 - 0.7) = 1800 kg CO2"

    def test_aluminum(self):
        r = recycling_substitution_credit("aluminum", 100)
        assert r.co2_credit_kg == 1050.0
        assert r.material_factors["virgin"] == 11.0

    def test_unknown_material_falls_back_to_mixed(self):
        r = recycling_substitution_credit("rubber", 100)
        assert r.material_type == "mixed"
        assert r.used_fallback is True
        assert r.co2_credit_kg == 120.0

    def test_non_positive_quantity_rejected(self):
        with pytest.raises(InputValidationError):
            recycling_substitution_credit("steel", 0)


class TestSymbiosisEfficiency:
    def test_distance_penalty(self):
        """80% exchanged, partner twice the optimal distance → 0.4."""
        r = industrial_symbiosis_efficiency(800, 1000, 100)
        assert r.ise == 0.4
        assert r.distance_ratio == 0.5
        assert r.interpretation.startswith("Moderate")

    def test_closer_than_optimal_is_not_rewarded(self):
        r = industrial_symbiosis_efficiency(1000, 1000, 25)
        assert r.ise == 1.0
        assert r.distance_ratio == 1.0

    def test_zero_distance_rejected(self):
        with pytest.raises(InputValidationError):
            industrial_symbiosis_efficiency(10, 100, 0)


class TestCircularityRate:
    def test_zero_generation_never_raises(self):
        assert circularity_rate(0, 50, 50) == 0.0
        assert circularity_rate(0, 0, 0) == 0.0

    def test_share_diverted(self):
        assert circularity_rate(1000, 300, 200) == 50.0

    def test_capped_at_100(self):
        assert circularity_rate(100, 80, 80) == 100.0
