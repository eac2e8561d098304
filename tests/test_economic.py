"""Economic engine tests — abatement cost, NPV / IRR, eco-efficiency."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from ecomatch.exceptions import InputValidationError
from ecomatch.services.economic_engine import (
    abatement_cost,
    eco_efficiency,
    internal_rate_of_return,
    net_present_value,
)


class TestAbatementCost:
    def test_cost_per_kg(self):
        r = abatement_cost(1000, 1500, 500, 400)
        assert r.cac_inr_per_kg == 5.0
        assert r.emissions_reduced == 100.0
        assert r.formula == "CAC = (1500 - 1000) / (500 - 400) = ₹5/kg CO2"

    def test_cheaper_intervention_is_negative(self):
        assert abatement_cost(1000, 800, 500, 400).cac_inr_per_kg == -2.0

    def test_no_reduction_rejected(self):
        with pytest.raises(InputValidationError):
            abatement_cost(1000, 1500, 500, 500)

    def test_worsening_rejected(self):
        with pytest.raises(InputValidationError) as exc:
            abatement_cost(1000, 1500, 500, 600)
        assert exc.value.field == "emissions_intervention"


class TestNetPresentValue:
    def test_discounting(self):
        assert net_present_value([-1000, 1100], 0.1) == pytest.approx(0.0, abs=1e-9)
        assert net_present_value([100, 100], 0.0) == 200

    def test_rate_domain(self):
        with pytest.raises(InputValidationError):
            net_present_value([-1, 2], -1)

    def test_long_series_at_huge_rate_stays_finite(self):
        """Discounting many periods at a very large rate must not overflow."""
        assert net_present_value([1.0] * 400, 1e6) == pytest.approx(1.000001, rel=1e-9)



class TestInternalRateOfReturn:
    def test_two_flow_series(self):
        r = internal_rate_of_return([-1000, 1100])
        assert r.converged is True
        assert r.irr_percent == pytest.approx(10.0)
        assert r.irr == pytest.approx(0.1)

    def test_annuity(self):
        r = internal_rate_of_return([-1000, 500, 500, 500])
        assert r.converged is True
        assert r.irr_percent == pytest.approx(23.38, abs=0.02)
        assert "converged" in r.formula

    def test_iteration_cap_reports_non_convergence(self):
        r = internal_rate_of_return([-1000, 500, 500, 500], max_iterations=1)
        assert r.converged is False
        assert r.iterations == 1
        assert r.irr is not None

    def test_non_convergence_formula_shows_no_rate(self):
        """A non-converged estimate is not presented as the IRR in the audit string."""
        r = internal_rate_of_return([-1000, 500, 500, 500], max_iterations=1)
        assert r.formula.endswith("→ IRR = n/a (did not converge)")
        assert "%" not in r.formula

    def test_diverging_newton_steps_stop_without_raising(self):
        """Steps that run off towards infinity end as non-converged, not OverflowError."""
        r = internal_rate_of_return([-1000, -1000, -1000, -1000, 1000, 1] + [0] * 20)
        assert r.converged is False
        assert abs(r.irr) <= 1e6
        assert "n/a" in r.formula

    def test_converged_formula_shows_rate(self):
        r = internal_rate_of_return([-1000, 1100])
        assert r.formula == "0 = Σ CF_t / (1 + IRR)^t over [-1000, 1100] → IRR = 10% (converged)"


    def test_needs_two_flows(self):
        with pytest.raises(InputValidationError):
            internal_rate_of_return([-1000])

    def test_needs_sign_change(self):
        with pytest.raises(InputValidationError):
            internal_rate_of_return([100, 200, 300])


class TestEcoEfficiency:
    @pytest.mark.parametrize(
        "value, band",
        [
            (150000, "Excellent eco-efficiency"),
            (100000, "Good eco-efficiency"),
            (60000, "Good eco-efficiency"),
            (20000, "Moderate — room for improvement"),
            (5000, "Poor eco-efficiency"),
        ],
    )
    def test_bands(self, value, band):
        assert eco_efficiency(value, 100).interpretation == band

    def test_ratio(self):
        r = eco_efficiency(150000, 100)
        assert r.eco_efficiency == 1500.0

    def test_zero_inputs_rejected(self):
        with pytest.raises(InputValidationError):
            eco_efficiency(0, 100)
        with pytest.raises(InputValidationError):
            eco_efficiency(1000, 0)
