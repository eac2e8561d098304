"""Settings tests — defaults, environment overrides, validation."""

import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from ecomatch.config import configure_logging, get_settings, load_settings
from ecomatch.exceptions import InputValidationError, UnknownFactorError


class TestSettings:
    def test_defaults(self):
        s = get_settings()
        assert s.road_circuity_factor == 1.3
        assert s.transport_cost_per_km == 5.0
        assert s.default_grid_type == "mixed"
        assert s.min_match_score == 70.0
        assert s.max_matches == 10

    def test_cached(self):
        assert get_settings() is get_settings()

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("ECOMATCH_TRANSPORT_COST_PER_KM", "7.5")
        monkeypatch.setenv("ECOMATCH_MAX_MATCHES", "3")
        s = load_settings()
        assert s.transport_cost_per_km == 7.5
        assert s.max_matches == 3

    def test_blank_value_uses_default(self, monkeypatch):
        monkeypatch.setenv("ECOMATCH_MAX_MATCHES", "  ")
        assert load_settings().max_matches == 10

    def test_unparseable_value_names_variable(self, monkeypatch):
        monkeypatch.setenv("ECOMATCH_MAX_MATCHES", "lots")
        with pytest.raises(InputValidationError) as exc:
            load_settings()
        assert exc.value.field == "ECOMATCH_MAX_MATCHES"

    def test_circuity_below_one_rejected(self, monkeypatch):
        monkeypatch.setenv("ECOMATCH_ROAD_CIRCUITY_FACTOR", "0.8")
        with pytest.raises(InputValidationError):
            load_settings()

    @pytest.mark.parametrize(
        "name, raw",
        [
            ("ECOMATCH_MIN_MATCH_SCORE", "150"),
            ("ECOMATCH_MAX_MATCHES", "0"),
            ("ECOMATCH_TRANSPORT_COST_PER_KM", "-2"),
        ],
    )
    def test_out_of_range_value_names_variable(self, monkeypatch, name, raw):
        """Bounds violations surface as the engine error, not a bare pydantic one."""
        monkeypatch.setenv(name, raw)
        with pytest.raises(InputValidationError) as exc:
            load_settings()
        assert exc.value.field == name

    def test_unknown_grid_type_rejected(self, monkeypatch):
        monkeypatch.setenv("ECOMATCH_DEFAULT_GRID_TYPE", "bogus")
        with pytest.raises(UnknownFactorError) as exc:
            load_settings()
        assert exc.value.field == "ECOMATCH_DEFAULT_GRID_TYPE"
        assert "mixed" in exc.value.valid_keys



class TestLogging:
    def test_log_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("ECOMATCH_LOG_LEVEL", "debug")
        get_settings.cache_clear()
        assert get_settings().log_level == "DEBUG"
        configure_logging()

    def test_engines_log_under_package_namespace(self, caplog):
        from ecomatch.services.circular_engine import recycling_substitution_credit

        with caplog.at_level(logging.INFO, logger="ecomatch"):
            recycling_substitution_credit("rubber", 10)
        assert any("rubber" in rec.getMessage() for rec in caplog.records)


class TestDefaultGrid:
    def test_configured_grid_applies_when_none_given(self, monkeypatch):
        from ecomatch.services.emissions_engine import electricity_emissions

        monkeypatch.setenv("ECOMATCH_DEFAULT_GRID_TYPE", "renewable_heavy")
        get_settings.cache_clear()
        r = electricity_emissions(1000)
        assert r.grid_type == "renewable_heavy"
        assert r.co2_kg == 250.0
