import os
import sys

# Ensure the ecomatch package is importable without installing it
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from ecomatch.config import get_settings

_ENV_VARS = (
    "ECOMATCH_ROAD_CIRCUITY_FACTOR",
    "ECOMATCH_TRANSPORT_COST_PER_KM",
    "ECOMATCH_DEFAULT_GRID_TYPE",
    "ECOMATCH_MIN_MATCH_SCORE",
    "ECOMATCH_MAX_MATCHES",
    "ECOMATCH_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Every test starts from default settings, whatever the shell exports."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
