"""Immutable factor tables injected into every engine function.

``DEFAULT_FACTORS`` is built once at import from :mod:`ecomatch.constants`.
Tests and callers may build their own :class:`FactorTables` (for example a
different grid mix) and pass it as ``factors=`` to any operation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Tuple, Union

from . import constants as C
from .exceptions import UnknownFactorError

logger = logging.getLogger(__name__)

FactorKey = Union[str, Enum]


def _frozen(table: Mapping) -> Mapping:
    if isinstance(table, MappingProxyType):
        return table
    return MappingProxyType(dict(table))


def key_of(value: FactorKey) -> str:
    """Normalise an enum member or raw string to its table key."""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


@dataclass(frozen=True)
class FactorTables:
    """Read-only reference data for all formulas."""

    grid: Mapping[str, float] = field(default_factory=lambda: C.GRID_EMISSION_FACTORS)
    liquid_fuel: Mapping[str, float] = field(default_factory=lambda: C.LIQUID_FUEL_FACTORS)
    mass_fuel: Mapping[str, float] = field(default_factory=lambda: C.MASS_FUEL_FACTORS)
    materials: Mapping[str, Mapping[str, float]] = field(default_factory=lambda: C.MATERIAL_FACTORS)
    landfill_volume: Mapping[str, float] = field(default_factory=lambda: C.LANDFILL_VOLUME_M3_PER_KG)
    incineration: Mapping[str, float] = field(default_factory=lambda: C.INCINERATION_FACTORS)
    transport: Mapping[str, float] = field(default_factory=lambda: C.TRANSPORT_FACTORS)
    water_per_m3: float = C.WATER_EMISSION_FACTOR_PER_M3

    def __post_init__(self) -> None:
        # frozen dataclass: bypass __setattr__ to swap in read-only views
        for name in ("grid", "liquid_fuel", "mass_fuel", "landfill_volume", "incineration", "transport"):
            object.__setattr__(self, name, _frozen(getattr(self, name)))
        object.__setattr__(
            self,
            "materials",
            MappingProxyType({k: _frozen(v) for k, v in self.materials.items()}),
        )

    def with_overrides(self, **tables) -> "FactorTables":
        """Return a copy with some tables replaced."""
        return replace(self, **tables)

    # ── Strict lookups (unknown key → UnknownFactorError) ──────────────

    def grid_factor(self, grid_type: FactorKey) -> float:
        return self._strict(self.grid, grid_type, "grid_type")

    def liquid_fuel_factor(self, fuel_type: FactorKey) -> float:
        return self._strict(self.liquid_fuel, fuel_type, "fuel_type")

    def mass_fuel_factor(self, fuel_type: FactorKey) -> float:
        key = key_of(fuel_type)
        return self._strict(self.mass_fuel, C.FUEL_ALIASES.get(key, key), "fuel_type")

    def transport_factor(self, vehicle_type: FactorKey) -> float:
        return self._strict(self.transport, vehicle_type, "vehicle_type")

    # ── Lookups with a named fallback row ───────────────────────────────

    def material_row(self, material_type: FactorKey) -> Tuple[str, Mapping[str, float]]:
        key = self._with_fallback(self.materials, material_type, C.MATERIAL_FALLBACK, "material_type")
        return key, self.materials[key]

    def landfill_volume_factor(self, material_type: FactorKey) -> float:
        key = self._with_fallback(self.landfill_volume, material_type, C.MATERIAL_FALLBACK, "material_type")
        return self.landfill_volume[key]

    def incineration_factor(self, waste_type: FactorKey) -> Tuple[str, float]:
        key = self._with_fallback(self.incineration, waste_type, C.INCINERATION_FALLBACK, "waste_type")
        return key, self.incineration[key]

    def transport_factor_or_fallback(self, vehicle_type: FactorKey) -> Tuple[str, float]:
        key = self._with_fallback(
            self.transport, vehicle_type, C.ROUTE_SAVINGS_FALLBACK_VEHICLE, "vehicle_type"
        )
        return key, self.transport[key]

    # ── internals ───────────────────────────────────────────────────────

    @staticmethod
    def _strict(table: Mapping[str, float], value: FactorKey, field_name: str) -> float:
        key = key_of(value)
        if key not in table:
            raise UnknownFactorError(field_name, key, table.keys())
        return table[key]

    @staticmethod
    def _with_fallback(table: Mapping, value: FactorKey, fallback: str, field_name: str) -> str:
        key = key_of(value)
        if key in table:
            return key
        logger.info("Unknown %s %r, using %r row", field_name, key, fallback)
        return fallback


DEFAULT_FACTORS = FactorTables()
