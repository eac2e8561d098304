"""Centralized factor tables shared across all engine modules.

This module is the SINGLE SOURCE OF TRUTH for emission factors, material
savings rows, transport factors and matching weights.  Sources: EPA WARM,
IPCC AR5, CEA (India) grid data, BEE India.

Tables are exposed read-only (``MappingProxyType``).  Emission formulas never
read them directly; they go through ``factors.FactorTables`` so a
caller can inject a substitute set.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping


# ── Enumerated factor keys ──────────────────────────────────────────────

class GridType(str, Enum):
    """Electricity grid mix of the facility's supplier."""

    COAL_HEAVY = "coal_heavy"
    MIXED = "mixed"
    RENEWABLE_HEAVY = "renewable_heavy"
    GLOBAL_AVERAGE = "global_average"
    UNKNOWN = "unknown"


class LiquidFuel(str, Enum):
    DIESEL = "diesel"
    PETROL = "petrol"
    LPG = "lpg"


class MassFuel(str, Enum):
    NATURAL_GAS = "natural_gas"
    COAL = "coal"


class MaterialType(str, Enum):
    """Waste material categories traded on the marketplace."""

    STEEL = "steel"
    METAL_SCRAP = "metal_scrap"
    ALUMINUM = "aluminum"
    PLASTIC = "plastic"
    PAPER = "paper"
    GLASS = "glass"
    FABRIC = "fabric"
    WOOD = "wood"
    CHEMICAL = "chemical"
    ELECTRONIC = "electronic"
    CONSTRUCTION = "construction"
    ORGANIC = "organic"
    MIXED = "mixed"


class WasteType(str, Enum):
    """Waste streams with a known incineration composition factor."""

    PLASTIC = "plastic"
    PAPER = "paper"
    WOOD = "wood"
    ORGANIC = "organic"
    FABRIC = "fabric"
    MIXED = "mixed"
    ELECTRONIC = "electronic"
    CHEMICAL = "chemical"


class VehicleType(str, Enum):
    LIGHT_TRUCK = "light_truck"
    HEAVY_TRUCK = "heavy_truck"
    TRUCK = "truck"
    RAIL = "rail"
    SHIP = "ship"
    PIPELINE = "pipeline"
    AIR = "air"


class IntensityUnit(str, Enum):
    """Denominators accepted by the carbon-intensity formula."""

    REVENUE_LAKHS = "revenue_lakhs"
    PRODUCTION_TONS = "production_tons"
    SQFT = "sqft"
    EMPLOYEES = "employees"


# Legacy camelCase keys still sent by older clients.
FUEL_ALIASES: Mapping[str, str] = MappingProxyType({
    "naturalGas": MassFuel.NATURAL_GAS.value,
})


# ── Grid emission factors (kg CO2 / kWh) ────────────────────────────────
GRID_EMISSION_FACTORS: Mapping[str, float] = MappingProxyType({
    GridType.COAL_HEAVY.value: 0.82,       # Punjab, UP, Jharkhand
    GridType.MIXED.value: 0.71,            # India national average (CEA 2023)
    GridType.RENEWABLE_HEAVY.value: 0.25,  # Karnataka, Kerala
    GridType.GLOBAL_AVERAGE.value: 0.48,   # IEA world average
    GridType.UNKNOWN.value: 0.71,          # national average
})

# ── Fuel emission factors ───────────────────────────────────────────────
# kg CO2 per liter
LIQUID_FUEL_FACTORS: Mapping[str, float] = MappingProxyType({
    LiquidFuel.DIESEL.value: 2.68,   # 0.832 kg/L × NCV 43.0 × EF 74.1 / 1000 × OxF 0.99
    LiquidFuel.PETROL.value: 2.31,   # 0.745 kg/L × NCV 44.3 × EF 69.3 / 1000 × OxF 0.99
    LiquidFuel.LPG.value: 1.51,      # 0.54 kg/L × NCV 47.3 × EF 63.1 / 1000 × OxF 0.995
})

# kg CO2 per kg
MASS_FUEL_FACTORS: Mapping[str, float] = MappingProxyType({
    MassFuel.NATURAL_GAS.value: 2.75,  # carbon fraction 0.75 × 44/12
    MassFuel.COAL.value: 2.86,         # sub-bituminous, 15% ash
})

# kg CO2e per m³ of supplied + treated water
WATER_EMISSION_FACTOR_PER_M3 = 0.344

# ── Landfill methane (IPCC first order decay, managed anaerobic) ───────
LANDFILL_DOC = 0.15                # degradable organic carbon fraction
LANDFILL_DOC_FRACTION = 0.5        # fraction of DOC that decomposes
LANDFILL_F_CH4 = 0.5               # CH4 fraction in landfill gas
MOLECULAR_RATIO_CH4_C = 16 / 12
LANDFILL_MCF = 1.0                 # methane correction factor
LANDFILL_RECOVERY = 0.1            # gas captured
LANDFILL_OXIDATION = 0.1           # oxidised in the cover layer

# IPCC AR5 100-year global warming potential of CH4.  Fixed, not per call.
GWP_100_CH4 = 25

# ── Recycling substitution rows (per kg of material) ────────────────────
# virgin / recycled / credit: kg CO2; water: L; energy: kWh; density: kg/m³
MATERIAL_FACTORS: Mapping[str, Mapping[str, float]] = MappingProxyType({
    MaterialType.STEEL.value: MappingProxyType(
        {"virgin": 2.0, "recycled": 0.5, "credit": 1.5, "water_per_kg": 20, "energy_per_kg": 5.5, "density_kg_per_m3": 7800}),
    MaterialType.METAL_SCRAP.value: MappingProxyType(
        {"virgin": 2.0, "recycled": 0.5, "credit": 1.5, "water_per_kg": 20, "energy_per_kg": 5.5, "density_kg_per_m3": 7800}),
    MaterialType.ALUMINUM.value: MappingProxyType(
        {"virgin": 11.0, "recycled": 0.5, "credit": 10.5, "water_per_kg": 30, "energy_per_kg": 14.0, "density_kg_per_m3": 2700}),
    MaterialType.PLASTIC.value: MappingProxyType(
        {"virgin": 2.5, "recycled": 0.7, "credit": 1.8, "water_per_kg": 10, "energy_per_kg": 2.0, "density_kg_per_m3": 950}),
    MaterialType.PAPER.value: MappingProxyType(
        {"virgin": 0.9, "recycled": 0.3, "credit": 0.6, "water_per_kg": 15, "energy_per_kg": 3.0, "density_kg_per_m3": 700}),
    MaterialType.GLASS.value: MappingProxyType(
        {"virgin": 0.85, "recycled": 0.4, "credit": 0.45, "water_per_kg": 8, "energy_per_kg": 1.5, "density_kg_per_m3": 2500}),
    MaterialType.FABRIC.value: MappingProxyType(
        {"virgin": 5.5, "recycled": 1.2, "credit": 4.3, "water_per_kg": 100, "energy_per_kg": 10.0, "density_kg_per_m3": 400}),
    MaterialType.WOOD.value: MappingProxyType(
        {"virgin": 0.45, "recycled": 0.15, "credit": 0.3, "water_per_kg": 5, "energy_per_kg": 0.5, "density_kg_per_m3": 500}),
    MaterialType.CHEMICAL.value: MappingProxyType(
        {"virgin": 3.0, "recycled": 1.0, "credit": 2.0, "water_per_kg": 25, "energy_per_kg": 4.0, "density_kg_per_m3": 1200}),
    MaterialType.ELECTRONIC.value: MappingProxyType(
        {"virgin": 20.0, "recycled": 5.0, "credit": 15.0, "water_per_kg": 50, "energy_per_kg": 25.0, "density_kg_per_m3": 2000}),
    MaterialType.CONSTRUCTION.value: MappingProxyType(
        {"virgin": 0.1, "recycled": 0.03, "credit": 0.07, "water_per_kg": 2, "energy_per_kg": 0.2, "density_kg_per_m3": 2300}),
    MaterialType.ORGANIC.value: MappingProxyType(
        {"virgin": 0.5, "recycled": 0.1, "credit": 0.4, "water_per_kg": 5, "energy_per_kg": 0.3, "density_kg_per_m3": 600}),
    MaterialType.MIXED.value: MappingProxyType(
        {"virgin": 1.8, "recycled": 0.6, "credit": 1.2, "water_per_kg": 15, "energy_per_kg": 3.5, "density_kg_per_m3": 1000}),
})

# Landfill volume: m³ per kg (inverse compacted density)
LANDFILL_VOLUME_M3_PER_KG: Mapping[str, float] = MappingProxyType({
    MaterialType.METAL_SCRAP.value: 0.0003,
    MaterialType.STEEL.value: 0.0003,
    MaterialType.PLASTIC.value: 0.002,
    MaterialType.ORGANIC.value: 0.0015,
    MaterialType.FABRIC.value: 0.003,
    MaterialType.WOOD.value: 0.002,
    MaterialType.CHEMICAL.value: 0.001,
    MaterialType.ELECTRONIC.value: 0.001,
    MaterialType.CONSTRUCTION.value: 0.0005,
    MaterialType.GLASS.value: 0.0005,
    MaterialType.PAPER.value: 0.002,
    MaterialType.MIXED.value: 0.0012,
})

# ── Waste incineration composition factors (kg CO2 / kg waste) ─────────
INCINERATION_FACTORS: Mapping[str, float] = MappingProxyType({
    WasteType.PLASTIC.value: 2.3,
    WasteType.PAPER.value: 1.2,
    WasteType.WOOD.value: 1.8,
    WasteType.ORGANIC.value: 0.4,
    WasteType.FABRIC.value: 2.0,
    WasteType.MIXED.value: 1.5,
    WasteType.ELECTRONIC.value: 0.8,
    WasteType.CHEMICAL.value: 2.5,
})

# ── Transport emission factors (kg CO2 per km at full load) ────────────
TRANSPORT_FACTORS: Mapping[str, float] = MappingProxyType({
    VehicleType.LIGHT_TRUCK.value: 0.12,   # < 3.5 t
    VehicleType.HEAVY_TRUCK.value: 0.18,   # > 3.5 t
    VehicleType.TRUCK.value: 0.062,        # generic average
    VehicleType.RAIL.value: 0.022,
    VehicleType.SHIP.value: 0.008,
    VehicleType.PIPELINE.value: 0.005,
    VehicleType.AIR.value: 0.60,
})

# Fallback rows named by the formulas that use them.
ROUTE_SAVINGS_FALLBACK_VEHICLE = VehicleType.TRUCK.value
MATERIAL_FALLBACK = MaterialType.MIXED.value
INCINERATION_FALLBACK = WasteType.MIXED.value

# Road distance ≈ 1.3 × great circle
ROAD_CIRCUITY_FACTOR = 1.3
TRANSPORT_COST_PER_KM_INR = 5.0
LOAD_FACTOR_MIN = 0.1
LOAD_FACTOR_MAX = 1.5

EARTH_RADIUS_KM = 6371.0

# ── Matching ────────────────────────────────────────────────────────────
# LOCKED — weights must sum to 1.0
DEFAULT_MATCH_WEIGHTS: Mapping[str, float] = MappingProxyType({
    "material_compatibility": 0.40,
    "quantity_fit": 0.20,
    "price_compatibility": 0.20,
    "distance_score": 0.10,
    "reliability_score": 0.10,
})
WEIGHT_SUM_TOLERANCE = 0.01

MIN_MATCH_SCORE = 70.0
MAX_MATCHES = 10
NEUTRAL_RELIABILITY = 50.0

# ── Predictive analytics ────────────────────────────────────────────────
SMOOTHING_ALPHA_STABLE = 0.3
SMOOTHING_ALPHA_VOLATILE = 0.7
VOLATILITY_CV_THRESHOLD = 0.3
Z_SCORE_95 = 1.96
MIN_FORECAST_POINTS = 3
LARGE_SAMPLE_SIZE = 30

Z_SCORES: Mapping[float, float] = MappingProxyType({
    0.80: 1.2816,
    0.90: 1.645,
    0.95: Z_SCORE_95,
    0.99: 2.576,
})

# ── Economic ────────────────────────────────────────────────────────────
IRR_INITIAL_GUESS = 0.1
IRR_DERIVATIVE_EPSILON = 1e-12
IRR_MAX_RATE = 1e6              # |r| beyond this is treated as divergence

# ── Quantity units (kg per unit) ────────────────────────────────────────
UNIT_TO_KG: Mapping[str, float] = MappingProxyType({
    "kg": 1.0,
    "ton": 1000.0,
    "liter": 1.0,
    "cubic_meter": 1000.0,
})
