"""Transport Engine — great-circle distance, vehicle emissions, route savings.

Rules
-----
- NO API calls (no routing service: road distance is estimated)
- Pure deterministic math
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Union

from ..constants import (
    EARTH_RADIUS_KM,
    LOAD_FACTOR_MAX,
    LOAD_FACTOR_MIN,
)
from ..config import get_settings
from ..exceptions import CoordinateOutOfRangeError, InputValidationError
from ..factors import DEFAULT_FACTORS, FactorKey, FactorTables, key_of
from ..schemas.transport_schema import (
    DistanceResult,
    GeoCoordinate,
    RouteSavingsResult,
    TransportEstimate,
    VehicleEmissionsInput,
    VehicleEmissionsResult,
)
from .numeric import (
    fmt,
    require_between,
    require_finite,
    require_non_negative,
    require_positive,
    round2,
)

logger = logging.getLogger(__name__)


def _check_coordinate(value: float, name: str, limit: float) -> None:
    require_finite(value, name)
    if value < -limit or value > limit:
        raise CoordinateOutOfRangeError(name, value, -limit, limit)


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> DistanceResult:
    """Great-circle distance on a spherical Earth (R = 6371 km).

    ``d = 2R × arcsin(√(sin²(Δφ/2) + cos φ1 · cos φ2 · sin²(Δλ/2)))``
    """
    _check_coordinate(lat1, "lat1", 90.0)
    _check_coordinate(lat2, "lat2", 90.0)
    _check_coordinate(lon1, "lon1", 180.0)
    _check_coordinate(lon2, "lon2", 180.0)

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # float noise can push a a hair above 1 for antipodal points
    c = 2 * math.asin(math.sqrt(min(1.0, a)))
    distance_km = round2(EARTH_RADIUS_KM * c)

    return DistanceResult(
        distance_km=distance_km,
        formula=(
            f"d = 2 × {fmt(EARTH_RADIUS_KM)} × arcsin(√(sin²({fmt(round2(d_phi / 2))}) + "
            f"cos({fmt(round2(phi1))})cos({fmt(round2(phi2))})sin²({fmt(round2(d_lambda / 2))}))) "
            f"= {fmt(distance_km)} km"
        ),
    )


def distance_between(a: GeoCoordinate, b: GeoCoordinate) -> DistanceResult:
    """:func:`haversine_distance` for two :class:`GeoCoordinate` values."""
    return haversine_distance(a.latitude, a.longitude, b.latitude, b.longitude)


def vehicle_emissions(
    inputs: Union[VehicleEmissionsInput, dict],
    *,
    factors: FactorTables = DEFAULT_FACTORS,
) -> VehicleEmissionsResult:
    """``CO2_kg = distance_km × EF_per_km × load_factor``.

    Strict: an unknown vehicle type fails and the error lists the valid types.
    """
    if not isinstance(inputs, VehicleEmissionsInput):
        inputs = VehicleEmissionsInput.model_validate(inputs)

    require_positive(inputs.distance_km, "distance_km")
    require_between(inputs.load_factor, "load_factor", LOAD_FACTOR_MIN, LOAD_FACTOR_MAX)
    ef = factors.transport_factor(inputs.vehicle_type)

    co2_kg = round2(inputs.distance_km * ef * inputs.load_factor)
    return VehicleEmissionsResult(
        co2_kg=co2_kg,
        distance_km=inputs.distance_km,
        emission_factor=ef,
        load_factor=inputs.load_factor,
        vehicle_type=key_of(inputs.vehicle_type),
        formula=(
            f"CO2 = {fmt(inputs.distance_km)} km × {fmt(ef)} kg/km × "
            f"{fmt(inputs.load_factor)} LF = {fmt(co2_kg)} kg"
        ),
    )


def route_optimization_savings(
    original_km: float,
    optimized_km: float,
    vehicle_type: FactorKey,
    annual_trips: float,
    load_factor: float = 1.0,
    *,
    factors: FactorTables = DEFAULT_FACTORS,
) -> RouteSavingsResult:
    """``Savings = (D_original − D_optimized) × EF × LF × annual_trips``.

    Lenient: an unknown vehicle type uses the ``truck`` factor.
    """
    require_positive(original_km, "original_km")
    require_positive(optimized_km, "optimized_km")
    if optimized_km >= original_km:
        raise InputValidationError(
            "optimized_km", optimized_km, f"must be < original_km ({fmt(original_km)})"
        )
    require_positive(annual_trips, "annual_trips")
    require_between(load_factor, "load_factor", LOAD_FACTOR_MIN, LOAD_FACTOR_MAX)

    row, ef = factors.transport_factor_or_fallback(vehicle_type)
    distance_saved = original_km - optimized_km
    savings = round2(distance_saved * ef * load_factor * annual_trips)

    return RouteSavingsResult(
        savings_co2_kg=savings,
        distance_saved_km=round2(distance_saved),
        percentage_saved=round2(distance_saved / original_km * 100),
        vehicle_type=row,
        emission_factor=ef,
        formula=(
            f"Savings = ({fmt(original_km)} - {fmt(optimized_km)}) × {fmt(ef)} × {fmt(load_factor)} "
            f"× {fmt(annual_trips)} trips = {fmt(savings)} kg CO2/year"
        ),
    )


def estimate_transport(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    vehicle_type: FactorKey = "truck",
    load_factor: float = 1.0,
    cost_per_km: Optional[float] = None,
    *,
    circuity_factor: Optional[float] = None,
    factors: FactorTables = DEFAULT_FACTORS,
) -> TransportEstimate:
    """Road distance, CO2 and haulage cost between two points.

    Road km = great circle × circuity factor (1.3 unless configured).
    ``cost_per_km`` and ``circuity_factor`` default to the engine settings.
    """
    settings = get_settings()
    if circuity_factor is None:
        circuity_factor = settings.road_circuity_factor
    if cost_per_km is None:
        cost_per_km = settings.transport_cost_per_km
    require_positive(circuity_factor, "circuity_factor")
    require_non_negative(cost_per_km, "cost_per_km")

    air = haversine_distance(lat1, lon1, lat2, lon2)
    road_km = round2(air.distance_km * circuity_factor)
    estimated_cost = round2(road_km * cost_per_km)

    if road_km > 0:
        co2_kg = vehicle_emissions(
            VehicleEmissionsInput(
                distance_km=road_km,
                vehicle_type=key_of(vehicle_type),
                load_factor=load_factor,
            ),
            factors=factors,
        ).co2_kg
    else:
        # same site: nothing to haul, but inputs are still validated
        require_between(load_factor, "load_factor", LOAD_FACTOR_MIN, LOAD_FACTOR_MAX)
        factors.transport_factor(vehicle_type)
        co2_kg = 0.0

    return TransportEstimate(
        great_circle_km=air.distance_km,
        distance_km=road_km,
        circuity_factor=circuity_factor,
        co2_kg=co2_kg,
        estimated_cost_inr=estimated_cost,
        cost_per_km=cost_per_km,
        formula=(
            f"Distance: {fmt(air.distance_km)} km (air) × {fmt(circuity_factor)} = {fmt(road_km)} km (road) "
            f"| CO2: {fmt(co2_kg)} kg | Cost: ₹{fmt(estimated_cost)}"
        ),
    )
