from .emissions_engine import (
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
from .circular_engine import (
    circularity_rate,
    industrial_symbiosis_efficiency,
    material_circularity_indicator,
    recycling_substitution_credit,
)
from .transport_engine import (
    distance_between,
    estimate_transport,
    haversine_distance,
    route_optimization_savings,
    vehicle_emissions,
)
from .matching_engine import (
    distance_score,
    material_compatibility,
    price_score,
    quantity_fit,
    reliability_score,
    weighted_match_score,
)
from .predictive_engine import (
    confidence_interval,
    confidence_interval_from_sample,
    exponential_smoothing,
    linear_regression,
)
from .economic_engine import abatement_cost, eco_efficiency, internal_rate_of_return, net_present_value
from .exchange_service import exchange_impact, normalize_to_kg, rank_matches, score_listing_against_need

__all__ = [
    "electricity_emissions",
    "liquid_fuel_emissions",
    "gaseous_fuel_emissions",
    "coal_emissions",
    "total_carbon",
    "calculate_facility_emissions",
    "carbon_intensity",
    "landfill_methane",
    "methane_to_co2e",
    "incineration_emissions",
    "material_circularity_indicator",
    "recycling_substitution_credit",
    "industrial_symbiosis_efficiency",
    "circularity_rate",
    "haversine_distance",
    "distance_between",
    "vehicle_emissions",
    "route_optimization_savings",
    "estimate_transport",
    "weighted_match_score",
    "price_score",
    "distance_score",
    "quantity_fit",
    "material_compatibility",
    "reliability_score",
    "exponential_smoothing",
    "confidence_interval",
    "confidence_interval_from_sample",
    "linear_regression",
    "abatement_cost",
    "net_present_value",
    "internal_rate_of_return",
    "eco_efficiency",
    "normalize_to_kg",
    "score_listing_against_need",
    "rank_matches",
    "exchange_impact",
]
