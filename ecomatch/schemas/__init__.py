# Schemas package
from .emissions_schema import (
    EmissionsInput,
    EmissionsResult,
    FuelKg,
    FuelLiters,
    LandfillParameters,
)
from .circular_schema import MCIInput, MCIResult, RecyclingCreditResult, SymbiosisEfficiencyResult
from .transport_schema import GeoCoordinate, TransportEstimate, VehicleEmissionsInput
from .matching_schema import FACTOR_NAMES, FactorScore, MatchFactors, MatchScoreResult, MatchWeights
from .predictive_schema import ForecastPoint, RegressionResult, SmoothingResult, TrendParameters
from .economic_schema import AbatementCostResult, EcoEfficiencyResult, IRRResult
from .exchange_schema import ExchangeImpactResult, MatchResult, NeedListing, WasteListing

__all__ = [
    "EmissionsInput",
    "EmissionsResult",
    "FuelLiters",
    "FuelKg",
    "LandfillParameters",
    "MCIInput",
    "MCIResult",
    "RecyclingCreditResult",
    "SymbiosisEfficiencyResult",
    "GeoCoordinate",
    "TransportEstimate",
    "VehicleEmissionsInput",
    "FACTOR_NAMES",
    "FactorScore",
    "MatchFactors",
    "MatchScoreResult",
    "MatchWeights",
    "ForecastPoint",
    "RegressionResult",
    "SmoothingResult",
    "TrendParameters",
    "AbatementCostResult",
    "EcoEfficiencyResult",
    "IRRResult",
    "ExchangeImpactResult",
    "MatchResult",
    "NeedListing",
    "WasteListing",
]
