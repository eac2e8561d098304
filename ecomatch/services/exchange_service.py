"""Exchange Service — scores waste listings against needs and prices the impact.

Sits on top of the calculation engines: pulls distances from the transport
engine, sub-scores and the composite from the matching engine and the
recycling credit from the circular-economy engine.  Listings are passed in
already loaded; nothing here touches storage.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Optional, Union

from ..config import get_settings
from ..constants import UNIT_TO_KG
from ..exceptions import UnknownFactorError
from ..factors import DEFAULT_FACTORS, FactorKey, FactorTables, key_of
from ..schemas.exchange_schema import (
    ExchangeImpactResult,
    MatchResult,
    NeedListing,
    WasteListing,
)
from ..schemas.matching_schema import MatchFactors, MatchWeights
from .circular_engine import recycling_substitution_credit
from .matching_engine import (
    distance_score,
    material_compatibility,
    price_score,
    quantity_fit,
    reliability_score,
    weighted_match_score,
)
from .numeric import fmt, require_non_negative, require_positive, round2
from .transport_engine import distance_between

logger = logging.getLogger(__name__)


def normalize_to_kg(value: float, unit: str) -> float:
    """Convert a listing quantity to kg (liquids at 1 kg/l, 1 m³ = 1000 kg)."""
    require_non_negative(value, "value")
    unit_key = key_of(unit)
    if unit_key not in UNIT_TO_KG:
        raise UnknownFactorError("unit", unit, UNIT_TO_KG.keys())
    return value * UNIT_TO_KG[unit_key]


def score_listing_against_need(
    listing: WasteListing,
    need: NeedListing,
    weights: Union[MatchWeights, Mapping[str, float], None] = None,
) -> MatchResult:
    """Run the five sub-scores for one pair and combine them."""
    distance = distance_between(listing.location, need.location)
    quantity_kg = normalize_to_kg(listing.quantity, listing.unit)

    factors = MatchFactors(
        material_compatibility=material_compatibility(
            listing.category,
            need.category,
            needed_sub_types=need.sub_types,
            listed_sub_type=listing.sub_type,
            excluded_types=need.excluded_types,
        ).score,
        quantity_fit=quantity_fit(quantity_kg, need.quantity_min, need.quantity_max).score,
        price_compatibility=price_score(listing.price_per_unit, need.budget_min, need.budget_max).score,
        distance_score=distance_score(distance.distance_km, need.max_distance_km).score,
        reliability_score=reliability_score(listing.seller_rating, need.buyer_rating).score,
    )
    composite = weighted_match_score(factors, weights)

    return MatchResult(
        waste_listing_id=listing.listing_id,
        need_listing_id=need.listing_id,
        score=composite.score,
        factors=factors,
        distance_km=distance.distance_km,
        formula=composite.formula,
    )


def rank_matches(
    listing: WasteListing,
    needs: Iterable[NeedListing],
    min_score: Optional[float] = None,
    limit: Optional[int] = None,
    weights: Union[MatchWeights, Mapping[str, float], None] = None,
) -> List[MatchResult]:
    """Best needs for *listing*, highest score first.

    Only needs in the same category from a different company are scored;
    anything under ``min_score`` is dropped and at most ``limit`` are kept
    (both default to the engine settings, 70 and 10).
    """
    settings = get_settings()
    if min_score is None:
        min_score = settings.min_match_score
    if limit is None:
        limit = settings.max_matches

    candidates = [
        need for need in needs
        if need.category == listing.category and need.company_id != listing.company_id
    ]
    scored = [score_listing_against_need(listing, need, weights) for need in candidates]
    accepted = [m for m in scored if m.score >= min_score]
    # stable sort keeps input order among ties
    accepted.sort(key=lambda m: m.score, reverse=True)

    logger.debug(
        "[Exchange] %s: %d candidates, %d above %s",
        listing.listing_id, len(candidates), len(accepted), fmt(min_score),
    )
    return accepted[:limit]


def exchange_impact(
    material_type: FactorKey,
    quantity_kg: float,
    distance_km: float,
    vehicle_type: FactorKey = "truck",
    *,
    factors: FactorTables = DEFAULT_FACTORS,
) -> ExchangeImpactResult:
    """Recycling credit of the exchanged material minus haulage emissions.

    Haulage is charged per tonne-km: ``distance × (Q / 1000) × EF``.
    """
    require_positive(quantity_kg, "quantity_kg")
    require_non_negative(distance_km, "distance_km")

    credit = recycling_substitution_credit(material_type, quantity_kg, factors=factors)
    ef = factors.transport_factor(vehicle_type)
    transport_kg = round2(distance_km * (quantity_kg / 1000) * ef)
    net = round2(credit.co2_credit_kg - transport_kg)

    return ExchangeImpactResult(
        material_type=credit.material_type,
        co2_saved_kg=credit.co2_credit_kg,
        water_saved_liters=credit.water_saved_liters,
        energy_saved_kwh=credit.energy_saved_kwh,
        landfill_avoided_m3=credit.landfill_avoided_m3,
        transport_emissions_kg=transport_kg,
        net_co2_saved_kg=net,
        formula=(
            f"Net = {fmt(credit.co2_credit_kg)} - ({fmt(distance_km)} km × "
            f"{fmt(round2(quantity_kg / 1000))} t × {fmt(ef)}) = {fmt(net)} kg CO2"
        ),
    )
