from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .matching_schema import MatchFactors
from .transport_schema import GeoCoordinate


class WasteListing(BaseModel):
    """Material a company offers on the marketplace."""

    model_config = ConfigDict(frozen=True)

    listing_id: str
    company_id: str
    category: str = Field(..., description="Material category, e.g. 'plastic'")
    sub_type: Optional[str] = Field(default=None, description="e.g. 'HDPE'")
    quantity: float = Field(..., gt=0.0)
    unit: str = Field(default="kg", description="kg | ton | liter | cubic_meter")
    price_per_unit: float = Field(default=0.0, ge=0.0, description="INR; 0 = free to collect")
    location: GeoCoordinate
    seller_rating: Optional[float] = Field(
        default=None, ge=1.0, le=5.0, description="Average 1-5 rating from completed trades"
    )


class NeedListing(BaseModel):
    """Material a company wants to source."""

    model_config = ConfigDict(frozen=True)

    listing_id: str
    company_id: str
    category: str
    sub_types: List[str] = Field(default_factory=list, description="Preferred sub-types; empty = any")
    excluded_types: List[str] = Field(default_factory=list)
    quantity_min: float = Field(..., gt=0.0, description="kg")
    quantity_max: float = Field(..., gt=0.0, description="kg")
    budget_min: float = Field(default=0.0, ge=0.0)
    budget_max: float = Field(..., gt=0.0)
    max_distance_km: float = Field(default=200.0, gt=0.0)
    location: GeoCoordinate
    buyer_rating: Optional[float] = Field(
        default=None, ge=1.0, le=5.0, description="Average 1-5 rating from completed trades"
    )

    @model_validator(mode="after")
    def ranges_ordered(self) -> "NeedListing":
        if self.quantity_max < self.quantity_min:
            raise ValueError(
                f"quantity_max ({self.quantity_max}) must be >= quantity_min ({self.quantity_min})"
            )
        if self.budget_max < self.budget_min:
            raise ValueError(f"budget_max ({self.budget_max}) must be >= budget_min ({self.budget_min})")
        return self


class MatchResult(BaseModel):
    """One scored listing/need pair."""

    model_config = ConfigDict(frozen=True)

    waste_listing_id: str
    need_listing_id: str
    score: float = Field(..., ge=0.0, le=100.0)
    factors: MatchFactors
    distance_km: float = Field(..., description="Great-circle km between the two sites")
    formula: str


class ExchangeImpactResult(BaseModel):
    """Predicted savings of one exchange, net of haulage."""

    model_config = ConfigDict(frozen=True)

    material_type: str = Field(..., description="Row actually used (after fallback)")
    co2_saved_kg: float
    water_saved_liters: float
    energy_saved_kwh: float
    landfill_avoided_m3: float
    transport_emissions_kg: float
    net_co2_saved_kg: float = Field(..., description="Recycling credit minus transport emissions")
    formula: str
