from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

FACTOR_NAMES = (
    "material_compatibility",
    "quantity_fit",
    "price_compatibility",
    "distance_score",
    "reliability_score",
)


class MatchFactors(BaseModel):
    """Five sub-scores on a 0-100 scale.

    The range is enforced by ``weighted_match_score`` so that the error can
    name the offending factor.
    """

    model_config = ConfigDict(frozen=True)

    material_compatibility: float = Field(..., description="Category / sub-type fit")
    quantity_fit: float = Field(..., description="Listed quantity vs required range")
    price_compatibility: float = Field(..., description="Listed price vs buyer budget")
    distance_score: float = Field(..., description="Proximity vs max acceptable distance")
    reliability_score: float = Field(..., description="Trading history of both parties")


class MatchWeights(BaseModel):
    """Optional weight overrides; unset weights take the defaults.

    The resolved five must sum to 1.0 (±0.01).
    """

    model_config = ConfigDict(frozen=True)

    material_compatibility: Optional[float] = Field(default=None, ge=0.0)
    quantity_fit: Optional[float] = Field(default=None, ge=0.0)
    price_compatibility: Optional[float] = Field(default=None, ge=0.0)
    distance_score: Optional[float] = Field(default=None, ge=0.0)
    reliability_score: Optional[float] = Field(default=None, ge=0.0)


class MatchScoreResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: float = Field(..., ge=0.0, le=100.0, description="Weighted composite, 1 d.p.")
    weighted_factors: Dict[str, float]
    weights: Dict[str, float] = Field(..., description="Resolved weights actually applied")
    formula: str


class FactorScore(BaseModel):
    """A single 0-100 sub-score with its audit formula."""

    model_config = ConfigDict(frozen=True)

    score: float = Field(..., ge=0.0, le=100.0)
    formula: str
