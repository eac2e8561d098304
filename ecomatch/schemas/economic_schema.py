from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AbatementCostResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    cac_inr_per_kg: float = Field(..., description="INR per kg CO2e avoided; negative = net saving")
    emissions_reduced: float = Field(..., gt=0.0)
    cost_delta: float
    formula: str


class IRRResult(BaseModel):
    """Newton-Raphson IRR.  ``converged=False`` carries the last estimate."""

    model_config = ConfigDict(frozen=True)

    irr: Optional[float] = Field(..., description="Rate as a fraction (0.1 = 10%)")
    irr_percent: Optional[float]
    converged: bool
    iterations: int
    formula: str


class EcoEfficiencyResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    eco_efficiency: float = Field(..., description="INR of product value per kg CO2")
    interpretation: str
    formula: str
