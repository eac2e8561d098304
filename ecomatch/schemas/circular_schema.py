from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


class MCIInput(BaseModel):
    """Material flows for the Material Circularity Indicator.

    Ranges are checked by the engine so the error names the offending field.
    """

    model_config = ConfigDict(frozen=True)

    virgin_material_kg: float = Field(..., description="Virgin feedstock used")
    total_material_kg: float = Field(..., description="All material used (virgin + secondary)")
    waste_generated_kg: float = Field(..., description="Unrecovered waste leaving the process")
    total_material_input_kg: float = Field(..., description="Total material entering the process")


class MCIResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    mci: float = Field(..., ge=0.0, le=1.0, description="0 = fully linear, 1 = fully circular")
    virgin_ratio: float
    waste_ratio: float
    interpretation: str
    formula: str


class RecyclingCreditResult(BaseModel):
    """Avoided burdens when recycled material substitutes virgin production."""

    model_config = ConfigDict(frozen=True)

    material_type: str = Field(..., description="Row actually used (after fallback)")
    co2_credit_kg: float
    water_saved_liters: float
    energy_saved_kwh: float
    landfill_avoided_m3: float
    material_factors: Dict[str, float]
    used_fallback: bool = False
    formula: str


class SymbiosisEfficiencyResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    ise: float = Field(..., ge=0.0, le=1.0)
    exchange_ratio: float
    distance_ratio: float
    interpretation: str
    formula: str
