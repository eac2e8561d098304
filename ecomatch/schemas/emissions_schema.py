from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..constants import (
    LANDFILL_DOC,
    LANDFILL_DOC_FRACTION,
    LANDFILL_F_CH4,
    LANDFILL_MCF,
    LANDFILL_OXIDATION,
    LANDFILL_RECOVERY,
)


class FuelLiters(BaseModel):
    """Liquid fuel burned on site, in liters."""

    model_config = ConfigDict(frozen=True)

    diesel: float = Field(default=0.0, ge=0.0)
    petrol: float = Field(default=0.0, ge=0.0)
    lpg: float = Field(default=0.0, ge=0.0)


class FuelKg(BaseModel):
    """Gaseous / solid fuel burned on site, in kg."""

    model_config = ConfigDict(frozen=True)

    natural_gas: float = Field(default=0.0, ge=0.0)
    coal: float = Field(default=0.0, ge=0.0)


class EmissionsInput(BaseModel):
    """Raw facility energy and waste inputs for one reporting period.

    Every quantity is non-negative; anything not reported defaults to 0.
    """

    model_config = ConfigDict(frozen=True)

    electricity_kwh: float = Field(default=0.0, ge=0.0, description="Purchased electricity")
    grid_type: Optional[str] = Field(default=None, description="Supplier grid mix key; None = configured default")
    fuel_liters: FuelLiters = Field(default_factory=FuelLiters)
    fuel_kg: FuelKg = Field(default_factory=FuelKg)
    water_liters: float = Field(default=0.0, ge=0.0, description="Supplied water")
    waste_kg: float = Field(default=0.0, ge=0.0, description="Waste sent to landfill")
    organic_fraction: float = Field(
        default=1.0,
        gt=0.0,
        le=1.0,
        description="Degradable share of the landfilled waste",
    )


class EmissionsResult(BaseModel):
    """Scope 1/2/3 footprint.  ``total_co2e`` is the rounded scope sum."""

    model_config = ConfigDict(frozen=True)

    scope1: float = Field(..., ge=0.0, description="Direct fuel combustion, kg CO2e")
    scope2: float = Field(..., ge=0.0, description="Purchased electricity, kg CO2e")
    scope3: float = Field(..., ge=0.0, description="Water supply + landfilled waste, kg CO2e")
    total_co2e: float = Field(..., ge=0.0)
    breakdown: Dict[str, float] = Field(default_factory=dict)
    formulas: List[str] = Field(default_factory=list)


class ElectricityEmissionsResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    co2_kg: float
    kwh: float
    grid_factor: float
    grid_type: str
    formula: str


class FuelEmissionsResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    co2_kg: float
    fuel_type: str
    quantity: float
    unit: str
    factor: float
    formula: str


class TotalCarbonResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    scope1: float
    scope2: float
    scope3: float
    total_co2e: float
    formula: str


class CarbonIntensityResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    carbon_intensity: float
    unit: str = Field(..., description="e.g. kg_CO2/revenue_lakhs")
    formula: str


class LandfillParameters(BaseModel):
    """IPCC first-order-decay constants for a managed anaerobic landfill."""

    model_config = ConfigDict(frozen=True)

    doc: float = Field(default=LANDFILL_DOC, gt=0.0, le=1.0, description="Degradable organic carbon")
    doc_fraction: float = Field(default=LANDFILL_DOC_FRACTION, gt=0.0, le=1.0, description="DOCf")
    f_ch4: float = Field(default=LANDFILL_F_CH4, gt=0.0, le=1.0, description="CH4 share of landfill gas")
    mcf: float = Field(default=LANDFILL_MCF, gt=0.0, le=1.0, description="Methane correction factor")
    recovery: float = Field(default=LANDFILL_RECOVERY, ge=0.0, le=1.0, description="Gas captured")
    oxidation: float = Field(default=LANDFILL_OXIDATION, ge=0.0, le=1.0, description="Oxidised in cover")


class LandfillMethaneResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    organic_waste_kg: float
    ch4_kg: float
    co2e_kg: float
    ch4_per_kg: float = Field(..., description="kg CH4 emitted per kg organic waste")
    parameters: LandfillParameters
    formula: str


class MethaneCo2eResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    co2e_kg: float
    gwp: int
    formula: str


class IncinerationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    co2_kg: float
    waste_type: str = Field(..., description="Row actually used (after fallback)")
    composition_factor: float
    energy_recovery: float
    formula: str
