from pydantic import BaseModel, ConfigDict, Field


class GeoCoordinate(BaseModel):
    """A WGS84 point.  Range checks happen in the distance formula."""

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


class DistanceResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    distance_km: float = Field(..., ge=0.0)
    formula: str


class VehicleEmissionsInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    distance_km: float
    vehicle_type: str = Field(default="truck")
    load_factor: float = Field(default=1.0, description="Capacity utilisation, 0.1–1.5")


class VehicleEmissionsResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    co2_kg: float
    distance_km: float
    emission_factor: float
    load_factor: float
    vehicle_type: str
    formula: str


class RouteSavingsResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    savings_co2_kg: float = Field(..., description="Annual kg CO2 avoided")
    distance_saved_km: float
    percentage_saved: float
    vehicle_type: str = Field(..., description="Row actually used (after fallback)")
    emission_factor: float
    formula: str


class TransportEstimate(BaseModel):
    model_config = ConfigDict(frozen=True)

    great_circle_km: float
    distance_km: float = Field(..., description="Road distance = great circle × circuity factor")
    circuity_factor: float
    co2_kg: float
    estimated_cost_inr: float
    cost_per_km: float
    formula: str
