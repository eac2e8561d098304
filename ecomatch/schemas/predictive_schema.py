from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class TrendParameters(BaseModel):
    """Extra smoothing terms.

    ``beta`` alone selects Holt's linear trend; ``season_length`` selects
    multiplicative Holt-Winters (``beta`` / ``gamma`` default to 0.1).
    """

    model_config = ConfigDict(frozen=True)

    beta: Optional[float] = Field(default=None, gt=0.0, lt=1.0, description="Trend smoothing")
    gamma: Optional[float] = Field(default=None, gt=0.0, lt=1.0, description="Seasonal smoothing")
    season_length: Optional[int] = Field(default=None, ge=2, description="Periods per season")


class ForecastPoint(BaseModel):
    """One forecast period with its prediction band."""

    model_config = ConfigDict(frozen=True)

    period: int = Field(..., ge=1, description="Steps ahead of the last observation")
    predicted_value: float
    lower_bound: float
    upper_bound: float
    confidence_level: float = Field(..., gt=0.0, lt=1.0)


class SmoothingResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    method: Literal["simple", "holt", "holt_winters", "none"]
    alpha: Optional[float] = None
    beta: Optional[float] = None
    gamma: Optional[float] = None
    season_length: Optional[int] = None
    smoothed: List[float] = Field(default_factory=list, description="One-step-ahead fitted values")
    forecast: List[ForecastPoint] = Field(default_factory=list)
    last_forecast: Optional[float] = None
    mae: Optional[float] = None
    residual_std: Optional[float] = None
    formula: str = ""
    insufficient_data: bool = False
    message: Optional[str] = None

    @property
    def forecasts(self) -> List[float]:
        return [p.predicted_value for p in self.forecast]


class ConfidenceIntervalResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    mean: float
    std_dev: float
    z_score: float
    margin_of_error: float
    lower: float
    upper: float
    formula: str

    @property
    def bounds(self) -> Tuple[float, float]:
        return (self.lower, self.upper)


class SampleConfidenceResult(BaseModel):
    """95% interval of the mean of an observed sample."""

    model_config = ConfigDict(frozen=True)

    n: int
    mean: Optional[float] = None
    std_dev: Optional[float] = None
    z_score: Optional[float] = None
    margin_of_error: Optional[float] = None
    lower: Optional[float] = None
    upper: Optional[float] = None
    confidence_level: str = "95%"
    is_reliable: bool = False
    formula: str = ""
    insufficient_data: bool = False
    message: Optional[str] = None


class RegressionResult(BaseModel):
    """Ordinary least squares ``ŷ = intercept + slope × x``."""

    model_config = ConfigDict(frozen=True)

    n: int
    slope: Optional[float] = None
    intercept: Optional[float] = None
    r_squared: Optional[float] = None
    predictions: List[float] = Field(default_factory=list)
    residuals: List[float] = Field(default_factory=list)
    trend_direction: Optional[Literal["improving", "worsening", "stable"]] = None
    is_reliable: bool = False
    formula: str = ""
    insufficient_data: bool = False
    message: Optional[str] = None
