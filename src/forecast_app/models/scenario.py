from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from .common import LenientModel
from .results import ResultModel


class SensitivityParams(LenientModel):
    growth_rate: float = 0.0
    churn_rate: float = 0.0
    cac: float = 0.0
    upfront_costs: float = 0.0
    pricing_multiplier: float = 0.0

    @classmethod
    def from_variation(cls, variation: float) -> "SensitivityParams":
        return cls(
            growth_rate=variation * 20,
            churn_rate=variation * 10,
            cac=variation * 15,
            upfront_costs=variation * 30,
            pricing_multiplier=variation * 20,
        )

    @staticmethod
    def factor(delta_percent: float) -> float:
        return 1 + delta_percent / 100


class Scenario(LenientModel):
    name: str
    params: SensitivityParams = Field(default_factory=SensitivityParams)
    color: str = "#3B82F6"
    label: Optional[str] = None


DEFAULT_SCENARIOS: List[Scenario] = [
    Scenario(name="Base Case", params=SensitivityParams(), color="#3B82F6"),
    Scenario(
        name="Aggressive Growth",
        params=SensitivityParams(growth_rate=25, churn_rate=-10, cac=15, upfront_costs=50, pricing_multiplier=20),
        color="#10B981",
    ),
    Scenario(
        name="Conservative",
        params=SensitivityParams(growth_rate=-15, churn_rate=10, cac=-5, upfront_costs=-20, pricing_multiplier=-10),
        color="#F59E0B",
    ),
]


class AdjustedParams(ResultModel):
    growth_rate: float
    churn_rate: float
    cac: float
    price: float
    upfront_costs: float


class AnnualProjection(ResultModel):
    year: int
    users: float
    monthly_revenue: float
    annual_revenue: float
    total_revenue: float
    total_costs: float
    profit: float
    ltv: float
    cac_payback_months: float


class AdjustedModel(ResultModel):
    params: AdjustedParams
    projections: List[AnnualProjection]
    source: str = Field("forecast", description="'forecast' when derived from a forecast series, 'simplified' otherwise")

    def final_projection(self) -> Optional[AnnualProjection]:
        return self.projections[-1] if self.projections else None


class ScenarioOutcome(ResultModel):
    name: str
    color: str
    label: Optional[str] = None
    params: SensitivityParams
    final_total_revenue: float
    final_profit: float
    final_users: float
    model: AdjustedModel


class CacLtvPoint(ResultModel):
    year: int
    cac: float
    ltv: float
    ratio: float
    payback_months: float
    healthy: bool
    payback_ok: bool


class SweepPoint(ResultModel):
    value: float
    is_base: bool
    final_total_revenue: float
    final_profit: float
    final_users: float


class MonteCarloSample(ResultModel):
    run: int
    final_revenue: float
    final_profit: float
    final_users: float
    ltv: float
    params: SensitivityParams


class HistogramBucket(ResultModel):
    lower: float
    upper: float
    count: int


class MonteCarloSummary(ResultModel):
    runs: int
    mean_revenue: float
    mean_profit: float
    profitable_runs: int
    profitability_rate: float
    risk_level: str
    histogram: List[HistogramBucket]
