from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .common import ModelType


class ResultModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True, protected_namespaces=())


class ForecastPeriod(ResultModel):
    year: int
    month: int
    period_start: Optional[date] = Field(default=None, description="None when the month falls outside the representable calendar")
    revenue_by_model: Dict[ModelType, float] = Field(default_factory=dict)
    total_revenue: float
    total_costs: float
    team_cost: float = 0.0
    property_expenses: float = 0.0
    gross_margin: float
    net_profit: float
    cumulative_cash_flow: float
    customer_base: Dict[ModelType, float] = Field(default_factory=dict)
    break_even_reached: bool


class AnnualSummary(ResultModel):
    year: int
    total_revenue: float
    total_costs: float
    gross_margin: float
    net_profit: float
    revenue_by_model: Dict[ModelType, float] = Field(default_factory=dict)
    ending_customers: float
    ending_cumulative_cash_flow: float


class ForecastSeries(ResultModel):
    launch_year: int
    periods: List[ForecastPeriod]
    annual: List[AnnualSummary]

    def __len__(self) -> int:
        return len(self.periods)

    def final_period(self) -> ForecastPeriod:
        return self.periods[-1]
