from __future__ import annotations

from typing import Dict, Optional

from pydantic import Field

from .common import ModelType
from .results import ResultModel


class BreakEvenPoint(ResultModel):
    index: int
    year: int
    month: int

    @property
    def label(self) -> str:
        return f"Year {self.year}, Month {self.month}"


class PropertyKpis(ResultModel):
    net_operating_income_margin: float
    cash_on_cash_return: float
    dscr: float
    property_value: float
    appreciation_rate: float


class ForecastKpis(ResultModel):
    total_revenue: float
    average_monthly_revenue: float
    gross_margin_percent: float
    gross_margin_rating: str
    break_even: Optional[BreakEvenPoint] = None
    payback_years: Optional[int] = None
    monthly_recurring_revenue: float
    net_burn_per_month: float
    burn_rating: str
    peak_annual_revenue: float
    setup_cost: float
    revenue_share_by_model: Dict[ModelType, float] = Field(default_factory=dict)
    property: Optional[PropertyKpis] = None
