from __future__ import annotations

from typing import List

from pydantic import Field

from .common import LenientModel


class TeamCostYear(LenientModel):
    year: int = Field(1, description="1-based forecast year the cost applies to")
    total_cost: float = 0.0


class GlobalCosts(LenientModel):
    initial_setup_cost: float = 0.0
    monthly_fixed_costs: float = 0.0
    team_costs_by_year: List[TeamCostYear] = Field(default_factory=list)
    hosting_infrastructure: float = 0.0
    marketing_budget: float = 0.0
    fulfillment_logistics: float = 0.0
    tax_rate: float = 0.0
    payment_processing_fees: float = 0.0

    def monthly_team_cost(self, forecast_year: int) -> float:
        entry = next((item for item in self.team_costs_by_year if item.year == forecast_year), None)
        if entry is None:
            return 0.0
        return entry.total_cost / 12

    def monthly_operating_costs(self) -> float:
        return self.monthly_fixed_costs + self.hosting_infrastructure + self.marketing_budget + self.fulfillment_logistics
