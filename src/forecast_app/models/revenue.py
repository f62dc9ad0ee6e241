from __future__ import annotations

from typing import Annotated, Any, List, Literal, Union

from pydantic import Field, field_validator

from .common import LenientModel, as_number


class PriceTier(LenientModel):
    name: str = ""
    price: float = 0.0


class YearlyGrowthRate(LenientModel):
    year: int = 0
    monthly_growth_rate: float = 0.0


class SaasInputs(LenientModel):
    model_type: Literal["SAAS"] = "SAAS"
    monthly_price_tiers: List[PriceTier] = Field(default_factory=list)
    free_trial_conversion_rate: float = 0.0
    monthly_new_user_acquisition: float = 0.0
    user_churn_rate: float = 0.0
    cac: float = 0.0
    growth_rates_by_year: List[YearlyGrowthRate] = Field(default_factory=list)
    upsell_expansion_revenue: float = 0.0

    def average_tier_price(self) -> float:
        if not self.monthly_price_tiers:
            return 0.0
        return sum(tier.price for tier in self.monthly_price_tiers) / len(self.monthly_price_tiers)

    def growth_rate_for(self, year: int) -> float:
        entry = next((item for item in self.growth_rates_by_year if item.year == year), None)
        return entry.monthly_growth_rate if entry is not None else 0.0


class HardwareSaasInputs(LenientModel):
    model_type: Literal["Hardware + SAAS"] = "Hardware + SAAS"
    hardware_unit_cost: float = 0.0
    hardware_sale_price: float = 0.0
    monthly_hardware_units_sold: float = 0.0
    hardware_growth_rate: float = 0.0
    hardware_to_saas_conversion: float = 0.0
    saas_churn_rate: float = 0.0
    monthly_saas_price: float = 0.0
    hardware_margin: float = 0.0
    support_costs: float = 0.0
    cac: float = 0.0


class StraightSalesInputs(LenientModel):
    model_type: Literal["Straight Sales"] = "Straight Sales"
    unit_price: float = 0.0
    cogs: float = 0.0
    units_sold_per_month: float = 0.0
    growth_rate: float = Field(0.0, description="Annual growth rate in percent")
    channel_fees: float = 0.0
    seasonality_factor: List[float] = Field(default_factory=lambda: [1.0] * 12)

    @field_validator("seasonality_factor", mode="before")
    @classmethod
    def _coerce_factors(cls, value: Any) -> List[float]:
        if not isinstance(value, (list, tuple)):
            return [1.0] * 12
        return [as_number(item, 1.0) for item in value]

    def seasonal_factor(self, month: int) -> float:
        if month - 1 < len(self.seasonality_factor):
            return self.seasonality_factor[month - 1] or 1.0
        return 1.0


class MarketplaceInputs(LenientModel):
    model_type: Literal["Marketplace"] = "Marketplace"
    gmv_per_month: float = 0.0
    take_rate: float = 0.0
    gmv_growth_rate: float = 0.0
    support_costs_percent: float = 0.0


class SubscriptionService(LenientModel):
    name: str = ""
    monthly_price: float = 0.0
    expected_tenants: float = 0.0


class PayPerVisitService(LenientModel):
    name: str = ""
    price_per_visit: float = 0.0
    visits_per_month: float = 0.0
    growth_rate: float = Field(0.0, description="Annual growth rate in percent")


class PropertyPlayInputs(LenientModel):
    model_type: Literal["Property Play"] = "Property Play"
    property_purchase_price: float = 0.0
    down_payment_percentage: float = 0.0
    mortgage_interest_rate: float = 0.0
    mortgage_term_years: float = 0.0
    monthly_rent_income: float = 0.0
    rent_growth_rate: float = 0.0
    vacancy_rate: float = 0.0
    subscription_services: List[SubscriptionService] = Field(default_factory=list)
    pay_per_visit_services: List[PayPerVisitService] = Field(default_factory=list)
    initial_renovation_cost: float = 0.0
    renovation_financing_rate: float = 0.0
    renovation_spread_years: float = 0.0
    ongoing_maintenance_percentage: float = 0.0
    property_tax_percentage: float = 0.0
    insurance_cost_annual: float = 0.0
    property_management_fee_percentage: float = 0.0
    property_appreciation_rate: float = 0.0

    def mortgage_principal(self) -> float:
        return self.property_purchase_price * (1 - self.down_payment_percentage / 100)


ModelInputs = Annotated[
    Union[SaasInputs, HardwareSaasInputs, StraightSalesInputs, MarketplaceInputs, PropertyPlayInputs],
    Field(discriminator="model_type"),
]
