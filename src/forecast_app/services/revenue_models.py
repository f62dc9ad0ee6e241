"""Per-model revenue formulas.

Every function takes the model's inputs and a :class:`ModelContext` for one
month and returns a :class:`ModelOutput`. The context's ``ramp_up_factor``
scales each model's raw output; carry-over state lives on the context and is
owned by the calling forecast run.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict

from ..models.common import ModelType
from ..models.revenue import (
    HardwareSaasInputs,
    MarketplaceInputs,
    PropertyPlayInputs,
    SaasInputs,
    StraightSalesInputs,
)
from .amortization import monthly_payment
from .growth import HARDWARE_GROWTH_CAP, SAAS_GROWTH_CAP, STRAIGHT_SALES_GROWTH_CAP, churn_adjust, compound


@dataclass
class ActivationState:
    subscribers: float = 0.0


@dataclass
class ModelContext:
    year: int
    month: int
    months_since_activation: int
    ramp_up_factor: float
    state: ActivationState = field(default_factory=ActivationState)

    @property
    def years_since_activation(self) -> int:
        return self.months_since_activation // 12


@dataclass(frozen=True)
class ModelOutput:
    revenue: float = 0.0
    customers: float = 0.0


@dataclass(frozen=True)
class PropertyExpenses:
    mortgage: float = 0.0
    property_tax: float = 0.0
    insurance: float = 0.0
    maintenance: float = 0.0
    management_fee: float = 0.0
    renovation_loan: float = 0.0

    @property
    def total(self) -> float:
        return (
            self.mortgage
            + self.property_tax
            + self.insurance
            + self.maintenance
            + self.management_fee
            + self.renovation_loan
        )


def saas_revenue(inputs: SaasInputs, context: ModelContext) -> ModelOutput:
    months = context.months_since_activation
    growth_rate = inputs.growth_rate_for(context.year)
    base_users = inputs.monthly_new_user_acquisition * months * compound(1.0, growth_rate, months, cap=SAAS_GROWTH_CAP)
    users = churn_adjust(base_users, inputs.user_churn_rate, months) * context.ramp_up_factor
    revenue = users * inputs.average_tier_price() * (1 + inputs.upsell_expansion_revenue / 100)
    return ModelOutput(revenue=revenue, customers=users)


def hardware_saas_revenue(inputs: HardwareSaasInputs, context: ModelContext) -> ModelOutput:
    months = context.months_since_activation
    units = compound(inputs.monthly_hardware_units_sold, inputs.hardware_growth_rate, months, cap=HARDWARE_GROWTH_CAP)
    units *= context.ramp_up_factor
    hardware_net = units * (inputs.hardware_sale_price - inputs.hardware_unit_cost)

    previous = context.state.subscribers
    conversions = units * (inputs.hardware_to_saas_conversion / 100)
    churned = previous * (inputs.saas_churn_rate / 100)
    context.state.subscribers = max(0.0, previous + conversions - churned)

    saas = context.state.subscribers * inputs.monthly_saas_price
    return ModelOutput(revenue=hardware_net + saas, customers=context.state.subscribers)


def straight_sales_revenue(inputs: StraightSalesInputs, context: ModelContext) -> ModelOutput:
    monthly_growth = min(inputs.growth_rate / 12, STRAIGHT_SALES_GROWTH_CAP)
    units = compound(inputs.units_sold_per_month, monthly_growth, context.months_since_activation)
    units *= inputs.seasonal_factor(context.month) * context.ramp_up_factor
    revenue = units * inputs.unit_price * (1 - inputs.channel_fees / 100)
    return ModelOutput(revenue=revenue, customers=units)


def marketplace_revenue(inputs: MarketplaceInputs, context: ModelContext) -> ModelOutput:
    gmv = compound(inputs.gmv_per_month, inputs.gmv_growth_rate, context.months_since_activation)
    gmv *= context.ramp_up_factor
    return ModelOutput(revenue=gmv * (inputs.take_rate / 100), customers=gmv / 100)


def _current_rent(inputs: PropertyPlayInputs, years: int) -> float:
    return compound(inputs.monthly_rent_income, inputs.rent_growth_rate, years)


def property_play_revenue(inputs: PropertyPlayInputs, context: ModelContext) -> ModelOutput:
    # Gross income only; expenses go through property_expenses into total costs.
    years = context.years_since_activation
    rent_income = _current_rent(inputs, years) * (1 - inputs.vacancy_rate / 100)
    subscription_income = sum(service.monthly_price * service.expected_tenants for service in inputs.subscription_services)
    visit_income = sum(
        compound(service.price_per_visit * service.visits_per_month, service.growth_rate, years)
        for service in inputs.pay_per_visit_services
    )
    revenue = (rent_income + subscription_income + visit_income) * context.ramp_up_factor
    occupancy = max(0.0, 1 - inputs.vacancy_rate / 100) * context.ramp_up_factor
    return ModelOutput(revenue=revenue, customers=occupancy)


def property_expenses(inputs: PropertyPlayInputs, context: ModelContext) -> PropertyExpenses:
    months = context.months_since_activation
    price = inputs.property_purchase_price

    mortgage = 0.0
    if months < inputs.mortgage_term_years * 12:
        mortgage = monthly_payment(inputs.mortgage_principal(), inputs.mortgage_interest_rate, inputs.mortgage_term_years)

    renovation = 0.0
    if months < inputs.renovation_spread_years * 12:
        renovation = monthly_payment(inputs.initial_renovation_cost, inputs.renovation_financing_rate, inputs.renovation_spread_years)

    return PropertyExpenses(
        mortgage=mortgage,
        property_tax=price * inputs.property_tax_percentage / 100 / 12,
        insurance=inputs.insurance_cost_annual / 12,
        maintenance=price * inputs.ongoing_maintenance_percentage / 100 / 12,
        management_fee=_current_rent(inputs, context.years_since_activation) * inputs.property_management_fee_percentage / 100,
        renovation_loan=renovation,
    )


RevenueFunction = Callable[..., ModelOutput]

REVENUE_FUNCTIONS: Dict[ModelType, RevenueFunction] = {
    ModelType.SAAS: saas_revenue,
    ModelType.HARDWARE_SAAS: hardware_saas_revenue,
    ModelType.STRAIGHT_SALES: straight_sales_revenue,
    ModelType.MARKETPLACE: marketplace_revenue,
    ModelType.PROPERTY_PLAY: property_play_revenue,
}


def has_formula(model_type: ModelType) -> bool:
    return model_type in REVENUE_FUNCTIONS
