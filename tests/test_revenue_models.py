from __future__ import annotations

import pytest

from forecast_app.models.common import ModelType
from forecast_app.models.revenue import (
    HardwareSaasInputs,
    MarketplaceInputs,
    PayPerVisitService,
    PriceTier,
    PropertyPlayInputs,
    SaasInputs,
    StraightSalesInputs,
    SubscriptionService,
    YearlyGrowthRate,
)
from forecast_app.services.revenue_models import (
    ActivationState,
    ModelContext,
    has_formula,
    hardware_saas_revenue,
    marketplace_revenue,
    property_expenses,
    property_play_revenue,
    saas_revenue,
    straight_sales_revenue,
)


def _context(months: int, ramp: float = 1.0, year: int = 2025, month: int = 1, subscribers: float = 0.0) -> ModelContext:
    return ModelContext(
        year=year,
        month=month,
        months_since_activation=months,
        ramp_up_factor=ramp,
        state=ActivationState(subscribers=subscribers),
    )


def test_saas_growth_is_capped_per_month():
    inputs = SaasInputs(
        monthly_price_tiers=[PriceTier(name="Pro", price=100)],
        monthly_new_user_acquisition=10,
        growth_rates_by_year=[YearlyGrowthRate(year=2025, monthly_growth_rate=50)],
    )
    output = saas_revenue(inputs, _context(months=1))

    assert output.customers == pytest.approx(12)
    assert output.revenue == pytest.approx(1200)


def test_saas_applies_churn_ramp_and_upsell():
    inputs = SaasInputs(
        monthly_price_tiers=[PriceTier(name="Basic", price=50), PriceTier(name="Pro", price=150)],
        monthly_new_user_acquisition=10,
        user_churn_rate=10,
        upsell_expansion_revenue=10,
    )
    output = saas_revenue(inputs, _context(months=2, ramp=0.5))

    assert output.customers == pytest.approx(20 * 0.81 * 0.5)
    assert output.revenue == pytest.approx(20 * 0.81 * 0.5 * 100 * 1.1)


def test_saas_without_price_tiers_earns_nothing():
    inputs = SaasInputs(monthly_new_user_acquisition=100)
    assert saas_revenue(inputs, _context(months=6)).revenue == 0


def test_hardware_updates_subscriber_state():
    inputs = HardwareSaasInputs(
        hardware_unit_cost=150,
        hardware_sale_price=200,
        monthly_hardware_units_sold=10,
        hardware_to_saas_conversion=50,
        saas_churn_rate=10,
        monthly_saas_price=20,
    )
    context = _context(months=0, subscribers=100)
    output = hardware_saas_revenue(inputs, context)

    assert context.state.subscribers == pytest.approx(95)
    assert output.customers == pytest.approx(95)
    assert output.revenue == pytest.approx(10 * 50 + 95 * 20)


def test_hardware_growth_is_capped():
    inputs = HardwareSaasInputs(hardware_sale_price=60, hardware_unit_cost=10, monthly_hardware_units_sold=10, hardware_growth_rate=40)
    output = hardware_saas_revenue(inputs, _context(months=1))

    assert output.revenue == pytest.approx(10 * 1.15 * 50)


def test_straight_sales_caps_monthly_growth_and_applies_seasonality():
    seasonality = [1, 1, 1.2, 1, 1, 1, 1, 1, 1, 1, 1, 1]
    inputs = StraightSalesInputs(
        unit_price=50,
        units_sold_per_month=100,
        growth_rate=60,
        channel_fees=10,
        seasonality_factor=seasonality,
    )
    output = straight_sales_revenue(inputs, _context(months=1, month=3))

    assert output.customers == pytest.approx(100 * 1.02 * 1.2)
    assert output.revenue == pytest.approx(100 * 1.02 * 1.2 * 50 * 0.9)


def test_straight_sales_zero_seasonality_means_neutral():
    inputs = StraightSalesInputs(unit_price=10, units_sold_per_month=10, seasonality_factor=[0] * 12)
    assert straight_sales_revenue(inputs, _context(months=0, month=7)).revenue == pytest.approx(100)


def test_marketplace_growth_is_uncapped():
    inputs = MarketplaceInputs(gmv_per_month=1000, take_rate=10, gmv_growth_rate=50)
    output = marketplace_revenue(inputs, _context(months=2))

    assert output.revenue == pytest.approx(225)
    assert output.customers == pytest.approx(22.5)


def _property_inputs(**overrides) -> PropertyPlayInputs:
    values = dict(
        property_purchase_price=400000,
        down_payment_percentage=20,
        mortgage_interest_rate=6,
        mortgage_term_years=1,
        monthly_rent_income=2000,
        rent_growth_rate=5,
        vacancy_rate=10,
        subscription_services=[SubscriptionService(name="Gym", monthly_price=40, expected_tenants=3)],
        pay_per_visit_services=[PayPerVisitService(name="Repairs", price_per_visit=100, visits_per_month=2, growth_rate=10)],
        property_management_fee_percentage=10,
    )
    values.update(overrides)
    return PropertyPlayInputs(**values)


def test_property_revenue_grows_yearly():
    inputs = _property_inputs()
    first_year = property_play_revenue(inputs, _context(months=11))
    second_year = property_play_revenue(inputs, _context(months=12))

    assert first_year.revenue == pytest.approx(2000 * 0.9 + 120 + 200)
    assert second_year.revenue == pytest.approx(2000 * 1.05 * 0.9 + 120 + 220)
    assert first_year.customers == pytest.approx(0.9)


def test_property_expenses_stop_after_loan_terms():
    inputs = _property_inputs()
    during = property_expenses(inputs, _context(months=11))
    after = property_expenses(inputs, _context(months=12))

    assert during.mortgage > 0
    assert after.mortgage == 0
    assert after.renovation_loan == 0
    assert after.management_fee == pytest.approx(2000 * 1.05 * 0.10)


def test_formula_registry():
    assert has_formula(ModelType.PROPERTY_PLAY)
    assert not has_formula(ModelType.FREEMIUM)
