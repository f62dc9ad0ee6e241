from __future__ import annotations

from .models.common import Assumptions, ModelActivation, ModelType
from .models.configuration import BusinessConfiguration
from .models.costs import GlobalCosts, TeamCostYear
from .models.revenue import (
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


def _global_costs() -> GlobalCosts:
    return GlobalCosts(
        initial_setup_cost=25000,
        monthly_fixed_costs=3000,
        team_costs_by_year=[
            TeamCostYear(year=1, total_cost=120000),
            TeamCostYear(year=2, total_cost=180000),
            TeamCostYear(year=3, total_cost=250000),
            TeamCostYear(year=4, total_cost=300000),
            TeamCostYear(year=5, total_cost=350000),
        ],
        hosting_infrastructure=500,
        marketing_budget=2000,
        fulfillment_logistics=800,
        tax_rate=0.2,
        payment_processing_fees=0.029,
    )


def build_sample_configuration() -> BusinessConfiguration:
    saas = SaasInputs(
        monthly_price_tiers=[PriceTier(name="Basic", price=29.99), PriceTier(name="Pro", price=99.99)],
        free_trial_conversion_rate=15,
        monthly_new_user_acquisition=100,
        user_churn_rate=5,
        cac=75,
        growth_rates_by_year=[
            YearlyGrowthRate(year=2025, monthly_growth_rate=3),
            YearlyGrowthRate(year=2026, monthly_growth_rate=4),
            YearlyGrowthRate(year=2027, monthly_growth_rate=2),
        ],
        upsell_expansion_revenue=10,
    )
    hardware = HardwareSaasInputs(
        hardware_unit_cost=150,
        hardware_sale_price=199,
        monthly_hardware_units_sold=50,
        hardware_growth_rate=3,
        hardware_to_saas_conversion=80,
        saas_churn_rate=2,
        monthly_saas_price=19.99,
        hardware_margin=25,
        support_costs=500,
    )
    sales = StraightSalesInputs(
        unit_price=99.99,
        cogs=45,
        units_sold_per_month=200,
        growth_rate=3,
        channel_fees=5,
        seasonality_factor=[1, 1, 1.2, 1.1, 1, 0.9, 0.8, 0.8, 1, 1.1, 1.3, 1.4],
    )
    marketplace = MarketplaceInputs(gmv_per_month=50000, take_rate=8, gmv_growth_rate=5, support_costs_percent=2)

    return BusinessConfiguration(
        id="sample-multi-model",
        name="Connected Fitness",
        description="Subscription software that later adds hardware and a marketplace",
        sector="Technology",
        launch_year=2025,
        model_activations=[
            ModelActivation(model_type=ModelType.SAAS, start_year=2025, ramp_up_months=6),
            ModelActivation(model_type=ModelType.STRAIGHT_SALES, start_year=2025, ramp_up_months=3),
            ModelActivation(model_type=ModelType.HARDWARE_SAAS, start_year=2026, ramp_up_months=6),
            ModelActivation(model_type=ModelType.MARKETPLACE, start_year=2027, end_year=2028, ramp_up_months=12),
        ],
        model_inputs={
            ModelType.SAAS: saas,
            ModelType.HARDWARE_SAAS: hardware,
            ModelType.STRAIGHT_SALES: sales,
            ModelType.MARKETPLACE: marketplace,
        },
        global_costs=_global_costs(),
        assumptions=Assumptions(inflation_rate=2.5, discount_rate=10, forecast_years=5),
    )


def build_property_configuration() -> BusinessConfiguration:
    property_play = PropertyPlayInputs(
        property_purchase_price=500000,
        down_payment_percentage=25,
        mortgage_interest_rate=4.5,
        mortgage_term_years=25,
        monthly_rent_income=3500,
        rent_growth_rate=3,
        vacancy_rate=5,
        subscription_services=[
            SubscriptionService(name="Smart Home Package", monthly_price=50, expected_tenants=2),
            SubscriptionService(name="Cleaning Service", monthly_price=80, expected_tenants=1),
        ],
        pay_per_visit_services=[
            PayPerVisitService(name="Maintenance Calls", price_per_visit=120, visits_per_month=3, growth_rate=2),
        ],
        initial_renovation_cost=50000,
        renovation_financing_rate=5,
        renovation_spread_years=5,
        ongoing_maintenance_percentage=1.5,
        property_tax_percentage=1.2,
        insurance_cost_annual=2400,
        property_management_fee_percentage=8,
        property_appreciation_rate=4,
    )
    return BusinessConfiguration(
        id="sample-property",
        name="Serviced Rental",
        sector="Property/Real Estate",
        launch_year=2025,
        model_activations=[ModelActivation(model_type=ModelType.PROPERTY_PLAY, start_year=2025, ramp_up_months=0)],
        model_inputs={ModelType.PROPERTY_PLAY: property_play},
        global_costs=GlobalCosts(initial_setup_cost=125000),
        assumptions=Assumptions(forecast_years=5),
    )
