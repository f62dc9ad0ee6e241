from __future__ import annotations

import pytest

from forecast_app.models.common import Assumptions, ModelActivation, ModelType
from forecast_app.models.configuration import BusinessConfiguration
from forecast_app.models.costs import GlobalCosts
from forecast_app.models.revenue import PriceTier, SaasInputs, StraightSalesInputs
from forecast_app.models.scenario import SensitivityParams
from forecast_app.sample_data import build_sample_configuration
from forecast_app.services.calculator import ForecastCalculator
from forecast_app.services.sensitivity import (
    SensitivityBaseline,
    adjusted_model,
    apply_delta,
    cac_ltv_analysis,
    compare_scenarios,
    perturb_configuration,
    rerun_with_delta,
    simplified_projection,
    sweep_parameter,
)


def _saas_configuration(setup_cost: float = 0, fixed_costs: float = 0) -> BusinessConfiguration:
    return BusinessConfiguration(
        launch_year=2025,
        model_activations=[ModelActivation(model_type=ModelType.SAAS, start_year=2025)],
        model_inputs={
            ModelType.SAAS: SaasInputs(
                monthly_price_tiers=[PriceTier(name="Standard", price=100)],
                monthly_new_user_acquisition=10,
            )
        },
        global_costs=GlobalCosts(initial_setup_cost=setup_cost, monthly_fixed_costs=fixed_costs),
        assumptions=Assumptions(forecast_years=1),
    )


def _straight_sales_configuration(forecast_years: int = 2) -> BusinessConfiguration:
    return BusinessConfiguration(
        launch_year=2025,
        model_activations=[ModelActivation(model_type=ModelType.STRAIGHT_SALES, start_year=2025)],
        model_inputs={ModelType.STRAIGHT_SALES: StraightSalesInputs(unit_price=20, units_sold_per_month=50)},
        assumptions=Assumptions(forecast_years=forecast_years),
    )


def test_zero_delta_keeps_forecast_totals():
    config = _saas_configuration()
    series = ForecastCalculator().run(config)
    model = apply_delta(series, config, SensitivityParams())
    final = model.final_projection()

    assert model.source == "forecast"
    assert len(model.projections) == 1
    assert final.total_revenue == pytest.approx(66000)
    assert final.total_costs == 0
    assert final.users == pytest.approx(110)
    assert final.monthly_revenue == pytest.approx(11000)


def test_pricing_and_cost_deltas_scale_forecast():
    config = _saas_configuration(setup_cost=1000, fixed_costs=100)
    series = ForecastCalculator().run(config)
    model = apply_delta(series, config, SensitivityParams(pricing_multiplier=10, upfront_costs=50))
    final = model.final_projection()

    assert final.total_revenue == pytest.approx(66000 * 1.1)
    assert final.total_costs == pytest.approx(1000 * 1.5 + 1200 * 1.5)
    assert final.profit == pytest.approx(final.total_revenue - final.total_costs)


def test_baseline_falls_back_to_defaults_without_saas():
    baseline = SensitivityBaseline.from_configuration(_straight_sales_configuration())

    assert baseline.growth_rate == 2
    assert baseline.churn_rate == 5
    assert baseline.cac == 50
    assert baseline.price == 29
    assert baseline.acquisition == 100
    assert baseline.upfront_costs == 0


def test_simplified_projection_unit_economics():
    model = simplified_projection(_straight_sales_configuration(forecast_years=3), SensitivityParams())

    assert model.source == "simplified"
    assert [projection.year for projection in model.projections] == [1, 2, 3]
    assert model.params.upfront_costs == 10000
    assert model.projections[0].ltv == pytest.approx(29 * 12 / 0.05)
    assert model.projections[0].cac_payback_months == pytest.approx(50 / 29)
    assert model.projections[1].total_revenue > model.projections[0].total_revenue


def test_simplified_projection_responds_to_deltas():
    config = _straight_sales_configuration()
    base = simplified_projection(config, SensitivityParams()).final_projection()
    faster = simplified_projection(config, SensitivityParams(growth_rate=25)).final_projection()
    pricier = simplified_projection(config, SensitivityParams(pricing_multiplier=10)).final_projection()

    assert faster.users > base.users
    assert pricier.total_revenue == pytest.approx(base.total_revenue * 1.1)


def test_adjusted_model_picks_source():
    config = _saas_configuration()
    series = ForecastCalculator().run(config)

    assert adjusted_model(config, SensitivityParams(), series).source == "forecast"
    assert adjusted_model(config, SensitivityParams()).source == "simplified"


def test_compare_default_scenarios():
    config = _saas_configuration(setup_cost=5000)
    series = ForecastCalculator().run(config)
    outcomes = compare_scenarios(config, baseline=series)

    assert [outcome.name for outcome in outcomes] == ["Base Case", "Aggressive Growth", "Conservative"]
    base, aggressive, conservative = outcomes
    assert base.final_total_revenue == pytest.approx(66000)
    assert aggressive.final_total_revenue == pytest.approx(66000 * 1.2)
    assert conservative.final_total_revenue == pytest.approx(66000 * 0.9)
    assert base.color == "#3B82F6"


def test_cac_ltv_health_flags():
    model = simplified_projection(_straight_sales_configuration(), SensitivityParams())
    points = cac_ltv_analysis(model)

    assert len(points) == 2
    assert points[0].ratio == pytest.approx(29 * 12 / 0.05 / 50)
    assert points[0].healthy
    assert points[0].payback_ok

    expensive = simplified_projection(_straight_sales_configuration(), SensitivityParams(cac=100000))
    assert not cac_ltv_analysis(expensive)[0].healthy
    assert not cac_ltv_analysis(expensive)[0].payback_ok


def test_perturb_configuration_leaves_original_untouched():
    config = build_sample_configuration()
    perturbed = perturb_configuration(config, SensitivityParams(growth_rate=50, churn_rate=10, cac=20))

    original_saas = config.inputs_for(ModelType.SAAS)
    saas = perturbed.inputs_for(ModelType.SAAS)
    assert saas.growth_rate_for(2025) == pytest.approx(4.5)
    assert saas.user_churn_rate == pytest.approx(5.5)
    assert saas.cac == pytest.approx(90)
    assert original_saas.growth_rate_for(2025) == 3
    assert perturbed.inputs_for(ModelType.MARKETPLACE).gmv_growth_rate == pytest.approx(7.5)
    assert perturbed.inputs_for(ModelType.HARDWARE_SAAS).saas_churn_rate == pytest.approx(2.2)


def test_rerun_with_zero_delta_matches_forecast():
    config = build_sample_configuration()
    calculator = ForecastCalculator()
    expected = apply_delta(calculator.run(config), config, SensitivityParams())

    assert rerun_with_delta(config, SensitivityParams(), calculator) == expected


def test_sweep_marks_base_point():
    config = _saas_configuration()
    series = ForecastCalculator().run(config)
    points = sweep_parameter(config, "pricing_multiplier", [-10, 0, 10], baseline=series)

    assert [point.is_base for point in points] == [False, True, False]
    revenues = [point.final_total_revenue for point in points]
    assert revenues == sorted(revenues)


def test_sweep_rejects_unknown_parameter():
    with pytest.raises(ValueError):
        sweep_parameter(_saas_configuration(), "tax_rate", [0])
