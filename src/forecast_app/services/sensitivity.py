"""Sensitivity analysis and scenario comparison.

Deltas are percentages. With a forecast series at hand, pricing and cost
deltas are applied post-hoc to each period. Without one, a simplified
acquisition x price projection is derived from the SAAS inputs instead.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..models.common import ModelType
from ..models.configuration import BusinessConfiguration
from ..models.revenue import (
    HardwareSaasInputs,
    MarketplaceInputs,
    ModelInputs,
    PropertyPlayInputs,
    SaasInputs,
    StraightSalesInputs,
)
from ..models.results import ForecastSeries
from ..models.scenario import (
    DEFAULT_SCENARIOS,
    AdjustedModel,
    AdjustedParams,
    AnnualProjection,
    CacLtvPoint,
    Scenario,
    ScenarioOutcome,
    SensitivityParams,
    SweepPoint,
)
from .calculator import ForecastCalculator

logger = logging.getLogger(__name__)

HEALTHY_LTV_CAC_RATIO = 3.0
MAX_HEALTHY_PAYBACK_MONTHS = 12.0


@dataclass(frozen=True)
class SensitivityBaseline:
    growth_rate: float
    churn_rate: float
    cac: float
    price: float
    upfront_costs: float
    acquisition: float

    @classmethod
    def from_configuration(cls, config: BusinessConfiguration) -> "SensitivityBaseline":
        saas = config.inputs_for(ModelType.SAAS)
        growth = churn = cac = price = acquisition = 0.0
        if isinstance(saas, SaasInputs):
            if saas.growth_rates_by_year:
                growth = saas.growth_rates_by_year[0].monthly_growth_rate
            if saas.monthly_price_tiers:
                price = saas.monthly_price_tiers[0].price
            churn = saas.user_churn_rate
            cac = saas.cac
            acquisition = saas.monthly_new_user_acquisition
        return cls(
            growth_rate=growth or 2.0,
            churn_rate=churn or 5.0,
            cac=cac or 50.0,
            price=price or 29.0,
            upfront_costs=config.global_costs.initial_setup_cost,
            acquisition=acquisition or 100.0,
        )


def _adjust(baseline: SensitivityBaseline, params: SensitivityParams, upfront_costs: float) -> AdjustedParams:
    return AdjustedParams(
        growth_rate=baseline.growth_rate * SensitivityParams.factor(params.growth_rate),
        churn_rate=max(0.0, baseline.churn_rate * SensitivityParams.factor(params.churn_rate)),
        cac=baseline.cac * SensitivityParams.factor(params.cac),
        price=baseline.price * SensitivityParams.factor(params.pricing_multiplier),
        upfront_costs=upfront_costs * SensitivityParams.factor(params.upfront_costs),
    )


def _unit_economics(adjusted: AdjustedParams) -> Tuple[float, float]:
    ltv = adjusted.price * 12 / (adjusted.churn_rate / 100) if adjusted.churn_rate > 0 else 0.0
    payback = adjusted.cac / adjusted.price if adjusted.price else 0.0
    return ltv, payback


def apply_delta(series: ForecastSeries, config: BusinessConfiguration, params: SensitivityParams) -> AdjustedModel:
    baseline = SensitivityBaseline.from_configuration(config)
    adjusted = _adjust(baseline, params, baseline.upfront_costs)
    ltv, payback = _unit_economics(adjusted)
    price_factor = SensitivityParams.factor(params.pricing_multiplier)
    cost_factor = SensitivityParams.factor(params.upfront_costs)

    total_revenue = 0.0
    total_costs = adjusted.upfront_costs
    projections: List[AnnualProjection] = []
    for index, period in enumerate(series.periods, start=1):
        monthly_revenue = period.total_revenue * price_factor
        total_revenue += monthly_revenue
        total_costs += period.total_costs * cost_factor
        if index % 12 == 0:
            projections.append(
                AnnualProjection(
                    year=index // 12,
                    users=sum(period.customer_base.values()),
                    monthly_revenue=monthly_revenue,
                    annual_revenue=monthly_revenue * 12,
                    total_revenue=total_revenue,
                    total_costs=total_costs,
                    profit=total_revenue - total_costs,
                    ltv=ltv,
                    cac_payback_months=payback,
                )
            )
    return AdjustedModel(params=adjusted, projections=projections, source="forecast")


def simplified_projection(config: BusinessConfiguration, params: SensitivityParams) -> AdjustedModel:
    baseline = SensitivityBaseline.from_configuration(config)
    adjusted = _adjust(baseline, params, baseline.upfront_costs or 10000.0)
    ltv, payback = _unit_economics(adjusted)

    users = baseline.acquisition
    total_users = users
    total_revenue = 0.0
    total_costs = adjusted.upfront_costs
    projections: List[AnnualProjection] = []
    for month in range(1, config.forecast_years * 12 + 1):
        new_users = users * (1 + adjusted.growth_rate / 100)
        churned_users = total_users * (adjusted.churn_rate / 100 / 12)
        total_users = max(0.0, total_users - churned_users + new_users)
        monthly_revenue = total_users * adjusted.price
        total_revenue += monthly_revenue
        total_costs += new_users * adjusted.cac
        users = new_users
        if month % 12 == 0:
            projections.append(
                AnnualProjection(
                    year=month // 12,
                    users=total_users,
                    monthly_revenue=monthly_revenue,
                    annual_revenue=monthly_revenue * 12,
                    total_revenue=total_revenue,
                    total_costs=total_costs,
                    profit=total_revenue - total_costs,
                    ltv=ltv,
                    cac_payback_months=payback,
                )
            )
    return AdjustedModel(params=adjusted, projections=projections, source="simplified")


def adjusted_model(
    config: BusinessConfiguration,
    params: SensitivityParams,
    baseline: Optional[ForecastSeries] = None,
) -> AdjustedModel:
    if baseline is not None:
        return apply_delta(baseline, config, params)
    return simplified_projection(config, params)


def _perturb_saas(inputs: SaasInputs, growth: float, churn: float, cac: float) -> SaasInputs:
    rates = [rate.model_copy(update={"monthly_growth_rate": rate.monthly_growth_rate * growth}) for rate in inputs.growth_rates_by_year]
    return inputs.model_copy(
        update={
            "growth_rates_by_year": rates,
            "user_churn_rate": max(0.0, inputs.user_churn_rate * churn),
            "cac": inputs.cac * cac,
        }
    )


def _perturb_hardware(inputs: HardwareSaasInputs, growth: float, churn: float, cac: float) -> HardwareSaasInputs:
    return inputs.model_copy(
        update={
            "hardware_growth_rate": inputs.hardware_growth_rate * growth,
            "saas_churn_rate": max(0.0, inputs.saas_churn_rate * churn),
            "cac": inputs.cac * cac,
        }
    )


def _perturb_straight_sales(inputs: StraightSalesInputs, growth: float, churn: float, cac: float) -> StraightSalesInputs:
    return inputs.model_copy(update={"growth_rate": inputs.growth_rate * growth})


def _perturb_marketplace(inputs: MarketplaceInputs, growth: float, churn: float, cac: float) -> MarketplaceInputs:
    return inputs.model_copy(update={"gmv_growth_rate": inputs.gmv_growth_rate * growth})


def _perturb_property(inputs: PropertyPlayInputs, growth: float, churn: float, cac: float) -> PropertyPlayInputs:
    return inputs.model_copy(update={"rent_growth_rate": inputs.rent_growth_rate * growth})


_PERTURBERS: Dict[ModelType, Callable[..., ModelInputs]] = {
    ModelType.SAAS: _perturb_saas,
    ModelType.HARDWARE_SAAS: _perturb_hardware,
    ModelType.STRAIGHT_SALES: _perturb_straight_sales,
    ModelType.MARKETPLACE: _perturb_marketplace,
    ModelType.PROPERTY_PLAY: _perturb_property,
}


def perturb_configuration(config: BusinessConfiguration, params: SensitivityParams) -> BusinessConfiguration:
    growth = SensitivityParams.factor(params.growth_rate)
    churn = SensitivityParams.factor(params.churn_rate)
    cac = SensitivityParams.factor(params.cac)
    perturbed: Dict[ModelType, ModelInputs] = {}
    for model_type, inputs in config.model_inputs.items():
        perturber = _PERTURBERS.get(model_type)
        if perturber is None or inputs.model_type != model_type:
            perturbed[model_type] = inputs
            continue
        perturbed[model_type] = perturber(inputs, growth, churn, cac)
    return config.model_copy(update={"model_inputs": perturbed})


def rerun_with_delta(
    config: BusinessConfiguration,
    params: SensitivityParams,
    calculator: Optional[ForecastCalculator] = None,
) -> AdjustedModel:
    calculator = calculator or ForecastCalculator()
    series = calculator.run(perturb_configuration(config, params))
    return apply_delta(series, config, params)


def compare_scenarios(
    config: BusinessConfiguration,
    scenarios: Optional[Iterable[Scenario]] = None,
    baseline: Optional[ForecastSeries] = None,
) -> List[ScenarioOutcome]:
    outcomes: List[ScenarioOutcome] = []
    for scenario in scenarios if scenarios is not None else DEFAULT_SCENARIOS:
        model = adjusted_model(config, scenario.params, baseline)
        final = model.final_projection()
        outcomes.append(
            ScenarioOutcome(
                name=scenario.name,
                color=scenario.color,
                label=scenario.label,
                params=scenario.params,
                final_total_revenue=final.total_revenue if final else 0.0,
                final_profit=final.profit if final else 0.0,
                final_users=final.users if final else 0.0,
                model=model,
            )
        )
    logger.debug("Compared %d scenarios for %r", len(outcomes), config.name)
    return outcomes


def cac_ltv_analysis(model: AdjustedModel) -> List[CacLtvPoint]:
    cac = model.params.cac
    points: List[CacLtvPoint] = []
    for projection in model.projections:
        ratio = projection.ltv / cac if cac else 0.0
        points.append(
            CacLtvPoint(
                year=projection.year,
                cac=cac,
                ltv=projection.ltv,
                ratio=ratio,
                payback_months=projection.cac_payback_months,
                healthy=ratio >= HEALTHY_LTV_CAC_RATIO,
                payback_ok=projection.cac_payback_months <= MAX_HEALTHY_PAYBACK_MONTHS,
            )
        )
    return points


def sweep_parameter(
    config: BusinessConfiguration,
    parameter: str,
    values: Iterable[float],
    baseline: Optional[ForecastSeries] = None,
) -> List[SweepPoint]:
    if parameter not in SensitivityParams.model_fields:
        raise ValueError(f"Unknown sensitivity parameter: {parameter!r}")
    points: List[SweepPoint] = []
    for value in values:
        model = adjusted_model(config, SensitivityParams(**{parameter: value}), baseline)
        final = model.final_projection()
        points.append(
            SweepPoint(
                value=value,
                is_base=abs(value) < 1e-10,
                final_total_revenue=final.total_revenue if final else 0.0,
                final_profit=final.profit if final else 0.0,
                final_users=final.users if final else 0.0,
            )
        )
    return points
