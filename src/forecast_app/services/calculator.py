from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import MAXYEAR, MINYEAR, date
from typing import Dict, List, Optional, Tuple

from dateutil.relativedelta import relativedelta

from ..errors import ConfigurationError
from ..models.common import ModelActivation, ModelType
from ..models.configuration import BusinessConfiguration
from ..models.revenue import PropertyPlayInputs
from ..models.results import AnnualSummary, ForecastPeriod, ForecastSeries
from .growth import ramp_up_factor
from .revenue_models import REVENUE_FUNCTIONS, ActivationState, ModelContext, has_formula, property_expenses

logger = logging.getLogger(__name__)


@dataclass
class RunState:
    """Carry-over state for a single forecast run, keyed by activation index."""

    activations: Dict[int, ActivationState] = field(default_factory=dict)

    def for_activation(self, index: int) -> ActivationState:
        if index not in self.activations:
            self.activations[index] = ActivationState()
        return self.activations[index]


def configuration_problems(config: BusinessConfiguration) -> List[str]:
    problems: List[str] = []
    for activation in config.model_activations:
        label = activation.model_type.value
        if not has_formula(activation.model_type):
            problems.append(f"no revenue formula for model type {label!r}")
        elif config.inputs_for(activation.model_type) is None:
            problems.append(f"activation of {label!r} has no model inputs")
        if activation.end_year is not None and activation.end_year < activation.start_year:
            problems.append(f"activation of {label!r} ends ({activation.end_year}) before it starts ({activation.start_year})")
    return problems


def _first_day_of_year(year: int) -> Optional[date]:
    if MINYEAR <= year <= MAXYEAR:
        return date(year, 1, 1)
    return None


def validate_configuration(config: BusinessConfiguration) -> None:
    problems = configuration_problems(config)
    if problems:
        raise ConfigurationError(problems)


class ForecastCalculator:
    def __init__(self, strict: bool = False) -> None:
        self.strict = strict

    def run(self, config: BusinessConfiguration, strict: Optional[bool] = None) -> ForecastSeries:
        strict = self.strict if strict is None else strict
        problems = configuration_problems(config)
        if problems:
            if strict:
                raise ConfigurationError(problems)
            logger.warning("Forecasting %r with configuration problems: %s", config.name, "; ".join(problems))

        state = RunState()
        start_date = _first_day_of_year(config.launch_year)
        global_costs = config.global_costs
        cumulative_cash_flow = -global_costs.initial_setup_cost

        periods: List[ForecastPeriod] = []
        annual_accumulators: Dict[int, Dict[str, float]] = defaultdict(lambda: defaultdict(float))
        annual_revenue_by_model: Dict[int, Dict[ModelType, float]] = defaultdict(lambda: defaultdict(float))

        for month_index in range(config.forecast_years * 12):
            year = config.launch_year + month_index // 12
            month = month_index % 12 + 1
            period_start = None
            if start_date is not None and year <= MAXYEAR:
                period_start = start_date + relativedelta(months=month_index)

            revenue_by_model, customer_base, property_costs = self._compute_revenue(config, state, year, month)
            total_revenue = sum(revenue_by_model.values())

            team_cost = global_costs.monthly_team_cost(year - config.launch_year + 1)
            total_costs = global_costs.monthly_operating_costs() + team_cost + property_costs

            gross_margin = total_revenue - (total_costs - team_cost)
            net_profit = total_revenue - total_costs
            cumulative_cash_flow += net_profit

            period = ForecastPeriod(
                year=year,
                month=month,
                period_start=period_start,
                revenue_by_model=revenue_by_model,
                total_revenue=total_revenue,
                total_costs=total_costs,
                team_cost=team_cost,
                property_expenses=property_costs,
                gross_margin=gross_margin,
                net_profit=net_profit,
                cumulative_cash_flow=cumulative_cash_flow,
                customer_base=customer_base,
                break_even_reached=cumulative_cash_flow >= 0,
            )
            periods.append(period)
            self._accumulate_annual(period, annual_accumulators, annual_revenue_by_model)

        logger.debug("Forecast %r produced %d periods", config.name, len(periods))
        annual = self._build_annual_summaries(periods, annual_accumulators, annual_revenue_by_model)
        return ForecastSeries(launch_year=config.launch_year, periods=periods, annual=annual)

    def _compute_revenue(
        self,
        config: BusinessConfiguration,
        state: RunState,
        year: int,
        month: int,
    ) -> Tuple[Dict[ModelType, float], Dict[ModelType, float], float]:
        revenue_by_model: Dict[ModelType, float] = {}
        customer_base: Dict[ModelType, float] = {}
        property_costs = 0.0
        for index, activation in enumerate(config.model_activations):
            if not activation.is_active(year):
                continue
            context = self._context_for(activation, state.for_activation(index), year, month)
            inputs = config.inputs_for(activation.model_type)
            function = REVENUE_FUNCTIONS.get(activation.model_type)
            revenue = customers = 0.0
            if inputs is not None and function is not None:
                output = function(inputs, context)
                revenue, customers = output.revenue, output.customers
                if isinstance(inputs, PropertyPlayInputs):
                    property_costs += property_expenses(inputs, context).total
            revenue_by_model[activation.model_type] = revenue_by_model.get(activation.model_type, 0.0) + revenue
            customer_base[activation.model_type] = customer_base.get(activation.model_type, 0.0) + customers
        return revenue_by_model, customer_base, property_costs

    def _context_for(self, activation: ModelActivation, activation_state: ActivationState, year: int, month: int) -> ModelContext:
        months_since = activation.months_since_start(year, month)
        return ModelContext(
            year=year,
            month=month,
            months_since_activation=months_since,
            ramp_up_factor=ramp_up_factor(months_since, activation.ramp_up_months),
            state=activation_state,
        )

    def _accumulate_annual(
        self,
        period: ForecastPeriod,
        accumulators: Dict[int, Dict[str, float]],
        revenue_by_model: Dict[int, Dict[ModelType, float]],
    ) -> None:
        acc = accumulators[period.year]
        acc["total_revenue"] += period.total_revenue
        acc["total_costs"] += period.total_costs
        acc["gross_margin"] += period.gross_margin
        acc["net_profit"] += period.net_profit
        for model_type, amount in period.revenue_by_model.items():
            revenue_by_model[period.year][model_type] += amount

    def _build_annual_summaries(
        self,
        periods: List[ForecastPeriod],
        accumulators: Dict[int, Dict[str, float]],
        revenue_by_model: Dict[int, Dict[ModelType, float]],
    ) -> List[AnnualSummary]:
        year_end: Dict[int, ForecastPeriod] = {period.year: period for period in periods}
        summaries: List[AnnualSummary] = []
        for year in sorted(accumulators.keys()):
            acc = accumulators[year]
            last = year_end[year]
            summaries.append(
                AnnualSummary(
                    year=year,
                    total_revenue=acc["total_revenue"],
                    total_costs=acc["total_costs"],
                    gross_margin=acc["gross_margin"],
                    net_profit=acc["net_profit"],
                    revenue_by_model=dict(revenue_by_model[year]),
                    ending_customers=sum(last.customer_base.values()),
                    ending_cumulative_cash_flow=last.cumulative_cash_flow,
                )
            )
        return summaries
