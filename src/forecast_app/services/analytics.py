from __future__ import annotations

import math
from collections import defaultdict
from typing import Dict, Optional

from ..models.common import RECURRING_MODEL_TYPES, ModelType
from ..models.configuration import BusinessConfiguration
from ..models.kpis import BreakEvenPoint, ForecastKpis, PropertyKpis
from ..models.revenue import PropertyPlayInputs
from ..models.results import ForecastSeries


def gross_margin_rating(percent: float) -> str:
    if percent >= 70:
        return "Excellent"
    if percent >= 50:
        return "Good"
    if percent >= 30:
        return "Fair"
    return "Poor"


def burn_rating(monthly_burn: float) -> str:
    if monthly_burn <= 5000:
        return "Low"
    if monthly_burn <= 15000:
        return "Moderate"
    if monthly_burn <= 30000:
        return "High"
    return "Very High"


def find_break_even(series: ForecastSeries) -> Optional[BreakEvenPoint]:
    for index, period in enumerate(series.periods):
        if period.cumulative_cash_flow >= 0:
            return BreakEvenPoint(index=index, year=period.year, month=period.month)
    return None


def compute_kpis(series: ForecastSeries, config: BusinessConfiguration) -> ForecastKpis:
    periods = series.periods
    total_revenue = sum(period.total_revenue for period in periods)
    total_gross_margin = sum(period.gross_margin for period in periods)
    gross_margin_percent = total_gross_margin / total_revenue * 100 if total_revenue > 0 else 0.0

    break_even = find_break_even(series)
    payback_years = math.ceil(break_even.index / 12) if break_even is not None else None

    latest = periods[-1] if periods else None
    mrr = 0.0
    if latest is not None:
        mrr = sum(amount for model_type, amount in latest.revenue_by_model.items() if model_type in RECURRING_MODEL_TYPES)

    losses = [abs(period.net_profit) for period in periods[:12] if period.net_profit < 0]
    net_burn = sum(losses) / len(losses) if losses else 0.0

    model_totals: Dict[ModelType, float] = defaultdict(float)
    for period in periods:
        for model_type, amount in period.revenue_by_model.items():
            model_totals[model_type] += amount
    revenue_share = {
        model_type: (amount / total_revenue * 100 if total_revenue > 0 else 0.0)
        for model_type, amount in model_totals.items()
    }

    return ForecastKpis(
        total_revenue=total_revenue,
        average_monthly_revenue=total_revenue / len(periods) if periods else 0.0,
        gross_margin_percent=gross_margin_percent,
        gross_margin_rating=gross_margin_rating(gross_margin_percent),
        break_even=break_even,
        payback_years=payback_years,
        monthly_recurring_revenue=mrr,
        net_burn_per_month=net_burn,
        burn_rating=burn_rating(net_burn),
        peak_annual_revenue=max((summary.total_revenue for summary in series.annual), default=0.0),
        setup_cost=config.global_costs.initial_setup_cost,
        revenue_share_by_model=revenue_share,
        property=compute_property_kpis(series, config),
    )


def compute_property_kpis(series: ForecastSeries, config: BusinessConfiguration) -> Optional[PropertyKpis]:
    if not config.has_model(ModelType.PROPERTY_PLAY) or not series.periods:
        return None
    inputs = config.inputs_for(ModelType.PROPERTY_PLAY)
    months = len(series.periods)
    total_revenue = sum(period.total_revenue for period in series.periods)
    total_expenses = sum(period.property_expenses for period in series.periods)
    setup_cost = config.global_costs.initial_setup_cost

    noi = total_revenue - total_expenses
    noi_margin = noi / total_revenue * 100 if total_revenue > 0 else 0.0
    annual_net_income = noi / (months / 12)
    cash_on_cash = annual_net_income / setup_cost * 100 if setup_cost > 0 else 0.0
    dscr = (total_revenue / months) / (total_expenses / months) if total_expenses > 0 else 0.0

    purchase_price = appreciation = 0.0
    if isinstance(inputs, PropertyPlayInputs):
        purchase_price = inputs.property_purchase_price
        appreciation = inputs.property_appreciation_rate
    appreciation = appreciation or 3.0
    property_value = purchase_price * (1 + appreciation / 100) ** config.forecast_years

    return PropertyKpis(
        net_operating_income_margin=noi_margin,
        cash_on_cash_return=cash_on_cash,
        dscr=dscr,
        property_value=property_value,
        appreciation_rate=appreciation,
    )
