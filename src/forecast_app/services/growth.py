from __future__ import annotations

from typing import Optional

SAAS_GROWTH_CAP = 20.0
HARDWARE_GROWTH_CAP = 15.0
STRAIGHT_SALES_GROWTH_CAP = 2.0


def compound(base: float, monthly_rate_percent: float, periods: int, cap: Optional[float] = None) -> float:
    if periods == 0:
        return base
    rate = monthly_rate_percent if cap is None else min(monthly_rate_percent, cap)
    return base * (1 + rate / 100) ** periods


def churn_adjust(base: float, monthly_churn_percent: float, periods: int) -> float:
    if periods == 0:
        return base
    return max(0.0, base * (1 - monthly_churn_percent / 100) ** periods)


def ramp_up_factor(months_since_activation: int, ramp_up_months: int) -> float:
    if ramp_up_months <= 0:
        return 1.0
    return min(1.0, months_since_activation / ramp_up_months)
