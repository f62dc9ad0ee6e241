from __future__ import annotations


def monthly_payment(principal: float, annual_rate_percent: float, term_years: float) -> float:
    """Fixed monthly payment that repays ``principal`` over ``term_years``.

    Rates that make the annuity factor degenerate (a monthly rate of -100% or
    lower, or one too small to move ``(1 + r) ** n`` off 1) fall back to the
    straight-line payment.
    """
    periods = term_years * 12
    if principal <= 0 or periods <= 0:
        return 0.0
    rate = annual_rate_percent / 100 / 12
    if rate == 0 or rate <= -1:
        return principal / periods
    growth = (1 + rate) ** periods
    if growth == 1:
        return principal / periods
    return principal * rate * growth / (growth - 1)
