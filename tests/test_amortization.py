from __future__ import annotations

import pytest

from forecast_app.services.amortization import monthly_payment


def test_standard_mortgage_payment():
    assert monthly_payment(100000, 4.5, 25) == pytest.approx(555.83, abs=0.01)


def test_zero_rate_is_straight_line():
    assert monthly_payment(120000, 0, 10) == 1000


def test_non_positive_principal_or_term_pays_nothing():
    assert monthly_payment(0, 5, 10) == 0
    assert monthly_payment(-5000, 5, 10) == 0
    assert monthly_payment(5000, 5, 0) == 0


def test_payments_repay_principal():
    payment = monthly_payment(50000, 5, 5)
    balance = 50000.0
    for _ in range(60):
        balance = balance * (1 + 0.05 / 12) - payment
    assert balance == pytest.approx(0, abs=1e-6)


def test_degenerate_rates_fall_back_to_straight_line():
    assert monthly_payment(1200, -2400, 1) == pytest.approx(100)
    assert monthly_payment(1200, -1200, 1) == pytest.approx(100)
    assert monthly_payment(1200, -3000, 1.5) == pytest.approx(1200 / 18)
    assert monthly_payment(1200, 1e-18, 1) == pytest.approx(100)
