from __future__ import annotations

import pytest

from forecast_app.services.growth import SAAS_GROWTH_CAP, churn_adjust, compound, ramp_up_factor


def test_compound_returns_base_for_zero_periods():
    assert compound(250, 12, 0) == 250
    assert compound(250, 12, 0, cap=1) == 250


def test_compound_applies_cap():
    assert compound(100, 50, 1, cap=SAAS_GROWTH_CAP) == compound(100, SAAS_GROWTH_CAP, 1)
    assert compound(100, 10, 2, cap=SAAS_GROWTH_CAP) == pytest.approx(121)


def test_compound_allows_negative_growth():
    assert compound(100, -10, 2) == pytest.approx(81)


def test_churn_adjust_decays_and_never_goes_negative():
    assert churn_adjust(100, 10, 0) == 100
    assert churn_adjust(100, 10, 2) == pytest.approx(81)
    assert churn_adjust(100, 100, 3) == 0
    assert churn_adjust(100, 150, 1) == 0


def test_ramp_up_boundaries():
    assert ramp_up_factor(0, 0) == 1
    assert ramp_up_factor(5, -3) == 1
    assert ramp_up_factor(0, 12) == 0
    assert ramp_up_factor(6, 12) == pytest.approx(0.5)
    assert ramp_up_factor(12, 12) == 1
    assert ramp_up_factor(40, 12) == 1


def test_ramp_up_is_monotonic():
    factors = [ramp_up_factor(month, 9) for month in range(24)]
    assert factors == sorted(factors)
    assert all(0 <= factor <= 1 for factor in factors)
