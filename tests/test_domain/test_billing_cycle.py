"""
Tests for billing cycle normalization and date advancement
"""
from datetime import date
from decimal import Decimal

import pytest

from app.domain.billing_cycle import (
    BILLING_CYCLES,
    UnknownBillingCycleError,
    add_months,
    advance,
    monthly_equivalent,
    validate_billing_cycle,
    yearly_equivalent,
)


def test_yearly_cost_divided_by_twelve():
    """120/год = 10/мес"""
    assert monthly_equivalent(Decimal("120"), "yearly") == pytest.approx(10.0)


def test_weekly_cost_uses_average_weeks_per_month():
    assert monthly_equivalent(100, "weekly") == pytest.approx(433.0)


def test_quarterly_cost_divided_by_three():
    assert monthly_equivalent(30, "quarterly") == pytest.approx(10.0)


def test_monthly_cost_unchanged():
    assert monthly_equivalent(Decimal("9.99"), "monthly") == pytest.approx(9.99)


def test_yearly_equivalent_is_twelve_months():
    assert yearly_equivalent(10, "monthly") == pytest.approx(120.0)


def test_unknown_cycle_raises():
    with pytest.raises(UnknownBillingCycleError) as exc:
        monthly_equivalent(10, "daily")
    assert exc.value.cycle == "daily"


def test_validate_billing_cycle_accepts_known():
    for cycle in BILLING_CYCLES:
        assert validate_billing_cycle(cycle) == cycle


def test_validate_billing_cycle_rejects_unknown():
    with pytest.raises(ValueError):
        validate_billing_cycle("biweekly")


@pytest.mark.parametrize("start, n, expected", [
    (date(2026, 1, 15), 1, date(2026, 2, 15)),
    (date(2026, 1, 31), 1, date(2026, 2, 28)),
    (date(2028, 1, 31), 1, date(2028, 2, 29)),
    (date(2026, 11, 30), 3, date(2027, 2, 28)),
    (date(2028, 2, 29), 12, date(2029, 2, 28)),
    (date(2026, 12, 31), 1, date(2027, 1, 31)),
])
def test_add_months_clamps_to_month_end(start, n, expected):
    assert add_months(start, n) == expected


def test_advance_weekly_adds_seven_days():
    assert advance(date(2026, 2, 25), "weekly") == date(2026, 3, 4)


def test_advance_monthly_quarterly_yearly():
    d = date(2026, 3, 31)
    assert advance(d, "monthly") == date(2026, 4, 30)
    assert advance(d, "quarterly") == date(2026, 6, 30)
    assert advance(d, "yearly") == date(2027, 3, 31)


def test_advance_unknown_cycle_raises():
    with pytest.raises(UnknownBillingCycleError):
        advance(date(2026, 1, 1), "fortnightly")
