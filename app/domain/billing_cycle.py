"""
Billing cycles: normalization to a monthly figure and calendar advancement.

Uses date only (no timezone).

Cycles:
- weekly: every 7 days
- monthly: every calendar month
- quarterly: every 3 calendar months
- yearly: every calendar year

Calendar-month steps clamp to the last day of the target month:
Jan 31 + 1 month = Feb 28 (Feb 29 in a leap year), Feb 29 + 1 year = Feb 28.
"""
import calendar
from datetime import date, timedelta
from decimal import Decimal

BILLING_CYCLE_WEEKLY = "weekly"
BILLING_CYCLE_MONTHLY = "monthly"
BILLING_CYCLE_QUARTERLY = "quarterly"
BILLING_CYCLE_YEARLY = "yearly"

BILLING_CYCLES = (
    BILLING_CYCLE_WEEKLY,
    BILLING_CYCLE_MONTHLY,
    BILLING_CYCLE_QUARTERLY,
    BILLING_CYCLE_YEARLY,
)

# Multiplier: cost per cycle -> cost per month
CYCLE_TO_MONTHLY = {
    BILLING_CYCLE_WEEKLY: 4.33,  # average weeks per month
    BILLING_CYCLE_MONTHLY: 1.0,
    BILLING_CYCLE_QUARTERLY: 1 / 3,
    BILLING_CYCLE_YEARLY: 1 / 12,
}

# Calendar months per step (weekly advances by days instead)
_CYCLE_MONTHS = {
    BILLING_CYCLE_MONTHLY: 1,
    BILLING_CYCLE_QUARTERLY: 3,
    BILLING_CYCLE_YEARLY: 12,
}


class UnknownBillingCycleError(ValueError):
    def __init__(self, cycle):
        super().__init__(
            f"unknown billing cycle: {cycle!r} (expected one of {', '.join(BILLING_CYCLES)})"
        )
        self.cycle = cycle


def validate_billing_cycle(cycle: str) -> str:
    if cycle not in CYCLE_TO_MONTHLY:
        raise UnknownBillingCycleError(cycle)
    return cycle


def monthly_equivalent(cost: Decimal | float | int, cycle: str) -> float:
    """
    Cost of one charge converted to a monthly figure.

    >>> monthly_equivalent(120, "yearly")
    10.0

    Raises:
        UnknownBillingCycleError: cycle outside the fixed set
    """
    multiplier = CYCLE_TO_MONTHLY.get(cycle)
    if multiplier is None:
        raise UnknownBillingCycleError(cycle)
    return float(cost) * multiplier


def yearly_equivalent(cost: Decimal | float | int, cycle: str) -> float:
    return monthly_equivalent(cost, cycle) * 12


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def add_months(d: date, n: int) -> date:
    month = d.month - 1 + n
    year = d.year + month // 12
    month = month % 12 + 1
    last = last_day_of_month(year, month)
    day = min(d.day, last)
    return date(year, month, day)


def advance(d: date, cycle: str) -> date:
    """Next charge date after d for the given cycle."""
    if cycle == BILLING_CYCLE_WEEKLY:
        return d + timedelta(days=7)
    months = _CYCLE_MONTHS.get(cycle)
    if months is None:
        raise UnknownBillingCycleError(cycle)
    return add_months(d, months)
