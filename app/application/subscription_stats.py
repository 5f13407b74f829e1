"""
Subscription stats: spending totals, category breakdown, upcoming charges
and the projected payment timeline.

Pure computation over a snapshot of the user's subscriptions (see
SubscriptionStatsService for the storage-backed entry point). Inactive
subscriptions never participate. Sums are kept at full precision and rounded
half-up to 2 decimals only in the returned structures.
"""
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Sequence

from app.domain.billing_cycle import advance, add_months, monthly_equivalent
from app.domain.category import resolve_category
from app.domain.subscription import SubscriptionSnapshot
from app.infrastructure.db.repository import SubscriptionRepository
from app.utils.money import round_money, share_percentage

UPCOMING_HORIZON_DAYS = 30
TIMELINE_MONTHS = 6
TIMELINE_MAX_OCCURRENCES = 12


@dataclass(frozen=True)
class MostExpensive:
    id: int
    name: str
    monthly_cost: float


@dataclass(frozen=True)
class CategoryShare:
    name: str
    color: str
    monthly_cost: float
    subscription_count: int
    percentage: float


@dataclass(frozen=True)
class UpcomingPayment:
    id: int
    name: str
    cost: float
    currency: str
    date: date
    days_until: int
    color: str
    icon: str


@dataclass(frozen=True)
class SubscriptionStats:
    active_subscriptions: int
    monthly_cost: float
    yearly_cost: float
    average_per_subscription: float
    most_expensive: MostExpensive | None
    category_breakdown: list[CategoryShare] = field(default_factory=list)
    upcoming_payments: list[UpcomingPayment] = field(default_factory=list)


@dataclass(frozen=True)
class TimelineEntry:
    subscription_id: int
    name: str
    cost: float
    currency: str
    date: date
    billing_cycle: str
    color: str
    icon: str


@dataclass(frozen=True)
class TimelineMonth:
    month: str  # "YYYY-MM"
    total: float
    payments: list[TimelineEntry]


@dataclass(frozen=True)
class Savings:
    monthly: float
    yearly: float
    five_years: float


def _active(subscriptions: Iterable[SubscriptionSnapshot]) -> list[SubscriptionSnapshot]:
    return [s for s in subscriptions if s.is_active]


def compute_subscription_stats(
    subscriptions: Sequence[SubscriptionSnapshot],
    today: date,
    horizon_days: int = UPCOMING_HORIZON_DAYS,
) -> SubscriptionStats:
    """
    Aggregate a user's subscriptions.

    Args:
        subscriptions: snapshot, inactive rows are skipped
        today: reference date for upcoming payments
        horizon_days: upcoming window, [today, today + horizon_days] inclusive

    Returns:
        SubscriptionStats; zeros / None / empty lists for no active rows

    Raises:
        UnknownBillingCycleError: a row carries a cycle outside the fixed set
    """
    active = _active(subscriptions)

    monthly_total = 0.0
    most_expensive: SubscriptionSnapshot | None = None
    most_expensive_cost = 0.0
    groups: dict[str, dict] = {}
    upcoming: list[UpcomingPayment] = []
    horizon_end = today + timedelta(days=horizon_days)

    for sub in active:
        monthly = monthly_equivalent(sub.cost, sub.billing_cycle)
        monthly_total += monthly

        # strict ">" keeps the first one on ties
        if most_expensive is None or monthly > most_expensive_cost:
            most_expensive = sub
            most_expensive_cost = monthly

        name, color = resolve_category(sub.category_name, sub.category_color)
        group = groups.setdefault(name, {"color": color, "monthly": 0.0, "count": 0})
        group["monthly"] += monthly
        group["count"] += 1

        if today <= sub.next_payment_date <= horizon_end:
            upcoming.append(UpcomingPayment(
                id=sub.id,
                name=sub.name,
                cost=float(sub.cost),
                currency=sub.currency,
                date=sub.next_payment_date,
                days_until=(sub.next_payment_date - today).days,
                color=sub.color,
                icon=sub.icon,
            ))

    upcoming.sort(key=lambda p: p.date)

    breakdown = [
        CategoryShare(
            name=name,
            color=g["color"],
            monthly_cost=round_money(g["monthly"]),
            subscription_count=g["count"],
            percentage=share_percentage(g["monthly"], monthly_total),
        )
        for name, g in groups.items()
    ]

    count = len(active)
    return SubscriptionStats(
        active_subscriptions=count,
        monthly_cost=round_money(monthly_total),
        yearly_cost=round_money(monthly_total * 12),
        average_per_subscription=round_money(monthly_total / count) if count else 0.0,
        most_expensive=MostExpensive(
            id=most_expensive.id,
            name=most_expensive.name,
            monthly_cost=round_money(most_expensive_cost),
        ) if most_expensive is not None else None,
        category_breakdown=breakdown,
        upcoming_payments=upcoming,
    )


def project_timeline(
    subscriptions: Sequence[SubscriptionSnapshot],
    today: date,
    months: int = TIMELINE_MONTHS,
    max_occurrences: int = TIMELINE_MAX_OCCURRENCES,
) -> list[TimelineEntry]:
    """
    Future charges of every active subscription, sorted by date.

    Each subscription starts at its next_payment_date and advances by its
    cycle until max_occurrences are produced or the date passes
    today + months calendar months.
    """
    horizon_end = add_months(today, months)
    out: list[TimelineEntry] = []

    for sub in _active(subscriptions):
        d = sub.next_payment_date
        for _ in range(max_occurrences):
            if d > horizon_end:
                break
            out.append(TimelineEntry(
                subscription_id=sub.id,
                name=sub.name,
                cost=float(sub.cost),
                currency=sub.currency,
                date=d,
                billing_cycle=sub.billing_cycle,
                color=sub.color,
                icon=sub.icon,
            ))
            d = advance(d, sub.billing_cycle)

    out.sort(key=lambda e: e.date)
    return out


def group_timeline_by_month(entries: Sequence[TimelineEntry]) -> list[TimelineMonth]:
    """
    Group date-sorted timeline entries by calendar month, in order.

    total is a plain sum of entry costs and ignores currency: a month with
    RUB and USD charges adds them as numbers. Per-entry currency stays on
    each payment.
    """
    grouped: dict[str, list[TimelineEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.date.strftime("%Y-%m"), []).append(entry)

    return [
        TimelineMonth(
            month=month,
            total=round_money(sum(e.cost for e in payments)),
            payments=payments,
        )
        for month, payments in sorted(grouped.items())
    ]


def compute_savings(
    subscriptions: Sequence[SubscriptionSnapshot],
    selected_ids: Iterable[int],
) -> Savings:
    """What cancelling the selected subscriptions would save."""
    selected = set(selected_ids)
    monthly = sum(
        (monthly_equivalent(s.cost, s.billing_cycle) for s in subscriptions if s.id in selected),
        0.0,
    )
    return Savings(
        monthly=round_money(monthly),
        yearly=round_money(monthly * 12),
        five_years=round_money(monthly * 12 * 5),
    )


class SubscriptionStatsService:
    """Storage-backed entry point: fetch the active snapshot, then aggregate."""

    def __init__(self, repo: SubscriptionRepository):
        self.repo = repo

    def stats(self, user_id: int, today: date, horizon_days: int = UPCOMING_HORIZON_DAYS) -> SubscriptionStats:
        subs = self.repo.fetch_active_with_category(user_id)
        return compute_subscription_stats(subs, today, horizon_days=horizon_days)

    def timeline(self, user_id: int, today: date, months: int = TIMELINE_MONTHS) -> list[TimelineMonth]:
        subs = self.repo.fetch_active_with_category(user_id)
        return group_timeline_by_month(project_timeline(subs, today, months=months))

    def savings(self, user_id: int, selected_ids: Iterable[int]) -> Savings:
        subs = self.repo.fetch_active_with_category(user_id)
        return compute_savings(subs, selected_ids)

