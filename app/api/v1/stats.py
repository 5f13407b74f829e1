"""
Stats API endpoints: dashboard summary, payment timeline, savings calculator
"""
from datetime import date

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_app_settings, get_current_user, get_db, get_today
from app.application.subscription_stats import SubscriptionStatsService
from app.config import Settings
from app.infrastructure.db.models import User
from app.infrastructure.db.repository import SubscriptionRepository


router = APIRouter(prefix="/api/v1/stats", tags=["stats"])

# Dashboard shows the nearest ten only
UPCOMING_LIMIT = 10


# === Response models ===

class MostExpensiveResponse(BaseModel):
    id: int
    name: str
    monthly_cost: float


class SummaryResponse(BaseModel):
    active_subscriptions: int
    monthly_cost: float
    yearly_cost: float
    average_per_subscription: float
    most_expensive: MostExpensiveResponse | None


class CategoryShareResponse(BaseModel):
    name: str
    color: str
    monthly_cost: float
    subscription_count: int
    percentage: float


class UpcomingPaymentResponse(BaseModel):
    id: int
    name: str
    cost: float
    currency: str
    date: date
    days_until: int
    color: str
    icon: str


class StatsResponse(BaseModel):
    summary: SummaryResponse
    category_breakdown: list[CategoryShareResponse]
    upcoming_payments: list[UpcomingPaymentResponse]


class TimelinePaymentResponse(BaseModel):
    subscription_id: int
    name: str
    cost: float
    currency: str
    date: date
    billing_cycle: str
    color: str
    icon: str


class TimelineMonthResponse(BaseModel):
    month: str
    total: float
    payments: list[TimelinePaymentResponse]


class SavingsResponse(BaseModel):
    monthly: float
    yearly: float
    five_years: float


# === Endpoints ===

@router.get("/", response_model=StatsResponse)
def get_stats(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
    settings: Settings = Depends(get_app_settings),
):
    """Totals, category breakdown (largest first) and upcoming payments"""
    stats = SubscriptionStatsService(SubscriptionRepository(db)).stats(
        user.id, today, horizon_days=settings.UPCOMING_HORIZON_DAYS,
    )
    breakdown = sorted(stats.category_breakdown, key=lambda c: c.monthly_cost, reverse=True)

    return StatsResponse(
        summary=SummaryResponse(
            active_subscriptions=stats.active_subscriptions,
            monthly_cost=stats.monthly_cost,
            yearly_cost=stats.yearly_cost,
            average_per_subscription=stats.average_per_subscription,
            most_expensive=MostExpensiveResponse(
                id=stats.most_expensive.id,
                name=stats.most_expensive.name,
                monthly_cost=stats.most_expensive.monthly_cost,
            ) if stats.most_expensive else None,
        ),
        category_breakdown=[CategoryShareResponse(**vars(c)) for c in breakdown],
        upcoming_payments=[
            UpcomingPaymentResponse(**vars(p)) for p in stats.upcoming_payments[:UPCOMING_LIMIT]
        ],
    )


@router.get("/timeline", response_model=list[TimelineMonthResponse])
def get_timeline(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
    settings: Settings = Depends(get_app_settings),
):
    """Projected charges for the next months, grouped by calendar month"""
    months = SubscriptionStatsService(SubscriptionRepository(db)).timeline(
        user.id, today, months=settings.TIMELINE_MONTHS,
    )
    return [
        TimelineMonthResponse(
            month=m.month,
            total=m.total,
            payments=[TimelinePaymentResponse(**vars(p)) for p in m.payments],
        )
        for m in months
    ]


@router.get("/savings", response_model=SavingsResponse)
def get_savings(
    ids: list[int] = Query(default=[]),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """How much cancelling the given subscriptions would save"""
    savings = SubscriptionStatsService(SubscriptionRepository(db)).savings(user.id, ids)
    return SavingsResponse(monthly=savings.monthly, yearly=savings.yearly, five_years=savings.five_years)
