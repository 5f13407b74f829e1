"""
Subscription read snapshot consumed by the stats engine
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

DEFAULT_SUBSCRIPTION_COLOR = "#6366f1"
DEFAULT_SUBSCRIPTION_ICON = "credit-card"


@dataclass(frozen=True)
class SubscriptionSnapshot:
    id: int
    name: str
    cost: Decimal
    currency: str
    billing_cycle: str  # weekly, monthly, quarterly, yearly
    next_payment_date: date
    is_active: bool = True
    category_name: str | None = None
    category_color: str | None = None
    color: str = DEFAULT_SUBSCRIPTION_COLOR
    icon: str = DEFAULT_SUBSCRIPTION_ICON
