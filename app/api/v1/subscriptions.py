"""
Subscription API endpoints
"""
from datetime import date, datetime
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from app.api.deps import get_app_settings, get_current_user, get_db
from app.application.subscription_order import ReorderSubscriptionUseCase
from app.application.subscriptions import (
    CreateSubscriptionUseCase,
    DeleteSubscriptionUseCase,
    SubscriptionLimitError,
    SubscriptionNotFoundError,
    SubscriptionValidationError,
    UpdateSubscriptionUseCase,
    list_subscriptions,
)
from app.config import Settings
from app.infrastructure.db.models import CategoryModel, SubscriptionModel, User
from app.infrastructure.db.repository import SubscriptionRepository
from app.utils.validation import parse_cost, validate_currency, validate_hex_color


router = APIRouter(prefix="/api/v1/subscriptions", tags=["subscriptions"])

BillingCycle = Literal["weekly", "monthly", "quarterly", "yearly"]


# === Request/Response models ===

class CreateSubscriptionRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    cost: str  # "9.99" or "9,99"; Decimal in the DB
    currency: str | None = None
    billing_cycle: BillingCycle
    next_payment_date: date
    category_id: int | None = None
    color: str = "#6366f1"
    icon: str = Field(default="credit-card", max_length=50)
    notes: str = Field(default="", max_length=1000)
    is_active: bool = True

    @field_validator("cost", mode="before")
    @classmethod
    def check_cost(cls, v) -> str:
        """Positive, max 2 decimal places"""
        return str(parse_cost(v))

    @field_validator("currency")
    @classmethod
    def check_currency(cls, v: str | None) -> str | None:
        return validate_currency(v) if v is not None else None

    @field_validator("color")
    @classmethod
    def check_color(cls, v: str) -> str:
        return validate_hex_color(v)


class UpdateSubscriptionRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    cost: str | None = None
    currency: str | None = None
    billing_cycle: BillingCycle | None = None
    next_payment_date: date | None = None
    category_id: int | None = None
    color: str | None = None
    icon: str | None = Field(default=None, max_length=50)
    notes: str | None = Field(default=None, max_length=1000)
    is_active: bool | None = None

    @field_validator("cost", mode="before")
    @classmethod
    def check_cost(cls, v) -> str | None:
        return str(parse_cost(v)) if v is not None else None

    @field_validator("currency")
    @classmethod
    def check_currency(cls, v: str | None) -> str | None:
        return validate_currency(v) if v is not None else None

    @field_validator("color")
    @classmethod
    def check_color(cls, v: str | None) -> str | None:
        return validate_hex_color(v) if v is not None else None


class ReorderRequest(BaseModel):
    new_index: int = Field(ge=0, strict=True)


class CategoryRef(BaseModel):
    id: int
    name: str
    color: str
    icon: str


class SubscriptionResponse(BaseModel):
    id: int
    name: str
    cost: float
    currency: str
    billing_cycle: str
    next_payment_date: date
    color: str
    icon: str
    notes: str
    is_active: bool
    order_index: int
    created_at: datetime | None
    category: CategoryRef | None


def _to_response(sub: SubscriptionModel, category: CategoryModel | None) -> SubscriptionResponse:
    return SubscriptionResponse(
        id=sub.id,
        name=sub.name,
        cost=float(sub.cost),
        currency=sub.currency,
        billing_cycle=sub.billing_cycle,
        next_payment_date=sub.next_payment_date,
        color=sub.color,
        icon=sub.icon,
        notes=sub.notes,
        is_active=sub.is_active,
        order_index=sub.order_index,
        created_at=sub.created_at,
        category=CategoryRef(
            id=category.id, name=category.name, color=category.color, icon=category.icon,
        ) if category else None,
    )


# === Endpoints ===

@router.get("/", response_model=list[SubscriptionResponse])
def get_subscriptions(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """All subscriptions (inactive included), by order_index"""
    return [_to_response(s, c) for s, c in list_subscriptions(db, user.id)]


@router.post("/", response_model=SubscriptionResponse, status_code=status.HTTP_201_CREATED)
def create_subscription(
    req: CreateSubscriptionRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    use_case = CreateSubscriptionUseCase(db, free_tier_limit=settings.FREE_TIER_LIMIT)
    try:
        sub_id = use_case.execute(
            user_id=user.id,
            name=req.name,
            cost=req.cost,
            currency=req.currency or settings.DEFAULT_CURRENCY,
            billing_cycle=req.billing_cycle,
            next_payment_date=req.next_payment_date,
            category_id=req.category_id,
            color=req.color,
            icon=req.icon,
            notes=req.notes,
            is_active=req.is_active,
        )
    except SubscriptionLimitError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except SubscriptionValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    sub = SubscriptionRepository(db).get_owned(user.id, sub_id)
    category = db.get(CategoryModel, sub.category_id) if sub.category_id else None
    return _to_response(sub, category)


@router.put("/{subscription_id}", response_model=SubscriptionResponse)
def update_subscription(
    subscription_id: int,
    req: UpdateSubscriptionRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Partial update: only fields present in the body are changed"""
    changes = req.model_dump(exclude_unset=True)
    # null is meaningful only for category_id (uncategorize)
    changes = {k: v for k, v in changes.items() if v is not None or k == "category_id"}
    try:
        sub = UpdateSubscriptionUseCase(db).execute(subscription_id, user.id, **changes)
    except SubscriptionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SubscriptionValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    category = db.get(CategoryModel, sub.category_id) if sub.category_id else None
    return _to_response(sub, category)


@router.delete("/{subscription_id}")
def delete_subscription(
    subscription_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        DeleteSubscriptionUseCase(db).execute(subscription_id, user.id)
    except SubscriptionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"status": "deleted"}


@router.put("/{subscription_id}/reorder")
def reorder_subscription(
    subscription_id: int,
    req: ReorderRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Move a subscription to new_index, shifting the ones in between"""
    use_case = ReorderSubscriptionUseCase(SubscriptionRepository(db))
    try:
        use_case.execute(user.id, subscription_id, req.new_index)
    except SubscriptionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SubscriptionValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"status": "reordered"}
