"""
Profile and export endpoints
"""
from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, get_today
from app.application.export import ExportSubscriptionsCsvUseCase, PremiumRequiredError, export_filename
from app.application.subscription_stats import compute_subscription_stats
from app.infrastructure.db.models import User
from app.infrastructure.db.repository import SubscriptionRepository


router = APIRouter(prefix="/api/v1", tags=["profile"])


class ProfileResponse(BaseModel):
    id: int
    email: str
    is_premium: bool
    premium_purchased_at: datetime | None
    created_at: datetime | None
    subscription_count: int
    monthly_cost: float


@router.get("/profile/", response_model=ProfileResponse)
def get_profile(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """Profile with active subscription count and normalized monthly spend"""
    snapshot = SubscriptionRepository(db).fetch_active_with_category(user.id)
    stats = compute_subscription_stats(snapshot, today)
    return ProfileResponse(
        id=user.id,
        email=user.email,
        is_premium=user.is_premium,
        premium_purchased_at=user.premium_purchased_at,
        created_at=user.created_at,
        subscription_count=stats.active_subscriptions,
        monthly_cost=stats.monthly_cost,
    )


@router.get("/export/csv")
def export_csv(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """CSV export (premium only)"""
    try:
        content = ExportSubscriptionsCsvUseCase(db).execute(user.id)
    except PremiumRequiredError as e:
        raise HTTPException(status_code=403, detail=str(e))

    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(today)}"'},
    )
