"""
FastAPI dependencies (DB session, authentication, clock)
"""
from datetime import date

from fastapi import Depends, Request, HTTPException, status
from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.infrastructure.db.session import get_db as _get_db
from app.infrastructure.db.models import User


# Re-export get_db for routers
get_db = _get_db


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """
    Current user from the session cookie

    Raises:
        HTTPException(401): not logged in

    Usage:
        @router.get("/profile")
        def get_profile(user: User = Depends(get_current_user)):
            ...
    """
    user_id = request.session.get("user_id")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )

    user = db.get(User, user_id)
    if not user:
        request.session.clear()
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    return user


def get_today() -> date:
    """Reference date for stats; overridden in tests"""
    return date.today()


def get_app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()
