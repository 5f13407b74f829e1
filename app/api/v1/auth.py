"""
Authentication endpoints (register, login, logout)
"""
from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, EmailStr
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.auth import EmailTakenError, RegistrationError, authenticate, register_user


router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


# === Request/Response models ===

class CredentialsRequest(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    id: int
    email: str
    is_premium: bool


# === Endpoints ===

@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(request: Request, req: CredentialsRequest, db: Session = Depends(get_db)):
    """Register and log in"""
    try:
        user = register_user(db, req.email, req.password)
    except EmailTakenError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except RegistrationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    request.session["user_id"] = user.id
    return UserResponse(id=user.id, email=user.email, is_premium=user.is_premium)


@router.post("/login", response_model=UserResponse)
def login(request: Request, req: CredentialsRequest, db: Session = Depends(get_db)):
    user = authenticate(db, req.email, req.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    request.session["user_id"] = user.id
    return UserResponse(id=user.id, email=user.email, is_premium=user.is_premium)


@router.post("/logout")
def logout(request: Request):
    request.session.clear()
    return {"status": "logged_out"}
