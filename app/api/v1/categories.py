"""
Category API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.application.categories import (
    CategoryConflictError,
    CategoryNotFoundError,
    CategoryValidationError,
    CreateCategoryUseCase,
    DeleteCategoryUseCase,
    PresetCategoryError,
    UpdateCategoryUseCase,
    list_categories,
)
from app.infrastructure.db.models import CategoryModel, User
from app.utils.validation import validate_hex_color


router = APIRouter(prefix="/api/v1/categories", tags=["categories"])


# === Request/Response models ===

class CreateCategoryRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    color: str = "#6366f1"
    icon: str = Field(default="tag", max_length=50)

    @field_validator("color")
    @classmethod
    def check_color(cls, v: str) -> str:
        return validate_hex_color(v)


class UpdateCategoryRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    color: str | None = None
    icon: str | None = Field(default=None, max_length=50)

    @field_validator("color")
    @classmethod
    def check_color(cls, v: str | None) -> str | None:
        return validate_hex_color(v) if v is not None else None


class CategoryResponse(BaseModel):
    id: int
    name: str
    color: str
    icon: str
    is_preset: bool


def _to_response(c: CategoryModel) -> CategoryResponse:
    return CategoryResponse(id=c.id, name=c.name, color=c.color, icon=c.icon, is_preset=c.is_preset)


def _raise_http(e: CategoryValidationError):
    if isinstance(e, CategoryNotFoundError):
        raise HTTPException(status_code=404, detail=str(e))
    if isinstance(e, PresetCategoryError):
        raise HTTPException(status_code=403, detail=str(e))
    if isinstance(e, CategoryConflictError):
        raise HTTPException(status_code=409, detail=str(e))
    raise HTTPException(status_code=400, detail=str(e))


# === Endpoints ===

@router.get("/", response_model=list[CategoryResponse])
def get_categories(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Preset + the user's custom categories"""
    return [_to_response(c) for c in list_categories(db, user.id)]


@router.post("/", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    req: CreateCategoryRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        category_id = CreateCategoryUseCase(db).execute(
            user_id=user.id, name=req.name, color=req.color, icon=req.icon,
        )
    except CategoryValidationError as e:
        _raise_http(e)

    return _to_response(db.get(CategoryModel, category_id))


@router.put("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    req: UpdateCategoryRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    changes = {k: v for k, v in req.model_dump(exclude_unset=True).items() if v is not None}
    try:
        category = UpdateCategoryUseCase(db).execute(category_id, user.id, **changes)
    except CategoryValidationError as e:
        _raise_http(e)

    return _to_response(category)


@router.delete("/{category_id}")
def delete_category(
    category_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete a custom category; its subscriptions become uncategorized"""
    try:
        DeleteCategoryUseCase(db).execute(category_id, user.id)
    except CategoryValidationError as e:
        _raise_http(e)

    return {"status": "deleted"}
