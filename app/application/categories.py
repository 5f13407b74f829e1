"""
Category use cases: shared presets + user custom categories

Preset categories are visible to everyone and cannot be modified/deleted.
"""
import logging

from sqlalchemy import or_, select, update
from sqlalchemy.orm import Session

from app.domain.category import DEFAULT_CATEGORY_COLOR, DEFAULT_CATEGORY_ICON, PRESET_CATEGORIES
from app.infrastructure.db.models import CategoryModel, SubscriptionModel
from app.utils.validation import validate_hex_color

logger = logging.getLogger(__name__)


class CategoryValidationError(ValueError):
    pass


class CategoryNotFoundError(CategoryValidationError):
    pass


class CategoryConflictError(CategoryValidationError):
    pass


class PresetCategoryError(CategoryValidationError):
    pass


def _clean_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise CategoryValidationError("Name must not be empty")
    if len(name) > 100:
        raise CategoryValidationError("Name is too long (max 100)")
    return name


def _clean_color(color: str) -> str:
    try:
        return validate_hex_color(color)
    except ValueError as e:
        raise CategoryValidationError(str(e)) from e


class EnsurePresetCategoriesUseCase:
    """
    Create the shared preset categories if they are missing.
    Idempotent: safe to call on every startup.
    """

    def __init__(self, db: Session):
        self.db = db

    def execute(self) -> int:
        existing = set(self.db.scalars(
            select(CategoryModel.name).where(CategoryModel.is_preset == True)  # noqa: E712
        ))
        created = 0
        for name, color, icon in PRESET_CATEGORIES:
            if name in existing:
                continue
            self.db.add(CategoryModel(user_id=None, name=name, color=color, icon=icon, is_preset=True))
            created += 1
        if created:
            self.db.commit()
            logger.info("Created %d preset categories", created)
        return created


def list_categories(db: Session, user_id: int) -> list[CategoryModel]:
    """Presets first, then the user's custom categories by name"""
    return list(db.scalars(
        select(CategoryModel)
        .where(or_(CategoryModel.is_preset == True, CategoryModel.user_id == user_id))  # noqa: E712
        .order_by(CategoryModel.is_preset.desc(), CategoryModel.name.asc())
    ))


def _name_taken(db: Session, user_id: int, name: str, exclude_id: int | None = None) -> bool:
    q = select(CategoryModel.id).where(
        CategoryModel.name == name,
        or_(CategoryModel.user_id == user_id, CategoryModel.is_preset == True),  # noqa: E712
    )
    if exclude_id is not None:
        q = q.where(CategoryModel.id != exclude_id)
    return db.scalars(q).first() is not None


def _get_custom(db: Session, user_id: int, category_id: int) -> CategoryModel:
    category = db.get(CategoryModel, category_id)
    if category is None or (not category.is_preset and category.user_id != user_id):
        raise CategoryNotFoundError("Category not found")
    if category.is_preset:
        raise PresetCategoryError("Preset categories cannot be modified")
    return category


class CreateCategoryUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        user_id: int,
        name: str,
        color: str = DEFAULT_CATEGORY_COLOR,
        icon: str = DEFAULT_CATEGORY_ICON,
    ) -> int:
        name = _clean_name(name)
        if _name_taken(self.db, user_id, name):
            raise CategoryConflictError("Category with this name already exists")

        category = CategoryModel(
            user_id=user_id,
            name=name,
            color=_clean_color(color),
            icon=icon,
            is_preset=False,
        )
        self.db.add(category)
        self.db.flush()
        self.db.commit()
        return category.id


class UpdateCategoryUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, category_id: int, user_id: int, **changes) -> CategoryModel:
        unknown = set(changes) - {"name", "color", "icon"}
        if unknown:
            raise CategoryValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
        if not changes:
            raise CategoryValidationError("No fields to update")

        category = _get_custom(self.db, user_id, category_id)

        if "name" in changes:
            name = _clean_name(changes["name"])
            if _name_taken(self.db, user_id, name, exclude_id=category.id):
                raise CategoryConflictError("Category with this name already exists")
            category.name = name
        if "color" in changes:
            category.color = _clean_color(changes["color"])
        if "icon" in changes:
            category.icon = changes["icon"]

        self.db.commit()
        return category


class DeleteCategoryUseCase:
    """Delete a custom category; the user's subscriptions become uncategorized"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, category_id: int, user_id: int) -> None:
        category = _get_custom(self.db, user_id, category_id)

        self.db.execute(
            update(SubscriptionModel)
            .where(
                SubscriptionModel.category_id == category.id,
                SubscriptionModel.user_id == user_id,
            )
            .values(category_id=None)
        )
        self.db.delete(category)
        self.db.commit()
        logger.info("Deleted category %d for user %d", category_id, user_id)
