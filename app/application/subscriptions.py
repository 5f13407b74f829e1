"""
Subscription use cases: create / update / delete / list.

Works directly with the ORM. Ordering lives in subscription_order,
aggregation in subscription_stats.
"""
import logging
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.domain.billing_cycle import BILLING_CYCLES
from app.domain.subscription import DEFAULT_SUBSCRIPTION_COLOR, DEFAULT_SUBSCRIPTION_ICON
from app.infrastructure.db.models import CategoryModel, SubscriptionModel, User
from app.infrastructure.db.repository import SubscriptionRepository
from app.utils.validation import parse_cost, validate_currency, validate_hex_color

logger = logging.getLogger(__name__)

DEFAULT_FREE_TIER_LIMIT = 5

# Fields a client may change with UpdateSubscriptionUseCase
UPDATABLE_FIELDS = frozenset({
    "name", "cost", "currency", "billing_cycle", "next_payment_date",
    "category_id", "color", "icon", "notes", "is_active",
})


class SubscriptionValidationError(ValueError):
    pass


class SubscriptionNotFoundError(SubscriptionValidationError):
    pass


class SubscriptionLimitError(SubscriptionValidationError):
    def __init__(self, limit: int):
        super().__init__(
            f"Free tier limit reached. You can have max {limit} subscriptions. "
            "Upgrade to Premium for unlimited subscriptions."
        )
        self.limit = limit


def _clean_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise SubscriptionValidationError("Name must not be empty")
    if len(name) > 255:
        raise SubscriptionValidationError("Name is too long (max 255)")
    return name


def _check_cycle(cycle: str) -> str:
    if cycle not in BILLING_CYCLES:
        raise SubscriptionValidationError(
            f"billing_cycle must be one of {', '.join(BILLING_CYCLES)}, got: {cycle}"
        )
    return cycle


def _check_category(db: Session, user_id: int, category_id: int | None) -> int | None:
    """Category must be a preset or belong to the user"""
    if category_id is None:
        return None
    category = db.get(CategoryModel, category_id)
    if category is None or not (category.is_preset or category.user_id == user_id):
        raise SubscriptionValidationError("Category not found")
    return category_id


def _wrap(func, value):
    try:
        return func(value)
    except ValueError as e:
        raise SubscriptionValidationError(str(e)) from e


class CreateSubscriptionUseCase:
    def __init__(self, db: Session, free_tier_limit: int = DEFAULT_FREE_TIER_LIMIT):
        self.db = db
        self.repo = SubscriptionRepository(db)
        self.free_tier_limit = free_tier_limit

    def execute(
        self,
        user_id: int,
        name: str,
        cost: Decimal | str | float,
        billing_cycle: str,
        next_payment_date: date,
        currency: str = "RUB",
        category_id: int | None = None,
        color: str = DEFAULT_SUBSCRIPTION_COLOR,
        icon: str = DEFAULT_SUBSCRIPTION_ICON,
        notes: str = "",
        is_active: bool = True,
    ) -> int:
        """
        Create a subscription at the end of the user's list

        Returns:
            id of the new subscription

        Raises:
            SubscriptionLimitError: non-premium user at the free-tier limit
            SubscriptionValidationError: invalid field value
        """
        user = self.db.get(User, user_id)
        if user is None:
            raise SubscriptionNotFoundError("User not found")

        # Serialize against concurrent creates / moves of this user's list;
        # the limit check and max_order_index are read under the lock
        self.repo.lock_user_partition(user_id)

        if not user.is_premium:
            active = self.repo.count_active(user_id)
            if active >= self.free_tier_limit:
                self.db.rollback()
                logger.warning("User %d hit free tier limit (%d)", user_id, self.free_tier_limit)
                raise SubscriptionLimitError(self.free_tier_limit)

        max_order = self.repo.max_order_index(user_id)

        sub = SubscriptionModel(
            user_id=user_id,
            name=_clean_name(name),
            cost=_wrap(parse_cost, cost),
            currency=_wrap(validate_currency, currency),
            billing_cycle=_check_cycle(billing_cycle),
            next_payment_date=next_payment_date,
            category_id=_check_category(self.db, user_id, category_id),
            color=_wrap(validate_hex_color, color),
            icon=icon,
            notes=notes or "",
            is_active=is_active,
            order_index=0 if max_order is None else max_order + 1,
        )
        self.db.add(sub)
        self.db.flush()
        self.db.commit()
        logger.info("Created subscription %d for user %d", sub.id, user_id)
        return sub.id


class UpdateSubscriptionUseCase:
    """
    Partial update over a fixed set of fields (UPDATABLE_FIELDS).
    order_index is not updatable here; use ReorderSubscriptionUseCase.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = SubscriptionRepository(db)

    def execute(self, subscription_id: int, user_id: int, **changes) -> SubscriptionModel:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise SubscriptionValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
        if not changes:
            raise SubscriptionValidationError("No fields to update")

        sub = self.repo.get_owned(user_id, subscription_id)
        if not sub:
            raise SubscriptionNotFoundError("Subscription not found")

        if "name" in changes:
            sub.name = _clean_name(changes["name"])
        if "cost" in changes:
            sub.cost = _wrap(parse_cost, changes["cost"])
        if "currency" in changes:
            sub.currency = _wrap(validate_currency, changes["currency"])
        if "billing_cycle" in changes:
            sub.billing_cycle = _check_cycle(changes["billing_cycle"])
        if "next_payment_date" in changes:
            sub.next_payment_date = changes["next_payment_date"]
        if "category_id" in changes:
            sub.category_id = _check_category(self.db, user_id, changes["category_id"])
        if "color" in changes:
            sub.color = _wrap(validate_hex_color, changes["color"])
        if "icon" in changes:
            sub.icon = changes["icon"]
        if "notes" in changes:
            sub.notes = changes["notes"] or ""
        if "is_active" in changes:
            sub.is_active = bool(changes["is_active"])

        self.db.commit()
        self.db.refresh(sub)
        return sub


class DeleteSubscriptionUseCase:
    """
    Hard delete. Other rows keep their order_index, so the list may have a
    gap afterwards; ordering by order_index stays stable.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = SubscriptionRepository(db)

    def execute(self, subscription_id: int, user_id: int) -> None:
        sub = self.repo.get_owned(user_id, subscription_id)
        if not sub:
            raise SubscriptionNotFoundError("Subscription not found")
        self.db.delete(sub)
        self.db.commit()
        logger.info("Deleted subscription %d for user %d", subscription_id, user_id)


def list_subscriptions(db: Session, user_id: int) -> list[tuple[SubscriptionModel, CategoryModel | None]]:
    """User's subscriptions in list order, each with its category (or None)"""
    subs = SubscriptionRepository(db).fetch_all(user_id)
    category_ids = {s.category_id for s in subs if s.category_id is not None}
    categories = {}
    if category_ids:
        categories = {
            c.id: c for c in db.scalars(select(CategoryModel).where(CategoryModel.id.in_(category_ids)))
        }
    return [(s, categories.get(s.category_id)) for s in subs]
