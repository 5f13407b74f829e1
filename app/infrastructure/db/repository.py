"""
Subscription repository: data access for the stats and ordering engines.

Every query is scoped to one user. Methods never commit; the caller owns
the transaction (see ReorderSubscriptionUseCase).
"""
from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from app.domain.subscription import SubscriptionSnapshot
from app.infrastructure.db.models import CategoryModel, SubscriptionModel, User


class SubscriptionRepository:

    def __init__(self, db: Session):
        self.db = db

    def fetch_active_with_category(self, user_id: int) -> list[SubscriptionSnapshot]:
        """
        Active subscriptions of the user joined with their category

        Returns:
            Snapshots in order_index order; category_name / category_color
            are None for uncategorized rows
        """
        rows = self.db.execute(
            select(SubscriptionModel, CategoryModel.name, CategoryModel.color)
            .outerjoin(CategoryModel, SubscriptionModel.category_id == CategoryModel.id)
            .where(
                SubscriptionModel.user_id == user_id,
                SubscriptionModel.is_active == True,  # noqa: E712
            )
            .order_by(SubscriptionModel.order_index.asc(), SubscriptionModel.id.asc())
        ).all()

        return [
            SubscriptionSnapshot(
                id=sub.id,
                name=sub.name,
                cost=sub.cost,
                currency=sub.currency,
                billing_cycle=sub.billing_cycle,
                next_payment_date=sub.next_payment_date,
                is_active=sub.is_active,
                category_name=category_name,
                category_color=category_color,
                color=sub.color,
                icon=sub.icon,
            )
            for sub, category_name, category_color in rows
        ]

    def fetch_all(self, user_id: int) -> list[SubscriptionModel]:
        """All subscriptions of the user (inactive included), list order"""
        return list(self.db.scalars(
            select(SubscriptionModel)
            .where(SubscriptionModel.user_id == user_id)
            .order_by(
                SubscriptionModel.order_index.asc(),
                SubscriptionModel.created_at.desc(),
                SubscriptionModel.id.desc(),
            )
        ))

    def get_owned(self, user_id: int, subscription_id: int) -> SubscriptionModel | None:
        return self.db.scalars(
            select(SubscriptionModel).where(
                SubscriptionModel.id == subscription_id,
                SubscriptionModel.user_id == user_id,
            )
        ).first()

    def count(self, user_id: int) -> int:
        return self.db.scalar(
            select(func.count(SubscriptionModel.id)).where(SubscriptionModel.user_id == user_id)
        ) or 0

    def count_active(self, user_id: int) -> int:
        return self.db.scalar(
            select(func.count(SubscriptionModel.id)).where(
                SubscriptionModel.user_id == user_id,
                SubscriptionModel.is_active == True,  # noqa: E712
            )
        ) or 0

    def max_order_index(self, user_id: int) -> int | None:
        """Highest order_index of the user, None if the user has no rows"""
        return self.db.scalar(
            select(func.max(SubscriptionModel.order_index)).where(SubscriptionModel.user_id == user_id)
        )

    def lock_user_partition(self, user_id: int) -> None:
        """
        Serialize order mutations of one user: SELECT ... FOR UPDATE on the
        user row. Held until the surrounding transaction ends. SQLite ignores
        FOR UPDATE (it locks the whole database on write anyway).
        """
        self.db.execute(
            select(User.id).where(User.id == user_id).with_for_update()
        )

    def shift_order_indices(
        self,
        user_id: int,
        range_start: int,
        range_end: int,
        delta: int,
        exclude_id: int | None = None,
    ) -> int:
        """
        Add delta to order_index of the user's rows with
        range_start <= order_index <= range_end

        Returns:
            Number of affected rows
        """
        stmt = (
            update(SubscriptionModel)
            .where(
                SubscriptionModel.user_id == user_id,
                SubscriptionModel.order_index >= range_start,
                SubscriptionModel.order_index <= range_end,
            )
            .values(order_index=SubscriptionModel.order_index + delta)
        )
        if exclude_id is not None:
            stmt = stmt.where(SubscriptionModel.id != exclude_id)
        result = self.db.execute(stmt)
        return result.rowcount

    def set_order_index(self, user_id: int, subscription_id: int, new_index: int) -> SubscriptionModel | None:
        sub = self.get_owned(user_id, subscription_id)
        if sub is None:
            return None
        sub.order_index = new_index
        self.db.flush()
        return sub
