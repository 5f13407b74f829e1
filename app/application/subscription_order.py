"""
Manual ordering of a user's subscription list.

order_index is dense per user (0..n-1). Moving one row shifts every row
between the old and the new position by exactly one, so the set of indices
is unchanged. Everything happens in one transaction, behind a row lock on
the user, so concurrent moves of the same user's list are serialized.
"""
import logging

from app.application.subscriptions import SubscriptionNotFoundError, SubscriptionValidationError
from app.infrastructure.db.repository import SubscriptionRepository

logger = logging.getLogger(__name__)


class OrderValidationError(SubscriptionValidationError):
    pass


class ReorderSubscriptionUseCase:
    def __init__(self, repo: SubscriptionRepository):
        self.repo = repo
        self.db = repo.db

    def execute(self, user_id: int, subscription_id: int, new_index: int) -> None:
        """
        Move a subscription to new_index.

        Raises:
            OrderValidationError: new_index is not an int in [0, n-1]
            SubscriptionNotFoundError: no such subscription for this user
        """
        if isinstance(new_index, bool) or not isinstance(new_index, int):
            raise OrderValidationError("new_index must be an integer")
        if new_index < 0:
            raise OrderValidationError("new_index must be non-negative")

        try:
            self.repo.lock_user_partition(user_id)

            sub = self.repo.get_owned(user_id, subscription_id)
            if sub is None:
                raise SubscriptionNotFoundError("Subscription not found")

            # after a delete the row may sit past n-1; its own index is still valid
            old_index = sub.order_index
            if old_index == new_index:
                self.db.commit()
                return

            total = self.repo.count(user_id)
            if new_index >= total:
                raise OrderValidationError(
                    f"new_index out of range: {new_index} (list has {total} item(s))"
                )

            if old_index < new_index:
                # (old, new] moves up by one
                self.repo.shift_order_indices(user_id, old_index + 1, new_index, -1, exclude_id=sub.id)
            else:
                # [new, old) moves down by one
                self.repo.shift_order_indices(user_id, new_index, old_index - 1, +1, exclude_id=sub.id)

            self.repo.set_order_index(user_id, sub.id, new_index)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Reordered subscription %d for user %d: %d -> %d",
            subscription_id, user_id, old_index, new_index,
        )
