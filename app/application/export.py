"""
CSV export of a user's subscriptions (premium only)
"""
import csv
import io
from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.domain.category import UNCATEGORIZED_NAME
from app.infrastructure.db.models import CategoryModel, SubscriptionModel, User

CSV_HEADER = [
    "Name", "Cost", "Currency", "Billing Cycle", "Next Payment",
    "Category", "Notes", "Active", "Created At",
]


class PremiumRequiredError(ValueError):
    pass


def export_filename(today: date) -> str:
    return f"subtracker-export-{today.isoformat()}.csv"


class ExportSubscriptionsCsvUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: int) -> str:
        """
        Returns:
            CSV text, newest subscriptions first

        Raises:
            PremiumRequiredError: user is not premium
        """
        user = self.db.get(User, user_id)
        if user is None or not user.is_premium:
            raise PremiumRequiredError("Premium subscription required for export feature")

        rows = self.db.execute(
            select(SubscriptionModel, CategoryModel.name)
            .outerjoin(CategoryModel, SubscriptionModel.category_id == CategoryModel.id)
            .where(SubscriptionModel.user_id == user_id)
            .order_by(SubscriptionModel.created_at.desc(), SubscriptionModel.id.desc())
        ).all()

        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for sub, category_name in rows:
            writer.writerow([
                sub.name,
                f"{sub.cost:.2f}",
                sub.currency,
                sub.billing_cycle,
                sub.next_payment_date.isoformat(),
                category_name or UNCATEGORIZED_NAME,
                sub.notes or "",
                "Yes" if sub.is_active else "No",
                sub.created_at.isoformat() if sub.created_at else "",
            ])
        return buf.getvalue()
