"""
SQLAlchemy ORM models
"""
from decimal import Decimal
from datetime import date as date_type
from sqlalchemy import String, DateTime, Integer, Text, TIMESTAMP, Date, func, Boolean, Numeric, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.db.session import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # Premium lifts the free-tier limit and unlocks CSV export
    is_premium: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    premium_purchased_at: Mapped[DateTime | None] = mapped_column(
        TIMESTAMP(timezone=True), nullable=True
    )

    created_at: Mapped[DateTime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )


class CategoryModel(Base):
    """
    Subscription category: shared preset (user_id IS NULL, is_preset) or
    custom category owned by one user
    """
    __tablename__ = "subscription_categories"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[str] = mapped_column(String(7), nullable=False, default="#6366f1", server_default="#6366f1")
    icon: Mapped[str] = mapped_column(String(50), nullable=False, default="tag", server_default="tag")
    is_preset: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )


class SubscriptionModel(Base):
    """Recurring charge tracked by a user"""
    __tablename__ = "subscriptions"
    __table_args__ = (
        Index("ix_subscriptions_user_order", "user_id", "order_index"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="RUB", server_default="RUB")
    billing_cycle: Mapped[str] = mapped_column(String(20), nullable=False)  # weekly, monthly, quarterly, yearly
    next_payment_date: Mapped[date_type] = mapped_column(Date, nullable=False)

    category_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("subscription_categories.id", ondelete="SET NULL"), nullable=True
    )

    color: Mapped[str] = mapped_column(String(7), nullable=False, default="#6366f1", server_default="#6366f1")
    icon: Mapped[str] = mapped_column(String(50), nullable=False, default="credit-card", server_default="credit-card")
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")

    # Manual ordering, dense 0..n-1 per user (gaps allowed after delete)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
