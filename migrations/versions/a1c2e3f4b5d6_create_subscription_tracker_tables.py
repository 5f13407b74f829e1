"""create users, subscription categories and subscriptions tables

Revision ID: a1c2e3f4b5d6
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa


revision = 'a1c2e3f4b5d6'
down_revision = None
branch_labels = None
depends_on = None


PRESET_CATEGORIES = [
    ("Streaming", "#ef4444", "tv"),
    ("Music", "#22c55e", "music"),
    ("Software", "#3b82f6", "code"),
    ("Cloud", "#06b6d4", "cloud"),
    ("Gaming", "#a855f7", "gamepad"),
    ("News", "#f59e0b", "newspaper"),
    ("Fitness", "#ec4899", "dumbbell"),
    ("Education", "#14b8a6", "graduation-cap"),
    ("Other", "#6b7280", "ellipsis"),
]


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('is_premium', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('premium_purchased_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    categories = op.create_table(
        'subscription_categories',
        sa.Column('id', sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('color', sa.String(7), nullable=False, server_default='#6366f1'),
        sa.Column('icon', sa.String(50), nullable=False, server_default='tag'),
        sa.Column('is_preset', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_subscription_categories_user_id', 'subscription_categories', ['user_id'])

    op.create_table(
        'subscriptions',
        sa.Column('id', sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('cost', sa.Numeric(12, 2), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False, server_default='RUB'),
        sa.Column('billing_cycle', sa.String(20), nullable=False),
        sa.Column('next_payment_date', sa.Date(), nullable=False),
        sa.Column('category_id', sa.Integer(),
                  sa.ForeignKey('subscription_categories.id', ondelete='SET NULL'), nullable=True),
        sa.Column('color', sa.String(7), nullable=False, server_default='#6366f1'),
        sa.Column('icon', sa.String(50), nullable=False, server_default='credit-card'),
        sa.Column('notes', sa.Text(), nullable=False, server_default=''),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('cost > 0', name='ck_subscriptions_cost_positive'),
        sa.CheckConstraint(
            "billing_cycle IN ('weekly', 'monthly', 'quarterly', 'yearly')",
            name='ck_subscriptions_billing_cycle',
        ),
        sa.CheckConstraint('order_index >= 0', name='ck_subscriptions_order_index'),
    )
    op.create_index('ix_subscriptions_user_id', 'subscriptions', ['user_id'])
    op.create_index('ix_subscriptions_user_order', 'subscriptions', ['user_id', 'order_index'])

    op.bulk_insert(categories, [
        {"user_id": None, "name": name, "color": color, "icon": icon, "is_preset": True}
        for name, color, icon in PRESET_CATEGORIES
    ])


def downgrade():
    op.drop_index('ix_subscriptions_user_order', table_name='subscriptions')
    op.drop_index('ix_subscriptions_user_id', table_name='subscriptions')
    op.drop_table('subscriptions')
    op.drop_index('ix_subscription_categories_user_id', table_name='subscription_categories')
    op.drop_table('subscription_categories')
    op.drop_table('users')
