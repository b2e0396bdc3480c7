"""Briefing subscriptions, delivery history and Snap Apps

Revision ID: 0001
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('briefing_subscriptions',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('topics', postgresql.JSONB(), server_default='[]', nullable=False),
        sa.Column('companies', postgresql.JSONB(), server_default='[]', nullable=False),
        sa.Column('schedule', postgresql.JSONB(), nullable=False),
        sa.Column('delivery_method', sa.String(), server_default='imessage', nullable=False),
        sa.Column('webhook_url', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('last_delivered_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_briefing_subscriptions_id'), 'briefing_subscriptions', ['id'], unique=False)
    op.create_index(op.f('ix_briefing_subscriptions_user_id'), 'briefing_subscriptions', ['user_id'], unique=False)

    op.create_table('briefing_deliveries',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('subscription_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('content', sa.String(), nullable=False),
        sa.Column('news_items', postgresql.JSONB(), server_default='[]', nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('error', sa.String(), nullable=True),
        sa.Column('delivered_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['subscription_id'], ['briefing_subscriptions.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_briefing_deliveries_id'), 'briefing_deliveries', ['id'], unique=False)
    op.create_index(op.f('ix_briefing_deliveries_subscription_id'), 'briefing_deliveries', ['subscription_id'], unique=False)

    op.create_table('snap_apps',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('subtitle', sa.String(), nullable=True),
        sa.Column('source_url', sa.String(), nullable=True),
        sa.Column('data', postgresql.JSONB(), server_default='{}', nullable=False),
        sa.Column('insights', postgresql.JSONB(), server_default='[]', nullable=False),
        sa.Column('actions', postgresql.JSONB(), server_default='[]', nullable=False),
        sa.Column('creator_id', sa.String(), nullable=True),
        sa.Column('creator_name', sa.String(), nullable=True),
        sa.Column('view_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('share_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('is_public', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_snap_apps_id'), 'snap_apps', ['id'], unique=False)
    op.create_index(op.f('ix_snap_apps_creator_id'), 'snap_apps', ['creator_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_snap_apps_creator_id'), table_name='snap_apps')
    op.drop_index(op.f('ix_snap_apps_id'), table_name='snap_apps')
    op.drop_table('snap_apps')
    op.drop_index(op.f('ix_briefing_deliveries_subscription_id'), table_name='briefing_deliveries')
    op.drop_index(op.f('ix_briefing_deliveries_id'), table_name='briefing_deliveries')
    op.drop_table('briefing_deliveries')
    op.drop_index(op.f('ix_briefing_subscriptions_user_id'), table_name='briefing_subscriptions')
    op.drop_index(op.f('ix_briefing_subscriptions_id'), table_name='briefing_subscriptions')
    op.drop_table('briefing_subscriptions')
