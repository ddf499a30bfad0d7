"""members_flow_subscriptions

Revision ID: 3f9c2d71a8e4
Revises:
Create Date: 2025-10-02 18:42:11.503127

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c2d71a8e4'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'members',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('uid', sa.String(), nullable=False),
        sa.Column('owner_id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('last_name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('role', sa.String(), nullable=False),
        sa.Column('is_owner_profile', sa.Boolean(), nullable=False),
        sa.Column('subscription_plan', sa.String(), nullable=True),
        sa.Column('subscription_status', sa.String(), nullable=True),
        sa.Column('trial_ends_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_members_id'), 'members', ['id'], unique=False)
    op.create_index(op.f('ix_members_uid'), 'members', ['uid'], unique=True)
    op.create_index(op.f('ix_members_owner_id'), 'members', ['owner_id'], unique=False)

    # Gateway sub-record, one per member
    op.create_table(
        'flow_subscriptions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('member_id', sa.Integer(), nullable=False),
        sa.Column('customer_id', sa.String(), nullable=False),
        sa.Column('subscription_id', sa.String(), nullable=False),
        sa.Column('plan_name', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('activated_at', sa.DateTime(), nullable=True),
        sa.Column('subscription_started_at', sa.DateTime(), nullable=True),
        sa.Column('last_payment_status', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['member_id'], ['members.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('member_id'),
    )
    op.create_index(op.f('ix_flow_subscriptions_id'), 'flow_subscriptions', ['id'], unique=False)
    op.create_index(op.f('ix_flow_subscriptions_customer_id'), 'flow_subscriptions', ['customer_id'], unique=True)


def downgrade() -> None:
    op.drop_index(op.f('ix_flow_subscriptions_customer_id'), table_name='flow_subscriptions')
    op.drop_index(op.f('ix_flow_subscriptions_id'), table_name='flow_subscriptions')
    op.drop_table('flow_subscriptions')
    op.drop_index(op.f('ix_members_owner_id'), table_name='members')
    op.drop_index(op.f('ix_members_uid'), table_name='members')
    op.drop_index(op.f('ix_members_id'), table_name='members')
    op.drop_table('members')
