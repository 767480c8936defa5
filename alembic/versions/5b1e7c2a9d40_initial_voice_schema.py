"""initial voice schema

Revision ID: 5b1e7c2a9d40
Revises:
Create Date: 2026-10-19 09:12:31.402118

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '5b1e7c2a9d40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'businesses',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('business_name', sa.String(length=255), nullable=False),
        sa.Column('business_type', sa.String(length=100), nullable=True),
        sa.Column('phone_number', sa.String(length=50), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('services', sa.JSON(), nullable=True),
        sa.Column('service_areas', sa.JSON(), nullable=True),
        sa.Column('owner_email', sa.String(length=255), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'ai_agents',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('business_id', sa.Integer(), sa.ForeignKey('businesses.id'), nullable=False, index=True),
        sa.Column('agent_name', sa.String(length=100), nullable=True),
        sa.Column('greeting_message', sa.Text(), nullable=True),
        sa.Column('configuration', sa.JSON(), nullable=True),
        sa.Column('performance_metrics', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true'), index=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'toll_free_numbers',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('number', sa.String(length=50), nullable=False, unique=True, index=True),
        sa.Column('business_id', sa.Integer(), sa.ForeignKey('businesses.id'), nullable=True, index=True),
        sa.Column('status', sa.String(length=30), nullable=False, server_default='available', index=True),
        sa.Column('assigned_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'calls',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('business_id', sa.Integer(), sa.ForeignKey('businesses.id'), nullable=False, index=True),
        sa.Column('call_id', sa.String(length=255), nullable=False, unique=True, index=True),
        sa.Column('from_number', sa.String(length=50), nullable=False),
        sa.Column('to_number', sa.String(length=50), nullable=False),
        sa.Column('direction', sa.String(length=20), nullable=False, server_default='incoming'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='initiated', index=True),
        sa.Column('ai_agent_id', sa.Integer(), sa.ForeignKey('ai_agents.id'), nullable=True),
        sa.Column('caller_name', sa.String(length=255), nullable=True),
        sa.Column('duration', sa.Integer(), nullable=True),
        sa.Column('outcome', sa.String(length=100), nullable=True),
        sa.Column('recording_url', sa.Text(), nullable=True),
        sa.Column('transcript', sa.Text(), nullable=True),
        sa.Column('answered_at', sa.DateTime(), nullable=True),
        sa.Column('ended_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'conversation_history',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('business_id', sa.Integer(), sa.ForeignKey('businesses.id'), nullable=False, index=True),
        sa.Column('call_id', sa.String(length=255), nullable=True, index=True),
        sa.Column('caller_name', sa.String(length=255), nullable=True),
        sa.Column('caller_phone', sa.String(length=50), nullable=True),
        sa.Column('user_message', sa.Text(), nullable=False),
        sa.Column('ai_response', sa.Text(), nullable=False),
        sa.Column('conversation_context', sa.String(length=50), nullable=True),
        sa.Column('ai_model', sa.String(length=100), nullable=True),
        sa.Column('appointment_booked', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now(), index=True),
    )

    op.create_table(
        'appointments',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('business_id', sa.Integer(), sa.ForeignKey('businesses.id'), nullable=False, index=True),
        sa.Column('customer_name', sa.String(length=255), nullable=False, server_default='Unknown'),
        sa.Column('customer_phone', sa.String(length=50), nullable=False, server_default='Unknown'),
        sa.Column('service_type', sa.String(length=255), nullable=True),
        sa.Column('scheduled_date', sa.DateTime(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='scheduled'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('source', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('business_id', sa.Integer(), sa.ForeignKey('businesses.id'), nullable=False, index=True),
        sa.Column('notification_type', sa.String(length=50), nullable=False, index=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('extra_data', sa.JSON(), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.text('false'), index=True),
        sa.Column('priority', sa.String(length=20), nullable=False, server_default='normal'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now(), index=True),
    )


def downgrade() -> None:
    op.drop_table('notifications')
    op.drop_table('appointments')
    op.drop_table('conversation_history')
    op.drop_table('calls')
    op.drop_table('toll_free_numbers')
    op.drop_table('ai_agents')
    op.drop_table('businesses')
