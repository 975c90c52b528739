"""create scheduling tables

Revision ID: 5b2f0c9a1d3e
Revises:
Create Date: 2026-10-19 10:12:44.518203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '5b2f0c9a1d3e'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    # 1. Salons
    op.create_table(
        'salons',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('timezone', sa.String(50), nullable=False),
        sa.Column('business_hours', sa.JSON(), nullable=True),
        sa.Column('address', sa.String(300), nullable=True),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('settings', sa.JSON(), nullable=True),
        sa.Column('cancellation_policy', sa.Text(), nullable=True),
        sa.Column('is_archived', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )

    # 2. Catalog
    op.create_table(
        'professionals',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('salon_id', sa.Uuid(), sa.ForeignKey('salons.id'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='STAFF'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('google_calendar_id', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_index('ix_professionals_salon_id', 'professionals', ['salon_id'])

    op.create_table(
        'services',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('salon_id', sa.Uuid(), sa.ForeignKey('salons.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=True),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.CheckConstraint('duration_minutes > 0', name='ck_services_duration_positive'),
    )
    op.create_index('ix_services_salon_id', 'services', ['salon_id'])
    op.create_index('ix_services_is_active', 'services', ['is_active'])

    op.create_table(
        'professional_services',
        sa.Column('professional_id', sa.Uuid(), sa.ForeignKey('professionals.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('service_id', sa.Uuid(), sa.ForeignKey('services.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'customers',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('salon_id', sa.Uuid(), sa.ForeignKey('salons.id'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('phone', sa.String(20), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('preferences', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.UniqueConstraint('salon_id', 'phone', name='uq_customers_salon_phone'),
    )
    op.create_index('ix_customers_salon_id', 'customers', ['salon_id'])

    # 3. Availability
    op.create_table(
        'availability_rules',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('professional_id', sa.Uuid(), sa.ForeignKey('professionals.id', ondelete='CASCADE'), nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.String(5), nullable=False),
        sa.Column('end_time', sa.String(5), nullable=False),
        sa.Column('is_break', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_index('ix_availability_rules_professional_id', 'availability_rules', ['professional_id'])

    op.create_table(
        'schedule_overrides',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('salon_id', sa.Uuid(), sa.ForeignKey('salons.id'), nullable=False),
        sa.Column('professional_id', sa.Uuid(), sa.ForeignKey('professionals.id', ondelete='CASCADE'), nullable=True),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('reason', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_index('ix_schedule_overrides_salon_id', 'schedule_overrides', ['salon_id'])
    op.create_index('ix_schedule_overrides_professional_id', 'schedule_overrides', ['professional_id'])

    # 4. Appointments
    op.create_table(
        'appointments',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('salon_id', sa.Uuid(), sa.ForeignKey('salons.id'), nullable=False),
        sa.Column('customer_id', sa.Uuid(), sa.ForeignKey('customers.id'), nullable=False),
        sa.Column('professional_id', sa.Uuid(), sa.ForeignKey('professionals.id'), nullable=False),
        sa.Column('service_id', sa.Uuid(), sa.ForeignKey('services.id'), nullable=False),
        sa.Column('starts_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('ends_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='scheduled'),
        sa.Column('google_event_id', sa.String(), nullable=True),
        sa.Column('sync_status', sa.String(20), server_default='pending'),
        sa.Column('sync_attempts', sa.Integer(), server_default='0'),
        sa.Column('last_sync_error', sa.Text(), nullable=True),
        sa.Column('last_synced_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cancellation_reason', sa.Text(), nullable=True),
        sa.CheckConstraint('ends_at > starts_at', name='ck_appointments_interval'),
    )
    op.create_index('ix_appointments_salon_id', 'appointments', ['salon_id'])
    op.create_index('ix_appointments_customer_id', 'appointments', ['customer_id'])
    op.create_index('ix_appointments_professional_starts_at', 'appointments', ['professional_id', 'starts_at'])

    # 5. Calendar integrations
    op.create_table(
        'calendar_integrations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('salon_id', sa.Uuid(), sa.ForeignKey('salons.id'), nullable=False),
        sa.Column('provider', sa.String(), server_default='google'),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true()),
        sa.Column('access_token_encrypted', sa.LargeBinary(), nullable=True),
        sa.Column('refresh_token_encrypted', sa.LargeBinary(), nullable=True),
        sa.Column('token_expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('provider_config', sa.JSON(), nullable=True),
        sa.Column('last_sync_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_sync_status', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_index('ix_calendar_integrations_salon_id', 'calendar_integrations', ['salon_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('calendar_integrations')
    op.drop_table('appointments')
    op.drop_table('schedule_overrides')
    op.drop_table('availability_rules')
    op.drop_table('customers')
    op.drop_table('professional_services')
    op.drop_table('services')
    op.drop_table('professionals')
    op.drop_table('salons')
