"""init_ticketing_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18

Schema:
- event: Tenant-scoped events, slug unique per tenant
- ticket_type: Priced inventory with quantity / quantity_sold counters
- attendee: One row per (lower-cased) email
- ticket: Lifecycle pending -> issued -> used, or -> cancelled
- transaction: One payment attempt per paid ticket
- processed_webhook_event: Provider event ids already applied

Note: ck_ticket_type_no_oversell backs the conditional increment in the
capacity ledger; the ledger never relies on it for normal flow.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(*, updated: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        )
    ]
    if updated:
        columns.append(
            sa.Column(
                'updated_at',
                sa.DateTime(timezone=True),
                server_default=sa.text('now()'),
                nullable=False,
            )
        )
    return columns


def upgrade() -> None:
    """Create all tables with final schema."""

    op.create_table(
        'event',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('tenant_id', UUID(as_uuid=True), nullable=False),
        sa.Column('slug', sa.String(length=200), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('timezone', sa.String(length=64), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('checkin_opens_before_minutes', sa.Integer(), nullable=True),
        sa.Column('checkin_closes_after_minutes', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tenant_id', 'slug', name='uq_event_tenant_slug'),
    )
    op.create_index(op.f('ix_event_tenant_id'), 'event', ['tenant_id'], unique=False)

    op.create_table(
        'ticket_type',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('event_id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False),
        sa.Column('is_paid', sa.Boolean(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=True),
        sa.Column('quantity_sold', sa.Integer(), server_default='0', nullable=False),
        sa.Column('is_visible', sa.Boolean(), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['event_id'], ['event.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('quantity_sold >= 0', name='ck_ticket_type_sold_non_negative'),
        sa.CheckConstraint(
            'quantity IS NULL OR quantity_sold <= quantity', name='ck_ticket_type_no_oversell'
        ),
    )
    op.create_index(op.f('ix_ticket_type_event_id'), 'ticket_type', ['event_id'], unique=False)

    op.create_table(
        'attendee',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column('company', sa.String(length=255), nullable=True),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )

    op.create_table(
        'ticket',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('token', sa.String(length=64), nullable=False),
        sa.Column('event_id', UUID(as_uuid=True), nullable=False),
        sa.Column('ticket_type_id', UUID(as_uuid=True), nullable=False),
        sa.Column('attendee_id', UUID(as_uuid=True), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('capacity_held', sa.Boolean(), nullable=False),
        sa.Column('qr_code', sa.Text(), nullable=True),
        sa.Column('checked_in_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('check_in_meta', JSONB(), nullable=True),
        sa.Column('cancellation_reason', sa.String(length=100), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['event_id'], ['event.id']),
        sa.ForeignKeyConstraint(['ticket_type_id'], ['ticket_type.id']),
        sa.ForeignKeyConstraint(['attendee_id'], ['attendee.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('token'),
    )
    op.create_index(op.f('ix_ticket_event_id'), 'ticket', ['event_id'], unique=False)
    op.create_index(op.f('ix_ticket_attendee_id'), 'ticket', ['attendee_id'], unique=False)
    op.create_index('ix_ticket_event_status', 'ticket', ['event_id', 'status'], unique=False)
    op.create_index(
        'ix_ticket_status_created_at', 'ticket', ['status', 'created_at'], unique=False
    )

    op.create_table(
        'transaction',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('ticket_id', UUID(as_uuid=True), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('payment_intent_id', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['ticket_id'], ['ticket.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('ticket_id'),
        sa.UniqueConstraint('payment_intent_id'),
    )

    op.create_table(
        'processed_webhook_event',
        sa.Column('provider_event_id', sa.String(length=255), nullable=False),
        sa.Column('event_type', sa.String(length=100), nullable=False),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('provider_event_id'),
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('processed_webhook_event')
    op.drop_table('transaction')
    op.drop_index('ix_ticket_status_created_at', table_name='ticket')
    op.drop_index('ix_ticket_event_status', table_name='ticket')
    op.drop_index(op.f('ix_ticket_attendee_id'), table_name='ticket')
    op.drop_index(op.f('ix_ticket_event_id'), table_name='ticket')
    op.drop_table('ticket')
    op.drop_table('attendee')
    op.drop_index(op.f('ix_ticket_type_event_id'), table_name='ticket_type')
    op.drop_table('ticket_type')
    op.drop_index(op.f('ix_event_tenant_id'), table_name='event')
    op.drop_table('event')
