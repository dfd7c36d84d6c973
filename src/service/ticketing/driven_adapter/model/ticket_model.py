from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class TicketModel(Base):
    __tablename__ = 'ticket'

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)  # UUID7
    token: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    event_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('event.id'), nullable=False, index=True
    )
    ticket_type_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('ticket_type.id'), nullable=False
    )
    attendee_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('attendee.id'), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='pending')
    capacity_held: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    qr_code: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    checked_in_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    check_in_meta: Mapped[Optional[dict]] = mapped_column(JSONB, nullable=True)
    cancellation_reason: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    __table_args__ = (
        # Reminder fan-out and the pending-expiry sweep
        Index('ix_ticket_event_status', 'event_id', 'status'),
        Index('ix_ticket_status_created_at', 'status', 'created_at'),
    )
