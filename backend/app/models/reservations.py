"""Reservation model."""

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import (
    Column, Integer, String, DateTime, Date, Time, Numeric, Text, Boolean, ForeignKey,
    Enum as SQLEnum,
)
from sqlalchemy.orm import relationship, validates

from app.db.base import Base, new_id
from app.models.validators import positive


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReservationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset({ReservationStatus.COMPLETED, ReservationStatus.CANCELLED})

# Statuses that still hold a table for their slot
OPEN_STATUSES = frozenset({ReservationStatus.PENDING, ReservationStatus.CONFIRMED})


class Reservation(Base):
    """A booked slot at a restaurant, optionally bound to a table.

    Rows are never deleted; cancelled and completed reservations remain as
    history.
    """
    __tablename__ = "reservations"

    id = Column(String(36), primary_key=True, default=new_id)
    restaurant_id = Column(String(36), ForeignKey("restaurants.id"), nullable=False, index=True)
    table_id = Column(String(36), ForeignKey("tables.id"), nullable=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)

    # Guest info
    customer_name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)

    # Slot
    date = Column(Date, nullable=False, index=True)
    time = Column(Time, nullable=False)
    guest_count = Column(Integer, nullable=False)

    status = Column(
        SQLEnum(ReservationStatus, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        default=ReservationStatus.PENDING,
        nullable=False,
    )

    # Deposit
    deposit_paid = Column(Boolean, default=False, nullable=False)
    deposit_amount = Column(Numeric(10, 2), nullable=True)

    occasion = Column(String(100), nullable=True)  # birthday, anniversary, business
    special_request = Column(Text, nullable=True)
    qr_code = Column(String(20), unique=True, nullable=True)
    arrived_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    # Relationships
    restaurant = relationship("Restaurant")
    table = relationship("Table")

    @validates('guest_count')
    def _validate_guest_count(self, key, value):
        return positive(key, value)

    @validates('deposit_amount')
    def _validate_deposit(self, key, value):
        return positive(key, value)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES
