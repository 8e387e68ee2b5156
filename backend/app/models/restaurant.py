"""Restaurant and floor-plan models."""

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import (
    Column, Integer, String, DateTime, Numeric, Boolean, ForeignKey, Text, Time,
    Float, UniqueConstraint, Enum as SQLEnum,
)
from sqlalchemy.orm import relationship, validates

from app.db.base import Base, new_id
from app.models.validators import aggregate_rating, positive


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TableStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    RESERVED = "reserved"
    MAINTENANCE = "maintenance"


class Restaurant(Base):
    """A restaurant listed on the platform."""
    __tablename__ = "restaurants"

    id = Column(String(36), primary_key=True, default=new_id)
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    address = Column(String(300), nullable=True)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    cuisine_type = Column(String(100), nullable=True)
    zone = Column(String(100), nullable=True)
    price_range = Column(String(4), default="$$")  # $, $$, $$$, $$$$
    image_url = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True)

    # Opening hours, local time
    open_time = Column(Time, nullable=True)
    close_time = Column(Time, nullable=True)

    # Aggregate maintained on review creation
    rating = Column(Numeric(2, 1), default=0)
    review_count = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    # Relationships
    tables = relationship("Table", back_populates="restaurant", order_by="Table.number")
    staff = relationship("Staff", back_populates="restaurant")

    @validates('rating')
    def _validate_rating(self, key, value):
        return aggregate_rating(key, value)

    def is_open_at(self, at) -> bool:
        """True when ``at`` falls inside opening hours.

        Hours that wrap past midnight, or are not configured, never reject.
        """
        if self.open_time is None or self.close_time is None:
            return True
        if self.open_time >= self.close_time:
            return True
        return self.open_time <= at <= self.close_time


class Table(Base):
    """Restaurant table for seating."""
    __tablename__ = "tables"
    __table_args__ = (
        UniqueConstraint("restaurant_id", "number", name="uq_tables_restaurant_number"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    restaurant_id = Column(String(36), ForeignKey("restaurants.id"), nullable=False, index=True)
    number = Column(Integer, nullable=False)
    capacity = Column(Integer, default=4)
    status = Column(
        SQLEnum(TableStatus, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        default=TableStatus.AVAILABLE,
        nullable=False,
    )

    # Floor-plan placement
    position_x = Column(Float, default=0)
    position_y = Column(Float, default=0)
    shape = Column(String(20), default="square")  # round, square, rectangle

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    # Relationships
    restaurant = relationship("Restaurant", back_populates="tables")

    @validates('capacity')
    def _validate_capacity(self, key, value):
        return positive(key, value)

    @validates('number')
    def _validate_number(self, key, value):
        if self.number is not None and value != self.number:
            raise ValueError("Table number cannot be changed after creation")
        return positive(key, value)
