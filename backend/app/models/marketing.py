"""Restaurant offer / promotion model."""

from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Date, Numeric, Text, Boolean, ForeignKey
from sqlalchemy.orm import relationship, validates

from app.db.base import Base, new_id
from app.models.validators import non_negative


class Offer(Base):
    """A discount a restaurant advertises until ``valid_until``."""
    __tablename__ = "offers"

    id = Column(String(36), primary_key=True, default=new_id)
    restaurant_id = Column(String(36), ForeignKey("restaurants.id"), nullable=False, index=True)

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    discount = Column(Numeric(5, 2), nullable=True)  # percent off
    valid_until = Column(Date, nullable=False)
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    restaurant = relationship("Restaurant")

    @validates('discount')
    def _validate_discount(self, key, value):
        return non_negative(key, value)
