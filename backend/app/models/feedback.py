"""Customer review model."""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship, validates

from app.db.base import Base, new_id
from app.models.validators import star_rating


class Review(Base):
    """A 1-5 star review of a restaurant. Read-only once written, apart from
    the owner's response."""
    __tablename__ = "reviews"

    id = Column(String(36), primary_key=True, default=new_id)
    restaurant_id = Column(String(36), ForeignKey("restaurants.id"), nullable=False, index=True)
    reservation_id = Column(String(36), ForeignKey("reservations.id"), nullable=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=True)

    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    customer_name = Column(String(200), nullable=True)

    # Owner reply
    response = Column(Text, nullable=True)
    responded_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    restaurant = relationship("Restaurant")

    @validates('rating')
    def _validate_rating(self, key, value):
        return star_rating(key, value)
