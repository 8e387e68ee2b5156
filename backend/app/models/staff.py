"""Staff assignment model."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Boolean, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Staff(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Links a staff user to the restaurant they work at."""

    __tablename__ = "staff"
    __table_args__ = (
        UniqueConstraint("user_id", "restaurant_id", name="uq_staff_user_restaurant"),
    )

    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    restaurant_id: Mapped[str] = mapped_column(ForeignKey("restaurants.id"), nullable=False, index=True)
    position: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)  # host, waiter, manager
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    user = relationship("User")
    restaurant = relationship("Restaurant", back_populates="staff")
