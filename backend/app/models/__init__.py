"""SQLAlchemy models."""

from app.models.user import User
from app.models.restaurant import Restaurant, Table, TableStatus
from app.models.staff import Staff
from app.models.reservations import (
    Reservation,
    ReservationStatus,
    TERMINAL_STATUSES,
    OPEN_STATUSES,
)
from app.models.feedback import Review
from app.models.marketing import Offer

__all__ = [
    "User",
    "Restaurant",
    "Table",
    "TableStatus",
    "Staff",
    "Reservation",
    "ReservationStatus",
    "TERMINAL_STATUSES",
    "OPEN_STATUSES",
    "Review",
    "Offer",
]
