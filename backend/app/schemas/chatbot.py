"""Chat booking-flow state schemas.

A conversation moves through a fixed sequence of steps, collecting one
piece of the reservation per turn:

    start -> awaiting_restaurant -> awaiting_date -> awaiting_time
          -> awaiting_guests -> awaiting_contact -> confirming -> completed

``BookingDraft`` holds whatever has been gathered so far. Every field is
optional because a draft is filled in across turns.
"""

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ConversationStep(str, Enum):
    START = "start"
    AWAITING_RESTAURANT = "awaiting_restaurant"
    AWAITING_DATE = "awaiting_date"
    AWAITING_TIME = "awaiting_time"
    AWAITING_GUESTS = "awaiting_guests"
    AWAITING_CONTACT = "awaiting_contact"
    CONFIRMING = "confirming"
    COMPLETED = "completed"


class BookingDraft(BaseModel):
    """Reservation fields assembled across chat turns."""

    model_config = ConfigDict(extra="forbid")

    restaurant_id: Optional[str] = None
    date: Optional[dt.date] = None
    time: Optional[dt.time] = None
    guests: Optional[int] = Field(None, ge=1, le=50)
    customer_name: Optional[str] = Field(None, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    table_id: Optional[str] = None

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)


class ConversationStateUpdate(BaseModel):
    """Body for POST /chatbot/state/{chat_id}."""
    step: ConversationStep
    data: Optional[BookingDraft] = None

