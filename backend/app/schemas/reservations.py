"""Reservation schemas."""

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.models.reservations import ReservationStatus


class ReservationCreate(BaseModel):
    """Create reservation schema.

    Customer fields fall back to the caller's profile when omitted.
    """
    restaurant_id: str
    table_id: Optional[str] = None
    date: dt.date
    time: dt.time
    guest_count: int
    customer_name: Optional[str] = Field(None, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    occasion: Optional[str] = Field(None, max_length=100)
    special_request: Optional[str] = None

    @field_validator("time")
    @classmethod
    def validate_local_time(cls, v: dt.time) -> dt.time:
        # Slots are restaurant wall-clock times
        if v.tzinfo is not None:
            raise ValueError("time must be a local time without a UTC offset")
        return v


class ReservationStatusUpdate(BaseModel):
    status: Optional[str] = None


class ReservationCancel(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


class DepositRequest(BaseModel):
    amount: Decimal


class ReservationResponse(BaseModel):
    """Reservation response schema."""
    id: str
    restaurant_id: str
    table_id: Optional[str] = None
    user_id: Optional[str] = None
    customer_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    date: dt.date
    time: dt.time
    guest_count: int
    status: ReservationStatus
    deposit_paid: bool = False
    deposit_amount: Optional[float] = None
    occasion: Optional[str] = None
    special_request: Optional[str] = None
    qr_code: Optional[str] = None
    arrived_at: Optional[dt.datetime] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    model_config = ConfigDict(from_attributes=True)
