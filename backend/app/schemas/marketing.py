"""Offer schemas."""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class OfferCreate(BaseModel):
    """Create an offer. Restaurant defaults to the caller's own."""
    restaurant_id: Optional[str] = None
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    discount: Optional[Decimal] = Field(None, ge=0, le=100)
    valid_until: date


class OfferUpdate(BaseModel):
    """Partial update; ``is_active`` switches the offer on or off."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    discount: Optional[Decimal] = Field(None, ge=0, le=100)
    valid_until: Optional[date] = None
    is_active: Optional[bool] = None


class OfferResponse(BaseModel):
    id: str
    restaurant_id: str
    title: str
    description: Optional[str] = None
    discount: Optional[float] = None
    valid_until: date
    is_active: bool = True

    model_config = ConfigDict(from_attributes=True)
