"""Restaurant and table schemas."""

from datetime import datetime, time
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.restaurant import TableStatus


# Restaurants

class RestaurantCreate(BaseModel):
    """Create restaurant schema (global admins only)."""
    name: str = Field(..., min_length=1, max_length=200)
    owner_id: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    cuisine_type: Optional[str] = None
    zone: Optional[str] = None
    price_range: str = Field("$$", pattern=r"^\${1,4}$")
    image_url: Optional[str] = None
    open_time: Optional[time] = None
    close_time: Optional[time] = None


class RestaurantResponse(BaseModel):
    """Restaurant response schema."""
    id: str
    owner_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    cuisine_type: Optional[str] = None
    zone: Optional[str] = None
    price_range: Optional[str] = None
    image_url: Optional[str] = None
    is_active: bool = True
    open_time: Optional[time] = None
    close_time: Optional[time] = None
    rating: float = 0
    review_count: int = 0

    model_config = ConfigDict(from_attributes=True)


# Tables

class TableCreate(BaseModel):
    """Create table request. Number is fixed once created."""
    restaurant_id: Optional[str] = None  # defaults to the caller's restaurant
    number: int = Field(..., ge=1)
    capacity: int = Field(4, ge=1, le=50)
    position_x: float = 0
    position_y: float = 0
    shape: str = Field("square", pattern=r"^(round|square|rectangle)$")


class TableUpdate(BaseModel):
    """Update table layout. Status goes through the status endpoint."""
    capacity: Optional[int] = Field(None, ge=1, le=50)
    position_x: Optional[float] = None
    position_y: Optional[float] = None
    shape: Optional[str] = Field(None, pattern=r"^(round|square|rectangle)$")


class TableStatusUpdate(BaseModel):
    # Plain string so unknown values reach the status check and get its message
    status: Optional[str] = None


class TableResponse(BaseModel):
    """Table response model."""
    id: str
    restaurant_id: str
    number: int
    capacity: int
    status: TableStatus
    position_x: float = 0
    position_y: float = 0
    shape: Optional[str] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
