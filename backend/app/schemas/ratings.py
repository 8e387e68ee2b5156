"""Review schemas"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Dict, Optional
from datetime import datetime


class ReviewCreate(BaseModel):
    """Create a restaurant review"""
    restaurant_id: str
    reservation_id: Optional[str] = None
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)
    customer_name: Optional[str] = Field(None, max_length=200)


class ReviewReply(BaseModel):
    """Owner reply to a review"""
    response: str = Field(..., min_length=1, max_length=2000)


class ReviewResponse(BaseModel):
    """Review response"""
    id: str
    restaurant_id: str
    reservation_id: Optional[str] = None
    user_id: Optional[str] = None
    rating: int
    comment: Optional[str] = None
    customer_name: Optional[str] = None
    response: Optional[str] = None
    responded_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ReviewStats(BaseModel):
    """Rating summary for one restaurant"""
    restaurant_id: str
    count: int
    average: float
    distribution: Dict[int, int]
