from pydantic import BaseModel, Field, validator
from typing import Dict, List, Optional
from datetime import datetime, date
from enum import Enum

class ReviewStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REPORTED = "reported"

class ReviewCreate(BaseModel):
    bus_id: int
    booking_id: int
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(..., min_length=1, max_length=2000)

    @validator("comment")
    def strip_comment(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Comment cannot be blank")
        return v

class Review(BaseModel):
    id: int
    user_id: int
    bus_id: int
    booking_id: int
    rating: int
    comment: str
    is_approved: bool
    is_reported: bool
    created_at: datetime

    class Config:
        from_attributes = True

class PublicReview(BaseModel):
    """Approved review as shown on a bus page"""
    id: int
    rating: int
    comment: str
    user_name: Optional[str] = None
    created_at: datetime

class MyReview(Review):
    bus_name: str
    bus_number: str
    journey_date: date

class AdminReview(Review):
    user_name: str
    user_email: str
    bus_name: str
    bus_number: str

class BusReviews(BaseModel):
    bus_id: int
    count: int
    average_rating: float
    rating_distribution: Dict[int, int]
    reviews: List[PublicReview]
