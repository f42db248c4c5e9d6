from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime, date

class RatingCreate(BaseModel):
    bus_id: int
    booking_id: int
    rating: int = Field(..., ge=1, le=5)

class Rating(BaseModel):
    id: int
    user_id: int
    bus_id: int
    booking_id: int
    rating: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class RatingWithUser(Rating):
    user_name: Optional[str] = None

class MyRating(Rating):
    bus_name: str
    bus_number: str
    journey_date: date

class RatingSubmission(BaseModel):
    created: bool
    rating: Rating

class BusRatings(BaseModel):
    bus_id: int
    count: int
    average_rating: float
    rating_distribution: Dict[int, int]
    ratings: List[RatingWithUser]

class RatingCheck(BaseModel):
    has_rated: bool
    rating: Optional[int] = None
