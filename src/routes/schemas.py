from pydantic import BaseModel, Field, validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
import re

_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

def _check_time(value: Optional[str]) -> Optional[str]:
    if value is not None and not _TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM format")
    return value

def _check_not_null(value):
    if value is None:
        raise ValueError("Field cannot be null")
    return value

class RouteBase(BaseModel):
    source: str = Field(..., min_length=1)
    destination: str = Field(..., min_length=1)
    departure_time: str
    arrival_time: str
    duration: Optional[str] = None
    distance: Optional[float] = Field(None, ge=0)
    price: Decimal = Field(..., gt=0)
    boarding_points: List[str] = []
    dropping_points: List[str] = []

    @validator("departure_time", "arrival_time")
    def validate_time(cls, v):
        return _check_time(v)

class RouteCreate(RouteBase):
    bus_id: int

class RouteUpdate(BaseModel):
    source: Optional[str] = Field(None, min_length=1)
    destination: Optional[str] = Field(None, min_length=1)
    departure_time: Optional[str] = None
    arrival_time: Optional[str] = None
    duration: Optional[str] = None
    distance: Optional[float] = Field(None, ge=0)
    price: Optional[Decimal] = Field(None, gt=0)
    boarding_points: Optional[List[str]] = None
    dropping_points: Optional[List[str]] = None
    is_active: Optional[bool] = None

    # Only duration and distance may be cleared
    @validator(
        "source", "destination", "departure_time", "arrival_time", "price",
        "boarding_points", "dropping_points", "is_active"
    )
    def reject_null(cls, v):
        return _check_not_null(v)

    @validator("departure_time", "arrival_time")
    def validate_time(cls, v):
        return _check_time(v)

class Route(RouteBase):
    id: int
    bus_id: int
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True
