from pydantic import BaseModel, Field, validator
from typing import List, Optional
from datetime import datetime, date
from enum import Enum
import re

from src.seats.schemas import SeatType, Gender
from src.routes.schemas import Route

BUS_NUMBER_PATTERN = re.compile(r"^[A-Z]{2}\d{2}[A-Z]{2}\d{4}$")

class BusType(str, Enum):
    AC = "AC"
    NON_AC = "Non-AC"
    VOLVO = "Volvo"
    LUXURY = "Luxury"

class Amenity(str, Enum):
    WIFI = "WiFi"
    CHARGING_POINT = "Charging Point"
    WATER_BOTTLE = "Water Bottle"
    BLANKET = "Blanket"
    PILLOW = "Pillow"
    TV = "TV"
    READING_LIGHT = "Reading Light"
    EMERGENCY_EXIT = "Emergency Exit"
    GPS_TRACKING = "GPS Tracking"

class Weekday(str, Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

class TimeSlot(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"

def _normalize_bus_number(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip().upper()
    if not BUS_NUMBER_PATTERN.match(value):
        raise ValueError(
            f"{value} is not a valid bus number! Format should be AA00AA0000 (e.g., TN01AB1234)"
        )
    return value

def _check_days(value: Optional[List[Weekday]]) -> Optional[List[Weekday]]:
    if value is not None and len(value) == 0:
        raise ValueError("At least one operating day must be selected")
    return value

class BusBase(BaseModel):
    name: str = Field(..., min_length=1)
    bus_number: str
    bus_type: BusType
    amenities: List[Amenity] = []
    days: List[Weekday] = [day.value for day in Weekday]
    operator: str = Field(..., min_length=1)
    images: List[str] = []

    @validator("bus_number")
    def validate_bus_number(cls, v):
        return _normalize_bus_number(v)

    @validator("days")
    def validate_days(cls, v):
        return _check_days(v)

    class Config:
        use_enum_values = True

class BusCreate(BusBase):
    # Kept as a plain string so an unknown seat type reaches the layout generator
    seat_type: str

class BusUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    bus_number: Optional[str] = None
    bus_type: Optional[BusType] = None
    amenities: Optional[List[Amenity]] = None
    days: Optional[List[Weekday]] = None
    operator: Optional[str] = Field(None, min_length=1)
    images: Optional[List[str]] = None
    is_active: Optional[bool] = None

    @validator("*")
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @validator("bus_number")
    def validate_bus_number(cls, v):
        return _normalize_bus_number(v)

    @validator("days")
    def validate_days(cls, v):
        return _check_days(v)

    class Config:
        use_enum_values = True

class Bus(BusBase):
    id: int
    owner_id: Optional[int] = None
    seat_type: SeatType
    total_seats: int
    rating: float = 0
    review_count: int = 0
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True

class BusDetail(BaseModel):
    bus: Bus
    routes: List[Route] = []

class BusSearch(BaseModel):
    source: str
    destination: str
    travel_date: date
    bus_types: Optional[List[BusType]] = None
    operator: Optional[str] = None
    amenities: Optional[List[Amenity]] = None
    time_slot: Optional[TimeSlot] = None
    sort_by: Optional[str] = None
    sort_order: str = "asc"

class BusSearchResult(BaseModel):
    route: Route
    bus: Bus
    available_seats: int
    booked_seats: int

class BusSearchResponse(BaseModel):
    count: int
    results: List[BusSearchResult]

# Seat availability
class AdjacentBookedSeat(BaseModel):
    seat_number: str
    gender: Gender
    has_gender_preference: bool

class SeatStatus(BaseModel):
    """One seat of the layout with its booking state for a journey"""
    seat_number: str
    row: int
    column: int
    type: str
    position: str
    deck: str
    is_booked: bool
    booked_by_gender: Optional[Gender] = None
    gender_restriction: str = "Any"  # Male, Female, Multiple or Any
    restricted_by: Optional[str] = None
    has_adjacent: bool
    adjacent_booked_seats: List[AdjacentBookedSeat] = []

class SeatAvailability(BaseModel):
    bus_id: int
    route_id: int
    journey_date: date
    bus_type: SeatType
    layout: str
    total_seats: int
    available_seats: int
    seats: List[SeatStatus]

class SeatLayoutResponse(BaseModel):
    bus_id: int
    layout: str
    total_seats: int
    seats: List[dict]

    class Config:
        from_attributes = True

class SeatTypeInfo(BaseModel):
    seat_type: SeatType
    total_seats: int
    layout: str
