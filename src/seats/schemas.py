from pydantic import BaseModel
from typing import Tuple, Literal
from enum import Enum

class SeatType(str, Enum):
    """Seat type of a bus, decides its seat count and layout"""
    SEATER = "Seater"
    SEMI_SLEEPER = "Semi-Sleeper"
    SLEEPER = "Sleeper"

class Gender(str, Enum):
    """Passenger gender"""
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"

class SeatDescriptor(BaseModel):
    """Single seat in a generated seat map"""
    seat_number: str
    row: int
    column: int
    type: Literal["seater", "sleeper"]
    position: Literal["window", "aisle", "middle"]
    deck: Literal["lower", "upper"]

    class Config:
        frozen = True

class GeneratedLayout(BaseModel):
    """Seat map instantiated from a layout template"""
    seat_type: SeatType
    total_seats: int
    layout: str
    seats: Tuple[SeatDescriptor, ...]

    class Config:
        frozen = True

class BookedSeatInfo(BaseModel):
    """A seat already held by a booking, as seen by the adjacency checks"""
    seat_number: str
    passenger_gender: Gender
    gender_preference: bool = False

    class Config:
        frozen = True
