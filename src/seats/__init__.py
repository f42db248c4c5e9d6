"""
Seat Layout & Adjacency Module

Pure seat-map logic shared by bus creation, seat availability and booking:

- layout.py: fixed seat-map templates per seat type (Seater, Semi-Sleeper, Sleeper)
- adjacency.py: neighbour lookup and gender-privacy restrictions
- schemas.py: seat descriptors and booked-seat info
- exceptions.py: InvalidSeatType, SeatUnavailable, SeatRestrictionConflict
"""

from .schemas import SeatType, Gender, SeatDescriptor, GeneratedLayout, BookedSeatInfo
from .exceptions import InvalidSeatType, SeatUnavailable, SeatRestrictionConflict
from .layout import SEAT_LAYOUT_TEMPLATES, generate_layout, get_available_seat_types, parse_seat_type
from .adjacency import (
    MULTIPLE, get_adjacent_seats, has_adjacent_seats,
    apply_gender_restrictions, find_restriction_conflict
)

__all__ = [
    "SeatType",
    "Gender",
    "SeatDescriptor",
    "GeneratedLayout",
    "BookedSeatInfo",
    "InvalidSeatType",
    "SeatUnavailable",
    "SeatRestrictionConflict",
    "SEAT_LAYOUT_TEMPLATES",
    "generate_layout",
    "get_available_seat_types",
    "parse_seat_type",
    "MULTIPLE",
    "get_adjacent_seats",
    "has_adjacent_seats",
    "apply_gender_restrictions",
    "find_restriction_conflict"
]
