"""
Seat adjacency and gender-privacy restrictions.

Adjacency is encoded in the seat numbering: every seat has at most one
neighbour, found by pairing even and odd numbers. Single berths (1-5 on each
deck) have none. The helpers here never raise; a seat whose neighbour cannot
be worked out is treated as having no neighbour.
"""

import re
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from src.logger_config import logger
from src.seats.layout import SEAT_LAYOUT_TEMPLATES
from src.seats.schemas import BookedSeatInfo, Gender, SeatType

MULTIPLE = "Multiple"

_DECK_SEAT = re.compile(r"^([LU])(\d+)$")
_NUMERIC_SEAT = re.compile(r"^\d+$")

SEATER_SEAT_COUNT = SEAT_LAYOUT_TEMPLATES[SeatType.SEATER].total_seats

# Paired number range per deck: (first, last)
_PAIRED_RANGES = {
    SeatType.SLEEPER: {"L": (6, 17), "U": (6, 17)},
    SeatType.SEMI_SLEEPER: {"L": (6, 29), "U": (6, 17)},
}

def _pair_number(num: int, even_goes_up: bool) -> int:
    if num % 2 == 0:
        return num + 1 if even_goes_up else num - 1
    return num - 1 if even_goes_up else num + 1

def _resolve_bus_type(bus_type) -> Optional[SeatType]:
    try:
        return SeatType(bus_type)
    except ValueError:
        return None

def get_adjacent_seats(seat_number: str, bus_type: Union[str, SeatType]) -> List[str]:
    """Seat numbers adjacent to ``seat_number`` on a bus of ``bus_type``"""
    if not seat_number or not isinstance(seat_number, str):
        return []

    seat_type = _resolve_bus_type(bus_type)
    adjacent = []

    if seat_type == SeatType.SEATER:
        if _NUMERIC_SEAT.match(seat_number):
            num = int(seat_number)
            if 1 <= num <= SEATER_SEAT_COUNT:
                # Odd seats pair with the next seat, even seats with the previous one
                adjacent.append(str(_pair_number(num, even_goes_up=False)))

    elif seat_type in _PAIRED_RANGES:
        match = _DECK_SEAT.match(seat_number)
        if match:
            level, num = match.group(1), int(match.group(2))
            first, last = _PAIRED_RANGES[seat_type][level]
            if first <= num <= last:
                adjacent.append(f"{level}{_pair_number(num, even_goes_up=True)}")

    logger.debug(f"Adjacent seats for {seat_number} ({bus_type}): {adjacent}")
    return [seat for seat in adjacent if seat != seat_number]

def has_adjacent_seats(seat_number: str, bus_type: Union[str, SeatType]) -> bool:
    return len(get_adjacent_seats(seat_number, bus_type)) > 0

def _gender_value(gender) -> str:
    return gender.value if isinstance(gender, Gender) else str(gender)

def apply_gender_restrictions(
    available_seats: Sequence[Mapping],
    booked_seat_groups: Iterable[Iterable[BookedSeatInfo]],
    bus_type: Union[str, SeatType]
) -> List[dict]:
    """
    Mark available seats that sit next to a seat whose passenger asked for
    gender privacy.

    Returns copies of ``available_seats``. A marked seat gets
    ``gender_restriction`` (the booked passenger's gender) and
    ``restricted_by`` (the booked seat). Two different genders restricting
    the same seat turn it into ``"Multiple"``, meaning nobody may take it.
    """
    seat_map: Dict[str, dict] = {}
    for seat in available_seats:
        seat_number = seat.get("seat_number")
        if seat_number:
            seat_map[seat_number] = dict(seat)

    for group in booked_seat_groups:
        for booked in group:
            if not booked.gender_preference:
                continue

            gender = _gender_value(booked.passenger_gender)
            for adjacent_number in get_adjacent_seats(booked.seat_number, bus_type):
                seat = seat_map.get(adjacent_number)
                if seat is None:
                    continue

                current = seat.get("gender_restriction")
                if not current:
                    seat["gender_restriction"] = gender
                    seat["restricted_by"] = booked.seat_number
                elif current != gender:
                    seat["gender_restriction"] = MULTIPLE

    return list(seat_map.values())

def find_restriction_conflict(
    seat_number: str,
    passenger_gender: Union[str, Gender],
    booked_seats: Iterable[BookedSeatInfo],
    bus_type: Union[str, SeatType]
) -> Optional[BookedSeatInfo]:
    """First booked neighbour whose privacy request excludes ``passenger_gender``"""
    adjacent = get_adjacent_seats(seat_number, bus_type)
    if not adjacent:
        return None

    requested_gender = _gender_value(passenger_gender)
    for booked in booked_seats:
        if booked.seat_number not in adjacent or not booked.gender_preference:
            continue
        if _gender_value(booked.passenger_gender) != requested_gender:
            return booked
        logger.debug(f"Seat {seat_number}: neighbour {booked.seat_number} has the same gender, allowed")

    return None
