"""
Seat layout templates.

Each seat type has one fixed template. A bus gets its own copy of the
template's seat map when it is created; the numbering below is what existing
seat maps were persisted with, so it must not drift.
"""

from typing import Callable, Dict, List, NamedTuple, Tuple, Union

from src.seats.exceptions import InvalidSeatType
from src.seats.schemas import GeneratedLayout, SeatDescriptor, SeatType

SINGLE_BERTHS_PER_DECK = 5

class SeatLayoutTemplate(NamedTuple):
    total_seats: int
    layout: str
    build: Callable[[], Tuple[SeatDescriptor, ...]]

def _paired_position(col: int) -> str:
    # Second column of a pair sits at the window
    return "window" if col == 2 else "aisle"

def _single_berths(prefix: str, deck: str) -> List[SeatDescriptor]:
    return [
        SeatDescriptor(
            seat_number=f"{prefix}{row}",
            row=row,
            column=1,
            type="sleeper",
            position="window",
            deck=deck,
        )
        for row in range(1, SINGLE_BERTHS_PER_DECK + 1)
    ]

def _paired_block(
    prefix: str,
    first_number: int,
    rows: int,
    seat_class: str,
    deck: str
) -> List[SeatDescriptor]:
    """Rows of two seats at columns 3 and 4, numbered row-major"""
    seats = []
    number = first_number
    for row in range(1, rows + 1):
        for col in (1, 2):
            seats.append(SeatDescriptor(
                seat_number=f"{prefix}{number}",
                row=row,
                column=col + 2,
                type=seat_class,
                position=_paired_position(col),
                deck=deck,
            ))
            number += 1
    return seats

def _build_seater() -> Tuple[SeatDescriptor, ...]:
    seats = []
    number = 1

    # Left column: single window seats
    for row in range(1, 11):
        seats.append(SeatDescriptor(
            seat_number=str(number),
            row=row,
            column=1,
            type="seater",
            position="window",
            deck="lower",
        ))
        number += 1

    # Right side: aisle, middle, window
    positions = {1: "aisle", 2: "middle", 3: "window"}
    for row in range(1, 11):
        for col in (1, 2, 3):
            seats.append(SeatDescriptor(
                seat_number=str(number),
                row=row,
                column=col + 1,
                type="seater",
                position=positions[col],
                deck="lower",
            ))
            number += 1

    return tuple(seats)

def _build_semi_sleeper() -> Tuple[SeatDescriptor, ...]:
    seats = _single_berths("L", "lower")
    seats += _paired_block("L", SINGLE_BERTHS_PER_DECK + 1, rows=12, seat_class="seater", deck="lower")
    seats += _single_berths("U", "upper")
    seats += _paired_block("U", SINGLE_BERTHS_PER_DECK + 1, rows=6, seat_class="sleeper", deck="upper")
    return tuple(seats)

def _build_sleeper() -> Tuple[SeatDescriptor, ...]:
    seats = _single_berths("L", "lower")
    seats += _paired_block("L", SINGLE_BERTHS_PER_DECK + 1, rows=6, seat_class="sleeper", deck="lower")
    seats += _single_berths("U", "upper")
    # Upper pairs start at U7; there is no U6 in a sleeper seat map
    seats += _paired_block("U", SINGLE_BERTHS_PER_DECK + 2, rows=6, seat_class="sleeper", deck="upper")
    return tuple(seats)

SEAT_LAYOUT_TEMPLATES: Dict[SeatType, SeatLayoutTemplate] = {
    SeatType.SEATER: SeatLayoutTemplate(total_seats=40, layout="2x2", build=_build_seater),
    SeatType.SEMI_SLEEPER: SeatLayoutTemplate(total_seats=46, layout="2x2+1x2", build=_build_semi_sleeper),
    SeatType.SLEEPER: SeatLayoutTemplate(total_seats=34, layout="1x2", build=_build_sleeper),
}

def parse_seat_type(seat_type: Union[str, SeatType]) -> SeatType:
    """Resolve a seat type name, raising InvalidSeatType for unknown names"""
    try:
        return SeatType(seat_type)
    except ValueError:
        raise InvalidSeatType(seat_type)

def generate_layout(seat_type: Union[str, SeatType]) -> GeneratedLayout:
    """Build the seat map of a seat type from its template"""
    resolved = parse_seat_type(seat_type)
    template = SEAT_LAYOUT_TEMPLATES.get(resolved)

    if template is None or template.total_seats == 0:
        raise InvalidSeatType(
            seat_type,
            f"Seat layout for {resolved.value} is not yet configured"
        )

    return GeneratedLayout(
        seat_type=resolved,
        total_seats=template.total_seats,
        layout=template.layout,
        seats=template.build(),
    )

def get_available_seat_types() -> List[str]:
    """Seat types that have a configured layout"""
    return [
        seat_type.value
        for seat_type, template in SEAT_LAYOUT_TEMPLATES.items()
        if template.total_seats > 0
    ]
