"""
Unit tests for seat layout templates
"""

from pydantic import ValidationError
import pytest

from src.seats import (
    SEAT_LAYOUT_TEMPLATES,
    InvalidSeatType,
    SeatType,
    generate_layout,
    get_adjacent_seats,
    get_available_seat_types,
    parse_seat_type,
)
from src.seats.adjacency import SEATER_SEAT_COUNT


def _numbers(layout):
    return [seat.seat_number for seat in layout.seats]


@pytest.mark.unit
class TestGenerateLayout:
    @pytest.mark.parametrize(
        'seat_type,total,layout_name',
        [
            ('Seater', 40, '2x2'),
            ('Semi-Sleeper', 46, '2x2+1x2'),
            ('Sleeper', 34, '1x2'),
        ],
    )
    def test_seat_count_matches_total(self, seat_type, total, layout_name):
        layout = generate_layout(seat_type)

        assert layout.total_seats == total
        assert layout.layout == layout_name
        assert len(layout.seats) == total

    @pytest.mark.parametrize('seat_type', ['Seater', 'Semi-Sleeper', 'Sleeper'])
    def test_seat_numbers_are_unique(self, seat_type):
        numbers = _numbers(generate_layout(seat_type))
        assert len(set(numbers)) == len(numbers)

    @pytest.mark.parametrize('seat_type', list(SeatType))
    def test_generation_is_deterministic(self, seat_type):
        assert generate_layout(seat_type) == generate_layout(seat_type)

    def test_seater_numbering(self):
        layout = generate_layout(SeatType.SEATER)

        assert _numbers(layout) == [str(n) for n in range(1, 41)]
        assert {seat.deck for seat in layout.seats} == {'lower'}
        assert {seat.type for seat in layout.seats} == {'seater'}

        # Left column holds the first ten seats, all at the window
        left = [seat for seat in layout.seats if seat.column == 1]
        assert [seat.seat_number for seat in left] == [str(n) for n in range(1, 11)]
        assert all(seat.position == 'window' for seat in left)

        seat_11 = layout.seats[10]
        assert (seat_11.row, seat_11.column, seat_11.position) == (1, 2, 'aisle')
        seat_13 = layout.seats[12]
        assert (seat_13.row, seat_13.column, seat_13.position) == (1, 4, 'window')

    def test_semi_sleeper_numbering(self):
        numbers = _numbers(generate_layout('Semi-Sleeper'))

        expected = (
            [f'L{n}' for n in range(1, 30)]
            + [f'U{n}' for n in range(1, 6)]
            + [f'U{n}' for n in range(6, 18)]
        )
        assert numbers == expected

    def test_semi_sleeper_decks_and_classes(self):
        seats = {seat.seat_number: seat for seat in generate_layout('Semi-Sleeper').seats}

        assert seats['L3'].type == 'sleeper'
        assert seats['L3'].deck == 'lower'
        assert seats['L6'].type == 'seater'
        assert seats['L6'].column == 3
        assert seats['L7'].position == 'window'
        assert seats['U10'].type == 'sleeper'
        assert seats['U10'].deck == 'upper'

    def test_sleeper_upper_deck_starts_at_u7(self):
        numbers = _numbers(generate_layout('Sleeper'))

        assert [n for n in numbers if n.startswith('L')] == [f'L{n}' for n in range(1, 18)]
        assert [n for n in numbers if n.startswith('U')] == (
            [f'U{n}' for n in range(1, 6)] + [f'U{n}' for n in range(7, 19)]
        )
        assert 'U6' not in numbers

    def test_sleeper_is_all_berths(self):
        layout = generate_layout('Sleeper')
        assert {seat.type for seat in layout.seats} == {'sleeper'}

    @pytest.mark.parametrize('seat_type', ['Luxury', '', 'seater', None])
    def test_unknown_seat_type_is_rejected(self, seat_type):
        with pytest.raises(InvalidSeatType) as exc_info:
            generate_layout(seat_type)

        assert exc_info.value.seat_type == seat_type
        assert 'Invalid seat type' in str(exc_info.value)

    def test_invalid_seat_type_is_a_validation_error(self):
        with pytest.raises(ValueError):
            generate_layout('Double-Decker')

    def test_layout_is_immutable(self):
        layout = generate_layout('Seater')
        with pytest.raises(ValidationError):
            layout.seats[0].seat_number = '99'


@pytest.mark.unit
def test_parse_seat_type_accepts_enum_and_name():
    assert parse_seat_type('Semi-Sleeper') is SeatType.SEMI_SLEEPER
    assert parse_seat_type(SeatType.SLEEPER) is SeatType.SLEEPER


@pytest.mark.unit
def test_available_seat_types():
    assert get_available_seat_types() == ['Seater', 'Semi-Sleeper', 'Sleeper']


@pytest.mark.unit
class TestUnconfiguredSeatType:
    @pytest.fixture
    def sleeper_without_seats(self, monkeypatch):
        template = SEAT_LAYOUT_TEMPLATES[SeatType.SLEEPER]
        monkeypatch.setitem(SEAT_LAYOUT_TEMPLATES, SeatType.SLEEPER, template._replace(total_seats=0))

    def test_known_type_with_no_seats_is_rejected(self, sleeper_without_seats):
        with pytest.raises(InvalidSeatType) as exc_info:
            generate_layout('Sleeper')

        assert str(exc_info.value) == 'Seat layout for Sleeper is not yet configured'
        assert exc_info.value.seat_type == 'Sleeper'

    def test_unconfigured_type_is_not_offered(self, sleeper_without_seats):
        assert get_available_seat_types() == ['Seater', 'Semi-Sleeper']


@pytest.mark.unit
def test_seater_adjacency_stops_at_last_template_seat():
    last_seat = SEAT_LAYOUT_TEMPLATES[SeatType.SEATER].total_seats

    assert SEATER_SEAT_COUNT == last_seat
    assert get_adjacent_seats(str(last_seat), 'Seater') == [str(last_seat - 1)]
    assert get_adjacent_seats(str(last_seat + 1), 'Seater') == []
