"""
Unit tests for seat adjacency and gender-privacy restrictions
"""

import pytest

from src.seats import (
    MULTIPLE,
    BookedSeatInfo,
    Gender,
    apply_gender_restrictions,
    find_restriction_conflict,
    generate_layout,
    get_adjacent_seats,
    has_adjacent_seats,
)


def _available(seat_type, booked=()):
    return [
        seat.dict()
        for seat in generate_layout(seat_type).seats
        if seat.seat_number not in booked
    ]


def _by_number(seats):
    return {seat['seat_number']: seat for seat in seats}


@pytest.mark.unit
class TestGetAdjacentSeats:
    @pytest.mark.parametrize(
        'seat_number,expected',
        [('1', ['2']), ('2', ['1']), ('3', ['4']), ('4', ['3']), ('39', ['40']), ('40', ['39'])],
    )
    def test_seater_pairs_by_parity(self, seat_number, expected):
        assert get_adjacent_seats(seat_number, 'Seater') == expected

    @pytest.mark.parametrize('seat_number', ['0', '41', 'L1', '1A', ' 1', '-2'])
    def test_seater_out_of_range_or_malformed(self, seat_number):
        assert get_adjacent_seats(seat_number, 'Seater') == []

    @pytest.mark.parametrize('seat_number', ['L1', 'L3', 'L5', 'U1', 'U2', 'U5'])
    def test_sleeper_single_berths_are_isolated(self, seat_number):
        assert get_adjacent_seats(seat_number, 'Sleeper') == []

    @pytest.mark.parametrize(
        'seat_number,expected',
        [('L6', ['L7']), ('L7', ['L6']), ('L16', ['L17']), ('L17', ['L16']), ('U8', ['U9'])],
    )
    def test_sleeper_pairs_within_deck(self, seat_number, expected):
        assert get_adjacent_seats(seat_number, 'Sleeper') == expected

    def test_sleeper_u7_pairs_with_missing_u6(self):
        # Sleeper seat maps have no U6; the numbering rule still pairs U7 with it
        assert get_adjacent_seats('U7', 'Sleeper') == ['U6']
        assert get_adjacent_seats('U18', 'Sleeper') == []

    @pytest.mark.parametrize(
        'seat_number,expected',
        [('L6', ['L7']), ('L7', ['L6']), ('L28', ['L29']), ('L29', ['L28']), ('U6', ['U7'])],
    )
    def test_semi_sleeper_pairs(self, seat_number, expected):
        assert get_adjacent_seats(seat_number, 'Semi-Sleeper') == expected

    @pytest.mark.parametrize('seat_number', ['L2', 'U4', 'L30', 'U18', 'U20', 'X6', '6'])
    def test_semi_sleeper_isolated_or_out_of_range(self, seat_number):
        assert get_adjacent_seats(seat_number, 'Semi-Sleeper') == []

    @pytest.mark.parametrize('seat_number', ['', None, 'L6x', 'LL6', 'l6'])
    def test_malformed_seat_numbers_never_raise(self, seat_number):
        assert get_adjacent_seats(seat_number, 'Sleeper') == []

    @pytest.mark.parametrize('bus_type', ['Luxury', '', None, 'sleeper'])
    def test_unknown_bus_type_yields_nothing(self, bus_type):
        assert get_adjacent_seats('L6', bus_type) == []
        assert get_adjacent_seats('1', bus_type) == []

    @pytest.mark.parametrize('seat_type', ['Seater', 'Semi-Sleeper', 'Sleeper'])
    def test_adjacency_is_symmetric_and_excludes_self(self, seat_type):
        for seat in generate_layout(seat_type).seats:
            adjacent = get_adjacent_seats(seat.seat_number, seat_type)
            assert len(adjacent) <= 1
            assert seat.seat_number not in adjacent
            for other in adjacent:
                assert seat.seat_number in get_adjacent_seats(other, seat_type)

    def test_has_adjacent_seats(self):
        assert has_adjacent_seats('1', 'Seater') is True
        assert has_adjacent_seats('L3', 'Sleeper') is False
        assert has_adjacent_seats('L6', 'Unknown') is False


@pytest.mark.unit
class TestApplyGenderRestrictions:
    def test_preference_restricts_adjacent_seat(self):
        booked = [[BookedSeatInfo(seat_number='L6', passenger_gender=Gender.FEMALE, gender_preference=True)]]

        seats = _by_number(apply_gender_restrictions(_available('Sleeper', {'L6'}), booked, 'Sleeper'))

        assert seats['L7']['gender_restriction'] == 'Female'
        assert seats['L7']['restricted_by'] == 'L6'
        assert 'gender_restriction' not in seats['L8']

    def test_no_preference_no_restriction(self):
        booked = [[BookedSeatInfo(seat_number='3', passenger_gender='Male', gender_preference=False)]]

        seats = _by_number(apply_gender_restrictions(_available('Seater', {'3'}), booked, 'Seater'))

        assert 'gender_restriction' not in seats['4']

    @pytest.mark.parametrize('order', [('Male', 'Female'), ('Female', 'Male')])
    def test_multiple_is_order_independent(self, order):
        first, second = order
        booked = [
            [BookedSeatInfo(seat_number='4', passenger_gender=first, gender_preference=True)],
            [BookedSeatInfo(seat_number='4', passenger_gender=second, gender_preference=True)],
        ]

        seats = _by_number(apply_gender_restrictions([{'seat_number': '3'}], booked, 'Seater'))

        assert seats['3']['gender_restriction'] == MULTIPLE

    def test_same_gender_twice_stays_single_gender(self):
        booked = [
            [BookedSeatInfo(seat_number='4', passenger_gender='Male', gender_preference=True)],
            [BookedSeatInfo(seat_number='4', passenger_gender='Male', gender_preference=True)],
        ]

        seats = _by_number(apply_gender_restrictions([{'seat_number': '3'}], booked, 'Seater'))

        assert seats['3']['gender_restriction'] == 'Male'
        assert seats['3']['restricted_by'] == '4'

    def test_booked_neighbours_are_not_annotated(self):
        booked = [[
            BookedSeatInfo(seat_number='3', passenger_gender='Male', gender_preference=True),
            BookedSeatInfo(seat_number='4', passenger_gender='Female', gender_preference=True),
        ]]

        seats = _by_number(apply_gender_restrictions(_available('Seater', {'3', '4'}), booked, 'Seater'))

        assert '3' not in seats
        assert '4' not in seats
        assert all('gender_restriction' not in seat for seat in seats.values())

    def test_input_seats_are_not_modified(self):
        available = _available('Seater', {'3'})
        booked = [[BookedSeatInfo(seat_number='3', passenger_gender='Male', gender_preference=True)]]

        apply_gender_restrictions(available, booked, 'Seater')

        assert all('gender_restriction' not in seat for seat in available)

    def test_unknown_bus_type_leaves_seats_unrestricted(self):
        booked = [[BookedSeatInfo(seat_number='3', passenger_gender='Male', gender_preference=True)]]

        seats = apply_gender_restrictions([{'seat_number': '4'}], booked, 'Luxury')

        assert seats == [{'seat_number': '4'}]


@pytest.mark.unit
class TestFindRestrictionConflict:
    def test_other_gender_next_to_preference_conflicts(self):
        booked = [BookedSeatInfo(seat_number='3', passenger_gender='Male', gender_preference=True)]

        conflict = find_restriction_conflict('4', 'Female', booked, 'Seater')

        assert conflict is not None
        assert conflict.seat_number == '3'
        assert conflict.passenger_gender == Gender.MALE

    def test_same_gender_is_allowed(self):
        booked = [BookedSeatInfo(seat_number='3', passenger_gender='Male', gender_preference=True)]
        assert find_restriction_conflict('4', Gender.MALE, booked, 'Seater') is None

    def test_neighbour_without_preference_is_allowed(self):
        booked = [BookedSeatInfo(seat_number='3', passenger_gender='Male', gender_preference=False)]
        assert find_restriction_conflict('4', 'Female', booked, 'Seater') is None

    def test_non_adjacent_preference_is_ignored(self):
        booked = [BookedSeatInfo(seat_number='5', passenger_gender='Male', gender_preference=True)]
        assert find_restriction_conflict('4', 'Female', booked, 'Seater') is None

    def test_isolated_berth_never_conflicts(self):
        booked = [BookedSeatInfo(seat_number='L2', passenger_gender='Male', gender_preference=True)]
        assert find_restriction_conflict('L3', 'Female', booked, 'Sleeper') is None
