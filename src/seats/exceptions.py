class InvalidSeatType(ValueError):
    """Seat type is unknown or has no configured layout"""

    def __init__(self, seat_type, message: str = None):
        self.seat_type = seat_type
        super().__init__(message or f"Invalid seat type: {seat_type}")


class SeatUnavailable(ValueError):
    """Requested seats are held by another booking"""

    def __init__(self, seat_numbers):
        self.seat_numbers = list(seat_numbers)
        super().__init__(f"Seats {', '.join(self.seat_numbers)} are already booked")


class SeatRestrictionConflict(ValueError):
    """Requested seat sits next to a seat reserved for another gender"""

    def __init__(self, seat_number: str, restricted_by: str, restricted_gender: str):
        self.seat_number = seat_number
        self.restricted_by = restricted_by
        self.restricted_gender = restricted_gender
        super().__init__(
            f"Seat {seat_number} is restricted. Seat {restricted_by} passenger has "
            f"requested privacy for {restricted_gender} passengers only. "
            f"Please select another seat."
        )

    def to_detail(self) -> dict:
        return {
            "message": str(self),
            "seat_number": self.seat_number,
            "restricted_by": self.restricted_by,
            "restricted_gender": self.restricted_gender,
        }
