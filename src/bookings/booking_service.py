from typing import List, Optional, Iterable
from datetime import datetime, date, time
from decimal import Decimal, ROUND_HALF_UP
import math
import secrets

from sqlalchemy.orm import Session, joinedload

from src.models import Booking, BookingSeat, Bus, Route, Refund, User
from src.bookings.schemas import (
    BookingCreate, BookingStatus, PaymentStatus, PaymentRequest, RefundStatus,
    BookingSearchFilters, RefundDetails
)
from src.seats import (
    BookedSeatInfo, SeatUnavailable, SeatRestrictionConflict, find_restriction_conflict
)
from src.logger_config import logger

# Bookings that keep their seats away from other travellers
HELD_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)
NON_CANCELLED_STATUSES = HELD_STATUSES + (BookingStatus.COMPLETED.value,)

# (minimum hours before departure, refund percentage)
REFUND_TIERS = ((48, 90), (24, 75), (12, 50), (4, 25))

def calculate_refund(
    total_amount: Decimal,
    journey_datetime: datetime,
    cancellation_time: datetime
) -> RefundDetails:
    """Refund owed for a cancellation, based on hours left before departure"""
    hours_before = (journey_datetime - cancellation_time).total_seconds() / 3600

    refund_percentage = 0
    for min_hours, percentage in REFUND_TIERS:
        if hours_before >= min_hours:
            refund_percentage = percentage
            break

    total = Decimal(total_amount)
    refund_amount = (total * refund_percentage / Decimal(100)).quantize(
        Decimal("0.01"), rounding=ROUND_HALF_UP
    )

    return RefundDetails(
        refund_amount=refund_amount,
        cancellation_charge=total - refund_amount,
        refund_percentage=refund_percentage,
        hours_before_journey=math.floor(hours_before)
    )

def journey_start(booking: Booking) -> datetime:
    """Departure datetime of a booking's journey"""
    return datetime.combine(booking.journey_date, time.fromisoformat(booking.route.departure_time))

def load_booked_seat_groups(
    db: Session,
    bus_id: int,
    route_id: int,
    journey_date: date,
    statuses: Iterable[str] = HELD_STATUSES
) -> List[List[BookedSeatInfo]]:
    """Seats taken on a journey, grouped by booking"""
    bookings = db.query(Booking).options(joinedload(Booking.seats)).filter(
        Booking.bus_id == bus_id,
        Booking.route_id == route_id,
        Booking.journey_date == journey_date,
        Booking.booking_status.in_(tuple(statuses))
    ).all()

    return [
        [
            BookedSeatInfo(
                seat_number=seat.seat_number,
                passenger_gender=seat.passenger_gender,
                gender_preference=bool(seat.gender_preference)
            )
            for seat in booking.seats
        ]
        for booking in bookings
    ]

def _is_admin(user: User) -> bool:
    return user.role == "admin"

class BookingService:
    """Service for managing seat bookings"""

    def __init__(self, db: Session):
        self.db = db

    def create_booking(self, user_id: int, request: BookingCreate) -> Booking:
        """
        Book seats on a journey.

        The bus row is locked for the rest of the transaction so that two
        bookings on the same bus cannot both pass the seat and gender checks
        against the same snapshot of existing bookings.
        """
        try:
            bus = self.db.query(Bus).options(joinedload(Bus.seat_layout)).filter(
                Bus.id == request.bus_id
            ).with_for_update(of=Bus).first()
            route = self.db.query(Route).filter(Route.id == request.route_id).first()

            if not bus or not route:
                raise LookupError("Bus or route not found")

            self._validate_journey(bus, route, request.journey_date)

            requested = [seat.seat_number for seat in request.seats]

            if bus.seat_layout is not None:
                valid_seats = {seat["seat_number"] for seat in bus.seat_layout.seats}
                invalid = [number for number in requested if number not in valid_seats]
                if invalid:
                    raise ValueError(f"Invalid seat numbers: {', '.join(invalid)}")

            booked_seats = [
                seat
                for group in load_booked_seat_groups(self.db, bus.id, route.id, request.journey_date)
                for seat in group
            ]

            taken = {seat.seat_number for seat in booked_seats}
            conflicts = [number for number in requested if number in taken]
            if conflicts:
                raise SeatUnavailable(conflicts)

            self._check_gender_restrictions(request, booked_seats, bus.seat_type)

            booking = Booking(
                booking_reference=self._generate_booking_reference(),
                user_id=user_id,
                bus_id=bus.id,
                route_id=route.id,
                journey_date=request.journey_date,
                boarding_point=request.boarding_point,
                dropping_point=request.dropping_point,
                total_amount=Decimal(route.price) * len(request.seats),
                payment_method=request.payment_method.value if request.payment_method else None,
                payment_status=PaymentStatus.PENDING.value,
                booking_status=BookingStatus.PENDING.value,
                seats=[
                    BookingSeat(
                        seat_number=seat.seat_number,
                        passenger_name=seat.passenger_name,
                        passenger_age=seat.passenger_age,
                        passenger_gender=seat.passenger_gender.value,
                        gender_preference=seat.gender_preference
                    )
                    for seat in request.seats
                ]
            )

            self.db.add(booking)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(booking)
        logger.info(
            f"Booking {booking.booking_reference} created: bus {bus.bus_number}, "
            f"seats {', '.join(requested)}, {request.journey_date}"
        )
        return booking

    def _validate_journey(self, bus: Bus, route: Route, journey_date: date) -> None:
        if route.bus_id != bus.id:
            raise ValueError("Route does not belong to this bus")

        if not bus.is_active or not route.is_active:
            raise ValueError("This bus or route is not available for booking")

        if journey_date < date.today():
            raise ValueError("Journey date cannot be in the past")

        day_name = journey_date.strftime("%A")
        if bus.days and day_name not in bus.days:
            raise ValueError(f"Bus does not operate on {day_name}")

    def _check_gender_restrictions(
        self,
        request: BookingCreate,
        booked_seats: List[BookedSeatInfo],
        seat_type: str
    ) -> None:
        for seat in request.seats:
            conflict = find_restriction_conflict(
                seat.seat_number, seat.passenger_gender, booked_seats, seat_type
            )
            if conflict is None:
                continue

            logger.warning(
                f"Seat {seat.seat_number} ({seat.passenger_gender.value}) blocked by "
                f"seat {conflict.seat_number} ({conflict.passenger_gender.value} only)"
            )
            raise SeatRestrictionConflict(
                seat_number=seat.seat_number,
                restricted_by=conflict.seat_number,
                restricted_gender=conflict.passenger_gender.value
            )

    def get_booking(self, booking_id: int) -> Optional[Booking]:
        """Get booking by ID"""
        return self.db.query(Booking).options(
            joinedload(Booking.seats),
            joinedload(Booking.bus),
            joinedload(Booking.route)
        ).filter(Booking.id == booking_id).first()

    def get_user_bookings(self, user_id: int) -> List[Booking]:
        """Get all bookings for a user, newest first"""
        return self.db.query(Booking).options(
            joinedload(Booking.seats),
            joinedload(Booking.bus),
            joinedload(Booking.route)
        ).filter(Booking.user_id == user_id).order_by(
            Booking.created_at.desc(), Booking.id.desc()
        ).all()

    def get_owner_bookings(self, owner_id: int) -> List[Booking]:
        """Bookings made on buses of a bus owner"""
        return self.db.query(Booking).join(Bus, Booking.bus_id == Bus.id).options(
            joinedload(Booking.seats),
            joinedload(Booking.route)
        ).filter(Bus.owner_id == owner_id).order_by(
            Booking.created_at.desc(), Booking.id.desc()
        ).all()

    def search_bookings(self, filters: BookingSearchFilters) -> List[Booking]:
        """Search bookings with filters"""
        query = self.db.query(Booking).options(joinedload(Booking.seats))

        if filters.booking_status:
            query = query.filter(Booking.booking_status == filters.booking_status.value)

        if filters.journey_date:
            query = query.filter(Booking.journey_date == filters.journey_date)

        if filters.bus_id:
            query = query.filter(Booking.bus_id == filters.bus_id)

        return query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()

    def can_access(self, booking: Booking, user: User) -> bool:
        return _is_admin(user) or booking.user_id == user.id

    def process_payment(self, booking: Booking, user: User, payment: PaymentRequest) -> Booking:
        """Record a payment for a booking (no gateway is contacted)"""
        if booking.user_id != user.id:
            raise PermissionError("Not authorized to process this payment")

        if booking.booking_status == BookingStatus.CANCELLED.value:
            raise ValueError("Cannot pay for a cancelled booking")

        if booking.payment_status == PaymentStatus.COMPLETED.value:
            raise ValueError("Payment already completed")

        booking.payment_status = PaymentStatus.COMPLETED.value
        booking.payment_method = payment.payment_method.value
        booking.transaction_id = payment.transaction_id or f"TXN{secrets.token_hex(8).upper()}"

        self.db.commit()
        self.db.refresh(booking)
        logger.info(f"Payment recorded for booking {booking.booking_reference}")
        return booking

    def verify_payment(self, booking: Booking, owner: User) -> Booking:
        """Bus owner confirms the payment and the booking"""
        if booking.bus.owner_id != owner.id:
            raise PermissionError("Not authorized to verify this booking")

        if booking.booking_status == BookingStatus.CONFIRMED.value:
            raise ValueError("Booking is already confirmed")

        if booking.booking_status != BookingStatus.PENDING.value:
            raise ValueError(f"Booking cannot be confirmed. Status: {booking.booking_status}")

        booking.booking_status = BookingStatus.CONFIRMED.value
        booking.payment_status = PaymentStatus.COMPLETED.value
        booking.verified_at = datetime.now()
        booking.verified_by = owner.id

        self.db.commit()
        self.db.refresh(booking)
        logger.info(f"Booking {booking.booking_reference} confirmed by owner {owner.id}")
        return booking

    def get_refund_preview(
        self,
        booking: Booking,
        user: User,
        now: Optional[datetime] = None
    ) -> RefundDetails:
        if not self.can_access(booking, user):
            raise PermissionError("Not authorized")
        return calculate_refund(booking.total_amount, journey_start(booking), now or datetime.now())

    def cancel_booking(
        self,
        booking: Booking,
        user: User,
        reason: Optional[str] = None,
        now: Optional[datetime] = None
    ):
        """Cancel a booking and open a refund request. Returns (booking, refund, details)."""
        if not self.can_access(booking, user):
            raise PermissionError("You are not authorized to cancel this booking")

        if booking.booking_status == BookingStatus.CANCELLED.value:
            raise ValueError("Booking is already cancelled")

        if booking.booking_status == BookingStatus.COMPLETED.value:
            raise ValueError("Cannot cancel completed booking")

        now = now or datetime.now()
        departure = journey_start(booking)
        if now > departure:
            raise ValueError("Cannot cancel booking after journey has started")

        details = calculate_refund(booking.total_amount, departure, now)

        booking.booking_status = BookingStatus.CANCELLED.value
        booking.cancellation_reason = reason or "User cancelled"
        booking.cancelled_at = now

        refund = Refund(
            booking_id=booking.id,
            user_id=booking.user_id,
            amount=booking.total_amount,
            cancellation_charge=details.cancellation_charge,
            refund_amount=details.refund_amount,
            status=RefundStatus.PENDING.value
        )
        self.db.add(refund)
        self.db.commit()
        self.db.refresh(booking)
        self.db.refresh(refund)

        logger.info(
            f"Booking {booking.booking_reference} cancelled, "
            f"refund {details.refund_amount} ({details.refund_percentage}%)"
        )
        return booking, refund, details

    def complete_finished_journeys(self, today: Optional[date] = None) -> int:
        """Mark confirmed bookings of past journeys as completed"""
        today = today or date.today()
        bookings = self.db.query(Booking).filter(
            Booking.booking_status == BookingStatus.CONFIRMED.value,
            Booking.journey_date < today
        ).all()

        for booking in bookings:
            booking.booking_status = BookingStatus.COMPLETED.value

        self.db.commit()
        if bookings:
            logger.info(f"Marked {len(bookings)} bookings as completed")
        return len(bookings)

    def get_refunds(self) -> List[Refund]:
        return self.db.query(Refund).order_by(Refund.created_at.desc(), Refund.id.desc()).all()

    def process_refund(self, refund_id: int) -> Optional[Refund]:
        refund = self.db.query(Refund).filter(Refund.id == refund_id).first()
        if not refund:
            return None

        if refund.status == RefundStatus.PROCESSED.value:
            raise ValueError("Refund is already processed")

        refund.status = RefundStatus.PROCESSED.value
        refund.processed_at = datetime.now()
        if refund.refund_amount and refund.refund_amount > 0:
            refund.booking.payment_status = PaymentStatus.REFUNDED.value

        self.db.commit()
        self.db.refresh(refund)
        logger.info(f"Refund {refund.id} processed")
        return refund

    def _generate_booking_reference(self) -> str:
        """Generate human-readable booking reference"""
        return f"BK{datetime.now():%y%m%d}{secrets.token_hex(3).upper()}"
