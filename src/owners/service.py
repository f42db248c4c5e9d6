from sqlalchemy.orm import Session, joinedload
from typing import List
from datetime import date, datetime, time
from decimal import Decimal

from src.models import Bus, Route, Booking
from src.bookings.schemas import BookingStatus
from src.bookings.ticket_service import TicketService
from src.owners.schemas import OwnerStatistics, ManifestEntry, TicketScanResult

class OwnerService:
    """Reports for bus owners about their own fleet"""

    def __init__(self, db: Session):
        self.db = db

    def get_statistics(self, owner_id: int) -> OwnerStatistics:
        bus_ids = [
            bus_id for (bus_id,) in self.db.query(Bus.id).filter(
                Bus.owner_id == owner_id,
                Bus.is_active == True
            ).all()
        ]

        total_routes = self.db.query(Route).filter(Route.bus_id.in_(bus_ids)).count()
        bookings = self.db.query(Booking).filter(Booking.bus_id.in_(bus_ids)).all()

        start_of_today = datetime.combine(date.today(), time.min)
        today_bookings = [
            b for b in bookings
            if b.created_at is not None and b.created_at.replace(tzinfo=None) >= start_of_today
        ]

        revenue = sum(
            (Decimal(b.total_amount) for b in bookings
             if b.booking_status != BookingStatus.CANCELLED.value),
            Decimal("0")
        )

        return OwnerStatistics(
            total_buses=len(bus_ids),
            total_routes=total_routes,
            total_bookings=len(bookings),
            confirmed_bookings=sum(
                1 for b in bookings if b.booking_status == BookingStatus.CONFIRMED.value
            ),
            today_bookings=len(today_bookings),
            total_revenue=revenue
        )

    def get_manifest(self, owner_id: int, route_id: int, journey_date: date) -> List[ManifestEntry]:
        """Passenger list of a confirmed journey, ordered by seat booking time"""
        route = self.db.query(Route).options(joinedload(Route.bus)).filter(Route.id == route_id).first()
        if not route:
            raise LookupError("Route not found")
        if route.bus.owner_id != owner_id:
            raise PermissionError("Not authorized to view this manifest")

        bookings = self.db.query(Booking).options(
            joinedload(Booking.seats),
            joinedload(Booking.user)
        ).filter(
            Booking.route_id == route_id,
            Booking.journey_date == journey_date,
            Booking.booking_status == BookingStatus.CONFIRMED.value
        ).order_by(Booking.created_at, Booking.id).all()

        entries = []
        for booking in bookings:
            fare = Decimal(booking.total_amount) / len(booking.seats)
            for seat in booking.seats:
                entries.append(ManifestEntry(
                    booking_reference=booking.booking_reference,
                    seat_number=seat.seat_number,
                    passenger_name=seat.passenger_name,
                    passenger_age=seat.passenger_age,
                    passenger_gender=seat.passenger_gender,
                    contact_name=booking.user.name,
                    contact_email=booking.user.email,
                    contact_phone=booking.user.phone,
                    boarding_point=booking.boarding_point,
                    dropping_point=booking.dropping_point,
                    fare=fare.quantize(Decimal("0.01")),
                    payment_status=booking.payment_status,
                    booked_at=booking.created_at
                ))
        return entries

    def scan_ticket(self, owner_id: int, qr_code_data: str) -> TicketScanResult:
        """Check a QR code presented at boarding against the owner's bookings"""
        payload = TicketService().verify_qr_code_data(qr_code_data)
        if payload is None:
            return TicketScanResult(valid=False, message="QR code is not a valid ticket")

        booking = self.db.query(Booking).options(joinedload(Booking.bus)).filter(
            Booking.booking_reference == payload.get("ref")
        ).first()
        if not booking or booking.bus.owner_id != owner_id:
            return TicketScanResult(valid=False, message="Booking not found for your buses")

        seat_numbers = [seat.seat_number for seat in booking.seats]
        if booking.booking_status != BookingStatus.CONFIRMED.value:
            return TicketScanResult(
                valid=False,
                booking_reference=booking.booking_reference,
                seat_numbers=seat_numbers,
                booking_status=booking.booking_status,
                message=f"Booking is {booking.booking_status}"
            )

        return TicketScanResult(
            valid=True,
            booking_reference=booking.booking_reference,
            seat_numbers=seat_numbers,
            booking_status=booking.booking_status,
            message="Ticket is valid"
        )
