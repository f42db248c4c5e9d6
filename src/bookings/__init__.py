"""
Seat Booking Module

Booking lifecycle for bus journeys:

- Seat booking with seat-availability and gender-privacy checks under a bus row lock
- Payment recording and owner verification
- Cancellation with time-based refunds
- E-tickets with a signed QR code

Key Components:
- booking_service.py: booking management, refund calculation
- ticket_service.py: e-ticket and QR code generation
- router.py: FastAPI endpoints for travellers
- schemas.py: Pydantic models for bookings, refunds and tickets
"""

from .router import router
from .booking_service import BookingService, calculate_refund
from .ticket_service import TicketService
from .schemas import (
    BookingCreate, Booking, BookingStatus, PaymentStatus, SeatRequest,
    RefundDetails, ETicket
)

__all__ = [
    "router",
    "BookingService",
    "calculate_refund",
    "TicketService",
    "BookingCreate",
    "Booking",
    "BookingStatus",
    "PaymentStatus",
    "SeatRequest",
    "RefundDetails",
    "ETicket"
]
