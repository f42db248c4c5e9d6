from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from src.database import get_db
from src.auth.dependencies import get_current_user
from src.bookings.schemas import (
    BookingCreate, Booking, BookingCancellationRequest, PaymentRequest,
    Refund, RefundDetails, CancellationResult, ETicket
)
from src.bookings.booking_service import BookingService
from src.bookings.ticket_service import TicketService
from src.seats import SeatRestrictionConflict

router = APIRouter()

def _get_own_booking(booking_id: int, current_user, booking_service: BookingService):
    booking = booking_service.get_booking(booking_id)
    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found"
        )
    if not booking_service.can_access(booking, current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to access this booking"
        )
    return booking

@router.post("/", response_model=Booking, status_code=status.HTTP_201_CREATED)
def create_booking(
    request: BookingCreate,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Book seats on a bus journey"""
    booking_service = BookingService(db)

    try:
        return booking_service.create_booking(current_user.id, request)
    except SeatRestrictionConflict as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.to_detail()
        )
    except LookupError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

@router.get("/me", response_model=List[Booking])
def get_my_bookings(current_user = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get bookings of the current user"""
    return BookingService(db).get_user_bookings(current_user.id)

@router.get("/{booking_id}", response_model=Booking)
def get_booking(
    booking_id: int,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get booking details"""
    return _get_own_booking(booking_id, current_user, BookingService(db))

@router.put("/{booking_id}/cancel", response_model=CancellationResult)
def cancel_booking(
    booking_id: int,
    cancellation: BookingCancellationRequest,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Cancel a booking and request a refund"""
    booking_service = BookingService(db)
    booking = _get_own_booking(booking_id, current_user, booking_service)

    try:
        booking, refund, details = booking_service.cancel_booking(
            booking, current_user, reason=cancellation.reason
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return CancellationResult(
        booking=Booking.model_validate(booking),
        refund=Refund.model_validate(refund),
        refund_details=details
    )

@router.post("/{booking_id}/payment", response_model=Booking)
def process_payment(
    booking_id: int,
    payment: PaymentRequest,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Record the payment for a booking"""
    booking_service = BookingService(db)
    booking = _get_own_booking(booking_id, current_user, booking_service)

    try:
        return booking_service.process_payment(booking, current_user, payment)
    except PermissionError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e)
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

@router.get("/{booking_id}/refund", response_model=RefundDetails)
def get_refund_preview(
    booking_id: int,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Refund the traveller would get if the booking were cancelled now"""
    booking_service = BookingService(db)
    booking = _get_own_booking(booking_id, current_user, booking_service)
    return booking_service.get_refund_preview(booking, current_user)

@router.get("/{booking_id}/ticket", response_model=ETicket)
def get_ticket(
    booking_id: int,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """E-ticket with QR code"""
    booking = _get_own_booking(booking_id, current_user, BookingService(db))

    try:
        return TicketService().generate_eticket(booking)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
