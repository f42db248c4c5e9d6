from pydantic import BaseModel, Field, validator
from typing import List, Optional
from datetime import datetime, date
from decimal import Decimal
from enum import Enum

from src.seats.schemas import Gender

class BookingStatus(str, Enum):
    """Booking status enumeration"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

class PaymentStatus(str, Enum):
    """Payment status enumeration"""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"

class PaymentMethod(str, Enum):
    UPI = "upi"
    CARD = "card"
    NET_BANKING = "net_banking"
    WALLET = "wallet"
    CASH = "cash"

class RefundStatus(str, Enum):
    """Refund status enumeration"""
    PENDING = "pending"
    APPROVED = "approved"
    PROCESSED = "processed"
    REJECTED = "rejected"

class RefundMethod(str, Enum):
    ORIGINAL_PAYMENT = "original_payment"
    WALLET = "wallet"
    BANK_TRANSFER = "bank_transfer"

# Passenger seats
class SeatRequest(BaseModel):
    """A seat and the passenger travelling in it"""
    seat_number: str = Field(..., min_length=1)
    passenger_name: str = Field(..., min_length=1)
    passenger_age: int = Field(..., ge=1, le=120)
    passenger_gender: Gender
    gender_preference: bool = False

class BookedSeat(SeatRequest):
    id: int

    class Config:
        from_attributes = True

# Booking Request Models
class BookingCreate(BaseModel):
    """Request to book seats on a journey"""
    bus_id: int
    route_id: int
    journey_date: date
    seats: List[SeatRequest]
    boarding_point: Optional[str] = None
    dropping_point: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None

    @validator('seats')
    def validate_seats(cls, v):
        if not v:
            raise ValueError('At least one seat is required')
        if len(v) > 10:
            raise ValueError('Maximum 10 seats per booking')
        numbers = [seat.seat_number for seat in v]
        if len(set(numbers)) != len(numbers):
            raise ValueError('The same seat cannot be booked twice in one booking')
        return v

class BookingCancellationRequest(BaseModel):
    reason: Optional[str] = None

class PaymentRequest(BaseModel):
    payment_method: PaymentMethod
    transaction_id: Optional[str] = None

class BookingSearchFilters(BaseModel):
    booking_status: Optional[BookingStatus] = None
    journey_date: Optional[date] = None
    bus_id: Optional[int] = None

# Booking Response Models
class RouteSummary(BaseModel):
    id: int
    source: str
    destination: str
    departure_time: str
    arrival_time: str

    class Config:
        from_attributes = True

class BusSummary(BaseModel):
    id: int
    name: str
    bus_number: str
    operator: str
    seat_type: str

    class Config:
        from_attributes = True

class Booking(BaseModel):
    id: int
    booking_reference: str
    user_id: int
    bus_id: int
    route_id: int
    journey_date: date
    boarding_point: Optional[str] = None
    dropping_point: Optional[str] = None
    seats: List[BookedSeat]
    total_amount: Decimal
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None
    payment_status: PaymentStatus
    booking_status: BookingStatus
    cancellation_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    verified_at: Optional[datetime] = None
    created_at: datetime
    bus: Optional[BusSummary] = None
    route: Optional[RouteSummary] = None

    class Config:
        from_attributes = True

# Refunds
class RefundDetails(BaseModel):
    """Refund owed if a booking is cancelled at a given time"""
    refund_amount: Decimal
    cancellation_charge: Decimal
    refund_percentage: int
    hours_before_journey: int

class Refund(BaseModel):
    id: int
    booking_id: int
    user_id: int
    amount: Decimal
    cancellation_charge: Decimal
    refund_amount: Decimal
    status: RefundStatus
    refund_method: RefundMethod
    processed_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True

class CancellationResult(BaseModel):
    booking: Booking
    refund: Refund
    refund_details: RefundDetails

# Tickets
class ETicket(BaseModel):
    """Printable ticket data with a scannable QR code"""
    booking_reference: str
    passenger_names: List[str]
    seat_numbers: List[str]
    bus_name: str
    bus_number: str
    operator: str
    source: str
    destination: str
    journey_date: date
    departure_time: str
    arrival_time: str
    boarding_point: Optional[str] = None
    dropping_point: Optional[str] = None
    total_amount: Decimal
    booking_status: BookingStatus
    payment_status: PaymentStatus
    qr_code_data: str
    qr_code_image: str  # data:image/png;base64,...
