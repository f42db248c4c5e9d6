from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

class OwnerStatistics(BaseModel):
    total_buses: int
    total_routes: int
    total_bookings: int
    confirmed_bookings: int
    today_bookings: int
    total_revenue: Decimal

class ManifestEntry(BaseModel):
    """One passenger on a journey's passenger list"""
    booking_reference: str
    seat_number: str
    passenger_name: str
    passenger_age: int
    passenger_gender: str
    contact_name: str
    contact_email: str
    contact_phone: Optional[str] = None
    boarding_point: Optional[str] = None
    dropping_point: Optional[str] = None
    fare: Decimal
    payment_status: str
    booked_at: datetime

class TicketScan(BaseModel):
    qr_code_data: str

class TicketScanResult(BaseModel):
    """Outcome of checking a traveller's QR code at boarding"""
    valid: bool
    booking_reference: Optional[str] = None
    seat_numbers: List[str] = []
    booking_status: Optional[str] = None
    message: str
