from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from decimal import Decimal

from src.auth.schemas import User
from src.buses.schemas import BusCreate

class AdminUser(User):
    """User as seen by admins, including moderation details"""
    license_number: Optional[str] = None
    block_reason: Optional[str] = None
    blocked_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

class AdminBusCreate(BusCreate):
    owner_id: Optional[int] = None

class BlockUserRequest(BaseModel):
    reason: Optional[str] = None

class RejectOperatorRequest(BaseModel):
    reason: Optional[str] = None

class AssignOwnerRequest(BaseModel):
    owner_id: int

class BookingCounts(BaseModel):
    total: int
    pending: int
    confirmed: int
    cancelled: int
    completed: int

class DashboardStats(BaseModel):
    bookings: BookingCounts
    revenue: Decimal
    buses: int
    routes: int
    users: int
    bus_owners: int
    pending_operators: int
    pending_reviews: int

class CompletedJourneys(BaseModel):
    completed: int
