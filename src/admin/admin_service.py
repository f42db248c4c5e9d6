from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from sqlalchemy.orm import Session
from sqlalchemy import func

from src.admin.schemas import DashboardStats, BookingCounts
from src.auth.schemas import UserRole, OwnerStatus
from src.bookings.schemas import BookingStatus, PaymentStatus
from src.models import User, Bus, Route, Booking, Review
from src.logger_config import logger

class AdminManagementService:
    """Service for administrative management operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_dashboard_stats(self) -> DashboardStats:
        status_counts = dict(
            self.db.query(Booking.booking_status, func.count(Booking.id)).group_by(
                Booking.booking_status
            ).all()
        )

        revenue = self.db.query(func.sum(Booking.total_amount)).filter(
            Booking.payment_status == PaymentStatus.COMPLETED.value
        ).scalar()

        return DashboardStats(
            bookings=BookingCounts(
                total=sum(status_counts.values()),
                pending=status_counts.get(BookingStatus.PENDING.value, 0),
                confirmed=status_counts.get(BookingStatus.CONFIRMED.value, 0),
                cancelled=status_counts.get(BookingStatus.CANCELLED.value, 0),
                completed=status_counts.get(BookingStatus.COMPLETED.value, 0)
            ),
            revenue=Decimal(revenue or 0),
            buses=self.db.query(Bus).count(),
            routes=self.db.query(Route).count(),
            users=self.db.query(User).filter(User.role == UserRole.USER.value).count(),
            bus_owners=self.db.query(User).filter(User.role == UserRole.BUS_OWNER.value).count(),
            pending_operators=self.db.query(User).filter(
                User.role == UserRole.BUS_OWNER.value,
                User.status == OwnerStatus.PENDING.value
            ).count(),
            pending_reviews=self.db.query(Review).filter(Review.is_approved == False).count()
        )

    # User management
    def get_users(self, role: Optional[UserRole] = None, skip: int = 0, limit: int = 100) -> List[User]:
        query = self.db.query(User)
        if role:
            query = query.filter(User.role == role.value)
        return query.order_by(User.created_at.desc(), User.id.desc()).offset(skip).limit(limit).all()

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def block_user(self, user: User, reason: Optional[str] = None) -> User:
        if user.role == UserRole.ADMIN.value:
            raise ValueError("Cannot block admin users")

        user.is_blocked = True
        user.block_reason = reason or "Blocked by admin"
        user.blocked_at = datetime.now()

        self.db.commit()
        self.db.refresh(user)
        logger.warning(f"User {user.id} blocked: {user.block_reason}")
        return user

    def unblock_user(self, user: User) -> User:
        user.is_blocked = False
        user.block_reason = None
        user.blocked_at = None

        self.db.commit()
        self.db.refresh(user)
        logger.info(f"User {user.id} unblocked")
        return user

    # Bus owner applications
    def get_operators(self, owner_status: Optional[OwnerStatus] = None) -> List[User]:
        query = self.db.query(User).filter(User.role == UserRole.BUS_OWNER.value)
        if owner_status:
            query = query.filter(User.status == owner_status.value)
        return query.order_by(User.created_at.desc(), User.id.desc()).all()

    def approve_operator(self, user: User) -> User:
        self._check_operator(user)
        if user.status == OwnerStatus.APPROVED.value:
            raise ValueError("Bus owner is already approved")

        user.status = OwnerStatus.APPROVED.value
        user.rejection_reason = None

        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Bus owner {user.id} ({user.company_name}) approved")
        return user

    def reject_operator(self, user: User, reason: Optional[str] = None) -> User:
        self._check_operator(user)

        user.status = OwnerStatus.REJECTED.value
        user.rejection_reason = reason or "Application rejected by admin"

        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Bus owner {user.id} ({user.company_name}) rejected")
        return user

    def get_bus_owner(self, owner_id: int) -> User:
        owner = self.get_user(owner_id)
        if not owner:
            raise LookupError("Bus owner not found")
        self._check_operator(owner)
        return owner

    def _check_operator(self, user: User) -> None:
        if user.role != UserRole.BUS_OWNER.value:
            raise ValueError("User is not a bus owner")
