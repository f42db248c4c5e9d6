from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from src.database import get_db
from src.auth.dependencies import require_admin
from src.auth.schemas import UserRole, OwnerStatus
from src.admin.schemas import (
    AdminUser, AdminBusCreate, BlockUserRequest, RejectOperatorRequest, AssignOwnerRequest,
    DashboardStats, CompletedJourneys
)
from src.admin.admin_service import AdminManagementService
from src.buses.schemas import Bus, BusCreate, BusUpdate, SeatLayoutResponse
from src.buses.service import BusService
from src.routes.schemas import Route, RouteCreate, RouteUpdate
from src.routes.service import RouteService
from src.bookings.schemas import Booking, BookingSearchFilters, BookingStatus, Refund
from src.bookings.booking_service import BookingService
from src.reviews.schemas import Review, AdminReview, ReviewStatus
from src.reviews.service import ReviewService

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])

def _get_user_or_404(service: AdminManagementService, user_id: int):
    user = service.get_user(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user

def _get_bus_or_404(db: Session, bus_id: int):
    bus = BusService.get_bus(db, bus_id)
    if not bus:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bus not found")
    return bus

def _get_route_or_404(db: Session, route_id: int):
    route = RouteService.get_route(db, route_id)
    if not route:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Route not found")
    return route

@router.get("/stats", response_model=DashboardStats)
def get_stats(admin = Depends(require_admin), db: Session = Depends(get_db)):
    """Booking, revenue and fleet totals"""
    return AdminManagementService(db).get_dashboard_stats()

# User management
@router.get("/users", response_model=List[AdminUser])
def get_users(
    role: Optional[UserRole] = Query(None, description="Filter by role"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    admin = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return AdminManagementService(db).get_users(role=role, skip=skip, limit=limit)

@router.put("/users/{user_id}/block", response_model=AdminUser)
def block_user(
    user_id: int,
    request: BlockUserRequest,
    admin = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Block a user; blocked users can no longer log in"""
    service = AdminManagementService(db)
    user = _get_user_or_404(service, user_id)
    try:
        return service.block_user(user, reason=request.reason)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.put("/users/{user_id}/unblock", response_model=AdminUser)
def unblock_user(user_id: int, admin = Depends(require_admin), db: Session = Depends(get_db)):
    service = AdminManagementService(db)
    return service.unblock_user(_get_user_or_404(service, user_id))

# Bus owner applications
@router.get("/operators", response_model=List[AdminUser])
def get_operators(
    owner_status: Optional[OwnerStatus] = Query(None, alias="status"),
    admin = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return AdminManagementService(db).get_operators(owner_status)

@router.get("/operators/pending", response_model=List[AdminUser])
def get_pending_operators(admin = Depends(require_admin), db: Session = Depends(get_db)):
    return AdminManagementService(db).get_operators(OwnerStatus.PENDING)

@router.put("/operators/{user_id}/approve", response_model=AdminUser)
def approve_operator(user_id: int, admin = Depends(require_admin), db: Session = Depends(get_db)):
    service = AdminManagementService(db)
    user = _get_user_or_404(service, user_id)
    try:
        return service.approve_operator(user)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.put("/operators/{user_id}/reject", response_model=AdminUser)
def reject_operator(
    user_id: int,
    request: RejectOperatorRequest,
    admin = Depends(require_admin),
    db: Session = Depends(get_db)
):
    service = AdminManagementService(db)
    user = _get_user_or_404(service, user_id)
    try:
        return service.reject_operator(user, reason=request.reason)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

# Buses
@router.get("/buses", response_model=List[Bus])
def get_all_buses(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    admin = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return BusService.get_buses(db, skip=skip, limit=limit)

@router.post("/buses", response_model=Bus, status_code=status.HTTP_201_CREATED)
def add_bus(bus_in: AdminBusCreate, admin = Depends(require_admin), db: Session = Depends(get_db)):
    """Register a bus, optionally for a bus owner"""
    try:
        if bus_in.owner_id is not None:
            AdminManagementService(db).get_bus_owner(bus_in.owner_id)
        return BusService.create_bus(
            db, BusCreate(**bus_in.dict(exclude={"owner_id"})), owner_id=bus_in.owner_id
        )
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.put("/buses/{bus_id}", response_model=Bus)
def update_bus(
    bus_id: int,
    bus_update: BusUpdate,
    admin = Depends(require_admin),
    db: Session = Depends(get_db)
):
    bus = _get_bus_or_404(db, bus_id)
    try:
        return BusService.update_bus(db, bus, bus_update)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.delete("/buses/{bus_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_bus(bus_id: int, admin = Depends(require_admin), db: Session = Depends(get_db)):
    bus = _get_bus_or_404(db, bus_id)
    try:
        BusService.delete_bus(db, bus)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.post("/buses/{bus_id}/assign", response_model=Bus)
def assign_bus_to_owner(
    bus_id: int,
    request: AssignOwnerRequest,
    admin = Depends(require_admin),
    db: Session = Depends(get_db)
):
    bus = _get_bus_or_404(db, bus_id)
    try:
        owner = AdminManagementService(db).get_bus_owner(request.owner_id)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return BusService.assign_owner(db, bus, owner.id)

# Routes
@router.get("/routes", response_model=List[Route])
def get_all_routes(admin = Depends(require_admin), db: Session = Depends(get_db)):
    return RouteService.get_routes(db)

@router.post("/routes", response_model=Route, status_code=status.HTTP_201_CREATED)
def add_route(route_in: RouteCreate, admin = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        return RouteService.create_route(db, route_in)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

@router.put("/routes/{route_id}", response_model=Route)
def update_route(
    route_id: int,
    route_update: RouteUpdate,
    admin = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return RouteService.update_route(db, _get_route_or_404(db, route_id), route_update)

@router.delete("/routes/{route_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_route(route_id: int, admin = Depends(require_admin), db: Session = Depends(get_db)):
    route = _get_route_or_404(db, route_id)
    try:
        RouteService.delete_route(db, route)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

# Seat layouts
@router.put("/seat-layouts/{bus_id}", response_model=SeatLayoutResponse)
def regenerate_seat_layout(bus_id: int, admin = Depends(require_admin), db: Session = Depends(get_db)):
    """Rebuild a bus's seat map from its seat type"""
    bus = _get_bus_or_404(db, bus_id)
    try:
        return BusService.regenerate_seat_layout(db, bus)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

# Bookings
@router.get("/bookings", response_model=List[Booking])
def get_all_bookings(
    booking_status: Optional[BookingStatus] = Query(None, alias="status"),
    journey_date: Optional[date] = Query(None),
    bus_id: Optional[int] = Query(None),
    admin = Depends(require_admin),
    db: Session = Depends(get_db)
):
    filters = BookingSearchFilters(booking_status=booking_status, journey_date=journey_date, bus_id=bus_id)
    return BookingService(db).search_bookings(filters)

@router.post("/bookings/complete-finished", response_model=CompletedJourneys)
def complete_finished_journeys(admin = Depends(require_admin), db: Session = Depends(get_db)):
    """Mark confirmed bookings of past journeys as completed"""
    return CompletedJourneys(completed=BookingService(db).complete_finished_journeys())

# Refunds
@router.get("/refunds", response_model=List[Refund])
def get_refunds(admin = Depends(require_admin), db: Session = Depends(get_db)):
    return BookingService(db).get_refunds()

@router.put("/refunds/{refund_id}/process", response_model=Refund)
def process_refund(refund_id: int, admin = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        refund = BookingService(db).process_refund(refund_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if not refund:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Refund not found")
    return refund

# Reviews
def _get_review_or_404(db: Session, review_id: int):
    review = ReviewService.get_review(db, review_id)
    if not review:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Review not found")
    return review

@router.get("/reviews", response_model=List[AdminReview])
def get_reviews(
    review_status: Optional[ReviewStatus] = Query(None, alias="status"),
    admin = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Reviews for moderation: pending, approved or reported"""
    return [
        AdminReview(
            **Review.model_validate(review).dict(),
            user_name=review.user.name,
            user_email=review.user.email,
            bus_name=review.bus.name,
            bus_number=review.bus.bus_number
        )
        for review in ReviewService.get_reviews(db, review_status)
    ]

@router.put("/reviews/{review_id}/approve", response_model=Review)
def approve_review(review_id: int, admin = Depends(require_admin), db: Session = Depends(get_db)):
    return ReviewService.approve_review(db, _get_review_or_404(db, review_id))

@router.delete("/reviews/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_review(review_id: int, admin = Depends(require_admin), db: Session = Depends(get_db)):
    ReviewService.delete_review(db, _get_review_or_404(db, review_id))
