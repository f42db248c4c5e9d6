from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List
from datetime import date

from src.database import get_db
from src.auth.dependencies import require_bus_owner
from src.buses.schemas import Bus, BusCreate, BusUpdate, BusDetail
from src.buses.service import BusService
from src.routes.schemas import Route, RouteCreate, RouteUpdate
from src.routes.service import RouteService
from src.bookings.schemas import Booking
from src.bookings.booking_service import BookingService
from src.owners.schemas import OwnerStatistics, ManifestEntry, TicketScan, TicketScanResult
from src.owners.service import OwnerService

router = APIRouter()

def _get_own_bus(db: Session, bus_id: int, owner):
    bus = BusService.get_bus(db, bus_id)
    if not bus or bus.owner_id != owner.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bus not found")
    return bus

def _get_route_or_404(db: Session, route_id: int):
    route = RouteService.get_route(db, route_id)
    if not route:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Route not found")
    return route

# Buses
@router.get("/buses", response_model=List[Bus])
def get_my_buses(owner = Depends(require_bus_owner), db: Session = Depends(get_db)):
    return BusService.get_buses(db, owner_id=owner.id)

@router.post("/buses", response_model=Bus, status_code=status.HTTP_201_CREATED)
def add_bus(bus_in: BusCreate, owner = Depends(require_bus_owner), db: Session = Depends(get_db)):
    """Register a bus; its seat map is generated from the seat type"""
    try:
        return BusService.create_bus(db, bus_in, owner_id=owner.id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/buses/{bus_id}", response_model=BusDetail)
def get_bus_details(bus_id: int, owner = Depends(require_bus_owner), db: Session = Depends(get_db)):
    bus = _get_own_bus(db, bus_id, owner)
    routes = RouteService.get_routes(db, bus_ids=[bus.id])
    return BusDetail(bus=Bus.model_validate(bus), routes=[Route.model_validate(r) for r in routes])

@router.get("/buses/{bus_id}/routes", response_model=List[Route])
def get_routes_for_bus(bus_id: int, owner = Depends(require_bus_owner), db: Session = Depends(get_db)):
    bus = _get_own_bus(db, bus_id, owner)
    return RouteService.get_routes(db, bus_ids=[bus.id])

@router.put("/buses/{bus_id}", response_model=Bus)
def update_bus(
    bus_id: int,
    bus_update: BusUpdate,
    owner = Depends(require_bus_owner),
    db: Session = Depends(get_db)
):
    bus = _get_own_bus(db, bus_id, owner)
    try:
        return BusService.update_bus(db, bus, bus_update, owner_id=owner.id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.delete("/buses/{bus_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_bus(bus_id: int, owner = Depends(require_bus_owner), db: Session = Depends(get_db)):
    """Delete a bus; refused while it has upcoming bookings"""
    bus = _get_own_bus(db, bus_id, owner)
    try:
        BusService.delete_bus(db, bus, owner_id=owner.id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

# Routes
@router.get("/routes", response_model=List[Route])
def get_my_routes(owner = Depends(require_bus_owner), db: Session = Depends(get_db)):
    bus_ids = [bus.id for bus in BusService.get_buses(db, owner_id=owner.id, limit=1000)]
    return RouteService.get_routes(db, bus_ids=bus_ids)

@router.post("/routes", response_model=Route, status_code=status.HTTP_201_CREATED)
def create_route(route_in: RouteCreate, owner = Depends(require_bus_owner), db: Session = Depends(get_db)):
    try:
        return RouteService.create_route(db, route_in, owner_id=owner.id)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))

@router.put("/routes/{route_id}", response_model=Route)
def update_route(
    route_id: int,
    route_update: RouteUpdate,
    owner = Depends(require_bus_owner),
    db: Session = Depends(get_db)
):
    route = _get_route_or_404(db, route_id)
    try:
        return RouteService.update_route(db, route, route_update, owner_id=owner.id)
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))

@router.delete("/routes/{route_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_route(route_id: int, owner = Depends(require_bus_owner), db: Session = Depends(get_db)):
    route = _get_route_or_404(db, route_id)
    try:
        RouteService.delete_route(db, route, owner_id=owner.id)
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

# Bookings
@router.get("/bookings", response_model=List[Booking])
def get_bookings(owner = Depends(require_bus_owner), db: Session = Depends(get_db)):
    """Bookings made on the owner's buses"""
    return BookingService(db).get_owner_bookings(owner.id)

@router.post("/bookings/{booking_id}/verify-payment", response_model=Booking)
def verify_payment(booking_id: int, owner = Depends(require_bus_owner), db: Session = Depends(get_db)):
    """Confirm a pending booking once its payment has been checked"""
    booking_service = BookingService(db)
    booking = booking_service.get_booking(booking_id)
    if not booking:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")

    try:
        return booking_service.verify_payment(booking, owner)
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/statistics", response_model=OwnerStatistics)
def get_statistics(owner = Depends(require_bus_owner), db: Session = Depends(get_db)):
    return OwnerService(db).get_statistics(owner.id)

@router.get("/manifest", response_model=List[ManifestEntry])
def get_passenger_manifest(
    route_id: int = Query(..., description="Route of the journey"),
    journey_date: date = Query(..., description="Date of the journey"),
    owner = Depends(require_bus_owner),
    db: Session = Depends(get_db)
):
    """Passenger list of a confirmed journey"""
    try:
        return OwnerService(db).get_manifest(owner.id, route_id, journey_date)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))

@router.post("/tickets/scan", response_model=TicketScanResult)
def scan_ticket(scan: TicketScan, owner = Depends(require_bus_owner), db: Session = Depends(get_db)):
    """Validate a traveller's e-ticket QR code"""
    return OwnerService(db).scan_ticket(owner.id, scan.qr_code_data)
