from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from src.database import get_db
from src.buses.schemas import (
    Bus, BusDetail, BusSearch, BusSearchResult, BusSearchResponse, BusType, Amenity,
    TimeSlot, SeatAvailability, SeatLayoutResponse, SeatTypeInfo
)
from src.buses.service import BusService
from src.routes.schemas import Route
from src.routes.service import RouteService
from src.seats import SEAT_LAYOUT_TEMPLATES, get_available_seat_types

router = APIRouter()

@router.get("/", response_model=List[Bus])
def get_featured_buses(
    limit: int = Query(6, ge=1, le=50, description="Number of buses to return"),
    db: Session = Depends(get_db)
):
    """Active buses, best rated first"""
    return BusService.get_featured_buses(db, limit=limit)

@router.get("/search", response_model=BusSearchResponse)
def search_buses(
    source: str = Query(..., min_length=1, description="Departure city"),
    destination: str = Query(..., min_length=1, description="Arrival city"),
    travel_date: date = Query(..., description="Date of travel"),
    bus_types: Optional[List[BusType]] = Query(None, description="Filter by bus type"),
    operator: Optional[str] = Query(None, description="Filter by operator name"),
    amenities: Optional[List[Amenity]] = Query(None, description="Required amenities"),
    time_slot: Optional[TimeSlot] = Query(None, description="Departure time slot"),
    sort_by: Optional[str] = Query(None, description="price, departure_time or rating"),
    sort_order: str = Query("asc", pattern="^(asc|desc)$"),
    db: Session = Depends(get_db)
):
    """Search buses running between two cities on a date"""
    search = BusSearch(
        source=source,
        destination=destination,
        travel_date=travel_date,
        bus_types=bus_types,
        operator=operator,
        amenities=amenities,
        time_slot=time_slot,
        sort_by=sort_by,
        sort_order=sort_order
    )

    results = [
        BusSearchResult(
            route=Route.model_validate(result["route"]),
            bus=Bus.model_validate(result["bus"]),
            available_seats=result["available_seats"],
            booked_seats=result["booked_seats"]
        )
        for result in BusService.search_buses(db, search)
    ]
    return BusSearchResponse(count=len(results), results=results)

@router.get("/seat-types", response_model=List[SeatTypeInfo])
def get_seat_types():
    """Seat types a bus can be registered with"""
    return [
        SeatTypeInfo(
            seat_type=seat_type,
            total_seats=SEAT_LAYOUT_TEMPLATES[seat_type].total_seats,
            layout=SEAT_LAYOUT_TEMPLATES[seat_type].layout
        )
        for seat_type in get_available_seat_types()
    ]

def _get_bus_or_404(db: Session, bus_id: int):
    bus = BusService.get_bus(db, bus_id)
    if not bus:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Bus not found"
        )
    return bus

@router.get("/{bus_id}", response_model=BusDetail)
def get_bus(bus_id: int, db: Session = Depends(get_db)):
    """Get bus details with its active routes"""
    bus = _get_bus_or_404(db, bus_id)
    routes = RouteService.get_routes(db, bus_ids=[bus.id], active_only=True)
    return BusDetail(
        bus=Bus.model_validate(bus),
        routes=[Route.model_validate(route) for route in routes]
    )

@router.get("/{bus_id}/layout", response_model=SeatLayoutResponse)
def get_seat_layout(bus_id: int, db: Session = Depends(get_db)):
    """Seat map of a bus"""
    bus = _get_bus_or_404(db, bus_id)
    if bus.seat_layout is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Seat layout not found for this bus"
        )
    return bus.seat_layout

@router.get("/{bus_id}/seats", response_model=SeatAvailability)
def get_seat_availability(
    bus_id: int,
    route_id: int = Query(..., description="Route of the journey"),
    journey_date: date = Query(..., description="Date of the journey"),
    db: Session = Depends(get_db)
):
    """Seat map of a journey with booked seats and gender restrictions"""
    bus = _get_bus_or_404(db, bus_id)

    route = RouteService.get_route(db, route_id)
    if not route or route.bus_id != bus.id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Route not found for this bus"
        )

    try:
        return BusService.get_seat_availability(db, bus, route_id, journey_date)
    except LookupError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
