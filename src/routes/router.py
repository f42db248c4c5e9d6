from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List

from src.database import get_db
from src.routes.schemas import Route
from src.routes.service import RouteService

router = APIRouter()

@router.get("/bus/{bus_id}", response_model=List[Route])
def get_bus_routes(
    bus_id: int,
    include_inactive: bool = Query(False, description="Include deactivated routes"),
    db: Session = Depends(get_db)
):
    """Get the routes a bus runs"""
    return RouteService.get_routes(db, bus_ids=[bus_id], active_only=not include_inactive)

@router.get("/{route_id}", response_model=Route)
def get_route(route_id: int, db: Session = Depends(get_db)):
    """Get route details"""
    route = RouteService.get_route(db, route_id)
    if not route:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Route not found"
        )
    return route
