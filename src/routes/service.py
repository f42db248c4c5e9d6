from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
from src.models import Route, Bus, Booking
from src.routes.schemas import RouteCreate, RouteUpdate
from src.logger_config import logger

class RouteService:
    @staticmethod
    def get_route(db: Session, route_id: int) -> Optional[Route]:
        return db.query(Route).filter(Route.id == route_id).first()

    @staticmethod
    def get_routes(
        db: Session,
        bus_ids: Optional[List[int]] = None,
        active_only: bool = False
    ) -> List[Route]:
        """List routes, optionally limited to some buses"""
        query = db.query(Route)
        if bus_ids is not None:
            query = query.filter(Route.bus_id.in_(bus_ids))
        if active_only:
            query = query.filter(Route.is_active == True)
        return query.order_by(Route.departure_time).all()

    @staticmethod
    def create_route(db: Session, route_in: RouteCreate, owner_id: Optional[int] = None) -> Route:
        """Create a route; with ``owner_id`` the bus must belong to that owner"""
        bus = db.query(Bus).filter(Bus.id == route_in.bus_id).first()
        if not bus:
            raise LookupError("Bus not found")
        if owner_id is not None and bus.owner_id != owner_id:
            raise PermissionError("You can only create routes for your buses")

        route = Route(**route_in.dict())
        db.add(route)
        db.commit()
        db.refresh(route)

        logger.info(f"Route {route.id} {route.source} -> {route.destination} added to bus {bus.bus_number}")
        return route

    @staticmethod
    def update_route(
        db: Session,
        route: Route,
        route_update: RouteUpdate,
        owner_id: Optional[int] = None
    ) -> Route:
        if owner_id is not None and route.bus.owner_id != owner_id:
            raise PermissionError("Not authorized to update this route")

        for field, value in route_update.dict(exclude_unset=True).items():
            setattr(route, field, value)

        db.commit()
        db.refresh(route)
        return route

    @staticmethod
    def delete_route(db: Session, route: Route, owner_id: Optional[int] = None) -> None:
        """Delete a route that has no upcoming bookings"""
        if owner_id is not None and route.bus.owner_id != owner_id:
            raise PermissionError("Not authorized to delete this route")

        upcoming = db.query(Booking).filter(
            Booking.route_id == route.id,
            Booking.journey_date >= date.today(),
            Booking.booking_status.in_(("pending", "confirmed"))
        ).count()
        if upcoming:
            raise ValueError(f"Cannot delete route with {upcoming} upcoming bookings")

        # Routes with booking history are kept for the records
        if route.bookings:
            route.is_active = False
            db.commit()
            logger.info(f"Route {route.id} deactivated")
            return

        db.delete(route)
        db.commit()
        logger.info(f"Route {route.id} deleted")
