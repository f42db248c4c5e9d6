from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func
from typing import List, Optional
from datetime import date

from src.models import Bus, SeatLayout, Route, Booking, BookingSeat
from src.buses.schemas import (
    BusCreate, BusUpdate, BusSearch, TimeSlot, SeatAvailability, SeatStatus, AdjacentBookedSeat
)
from src.bookings.booking_service import HELD_STATUSES, NON_CANCELLED_STATUSES, load_booked_seat_groups
from src.seats import generate_layout, get_adjacent_seats, apply_gender_restrictions
from src.logger_config import logger

_TIME_SLOT_HOURS = {
    TimeSlot.MORNING: lambda hour: 6 <= hour < 12,
    TimeSlot.AFTERNOON: lambda hour: 12 <= hour < 17,
    TimeSlot.EVENING: lambda hour: 17 <= hour < 21,
    TimeSlot.NIGHT: lambda hour: hour >= 21 or hour < 6,
}

class BusService:
    @staticmethod
    def get_bus(db: Session, bus_id: int) -> Optional[Bus]:
        return db.query(Bus).options(joinedload(Bus.seat_layout)).filter(Bus.id == bus_id).first()

    @staticmethod
    def get_buses(
        db: Session,
        owner_id: Optional[int] = None,
        active_only: bool = False,
        skip: int = 0,
        limit: int = 100
    ) -> List[Bus]:
        query = db.query(Bus)
        if owner_id is not None:
            query = query.filter(Bus.owner_id == owner_id)
        if active_only:
            query = query.filter(Bus.is_active == True)
        return query.order_by(Bus.created_at.desc(), Bus.id.desc()).offset(skip).limit(limit).all()

    @staticmethod
    def get_featured_buses(db: Session, limit: int = 6) -> List[Bus]:
        """Active buses, best rated first"""
        return db.query(Bus).filter(Bus.is_active == True).order_by(
            Bus.rating.desc(), Bus.created_at.desc()
        ).limit(limit).all()

    @staticmethod
    def create_bus(db: Session, bus_in: BusCreate, owner_id: Optional[int] = None) -> Bus:
        """
        Create a bus together with its seat map.

        The seat map is generated from the seat type template before anything
        is written, so an unknown seat type leaves the database untouched.
        """
        layout = generate_layout(bus_in.seat_type)

        if db.query(Bus).filter(Bus.bus_number == bus_in.bus_number).first():
            raise ValueError(f"Bus number {bus_in.bus_number} is already registered")

        bus_data = bus_in.dict()
        bus_data["seat_type"] = layout.seat_type.value
        bus_data["total_seats"] = layout.total_seats

        bus = Bus(**bus_data, owner_id=owner_id)
        bus.seat_layout = SeatLayout(
            layout=layout.layout,
            total_seats=layout.total_seats,
            seats=[seat.dict() for seat in layout.seats]
        )

        db.add(bus)
        db.commit()
        db.refresh(bus)

        logger.info(
            f"Bus {bus.bus_number} added with {bus.seat_type} seat layout ({bus.total_seats} seats)"
        )
        return bus

    @staticmethod
    def update_bus(db: Session, bus: Bus, bus_update: BusUpdate, owner_id: Optional[int] = None) -> Bus:
        if owner_id is not None and bus.owner_id != owner_id:
            raise PermissionError("Not authorized to update this bus")

        update_data = bus_update.dict(exclude_unset=True)

        new_number = update_data.get("bus_number")
        if new_number and new_number != bus.bus_number:
            if db.query(Bus).filter(Bus.bus_number == new_number).first():
                raise ValueError(f"Bus number {new_number} is already registered")

        for field, value in update_data.items():
            setattr(bus, field, value)

        db.commit()
        db.refresh(bus)
        return bus

    @staticmethod
    def delete_bus(db: Session, bus: Bus, owner_id: Optional[int] = None) -> None:
        """Delete a bus without upcoming bookings; buses with history are deactivated"""
        if owner_id is not None and bus.owner_id != owner_id:
            raise PermissionError("Not authorized to delete this bus")

        upcoming = db.query(Booking).filter(
            Booking.bus_id == bus.id,
            Booking.journey_date >= date.today(),
            Booking.booking_status.in_(HELD_STATUSES)
        ).count()
        if upcoming:
            raise ValueError(
                f"Cannot delete bus with {upcoming} active bookings. Cancel them first."
            )

        if bus.bookings:
            bus.is_active = False
            db.commit()
            logger.info(f"Bus {bus.bus_number} deactivated")
            return

        db.delete(bus)
        db.commit()
        logger.info(f"Bus {bus.bus_number} deleted")

    @staticmethod
    def assign_owner(db: Session, bus: Bus, owner_id: int) -> Bus:
        bus.owner_id = owner_id
        db.commit()
        db.refresh(bus)
        logger.info(f"Bus {bus.bus_number} assigned to owner {owner_id}")
        return bus

    @staticmethod
    def regenerate_seat_layout(db: Session, bus: Bus) -> SeatLayout:
        """Rebuild a bus's seat map from its seat type template"""
        layout = generate_layout(bus.seat_type)
        seats = [seat.dict() for seat in layout.seats]

        if bus.seat_layout is None:
            bus.seat_layout = SeatLayout(layout=layout.layout, total_seats=layout.total_seats, seats=seats)
        else:
            bus.seat_layout.layout = layout.layout
            bus.seat_layout.total_seats = layout.total_seats
            bus.seat_layout.seats = seats
        bus.total_seats = layout.total_seats

        db.commit()
        db.refresh(bus)
        return bus.seat_layout

    @staticmethod
    def count_booked_seats(db: Session, route_id: int, travel_date: date) -> int:
        return db.query(func.count(BookingSeat.id)).join(Booking).filter(
            Booking.route_id == route_id,
            Booking.journey_date == travel_date,
            Booking.booking_status.in_(HELD_STATUSES)
        ).scalar() or 0

    @staticmethod
    def search_buses(db: Session, search: BusSearch) -> List[dict]:
        """Routes matching source/destination that run on the travel date"""
        routes = db.query(Route).join(Bus).options(joinedload(Route.bus)).filter(
            Route.source.ilike(f"%{search.source}%"),
            Route.destination.ilike(f"%{search.destination}%"),
            Route.is_active == True,
            Bus.is_active == True
        ).all()

        day_name = search.travel_date.strftime("%A")
        routes = [r for r in routes if not r.bus.days or day_name in r.bus.days]

        if search.bus_types:
            types = {t.value for t in search.bus_types}
            routes = [r for r in routes if r.bus.bus_type in types]

        if search.operator:
            operator = search.operator.lower()
            routes = [r for r in routes if operator in r.bus.operator.lower()]

        if search.amenities:
            required = {a.value for a in search.amenities}
            routes = [r for r in routes if required.issubset(set(r.bus.amenities or []))]

        if search.time_slot:
            in_slot = _TIME_SLOT_HOURS[search.time_slot]
            routes = [r for r in routes if in_slot(int(r.departure_time.split(":")[0]))]

        results = []
        for route in routes:
            booked = BusService.count_booked_seats(db, route.id, search.travel_date)
            results.append({
                "route": route,
                "bus": route.bus,
                "available_seats": route.bus.total_seats - booked,
                "booked_seats": booked
            })

        sort_keys = {
            "price": lambda r: r["route"].price,
            "departure_time": lambda r: r["route"].departure_time,
            "rating": lambda r: r["bus"].rating or 0,
        }
        if search.sort_by in sort_keys:
            results.sort(key=sort_keys[search.sort_by], reverse=search.sort_order == "desc")

        return results

    @staticmethod
    def get_seat_availability(
        db: Session,
        bus: Bus,
        route_id: int,
        journey_date: date
    ) -> SeatAvailability:
        """Seat map of a journey with bookings and gender restrictions applied"""
        if bus.seat_layout is None:
            raise LookupError("Seat layout not found for this bus")

        seat_type = bus.seat_type
        booked_groups = load_booked_seat_groups(
            db, bus.id, route_id, journey_date, statuses=NON_CANCELLED_STATUSES
        )
        booked_map = {seat.seat_number: seat for group in booked_groups for seat in group}

        layout_seats = bus.seat_layout.seats
        available = [seat for seat in layout_seats if seat["seat_number"] not in booked_map]
        restricted = {
            seat["seat_number"]: seat
            for seat in apply_gender_restrictions(available, booked_groups, seat_type)
        }

        seats = []
        for seat in layout_seats:
            number = seat["seat_number"]
            booked = booked_map.get(number)
            adjacent = get_adjacent_seats(number, seat_type)
            annotated = restricted.get(number, {})

            seats.append(SeatStatus(
                **seat,
                is_booked=booked is not None,
                booked_by_gender=booked.passenger_gender if booked else None,
                gender_restriction=annotated.get("gender_restriction") or "Any",
                restricted_by=annotated.get("restricted_by"),
                has_adjacent=len(adjacent) > 0,
                adjacent_booked_seats=[
                    AdjacentBookedSeat(
                        seat_number=adj,
                        gender=booked_map[adj].passenger_gender,
                        has_gender_preference=booked_map[adj].gender_preference
                    )
                    for adj in adjacent if adj in booked_map
                ]
            ))

        return SeatAvailability(
            bus_id=bus.id,
            route_id=route_id,
            journey_date=journey_date,
            bus_type=seat_type,
            layout=bus.seat_layout.layout,
            total_seats=bus.seat_layout.total_seats,
            available_seats=len(available),
            seats=seats
        )
