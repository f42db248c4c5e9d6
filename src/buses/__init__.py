"""
Bus Module

Bus registration with generated seat maps, bus search and per-journey
seat availability.

Key Components:
- service.py: bus CRUD, search, seat availability with gender restrictions
- router.py: public bus endpoints
- schemas.py: Pydantic models for buses, search and seat status
"""

from .router import router
from .service import BusService
from .schemas import BusCreate, BusUpdate, Bus, BusSearch, SeatAvailability, SeatStatus

__all__ = [
    "router",
    "BusService",
    "BusCreate",
    "BusUpdate",
    "Bus",
    "BusSearch",
    "SeatAvailability",
    "SeatStatus"
]
