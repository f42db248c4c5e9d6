"""
Bus Route Module

Routes a bus runs: source, destination, timings, fare and the boarding and
dropping points offered to travellers.

Key Components:
- service.py: route CRUD with owner checks
- router.py: public route lookups
- schemas.py: Pydantic models for route data
"""

from .router import router
from .service import RouteService
from .schemas import RouteCreate, RouteUpdate, Route

__all__ = [
    "router",
    "RouteService",
    "RouteCreate",
    "RouteUpdate",
    "Route"
]
