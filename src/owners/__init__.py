"""
Bus Owner Module

Self-service for approved bus owners: their buses and routes, bookings on
their buses, payment verification, statistics and passenger manifests.
"""

from .router import router
from .service import OwnerService

__all__ = ["router", "OwnerService"]
