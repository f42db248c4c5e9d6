"""
Saved Passengers Module

Passenger details a traveller keeps for quick seat booking (at most ten,
one of them marked as default).
"""

from .router import router
from .service import SavedPassengerService

__all__ = ["router", "SavedPassengerService"]
