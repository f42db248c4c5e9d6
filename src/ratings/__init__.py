"""
Bus Ratings Module

Star ratings (1-5) travellers leave for completed trips; each bus keeps its
average rating and review count up to date.
"""

from .router import router
from .service import RatingService

__all__ = ["router", "RatingService"]
