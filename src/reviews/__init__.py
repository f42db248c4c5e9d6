"""
Bus Reviews Module

Written reviews of completed journeys. Reviews stay hidden until an admin
approves them; anyone signed in can report an approved review.

Key Components:
- service.py: review creation rules, public summaries, moderation
- router.py: traveller-facing review endpoints
- schemas.py: Pydantic models for reviews
"""

from .router import router
from .service import ReviewService

__all__ = ["router", "ReviewService"]
