"""
Admin Module

Platform administration: fleet and route management, seat map regeneration,
booking oversight, refunds, user blocking and bus owner approval.

Key Components:
- admin_service.py: statistics, user moderation, operator approval
- router.py: admin-only endpoints under /api/v1/admin
- schemas.py: Pydantic models for admin views
"""

from .router import router
from .admin_service import AdminManagementService

__all__ = ["router", "AdminManagementService"]
