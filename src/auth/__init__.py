"""
Authentication Module

Registration for travellers and bus owners, login with JWT bearer tokens and
role checks (user, bus_owner, admin).
"""

from .router import router
from .service import UserService

__all__ = ["router", "UserService"]
