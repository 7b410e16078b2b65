"""
Users module - User management.
"""

from classroom.modules.users.models import User, UserRole
from classroom.modules.users.repository import UserRepository

__all__ = ["User", "UserRole", "UserRepository"]
