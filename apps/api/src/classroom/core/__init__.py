"""
Core module - Configuration, database, Redis, rate limiting, and logging.
"""

from classroom.core.config import get_settings, settings
from classroom.core.database import Base, close_db, get_db, init_db
from classroom.core.redis import close_redis, init_redis

__all__ = [
    # Config
    "settings",
    "get_settings",
    # Database
    "Base",
    "get_db",
    "init_db",
    "close_db",
    # Redis
    "init_redis",
    "close_redis",
]
