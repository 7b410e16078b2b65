"""
Shared module - Base model, service errors, and common schemas.
"""

from classroom.modules.shared.exceptions import ConflictError, NotFoundError, ServiceError
from classroom.modules.shared.models import BaseModel, TimestampMixin
from classroom.modules.shared.schemas import Pagination, build_pagination

__all__ = [
    "BaseModel",
    "TimestampMixin",
    "ServiceError",
    "NotFoundError",
    "ConflictError",
    "Pagination",
    "build_pagination",
]
