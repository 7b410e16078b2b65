"""
Shared Model Base Classes

Common columns for every table: integer primary key and audit timestamps.
"""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column

from classroom.core.database import Base


class TimestampMixin:
    """created_at / updated_at columns maintained by the database."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class BaseModel(TimestampMixin, Base):
    """
    Abstract base for application tables.

    Provides an auto-incrementing integer primary key plus timestamps.
    Models that need a different key type (users) inherit TimestampMixin
    and Base directly.
    """

    __abstract__ = True

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)


def enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    """Persist enum values ("teacher") rather than member names ("TEACHER")."""
    return [member.value for member in enum_cls]
