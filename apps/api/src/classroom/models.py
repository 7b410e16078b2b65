"""
Model Registry

Imports every ORM model so Base.metadata is complete and string-based
relationships resolve. Import this before configuring mappers
(application startup, Alembic, scripts, tests).
"""

from classroom.core.database import Base
from classroom.modules.classes.models import ClassSchedule, ClassStatus, SchoolClass
from classroom.modules.enrollments.models import Enrollment
from classroom.modules.subjects.models import Subject
from classroom.modules.users.models import User, UserRole

__all__ = [
    "Base",
    "ClassSchedule",
    "ClassStatus",
    "Enrollment",
    "SchoolClass",
    "Subject",
    "User",
    "UserRole",
]
