"""
Classes module - Classes, invite codes and weekly schedules.
"""

from classroom.modules.classes.invite_codes import (
    InviteCodeAllocator,
    generate_invite_code,
    normalize_invite_code,
)
from classroom.modules.classes.models import ClassSchedule, ClassStatus, SchoolClass

__all__ = [
    "ClassSchedule",
    "ClassStatus",
    "InviteCodeAllocator",
    "SchoolClass",
    "generate_invite_code",
    "normalize_invite_code",
]
