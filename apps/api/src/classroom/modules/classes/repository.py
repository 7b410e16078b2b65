"""
Classes Repository

Database operations for classes and their weekly schedules.

Design Principles:
- Only database operations, no business rules
- Writes run inside savepoints so a constraint failure leaves the
  caller's transaction usable; the service layer commits
- Invite code uniqueness is enforced by the uq_classes_invite_code
  constraint; a violation surfaces as InviteCodeConflictError
"""

import logging
from datetime import time
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from classroom.modules.classes.exceptions import InviteCodeConflictError
from classroom.modules.classes.models import (
    DEFAULT_CLASS_CAPACITY,
    INVITE_CODE_CONSTRAINT,
    ClassSchedule,
    ClassStatus,
    SchoolClass,
)

logger = logging.getLogger(__name__)


class DuplicateScheduleError(Exception):
    """Raised when the uq_class_schedules_slot constraint rejects a write."""

    def __init__(self, day_of_week: int, start_time: time):
        self.day_of_week = day_of_week
        self.start_time = start_time
        super().__init__(f"Schedule slot already exists: day {day_of_week} at {start_time}")


def _is_invite_code_violation(error: IntegrityError) -> bool:
    # PostgreSQL reports the constraint name, SQLite the column
    message = str(error.orig)
    return INVITE_CODE_CONSTRAINT in message or "classes.invite_code" in message


# =============================================================================
# Classes
# =============================================================================


async def create(
    db: AsyncSession,
    *,
    name: str,
    invite_code: str,
    subject_id: int,
    teacher_id: str,
    description: str | None = None,
    banner_url: str | None = None,
    banner_cld_pub_id: str | None = None,
    capacity: int = DEFAULT_CLASS_CAPACITY,
    status: ClassStatus = ClassStatus.ACTIVE,
) -> SchoolClass:
    """
    Insert a class with an already allocated invite code.

    Raises:
        InviteCodeConflictError: If another class took the code since it was checked
    """
    school_class = SchoolClass(
        name=name,
        invite_code=invite_code,
        subject_id=subject_id,
        teacher_id=teacher_id,
        description=description,
        banner_url=banner_url,
        banner_cld_pub_id=banner_cld_pub_id,
        capacity=capacity,
        status=status,
    )

    try:
        async with db.begin_nested():
            db.add(school_class)
    except IntegrityError as e:
        if _is_invite_code_violation(e):
            raise InviteCodeConflictError(invite_code) from e
        raise

    await db.refresh(school_class)

    logger.info(f"Created class {school_class.id} ({school_class.name})")
    return school_class


async def get_by_id(db: AsyncSession, class_id: int) -> SchoolClass | None:
    """Get a class by ID, with subject and teacher loaded."""
    return await db.get(SchoolClass, class_id)


def select_class_for_update(class_id: int) -> Select:
    """SELECT ... FOR UPDATE of one class row, refreshing any copy already in the session."""
    return (
        select(SchoolClass)
        .where(SchoolClass.id == class_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )


async def lock_for_enrollment(db: AsyncSession, class_id: int) -> SchoolClass | None:
    """
    Lock a class row until the end of the transaction and reload it.

    Enrollments into the same class queue on this lock, so the seat count
    read after it holds until commit. SQLite has no row locks; it
    serializes writers instead.

    Returns:
        The freshly loaded class, or None if it no longer exists
    """
    result = await db.execute(select_class_for_update(class_id))
    return result.scalar_one_or_none()


async def get_by_invite_code(db: AsyncSession, invite_code: str) -> SchoolClass | None:
    """Get a class by its (normalized) invite code."""
    result = await db.execute(select(SchoolClass).where(SchoolClass.invite_code == invite_code))
    return result.scalar_one_or_none()


async def invite_code_exists(db: AsyncSession, invite_code: str) -> bool:
    """Check whether any class currently uses an invite code."""
    result = await db.execute(
        select(SchoolClass.id).where(SchoolClass.invite_code == invite_code).limit(1)
    )
    return result.scalar_one_or_none() is not None


async def update_invite_code(
    db: AsyncSession, class_id: int, invite_code: str
) -> SchoolClass | None:
    """
    Replace a class's invite code.

    Returns:
        The updated class, or None if it no longer exists

    Raises:
        InviteCodeConflictError: If another class took the code since it was checked
    """
    school_class = await get_by_id(db, class_id)
    if school_class is None:
        return None

    try:
        async with db.begin_nested():
            school_class.invite_code = invite_code
    except IntegrityError as e:
        if _is_invite_code_violation(e):
            raise InviteCodeConflictError(invite_code) from e
        raise

    await db.refresh(school_class)
    return school_class


async def list_classes(
    db: AsyncSession,
    *,
    search: str | None = None,
    subject_id: int | None = None,
    teacher_id: str | None = None,
    offset: int = 0,
    limit: int = 10,
) -> tuple[list[SchoolClass], int]:
    """
    List classes with optional filters.

    Args:
        db: Database session
        search: Case-insensitive substring of the class name
        subject_id: Only classes of this subject
        teacher_id: Only classes taught by this teacher
        offset: Number of records to skip
        limit: Maximum records to return

    Returns:
        Tuple of (classes, total count matching filters), newest first
    """
    conditions = []
    if subject_id is not None:
        conditions.append(SchoolClass.subject_id == subject_id)
    if teacher_id:
        conditions.append(SchoolClass.teacher_id == teacher_id)
    if search:
        conditions.append(SchoolClass.name.ilike(f"%{search}%"))

    total = await db.scalar(select(func.count()).select_from(SchoolClass).where(*conditions))

    result = await db.execute(
        select(SchoolClass)
        .where(*conditions)
        .order_by(SchoolClass.created_at.desc(), SchoolClass.id.desc())
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total or 0


async def update(db: AsyncSession, school_class: SchoolClass, **fields: Any) -> SchoolClass:
    """Apply field changes to a class. The invite code is changed only via update_invite_code."""
    fields.pop("invite_code", None)

    async with db.begin_nested():
        for key, value in fields.items():
            setattr(school_class, key, value)

    await db.refresh(school_class)

    logger.info(f"Updated class {school_class.id}: {sorted(fields)}")
    return school_class


async def delete(db: AsyncSession, school_class: SchoolClass) -> None:
    """Delete a class. Schedules and enrollments cascade in the database."""
    await db.delete(school_class)
    await db.flush()

    logger.info(f"Deleted class {school_class.id}")


async def count_by_teacher(db: AsyncSession, teacher_id: str) -> int:
    """Count the classes a teacher owns."""
    total = await db.scalar(
        select(func.count()).select_from(SchoolClass).where(SchoolClass.teacher_id == teacher_id)
    )
    return total or 0


# =============================================================================
# Schedules
# =============================================================================


async def list_schedules(db: AsyncSession, class_id: int) -> list[ClassSchedule]:
    """List a class's meeting slots in weekly order."""
    result = await db.execute(
        select(ClassSchedule)
        .where(ClassSchedule.class_id == class_id)
        .order_by(ClassSchedule.day_of_week, ClassSchedule.start_time)
    )
    return list(result.scalars().all())


async def get_schedule(
    db: AsyncSession, class_id: int, schedule_id: int
) -> ClassSchedule | None:
    """Get a schedule entry that belongs to the given class."""
    result = await db.execute(
        select(ClassSchedule).where(
            ClassSchedule.id == schedule_id,
            ClassSchedule.class_id == class_id,
        )
    )
    return result.scalar_one_or_none()


async def create_schedule(
    db: AsyncSession,
    *,
    class_id: int,
    day_of_week: int,
    start_time: time,
    end_time: time,
    room: str | None = None,
) -> ClassSchedule:
    """
    Add a meeting slot to a class.

    Raises:
        DuplicateScheduleError: If the class already meets at that day and start time
    """
    schedule = ClassSchedule(
        class_id=class_id,
        day_of_week=day_of_week,
        start_time=start_time,
        end_time=end_time,
        room=room,
    )

    try:
        async with db.begin_nested():
            db.add(schedule)
    except IntegrityError as e:
        raise DuplicateScheduleError(day_of_week, start_time) from e

    await db.refresh(schedule)
    return schedule


async def delete_schedule(db: AsyncSession, schedule: ClassSchedule) -> None:
    await db.delete(schedule)
    await db.flush()


# =============================================================================
# Invite code store
# =============================================================================


class ClassInviteCodeStore:
    """InviteCodeStore backed by the classes table of one session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def exists_by_invite_code(self, invite_code: str) -> bool:
        return await invite_code_exists(self.db, invite_code)

    async def get_class(self, class_id: int) -> SchoolClass | None:
        return await get_by_id(self.db, class_id)

    async def update_invite_code(self, class_id: int, invite_code: str) -> SchoolClass | None:
        return await update_invite_code(self.db, class_id, invite_code)
