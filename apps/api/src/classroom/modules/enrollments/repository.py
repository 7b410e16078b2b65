"""
Enrollments Repository

Database operations for student enrollments.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from classroom.modules.enrollments.models import Enrollment
from classroom.modules.users.models import User

logger = logging.getLogger(__name__)


class DuplicateEnrollmentError(Exception):
    """Raised when the uq_enrollments_student_class constraint rejects a write."""

    def __init__(self, student_id: str, class_id: int):
        self.student_id = student_id
        self.class_id = class_id
        super().__init__(f"Student {student_id} is already enrolled in class {class_id}")


async def create(db: AsyncSession, *, student_id: str, class_id: int) -> Enrollment:
    """
    Enroll a student in a class.

    Raises:
        DuplicateEnrollmentError: If the student is already enrolled
    """
    enrollment = Enrollment(student_id=student_id, class_id=class_id)

    try:
        async with db.begin_nested():
            db.add(enrollment)
    except IntegrityError as e:
        raise DuplicateEnrollmentError(student_id, class_id) from e

    await db.refresh(enrollment)

    logger.info(f"Enrolled student {student_id} in class {class_id}")
    return enrollment


async def get_by_id(db: AsyncSession, enrollment_id: int) -> Enrollment | None:
    return await db.get(Enrollment, enrollment_id)


async def get_by_student_and_class(
    db: AsyncSession, student_id: str, class_id: int
) -> Enrollment | None:
    result = await db.execute(
        select(Enrollment).where(
            Enrollment.student_id == student_id,
            Enrollment.class_id == class_id,
        )
    )
    return result.scalar_one_or_none()


async def count_for_class(db: AsyncSession, class_id: int) -> int:
    """Number of students enrolled in a class."""
    total = await db.scalar(
        select(func.count()).select_from(Enrollment).where(Enrollment.class_id == class_id)
    )
    return total or 0


async def count_for_student(db: AsyncSession, student_id: str) -> int:
    """Number of classes a student is enrolled in."""
    total = await db.scalar(
        select(func.count()).select_from(Enrollment).where(Enrollment.student_id == student_id)
    )
    return total or 0


async def list_enrollments(
    db: AsyncSession,
    *,
    student_id: str | None = None,
    class_id: int | None = None,
    offset: int = 0,
    limit: int = 10,
) -> tuple[list[Enrollment], int]:
    """
    List enrollments, newest first, with class and student loaded.

    Args:
        db: Database session
        student_id: Only this student's enrollments (optional)
        class_id: Only this class's enrollments (optional)
        offset: Number of records to skip
        limit: Maximum records to return

    Returns:
        Tuple of (enrollments, total count matching filters)
    """
    conditions = []
    if student_id:
        conditions.append(Enrollment.student_id == student_id)
    if class_id is not None:
        conditions.append(Enrollment.class_id == class_id)

    total = await db.scalar(select(func.count()).select_from(Enrollment).where(*conditions))

    result = await db.execute(
        select(Enrollment)
        .where(*conditions)
        .order_by(Enrollment.enrolled_at.desc(), Enrollment.id.desc())
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total or 0


async def list_roster(db: AsyncSession, class_id: int) -> list[dict]:
    """
    Students enrolled in a class, in enrollment order.

    Returns:
        Rows with id, name, email, image, enrollment_id and enrolled_at
    """
    result = await db.execute(
        select(
            User.id,
            User.name,
            User.email,
            User.image,
            Enrollment.id.label("enrollment_id"),
            Enrollment.enrolled_at,
        )
        .join(Enrollment, Enrollment.student_id == User.id)
        .where(Enrollment.class_id == class_id)
        .order_by(Enrollment.enrolled_at, Enrollment.id)
    )
    return [dict(row) for row in result.mappings().all()]


async def delete(db: AsyncSession, enrollment: Enrollment) -> None:
    await db.delete(enrollment)
    await db.flush()

    logger.info(
        f"Removed student {enrollment.student_id} from class {enrollment.class_id}"
    )
