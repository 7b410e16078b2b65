"""
Enrollments Service Layer

Business rules for putting students into classes. Both POST /enrollments
and the join-by-invite-code flow go through enroll_student(), so the same
checks apply however a student arrives:

1. The user exists and is a student
2. The class is active
3. The student is not already enrolled
4. The class has a free seat

The class row is locked (SELECT ... FOR UPDATE) before the seat count, so
concurrent enrollments into one class are checked one at a time.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from classroom.modules.classes import repository as class_repository
from classroom.modules.classes.exceptions import (
    ClassFullError,
    ClassNotFoundError,
    ClassNotJoinableError,
)
from classroom.modules.classes.models import ClassStatus, SchoolClass
from classroom.modules.enrollments import repository
from classroom.modules.enrollments.models import Enrollment
from classroom.modules.enrollments.repository import DuplicateEnrollmentError
from classroom.modules.enrollments.schemas import EnrollmentCreate
from classroom.modules.shared.exceptions import ConflictError, NotFoundError
from classroom.modules.shared.schemas import Pagination, build_pagination, page_offset
from classroom.modules.users.models import UserRole
from classroom.modules.users.repository import UserRepository
from classroom.modules.users.service import InvalidUserRoleError, UserNotFoundError

logger = logging.getLogger(__name__)


class EnrollmentNotFoundError(NotFoundError):
    def __init__(self, enrollment_id: int):
        super().__init__(
            message=f"Enrollment {enrollment_id} not found",
            error_code="ENROLLMENT_NOT_FOUND",
        )


class AlreadyEnrolledError(ConflictError):
    """Raised when a student is already enrolled in the class."""

    def __init__(self):
        super().__init__(
            message="Student is already enrolled in this class",
            error_code="ALREADY_ENROLLED",
        )


async def enroll_student(
    db: AsyncSession, school_class: SchoolClass, student_id: str
) -> Enrollment:
    """
    Enroll a student in a class. The caller commits.

    Args:
        db: Database session
        school_class: Class being joined
        student_id: User joining the class

    Returns:
        The new Enrollment

    Raises:
        UserNotFoundError: If the user does not exist
        InvalidUserRoleError: If the user is not a student
        ClassNotFoundError: If the class was deleted concurrently
        ClassNotJoinableError: If the class is not active
        AlreadyEnrolledError: If the student is already enrolled
        ClassFullError: If the class is at capacity
    """
    student = await UserRepository.get_by_id(db, student_id)
    if not student:
        raise UserNotFoundError(student_id)

    if student.role != UserRole.STUDENT:
        raise InvalidUserRoleError(f"Only students can join classes (role: {student.role.value})")

    # Held until the caller commits; the status and seat checks below read the locked row
    locked_class = await class_repository.lock_for_enrollment(db, school_class.id)
    if locked_class is None:
        raise ClassNotFoundError(school_class.id)
    school_class = locked_class

    if school_class.status != ClassStatus.ACTIVE:
        raise ClassNotJoinableError(school_class.status.value)

    existing = await repository.get_by_student_and_class(db, student_id, school_class.id)
    if existing:
        raise AlreadyEnrolledError()

    enrolled = await repository.count_for_class(db, school_class.id)
    if enrolled >= school_class.capacity:
        logger.info(f"Class {school_class.id} is full ({enrolled}/{school_class.capacity})")
        raise ClassFullError(school_class.capacity)

    try:
        return await repository.create(db, student_id=student_id, class_id=school_class.id)
    except DuplicateEnrollmentError as e:
        # Concurrent join by the same student
        raise AlreadyEnrolledError() from e


async def list_enrollments(
    db: AsyncSession,
    *,
    student_id: str | None = None,
    class_id: int | None = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Enrollment], Pagination]:
    """List enrollments with student/class filters and pagination."""
    enrollments, total = await repository.list_enrollments(
        db,
        student_id=student_id,
        class_id=class_id,
        offset=page_offset(page, limit),
        limit=limit,
    )
    return enrollments, build_pagination(page, limit, total)


async def create_enrollment(db: AsyncSession, data: EnrollmentCreate) -> Enrollment:
    """
    Enroll a student in a class by class ID.

    Raises:
        ClassNotFoundError: If the class does not exist
        plus everything enroll_student() raises
    """
    school_class = await class_repository.get_by_id(db, data.class_id)
    if not school_class:
        raise ClassNotFoundError(data.class_id)

    enrollment = await enroll_student(db, school_class, data.student_id)
    await db.commit()
    return enrollment


async def delete_enrollment(db: AsyncSession, enrollment_id: int) -> Enrollment:
    """
    Remove a student from a class.

    Raises:
        EnrollmentNotFoundError: If the enrollment does not exist
    """
    enrollment = await repository.get_by_id(db, enrollment_id)
    if not enrollment:
        raise EnrollmentNotFoundError(enrollment_id)

    await repository.delete(db, enrollment)
    await db.commit()
    return enrollment
