"""
Classes Service Layer

Business logic for classes:
- Create with a freshly allocated invite code
- Regenerate the invite code
- Join a class by invite code
- Update / delete and schedule management

Invite code races: the allocator only checks that a code is free, so an
insert or update can still lose against a concurrent request and raise
InviteCodeConflictError. Create and regenerate allocate a new code and try
once more; a second conflict is returned to the client as 409.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from classroom.modules.classes import repository
from classroom.modules.classes.exceptions import (
    ClassNotFoundError,
    InvalidTeacherError,
    InviteCodeConflictError,
    InviteCodeNotFoundError,
    ScheduleConflictError,
    ScheduleNotFoundError,
)
from classroom.modules.classes.invite_codes import InviteCodeAllocator, normalize_invite_code
from classroom.modules.classes.models import ClassSchedule, SchoolClass
from classroom.modules.classes.repository import ClassInviteCodeStore, DuplicateScheduleError
from classroom.modules.classes.schemas import (
    ClassCreate,
    ClassDetail,
    ClassListItem,
    ClassUpdate,
    EnrolledStudent,
    ScheduleCreate,
    ScheduleResponse,
)
from classroom.modules.enrollments import repository as enrollment_repository
from classroom.modules.enrollments.models import Enrollment
from classroom.modules.enrollments.service import enroll_student
from classroom.modules.shared.schemas import Pagination, build_pagination, page_offset
from classroom.modules.subjects.repository import SubjectRepository
from classroom.modules.subjects.service import SubjectNotFoundError
from classroom.modules.users.models import UserRole
from classroom.modules.users.repository import UserRepository
from classroom.modules.users.service import UserNotFoundError

logger = logging.getLogger(__name__)

# Attempts at insert/update per request when the invite code is taken concurrently
INVITE_CODE_WRITE_ATTEMPTS = 2


def get_allocator(db: AsyncSession) -> InviteCodeAllocator:
    """Allocator bound to the request's session."""
    return InviteCodeAllocator(ClassInviteCodeStore(db))


async def _validate_references(
    db: AsyncSession, *, subject_id: int | None, teacher_id: str | None
) -> None:
    """
    Check that the referenced subject and teacher exist.

    Raises:
        SubjectNotFoundError: If the subject does not exist
        UserNotFoundError: If the teacher does not exist
        InvalidTeacherError: If the user is not a teacher
    """
    if subject_id is not None:
        subject = await SubjectRepository.get_by_id(db, subject_id)
        if not subject:
            raise SubjectNotFoundError(subject_id)

    if teacher_id is not None:
        teacher = await UserRepository.get_by_id(db, teacher_id)
        if not teacher:
            raise UserNotFoundError(teacher_id)
        if teacher.role != UserRole.TEACHER:
            raise InvalidTeacherError(teacher_id)


# =============================================================================
# Classes
# =============================================================================


async def list_classes(
    db: AsyncSession,
    *,
    search: str | None = None,
    subject_id: int | None = None,
    teacher_id: str | None = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[SchoolClass], Pagination]:
    """List classes with search, subject/teacher filters, and pagination."""
    classes, total = await repository.list_classes(
        db,
        search=search.strip() if search else None,
        subject_id=subject_id,
        teacher_id=teacher_id,
        offset=page_offset(page, limit),
        limit=limit,
    )
    return classes, build_pagination(page, limit, total)


async def get_class(db: AsyncSession, class_id: int) -> SchoolClass:
    """
    Get a class by ID.

    Raises:
        ClassNotFoundError: If the class does not exist
    """
    school_class = await repository.get_by_id(db, class_id)
    if not school_class:
        raise ClassNotFoundError(class_id)
    return school_class


async def get_class_detail(db: AsyncSession, class_id: int) -> ClassDetail:
    """
    Get a class with its subject, teacher, schedule and enrolled students.

    Raises:
        ClassNotFoundError: If the class does not exist
    """
    school_class = await get_class(db, class_id)
    schedules = await repository.list_schedules(db, class_id)
    roster = await enrollment_repository.list_roster(db, class_id)

    # Built from the list view so the lazy schedules collection is never touched
    return ClassDetail(
        **ClassListItem.model_validate(school_class).model_dump(),
        schedules=[ScheduleResponse.model_validate(s) for s in schedules],
        students=[EnrolledStudent(**row) for row in roster],
        enrolled_count=len(roster),
    )


async def create_class(
    db: AsyncSession,
    data: ClassCreate,
    allocator: InviteCodeAllocator | None = None,
) -> SchoolClass:
    """
    Create a class with a unique invite code.

    Args:
        db: Database session
        data: Validated class data
        allocator: Invite code allocator (defaults to one bound to db)

    Returns:
        The created class

    Raises:
        SubjectNotFoundError: If the subject does not exist
        UserNotFoundError: If the teacher does not exist
        InvalidTeacherError: If the teacher_id user is not a teacher
        InviteCodeAllocationExhaustedError: If no free invite code was found
        InviteCodeConflictError: If the code was taken concurrently twice in a row
    """
    await _validate_references(db, subject_id=data.subject_id, teacher_id=data.teacher_id)

    allocator = allocator or get_allocator(db)

    for attempt in range(1, INVITE_CODE_WRITE_ATTEMPTS + 1):
        invite_code = await allocator.allocate()
        try:
            school_class = await repository.create(
                db,
                invite_code=invite_code,
                **data.model_dump(),
            )
            break
        except InviteCodeConflictError:
            logger.warning(
                f"Invite code {invite_code} taken concurrently "
                f"(attempt {attempt}/{INVITE_CODE_WRITE_ATTEMPTS})"
            )
            if attempt == INVITE_CODE_WRITE_ATTEMPTS:
                raise

    await db.commit()

    logger.info(f"Class {school_class.id} created with invite code {school_class.invite_code}")
    return school_class


async def regenerate_invite_code(
    db: AsyncSession,
    class_id: int,
    allocator: InviteCodeAllocator | None = None,
) -> SchoolClass:
    """
    Give a class a new invite code. The old code stops working immediately.

    Raises:
        ClassNotFoundError: If the class does not exist
        InviteCodeAllocationExhaustedError: If no free invite code was found
        InviteCodeConflictError: If the code was taken concurrently twice in a row
    """
    allocator = allocator or get_allocator(db)

    for attempt in range(1, INVITE_CODE_WRITE_ATTEMPTS + 1):
        try:
            await allocator.regenerate(class_id)
            break
        except InviteCodeConflictError as e:
            logger.warning(
                f"Invite code {e.invite_code} taken concurrently while regenerating "
                f"class {class_id} (attempt {attempt}/{INVITE_CODE_WRITE_ATTEMPTS})"
            )
            if attempt == INVITE_CODE_WRITE_ATTEMPTS:
                raise

    await db.commit()
    return await get_class(db, class_id)


async def update_class(db: AsyncSession, class_id: int, data: ClassUpdate) -> SchoolClass:
    """
    Update a class with the fields present in the request.

    Raises:
        ClassNotFoundError: If the class does not exist
        SubjectNotFoundError: If a new subject does not exist
        UserNotFoundError: If a new teacher does not exist
        InvalidTeacherError: If a new teacher is not a teacher
    """
    school_class = await get_class(db, class_id)

    changes = data.model_dump(exclude_unset=True)

    # Non-nullable columns can't be cleared
    for field in ("name", "subject_id", "teacher_id", "capacity", "status"):
        if field in changes and changes[field] is None:
            changes.pop(field)

    if not changes:
        return school_class

    await _validate_references(
        db,
        subject_id=changes.get("subject_id"),
        teacher_id=changes.get("teacher_id"),
    )

    school_class = await repository.update(db, school_class, **changes)
    await db.commit()
    return school_class


async def delete_class(db: AsyncSession, class_id: int) -> SchoolClass:
    """
    Delete a class together with its schedules and enrollments.

    Raises:
        ClassNotFoundError: If the class does not exist
    """
    school_class = await get_class(db, class_id)
    await repository.delete(db, school_class)
    await db.commit()
    return school_class


async def join_class(
    db: AsyncSession, invite_code: str, student_id: str
) -> tuple[Enrollment, SchoolClass]:
    """
    Enroll a student in the class identified by an invite code.

    The code is compared after stripping whitespace and uppercasing.

    Returns:
        Tuple of (enrollment, class joined)

    Raises:
        InviteCodeNotFoundError: If no class has the code
        plus everything enroll_student() raises
    """
    code = normalize_invite_code(invite_code)

    school_class = await repository.get_by_invite_code(db, code)
    if not school_class:
        raise InviteCodeNotFoundError()

    enrollment = await enroll_student(db, school_class, student_id)
    await db.commit()

    logger.info(f"Student {student_id} joined class {school_class.id} by invite code")
    return enrollment, school_class


# =============================================================================
# Schedules
# =============================================================================


async def list_schedules(db: AsyncSession, class_id: int) -> list[ClassSchedule]:
    """
    List a class's weekly schedule.

    Raises:
        ClassNotFoundError: If the class does not exist
    """
    await get_class(db, class_id)
    return await repository.list_schedules(db, class_id)


async def add_schedule(db: AsyncSession, class_id: int, data: ScheduleCreate) -> ClassSchedule:
    """
    Add a meeting slot to a class.

    Raises:
        ClassNotFoundError: If the class does not exist
        ScheduleConflictError: If the class already meets at that day and start time
    """
    await get_class(db, class_id)

    try:
        schedule = await repository.create_schedule(
            db,
            class_id=class_id,
            day_of_week=data.day_of_week,
            start_time=data.start_time,
            end_time=data.end_time,
            room=data.room,
        )
    except DuplicateScheduleError as e:
        raise ScheduleConflictError(e.day_of_week, e.start_time.strftime("%H:%M")) from e

    await db.commit()
    return schedule


async def remove_schedule(db: AsyncSession, class_id: int, schedule_id: int) -> ClassSchedule:
    """
    Remove a meeting slot from a class.

    Raises:
        ClassNotFoundError: If the class does not exist
        ScheduleNotFoundError: If the slot does not belong to the class
    """
    await get_class(db, class_id)

    schedule = await repository.get_schedule(db, class_id, schedule_id)
    if not schedule:
        raise ScheduleNotFoundError(schedule_id)

    await repository.delete_schedule(db, schedule)
    await db.commit()
    return schedule
