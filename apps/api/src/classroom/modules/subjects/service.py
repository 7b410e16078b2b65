"""
Subjects Service Layer

Business logic for subject management. Translates repository outcomes
into service errors and owns the transaction boundary.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from classroom.modules.shared.exceptions import ConflictError, NotFoundError
from classroom.modules.shared.schemas import Pagination, build_pagination, page_offset
from classroom.modules.subjects.models import Subject
from classroom.modules.subjects.repository import DuplicateSubjectCodeError, SubjectRepository
from classroom.modules.subjects.schemas import SubjectCreate, SubjectUpdate

logger = logging.getLogger(__name__)


class SubjectNotFoundError(NotFoundError):
    """Raised when a subject is not found."""

    def __init__(self, subject_id: int | None = None):
        message = (
            f"Subject {subject_id} not found" if subject_id is not None else "Subject not found"
        )
        super().__init__(message=message, error_code="SUBJECT_NOT_FOUND")


class SubjectCodeExistsError(ConflictError):
    """Raised when a subject code is already in use."""

    def __init__(self, code: str):
        super().__init__(
            message=f"Subject code '{code}' already exists",
            error_code="SUBJECT_CODE_EXISTS",
        )


async def list_subjects(
    db: AsyncSession,
    *,
    query: str | None = None,
    department: str | None = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Subject], Pagination]:
    """List subjects with search, department filter, and pagination."""
    subjects, total = await SubjectRepository.list_subjects(
        db,
        query=query.strip() if query else None,
        department=department.strip() if department else None,
        offset=page_offset(page, limit),
        limit=limit,
    )
    return subjects, build_pagination(page, limit, total)


async def get_subject(db: AsyncSession, subject_id: int) -> Subject:
    """
    Get a subject by ID.

    Raises:
        SubjectNotFoundError: If the subject does not exist
    """
    subject = await SubjectRepository.get_by_id(db, subject_id)
    if not subject:
        raise SubjectNotFoundError(subject_id)
    return subject


async def create_subject(db: AsyncSession, data: SubjectCreate) -> Subject:
    """
    Create a subject.

    Raises:
        SubjectCodeExistsError: If the code is already in use
    """
    try:
        subject = await SubjectRepository.create(
            db,
            name=data.name,
            code=data.code,
            description=data.description,
            department=data.department,
        )
    except DuplicateSubjectCodeError as e:
        logger.warning(f"Subject code conflict on create: {e.code}")
        raise SubjectCodeExistsError(e.code) from e

    await db.commit()
    return subject


async def update_subject(db: AsyncSession, subject_id: int, data: SubjectUpdate) -> Subject:
    """
    Update a subject with the fields present in the request.

    Raises:
        SubjectNotFoundError: If the subject does not exist
        SubjectCodeExistsError: If the new code is already in use
    """
    subject = await get_subject(db, subject_id)

    changes = data.model_dump(exclude_unset=True)
    if not changes:
        return subject

    try:
        subject = await SubjectRepository.update(db, subject, **changes)
    except DuplicateSubjectCodeError as e:
        logger.warning(f"Subject code conflict on update of {subject_id}: {e.code}")
        raise SubjectCodeExistsError(e.code) from e

    await db.commit()
    return subject


async def delete_subject(db: AsyncSession, subject_id: int) -> Subject:
    """
    Delete a subject and, by cascade, its classes.

    Raises:
        SubjectNotFoundError: If the subject does not exist
    """
    subject = await get_subject(db, subject_id)
    await SubjectRepository.delete(db, subject)
    await db.commit()
    return subject
