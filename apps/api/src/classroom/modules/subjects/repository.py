"""
Subject Repository

Database operations for subjects.
"""

import logging
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from classroom.modules.subjects.models import Subject

logger = logging.getLogger(__name__)


class DuplicateSubjectCodeError(Exception):
    """Raised when the subjects.code unique constraint rejects a write."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Subject code already exists: {code}")


class SubjectRepository:
    """Repository for subject database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        name: str,
        code: str,
        description: str | None = None,
        department: str | None = None,
    ) -> Subject:
        """
        Create a new subject.

        Runs inside a savepoint so a duplicate code leaves the
        surrounding transaction usable.

        Raises:
            DuplicateSubjectCodeError: If the code is already taken
        """
        subject = Subject(
            name=name,
            code=code,
            description=description,
            department=department,
        )

        try:
            async with db.begin_nested():
                db.add(subject)
        except IntegrityError as e:
            raise DuplicateSubjectCodeError(code) from e

        await db.refresh(subject)

        logger.info(f"Created subject: {subject.id} - {subject.code}")
        return subject

    @staticmethod
    async def get_by_id(db: AsyncSession, subject_id: int) -> Subject | None:
        """Get a subject by ID."""
        return await db.get(Subject, subject_id)

    @staticmethod
    async def list_subjects(
        db: AsyncSession,
        *,
        query: str | None = None,
        department: str | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[Subject], int]:
        """
        List subjects with optional search and department filter.

        Args:
            db: Database session
            query: Case-insensitive substring of the name or code (optional)
            department: Exact department match (optional)
            offset: Number of records to skip
            limit: Maximum records to return

        Returns:
            Tuple of (subjects, total count matching filters), newest first
        """
        conditions = []
        if department:
            conditions.append(Subject.department == department)
        if query:
            pattern = f"%{query}%"
            conditions.append(or_(Subject.name.ilike(pattern), Subject.code.ilike(pattern)))

        total = await db.scalar(select(func.count()).select_from(Subject).where(*conditions))

        result = await db.execute(
            select(Subject)
            .where(*conditions)
            .order_by(Subject.created_at.desc(), Subject.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    @staticmethod
    async def update(db: AsyncSession, subject: Subject, **fields: Any) -> Subject:
        """
        Apply field changes to a subject.

        Raises:
            DuplicateSubjectCodeError: If the new code is already taken
        """
        try:
            async with db.begin_nested():
                for key, value in fields.items():
                    setattr(subject, key, value)
        except IntegrityError as e:
            raise DuplicateSubjectCodeError(fields.get("code", subject.code)) from e

        await db.refresh(subject)

        logger.info(f"Updated subject {subject.id}: {sorted(fields)}")
        return subject

    @staticmethod
    async def delete(db: AsyncSession, subject: Subject) -> None:
        """Delete a subject together with its classes."""
        await db.delete(subject)
        await db.flush()

        logger.info(f"Deleted subject {subject.id} ({subject.code})")
