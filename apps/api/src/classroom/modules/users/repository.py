"""
User Repository

Database operations for user management.
"""

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from classroom.modules.users.models import User, UserRole

logger = logging.getLogger(__name__)


class DuplicateEmailError(Exception):
    """Raised when the users.email unique constraint rejects a write."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email already registered: {email}")


class UserRepository:
    """Repository for user database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        name: str,
        email: str,
        role: UserRole = UserRole.STUDENT,
        department: str | None = None,
        image: str | None = None,
        image_cld_pub_id: str | None = None,
        email_verified: bool = False,
    ) -> User:
        """
        Create a new user record.

        Args:
            db: Database session
            name: Display name
            email: Email address (unique)
            role: User's role
            department: Department (optional)
            image: Profile image URL (optional)
            image_cld_pub_id: Public id of the uploaded image (optional)
            email_verified: Whether email is verified

        Returns:
            Created User instance

        Raises:
            DuplicateEmailError: If the email is already registered
        """
        user = User(
            name=name,
            email=email,
            role=role,
            department=department,
            image=image,
            image_cld_pub_id=image_cld_pub_id,
            email_verified=email_verified,
        )

        try:
            async with db.begin_nested():
                db.add(user)
        except IntegrityError as e:
            raise DuplicateEmailError(email) from e

        await db.refresh(user)

        logger.info(f"Created user: {user.id} - {user.email} ({user.role.value})")
        return user

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: str) -> User | None:
        """
        Get a user by ID.

        Args:
            db: Database session
            user_id: User identifier

        Returns:
            User instance or None if not found
        """
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        """Get a user by email address."""
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    @staticmethod
    async def email_exists(db: AsyncSession, email: str) -> bool:
        """Check if an email address is already registered."""
        user = await UserRepository.get_by_email(db, email)
        return user is not None

    @staticmethod
    async def list_users(
        db: AsyncSession,
        *,
        roles: list[UserRole] | None = None,
        query: str | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[User], int]:
        """
        List users with optional role filter and name search.

        Args:
            db: Database session
            roles: Only return users with one of these roles (optional)
            query: Case-insensitive substring of the user's name (optional)
            offset: Number of records to skip
            limit: Maximum records to return

        Returns:
            Tuple of (users, total count matching filters), newest first
        """
        conditions = []
        if roles:
            conditions.append(User.role.in_(roles))
        if query:
            conditions.append(User.name.ilike(f"%{query}%"))

        total = await db.scalar(select(func.count()).select_from(User).where(*conditions))

        result = await db.execute(
            select(User)
            .where(*conditions)
            .order_by(User.created_at.desc(), User.id)
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    @staticmethod
    async def update(db: AsyncSession, user: User, **fields: Any) -> User:
        """
        Apply field changes to a user.

        Args:
            db: Database session
            user: User to update
            **fields: Column values to set

        Returns:
            Updated User instance

        Raises:
            DuplicateEmailError: If the new email is already registered
        """
        try:
            async with db.begin_nested():
                for key, value in fields.items():
                    setattr(user, key, value)
        except IntegrityError as e:
            raise DuplicateEmailError(fields.get("email", user.email)) from e

        await db.refresh(user)

        logger.info(f"Updated user {user.id}: {sorted(fields)}")
        return user

    @staticmethod
    async def delete(db: AsyncSession, user: User) -> None:
        """Delete a user. Enrollments cascade with the user."""
        await db.delete(user)
        await db.flush()

        logger.info(f"Deleted user {user.id}")
