"""
Users Service Layer

Business logic for user management: role filtering, email uniqueness,
and protecting teachers who still own classes (and students who are still
enrolled) from deletion or a role change that would orphan those records.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from classroom.modules.classes import repository as class_repository
from classroom.modules.enrollments import repository as enrollment_repository
from classroom.modules.shared.exceptions import ConflictError, NotFoundError, ServiceError
from classroom.modules.shared.schemas import Pagination, build_pagination, page_offset
from classroom.modules.users.models import User, UserRole
from classroom.modules.users.repository import DuplicateEmailError, UserRepository
from classroom.modules.users.schemas import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


class UserNotFoundError(NotFoundError):
    """Raised when a user is not found."""

    def __init__(self, user_id: str | None = None):
        message = f"User {user_id} not found" if user_id is not None else "User not found"
        super().__init__(message=message, error_code="USER_NOT_FOUND")


class EmailAlreadyExistsError(ConflictError):
    """Raised when an email address is already registered."""

    def __init__(self, email: str):
        super().__init__(
            message=f"A user with email {email} already exists",
            error_code="EMAIL_ALREADY_EXISTS",
        )


class InvalidUserRoleError(ServiceError):
    """Raised when a user's role does not allow the requested operation."""

    def __init__(self, message: str):
        super().__init__(message=message, error_code="INVALID_USER_ROLE", status_code=400)


class UserHasClassesError(ConflictError):
    """Raised when deleting or demoting a teacher who still owns classes."""

    def __init__(self, user_id: str, class_count: int):
        super().__init__(
            message=(
                f"User {user_id} still teaches {class_count} class(es); "
                "reassign or delete them first"
            ),
            error_code="USER_HAS_CLASSES",
        )


class UserHasEnrollmentsError(ConflictError):
    """Raised when changing the role of a student who is still enrolled in classes."""

    def __init__(self, user_id: str, enrollment_count: int):
        super().__init__(
            message=(
                f"User {user_id} is still enrolled in {enrollment_count} class(es); "
                "remove the enrollments first"
            ),
            error_code="USER_HAS_ENROLLMENTS",
        )


def parse_roles(roles: str | None) -> list[UserRole] | None:
    """
    Parse a comma-separated role filter such as "teacher,student".

    Raises:
        InvalidUserRoleError: If any entry is not a known role
    """
    if not roles:
        return None

    parsed = []
    for raw in roles.split(","):
        value = raw.strip().lower()
        if not value:
            continue
        try:
            parsed.append(UserRole(value))
        except ValueError:
            raise InvalidUserRoleError(f"Unknown role: {raw.strip()}") from None
    return parsed or None


async def list_users(
    db: AsyncSession,
    *,
    roles: str | None = None,
    query: str | None = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[User], Pagination]:
    """List users with role filter, name search, and pagination."""
    users, total = await UserRepository.list_users(
        db,
        roles=parse_roles(roles),
        query=query.strip() if query else None,
        offset=page_offset(page, limit),
        limit=limit,
    )
    return users, build_pagination(page, limit, total)


async def get_user(db: AsyncSession, user_id: str) -> User:
    """
    Get a user by ID.

    Raises:
        UserNotFoundError: If the user does not exist
    """
    user = await UserRepository.get_by_id(db, user_id)
    if not user:
        raise UserNotFoundError(user_id)
    return user


async def create_user(db: AsyncSession, data: UserCreate) -> User:
    """
    Create a user.

    Raises:
        EmailAlreadyExistsError: If the email is already registered
    """
    email = data.email.lower()

    if await UserRepository.email_exists(db, email):
        raise EmailAlreadyExistsError(email)

    try:
        user = await UserRepository.create(
            db,
            name=data.name,
            email=email,
            role=data.role,
            department=data.department,
            image=data.image,
            image_cld_pub_id=data.image_cld_pub_id,
        )
    except DuplicateEmailError as e:
        logger.warning(f"Email conflict on user create: {e.email}")
        raise EmailAlreadyExistsError(e.email) from e

    await db.commit()
    return user


async def _check_role_change(db: AsyncSession, user: User) -> None:
    """Refuse a role change that would leave classes or enrollments with the wrong role."""
    if user.role == UserRole.TEACHER:
        class_count = await class_repository.count_by_teacher(db, user.id)
        if class_count:
            raise UserHasClassesError(user.id, class_count)
    elif user.role == UserRole.STUDENT:
        enrollment_count = await enrollment_repository.count_for_student(db, user.id)
        if enrollment_count:
            raise UserHasEnrollmentsError(user.id, enrollment_count)


async def update_user(db: AsyncSession, user_id: str, data: UserUpdate) -> User:
    """
    Update a user with the fields present in the request.

    Raises:
        UserNotFoundError: If the user does not exist
        EmailAlreadyExistsError: If the new email belongs to another user
        UserHasClassesError: If a teacher who owns classes changes role
        UserHasEnrollmentsError: If an enrolled student changes role
    """
    user = await get_user(db, user_id)

    changes = data.model_dump(exclude_unset=True)
    if "email" in changes and changes["email"] is not None:
        changes["email"] = changes["email"].lower()

    # Non-nullable columns can't be cleared
    for field in ("name", "email", "role", "email_verified"):
        if field in changes and changes[field] is None:
            changes.pop(field)

    if not changes:
        return user

    if "role" in changes and changes["role"] != user.role:
        await _check_role_change(db, user)

    try:
        user = await UserRepository.update(db, user, **changes)
    except DuplicateEmailError as e:
        logger.warning(f"Email conflict on update of user {user_id}: {e.email}")
        raise EmailAlreadyExistsError(e.email) from e

    await db.commit()
    return user


async def delete_user(db: AsyncSession, user_id: str) -> User:
    """
    Delete a user. Their enrollments are removed with them.

    Raises:
        UserNotFoundError: If the user does not exist
        UserHasClassesError: If the user still teaches classes
    """
    user = await get_user(db, user_id)

    class_count = await class_repository.count_by_teacher(db, user.id)
    if class_count:
        raise UserHasClassesError(user.id, class_count)

    await UserRepository.delete(db, user)
    await db.commit()
    return user
