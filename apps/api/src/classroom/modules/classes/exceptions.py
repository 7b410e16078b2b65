"""
Class Errors

Service errors raised by the classes module, including the invite code
allocator and the join-by-code flow.
"""

from classroom.modules.shared.exceptions import ConflictError, NotFoundError, ServiceError


class ClassNotFoundError(NotFoundError):
    """Raised when a class is not found."""

    def __init__(self, class_id: int | None = None):
        message = f"Class {class_id} not found" if class_id is not None else "Class not found"
        super().__init__(message=message, error_code="CLASS_NOT_FOUND")


class InviteCodeAllocationExhaustedError(ServiceError):
    """
    Raised when no free invite code was found within the attempt budget.

    Terminal for the current request; the client should simply try again.
    """

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            message=(
                f"Could not generate a unique invite code after {attempts} attempts. "
                "Please try again."
            ),
            error_code="INVITE_CODE_ALLOCATION_EXHAUSTED",
            status_code=503,
        )


class InviteCodeConflictError(ConflictError):
    """
    Raised when the storage unique constraint rejects an invite code.

    This is the lost side of the check-then-insert race between two
    allocations. Callers may allocate a fresh code and retry.
    """

    def __init__(self, invite_code: str):
        self.invite_code = invite_code
        super().__init__(
            message="Invite code was taken concurrently. Please try again.",
            error_code="INVITE_CODE_CONFLICT",
        )


class InviteCodeNotFoundError(NotFoundError):
    """Raised when no class has the given invite code."""

    def __init__(self):
        super().__init__(
            message="No class found for this invite code",
            error_code="INVITE_CODE_NOT_FOUND",
        )


class ClassNotJoinableError(ConflictError):
    """Raised when a class is not accepting enrollments."""

    def __init__(self, status: str):
        super().__init__(
            message=f"Class is not accepting enrollments (status: {status})",
            error_code="CLASS_NOT_JOINABLE",
        )


class ClassFullError(ConflictError):
    """Raised when a class has reached its capacity."""

    def __init__(self, capacity: int):
        super().__init__(
            message=f"Class is full (capacity {capacity})",
            error_code="CLASS_FULL",
        )


class InvalidTeacherError(ServiceError):
    """Raised when a class is assigned to a user who is not a teacher."""

    def __init__(self, user_id: str):
        super().__init__(
            message=f"User {user_id} is not a teacher",
            error_code="INVALID_TEACHER",
            status_code=400,
        )


class ScheduleNotFoundError(NotFoundError):
    def __init__(self, schedule_id: int):
        super().__init__(
            message=f"Schedule {schedule_id} not found",
            error_code="SCHEDULE_NOT_FOUND",
        )


class ScheduleConflictError(ConflictError):
    """Raised when a class already meets at the same day and start time."""

    def __init__(self, day_of_week: int, start_time: str):
        super().__init__(
            message=(
                f"Class already has a meeting on day {day_of_week} starting at {start_time}"
            ),
            error_code="SCHEDULE_CONFLICT",
        )
