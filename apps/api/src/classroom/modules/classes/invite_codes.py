"""
Class Invite Codes

Allocation of the short codes students type to join a class.

An invite code is 6 characters drawn uniformly from [A-Z0-9]. The allocator
draws a candidate, asks storage whether any class already uses it, and
retries on collision up to MAX_ALLOCATION_ATTEMPTS times.

The existence check only avoids predictable collisions. Two concurrent
allocations can both see the same candidate as free, so the unique
constraint on classes.invite_code is what actually guarantees uniqueness:
the losing insert/update fails with InviteCodeConflictError, which this
module never catches.
"""

import logging
import random
import re
import string
from typing import TYPE_CHECKING, Protocol

from classroom.modules.classes.exceptions import (
    ClassNotFoundError,
    InviteCodeAllocationExhaustedError,
)

if TYPE_CHECKING:
    from classroom.modules.classes.models import SchoolClass

logger = logging.getLogger(__name__)

INVITE_CODE_ALPHABET = string.ascii_uppercase + string.digits
INVITE_CODE_LENGTH = 6
MAX_ALLOCATION_ATTEMPTS = 10

INVITE_CODE_PATTERN = re.compile(rf"^[A-Z0-9]{{{INVITE_CODE_LENGTH}}}$")


class InviteCodeStore(Protocol):
    """Storage the allocator reads from and writes to."""

    async def exists_by_invite_code(self, invite_code: str) -> bool: ...

    async def get_class(self, class_id: int) -> "SchoolClass | None": ...

    async def update_invite_code(
        self, class_id: int, invite_code: str
    ) -> "SchoolClass | None": ...


def normalize_invite_code(invite_code: str) -> str:
    """Normalize user input for comparison with stored codes."""
    return invite_code.strip().upper()


def is_valid_invite_code(invite_code: str) -> bool:
    return bool(INVITE_CODE_PATTERN.match(invite_code))


def generate_invite_code(rng: random.Random | None = None) -> str:
    """
    Draw a random invite code from a non-cryptographic generator.

    Args:
        rng: Random generator to draw from (defaults to the module-level one)

    Returns:
        A 6-character uppercase alphanumeric code
    """
    chooser = rng or random
    return "".join(chooser.choices(INVITE_CODE_ALPHABET, k=INVITE_CODE_LENGTH))


class InviteCodeAllocator:
    """
    Allocates invite codes that are free at the time of the check.

    Usage:
        allocator = InviteCodeAllocator(ClassInviteCodeStore(db))
        code = await allocator.allocate()
    """

    def __init__(
        self,
        store: InviteCodeStore,
        *,
        max_attempts: int = MAX_ALLOCATION_ATTEMPTS,
        rng: random.Random | None = None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.store = store
        self.max_attempts = max_attempts
        self._rng = rng

    async def allocate(self) -> str:
        """
        Find an invite code no existing class uses.

        Returns:
            A code that was absent from storage when checked

        Raises:
            InviteCodeAllocationExhaustedError: If every attempt collided
        """
        for attempt in range(1, self.max_attempts + 1):
            candidate = generate_invite_code(self._rng)

            if not await self.store.exists_by_invite_code(candidate):
                if attempt > 1:
                    logger.info(f"Allocated invite code after {attempt} attempts")
                return candidate

            logger.warning(
                f"Invite code collision on attempt {attempt}/{self.max_attempts}: {candidate}"
            )

        logger.error(f"Invite code allocation exhausted after {self.max_attempts} attempts")
        raise InviteCodeAllocationExhaustedError(self.max_attempts)

    async def regenerate(self, class_id: int) -> str:
        """
        Replace a class's invite code with a freshly allocated one.

        Args:
            class_id: Class whose code is replaced

        Returns:
            The new invite code

        Raises:
            ClassNotFoundError: If the class does not exist (nothing is written)
            InviteCodeAllocationExhaustedError: If no free code was found
            InviteCodeConflictError: If the new code was taken concurrently
        """
        school_class = await self.store.get_class(class_id)
        if school_class is None:
            raise ClassNotFoundError(class_id)

        new_code = await self.allocate()

        updated = await self.store.update_invite_code(class_id, new_code)
        if updated is None:
            # Deleted between the lookup and the write
            raise ClassNotFoundError(class_id)

        logger.info(f"Regenerated invite code for class {class_id}")
        return new_code
