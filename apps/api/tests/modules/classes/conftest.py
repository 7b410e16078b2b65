"""
Fixtures for classes tests.
"""

from datetime import UTC, datetime

import pytest

from classroom.modules.classes.models import ClassStatus, SchoolClass


class FakeInviteCodeStore:
    """
    In-memory InviteCodeStore that records every call.

    Codes in `taken` (or every code, with always_taken=True) are reported
    as already used.
    """

    def __init__(self, taken=(), classes=None, always_taken=False):
        self.taken = set(taken)
        self.classes = dict(classes or {})
        self.always_taken = always_taken
        self.exists_calls: list[str] = []
        self.update_calls: list[tuple[int, str]] = []

    async def exists_by_invite_code(self, invite_code: str) -> bool:
        self.exists_calls.append(invite_code)
        return self.always_taken or invite_code in self.taken

    async def get_class(self, class_id: int):
        return self.classes.get(class_id)

    async def update_invite_code(self, class_id: int, invite_code: str):
        self.update_calls.append((class_id, invite_code))
        school_class = self.classes.get(class_id)
        if school_class is None:
            return None
        self.taken.discard(school_class.invite_code)
        school_class.invite_code = invite_code
        self.taken.add(invite_code)
        return school_class


def make_class(**overrides) -> SchoolClass:
    now = datetime.now(UTC)
    values = {
        "id": 1,
        "name": "Linear Algebra - Section A",
        "invite_code": "K7Q2ZD",
        "subject_id": 10,
        "teacher_id": "5b0e9a4c-1f6d-4a57-9d0f-2c8e7b1a3f42",
        "description": None,
        "banner_url": None,
        "banner_cld_pub_id": None,
        "capacity": 30,
        "status": ClassStatus.ACTIVE,
        "created_at": now,
        "updated_at": now,
    }
    values.update(overrides)
    return SchoolClass(**values)


@pytest.fixture
def sample_class():
    return make_class()


@pytest.fixture
def fake_store(sample_class):
    return FakeInviteCodeStore(taken={sample_class.invite_code}, classes={1: sample_class})


@pytest.fixture
def store_factory():
    """Build FakeInviteCodeStore instances with custom contents."""
    return FakeInviteCodeStore


@pytest.fixture
def class_factory():
    """Build transient SchoolClass instances with overridable fields."""
    return make_class
