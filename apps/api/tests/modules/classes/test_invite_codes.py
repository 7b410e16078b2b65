"""
Unit tests for the invite code allocator.

These tests cover:
- Code format and normalization
- Allocation against an in-memory store (first try, collisions, exhaustion)
- Regeneration (single write, missing class, concurrent deletion)
"""

import random

import pytest

from classroom.modules.classes.exceptions import (
    ClassNotFoundError,
    InviteCodeAllocationExhaustedError,
    InviteCodeConflictError,
)
from classroom.modules.classes.invite_codes import (
    INVITE_CODE_ALPHABET,
    INVITE_CODE_LENGTH,
    MAX_ALLOCATION_ATTEMPTS,
    InviteCodeAllocator,
    generate_invite_code,
    is_valid_invite_code,
    normalize_invite_code,
)


class TestGenerateInviteCode:
    """Tests for the random code generator."""

    def test_codes_are_six_uppercase_alphanumerics(self):
        for _ in range(200):
            code = generate_invite_code()
            assert len(code) == INVITE_CODE_LENGTH
            assert is_valid_invite_code(code)
            assert all(ch in INVITE_CODE_ALPHABET for ch in code)

    def test_alphabet_is_uppercase_letters_and_digits(self):
        assert len(INVITE_CODE_ALPHABET) == 36
        assert set(INVITE_CODE_ALPHABET) == set("ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789")

    def test_injected_rng_is_deterministic(self):
        assert generate_invite_code(random.Random(42)) == generate_invite_code(random.Random(42))


class TestNormalizeInviteCode:
    def test_strips_and_uppercases(self):
        assert normalize_invite_code("  k7q2zd \n") == "K7Q2ZD"

    def test_already_normalized_is_unchanged(self):
        assert normalize_invite_code("K7Q2ZD") == "K7Q2ZD"

    def test_validity_check(self):
        assert is_valid_invite_code("K7Q2ZD")
        assert not is_valid_invite_code("k7q2zd")
        assert not is_valid_invite_code("K7Q2Z")
        assert not is_valid_invite_code("K7Q2ZD1")
        assert not is_valid_invite_code("K7-2ZD")


class TestAllocate:
    """Tests for InviteCodeAllocator.allocate."""

    @pytest.mark.asyncio
    async def test_first_free_candidate_needs_one_check(self, store_factory):
        store = store_factory()
        allocator = InviteCodeAllocator(store)

        code = await allocator.allocate()

        assert is_valid_invite_code(code)
        assert store.exists_calls == [code]

    @pytest.mark.asyncio
    async def test_collisions_are_retried(self, store_factory):
        # The first three candidates of this seed are already taken
        preview = random.Random(7)
        taken = [generate_invite_code(preview) for _ in range(3)]
        expected = generate_invite_code(preview)

        store = store_factory(taken=taken)
        allocator = InviteCodeAllocator(store, rng=random.Random(7))

        code = await allocator.allocate()

        assert code == expected
        assert store.exists_calls == [*taken, expected]

    @pytest.mark.asyncio
    async def test_exhaustion_after_exactly_ten_checks(self, store_factory):
        store = store_factory(always_taken=True)
        allocator = InviteCodeAllocator(store)

        with pytest.raises(InviteCodeAllocationExhaustedError) as exc_info:
            await allocator.allocate()

        assert len(store.exists_calls) == MAX_ALLOCATION_ATTEMPTS == 10
        assert exc_info.value.attempts == 10
        assert exc_info.value.status_code == 503
        assert exc_info.value.error_code == "INVITE_CODE_ALLOCATION_EXHAUSTED"

    @pytest.mark.asyncio
    async def test_custom_attempt_budget(self, store_factory):
        store = store_factory(always_taken=True)
        allocator = InviteCodeAllocator(store, max_attempts=3)

        with pytest.raises(InviteCodeAllocationExhaustedError):
            await allocator.allocate()

        assert len(store.exists_calls) == 3

    def test_attempt_budget_must_be_positive(self, store_factory):
        with pytest.raises(ValueError):
            InviteCodeAllocator(store_factory(), max_attempts=0)

    @pytest.mark.asyncio
    async def test_allocation_never_writes(self, store_factory):
        store = store_factory()
        await InviteCodeAllocator(store).allocate()
        assert store.update_calls == []


class TestRegenerate:
    """Tests for InviteCodeAllocator.regenerate."""

    @pytest.mark.asyncio
    async def test_existing_class_gets_exactly_one_write(self, fake_store, sample_class):
        allocator = InviteCodeAllocator(fake_store)

        new_code = await allocator.regenerate(sample_class.id)

        assert is_valid_invite_code(new_code)
        assert fake_store.update_calls == [(sample_class.id, new_code)]
        assert sample_class.invite_code == new_code

    @pytest.mark.asyncio
    async def test_new_code_avoids_codes_in_use(self, store_factory, class_factory):
        preview = random.Random(11)
        first, second = generate_invite_code(preview), generate_invite_code(preview)
        store = store_factory(
            taken={first},
            classes={1: class_factory(id=1), 2: class_factory(id=2, invite_code=first)},
        )

        new_code = await InviteCodeAllocator(store, rng=random.Random(11)).regenerate(1)

        assert new_code == second
        assert store.update_calls == [(1, second)]

    @pytest.mark.asyncio
    async def test_missing_class_raises_without_writing(self, store_factory):
        store = store_factory()
        allocator = InviteCodeAllocator(store)

        with pytest.raises(ClassNotFoundError) as exc_info:
            await allocator.regenerate(404)

        assert exc_info.value.status_code == 404
        assert store.update_calls == []
        # Nothing is allocated for a class that doesn't exist
        assert store.exists_calls == []

    @pytest.mark.asyncio
    async def test_class_deleted_before_write(self, fake_store, sample_class):
        # Present for the lookup, gone by the time of the write
        class DisappearingStore(type(fake_store)):
            async def update_invite_code(self, class_id, invite_code):
                self.update_calls.append((class_id, invite_code))
                return None

        store = DisappearingStore(classes={1: sample_class})

        with pytest.raises(ClassNotFoundError):
            await InviteCodeAllocator(store).regenerate(1)

        assert len(store.update_calls) == 1

    @pytest.mark.asyncio
    async def test_exhaustion_leaves_code_unchanged(self, store_factory, sample_class):
        store = store_factory(classes={1: sample_class}, always_taken=True)

        with pytest.raises(InviteCodeAllocationExhaustedError):
            await InviteCodeAllocator(store).regenerate(1)

        assert store.update_calls == []
        assert sample_class.invite_code == "K7Q2ZD"

    @pytest.mark.asyncio
    async def test_conflict_on_write_propagates(self, fake_store, sample_class):
        class RacingStore(type(fake_store)):
            async def update_invite_code(self, class_id, invite_code):
                raise InviteCodeConflictError(invite_code)

        store = RacingStore(classes={1: sample_class})

        with pytest.raises(InviteCodeConflictError):
            await InviteCodeAllocator(store).regenerate(1)
