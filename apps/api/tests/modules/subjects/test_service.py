"""
Unit tests for the subjects service layer.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from classroom.modules.subjects.repository import DuplicateSubjectCodeError
from classroom.modules.subjects.schemas import SubjectCreate, SubjectUpdate
from classroom.modules.subjects.service import (
    SubjectCodeExistsError,
    SubjectNotFoundError,
    create_subject,
    delete_subject,
    get_subject,
    update_subject,
)

SERVICE = "classroom.modules.subjects.service"


class TestSubjectService:
    @pytest.mark.asyncio
    async def test_create_subject(self, mock_db):
        subject = MagicMock(id=1, code="MATH201")
        with patch(f"{SERVICE}.SubjectRepository") as mock_repo:
            mock_repo.create = AsyncMock(return_value=subject)

            result = await create_subject(
                mock_db, SubjectCreate(name="Linear Algebra", code="MATH201")
            )

            assert result is subject
            mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_subject_duplicate_code(self, mock_db):
        with patch(f"{SERVICE}.SubjectRepository") as mock_repo:
            mock_repo.create = AsyncMock(side_effect=DuplicateSubjectCodeError("MATH201"))

            with pytest.raises(SubjectCodeExistsError) as exc_info:
                await create_subject(mock_db, SubjectCreate(name="Linear Algebra", code="MATH201"))

            assert exc_info.value.status_code == 409
            assert exc_info.value.error_code == "SUBJECT_CODE_EXISTS"
            mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_get_missing_subject(self, mock_db):
        with patch(f"{SERVICE}.SubjectRepository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(SubjectNotFoundError) as exc_info:
                await get_subject(mock_db, 404)

            assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_update_without_changes_skips_write(self, mock_db):
        subject = MagicMock(id=1)
        with patch(f"{SERVICE}.SubjectRepository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=subject)
            mock_repo.update = AsyncMock()

            assert await update_subject(mock_db, 1, SubjectUpdate()) is subject
            mock_repo.update.assert_not_awaited()
            mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_to_taken_code(self, mock_db):
        with patch(f"{SERVICE}.SubjectRepository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=MagicMock(id=1))
            mock_repo.update = AsyncMock(side_effect=DuplicateSubjectCodeError("CS210"))

            with pytest.raises(SubjectCodeExistsError):
                await update_subject(mock_db, 1, SubjectUpdate(code="CS210"))

    @pytest.mark.asyncio
    async def test_delete_subject(self, mock_db):
        subject = MagicMock(id=1)
        with patch(f"{SERVICE}.SubjectRepository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=subject)
            mock_repo.delete = AsyncMock()

            await delete_subject(mock_db, 1)

            mock_repo.delete.assert_awaited_once_with(mock_db, subject)
            mock_db.commit.assert_awaited_once()

    def test_not_found_message_names_zero_id(self):
        assert SubjectNotFoundError(0).message == "Subject 0 not found"
