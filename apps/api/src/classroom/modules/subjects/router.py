"""
Subjects Router

API endpoints for managing academic subjects.

Endpoints:
- GET /subjects - List subjects (search, department filter, pagination)
- GET /subjects/{id} - Get a subject
- POST /subjects - Create a subject
- PUT /subjects/{id} - Update a subject
- DELETE /subjects/{id} - Delete a subject and its classes
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from classroom.core.database import get_db
from classroom.modules.subjects import service
from classroom.modules.subjects.schemas import (
    SubjectCreate,
    SubjectDataResponse,
    SubjectListResponse,
    SubjectResponse,
    SubjectUpdate,
)

router = APIRouter()


@router.get("", response_model=SubjectListResponse, summary="List Subjects")
async def list_subjects(
    query: str | None = Query(None, max_length=100, description="Search name or code"),
    department: str | None = Query(None, max_length=100, description="Filter by department"),
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    limit: int = Query(10, ge=1, le=100, description="Records per page"),
    db: AsyncSession = Depends(get_db),
) -> SubjectListResponse:
    """List subjects, newest first."""
    subjects, pagination = await service.list_subjects(
        db, query=query, department=department, page=page, limit=limit
    )
    return SubjectListResponse(
        data=[SubjectResponse.model_validate(s) for s in subjects],
        pagination=pagination,
    )


@router.get("/{subject_id}", response_model=SubjectDataResponse, summary="Get Subject")
async def get_subject(
    subject_id: int,
    db: AsyncSession = Depends(get_db),
) -> SubjectDataResponse:
    subject = await service.get_subject(db, subject_id)
    return SubjectDataResponse(
        data=SubjectResponse.model_validate(subject),
        message="Subject retrieved successfully",
    )


@router.post(
    "",
    response_model=SubjectDataResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Subject",
    responses={409: {"description": "Subject code already exists"}},
)
async def create_subject(
    data: SubjectCreate,
    db: AsyncSession = Depends(get_db),
) -> SubjectDataResponse:
    subject = await service.create_subject(db, data)
    return SubjectDataResponse(
        data=SubjectResponse.model_validate(subject),
        message="Subject created successfully",
    )


@router.put(
    "/{subject_id}",
    response_model=SubjectDataResponse,
    summary="Update Subject",
    responses={404: {"description": "Subject not found"}, 409: {"description": "Code taken"}},
)
async def update_subject(
    subject_id: int,
    data: SubjectUpdate,
    db: AsyncSession = Depends(get_db),
) -> SubjectDataResponse:
    subject = await service.update_subject(db, subject_id, data)
    return SubjectDataResponse(
        data=SubjectResponse.model_validate(subject),
        message="Subject updated successfully",
    )


@router.delete("/{subject_id}", response_model=SubjectDataResponse, summary="Delete Subject")
async def delete_subject(
    subject_id: int,
    db: AsyncSession = Depends(get_db),
) -> SubjectDataResponse:
    """Delete a subject. Its classes, schedules and enrollments go with it."""
    subject = await service.delete_subject(db, subject_id)
    return SubjectDataResponse(
        data=SubjectResponse.model_validate(subject),
        message="Subject deleted successfully",
    )
