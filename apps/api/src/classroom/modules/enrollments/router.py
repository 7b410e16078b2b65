"""
Enrollments Router

Endpoints:
- GET /enrollments - List enrollments (student/class filters, pagination)
- POST /enrollments - Enroll a student in a class
- DELETE /enrollments/{id} - Remove a student from a class
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from classroom.core.database import get_db
from classroom.modules.enrollments import service
from classroom.modules.enrollments.schemas import (
    EnrollmentCreate,
    EnrollmentDataResponse,
    EnrollmentDetail,
    EnrollmentListResponse,
    EnrollmentResponse,
)

router = APIRouter()


@router.get("", response_model=EnrollmentListResponse, summary="List Enrollments")
async def list_enrollments(
    student_id: str | None = Query(None, max_length=36, description="Filter by student"),
    class_id: int | None = Query(None, ge=1, description="Filter by class"),
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    limit: int = Query(10, ge=1, le=100, description="Records per page"),
    db: AsyncSession = Depends(get_db),
) -> EnrollmentListResponse:
    """List enrollments, newest first, with class and student summaries."""
    enrollments, pagination = await service.list_enrollments(
        db, student_id=student_id, class_id=class_id, page=page, limit=limit
    )
    return EnrollmentListResponse(
        data=[EnrollmentDetail.model_validate(e) for e in enrollments],
        pagination=pagination,
    )


@router.post(
    "",
    response_model=EnrollmentDataResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Enrollment",
    responses={
        404: {"description": "Class or student not found"},
        409: {"description": "Already enrolled, class full or not active"},
    },
)
async def create_enrollment(
    data: EnrollmentCreate,
    db: AsyncSession = Depends(get_db),
) -> EnrollmentDataResponse:
    enrollment = await service.create_enrollment(db, data)
    return EnrollmentDataResponse(
        data=EnrollmentResponse.model_validate(enrollment),
        message="Student enrolled successfully",
    )


@router.delete(
    "/{enrollment_id}",
    response_model=EnrollmentDataResponse,
    summary="Delete Enrollment",
)
async def delete_enrollment(
    enrollment_id: int,
    db: AsyncSession = Depends(get_db),
) -> EnrollmentDataResponse:
    enrollment = await service.delete_enrollment(db, enrollment_id)
    return EnrollmentDataResponse(
        data=EnrollmentResponse.model_validate(enrollment),
        message="Enrollment removed successfully",
    )
