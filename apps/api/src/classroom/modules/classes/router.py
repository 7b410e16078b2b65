"""
Classes Router

API endpoints for classes, invite codes and weekly schedules.

Endpoints:
- GET /classes - List classes (search, subject/teacher filters, pagination)
- GET /classes/{id} - Class detail with schedule and enrolled students
- POST /classes - Create a class (invite code is generated)
- PUT /classes/{id} - Update a class
- DELETE /classes/{id} - Delete a class
- POST /classes/{id}/regenerate-code - Replace the invite code
- POST /classes/join - Join a class by invite code
- GET /classes/{id}/schedules - List meeting slots
- POST /classes/{id}/schedules - Add a meeting slot
- DELETE /classes/{id}/schedules/{schedule_id} - Remove a meeting slot
"""

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from classroom.core.database import get_db
from classroom.modules.classes import service
from classroom.modules.classes.schemas import (
    ClassCreate,
    ClassDataResponse,
    ClassDetailResponse,
    ClassListItem,
    ClassListResponse,
    ClassResponse,
    ClassUpdate,
    JoinClassRequest,
    ScheduleCreate,
    ScheduleDataResponse,
    ScheduleListResponse,
    ScheduleResponse,
)
from classroom.modules.enrollments.schemas import EnrollmentResponse

router = APIRouter()


class JoinClassData(BaseModel):
    """The new enrollment and the class it belongs to."""

    enrollment: EnrollmentResponse
    school_class: ClassResponse = Field(..., serialization_alias="class")


class JoinClassResponse(BaseModel):
    data: JoinClassData
    message: str = "Joined class successfully"


@router.get("", response_model=ClassListResponse, summary="List Classes")
async def list_classes(
    search: str | None = Query(None, max_length=100, description="Search by class name"),
    subject_id: int | None = Query(None, ge=1, description="Filter by subject"),
    teacher_id: str | None = Query(None, max_length=36, description="Filter by teacher"),
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    limit: int = Query(10, ge=1, le=100, description="Records per page"),
    db: AsyncSession = Depends(get_db),
) -> ClassListResponse:
    """List classes, newest first, with subject and teacher embedded."""
    classes, pagination = await service.list_classes(
        db,
        search=search,
        subject_id=subject_id,
        teacher_id=teacher_id,
        page=page,
        limit=limit,
    )
    return ClassListResponse(
        data=[ClassListItem.model_validate(c) for c in classes],
        pagination=pagination,
    )


@router.post(
    "/join",
    response_model=JoinClassResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Join Class by Invite Code",
    responses={
        400: {"description": "User is not a student"},
        404: {"description": "Unknown invite code or user"},
        409: {"description": "Class inactive, full, or already joined"},
    },
)
async def join_class(
    data: JoinClassRequest,
    db: AsyncSession = Depends(get_db),
) -> JoinClassResponse:
    """
    Join a class using its invite code.

    The code is case-insensitive and surrounding whitespace is ignored.
    """
    enrollment, school_class = await service.join_class(db, data.invite_code, data.student_id)
    return JoinClassResponse(
        data=JoinClassData(
            enrollment=EnrollmentResponse.model_validate(enrollment),
            school_class=ClassResponse.model_validate(school_class),
        )
    )


@router.get("/{class_id}", response_model=ClassDetailResponse, summary="Get Class")
async def get_class(
    class_id: int,
    db: AsyncSession = Depends(get_db),
) -> ClassDetailResponse:
    detail = await service.get_class_detail(db, class_id)
    return ClassDetailResponse(data=detail)


@router.post(
    "",
    response_model=ClassDataResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Class",
    responses={
        400: {"description": "Assigned user is not a teacher"},
        404: {"description": "Subject or teacher not found"},
        409: {"description": "Invite code taken concurrently"},
        503: {"description": "Invite code allocation exhausted"},
    },
)
async def create_class(
    data: ClassCreate,
    db: AsyncSession = Depends(get_db),
) -> ClassDataResponse:
    school_class = await service.create_class(db, data)
    return ClassDataResponse(
        data=ClassResponse.model_validate(school_class),
        message="Class created successfully",
    )


@router.put(
    "/{class_id}",
    response_model=ClassDataResponse,
    summary="Update Class",
    responses={404: {"description": "Class, subject or teacher not found"}},
)
async def update_class(
    class_id: int,
    data: ClassUpdate,
    db: AsyncSession = Depends(get_db),
) -> ClassDataResponse:
    school_class = await service.update_class(db, class_id, data)
    return ClassDataResponse(
        data=ClassResponse.model_validate(school_class),
        message="Class updated successfully",
    )


@router.delete("/{class_id}", response_model=ClassDataResponse, summary="Delete Class")
async def delete_class(
    class_id: int,
    db: AsyncSession = Depends(get_db),
) -> ClassDataResponse:
    """Delete a class. Its schedules and enrollments go with it."""
    school_class = await service.delete_class(db, class_id)
    return ClassDataResponse(
        data=ClassResponse.model_validate(school_class),
        message="Class deleted successfully",
    )


@router.post(
    "/{class_id}/regenerate-code",
    response_model=ClassDataResponse,
    summary="Regenerate Invite Code",
    responses={
        404: {"description": "Class not found"},
        409: {"description": "Invite code taken concurrently"},
        503: {"description": "Invite code allocation exhausted"},
    },
)
async def regenerate_invite_code(
    class_id: int,
    db: AsyncSession = Depends(get_db),
) -> ClassDataResponse:
    """Replace the class invite code. The previous code stops working."""
    school_class = await service.regenerate_invite_code(db, class_id)
    return ClassDataResponse(
        data=ClassResponse.model_validate(school_class),
        message="Invite code regenerated successfully",
    )


# =============================================================================
# Schedules
# =============================================================================


@router.get(
    "/{class_id}/schedules",
    response_model=ScheduleListResponse,
    summary="List Class Schedules",
)
async def list_schedules(
    class_id: int,
    db: AsyncSession = Depends(get_db),
) -> ScheduleListResponse:
    schedules = await service.list_schedules(db, class_id)
    return ScheduleListResponse(data=[ScheduleResponse.model_validate(s) for s in schedules])


@router.post(
    "/{class_id}/schedules",
    response_model=ScheduleDataResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add Class Schedule",
    responses={409: {"description": "Slot already scheduled"}},
)
async def add_schedule(
    class_id: int,
    data: ScheduleCreate,
    db: AsyncSession = Depends(get_db),
) -> ScheduleDataResponse:
    schedule = await service.add_schedule(db, class_id, data)
    return ScheduleDataResponse(
        data=ScheduleResponse.model_validate(schedule),
        message="Schedule added successfully",
    )


@router.delete(
    "/{class_id}/schedules/{schedule_id}",
    response_model=ScheduleDataResponse,
    summary="Remove Class Schedule",
)
async def remove_schedule(
    class_id: int,
    schedule_id: int,
    db: AsyncSession = Depends(get_db),
) -> ScheduleDataResponse:
    schedule = await service.remove_schedule(db, class_id, schedule_id)
    return ScheduleDataResponse(
        data=ScheduleResponse.model_validate(schedule),
        message="Schedule removed successfully",
    )
