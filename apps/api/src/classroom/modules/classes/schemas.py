"""
Class Schemas

Pydantic schemas for classes, schedules and the join-by-invite-code flow.
"""

from datetime import datetime, time

from pydantic import BaseModel, ConfigDict, Field, model_validator

from classroom.modules.classes.models import DEFAULT_CLASS_CAPACITY, ClassStatus
from classroom.modules.shared.schemas import Pagination
from classroom.modules.subjects.schemas import SubjectSummary
from classroom.modules.users.schemas import UserSummary

# =============================================================================
# Requests
# =============================================================================


class ClassCreate(BaseModel):
    """Request body for POST /classes. The invite code is always generated."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=255)
    subject_id: int = Field(..., ge=1)
    teacher_id: str = Field(..., min_length=1, max_length=36)
    description: str | None = None
    banner_url: str | None = None
    banner_cld_pub_id: str | None = None
    capacity: int = Field(DEFAULT_CLASS_CAPACITY, ge=1, le=1000)
    status: ClassStatus = ClassStatus.ACTIVE


class ClassUpdate(BaseModel):
    """
    Request body for PUT /classes/{id}. Only provided fields are changed.

    The invite code is not accepted here; use POST /classes/{id}/regenerate-code.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=255)
    subject_id: int | None = Field(None, ge=1)
    teacher_id: str | None = Field(None, min_length=1, max_length=36)
    description: str | None = None
    banner_url: str | None = None
    banner_cld_pub_id: str | None = None
    capacity: int | None = Field(None, ge=1, le=1000)
    status: ClassStatus | None = None


class JoinClassRequest(BaseModel):
    """Request body for POST /classes/join."""

    invite_code: str = Field(..., min_length=1, max_length=20)
    student_id: str = Field(..., min_length=1, max_length=36)


class ScheduleCreate(BaseModel):
    """A weekly meeting slot. day_of_week: 0 = Sunday ... 6 = Saturday."""

    day_of_week: int = Field(..., ge=0, le=6)
    start_time: time
    end_time: time
    room: str | None = Field(None, max_length=100)

    @model_validator(mode="after")
    def validate_time_order(self) -> "ScheduleCreate":
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


# =============================================================================
# Responses
# =============================================================================


class ClassResponse(BaseModel):
    """Flat class representation."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    invite_code: str
    subject_id: int
    teacher_id: str
    description: str | None
    banner_url: str | None
    banner_cld_pub_id: str | None
    capacity: int
    status: ClassStatus
    created_at: datetime
    updated_at: datetime


class ClassListItem(ClassResponse):
    """Class with its subject and teacher embedded."""

    subject: SubjectSummary | None = None
    teacher: UserSummary | None = None


class ClassSummary(BaseModel):
    """Compact class representation embedded in enrollments."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    invite_code: str
    status: ClassStatus
    subject: SubjectSummary | None = None


class ScheduleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    class_id: int
    day_of_week: int
    start_time: time
    end_time: time
    room: str | None


class EnrolledStudent(BaseModel):
    """A student enrolled in a class."""

    id: str
    name: str
    email: str
    image: str | None = None
    enrollment_id: int
    enrolled_at: datetime


class ClassDetail(ClassListItem):
    """Full class view: subject, teacher, schedule and roster."""

    schedules: list[ScheduleResponse] = []
    students: list[EnrolledStudent] = []
    enrolled_count: int = 0


class ClassDataResponse(BaseModel):
    data: ClassResponse
    message: str


class ClassDetailResponse(BaseModel):
    data: ClassDetail
    message: str = "Class retrieved successfully"


class ClassListResponse(BaseModel):
    """Paginated list of classes."""

    data: list[ClassListItem]
    pagination: Pagination
    message: str = "Classes retrieved successfully"


class ScheduleDataResponse(BaseModel):
    data: ScheduleResponse
    message: str


class ScheduleListResponse(BaseModel):
    data: list[ScheduleResponse]
    message: str = "Schedules retrieved successfully"
