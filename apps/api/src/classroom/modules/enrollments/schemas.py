"""
Enrollment Schemas

Pydantic schemas for request validation and response serialization.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from classroom.modules.classes.schemas import ClassSummary
from classroom.modules.shared.schemas import Pagination
from classroom.modules.users.schemas import UserSummary


class EnrollmentCreate(BaseModel):
    """Request body for POST /enrollments."""

    student_id: str = Field(..., min_length=1, max_length=36)
    class_id: int = Field(..., ge=1)


class EnrollmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: str
    class_id: int
    enrolled_at: datetime
    updated_at: datetime


class EnrollmentDetail(EnrollmentResponse):
    """Enrollment with the class and student embedded."""

    school_class: ClassSummary | None = Field(None, serialization_alias="class")
    student: UserSummary | None = None


class EnrollmentDataResponse(BaseModel):
    data: EnrollmentResponse
    message: str


class EnrollmentListResponse(BaseModel):
    """Paginated list of enrollments."""

    data: list[EnrollmentDetail]
    pagination: Pagination
    message: str = "Enrollments retrieved successfully"
