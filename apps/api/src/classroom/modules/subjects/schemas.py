"""
Subject Schemas

Pydantic schemas for request validation and response serialization.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from classroom.modules.shared.schemas import Pagination


class SubjectCreate(BaseModel):
    """Request body for POST /subjects."""

    name: str = Field(..., min_length=1, max_length=255)
    code: str = Field(..., min_length=1, max_length=50)
    description: str | None = None
    department: str | None = Field(None, max_length=100)


class SubjectUpdate(BaseModel):
    """Request body for PUT /subjects/{id}. Only provided fields are changed."""

    name: str | None = Field(None, min_length=1, max_length=255)
    code: str | None = Field(None, min_length=1, max_length=50)
    description: str | None = None
    department: str | None = Field(None, max_length=100)


class SubjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    code: str
    description: str | None
    department: str | None
    created_at: datetime
    updated_at: datetime


class SubjectSummary(BaseModel):
    """Compact subject representation embedded in classes."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    code: str
    department: str | None = None


class SubjectDataResponse(BaseModel):
    data: SubjectResponse
    message: str


class SubjectListResponse(BaseModel):
    """Paginated list of subjects."""

    data: list[SubjectResponse]
    pagination: Pagination
    message: str = "Subjects retrieved successfully"
