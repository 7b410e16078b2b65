"""
User Schemas

Pydantic schemas for request validation and response serialization.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from classroom.modules.shared.schemas import Pagination
from classroom.modules.users.models import UserRole


class UserCreate(BaseModel):
    """Request body for POST /users."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    role: UserRole = UserRole.STUDENT
    department: str | None = Field(None, max_length=100)
    image: str | None = None
    image_cld_pub_id: str | None = None


class UserUpdate(BaseModel):
    """Request body for PUT /users/{id}. Only provided fields are changed."""

    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    role: UserRole | None = None
    department: str | None = Field(None, max_length=100)
    image: str | None = None
    image_cld_pub_id: str | None = None
    email_verified: bool | None = None


class UserResponse(BaseModel):
    """Public representation of a user."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    email_verified: bool
    image: str | None
    image_cld_pub_id: str | None
    role: UserRole
    department: str | None
    created_at: datetime
    updated_at: datetime


class UserSummary(BaseModel):
    """Compact user representation embedded in other resources."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    role: UserRole
    image: str | None = None


class UserDataResponse(BaseModel):
    data: UserResponse
    message: str


class UserListResponse(BaseModel):
    """Paginated list of users."""

    data: list[UserResponse]
    pagination: Pagination
    message: str = "Users retrieved successfully"
