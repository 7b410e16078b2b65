"""
Users Router

API endpoints for managing users (admins, teachers, students).

Endpoints:
- GET /users - List users (role filter, name search, pagination)
- GET /users/{id} - Get a user
- POST /users - Create a user
- PUT /users/{id} - Update a user
- DELETE /users/{id} - Delete a user
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from classroom.core.database import get_db
from classroom.modules.users import service
from classroom.modules.users.schemas import (
    UserCreate,
    UserDataResponse,
    UserListResponse,
    UserResponse,
    UserUpdate,
)

router = APIRouter()


@router.get("", response_model=UserListResponse, summary="List Users")
async def list_users(
    roles: str | None = Query(
        None, max_length=100, description="Comma-separated roles, e.g. teacher,student"
    ),
    query: str | None = Query(None, max_length=100, description="Search by name"),
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    limit: int = Query(10, ge=1, le=100, description="Records per page"),
    db: AsyncSession = Depends(get_db),
) -> UserListResponse:
    """List users, newest first."""
    users, pagination = await service.list_users(
        db, roles=roles, query=query, page=page, limit=limit
    )
    return UserListResponse(
        data=[UserResponse.model_validate(u) for u in users],
        pagination=pagination,
    )


@router.get("/{user_id}", response_model=UserDataResponse, summary="Get User")
async def get_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
) -> UserDataResponse:
    user = await service.get_user(db, user_id)
    return UserDataResponse(
        data=UserResponse.model_validate(user),
        message="User retrieved successfully",
    )


@router.post(
    "",
    response_model=UserDataResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
    responses={409: {"description": "Email already registered"}},
)
async def create_user(
    data: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> UserDataResponse:
    user = await service.create_user(db, data)
    return UserDataResponse(
        data=UserResponse.model_validate(user),
        message="User created successfully",
    )


@router.put(
    "/{user_id}",
    response_model=UserDataResponse,
    summary="Update User",
    responses={
        404: {"description": "User not found"},
        409: {"description": "Email taken, or role change while owning classes or enrollments"},
    },
)
async def update_user(
    user_id: str,
    data: UserUpdate,
    db: AsyncSession = Depends(get_db),
) -> UserDataResponse:
    user = await service.update_user(db, user_id, data)
    return UserDataResponse(
        data=UserResponse.model_validate(user),
        message="User updated successfully",
    )


@router.delete(
    "/{user_id}",
    response_model=UserDataResponse,
    summary="Delete User",
    responses={409: {"description": "User still teaches classes"}},
)
async def delete_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
) -> UserDataResponse:
    """Delete a user. Teachers must have no classes left."""
    user = await service.delete_user(db, user_id)
    return UserDataResponse(
        data=UserResponse.model_validate(user),
        message="User deleted successfully",
    )
