"""
Shared Schemas

Pagination metadata returned by every list endpoint.
"""

import math

from pydantic import BaseModel, Field


class Pagination(BaseModel):
    """Pagination metadata for list responses."""

    page: int = Field(..., ge=1, description="Current page (1-based)")
    limit: int = Field(..., ge=1, description="Records per page")
    total: int = Field(..., ge=0, description="Total records matching filters")
    total_pages: int = Field(..., ge=0, description="Total number of pages")


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    """Build pagination metadata for a page of results."""
    return Pagination(
        page=page,
        limit=limit,
        total=total,
        total_pages=math.ceil(total / limit) if limit else 0,
    )


def page_offset(page: int, limit: int) -> int:
    """Row offset for a 1-based page number."""
    return (max(1, page) - 1) * limit
