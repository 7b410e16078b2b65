"""
Subject Models

Database model for academic subjects (courses). Classes are sections of a subject.
"""

from typing import TYPE_CHECKING

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from classroom.modules.shared.models import BaseModel

if TYPE_CHECKING:
    from classroom.modules.classes.models import SchoolClass


class Subject(BaseModel):
    """Academic subject, e.g. "Linear Algebra" (MATH201)."""

    __tablename__ = "subjects"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # e.g. "Computer Science", "Mathematics"
    department: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)

    # Deleting a subject deletes its classes
    classes: Mapped[list["SchoolClass"]] = relationship(
        "SchoolClass",
        back_populates="subject",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Subject(id={self.id}, code={self.code})>"
