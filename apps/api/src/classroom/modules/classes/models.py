"""
Class Models

Database models for classes (sections of a subject taught by one teacher)
and their weekly meeting schedules.
"""

import enum
from datetime import time
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from classroom.modules.shared.models import BaseModel, enum_values

if TYPE_CHECKING:
    from classroom.modules.enrollments.models import Enrollment
    from classroom.modules.subjects.models import Subject
    from classroom.modules.users.models import User


class ClassStatus(str, enum.Enum):
    """Status of a class."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    FULL = "full"


DEFAULT_CLASS_CAPACITY = 50

# Name of the unique constraint guarding invite codes. Insert/update paths
# look for it in IntegrityError messages to tell a lost allocation race
# apart from other constraint failures.
INVITE_CODE_CONSTRAINT = "uq_classes_invite_code"


class SchoolClass(BaseModel):
    """
    A class: one teacher, one subject, many enrolled students.

    Students self-enroll using the class invite code.
    """

    __tablename__ = "classes"

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # 6 characters of [A-Z0-9]
    invite_code: Mapped[str] = mapped_column(String(6), nullable=False)

    subject_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("subjects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # ON DELETE RESTRICT: a teacher can't be deleted while owning classes
    teacher_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    banner_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    banner_cld_pub_id: Mapped[str | None] = mapped_column(Text, nullable=True)

    capacity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=DEFAULT_CLASS_CAPACITY,
    )
    status: Mapped[ClassStatus] = mapped_column(
        Enum(ClassStatus, name="class_status", values_callable=enum_values),
        nullable=False,
        default=ClassStatus.ACTIVE,
    )

    # Relationships
    subject: Mapped["Subject"] = relationship(
        "Subject",
        back_populates="classes",
        lazy="selectin",
    )
    teacher: Mapped["User"] = relationship(
        "User",
        lazy="selectin",
    )
    schedules: Mapped[list["ClassSchedule"]] = relationship(
        "ClassSchedule",
        back_populates="school_class",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    enrollments: Mapped[list["Enrollment"]] = relationship(
        "Enrollment",
        back_populates="school_class",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        UniqueConstraint("invite_code", name=INVITE_CODE_CONSTRAINT),
        CheckConstraint("capacity > 0", name="ck_classes_capacity_positive"),
    )

    def __repr__(self) -> str:
        return f"<SchoolClass(id={self.id}, name={self.name}, invite_code={self.invite_code})>"


class ClassSchedule(BaseModel):
    """
    A weekly meeting slot for a class.

    day_of_week follows 0 = Sunday ... 6 = Saturday.
    """

    __tablename__ = "class_schedules"

    class_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("classes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    # e.g. "Room 101", "Lab A"
    room: Mapped[str | None] = mapped_column(String(100), nullable=True)

    school_class: Mapped["SchoolClass"] = relationship(
        "SchoolClass",
        back_populates="schedules",
    )

    __table_args__ = (
        # One meeting per class per day/start time
        UniqueConstraint(
            "class_id", "day_of_week", "start_time", name="uq_class_schedules_slot"
        ),
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_class_schedules_day"),
        CheckConstraint("end_time > start_time", name="ck_class_schedules_time_order"),
    )

    def __repr__(self) -> str:
        return (
            f"<ClassSchedule(class_id={self.class_id}, day={self.day_of_week}, "
            f"start={self.start_time})>"
        )
