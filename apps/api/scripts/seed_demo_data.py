"""
Seed Demo Data

Creates a small demo classroom: one admin, two teachers, a handful of
students, two subjects, and a class per subject with a weekly schedule.
Classes get their invite codes from the regular allocator. Running it
again skips records that already exist.

Usage:
    cd apps/api
    python scripts/seed_demo_data.py
"""

import asyncio
import sys
from datetime import time
from pathlib import Path

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import classroom.models  # noqa: E402, F401 - registers every model
from classroom.core.database import async_session_maker, close_db  # noqa: E402
from classroom.modules.classes import service as class_service  # noqa: E402
from classroom.modules.classes.schemas import ClassCreate, ScheduleCreate  # noqa: E402
from classroom.modules.enrollments.service import enroll_student  # noqa: E402
from classroom.modules.subjects.repository import SubjectRepository  # noqa: E402
from classroom.modules.users.models import UserRole  # noqa: E402
from classroom.modules.users.repository import UserRepository  # noqa: E402

USERS = [
    ("Morgan Reyes", "morgan.reyes@springfield.edu", UserRole.ADMIN, None),
    ("Dana Okafor", "dana.okafor@springfield.edu", UserRole.TEACHER, "Mathematics"),
    ("Priya Natarajan", "priya.natarajan@springfield.edu", UserRole.TEACHER, "Computer Science"),
    ("Lena Fischer", "lena.fischer@springfield.edu", UserRole.STUDENT, "Mathematics"),
    ("Tomas Silva", "tomas.silva@springfield.edu", UserRole.STUDENT, "Computer Science"),
    ("Aiko Tanaka", "aiko.tanaka@springfield.edu", UserRole.STUDENT, "Computer Science"),
]

SUBJECTS = [
    ("Linear Algebra", "MATH201", "Mathematics", "dana.okafor@springfield.edu"),
    ("Data Structures", "CS210", "Computer Science", "priya.natarajan@springfield.edu"),
]


async def seed_demo_data() -> None:
    """Create the demo records that don't exist yet."""
    async with async_session_maker() as db:
        users = {}
        for name, email, role, department in USERS:
            user = await UserRepository.get_by_email(db, email)
            if user:
                print(f"User already exists: {email}")
            else:
                user = await UserRepository.create(
                    db,
                    name=name,
                    email=email,
                    role=role,
                    department=department,
                    email_verified=True,
                )
                print(f"Created {role.value}: {email}")
            users[email] = user
        await db.commit()

        subjects, _ = await SubjectRepository.list_subjects(db, limit=100)
        existing_codes = {s.code for s in subjects}

        for subject_name, code, department, teacher_email in SUBJECTS:
            if code in existing_codes:
                print(f"Subject already exists: {code}")
                continue

            subject = await SubjectRepository.create(
                db, name=subject_name, code=code, department=department
            )
            await db.commit()

            school_class = await class_service.create_class(
                db,
                ClassCreate(
                    name=f"{subject_name} - Section A",
                    subject_id=subject.id,
                    teacher_id=users[teacher_email].id,
                    capacity=30,
                ),
            )
            print(f"Created class {school_class.name} with invite code {school_class.invite_code}")

            await class_service.add_schedule(
                db,
                school_class.id,
                ScheduleCreate(
                    day_of_week=1, start_time=time(9, 0), end_time=time(10, 30), room="Room 101"
                ),
            )
            await class_service.add_schedule(
                db,
                school_class.id,
                ScheduleCreate(
                    day_of_week=3, start_time=time(9, 0), end_time=time(10, 30), room="Room 101"
                ),
            )

            for email, user in users.items():
                if user.role == UserRole.STUDENT and user.department == department:
                    await enroll_student(db, school_class, user.id)
                    print(f"  Enrolled {email}")
            await db.commit()

    await close_db()


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
