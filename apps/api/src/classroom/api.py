from fastapi import APIRouter

from classroom.modules.classes.router import router as classes_router
from classroom.modules.enrollments.router import router as enrollments_router
from classroom.modules.subjects.router import router as subjects_router
from classroom.modules.users.router import router as users_router

api_router = APIRouter()

api_router.include_router(users_router, prefix="/users", tags=["Users"])

api_router.include_router(subjects_router, prefix="/subjects", tags=["Subjects"])

api_router.include_router(classes_router, prefix="/classes", tags=["Classes"])

api_router.include_router(enrollments_router, prefix="/enrollments", tags=["Enrollments"])
