"""
Enrollments module - Student membership in classes.
"""

from classroom.modules.enrollments.models import Enrollment

__all__ = ["Enrollment"]
