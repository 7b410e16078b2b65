"""
Subjects module - Academic subject management.
"""

from classroom.modules.subjects.models import Subject

__all__ = ["Subject"]
