"""
Services module containing the registries, the registrar facade and reporting.
"""

from .course_service import CourseService
from .instructor_service import InstructorService
from .registrar import Registrar, RegistrarSnapshot
from .student_service import StudentService

__all__ = [
    "StudentService",
    "CourseService",
    "InstructorService",
    "Registrar",
    "RegistrarSnapshot",
]
