"""
Core module containing the domain model, value types and error taxonomy.
"""

from .entities import (
    Course,
    CourseStatistics,
    Enrollment,
    Identity,
    Instructor,
    Student,
    StudentProgress,
)
from .enums import CREDITS_PER_COURSE, CourseLoad, EnrollmentStatus, Grade, PersonType, Semester
from .exceptions import (
    CCRMException,
    CapacityExceededError,
    ConfigurationError,
    CreditLimitExceededError,
    DuplicateEnrollmentError,
    DuplicateEntityError,
    EnrollmentError,
    PersistenceError,
    ResourceNotFoundError,
    ValidationError,
)
from .interfaces import Auditable, Persona, Searchable
from .values import CourseCode, Name, normalize_code

__all__ = [
    # Entities
    "Identity",
    "Student",
    "StudentProgress",
    "Instructor",
    "Course",
    "CourseStatistics",
    "Enrollment",

    # Values
    "Name",
    "CourseCode",
    "normalize_code",

    # Interfaces
    "Persona",
    "Auditable",
    "Searchable",

    # Enums
    "CREDITS_PER_COURSE",
    "PersonType",
    "Grade",
    "Semester",
    "EnrollmentStatus",
    "CourseLoad",

    # Exceptions
    "CCRMException",
    "ValidationError",
    "ResourceNotFoundError",
    "DuplicateEntityError",
    "EnrollmentError",
    "DuplicateEnrollmentError",
    "CreditLimitExceededError",
    "CapacityExceededError",
    "PersistenceError",
    "ConfigurationError",
]
