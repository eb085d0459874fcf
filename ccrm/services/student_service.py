"""
Student service: registration, enrollment checks, grading and student queries.
"""

import logging
from typing import Dict, List, Optional, Union

from ..config import AppConfig
from ..core.entities import Student
from ..core.enums import CREDITS_PER_COURSE, Grade
from ..core.exceptions import (
    CreditLimitExceededError,
    DuplicateEnrollmentError,
    DuplicateEntityError,
    ResourceNotFoundError,
)
from ..core.interfaces import Searchable
from ..core.values import CourseCode, normalize_code
from . import statistics


logger = logging.getLogger(__name__)


class StudentService(Searchable[Student]):
    """In-memory registry of students, keyed by student id in insertion order."""

    def __init__(self, config: AppConfig):
        self._config = config
        self._students: Dict[str, Student] = {}

    # Registry

    def add_student(self, student: Student) -> Student:
        """Register a new student."""
        if student.id in self._students:
            raise DuplicateEntityError("Student", student.id)
        self._students[student.id] = student
        logger.info("Student added: %s (%s)", student.name.full_name, student.id)
        return student

    def update_student(self, student: Student) -> Student:
        """Replace the stored record for an existing student."""
        if student.id not in self._students:
            raise ResourceNotFoundError("Student", student.id)
        self._students[student.id] = student
        student.add_audit_entry("Student information updated")
        logger.info("Student updated: %s", student.id)
        return student

    def get_student(self, student_id: str) -> Student:
        """Get a student or raise ResourceNotFoundError."""
        student = self.find_by_id(student_id)
        if student is None:
            raise ResourceNotFoundError("Student", student_id)
        return student

    def deactivate_student(self, student_id: str) -> bool:
        student = self.find_by_id(student_id)
        if student is None:
            return False
        student.deactivate()
        student.add_audit_entry("Student deactivated")
        logger.info("Student deactivated: %s", student_id)
        return True

    def activate_student(self, student_id: str) -> bool:
        student = self.find_by_id(student_id)
        if student is None:
            return False
        student.activate()
        student.add_audit_entry("Student activated")
        logger.info("Student activated: %s", student_id)
        return True

    def bulk_update_status(self, department: str, active: bool) -> int:
        """Activate or deactivate every student of a department."""
        affected = self.find_by_department(department)
        for student in affected:
            if active:
                student.activate()
            else:
                student.deactivate()
            student.add_audit_entry("Bulk activated" if active else "Bulk deactivated")
        logger.info("Bulk %s %d students in %s",
                    "activated" if active else "deactivated", len(affected), department)
        return len(affected)

    # Enrollment and grading

    @staticmethod
    def current_credits(student: Student) -> int:
        """Credits a student currently carries at the flat per-course weight."""
        return len(student.enrolled_courses) * CREDITS_PER_COURSE

    def enroll_student_in_course(self, student_id: str, course_code: Union[str, CourseCode],
                                 course_credits: int) -> None:
        """Add a course to a student's enrolled set after duplicate and credit checks."""
        student = self.get_student(student_id)
        code = normalize_code(course_code)

        if student.is_enrolled_in(code):
            raise DuplicateEnrollmentError(student_id, code)

        current = self.current_credits(student)
        maximum = self._config.max_credits_per_student
        if current + course_credits > maximum:
            raise CreditLimitExceededError(student_id, current, maximum, course_credits)

        student.enroll_in_course(code)
        logger.info("Student %s enrolled in course %s", student.name.full_name, code)

    def record_student_grade(self, student_id: str, course_code: Union[str, CourseCode],
                             marks: float) -> Grade:
        """Convert marks to a grade and record it for an enrolled course."""
        student = self.get_student(student_id)
        grade = Grade.from_marks(marks)
        student.record_grade(course_code, grade)
        logger.info("Grade recorded: %s - %s: %.2f (%s)",
                    student.name.full_name, normalize_code(course_code), marks, grade.letter)
        return grade

    def generate_transcript(self, student_id: str) -> str:
        return self.get_student(student_id).generate_transcript()

    # Searchable

    def find_by_id(self, entity_id: str) -> Optional[Student]:
        if entity_id is None:
            return None
        return self._students.get(entity_id.strip())

    def get_all(self) -> List[Student]:
        return list(self._students.values())

    def exists(self, student_id: str) -> bool:
        return self.find_by_id(student_id) is not None

    @property
    def total_count(self) -> int:
        return len(self._students)

    # Queries

    def find_by_department(self, department: str) -> List[Student]:
        wanted = department.strip().lower()
        return self.search(lambda s: s.department.lower() == wanted)

    def find_by_registration_pattern(self, pattern: str) -> List[Student]:
        return self.search(lambda s: pattern in s.registration_number)

    def find_by_gpa_range(self, min_gpa: float, max_gpa: float) -> List[Student]:
        return self.search(lambda s: min_gpa <= s.calculate_gpa() <= max_gpa)

    def find_in_good_standing(self) -> List[Student]:
        return self.search(lambda s: s.is_in_good_standing())

    def find_active(self) -> List[Student]:
        return self.search(lambda s: s.is_active)

    def find_in_course(self, course_code: Union[str, CourseCode]) -> List[Student]:
        code = normalize_code(course_code)
        return self.search(lambda s: s.is_enrolled_in(code))

    def top_students_by_gpa(self, limit: int) -> List[Student]:
        return statistics.top_students_by_gpa(self._students.values(), limit)

    def department_counts(self) -> Dict[str, int]:
        return statistics.department_counts(self._students.values())

    def gpa_distribution(self) -> Dict[str, int]:
        return statistics.gpa_distribution(self._students.values())

    def average_gpa(self) -> float:
        return statistics.average_gpa(self._students.values())

    def statistics_summary(self) -> str:
        return statistics.student_statistics_summary(self._students.values())
