"""
Registrar facade coordinating students, courses, instructors and enrollment records.

The registrar is the only component that mutates both sides of a
student/course relationship, so the student's enrolled set and the course
roster stay consistent.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from ..config import AppConfig
from ..core.entities import Course, Enrollment, Instructor, Student
from ..core.enums import Grade
from ..core.exceptions import CapacityExceededError, EnrollmentError, ValidationError
from ..core.values import CourseCode, normalize_code
from . import statistics
from .course_service import CourseService
from .instructor_service import InstructorService
from .student_service import StudentService


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistrarSnapshot:
    """Read-only view of the registrar's state, used for export."""
    students: Tuple[Student, ...]
    courses: Tuple[Course, ...]
    instructors: Tuple[Instructor, ...]
    enrollments: Tuple[Enrollment, ...]


class Registrar:
    """Coordinates enrollment, withdrawal and grading across services."""

    def __init__(self, config: AppConfig, student_service: Optional[StudentService] = None,
                 course_service: Optional[CourseService] = None,
                 instructor_service: Optional[InstructorService] = None):
        self._config = config
        self._students = student_service or StudentService(config)
        self._courses = course_service or CourseService(config)
        self._instructors = instructor_service or InstructorService()
        self._enrollments: Dict[str, Enrollment] = {}

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def students(self) -> StudentService:
        return self._students

    @property
    def courses(self) -> CourseService:
        return self._courses

    @property
    def instructors(self) -> InstructorService:
        return self._instructors

    # Enrollment

    def enroll(self, student_id: str, course_code: Union[str, CourseCode]) -> Enrollment:
        """Enroll a student on both sides and open an enrollment record.

        The student side is checked first (duplicate, credit limit); if the
        course roster then rejects the student for capacity, the student-side
        change is undone before the error propagates.
        """
        course = self._courses.get_course(course_code)
        code = course.code

        self._students.enroll_student_in_course(student_id, code, course.credits)
        try:
            course.enroll_student(student_id)
        except CapacityExceededError:
            self._students.get_student(student_id).unenroll_from_course(code)
            logger.warning("Enrollment of %s in %s rolled back: course is full", student_id, code)
            raise

        enrollment = Enrollment(student_id, code)
        self._enrollments[enrollment.enrollment_id] = enrollment
        logger.info("Enrollment %s opened for %s in %s", enrollment.enrollment_id, student_id, code)
        return enrollment

    def withdraw(self, student_id: str, course_code: Union[str, CourseCode]) -> Optional[Enrollment]:
        """Remove a student from a course on both sides and close the active record."""
        student = self._students.get_student(student_id)
        code = normalize_code(course_code)
        if not student.is_enrolled_in(code):
            raise EnrollmentError(f"Student {student_id} is not enrolled in course {code}",
                                  error_code="NOT_ENROLLED",
                                  details={"student_id": student_id, "course_code": code})

        student.unenroll_from_course(code)
        course = self._courses.find_by_id(code)
        if course is not None:
            course.unenroll_student(student_id)

        enrollment = self.active_enrollment(student_id, code)
        if enrollment is not None:
            enrollment.withdraw()
        logger.info("Student %s withdrew from %s", student_id, code)
        return enrollment

    def record_grade(self, student_id: str, course_code: Union[str, CourseCode], marks: float) -> Grade:
        """Record marks for an enrolled course on the student and the active record."""
        if marks is None or not 0 <= marks <= 100:
            raise ValidationError("Marks must be between 0 and 100", details={"marks": marks})
        code = normalize_code(course_code)
        grade = self._students.record_student_grade(student_id, code, marks)

        enrollment = self.active_enrollment(student_id, code)
        if enrollment is not None:
            enrollment.record_marks(marks)
        return grade

    def active_enrollment(self, student_id: str, course_code: Union[str, CourseCode]) -> Optional[Enrollment]:
        """Latest non-withdrawn record for a student/course pair."""
        code = normalize_code(course_code)
        for enrollment in reversed(list(self._enrollments.values())):
            if enrollment.student_id == student_id and enrollment.course_code == code and enrollment.is_active:
                return enrollment
        return None

    def enrollments_for_student(self, student_id: str) -> List[Enrollment]:
        return [e for e in self._enrollments.values() if e.student_id == student_id]

    def enrollments_for_course(self, course_code: Union[str, CourseCode]) -> List[Enrollment]:
        code = normalize_code(course_code)
        return [e for e in self._enrollments.values() if e.course_code == code]

    def all_enrollments(self) -> List[Enrollment]:
        return list(self._enrollments.values())

    # Status and assignment

    def activate_student(self, student_id: str) -> bool:
        return self._students.activate_student(student_id)

    def deactivate_student(self, student_id: str) -> bool:
        return self._students.deactivate_student(student_id)

    def assign_instructor(self, course_code: Union[str, CourseCode], instructor_id: Optional[str]) -> bool:
        """Point a course at an instructor and keep registered instructors' course sets in step."""
        course = self._courses.find_by_id(course_code)
        if course is None:
            return False

        previous = self._instructors.find_by_id(course.instructor_id) if course.instructor_id else None
        self._courses.assign_instructor(course.code, instructor_id)
        if previous is not None and previous.id != instructor_id:
            previous.unassign_course(course.code)

        instructor = self._instructors.find_by_id(instructor_id) if instructor_id else None
        if instructor is not None:
            instructor.assign_course(course.code)
        return True

    # Reporting

    def credit_weighted_gpa(self, student_id: str) -> float:
        student = self._students.get_student(student_id)
        catalog = {course.code: course for course in self._courses.get_all()}
        return statistics.credit_weighted_gpa(student, catalog)

    def snapshot(self) -> RegistrarSnapshot:
        return RegistrarSnapshot(
            students=tuple(self._students.get_all()),
            courses=tuple(self._courses.get_all()),
            instructors=tuple(self._instructors.get_all()),
            enrollments=tuple(self._enrollments.values()),
        )
