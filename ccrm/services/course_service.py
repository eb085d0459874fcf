"""
Course service: catalog management and course queries.
"""

import logging
from typing import Dict, List, Optional, Union

from ..config import AppConfig
from ..core.entities import Course
from ..core.enums import Semester
from ..core.exceptions import DuplicateEntityError, ResourceNotFoundError
from ..core.interfaces import Searchable
from ..core.values import CourseCode, normalize_code
from . import statistics


logger = logging.getLogger(__name__)


class CourseService(Searchable[Course]):
    """In-memory course catalog keyed by full course code."""

    def __init__(self, config: AppConfig):
        self._config = config
        self._courses: Dict[str, Course] = {}

    def add_course(self, course: Course) -> Course:
        """Add a course to the catalog."""
        if course.code in self._courses:
            raise DuplicateEntityError("Course", course.code)
        self._courses[course.code] = course
        logger.info("Course added: %s (%s)", course.title, course.code)
        return course

    def create_course(self, course_code: Union[str, CourseCode], title: str, *, credits: int,
                      department: str, semester: Optional[Union[str, Semester]] = None,
                      instructor_id: Optional[str] = None, description: str = "",
                      max_capacity: Optional[int] = None, prerequisites=()) -> Course:
        """Build a course using configured defaults and add it to the catalog."""
        course = Course.create(
            course_code,
            title,
            credits=credits,
            semester=semester if semester is not None else self._config.default_semester,
            department=department,
            instructor_id=instructor_id,
            description=description,
            max_capacity=max_capacity if max_capacity is not None else self._config.max_students_per_course,
            prerequisites=prerequisites,
        )
        return self.add_course(course)

    def update_course(self, course: Course) -> Course:
        if course.code not in self._courses:
            raise ResourceNotFoundError("Course", course.code)
        self._courses[course.code] = course
        logger.info("Course updated: %s", course.code)
        return course

    def get_course(self, course_code: Union[str, CourseCode]) -> Course:
        """Get a course or raise ResourceNotFoundError."""
        course = self.find_by_id(course_code)
        if course is None:
            raise ResourceNotFoundError("Course", str(course_code))
        return course

    def deactivate_course(self, course_code: Union[str, CourseCode]) -> bool:
        course = self.find_by_id(course_code)
        if course is None:
            return False
        course.is_active = False
        logger.info("Course deactivated: %s", course.code)
        return True

    def activate_course(self, course_code: Union[str, CourseCode]) -> bool:
        course = self.find_by_id(course_code)
        if course is None:
            return False
        course.is_active = True
        logger.info("Course activated: %s", course.code)
        return True

    def assign_instructor(self, course_code: Union[str, CourseCode], instructor_id: Optional[str]) -> bool:
        """Set a course's instructor id; the id itself is not checked."""
        course = self.find_by_id(course_code)
        if course is None:
            return False
        course.instructor_id = instructor_id
        logger.info("Instructor %s assigned to course %s", instructor_id, course.code)
        return True

    # Searchable

    def find_by_id(self, entity_id: Union[str, CourseCode]) -> Optional[Course]:
        if entity_id is None or not str(entity_id).strip():
            return None
        return self._courses.get(normalize_code(entity_id))

    def get_all(self) -> List[Course]:
        return list(self._courses.values())

    def exists(self, course_code: Union[str, CourseCode]) -> bool:
        return self.find_by_id(course_code) is not None

    @property
    def total_count(self) -> int:
        return len(self._courses)

    # Queries

    def find_by_instructor(self, instructor_id: Optional[str]) -> List[Course]:
        return self.search(lambda c: c.instructor_id == instructor_id)

    def find_by_department(self, department: str) -> List[Course]:
        wanted = department.strip().lower()
        return self.search(lambda c: c.department.lower() == wanted)

    def find_by_semester(self, semester: Semester) -> List[Course]:
        return self.search(lambda c: c.semester is semester)

    def find_by_credit_range(self, min_credits: int, max_credits: int) -> List[Course]:
        return self.search(lambda c: min_credits <= c.credits <= max_credits)

    def find_available(self) -> List[Course]:
        """Active courses with at least one free seat."""
        return self.search(lambda c: c.is_active and not c.is_full)

    def find_with_prerequisites(self) -> List[Course]:
        return self.search(lambda c: c.has_prerequisites)

    def find_popular(self) -> List[Course]:
        return self.search(lambda c: c.is_active and c.is_popular)

    def find_underenrolled(self) -> List[Course]:
        return self.search(lambda c: c.is_active and c.is_underenrolled)

    def search_by_title(self, fragment: str) -> List[Course]:
        wanted = fragment.lower()
        return self.search(lambda c: wanted in c.title.lower())

    def find_with_available_spots(self, required_spots: int) -> List[Course]:
        return self.search(lambda c: c.is_active and c.available_spots >= required_spots)

    def courses_by_enrollment_status(self) -> Dict[str, List[Course]]:
        return statistics.courses_by_enrollment_status(self._courses.values())

    def department_counts(self) -> Dict[str, int]:
        return statistics.course_counts_by_department(self._courses.values())

    def instructor_counts(self) -> Dict[str, int]:
        return statistics.course_counts_by_instructor(self._courses.values())

    def credit_distribution(self) -> Dict[int, int]:
        return statistics.credit_distribution(self._courses.values())

    def average_enrollment_percentage(self) -> float:
        return statistics.average_enrollment_percentage(self._courses.values())

    def sorted_by_enrollment(self) -> List[Course]:
        return statistics.courses_sorted_by_enrollment(self._courses.values())

    def sorted_by_availability(self) -> List[Course]:
        return statistics.courses_sorted_by_availability(self._courses.values())

    def statistics_summary(self) -> str:
        return statistics.course_statistics_summary(self._courses.values())

    def generate_catalog(self) -> str:
        return statistics.course_catalog(self._courses.values())
