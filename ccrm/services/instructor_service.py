"""
Instructor service: instructor registry and teaching-load queries.
"""

import logging
from typing import Dict, List, Optional

from ..core.entities import Instructor
from ..core.exceptions import DuplicateEntityError, ResourceNotFoundError
from ..core.interfaces import Searchable
from . import statistics


logger = logging.getLogger(__name__)


class InstructorService(Searchable[Instructor]):
    """In-memory registry of instructors keyed by instructor id."""

    def __init__(self):
        self._instructors: Dict[str, Instructor] = {}

    def add_instructor(self, instructor: Instructor) -> Instructor:
        if instructor.id in self._instructors:
            raise DuplicateEntityError("Instructor", instructor.id)
        self._instructors[instructor.id] = instructor
        logger.info("Instructor added: %s (%s)", instructor.name.full_name, instructor.id)
        return instructor

    def get_instructor(self, instructor_id: str) -> Instructor:
        instructor = self.find_by_id(instructor_id)
        if instructor is None:
            raise ResourceNotFoundError("Instructor", instructor_id)
        return instructor

    def find_by_id(self, entity_id: str) -> Optional[Instructor]:
        if entity_id is None:
            return None
        return self._instructors.get(entity_id.strip())

    def get_all(self) -> List[Instructor]:
        return list(self._instructors.values())

    def as_mapping(self) -> Dict[str, Instructor]:
        return dict(self._instructors)

    def find_by_department(self, department: str) -> List[Instructor]:
        wanted = department.strip().lower()
        return self.search(lambda i: i.department.lower() == wanted)

    def find_overloaded(self) -> List[Instructor]:
        return statistics.overloaded_instructors(self._instructors.values())

    def average_teaching_load(self) -> float:
        return statistics.average_teaching_load(self._instructors.values())
