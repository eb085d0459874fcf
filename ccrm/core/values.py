"""
Immutable value objects used as identities across the CCRM platform.
"""

import re
from dataclasses import dataclass

from .exceptions import ValidationError


_COURSE_CODE_PATTERN = re.compile(r"^\s*([A-Za-z]+)\s*(\d+)\s*-\s*(\S+)\s*$")


@dataclass(frozen=True)
class Name:
    """A person's name; the middle name is optional."""
    first_name: str
    last_name: str
    middle_name: str = ""

    def __post_init__(self):
        first = (self.first_name or "").strip()
        last = (self.last_name or "").strip()
        middle = (self.middle_name or "").strip()
        if not first or not last:
            raise ValidationError("First name and last name are required")
        object.__setattr__(self, "first_name", first)
        object.__setattr__(self, "last_name", last)
        object.__setattr__(self, "middle_name", middle)

    @property
    def full_name(self) -> str:
        if not self.middle_name:
            return f"{self.first_name} {self.last_name}"
        return f"{self.first_name} {self.middle_name} {self.last_name}"

    @property
    def initials(self) -> str:
        """Initials such as "J.D." or "J.A.D."."""
        parts = [self.first_name, self.middle_name, self.last_name]
        return "".join(f"{part[0]}." for part in parts if part)

    def __str__(self) -> str:
        return self.full_name


@dataclass(frozen=True)
class CourseCode:
    """Department, number and section identifying one course offering."""
    department: str
    number: int
    section: str

    def __post_init__(self):
        department = (self.department or "").strip().upper()
        section = (self.section or "").strip().upper()
        if not department:
            raise ValidationError("Department cannot be null or empty")
        if isinstance(self.number, bool) or not isinstance(self.number, int) or self.number <= 0:
            raise ValidationError("Course number must be positive")
        if not section:
            raise ValidationError("Section cannot be null or empty")
        object.__setattr__(self, "department", department)
        object.__setattr__(self, "section", section)

    @classmethod
    def parse(cls, text: str) -> "CourseCode":
        """Parse a full code such as "CS101-A"."""
        match = _COURSE_CODE_PATTERN.match(text or "")
        if not match:
            raise ValidationError(f"Invalid course code format: {text}")
        department, number, section = match.groups()
        return cls(department, int(number), section)

    @property
    def full_code(self) -> str:
        return f"{self.department}{self.number}-{self.section}"

    def with_section(self, new_section: str) -> "CourseCode":
        """Same department and number, different section."""
        return CourseCode(self.department, self.number, new_section)

    def __str__(self) -> str:
        return self.full_code


def normalize_code(course_code) -> str:
    """Canonical text key for a course code given as text or CourseCode.

    Text that parses as a course code is rendered as its ``full_code``, so
    "cs 101-a" and "CS101-A" name the same course. Other text is upper-cased.
    """
    if isinstance(course_code, CourseCode):
        return course_code.full_code
    if course_code is None or not str(course_code).strip():
        raise ValidationError("Course code required")
    text = str(course_code).strip()
    try:
        return CourseCode.parse(text).full_code
    except ValidationError:
        return text.upper()
