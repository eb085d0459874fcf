"""
Enumerations and lookup tables for the CCRM platform.
"""

from enum import Enum

from .exceptions import ValidationError


# Credit weight applied to every course in GPA and credit-limit arithmetic.
CREDITS_PER_COURSE = 3


class PersonType(Enum):
    """Kinds of persons known to the registrar."""
    STUDENT = "STUDENT"
    INSTRUCTOR = "INSTRUCTOR"


class Grade(Enum):
    """Letter grades with their grade points and descriptions."""
    S = ("S", 10.0, "Outstanding")
    A = ("A", 9.0, "Excellent")
    B = ("B", 8.0, "Very Good")
    C = ("C", 7.0, "Good")
    D = ("D", 6.0, "Satisfactory")
    E = ("E", 5.0, "Pass")
    F = ("F", 0.0, "Fail")

    def __init__(self, letter: str, grade_point: float, description: str):
        self.letter = letter
        self.grade_point = grade_point
        self.description = description

    @classmethod
    def from_marks(cls, marks: float) -> "Grade":
        """Map a numeric mark to exactly one grade."""
        if marks >= 90.0:
            return cls.S
        if marks >= 80.0:
            return cls.A
        if marks >= 70.0:
            return cls.B
        if marks >= 60.0:
            return cls.C
        if marks >= 50.0:
            return cls.D
        if marks >= 40.0:
            return cls.E
        return cls.F

    @classmethod
    def from_letter(cls, letter: str) -> "Grade":
        """Look up a grade by its letter."""
        try:
            return cls[letter.strip().upper()]
        except KeyError:
            raise ValidationError(f"Unknown grade letter: {letter}")

    @property
    def is_passing(self) -> bool:
        return self is not Grade.F

    def calculate_grade_points(self, credits: int) -> float:
        """Grade points earned for a course worth the given credits."""
        return self.grade_point * credits

    def __str__(self) -> str:
        return f"{self.letter} ({self.grade_point:.1f}) - {self.description}"


class Semester(Enum):
    """Academic semesters."""
    SPRING = ("Spring", 1, "January - May")
    SUMMER = ("Summer", 2, "June - August")
    FALL = ("Fall", 3, "September - December")
    WINTER = ("Winter", 4, "December - January")

    def __init__(self, display_name: str, code: int, duration: str):
        self.display_name = display_name
        self.code = code
        self.duration = duration

    @classmethod
    def from_code(cls, code: int) -> "Semester":
        """Get a semester by its numeric code."""
        for semester in cls:
            if semester.code == code:
                return semester
        raise ValidationError(f"Invalid semester code: {code}")

    @classmethod
    def parse(cls, value: str) -> "Semester":
        """Get a semester by name, case-insensitively."""
        try:
            return cls[value.strip().upper()]
        except (KeyError, AttributeError):
            raise ValidationError(f"Invalid semester: {value}")

    def __str__(self) -> str:
        return f"{self.display_name} ({self.duration})"


class EnrollmentStatus(Enum):
    """Lifecycle status of an enrollment record."""
    ENROLLED = "ENROLLED"
    COMPLETED = "COMPLETED"
    WITHDRAWN = "WITHDRAWN"
    FAILED = "FAILED"


class CourseLoad(Enum):
    """Enrollment level of a course, by percentage of capacity filled."""
    FULL = "FULL/WAITLIST"
    HIGH_DEMAND = "HIGH_DEMAND"
    MODERATE = "MODERATE_ENROLLMENT"
    LOW = "LOW_ENROLLMENT"
    UNDERENROLLED = "UNDERENROLLED"

    @classmethod
    def from_percentage(cls, percentage: float) -> "CourseLoad":
        if percentage >= 90:
            return cls.FULL
        if percentage >= 80:
            return cls.HIGH_DEMAND
        if percentage >= 50:
            return cls.MODERATE
        if percentage >= 30:
            return cls.LOW
        return cls.UNDERENROLLED
