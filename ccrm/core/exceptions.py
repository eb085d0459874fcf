"""
Custom exceptions for the CCRM platform.
"""

from typing import Optional, Any, Dict


class CCRMException(Exception):
    """Base exception for all CCRM-related errors."""

    default_code: Optional[str] = None

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = details or {}


class ValidationError(CCRMException):
    """Raised when a value violates one of its invariants."""
    default_code = "VALIDATION_FAILED"


class ResourceNotFoundError(CCRMException):
    """Raised when a referenced student, course or instructor does not exist."""
    default_code = "NOT_FOUND"

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            details={"resource_type": resource_type, "resource_id": resource_id},
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class DuplicateEntityError(CCRMException):
    """Raised when attempting to register an entity whose key already exists."""
    default_code = "ALREADY_EXISTS"

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} with ID {resource_id} already exists",
            details={"resource_type": resource_type, "resource_id": resource_id},
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class EnrollmentError(CCRMException):
    """Raised when enrollment operations fail."""
    pass


class DuplicateEnrollmentError(EnrollmentError):
    """Raised when a student already holds the target course."""
    default_code = "DUPLICATE_ENROLLMENT"

    def __init__(self, student_id: str, course_code: str,
                 reason: str = "Student is already enrolled in this course"):
        super().__init__(
            f"Duplicate enrollment for student {student_id} in course {course_code}: {reason}",
            details={"student_id": student_id, "course_code": course_code},
        )
        self.student_id = student_id
        self.course_code = course_code

    def formatted_details(self) -> str:
        return f"Student: {self.student_id}, Course: {self.course_code}"


class CreditLimitExceededError(EnrollmentError):
    """Raised when an enrollment would push a student past the credit ceiling."""
    default_code = "CREDIT_LIMIT_EXCEEDED"

    def __init__(self, student_id: str, current_credits: int, max_credits: int, attempted_credits: int):
        total = current_credits + attempted_credits
        super().__init__(
            f"Credit limit exceeded for student {student_id}: Current={current_credits}, "
            f"Max={max_credits}, Attempted={attempted_credits}, Total would be={total}",
            details={
                "student_id": student_id,
                "current_credits": current_credits,
                "max_credits": max_credits,
                "attempted_credits": attempted_credits,
            },
        )
        self.student_id = student_id
        self.current_credits = current_credits
        self.max_credits = max_credits
        self.attempted_credits = attempted_credits

    @property
    def excess_credits(self) -> int:
        """How many credits over the limit the enrollment would go."""
        return self.current_credits + self.attempted_credits - self.max_credits

    @property
    def available_credits(self) -> int:
        """Remaining credits the student may still enroll in."""
        return max(0, self.max_credits - self.current_credits)

    @property
    def suggested_action(self) -> str:
        available = self.available_credits
        if available > 0:
            return f"You can enroll in up to {available} more credits this semester."
        return ("You are already at your maximum credit limit. "
                "Consider dropping a course before enrolling in new ones.")

    def error_report(self) -> str:
        """Render a report suitable for showing to the end user."""
        rule = "-" * 30
        lines = [
            "Credit Limit Violation Report",
            rule,
            f"Student ID: {self.student_id}",
            f"Current Credits: {self.current_credits}",
            f"Maximum Allowed: {self.max_credits}",
            f"Attempted to Add: {self.attempted_credits}",
            f"Would Total: {self.current_credits + self.attempted_credits}",
            f"Excess Credits: {self.excess_credits}",
            f"Available Credits: {self.available_credits}",
            rule,
            f"Suggested Action: {self.suggested_action}",
        ]
        return "\n".join(lines) + "\n"


class CapacityExceededError(EnrollmentError):
    """Raised when a course roster is already at maximum capacity."""
    default_code = "CAPACITY_EXCEEDED"

    def __init__(self, course_code: str, max_capacity: int):
        super().__init__(
            f"Course capacity exceeded for {course_code} (max {max_capacity})",
            details={"course_code": course_code, "max_capacity": max_capacity},
        )
        self.course_code = course_code
        self.max_capacity = max_capacity


class PersistenceError(CCRMException):
    """Raised when file import, export or backup operations fail."""
    default_code = "PERSISTENCE_FAILED"


class ConfigurationError(CCRMException):
    """Raised when configuration is invalid."""
    default_code = "CONFIGURATION_INVALID"
