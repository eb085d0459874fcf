"""
Row models validating CSV records before they reach the domain model.
"""

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator


class CsvRow(BaseModel):
    """Base row: cells are trimmed and blank cells fall back to the field default."""

    @field_validator("*", mode="before")
    @classmethod
    def clean_cell(cls, value: Any, info: ValidationInfo) -> Any:
        if isinstance(value, str):
            value = value.strip()
        if value is None or value == "":
            field = cls.model_fields[info.field_name]
            return None if field.is_required() else field.get_default()
        return value


class StudentRow(CsvRow):
    student_id: str = Field(..., min_length=1, max_length=20)
    reg_no: str = Field(..., min_length=1, max_length=30)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., pattern=r'^[^@\s]+@[^@\s]+$')
    department: str = Field(..., min_length=1, max_length=100)
    semester: int = Field(default=1, ge=1, le=8)
    date_of_birth: Optional[date] = None


class CourseRow(CsvRow):
    course_code: str = Field(..., pattern=r'^[A-Za-z]+\s*\d+\s*-\s*\S+$')
    title: str = Field(..., min_length=1, max_length=200)
    credits: int = Field(..., ge=1, le=6)
    department: str = Field(..., min_length=1, max_length=100)
    semester: str = Field(..., pattern=r'^(?i:spring|summer|fall|winter)$')
    instructor_id: Optional[str] = None
    max_capacity: int = Field(default=30, ge=1, le=500)
