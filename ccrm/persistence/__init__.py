"""
Persistence module containing CSV import/export and backup collaborators.
"""

from .backup import BackupInfo, BackupService, format_file_size
from .import_export import (
    COURSE_EXPORT_HEADERS,
    COURSE_IMPORT_HEADERS,
    ENROLLMENT_EXPORT_HEADERS,
    STUDENT_EXPORT_HEADERS,
    STUDENT_IMPORT_HEADERS,
    ImportExportService,
    ImportResult,
)
from .rows import CourseRow, StudentRow

__all__ = [
    # CSV
    "ImportExportService",
    "ImportResult",
    "StudentRow",
    "CourseRow",
    "STUDENT_IMPORT_HEADERS",
    "COURSE_IMPORT_HEADERS",
    "STUDENT_EXPORT_HEADERS",
    "COURSE_EXPORT_HEADERS",
    "ENROLLMENT_EXPORT_HEADERS",

    # Backup
    "BackupService",
    "BackupInfo",
    "format_file_size",
]
