"""
CSV import and export of registrar data.

Imports validate each row with a pydantic row model and skip rows that fail;
exports write plain csv files plus a dated system export directory.
"""

import csv
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Dict, Generic, Iterable, Iterator, List, Optional, Sequence, Tuple, TypeVar

from pydantic import ValidationError as PydanticValidationError

from ..config import AppConfig
from ..core.entities import Course, Enrollment, Student
from ..core.enums import Semester
from ..core.exceptions import CCRMException, PersistenceError
from ..core.values import Name
from .rows import CourseRow, StudentRow

logger = logging.getLogger(__name__)

T = TypeVar("T")

STUDENT_IMPORT_HEADERS = ["student_id", "reg_no", "first_name", "last_name", "email", "department"]
COURSE_IMPORT_HEADERS = ["course_code", "title", "credits", "department", "semester"]

STUDENT_EXPORT_HEADERS = [
    "student_id", "reg_no", "first_name", "last_name", "email",
    "department", "semester", "gpa", "status", "enrollment_date",
]
COURSE_EXPORT_HEADERS = [
    "course_code", "title", "credits", "department", "semester",
    "instructor_id", "max_capacity", "current_enrollment", "status",
]
ENROLLMENT_EXPORT_HEADERS = [
    "enrollment_id", "student_id", "course_code", "enrollment_date",
    "status", "marks", "grade", "completion_date",
]

DEFAULT_STUDENT_AGE = 20


@dataclass
class ImportResult(Generic[T]):
    total: int = 0
    success: int = 0
    failed: int = 0
    errors: List[str] = field(default_factory=list)
    items: List[T] = field(default_factory=list)

    def add_error(self, line_number: int, message: str) -> None:
        self.failed += 1
        self.errors.append(f"line {line_number}: {message}")


def _default_birth_date() -> date:
    today = date.today()
    try:
        return today.replace(year=today.year - DEFAULT_STUDENT_AGE)
    except ValueError:
        return today.replace(year=today.year - DEFAULT_STUDENT_AGE, day=28)


def _status(active: bool) -> str:
    return "ACTIVE" if active else "INACTIVE"


class ImportExportService:
    """CSV import and export of students, courses and enrollment records."""

    def __init__(self, config: AppConfig):
        self.config = config

    # Import

    def _read_rows(self, csv_path: Path, required_headers: Sequence[str]) -> Iterator[Tuple[int, Dict[str, str]]]:
        csv_path = Path(csv_path)
        if not csv_path.is_file():
            raise PersistenceError(f"File does not exist: {csv_path}", details={"path": str(csv_path)})
        try:
            with csv_path.open("r", encoding="utf-8", newline="") as f:
                reader = csv.DictReader(f)
                headers = [h.strip() for h in (reader.fieldnames or [])]
                missing = [h for h in required_headers if h not in headers]
                if missing:
                    raise PersistenceError(
                        f"Missing columns in {csv_path.name}: {', '.join(missing)}",
                        details={"path": str(csv_path), "missing": missing},
                    )
                reader.fieldnames = headers
                for row in reader:
                    if not any((value or "").strip() for key, value in row.items() if key is not None):
                        continue
                    yield reader.line_num, {k: v for k, v in row.items() if k is not None}
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            raise PersistenceError(f"Error reading {csv_path}: {exc}", details={"path": str(csv_path)})

    def import_students(self, csv_path: Path) -> ImportResult[Student]:
        """Parse students from CSV; invalid rows are logged and skipped."""
        result: ImportResult[Student] = ImportResult()
        logger.info("Importing students from %s", csv_path)
        for line_number, raw in self._read_rows(csv_path, STUDENT_IMPORT_HEADERS):
            result.total += 1
            try:
                row = StudentRow.model_validate(raw)
                student = Student(
                    row.student_id,
                    row.reg_no,
                    Name(row.first_name, row.last_name),
                    row.email,
                    row.date_of_birth or _default_birth_date(),
                    row.department,
                )
                student.current_semester = row.semester
            except PydanticValidationError as exc:
                fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err.get("loc"))
                logger.warning("Skipping student row %d in %s: invalid %s", line_number, csv_path, fields)
                result.add_error(line_number, f"invalid {fields}")
                continue
            except CCRMException as exc:
                logger.warning("Skipping student row %d in %s: %s", line_number, csv_path, exc.message)
                result.add_error(line_number, exc.message)
                continue
            result.items.append(student)
            result.success += 1
        logger.info("Imported %d of %d students from %s", result.success, result.total, csv_path)
        return result

    def import_courses(self, csv_path: Path) -> ImportResult[Course]:
        """Parse courses from CSV; invalid rows are logged and skipped."""
        result: ImportResult[Course] = ImportResult()
        logger.info("Importing courses from %s", csv_path)
        for line_number, raw in self._read_rows(csv_path, COURSE_IMPORT_HEADERS):
            result.total += 1
            try:
                row = CourseRow.model_validate(raw)
                course = Course.create(
                    row.course_code,
                    row.title,
                    credits=row.credits,
                    semester=Semester.parse(row.semester),
                    department=row.department,
                    instructor_id=row.instructor_id,
                    max_capacity=row.max_capacity,
                )
            except PydanticValidationError as exc:
                fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err.get("loc"))
                logger.warning("Skipping course row %d in %s: invalid %s", line_number, csv_path, fields)
                result.add_error(line_number, f"invalid {fields}")
                continue
            except CCRMException as exc:
                logger.warning("Skipping course row %d in %s: %s", line_number, csv_path, exc.message)
                result.add_error(line_number, exc.message)
                continue
            result.items.append(course)
            result.success += 1
        logger.info("Imported %d of %d courses from %s", result.success, result.total, csv_path)
        return result

    # Export

    def _write_csv(self, csv_path: Path, headers: Sequence[str], rows: Iterable[Sequence]) -> int:
        csv_path = Path(csv_path)
        count = 0
        try:
            csv_path.parent.mkdir(parents=True, exist_ok=True)
            with csv_path.open("w", encoding="utf-8", newline="") as f:
                writer = csv.writer(f)
                writer.writerow(headers)
                for row in rows:
                    writer.writerow(row)
                    count += 1
        except OSError as exc:
            raise PersistenceError(f"Error writing {csv_path}: {exc}", details={"path": str(csv_path)})
        return count

    def export_students(self, students: Iterable[Student], csv_path: Path) -> Path:
        rows = (
            [
                s.id,
                s.registration_number,
                s.name.first_name,
                s.name.last_name,
                s.email,
                s.department,
                s.current_semester,
                f"{s.calculate_gpa():.2f}",
                _status(s.is_active),
                s.enrollment_date.isoformat(),
            ]
            for s in students
        )
        count = self._write_csv(csv_path, STUDENT_EXPORT_HEADERS, rows)
        logger.info("Exported %d students to %s", count, csv_path)
        return Path(csv_path)

    def export_courses(self, courses: Iterable[Course], csv_path: Path) -> Path:
        rows = (
            [
                c.code,
                c.title,
                c.credits,
                c.department,
                c.semester.name,
                c.instructor_id or "",
                c.max_capacity,
                c.current_enrollment,
                _status(c.is_active),
            ]
            for c in courses
        )
        count = self._write_csv(csv_path, COURSE_EXPORT_HEADERS, rows)
        logger.info("Exported %d courses to %s", count, csv_path)
        return Path(csv_path)

    def export_enrollments(self, enrollments: Iterable[Enrollment], csv_path: Path) -> Path:
        rows = (
            [
                e.enrollment_id,
                e.student_id,
                e.course_code,
                e.enrollment_date.isoformat(),
                e.status.value,
                f"{e.marks:.2f}" if e.is_graded else "",
                e.grade.letter if e.grade else "",
                e.completion_date.isoformat() if e.completion_date else "",
            ]
            for e in enrollments
        )
        count = self._write_csv(csv_path, ENROLLMENT_EXPORT_HEADERS, rows)
        logger.info("Exported %d enrollments to %s", count, csv_path)
        return Path(csv_path)

    def export_system_data(self, students: Sequence[Student], courses: Sequence[Course],
                           enrollments: Sequence[Enrollment] = (),
                           export_root: Optional[Path] = None) -> Path:
        """Export everything into a dated directory with a summary file."""
        now = datetime.now()
        export_dir = Path(export_root or self.config.export_dir) / f"export_{now.strftime('%Y-%m-%d')}"
        logger.info("Exporting system data to %s", export_dir)

        self.export_students(students, export_dir / "students.csv")
        self.export_courses(courses, export_dir / "courses.csv")
        self.export_enrollments(enrollments, export_dir / "enrollments.csv")

        summary = [
            "CCRM Export Summary",
            "===================",
            f"Export Date: {now.strftime('%Y-%m-%d')}",
            f"Export Time: {now.strftime('%H:%M:%S')}",
            "",
            "Exported Data:",
            f"- Students: {len(students)}",
            f"- Courses: {len(courses)}",
            f"- Enrollments: {len(enrollments)}",
            "",
            "Files Created:",
            "- students.csv",
            "- courses.csv",
            "- enrollments.csv",
            "- export_summary.txt (this file)",
            "",
            f"Generated by {self.config.app_name} v{self.config.app_version}",
        ]
        try:
            (export_dir / "export_summary.txt").write_text("\n".join(summary) + "\n", encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Error writing export summary: {exc}", details={"path": str(export_dir)})
        return export_dir

    def validate_csv_format(self, csv_path: Path, expected_headers: Sequence[str]) -> bool:
        """True when the file exists and its header row matches exactly."""
        csv_path = Path(csv_path)
        if not csv_path.is_file():
            return False
        try:
            with csv_path.open("r", encoding="utf-8", newline="") as f:
                header = next(csv.reader(f), None)
        except OSError as exc:
            raise PersistenceError(f"Error reading {csv_path}: {exc}", details={"path": str(csv_path)})
        except (UnicodeDecodeError, csv.Error) as exc:
            logger.warning("Unreadable CSV header in %s: %s", csv_path, exc)
            return False
        if header is None:
            return False
        return [h.strip() for h in header] == list(expected_headers)
