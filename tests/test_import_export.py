import csv
import logging
from datetime import date
from pathlib import Path

import pytest

from ccrm.core.entities import Enrollment
from ccrm.core.enums import Semester
from ccrm.core.exceptions import PersistenceError
from ccrm.persistence import (
    COURSE_EXPORT_HEADERS,
    ENROLLMENT_EXPORT_HEADERS,
    STUDENT_EXPORT_HEADERS,
    ImportExportService,
)

from conftest import make_course, make_student


TEST_DATA = Path(__file__).resolve().parent.parent / "test-data"


@pytest.fixture()
def service(config):
    return ImportExportService(config)


def write_csv(path, text):
    path.write_text(text, encoding="utf-8")
    return path


def read_csv(path):
    with open(path, encoding="utf-8", newline="") as f:
        return list(csv.reader(f))


def test_import_students_skips_invalid_rows(service, caplog):
    with caplog.at_level(logging.WARNING, logger="ccrm.persistence.import_export"):
        result = service.import_students(TEST_DATA / "students.csv")

    assert (result.total, result.success, result.failed) == (7, 6, 1)
    assert [s.id for s in result.items] == ["STU001", "STU002", "STU003", "STU004", "STU005", "STU006"]
    assert result.errors == ["line 8: invalid email"]
    assert "STU007" not in [s.id for s in result.items]
    assert "Skipping student row 8" in caplog.text

    first = result.items[0]
    assert first.name.full_name == "John Doe"
    assert first.current_semester == 3
    assert result.items[-1].current_semester == 1
    assert first.age == 20


def test_import_students_reads_optional_birth_date(service, tmp_path):
    path = write_csv(tmp_path / "students.csv",
                     "student_id,reg_no,first_name,last_name,email,department,date_of_birth\n"
                     " STU010 , 2024CS010 , Ada , Lovelace , ada@u.edu , Computer Science , 2001-12-10 \n"
                     "\n"
                     "STU011,2024CS011,Alan,Turing,alan@u.edu,Computer Science,not-a-date\n")
    result = service.import_students(path)
    assert result.total == 2
    assert result.items[0].id == "STU010"
    assert result.items[0].date_of_birth == date(2001, 12, 10)
    assert result.errors == ["line 4: invalid date_of_birth"]


def test_import_courses(service):
    result = service.import_courses(TEST_DATA / "courses.csv")
    assert result.success == 5
    assert result.failed == 0
    physics = next(c for c in result.items if c.code == "PHY101-A")
    assert physics.instructor_id is None
    assert physics.max_capacity == 40
    assert physics.semester is Semester.FALL
    assert next(c for c in result.items if c.code == "CS201-A").semester is Semester.SPRING


def test_import_courses_rejects_bad_rows(service, tmp_path):
    path = write_csv(tmp_path / "courses.csv",
                     "course_code,title,credits,department,semester\n"
                     "CS101-A,Intro,3,Computer Science,fall\n"
                     "CS102,Missing Section,3,Computer Science,FALL\n"
                     "CS103-A,Too Heavy,9,Computer Science,FALL\n"
                     "CS104-A,Bad Term,3,Computer Science,AUTUMN\n")
    result = service.import_courses(path)
    assert [c.code for c in result.items] == ["CS101-A"]
    assert result.errors == [
        "line 3: invalid course_code",
        "line 4: invalid credits",
        "line 5: invalid semester",
    ]


def test_import_missing_file_or_columns(service, tmp_path):
    with pytest.raises(PersistenceError):
        service.import_students(tmp_path / "nope.csv")
    path = write_csv(tmp_path / "partial.csv", "student_id,reg_no\nSTU001,2023CS001\n")
    with pytest.raises(PersistenceError) as excinfo:
        service.import_students(path)
    assert "first_name" in excinfo.value.details["missing"]


def test_export_students_and_courses(service, tmp_path):
    student = make_student()
    student.deactivate()
    course = make_course()
    course.enroll_student("STU001")

    students_csv = service.export_students([student], tmp_path / "out" / "students.csv")
    rows = read_csv(students_csv)
    assert rows[0] == STUDENT_EXPORT_HEADERS
    assert rows[1][:8] == ["STU001", "2023CS001", "John", "Doe", "john@university.edu",
                           "Computer Science", "1", "0.00"]
    assert rows[1][8] == "INACTIVE"

    rows = read_csv(service.export_courses([course], tmp_path / "courses.csv"))
    assert rows[0] == COURSE_EXPORT_HEADERS
    assert rows[1] == ["CS101-A", "Introduction to Programming", "3", "Computer Science",
                       "FALL", "", "30", "1", "ACTIVE"]


def test_export_enrollments(service, tmp_path):
    graded = Enrollment.completed("STU001", "CS101-A", 72.5, enrollment_id="ENR-1")
    open_record = Enrollment("STU002", "CS101-A", enrollment_id="ENR-2")
    rows = read_csv(service.export_enrollments([graded, open_record], tmp_path / "enrollments.csv"))
    assert rows[0] == ENROLLMENT_EXPORT_HEADERS
    assert rows[1][:3] == ["ENR-1", "STU001", "CS101-A"]
    assert rows[1][4:7] == ["COMPLETED", "72.50", "B"]
    assert rows[2][4:] == ["ENROLLED", "", "", ""]


def test_export_system_data(service, config):
    export_dir = service.export_system_data([make_student()], [make_course()])
    assert export_dir.parent == config.export_dir
    assert export_dir.name == f"export_{date.today().isoformat()}"
    for name in ("students.csv", "courses.csv", "enrollments.csv", "export_summary.txt"):
        assert (export_dir / name).is_file()
    summary = (export_dir / "export_summary.txt").read_text(encoding="utf-8")
    assert "- Students: 1" in summary
    assert "- Enrollments: 0" in summary


def test_validate_csv_format(service, tmp_path):
    exported = service.export_courses([make_course()], tmp_path / "courses.csv")
    assert service.validate_csv_format(exported, COURSE_EXPORT_HEADERS)
    assert not service.validate_csv_format(exported, STUDENT_EXPORT_HEADERS)
    assert not service.validate_csv_format(tmp_path / "missing.csv", COURSE_EXPORT_HEADERS)
    assert not service.validate_csv_format(write_csv(tmp_path / "empty.csv", ""), COURSE_EXPORT_HEADERS)


def test_import_undecodable_file_raises_persistence_error(service, tmp_path):
    path = tmp_path / "students.csv"
    path.write_bytes(b"student_id,reg_no\n\xff\xfe\n")
    with pytest.raises(PersistenceError) as excinfo:
        service.import_students(path)
    assert excinfo.value.details == {"path": str(path)}
    assert not service.validate_csv_format(path, STUDENT_EXPORT_HEADERS)


def test_import_malformed_csv_raises_persistence_error(service, tmp_path):
    header = "course_code,title,credits,department,semester\n"
    path = write_csv(tmp_path / "courses.csv", header + "CS101-A," + "x" * 200_000 + ",3,CS,FALL\n")
    with pytest.raises(PersistenceError):
        service.import_courses(path)
