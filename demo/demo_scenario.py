#!/usr/bin/env python3
"""
Demo scenario for the CCRM platform.
"""

import tempfile
from pathlib import Path

from ccrm.config import load_config
from ccrm.core.exceptions import CapacityExceededError, CreditLimitExceededError, DuplicateEnrollmentError
from ccrm.logging_config import setup_logging
from ccrm.main import CCRMApplication

TEST_DATA = Path(__file__).resolve().parent.parent / "test-data"


def run_demo(data_dir: Path):
    """Run a walkthrough of the platform against the bundled test data."""
    print("=" * 60)
    print("CAMPUS COURSE & RECORDS MANAGER - DEMO")
    print("=" * 60)

    config = load_config(data_dir=data_dir, max_courses_per_student=3)
    setup_logging(config.log_dir, "WARNING", config.error_log_retention)
    app = CCRMApplication(config)
    registrar = app.registrar

    print("\n1. Importing test data...")
    added, _ = app.import_courses(TEST_DATA / "courses.csv")
    print(f"   ✓ {added} courses")
    added, result = app.import_students(TEST_DATA / "students.csv")
    print(f"   ✓ {added} students ({result.failed} rows skipped)")

    print("\n2. Demonstrating enrollment rules...")
    student_id = registrar.students.get_all()[0].id
    for code in ("CS101-A", "MATH201-A", "PHY101-A", "ENG102-A"):
        try:
            registrar.enroll(student_id, code)
            print(f"   ✓ {student_id} enrolled in {code}")
        except CreditLimitExceededError as exc:
            print(f"   ✗ {exc.message}")
            print(f"     {exc.suggested_action}")
        except (DuplicateEnrollmentError, CapacityExceededError) as exc:
            print(f"   ✗ {exc.message}")

    print("\n3. Recording grades...")
    for code, marks in (("CS101-A", 91), ("MATH201-A", 74)):
        grade = registrar.record_grade(student_id, code, marks)
        print(f"   {code}: {marks} -> {grade}")
    print(registrar.students.generate_transcript(student_id))

    print("4. Withdrawing...")
    enrollment = registrar.withdraw(student_id, "ENG102-A")
    print(f"   {enrollment!r}")

    print("\n5. Reports...")
    print(registrar.students.statistics_summary())
    print(registrar.courses.statistics_summary())

    print("6. Export and backup...")
    print(f"   Export: {app.export_all()}")
    print(f"   Backup: {app.backup.create_backup()}")

    print("\n✓ Demo completed")


if __name__ == "__main__":
    with tempfile.TemporaryDirectory(prefix="ccrm-demo-") as tmp:
        run_demo(Path(tmp) / "data")
