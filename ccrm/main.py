"""
Main entry point for the CCRM platform.
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional, Tuple

from .cli.menu import MainMenu
from .config import AppConfig, load_config
from .core.entities import Course, Instructor, Student
from .core.enums import Semester
from .core.exceptions import CCRMException, DuplicateEntityError
from .core.values import Name
from .logging_config import setup_logging
from .persistence import BackupService, ImportExportService, ImportResult
from .services import Registrar


logger = logging.getLogger(__name__)


class CCRMApplication:
    """Main application class that wires configuration, services and persistence."""

    def __init__(self, config: Optional[AppConfig] = None):
        self._config = config or load_config()
        self._config.ensure_directories()
        self._registrar = Registrar(self._config)
        self._import_export = ImportExportService(self._config)
        self._backup = BackupService(self._config)
        logger.info("%s v%s initialized (data dir: %s)",
                    self._config.app_name, self._config.app_version, self._config.data_dir)

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def registrar(self) -> Registrar:
        return self._registrar

    @property
    def import_export(self) -> ImportExportService:
        return self._import_export

    @property
    def backup(self) -> BackupService:
        return self._backup

    def import_students(self, csv_path: Path) -> Tuple[int, ImportResult]:
        """Import students from CSV and register the ones not already known."""
        result = self._import_export.import_students(csv_path)
        added = 0
        for student in result.items:
            try:
                self._registrar.students.add_student(student)
                added += 1
            except DuplicateEntityError as exc:
                logger.warning("Skipping imported student: %s", exc.message)
        return added, result

    def import_courses(self, csv_path: Path) -> Tuple[int, ImportResult]:
        """Import courses from CSV and add the ones not already in the catalog."""
        result = self._import_export.import_courses(csv_path)
        added = 0
        for course in result.items:
            try:
                self._registrar.courses.add_course(course)
                added += 1
            except DuplicateEntityError as exc:
                logger.warning("Skipping imported course: %s", exc.message)
        return added, result

    def export_all(self) -> Path:
        snapshot = self._registrar.snapshot()
        return self._import_export.export_system_data(
            list(snapshot.students), list(snapshot.courses), list(snapshot.enrollments))

    def create_sample_data(self) -> None:
        """Populate the registrar with a small sample cohort."""
        registrar = self._registrar

        instructor = Instructor("INS001", "EMP001", Name("Jane", "Smith"), "jane.smith@university.edu",
                                date(1980, 3, 20), "Computer Science", "Professor")
        instructor.experience_years = 12
        instructor.add_qualification("PhD Computer Science")
        registrar.instructors.add_instructor(instructor)

        courses = [
            Course.create("CS101-A", "Introduction to Programming", credits=3, semester=Semester.FALL,
                          department="Computer Science", max_capacity=30),
            Course.create("CS201-A", "Data Structures", credits=4, semester=Semester.SPRING,
                          department="Computer Science", max_capacity=25, prerequisites=["CS101-A"]),
            Course.create("MATH101-A", "Calculus I", credits=4, semester=Semester.FALL,
                          department="Mathematics", max_capacity=40),
        ]
        for course in courses:
            registrar.courses.add_course(course)
        registrar.assign_instructor("CS101-A", "INS001")
        registrar.assign_instructor("CS201-A", "INS001")

        students = [
            Student("STU001", "2023CS001", Name("John", "Doe"), "john.doe@university.edu",
                    date(2002, 5, 15), "Computer Science"),
            Student("STU002", "2023CS002", Name("Alice", "Johnson", "Marie"), "alice.johnson@university.edu",
                    date(2001, 8, 22), "Computer Science"),
            Student("STU003", "2023MA001", Name("Bob", "Wilson"), "bob.wilson@university.edu",
                    date(2002, 1, 10), "Mathematics"),
        ]
        for student in students:
            registrar.students.add_student(student)

        registrar.enroll("STU001", "CS101-A")
        registrar.enroll("STU001", "MATH101-A")
        registrar.enroll("STU002", "CS101-A")
        registrar.enroll("STU003", "MATH101-A")
        registrar.record_grade("STU001", "CS101-A", 92)
        registrar.record_grade("STU001", "MATH101-A", 78)
        registrar.record_grade("STU002", "CS101-A", 85)

    def run_demo(self) -> None:
        """Run a demonstration of the platform."""
        print("Running CCRM demonstration...")
        self.create_sample_data()
        registrar = self._registrar

        print("\n=== Students ===")
        for student in registrar.students.get_all():
            print(f"{student.person_summary()}\n  {student.display_info()}")

        print("\n=== Transcript ===")
        print(registrar.students.generate_transcript("STU001"))

        print("=== Enrollment Rules ===")
        try:
            registrar.enroll("STU001", "CS101-A")
        except CCRMException as exc:
            print(f"Duplicate enrollment rejected: {exc.message}")

        print(f"\nCredit-weighted GPA for STU001: {registrar.credit_weighted_gpa('STU001'):.2f}")
        print()
        print(registrar.students.statistics_summary())
        print(registrar.courses.statistics_summary())
        print(registrar.courses.generate_catalog())
        print("✓ Demo completed")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Campus Course & Records Manager")
    parser.add_argument("--config", type=str, help="Configuration file path (JSON)")
    parser.add_argument("--data-dir", type=str, help="Data directory")
    parser.add_argument("--log-level", type=str, help="Logging level (DEBUG, INFO, WARNING, ERROR)")
    parser.add_argument("--demo", action="store_true", help="Run demo mode")
    parser.add_argument("--import-students", type=str, metavar="CSV", help="Import students from a CSV file")
    parser.add_argument("--import-courses", type=str, metavar="CSV", help="Import courses from a CSV file")
    parser.add_argument("--export", action="store_true", help="Export all data after other actions")
    parser.add_argument("--backup", action="store_true", help="Create a backup of the data directory")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config, data_dir=args.data_dir, log_level=args.log_level)
    except CCRMException as exc:
        print(f"Configuration error: {exc.message}", file=sys.stderr)
        return 2

    setup_logging(config.log_dir, config.log_level, config.error_log_retention)

    try:
        app = CCRMApplication(config)
        one_shot = args.demo or args.import_students or args.import_courses or args.export or args.backup

        if args.import_courses:
            added, result = app.import_courses(Path(args.import_courses))
            print(f"Imported {added} courses ({result.failed} rows skipped)")
        if args.import_students:
            added, result = app.import_students(Path(args.import_students))
            print(f"Imported {added} students ({result.failed} rows skipped)")
        if args.demo:
            app.run_demo()
        if args.export:
            print(f"Exported data to {app.export_all()}")
        if args.backup:
            print(f"Backup created: {app.backup.create_backup()}")

        if not one_shot:
            MainMenu(app).run()
    except CCRMException as exc:
        logger.error("%s", exc.message)
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nShutting down...")
    return 0


if __name__ == "__main__":
    sys.exit(main())
