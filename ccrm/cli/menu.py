"""
Interactive text menu for the CCRM platform.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Callable, Dict, Optional, Sequence, Tuple

from ..core.entities import Course, Student
from ..core.enums import Semester
from ..core.exceptions import CCRMException, CreditLimitExceededError, ValidationError
from ..core.values import Name, normalize_code
from ..persistence import format_file_size


logger = logging.getLogger(__name__)

Action = Tuple[str, Callable[[], None]]


class MainMenu:
    """Menu-driven front end over a CCRM application.

    ``input_func`` and ``output_func`` default to the console and can be
    replaced to script a session.
    """

    def __init__(self, app, input_func: Callable[[str], str] = input,
                 output_func: Callable[[str], None] = print):
        self._app = app
        self._registrar = app.registrar
        self._input = input_func
        self._output = output_func
        self._running = False

    # Prompt helpers

    def _say(self, text: str = "") -> None:
        self._output(text)

    def _ask(self, label: str, default: Optional[str] = None) -> str:
        suffix = f" [{default}]" if default else ""
        answer = self._input(f"{label}{suffix}: ").strip()
        return answer or (default or "")

    def _ask_int(self, label: str, default: Optional[int] = None) -> int:
        answer = self._ask(label, str(default) if default is not None else None)
        try:
            return int(answer)
        except ValueError:
            raise ValidationError(f"Please enter a whole number for {label.lower()}")

    def _ask_float(self, label: str) -> float:
        answer = self._ask(label)
        try:
            return float(answer)
        except ValueError:
            raise ValidationError(f"Please enter a number for {label.lower()}")

    def _ask_date(self, label: str) -> date:
        answer = self._ask(f"{label} (YYYY-MM-DD)")
        try:
            return date.fromisoformat(answer)
        except ValueError:
            raise ValidationError(f"Invalid date: {answer}")

    def _ask_semester(self, default: Semester) -> Semester:
        return Semester.parse(self._ask("Semester (SPRING/SUMMER/FALL/WINTER)", default.name))

    def _run_submenu(self, title: str, actions: Dict[str, Action]) -> None:
        while True:
            self._say()
            self._say(f"=== {title} ===")
            for key, (label, _) in actions.items():
                self._say(f"{key}. {label}")
            self._say("0. Back to Main Menu")
            choice = self._ask("Enter your choice")
            if choice == "0":
                return
            action = actions.get(choice)
            if action is None:
                self._say("Invalid choice. Please try again.")
                continue
            self._dispatch(action[1])

    def _dispatch(self, handler: Callable[[], None]) -> None:
        try:
            handler()
        except CreditLimitExceededError as exc:
            self._say(f"Error: {exc.message}")
            self._say(exc.error_report())
        except CCRMException as exc:
            logger.debug("Menu action failed: %s", exc.message)
            self._say(f"Error: {exc.message}")

    # Tables

    def _print_students(self, students: Sequence[Student]) -> None:
        if not students:
            self._say("No students found.")
            return
        self._say(f"{'ID':<10} {'Reg No':<12} {'Name':<25} {'Department':<20} {'Sem':>3} {'GPA':>5} Status")
        self._say("-" * 90)
        for s in students:
            status = "ACTIVE" if s.is_active else "INACTIVE"
            self._say(f"{s.id:<10} {s.registration_number:<12} {s.name.full_name:<25} "
                      f"{s.department:<20} {s.current_semester:>3} {s.calculate_gpa():>5.2f} {status}")

    def _print_courses(self, courses: Sequence[Course]) -> None:
        if not courses:
            self._say("No courses found.")
            return
        self._say(f"{'Code':<12} {'Title':<30} {'Cr':>2} {'Semester':<8} {'Enrolled':>9} {'Instructor':<10} Status")
        self._say("-" * 90)
        for c in courses:
            status = "ACTIVE" if c.is_active else "INACTIVE"
            self._say(f"{c.code:<12} {c.title[:30]:<30} {c.credits:>2} {c.semester.display_name:<8} "
                      f"{c.current_enrollment:>4}/{c.max_capacity:<4} {c.instructor_id or '-':<10} {status}")

    # Students

    def add_student(self) -> None:
        student = Student(
            self._ask("Student ID"),
            self._ask("Registration number"),
            Name(self._ask("First name"), self._ask("Last name"), self._ask("Middle name (optional)")),
            self._ask("Email"),
            self._ask_date("Date of birth"),
            self._ask("Department"),
        )
        self._registrar.students.add_student(student)
        self._say(f"Student added: {student.name.full_name}")

    def list_students(self) -> None:
        self._print_students(self._registrar.students.get_all())

    def view_student(self) -> None:
        student = self._registrar.students.get_student(self._ask("Student ID"))
        self._say(student.person_summary())
        self._say(student.display_info())
        self._say("Audit trail:")
        for entry in student.audit_trail:
            self._say(f"  {entry}")

    def search_students(self) -> None:
        self._print_students(self._registrar.students.find_by_department(self._ask("Department")))

    def update_student(self) -> None:
        student = self._registrar.students.get_student(self._ask("Student ID"))
        email = self._ask("New email", student.email)
        department = self._ask("New department", student.department)
        semester = self._ask_int("Current semester", student.current_semester)
        student.update_details(email, department, semester)
        self._registrar.students.update_student(student)
        self._say("Student updated.")

    def deactivate_student(self) -> None:
        student_id = self._ask("Student ID")
        if self._registrar.deactivate_student(student_id):
            self._say(f"Student {student_id} deactivated.")
        else:
            self._say(f"Student not found: {student_id}")

    def activate_student(self) -> None:
        student_id = self._ask("Student ID")
        if self._registrar.activate_student(student_id):
            self._say(f"Student {student_id} activated.")
        else:
            self._say(f"Student not found: {student_id}")

    def bulk_update_status(self) -> None:
        department = self._ask("Department")
        active = self._ask("Activate or deactivate (a/d)", "d").lower().startswith("a")
        affected = self._registrar.students.bulk_update_status(department, active)
        self._say(f"{affected} students {'activated' if active else 'deactivated'}.")

    def handle_students(self) -> None:
        self._run_submenu("Student Management", {
            "1": ("Add Student", self.add_student),
            "2": ("List All Students", self.list_students),
            "3": ("View Student", self.view_student),
            "4": ("Search by Department", self.search_students),
            "5": ("Update Student", self.update_student),
            "6": ("Deactivate Student", self.deactivate_student),
            "7": ("Activate Student", self.activate_student),
            "8": ("Bulk Update by Department", self.bulk_update_status),
        })

    # Courses

    def add_course(self) -> None:
        config = self._app.config
        code = self._ask("Course code (e.g. CS101-A)")
        title = self._ask("Title")
        credits = self._ask_int("Credits", 3)
        department = self._ask("Department")
        semester = self._ask_semester(config.default_semester)
        description = self._ask("Description (optional)")
        max_capacity = self._ask_int("Max capacity", config.max_students_per_course)
        prerequisites = [p for p in self._ask("Prerequisites (comma separated, optional)").split(",") if p.strip()]
        course = self._registrar.courses.create_course(
            code, title, credits=credits, department=department, semester=semester,
            description=description, max_capacity=max_capacity, prerequisites=prerequisites,
        )
        self._say(f"Course added: {course.code} - {course.title}")

    def list_courses(self) -> None:
        self._print_courses(self._registrar.courses.get_all())

    def search_courses(self) -> None:
        self._print_courses(self._registrar.courses.search_by_title(self._ask("Title contains")))

    def update_course(self) -> None:
        course = self._registrar.courses.get_course(self._ask("Course code"))
        title = self._ask("Title", course.title)
        credits = self._ask_int("Credits", course.credits)
        department = self._ask("Department", course.department)
        description = self._ask("Description", course.description)
        max_capacity = self._ask_int("Max capacity", course.max_capacity)
        course.update_details(title, credits, department, description, max_capacity)
        self._registrar.courses.update_course(course)
        self._say("Course updated.")

    def assign_instructor(self) -> None:
        code = self._ask("Course code")
        instructor_id = self._ask("Instructor ID")
        if self._registrar.assign_instructor(code, instructor_id):
            self._say(f"Instructor {instructor_id} assigned to {normalize_code(code)}.")
        else:
            self._say(f"Course not found: {code}")

    def deactivate_course(self) -> None:
        code = self._ask("Course code")
        if self._registrar.courses.deactivate_course(code):
            self._say(f"Course {normalize_code(code)} deactivated.")
        else:
            self._say(f"Course not found: {code}")

    def filter_by_department(self) -> None:
        self._print_courses(self._registrar.courses.find_by_department(self._ask("Department")))

    def filter_by_semester(self) -> None:
        semester = self._ask_semester(self._app.config.default_semester)
        self._print_courses(self._registrar.courses.find_by_semester(semester))

    def show_catalog(self) -> None:
        self._say(self._registrar.courses.generate_catalog())

    def handle_courses(self) -> None:
        self._run_submenu("Course Management", {
            "1": ("Add Course", self.add_course),
            "2": ("List All Courses", self.list_courses),
            "3": ("Search by Title", self.search_courses),
            "4": ("Update Course", self.update_course),
            "5": ("Assign Instructor", self.assign_instructor),
            "6": ("Deactivate Course", self.deactivate_course),
            "7": ("Filter by Department", self.filter_by_department),
            "8": ("Filter by Semester", self.filter_by_semester),
            "9": ("Course Catalog", self.show_catalog),
        })

    # Enrollment

    def enroll_student(self) -> None:
        enrollment = self._registrar.enroll(self._ask("Student ID"), self._ask("Course code"))
        self._say(f"Enrolled {enrollment.student_id} in {enrollment.course_code} "
                  f"(enrollment {enrollment.enrollment_id}).")

    def withdraw_student(self) -> None:
        student_id = self._ask("Student ID")
        code = self._ask("Course code")
        self._registrar.withdraw(student_id, code)
        self._say(f"Student {student_id} withdrawn from {normalize_code(code)}.")

    def student_enrollments(self) -> None:
        enrollments = self._registrar.enrollments_for_student(self._ask("Student ID"))
        if not enrollments:
            self._say("No enrollments found.")
        for enrollment in enrollments:
            grade = enrollment.grade.letter if enrollment.grade else "-"
            self._say(f"{enrollment.course_code:<12} {enrollment.status.value:<10} "
                      f"{enrollment.enrollment_date.isoformat()} grade: {grade}")

    def course_roster(self) -> None:
        course = self._registrar.courses.get_course(self._ask("Course code"))
        self._say(f"{course.code}: {course.current_enrollment}/{course.max_capacity} "
                  f"({course.available_spots} spots available, {course.status_summary})")
        self._print_students(self._registrar.students.find_in_course(course.code))

    def handle_enrollment(self) -> None:
        self._run_submenu("Enrollment Management", {
            "1": ("Enroll Student in Course", self.enroll_student),
            "2": ("Withdraw Student from Course", self.withdraw_student),
            "3": ("List Student Enrollments", self.student_enrollments),
            "4": ("Course Roster", self.course_roster),
        })

    # Grades

    def record_marks(self) -> None:
        student_id = self._ask("Student ID")
        code = self._ask("Course code")
        grade = self._registrar.record_grade(student_id, code, self._ask_float("Marks (0-100)"))
        self._say(f"Grade recorded: {grade}")

    def show_transcript(self) -> None:
        self._say(self._registrar.students.generate_transcript(self._ask("Student ID")))

    def enrollment_reports(self) -> None:
        for enrollment in self._registrar.enrollments_for_student(self._ask("Student ID")):
            self._say(enrollment.generate_report())

    def handle_grades(self) -> None:
        self._run_submenu("Grade Management", {
            "1": ("Record Marks", self.record_marks),
            "2": ("View Transcript", self.show_transcript),
            "3": ("Enrollment Reports", self.enrollment_reports),
        })

    # Reports

    def student_summary(self) -> None:
        self._say(self._registrar.students.statistics_summary())

    def course_summary(self) -> None:
        self._say(self._registrar.courses.statistics_summary())

    def top_students(self) -> None:
        self._print_students(self._registrar.students.top_students_by_gpa(self._ask_int("How many", 5)))

    def student_progress(self) -> None:
        student = self._registrar.students.get_student(self._ask("Student ID"))
        required = self._ask_int("Courses required to graduate", 40)
        progress = student.progress()
        eligible = progress.is_eligible_for_graduation(required, self._app.config.minimum_gpa)
        self._say(f"Completion: {progress.completion_percentage(required):.1f}%")
        self._say(f"Courses needed: {progress.courses_needed(required)}")
        self._say(f"Eligible for graduation: {'Yes' if eligible else 'No'}")
        self._say(f"Credit-weighted GPA: {self._registrar.credit_weighted_gpa(student.id):.2f}")

    def course_demand(self) -> None:
        self._say("Popular courses:")
        self._print_courses(self._registrar.courses.find_popular())
        self._say("Underenrolled courses:")
        self._print_courses(self._registrar.courses.find_underenrolled())

    def instructor_report(self) -> None:
        instructors = self._registrar.instructors
        for instructor in instructors.get_all():
            self._say(instructor.generate_profile())
        self._say(f"Average teaching load: {instructors.average_teaching_load():.1f}")
        overloaded = instructors.find_overloaded()
        if overloaded:
            self._say("Overloaded: " + ", ".join(i.name.full_name for i in overloaded))

    def handle_reports(self) -> None:
        self._run_submenu("Reports & Analytics", {
            "1": ("Student Statistics", self.student_summary),
            "2": ("Course Statistics", self.course_summary),
            "3": ("Top Students by GPA", self.top_students),
            "4": ("Student Progress", self.student_progress),
            "5": ("Course Demand", self.course_demand),
            "6": ("Instructor Report", self.instructor_report),
        })

    # Import / export

    def import_students(self) -> None:
        default = str(Path(self._app.config.import_dir) / "students.csv")
        added, result = self._app.import_students(Path(self._ask("Students CSV path", default)))
        self._say(f"Imported {added} students ({result.failed} rows skipped).")
        for error in result.errors:
            self._say(f"  {error}")

    def import_courses(self) -> None:
        default = str(Path(self._app.config.import_dir) / "courses.csv")
        added, result = self._app.import_courses(Path(self._ask("Courses CSV path", default)))
        self._say(f"Imported {added} courses ({result.failed} rows skipped).")
        for error in result.errors:
            self._say(f"  {error}")

    def export_data(self) -> None:
        self._say(f"Data exported to {self._app.export_all()}")

    def handle_import_export(self) -> None:
        self._run_submenu("Import/Export Data", {
            "1": ("Import Students", self.import_students),
            "2": ("Import Courses", self.import_courses),
            "3": ("Export All Data", self.export_data),
        })

    # Backup

    def create_backup(self) -> None:
        self._say(f"Backup created: {self._app.backup.create_backup()}")

    def list_backups(self) -> None:
        backups = self._app.backup.list_backups()
        if not backups:
            self._say("No backups found.")
        for info in backups:
            self._say(f"{info.path.name:<40} {format_file_size(info.size):>10} "
                      f"{info.created_time:%Y-%m-%d %H:%M:%S} ({info.file_count} files)")

    def clean_backups(self) -> None:
        deleted = self._app.backup.clean_old_backups(self._ask_int("Keep backups from the last N days", 30))
        self._say(f"Deleted {deleted} old backups.")

    def health_check(self) -> None:
        self._say(f"Health check report created: {self._app.backup.create_health_check_report()}")

    def handle_backup(self) -> None:
        self._run_submenu("Backup & Utilities", {
            "1": ("Create Backup", self.create_backup),
            "2": ("List Backups", self.list_backups),
            "3": ("Clean Old Backups", self.clean_backups),
            "4": ("Health Check Report", self.health_check),
        })

    # Main loop

    def show_configuration(self) -> None:
        self._say(self._app.config.summary())

    def main_actions(self) -> Dict[str, Action]:
        return {
            "1": ("Student Management", self.handle_students),
            "2": ("Course Management", self.handle_courses),
            "3": ("Enrollment Management", self.handle_enrollment),
            "4": ("Grade Management", self.handle_grades),
            "5": ("Reports & Analytics", self.handle_reports),
            "6": ("Import/Export Data", self.handle_import_export),
            "7": ("Backup & Utilities", self.handle_backup),
            "8": ("System Configuration", self.show_configuration),
        }

    def run(self) -> None:
        """Show the main menu until the user exits or input ends."""
        config = self._app.config
        self._say(f"{config.app_name} v{config.app_version}")
        actions = self.main_actions()
        self._running = True
        try:
            while self._running:
                self._say()
                self._say("=== Main Menu ===")
                for key, (label, _) in actions.items():
                    self._say(f"{key}. {label}")
                self._say("0. Exit")
                choice = self._ask("Enter your choice")
                if choice == "0":
                    self._running = False
                elif choice in actions:
                    self._dispatch(actions[choice][1])
                else:
                    self._say("Invalid choice. Please try again.")
        except EOFError:
            self._running = False
        self._say("Thank you for using CCRM. Goodbye!")
