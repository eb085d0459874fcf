"""
Core entities for the CCRM platform.

Students and instructors share an embedded :class:`Identity` record and
implement the :class:`Persona` contract; courses and enrollment records are
plain entities keyed by course code and enrollment id respectively.
"""

import uuid
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Set, Union

from .enums import CREDITS_PER_COURSE, CourseLoad, EnrollmentStatus, Grade, PersonType, Semester
from .exceptions import CapacityExceededError, ValidationError
from .interfaces import Auditable, Persona
from .values import CourseCode, Name, normalize_code


_AUDIT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
_REPORT_DATE_FORMAT = "%d-%m-%Y"


def _require_text(value: Optional[str], message: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(message)
    return str(value).strip()


def _validate_email(email: Optional[str]) -> str:
    if email is None or "@" not in email:
        raise ValidationError("Valid email required")
    return email.strip()


def _validate_birth_date(date_of_birth: Optional[date]) -> date:
    if date_of_birth is None or date_of_birth >= date.today():
        raise ValidationError("Valid birth date required")
    return date_of_birth


class Identity:
    """Identity and contact record shared by every kind of person."""

    def __init__(self, person_id: str, name: Name, email: str, date_of_birth: date):
        self._id = _require_text(person_id, "ID cannot be null or empty")
        if name is None:
            raise ValidationError("Name cannot be null")
        self._name = name
        self._email = _validate_email(email)
        self._date_of_birth = _validate_birth_date(date_of_birth)
        self._registration_date = date.today()
        self._active = True

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> Name:
        return self._name

    @name.setter
    def name(self, value: Name) -> None:
        if value is None:
            raise ValidationError("Name cannot be null")
        self._name = value

    @property
    def email(self) -> str:
        return self._email

    @email.setter
    def email(self, value: str) -> None:
        self._email = _validate_email(value)

    @property
    def date_of_birth(self) -> date:
        return self._date_of_birth

    @date_of_birth.setter
    def date_of_birth(self, value: date) -> None:
        self._date_of_birth = _validate_birth_date(value)

    @property
    def registration_date(self) -> date:
        return self._registration_date

    @property
    def active(self) -> bool:
        return self._active

    @active.setter
    def active(self, value: bool) -> None:
        self._active = bool(value)

    @property
    def age(self) -> int:
        """Age in whole years as of today."""
        today = date.today()
        had_birthday = (today.month, today.day) >= (self._date_of_birth.month, self._date_of_birth.day)
        return today.year - self._date_of_birth.year - (0 if had_birthday else 1)


class IdentityAccessors:
    """Delegating accessors for entities that embed an :class:`Identity`."""

    identity: Identity

    @property
    def id(self) -> str:
        return self.identity.id

    @property
    def name(self) -> Name:
        return self.identity.name

    @name.setter
    def name(self, value: Name) -> None:
        self.identity.name = value

    @property
    def email(self) -> str:
        return self.identity.email

    @email.setter
    def email(self, value: str) -> None:
        self.identity.email = value

    @property
    def date_of_birth(self) -> date:
        return self.identity.date_of_birth

    @property
    def registration_date(self) -> date:
        return self.identity.registration_date

    @property
    def age(self) -> int:
        return self.identity.age

    @property
    def is_active(self) -> bool:
        return self.identity.active

    def activate(self) -> None:
        """Activate the person."""
        self.identity.active = True

    def deactivate(self) -> None:
        """Deactivate the person."""
        self.identity.active = False

    def person_summary(self: "PersonEntity") -> str:
        status = "Active" if self.is_active else "Inactive"
        return f"[{self.person_type.value}] {self.name.full_name} ({self.email}) - {status}"

    def __eq__(self, other) -> bool:
        if self is other:
            return True
        if type(self) is not type(other):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.id))


class Student(IdentityAccessors, Persona, Auditable):
    """Student with an enrolled course set, recorded grades and an audit trail."""

    def __init__(self, student_id: str, registration_number: str, name: Name, email: str,
                 date_of_birth: date, department: str):
        self.identity = Identity(student_id, name, email, date_of_birth)
        self._registration_number = _require_text(registration_number, "Registration number is required")
        self._department = _require_text(department, "Department is required")
        self._current_semester = 1
        self._enrolled_courses: Dict[str, None] = {}  # insertion-ordered set
        self._course_grades: Dict[str, Grade] = {}
        self._enrollment_date = date.today()
        self._audit_trail: List[str] = []
        self._created_at = datetime.now()
        self._last_modified = self._created_at

        self.add_audit_entry(f"Student created: {name.full_name}")

    @property
    def registration_number(self) -> str:
        return self._registration_number

    @property
    def department(self) -> str:
        return self._department

    @department.setter
    def department(self, value: str) -> None:
        self._department = _require_text(value, "Department cannot be empty")

    @property
    def current_semester(self) -> int:
        return self._current_semester

    @current_semester.setter
    def current_semester(self, value: int) -> None:
        self._current_semester = self._validate_semester(value)

    @staticmethod
    def _validate_semester(value: int) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 8:
            raise ValidationError("Semester must be between 1 and 8")
        return value

    def update_details(self, email: str, department: str, current_semester: int) -> None:
        """Replace the editable profile fields; nothing changes unless all values are valid."""
        email = _validate_email(email)
        department = _require_text(department, "Department cannot be empty")
        current_semester = self._validate_semester(current_semester)
        self.identity.email = email
        self._department = department
        self._current_semester = current_semester

    @property
    def enrollment_date(self) -> date:
        return self._enrollment_date

    @property
    def enrolled_courses(self) -> List[str]:
        """Enrolled course codes in the order they were added."""
        return list(self._enrolled_courses)

    @property
    def course_grades(self) -> Dict[str, Grade]:
        return dict(self._course_grades)

    def is_enrolled_in(self, course_code: Union[str, CourseCode]) -> bool:
        return normalize_code(course_code) in self._enrolled_courses

    def enroll_in_course(self, course_code: Union[str, CourseCode]) -> bool:
        """Add a course to the enrolled set. Returns False if already present."""
        code = normalize_code(course_code)
        if code in self._enrolled_courses:
            return False
        self._enrolled_courses[code] = None
        self.add_audit_entry(f"Enrolled in course: {code}")
        return True

    def unenroll_from_course(self, course_code: Union[str, CourseCode]) -> bool:
        """Remove a course and any grade recorded for it."""
        code = normalize_code(course_code)
        self._course_grades.pop(code, None)
        if code not in self._enrolled_courses:
            return False
        del self._enrolled_courses[code]
        self.add_audit_entry(f"Unenrolled from course: {code}")
        return True

    def record_grade(self, course_code: Union[str, CourseCode], grade: Grade) -> None:
        """Record a grade for a course the student is enrolled in."""
        if grade is None:
            raise ValidationError("Grade cannot be null")
        code = normalize_code(course_code)
        if code not in self._enrolled_courses:
            raise ValidationError(f"Student is not enrolled in course: {code}",
                                  details={"student_id": self.id, "course_code": code})
        self._course_grades[code] = grade
        self.add_audit_entry(f"Grade recorded for {code}: {grade.letter}")

    def calculate_gpa(self) -> float:
        """GPA over graded courses, weighting each course equally."""
        if not self._course_grades:
            return 0.0
        total_points = sum(grade.calculate_grade_points(CREDITS_PER_COURSE)
                           for grade in self._course_grades.values())
        total_credits = len(self._course_grades) * CREDITS_PER_COURSE
        return total_points / total_credits

    @property
    def completed_courses(self) -> Set[str]:
        return set(self._course_grades)

    @property
    def pending_courses(self) -> Set[str]:
        return {code for code in self._enrolled_courses if code not in self._course_grades}

    def is_in_good_standing(self) -> bool:
        """True when every recorded grade is passing."""
        return all(grade.is_passing for grade in self._course_grades.values())

    def progress(self) -> "StudentProgress":
        return StudentProgress(self)

    # Persona

    @property
    def person_type(self) -> PersonType:
        return PersonType.STUDENT

    def display_info(self) -> str:
        return (f"Reg No: {self._registration_number} | Dept: {self._department} | "
                f"Sem: {self._current_semester} | GPA: {self.calculate_gpa():.2f} | "
                f"Courses: {len(self._enrolled_courses)}")

    # Auditable

    def add_audit_entry(self, entry: str) -> None:
        if entry is None or not entry.strip():
            return
        now = datetime.now()
        self._audit_trail.append(f"[{now.strftime(_AUDIT_TIMESTAMP_FORMAT)}] {entry}")
        self._last_modified = now

    @property
    def audit_trail(self) -> List[str]:
        return list(self._audit_trail)

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def last_modified(self) -> datetime:
        return self._last_modified

    def generate_transcript(self) -> str:
        """Render the student's transcript."""
        heavy, light = "=" * 60, "-" * 60
        lines = [
            heavy,
            "STUDENT TRANSCRIPT",
            heavy,
            f"Student ID: {self.id}",
            f"Registration No: {self._registration_number}",
            f"Name: {self.name.full_name}",
            f"Department: {self._department}",
            f"Current Semester: {self._current_semester}",
            f"Enrollment Date: {self._enrollment_date.strftime(_REPORT_DATE_FORMAT)}",
            light,
            "COURSE GRADES:",
            light,
        ]
        if not self._course_grades:
            lines.append("No grades recorded yet.")
        else:
            for code in sorted(self._course_grades):
                lines.append(f"{code:<15} | {self._course_grades[code]}")
        lines.extend([
            light,
            f"Current GPA: {self.calculate_gpa():.2f}",
            f"Academic Standing: {'Good Standing' if self.is_in_good_standing() else 'Academic Warning'}",
            heavy,
        ])
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        return (f"Student(regNo={self._registration_number!r}, name={self.name}, "
                f"dept={self._department!r}, sem={self._current_semester}, gpa={self.calculate_gpa():.2f})")


class StudentProgress:
    """Graduation progress derived from a student's completed courses."""

    def __init__(self, student: Student):
        self._student = student

    def completion_percentage(self, total_courses_required: int) -> float:
        if total_courses_required <= 0:
            return 0.0
        return len(self._student.completed_courses) / total_courses_required * 100.0

    def courses_needed(self, total_courses_required: int) -> int:
        return max(0, total_courses_required - len(self._student.completed_courses))

    def is_eligible_for_graduation(self, total_courses_required: int, minimum_gpa: float) -> bool:
        student = self._student
        return (len(student.completed_courses) >= total_courses_required
                and student.calculate_gpa() >= minimum_gpa
                and student.is_in_good_standing())


class Instructor(IdentityAccessors, Persona):
    """Instructor with assigned courses and qualifications."""

    def __init__(self, instructor_id: str, employee_id: str, name: Name, email: str,
                 date_of_birth: date, department: str, designation: str):
        self.identity = Identity(instructor_id, name, email, date_of_birth)
        self._employee_id = _require_text(employee_id, "Employee ID is required")
        self._department = _require_text(department, "Department is required")
        self._designation = _require_text(designation, "Designation is required")
        self._salary = 0.0
        self._assigned_courses: Dict[str, None] = {}
        self._qualifications: Dict[str, None] = {}
        self._joining_date = date.today()
        self._experience_years = 0

    @property
    def employee_id(self) -> str:
        return self._employee_id

    @property
    def department(self) -> str:
        return self._department

    @department.setter
    def department(self, value: str) -> None:
        self._department = _require_text(value, "Department cannot be empty")

    @property
    def designation(self) -> str:
        return self._designation

    @designation.setter
    def designation(self, value: str) -> None:
        self._designation = _require_text(value, "Designation cannot be empty")

    @property
    def salary(self) -> float:
        return self._salary

    @salary.setter
    def salary(self, value: float) -> None:
        if value < 0:
            raise ValidationError("Salary cannot be negative")
        self._salary = float(value)

    @property
    def joining_date(self) -> date:
        return self._joining_date

    @joining_date.setter
    def joining_date(self, value: date) -> None:
        if value is None or value > date.today():
            raise ValidationError("Joining date cannot be in the future")
        self._joining_date = value

    @property
    def experience_years(self) -> int:
        return self._experience_years

    @experience_years.setter
    def experience_years(self, value: int) -> None:
        if value < 0:
            raise ValidationError("Experience cannot be negative")
        self._experience_years = value

    @property
    def assigned_courses(self) -> List[str]:
        return list(self._assigned_courses)

    @property
    def qualifications(self) -> List[str]:
        return list(self._qualifications)

    def assign_course(self, course_code: Union[str, CourseCode]) -> bool:
        code = normalize_code(course_code)
        if code in self._assigned_courses:
            return False
        self._assigned_courses[code] = None
        return True

    def unassign_course(self, course_code: Union[str, CourseCode]) -> bool:
        return self._assigned_courses.pop(normalize_code(course_code), False) is None

    def is_teaching(self, course_code: Optional[Union[str, CourseCode]]) -> bool:
        if course_code is None:
            return False
        return normalize_code(course_code) in self._assigned_courses

    def add_qualification(self, qualification: str) -> bool:
        text = _require_text(qualification, "Qualification cannot be empty")
        if text in self._qualifications:
            return False
        self._qualifications[text] = None
        return True

    def remove_qualification(self, qualification: str) -> bool:
        return self._qualifications.pop((qualification or "").strip(), False) is None

    @property
    def teaching_load(self) -> int:
        return len(self._assigned_courses)

    @property
    def is_overloaded(self) -> bool:
        return self.teaching_load > 4

    @property
    def years_of_service(self) -> int:
        return date.today().year - self._joining_date.year

    @property
    def is_senior(self) -> bool:
        return self._experience_years > 5 or self.years_of_service > 5

    # Persona

    @property
    def person_type(self) -> PersonType:
        return PersonType.INSTRUCTOR

    def display_info(self) -> str:
        return (f"Emp ID: {self._employee_id} | Dept: {self._department} | {self._designation} | "
                f"Courses: {self.teaching_load} | Exp: {self._experience_years} years")

    def generate_profile(self) -> str:
        """Render the instructor's profile."""
        heavy, light = "=" * 60, "-" * 60
        lines = [
            heavy,
            "INSTRUCTOR PROFILE",
            heavy,
            f"Employee ID: {self._employee_id}",
            f"Name: {self.name.full_name}",
            f"Email: {self.email}",
            f"Department: {self._department}",
            f"Designation: {self._designation}",
            f"Experience: {self._experience_years} years",
            f"Service: {self.years_of_service} years",
            f"Salary: ${self._salary:.2f}",
            light,
            "QUALIFICATIONS:",
        ]
        lines.extend(f"- {q}" for q in self._qualifications)
        if not self._qualifications:
            lines.append("No qualifications recorded.")
        lines.extend([light, "ASSIGNED COURSES:"])
        lines.extend(f"- {c}" for c in self._assigned_courses)
        if not self._assigned_courses:
            lines.append("No courses assigned.")
        load = f"Teaching Load: {self.teaching_load} courses"
        if self.is_overloaded:
            load += " (OVERLOADED)"
        lines.extend([
            light,
            load,
            f"Status: {'Senior Instructor' if self.is_senior else 'Junior Instructor'}",
            heavy,
        ])
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        return (f"Instructor(empId={self._employee_id!r}, name={self.name}, dept={self._department!r}, "
                f"designation={self._designation!r}, courses={self.teaching_load})")


class Course:
    """Course offering keyed by its course code, with a capacity-bounded roster."""

    DEFAULT_MAX_CAPACITY = 30

    def __init__(self, course_code: CourseCode, title: str, credits: int, semester: Semester,
                 department: str, instructor_id: Optional[str] = None, description: str = "",
                 max_capacity: int = DEFAULT_MAX_CAPACITY, prerequisites: Iterable[str] = ()):
        if not isinstance(course_code, CourseCode):
            raise ValidationError("Course code is required")
        if not isinstance(semester, Semester):
            raise ValidationError("Semester is required")
        self._course_code = course_code
        self._title = _require_text(title, "Title is required")
        self._credits = self._validate_credits(credits)
        self._semester = semester
        self._department = _require_text(department, "Department is required")
        self._instructor_id = instructor_id.strip() if instructor_id and instructor_id.strip() else None
        self._description = description or ""
        if not isinstance(max_capacity, int) or max_capacity <= 0:
            raise ValidationError("Max capacity must be positive")
        self._max_capacity = max_capacity
        self._prerequisites: Dict[str, None] = {}
        for prerequisite in prerequisites or ():
            if prerequisite and str(prerequisite).strip():
                self._prerequisites[normalize_code(prerequisite)] = None
        self._enrolled_students: Dict[str, None] = {}
        self._active = True
        self._creation_date = date.today()

    @classmethod
    def create(cls, course_code: Union[str, CourseCode], title: str, *, credits: int,
               semester: Union[str, Semester], department: str, instructor_id: Optional[str] = None,
               description: str = "", max_capacity: int = DEFAULT_MAX_CAPACITY,
               prerequisites: Iterable[str] = ()) -> "Course":
        """Build a course from loosely-typed input, validating everything once."""
        if not isinstance(course_code, CourseCode):
            course_code = CourseCode.parse(course_code)
        if not isinstance(semester, Semester):
            semester = Semester.parse(semester)
        return cls(course_code, title, credits, semester, department, instructor_id=instructor_id,
                   description=description, max_capacity=max_capacity, prerequisites=prerequisites)

    @staticmethod
    def _validate_credits(credits: int) -> int:
        if isinstance(credits, bool) or not isinstance(credits, int) or not 1 <= credits <= 6:
            raise ValidationError("Credits must be between 1 and 6")
        return credits

    @property
    def course_code(self) -> CourseCode:
        return self._course_code

    @property
    def code(self) -> str:
        """Full textual course code."""
        return self._course_code.full_code

    @property
    def title(self) -> str:
        return self._title

    @title.setter
    def title(self, value: str) -> None:
        self._title = _require_text(value, "Title cannot be empty")

    @property
    def credits(self) -> int:
        return self._credits

    @credits.setter
    def credits(self, value: int) -> None:
        self._credits = self._validate_credits(value)

    @property
    def instructor_id(self) -> Optional[str]:
        return self._instructor_id

    @instructor_id.setter
    def instructor_id(self, value: Optional[str]) -> None:
        self._instructor_id = value

    @property
    def semester(self) -> Semester:
        return self._semester

    @semester.setter
    def semester(self, value: Semester) -> None:
        if not isinstance(value, Semester):
            raise ValidationError("Semester cannot be null")
        self._semester = value

    @property
    def department(self) -> str:
        return self._department

    @department.setter
    def department(self, value: str) -> None:
        self._department = _require_text(value, "Department cannot be empty")

    @property
    def description(self) -> str:
        return self._description

    @description.setter
    def description(self, value: str) -> None:
        self._description = value or ""

    @property
    def max_capacity(self) -> int:
        return self._max_capacity

    @max_capacity.setter
    def max_capacity(self, value: int) -> None:
        self._max_capacity = self._validate_capacity(value)

    def _validate_capacity(self, value: int) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValidationError("Max capacity must be positive")
        if value < self.current_enrollment:
            raise ValidationError(
                f"Max capacity {value} is below current enrollment {self.current_enrollment}")
        return value

    def update_details(self, title: str, credits: int, department: str, description: str,
                       max_capacity: int) -> None:
        """Replace the editable course fields; nothing changes unless all values are valid."""
        title = _require_text(title, "Title cannot be empty")
        credits = self._validate_credits(credits)
        department = _require_text(department, "Department cannot be empty")
        max_capacity = self._validate_capacity(max_capacity)
        self._title = title
        self._credits = credits
        self._department = department
        self._description = description or ""
        self._max_capacity = max_capacity

    @property
    def is_active(self) -> bool:
        return self._active

    @is_active.setter
    def is_active(self, value: bool) -> None:
        self._active = bool(value)

    @property
    def creation_date(self) -> date:
        return self._creation_date

    @property
    def prerequisites(self) -> List[str]:
        return list(self._prerequisites)

    @property
    def enrolled_students(self) -> List[str]:
        return list(self._enrolled_students)

    def add_prerequisite(self, course_code: Union[str, CourseCode]) -> bool:
        code = normalize_code(course_code)
        if code in self._prerequisites:
            return False
        self._prerequisites[code] = None
        return True

    def remove_prerequisite(self, course_code: Optional[Union[str, CourseCode]]) -> bool:
        if course_code is None:
            return False
        return self._prerequisites.pop(normalize_code(course_code), False) is None

    @property
    def has_prerequisites(self) -> bool:
        return bool(self._prerequisites)

    def enroll_student(self, student_id: str) -> bool:
        """Add a student to the roster. Returns False if already present."""
        student_id = _require_text(student_id, "Student ID required")
        if student_id in self._enrolled_students:
            return False
        if len(self._enrolled_students) >= self._max_capacity:
            raise CapacityExceededError(self.code, self._max_capacity)
        self._enrolled_students[student_id] = None
        return True

    def unenroll_student(self, student_id: Optional[str]) -> bool:
        if student_id is None:
            return False
        return self._enrolled_students.pop(student_id, False) is None

    def is_student_enrolled(self, student_id: Optional[str]) -> bool:
        return student_id is not None and student_id in self._enrolled_students

    @property
    def current_enrollment(self) -> int:
        return len(self._enrolled_students)

    @property
    def is_full(self) -> bool:
        return self.current_enrollment >= self._max_capacity

    @property
    def available_spots(self) -> int:
        return max(0, self._max_capacity - self.current_enrollment)

    def statistics(self) -> "CourseStatistics":
        return CourseStatistics(self)

    @property
    def enrollment_percentage(self) -> float:
        return self.statistics().enrollment_percentage

    @property
    def is_popular(self) -> bool:
        return self.statistics().is_popular

    @property
    def is_underenrolled(self) -> bool:
        return self.statistics().is_underenrolled

    @property
    def status_summary(self) -> str:
        return self.statistics().status_summary

    def __eq__(self, other) -> bool:
        if not isinstance(other, Course):
            return NotImplemented
        return self._course_code == other._course_code

    def __hash__(self) -> int:
        return hash(self._course_code)

    def __repr__(self) -> str:
        return (f"Course(code={self.code}, title={self._title!r}, credits={self._credits}, "
                f"instructor={self._instructor_id!r}, enrolled={self.current_enrollment}/{self._max_capacity})")


class CourseStatistics:
    """Enrollment-level metrics for anything exposing a roster size and capacity."""

    POPULAR_THRESHOLD = 80.0
    UNDERENROLLED_THRESHOLD = 30.0

    def __init__(self, course):
        self._course = course

    @property
    def enrollment_percentage(self) -> float:
        if self._course.max_capacity == 0:
            return 0.0
        return self._course.current_enrollment / self._course.max_capacity * 100.0

    @property
    def is_popular(self) -> bool:
        return self.enrollment_percentage > self.POPULAR_THRESHOLD

    @property
    def is_underenrolled(self) -> bool:
        return self.enrollment_percentage < self.UNDERENROLLED_THRESHOLD

    @property
    def load(self) -> CourseLoad:
        return CourseLoad.from_percentage(self.enrollment_percentage)

    @property
    def status_summary(self) -> str:
        return self.load.value


class Enrollment:
    """Detailed record of one student's enrollment in one course."""

    UNGRADED = -1.0

    def __init__(self, student_id: str, course_code: Union[str, CourseCode],
                 enrollment_id: Optional[str] = None):
        self._enrollment_id = enrollment_id or str(uuid.uuid4())
        self._student_id = _require_text(student_id, "Student ID is required")
        self._course_code = normalize_code(course_code)
        self._enrollment_date = date.today()
        self._completion_date: Optional[date] = None
        self._grade: Optional[Grade] = None
        self._marks = self.UNGRADED
        self._active = True
        self._status = EnrollmentStatus.ENROLLED

    @classmethod
    def completed(cls, student_id: str, course_code: Union[str, CourseCode], marks: float,
                  enrollment_id: Optional[str] = None) -> "Enrollment":
        """Create an enrollment that already carries its final marks."""
        enrollment = cls(student_id, course_code, enrollment_id=enrollment_id)
        enrollment.record_marks(marks)
        return enrollment

    @property
    def enrollment_id(self) -> str:
        return self._enrollment_id

    @property
    def student_id(self) -> str:
        return self._student_id

    @property
    def course_code(self) -> str:
        return self._course_code

    @property
    def enrollment_date(self) -> date:
        return self._enrollment_date

    @property
    def completion_date(self) -> Optional[date]:
        return self._completion_date

    @property
    def grade(self) -> Optional[Grade]:
        return self._grade

    @property
    def marks(self) -> float:
        return self._marks

    @property
    def is_graded(self) -> bool:
        return self._marks >= 0

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def status(self) -> EnrollmentStatus:
        return self._status

    def record_marks(self, marks: float) -> Grade:
        """Record marks in [0, 100] and derive the grade and status."""
        if self._status is EnrollmentStatus.WITHDRAWN:
            raise ValidationError(f"Cannot record marks on withdrawn enrollment {self._enrollment_id}",
                                  details={"enrollment_id": self._enrollment_id})
        if marks is None or not 0 <= marks <= 100:
            raise ValidationError("Marks must be between 0 and 100", details={"marks": marks})
        self._marks = float(marks)
        self._grade = Grade.from_marks(marks)
        self._status = EnrollmentStatus.COMPLETED if self._grade.is_passing else EnrollmentStatus.FAILED
        self._completion_date = date.today()
        return self._grade

    def withdraw(self) -> None:
        """Withdraw from the course, regardless of grading state."""
        self._active = False
        self._status = EnrollmentStatus.WITHDRAWN
        self._completion_date = date.today()

    @property
    def is_completed(self) -> bool:
        return self._status in (EnrollmentStatus.COMPLETED, EnrollmentStatus.FAILED)

    @property
    def is_passed(self) -> bool:
        return self._grade is not None and self._grade.is_passing

    @property
    def duration_days(self) -> int:
        end = self._completion_date or date.today()
        return (end - self._enrollment_date).days

    def calculate_grade_points(self, course_credits: int) -> float:
        if self._grade is None:
            return 0.0
        return self._grade.calculate_grade_points(course_credits)

    def generate_report(self) -> str:
        """Render a detailed report of this enrollment."""
        lines = [
            "Enrollment Report",
            "-" * 30,
            f"Enrollment ID: {self._enrollment_id}",
            f"Student ID: {self._student_id}",
            f"Course Code: {self._course_code}",
            f"Enrollment Date: {self._enrollment_date.strftime(_REPORT_DATE_FORMAT)}",
        ]
        if self._completion_date is not None:
            lines.append(f"Completion Date: {self._completion_date.strftime(_REPORT_DATE_FORMAT)}")
            lines.append(f"Duration: {self.duration_days} days")
        lines.append(f"Status: {self._status.value}")
        if self.is_graded:
            lines.append(f"Marks: {self._marks:.2f}")
        if self._grade is not None:
            lines.append(f"Grade: {self._grade}")
            lines.append(f"Passed: {'Yes' if self.is_passed else 'No'}")
        lines.append(f"Active: {'Yes' if self._active else 'No'}")
        return "\n".join(lines) + "\n"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Enrollment):
            return NotImplemented
        return self._enrollment_id == other._enrollment_id

    def __hash__(self) -> int:
        return hash(self._enrollment_id)

    def __repr__(self) -> str:
        grade = self._grade.letter if self._grade else "N/A"
        return (f"Enrollment(id={self._enrollment_id!r}, student={self._student_id!r}, "
                f"course={self._course_code!r}, date={self._enrollment_date.isoformat()}, "
                f"grade={grade}, status={self._status.value!r})")


PersonEntity = Union[Student, Instructor]
