"""
Aggregate statistics and text reports over students, courses and instructors.

Everything here is a pure function of its inputs and is recomputed on each
call. Ordered outputs use stable sorts, so ties keep insertion order.
"""

from typing import Dict, Iterable, List, Mapping

from ..core.entities import Course, Instructor, Student
from ..core.enums import CREDITS_PER_COURSE, CourseLoad


GPA_BUCKETS = (
    (9.0, "Outstanding (9.0+)"),
    (8.0, "Excellent (8.0-8.9)"),
    (7.0, "Very Good (7.0-7.9)"),
    (6.0, "Good (6.0-6.9)"),
    (5.0, "Satisfactory (5.0-5.9)"),
    (float("-inf"), "Below Average (<5.0)"),
)


def gpa_bucket(gpa: float) -> str:
    """Name of the distribution bucket a GPA falls into."""
    for lower_bound, label in GPA_BUCKETS:
        if gpa >= lower_bound:
            return label
    return GPA_BUCKETS[-1][1]


def _count_by(items: Iterable, key) -> Dict:
    counts: Dict = {}
    for item in items:
        value = key(item)
        counts[value] = counts.get(value, 0) + 1
    return counts


def _active(entities: Iterable) -> List:
    return [entity for entity in entities if entity.is_active]


# Students

def department_counts(students: Iterable[Student]) -> Dict[str, int]:
    """Active students per department, in order of first appearance."""
    return _count_by(_active(students), lambda student: student.department)


def gpa_distribution(students: Iterable[Student]) -> Dict[str, int]:
    """Active students per GPA bucket; every bucket is present, best first."""
    distribution = {label: 0 for _, label in GPA_BUCKETS}
    for student in _active(students):
        distribution[gpa_bucket(student.calculate_gpa())] += 1
    return distribution


def average_gpa(students: Iterable[Student]) -> float:
    """Mean GPA of active students, 0.0 when there are none."""
    gpas = [student.calculate_gpa() for student in _active(students)]
    if not gpas:
        return 0.0
    return sum(gpas) / len(gpas)


def top_students_by_gpa(students: Iterable[Student], limit: int) -> List[Student]:
    ranked = sorted(_active(students), key=lambda student: student.calculate_gpa(), reverse=True)
    return ranked[:max(0, limit)]


def credit_weighted_gpa(student: Student, courses: Mapping[str, Course]) -> float:
    """GPA weighted by each course's real credits.

    Codes missing from ``courses`` count with the default weight of 3.
    """
    grades = student.course_grades
    if not grades:
        return 0.0
    total_points = 0.0
    total_credits = 0
    for code, grade in grades.items():
        course = courses.get(code)
        credits = course.credits if course is not None else CREDITS_PER_COURSE
        total_points += grade.calculate_grade_points(credits)
        total_credits += credits
    return total_points / total_credits


def student_statistics_summary(students: Iterable[Student]) -> str:
    students = list(students)
    lines = [
        "Student Statistics Summary",
        "=" * 40,
        f"Total Students: {len(students)}",
        f"Active Students: {len(_active(students))}",
        f"Students in Good Standing: {sum(1 for s in students if s.is_in_good_standing())}",
        f"Average GPA: {average_gpa(students):.2f}",
        "",
        "Department-wise Count:",
    ]
    by_department = sorted(department_counts(students).items(), key=lambda item: item[1], reverse=True)
    lines.extend(f"  {department}: {count}" for department, count in by_department)
    lines.extend(["", "GPA Distribution:"])
    lines.extend(f"  {label}: {count}" for label, count in gpa_distribution(students).items() if count)
    return "\n".join(lines) + "\n"


# Courses

def course_counts_by_department(courses: Iterable[Course]) -> Dict[str, int]:
    return _count_by(_active(courses), lambda course: course.department)


def course_counts_by_instructor(courses: Iterable[Course]) -> Dict[str, int]:
    """Active courses per instructor id; unassigned courses are left out."""
    assigned = [course for course in _active(courses) if course.instructor_id is not None]
    return _count_by(assigned, lambda course: course.instructor_id)


def credit_distribution(courses: Iterable[Course]) -> Dict[int, int]:
    """Active courses per credit value, keyed in ascending credit order."""
    counts = _count_by(_active(courses), lambda course: course.credits)
    return {credits: counts[credits] for credits in sorted(counts)}


def average_enrollment_percentage(courses: Iterable[Course]) -> float:
    percentages = [course.enrollment_percentage for course in _active(courses)]
    if not percentages:
        return 0.0
    return sum(percentages) / len(percentages)


def courses_by_enrollment_status(courses: Iterable[Course]) -> Dict[str, List[Course]]:
    """Active courses grouped by status summary, most-filled status first."""
    grouped: Dict[str, List[Course]] = {}
    for course in _active(courses):
        grouped.setdefault(course.status_summary, []).append(course)
    order = [load.value for load in CourseLoad]
    return {status: grouped[status] for status in order if status in grouped}


def courses_sorted_by_enrollment(courses: Iterable[Course]) -> List[Course]:
    return sorted(_active(courses), key=lambda course: course.current_enrollment, reverse=True)


def courses_sorted_by_availability(courses: Iterable[Course]) -> List[Course]:
    return sorted(_active(courses), key=lambda course: course.available_spots)


def course_statistics_summary(courses: Iterable[Course]) -> str:
    courses = list(courses)
    lines = [
        "Course Statistics Summary",
        "=" * 40,
        f"Total Courses: {len(courses)}",
        f"Active Courses: {len(_active(courses))}",
        f"Courses with Instructors: {sum(1 for c in courses if c.instructor_id is not None)}",
        f"Average Enrollment: {average_enrollment_percentage(courses):.1f}%",
        "",
        "Department-wise Course Count:",
    ]
    by_department = sorted(course_counts_by_department(courses).items(),
                           key=lambda item: item[1], reverse=True)
    lines.extend(f"  {department}: {count}" for department, count in by_department)
    lines.extend(["", "Credit Distribution:"])
    lines.extend(f"  {credits} credits: {count} courses"
                 for credits, count in credit_distribution(courses).items())
    lines.extend(["", "Enrollment Status Distribution:"])
    lines.extend(f"  {status}: {len(group)} courses"
                 for status, group in courses_by_enrollment_status(courses).items())
    return "\n".join(lines) + "\n"


def course_catalog(courses: Iterable[Course]) -> str:
    """Active courses grouped by department, sorted by department then code."""
    by_department: Dict[str, List[Course]] = {}
    for course in _active(courses):
        by_department.setdefault(course.department, []).append(course)

    lines = ["COURSE CATALOG", "=" * 80]
    for department in sorted(by_department):
        lines.append("")
        lines.append(f"{department} DEPARTMENT")
        lines.append("-" * 50)
        for course in sorted(by_department[department], key=lambda c: c.code):
            lines.append(f"{course.code:<12} | {course.title:<30} | {course.credits} credits | "
                         f"{course.semester.display_name}")
            if course.has_prerequisites:
                lines.append(f"             Prerequisites: {', '.join(course.prerequisites)}")
            lines.append(f"             Enrollment: {course.current_enrollment}/{course.max_capacity} "
                         f"({course.available_spots} spots available)")
    return "\n".join(lines) + "\n"


# Instructors

def average_teaching_load(instructors: Iterable[Instructor]) -> float:
    loads = [instructor.teaching_load for instructor in instructors]
    if not loads:
        return 0.0
    return sum(loads) / len(loads)


def overloaded_instructors(instructors: Iterable[Instructor]) -> List[Instructor]:
    return [instructor for instructor in instructors if instructor.is_overloaded]

