import pytest

from ccrm.core.entities import Enrollment
from ccrm.core.enums import EnrollmentStatus, Grade
from ccrm.core.exceptions import ValidationError


def test_new_enrollment_is_ungraded():
    enrollment = Enrollment("STU001", " cs101-a ")
    assert enrollment.course_code == "CS101-A"
    assert enrollment.status is EnrollmentStatus.ENROLLED
    assert enrollment.marks == -1
    assert not enrollment.is_graded
    assert enrollment.grade is None
    assert enrollment.completion_date is None
    assert enrollment.calculate_grade_points(3) == 0.0
    assert enrollment.enrollment_id


def test_record_marks_sets_grade_and_status():
    enrollment = Enrollment("STU001", "CS101-A")
    assert enrollment.record_marks(85) is Grade.A
    assert enrollment.status is EnrollmentStatus.COMPLETED
    assert enrollment.is_completed
    assert enrollment.is_passed
    assert enrollment.completion_date is not None
    assert enrollment.calculate_grade_points(4) == 36.0


def test_failing_marks_and_re_recording():
    enrollment = Enrollment("STU001", "CS101-A")
    enrollment.record_marks(20)
    assert enrollment.status is EnrollmentStatus.FAILED
    assert enrollment.is_completed
    assert not enrollment.is_passed

    enrollment.record_marks(65)
    assert enrollment.status is EnrollmentStatus.COMPLETED
    assert enrollment.grade is Grade.C


@pytest.mark.parametrize("marks", [-0.01, 100.5, None])
def test_record_marks_rejects_out_of_range(marks):
    enrollment = Enrollment("STU001", "CS101-A")
    with pytest.raises(ValidationError):
        enrollment.record_marks(marks)
    assert enrollment.status is EnrollmentStatus.ENROLLED


def test_withdraw_is_terminal():
    enrollment = Enrollment("STU001", "CS101-A")
    enrollment.record_marks(75)
    enrollment.withdraw()
    assert enrollment.status is EnrollmentStatus.WITHDRAWN
    assert not enrollment.is_active
    assert not enrollment.is_completed
    with pytest.raises(ValidationError):
        enrollment.record_marks(90)
    assert enrollment.status is EnrollmentStatus.WITHDRAWN


def test_completed_factory_and_report():
    enrollment = Enrollment.completed("STU001", "CS101-A", 91, enrollment_id="ENR-1")
    assert enrollment.enrollment_id == "ENR-1"
    assert enrollment.grade is Grade.S
    assert enrollment.duration_days == 0
    report = enrollment.generate_report()
    assert "Enrollment ID: ENR-1" in report
    assert "Status: COMPLETED" in report
    assert "Marks: 91.00" in report
    assert "Passed: Yes" in report
