import pytest

from ccrm.core.enums import Grade
from ccrm.core.exceptions import (
    CreditLimitExceededError,
    DuplicateEnrollmentError,
    DuplicateEntityError,
    ResourceNotFoundError,
    ValidationError,
)
from ccrm.config import load_config
from ccrm.services import StudentService

from conftest import make_student


@pytest.fixture()
def service(config):
    service = StudentService(config)
    service.add_student(make_student())
    service.add_student(make_student("STU002", "2023MA001", "Alice", "Johnson", "Mathematics"))
    service.add_student(make_student("STU003", "2023CS002", "Bob", "Wilson"))
    return service


def test_add_duplicate_student(service):
    with pytest.raises(DuplicateEntityError) as excinfo:
        service.add_student(make_student())
    assert excinfo.value.error_code == "ALREADY_EXISTS"


def test_get_missing_student(service):
    assert service.find_by_id("NOPE") is None
    with pytest.raises(ResourceNotFoundError) as excinfo:
        service.get_student("NOPE")
    assert excinfo.value.error_code == "NOT_FOUND"


def test_enroll_duplicate_rejected(service):
    service.enroll_student_in_course("STU001", "CS101-A", 3)
    with pytest.raises(DuplicateEnrollmentError) as excinfo:
        service.enroll_student_in_course("STU001", "cs101-a", 3)
    assert excinfo.value.error_code == "DUPLICATE_ENROLLMENT"
    assert service.get_student("STU001").enrolled_courses == ["CS101-A"]


def test_enroll_unknown_student(service):
    with pytest.raises(ResourceNotFoundError):
        service.enroll_student_in_course("NOPE", "CS101-A", 3)


def test_credit_limit_uses_flat_weight(tmp_path):
    service = StudentService(load_config(data_dir=tmp_path, max_courses_per_student=2))
    service.add_student(make_student())
    service.enroll_student_in_course("STU001", "CS101-A", 3)
    service.enroll_student_in_course("STU001", "CS102-A", 3)

    with pytest.raises(CreditLimitExceededError) as excinfo:
        service.enroll_student_in_course("STU001", "CS103-A", 1)
    error = excinfo.value
    assert error.error_code == "CREDIT_LIMIT_EXCEEDED"
    assert (error.current_credits, error.max_credits, error.attempted_credits) == (6, 6, 1)
    assert error.excess_credits == 1
    assert error.available_credits == 0
    assert "maximum credit limit" in error.suggested_action
    assert "Credit Limit Violation Report" in error.error_report()
    assert service.get_student("STU001").enrolled_courses == ["CS101-A", "CS102-A"]


def test_credit_limit_reports_available_credits(tmp_path):
    service = StudentService(load_config(data_dir=tmp_path, max_courses_per_student=2))
    service.add_student(make_student())
    service.enroll_student_in_course("STU001", "CS101-A", 3)
    with pytest.raises(CreditLimitExceededError) as excinfo:
        service.enroll_student_in_course("STU001", "CS102-A", 4)
    assert excinfo.value.available_credits == 3
    assert "up to 3 more credits" in excinfo.value.suggested_action


def test_record_grade_scenario(service):
    service.enroll_student_in_course("STU001", "CS101-A", 3)
    service.enroll_student_in_course("STU001", "CS102-A", 3)
    assert service.record_student_grade("STU001", "CS101-A", 85) is Grade.A
    assert service.record_student_grade("STU001", "CS102-A", 75) is Grade.B
    assert service.get_student("STU001").calculate_gpa() == pytest.approx(8.5)


def test_record_grade_requires_enrollment(service):
    with pytest.raises(ValidationError):
        service.record_student_grade("STU001", "CS101-A", 85)


def test_activation_toggles_with_audit(service):
    assert service.deactivate_student("STU001")
    student = service.get_student("STU001")
    assert not student.is_active
    assert student.audit_trail[-1].endswith("Student deactivated")
    assert service.activate_student("STU001")
    assert student.is_active
    assert student.audit_trail[-1].endswith("Student activated")
    assert not service.activate_student("NOPE")


def test_update_student(service):
    student = service.get_student("STU002")
    student.department = "Physics"
    service.update_student(student)
    assert student.audit_trail[-1].endswith("Student information updated")
    with pytest.raises(ResourceNotFoundError):
        service.update_student(make_student("STU999"))


def test_bulk_update_status(service):
    assert service.bulk_update_status("computer science", False) == 2
    assert [s.id for s in service.find_active()] == ["STU002"]
    assert service.get_student("STU003").audit_trail[-1].endswith("Bulk deactivated")


def test_queries(service):
    service.enroll_student_in_course("STU001", "CS101-A", 3)
    service.enroll_student_in_course("STU003", "CS101-A", 3)
    service.record_student_grade("STU001", "CS101-A", 95)
    service.record_student_grade("STU003", "CS101-A", 30)

    assert [s.id for s in service.find_by_department("Mathematics")] == ["STU002"]
    assert [s.id for s in service.find_by_registration_pattern("CS")] == ["STU001", "STU003"]
    assert [s.id for s in service.find_by_gpa_range(9.0, 10.0)] == ["STU001"]
    assert [s.id for s in service.find_in_good_standing()] == ["STU001", "STU002"]
    assert [s.id for s in service.find_in_course("cs101-a")] == ["STU001", "STU003"]
    assert [s.id for s in service.top_students_by_gpa(2)] == ["STU001", "STU002"]
    assert service.count(lambda s: s.is_active) == 3
    assert service.total_count == 3
    assert service.department_counts() == {"Computer Science": 2, "Mathematics": 1}
    assert "Student Statistics Summary" in service.statistics_summary()
