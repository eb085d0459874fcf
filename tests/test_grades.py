import pytest

from ccrm.core.enums import CourseLoad, Grade, Semester
from ccrm.core.exceptions import ValidationError


@pytest.mark.parametrize(
    "marks, expected",
    [
        (100, Grade.S),
        (90.0, Grade.S),
        (89.99, Grade.A),
        (80, Grade.A),
        (79.99, Grade.B),
        (70, Grade.B),
        (60, Grade.C),
        (50, Grade.D),
        (40, Grade.E),
        (39.99, Grade.F),
        (0, Grade.F),
        (-5, Grade.F),
    ],
)
def test_grade_from_marks_boundaries(marks, expected):
    assert Grade.from_marks(marks) is expected


def test_grade_points_and_passing():
    assert Grade.S.grade_point == 10.0
    assert Grade.E.grade_point == 5.0
    assert Grade.F.grade_point == 0.0
    assert Grade.E.is_passing
    assert not Grade.F.is_passing
    assert Grade.A.calculate_grade_points(4) == 36.0


def test_grade_from_letter_and_str():
    assert Grade.from_letter(" b ") is Grade.B
    assert str(Grade.S) == "S (10.0) - Outstanding"
    with pytest.raises(ValidationError):
        Grade.from_letter("Z")


def test_semester_lookup():
    assert Semester.from_code(3) is Semester.FALL
    assert Semester.parse("spring") is Semester.SPRING
    assert Semester.WINTER.duration == "December - January"
    with pytest.raises(ValidationError):
        Semester.from_code(9)
    with pytest.raises(ValidationError):
        Semester.parse("autumn")


@pytest.mark.parametrize(
    "percentage, expected",
    [
        (95, CourseLoad.FULL),
        (90, CourseLoad.FULL),
        (85, CourseLoad.HIGH_DEMAND),
        (50, CourseLoad.MODERATE),
        (30, CourseLoad.LOW),
        (29.9, CourseLoad.UNDERENROLLED),
    ],
)
def test_course_load_thresholds(percentage, expected):
    assert CourseLoad.from_percentage(percentage) is expected
