from datetime import date

import pytest

from ccrm.config import load_config
from ccrm.core.entities import Course, Instructor, Student
from ccrm.core.enums import Semester
from ccrm.core.values import Name
from ccrm.services import Registrar


def make_student(student_id="STU001", reg_no="2023CS001", first="John", last="Doe",
                 department="Computer Science"):
    return Student(student_id, reg_no, Name(first, last), f"{first.lower()}@university.edu",
                   date(2002, 5, 15), department)


def make_course(code="CS101-A", title="Introduction to Programming", credits=3,
                department="Computer Science", max_capacity=30, semester=Semester.FALL):
    return Course.create(code, title, credits=credits, semester=semester,
                         department=department, max_capacity=max_capacity)


def make_instructor(instructor_id="INS001", department="Computer Science"):
    return Instructor(instructor_id, f"EMP{instructor_id[-3:]}", Name("Jane", "Smith"),
                      "jane.smith@university.edu", date(1980, 3, 20), department, "Professor")


@pytest.fixture()
def config(tmp_path):
    return load_config(data_dir=tmp_path / "data")


@pytest.fixture()
def registrar(config):
    return Registrar(config)


@pytest.fixture()
def seeded_registrar(registrar):
    """Registrar with two students, three courses and one instructor."""
    registrar.students.add_student(make_student())
    registrar.students.add_student(make_student("STU002", "2023MA001", "Alice", "Johnson", "Mathematics"))
    registrar.courses.add_course(make_course())
    registrar.courses.add_course(make_course("MATH101-A", "Calculus I", credits=4, department="Mathematics"))
    registrar.courses.add_course(make_course("CS201-A", "Data Structures", credits=4, max_capacity=1))
    registrar.instructors.add_instructor(make_instructor())
    return registrar
