"""Root conftest: shared registry fixtures."""

import pytest

from unireg.core.enums import Faculty, StudentStatus, CourseType, Semester
from unireg.services import Registry


@pytest.fixture
def registry():
    return Registry()


@pytest.fixture
def cs_student(registry):
    return registry.enroll_student("Ada Lovelace", Faculty.COMPUTER_SCIENCE, 1, group_number="CS-11")


@pytest.fixture
def cs_course(registry):
    return registry.add_course(
        "Algorithms", CourseType.MANDATORY, 5, Semester.FIRST, Faculty.COMPUTER_SCIENCE, 2,
    )


@pytest.fixture
def make_student(registry):
    """Enroll a student with sensible defaults."""

    def _make(faculty=Faculty.COMPUTER_SCIENCE, status=StudentStatus.ACTIVE, name="Student"):
        return registry.enroll_student(name, faculty, 1, status=status)

    return _make


@pytest.fixture
def make_course(registry):
    """Add a course with sensible defaults."""

    def _make(faculty=Faculty.COMPUTER_SCIENCE, semester=Semester.FIRST, max_students=10, name="Course"):
        return registry.add_course(name, CourseType.OPTIONAL, 3, semester, faculty, max_students)

    return _make
