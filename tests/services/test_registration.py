"""Course registration tests: every rejection path, index symmetry and duplicates."""

import pytest

from unireg.core.enums import Faculty, StudentStatus
from unireg.core.exceptions import (
    ResourceNotFoundError, InvalidStateError, FacultyMismatchError, CapacityExceededError
)


def test_register_updates_both_indexes(registry, cs_student, cs_course):
    registry.register_for_course(cs_student.id, cs_course.id)
    assert registry.get_registered_students(cs_course.id) == [cs_student.id]
    assert registry.get_registered_courses(cs_student.id) == [cs_course.id]
    assert registry.is_registered(cs_student.id, cs_course.id)


def test_register_returns_none(registry, cs_student, cs_course):
    assert registry.register_for_course(cs_student.id, cs_course.id) is None


def test_unknown_student(registry, cs_course):
    with pytest.raises(ResourceNotFoundError, match="Student not found"):
        registry.register_for_course(99, cs_course.id)


def test_unknown_course(registry, cs_student):
    with pytest.raises(ResourceNotFoundError, match="Course not found"):
        registry.register_for_course(cs_student.id, 99)


def test_unknown_student_is_reported_before_unknown_course(registry):
    with pytest.raises(ResourceNotFoundError, match="Student not found"):
        registry.register_for_course(99, 99)


@pytest.mark.parametrize("status", [
    StudentStatus.ACADEMIC_LEAVE, StudentStatus.GRADUATED, StudentStatus.EXPELLED,
])
def test_inactive_student_rejected(registry, make_student, cs_course, status):
    student = make_student(status=status)
    with pytest.raises(InvalidStateError):
        registry.register_for_course(student.id, cs_course.id)
    assert registry.get_registered_students(cs_course.id) == []


def test_faculty_mismatch(registry, make_student, cs_course):
    student = make_student(faculty=Faculty.LAW)
    with pytest.raises(FacultyMismatchError) as exc_info:
        registry.register_for_course(student.id, cs_course.id)
    assert exc_info.value.details['student_faculty'] == "law"
    assert exc_info.value.details['course_faculty'] == "computer_science"


def test_status_checked_before_faculty(registry, make_student, cs_course):
    student = make_student(faculty=Faculty.LAW, status=StudentStatus.ACADEMIC_LEAVE)
    with pytest.raises(InvalidStateError):
        registry.register_for_course(student.id, cs_course.id)


def test_faculty_checked_before_capacity(registry, make_student, make_course):
    course = make_course(max_students=0)
    student = make_student(faculty=Faculty.ECONOMICS)
    with pytest.raises(FacultyMismatchError):
        registry.register_for_course(student.id, course.id)


def test_capacity_exceeded(registry, make_student, make_course):
    course = make_course(max_students=1)
    first, second = make_student(), make_student()
    registry.register_for_course(first.id, course.id)
    with pytest.raises(CapacityExceededError):
        registry.register_for_course(second.id, course.id)
    assert registry.get_registered_students(course.id) == [first.id]
    assert registry.get_registered_courses(second.id) == []


def test_zero_capacity_course_accepts_nobody(registry, make_student, make_course):
    course = make_course(max_students=0)
    with pytest.raises(CapacityExceededError):
        registry.register_for_course(make_student().id, course.id)


def test_failed_registration_creates_no_index_entries(registry, make_student, cs_course):
    student = make_student(faculty=Faculty.LAW)
    with pytest.raises(FacultyMismatchError):
        registry.register_for_course(student.id, cs_course.id)
    state = registry.export_state()
    assert state['course_registrations'] == {}
    assert state['student_registrations'] == {}


def test_duplicate_registration_is_accepted_and_counted_twice(registry, cs_student, cs_course):
    registry.register_for_course(cs_student.id, cs_course.id)
    registry.register_for_course(cs_student.id, cs_course.id)
    assert registry.get_registered_students(cs_course.id) == [cs_student.id, cs_student.id]
    assert registry.get_registered_courses(cs_student.id) == [cs_course.id, cs_course.id]
    # cs_course has two places, both taken by the same student now
    with pytest.raises(CapacityExceededError):
        registry.register_for_course(cs_student.id, cs_course.id)


def test_index_queries_do_not_create_entries(registry, cs_student, cs_course):
    assert registry.get_registered_students(cs_course.id) == []
    assert registry.get_registered_courses(cs_student.id) == []
    assert not registry.is_registered(cs_student.id, cs_course.id)
    assert registry.export_state()['course_registrations'] == {}


def test_rejection_is_logged(registry, make_student, make_course, caplog):
    course = make_course(max_students=0)
    student = make_student()
    with caplog.at_level("WARNING", logger="unireg"):
        with pytest.raises(CapacityExceededError):
            registry.register_for_course(student.id, course.id)
    record = caplog.records[-1]
    assert "CapacityPolicy" in record.getMessage()
    assert record.error_code == "capacity_exceeded"
    assert record.course_id == course.id
