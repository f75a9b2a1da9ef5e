"""State export/import tests: encoding, counter reconstruction and malformed input."""

import json

import pytest

from unireg.core.enums import Faculty, Grade, StudentStatus, CourseType, Semester
from unireg.core.exceptions import ValidationError
from unireg.services import Registry


@pytest.fixture
def populated(registry, make_student, make_course):
    student = make_student()
    make_student(status=StudentStatus.GRADUATED)
    course = make_course()
    registry.register_for_course(student.id, course.id)
    registry.set_grade(student.id, course.id, Grade.GOOD)
    return registry


def test_export_uses_stable_encoding(populated):
    state = populated.export_state()
    assert state['students'][0]['faculty'] == "computer_science"
    assert state['students'][1]['status'] == "graduated"
    assert state['grades'][0]['grade'] == 4
    assert state['course_registrations'] == {0: [0]}
    assert state['student_registrations'] == {0: [0]}


def test_restore_after_json_round_trip(populated):
    state = json.loads(json.dumps(populated.export_state()))
    restored = Registry.from_state(state)

    assert [s.id for s in restored.list_students()] == [0, 1]
    assert restored.get_registered_students(0) == [0]
    assert restored.get_registered_courses(0) == [0]
    assert restored.calculate_average_grade(0) == 4
    assert restored.get_student(1).status is StudentStatus.GRADUATED


def test_restore_continues_ids_after_highest(populated):
    restored = Registry.from_state(populated.export_state())
    assert restored.enroll_student("Next", Faculty.LAW, 1).id == 2
    assert restored.add_course("Next", *_course_args()).id == 1


def test_restore_from_sparse_ids():
    registry = Registry()
    registry.enroll_student("A", Faculty.LAW, 1)
    state = registry.export_state()
    state['students'][0]['id'] = 7
    restored = Registry.from_state(state)
    assert restored.enroll_student("B", Faculty.LAW, 1).id == 8


def test_restore_empty_state():
    restored = Registry.from_state({})
    assert restored.list_students() == []
    assert restored.enroll_student("A", Faculty.LAW, 1).id == 0


def test_restore_rejects_duplicate_ids(populated):
    state = populated.export_state()
    state['students'][1]['id'] = 0
    with pytest.raises(ValidationError, match="Duplicate student"):
        Registry.from_state(state)


def test_restore_rejects_unmirrored_indexes(populated):
    state = populated.export_state()
    state['student_registrations'] = {}
    with pytest.raises(ValidationError, match="mirrored"):
        Registry.from_state(state)


def test_restore_rejects_unknown_registration_reference(populated):
    state = populated.export_state()
    state['course_registrations'] = {0: [0, 9]}
    state['student_registrations'] = {0: [0], 9: [0]}
    with pytest.raises(ValidationError, match="unknown"):
        Registry.from_state(state)


def test_restore_rejects_orphan_grade(populated):
    state = populated.export_state()
    state['course_registrations'] = {}
    state['student_registrations'] = {}
    with pytest.raises(ValidationError, match="Grade record"):
        Registry.from_state(state)


def test_restore_rejects_garbage():
    with pytest.raises(ValidationError):
        Registry.from_state({'students': [{'id': 'x'}]})
    with pytest.raises(ValidationError):
        Registry.from_state({'course_registrations': [1, 2]})


def _course_args():
    return CourseType.OPTIONAL, 2, Semester.FIRST, Faculty.LAW, 5


def test_restore_rejects_registrations_over_capacity(registry, make_student, make_course):
    first, second = make_student(), make_student()
    course = make_course(max_students=1)
    registry.register_for_course(first.id, course.id)
    state = registry.export_state()
    state['course_registrations'] = {course.id: [first.id, second.id]}
    state['student_registrations'] = {first.id: [course.id], second.id: [course.id]}
    with pytest.raises(ValidationError, match="capacity"):
        Registry.from_state(state)


def test_restore_rejects_registration_across_faculties(registry, make_student, make_course):
    lawyer = make_student(faculty=Faculty.LAW)
    course = make_course(faculty=Faculty.ECONOMICS)
    state = registry.export_state()
    state['course_registrations'] = {course.id: [lawyer.id]}
    state['student_registrations'] = {lawyer.id: [course.id]}
    with pytest.raises(ValidationError, match="different faculties"):
        Registry.from_state(state)


def test_restore_rejects_grade_semester_differing_from_course(populated):
    state = populated.export_state()
    state['grades'][0]['semester'] = "second"
    with pytest.raises(ValidationError, match="semester"):
        Registry.from_state(state)


def test_restore_ignores_empty_index_entries(populated):
    state = populated.export_state()
    state['course_registrations'][5] = []
    restored = Registry.from_state(state)
    assert restored.get_registered_students(5) == []
