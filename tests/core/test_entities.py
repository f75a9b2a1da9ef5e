"""Entity tests: properties, dictionary encoding and restoring from dictionaries."""

from datetime import datetime, timezone

import pytest

from unireg.core.entities import Student, Course, GradeRecord
from unireg.core.enums import Faculty, StudentStatus, CourseType, Semester, Grade
from unireg.core.exceptions import ValidationError

ENROLLED = datetime(2024, 9, 1, tzinfo=timezone.utc)


def _student(**overrides):
    fields = dict(
        entity_id=3, full_name="Grace Hopper", faculty=Faculty.ENGINEERING, year=2,
        status=StudentStatus.ACTIVE, enrollment_date=ENROLLED, group_number="EN-21",
    )
    fields.update(overrides)
    return Student(**fields)


# -- Student ------------------------------------------------------------------

def test_student_to_dict_uses_string_encoding():
    data = _student().to_dict()
    assert data['id'] == 3
    assert data['faculty'] == "engineering"
    assert data['status'] == "active"
    assert data['enrollment_date'] == ENROLLED.isoformat()
    assert data['group_number'] == "EN-21"


def test_student_set_status_bumps_version():
    student = _student()
    student.set_status(StudentStatus.ACADEMIC_LEAVE)
    assert student.status is StudentStatus.ACADEMIC_LEAVE
    assert student.version == 2
    assert not student.is_active


def test_student_from_dict_restores_fields():
    original = _student(status=StudentStatus.EXPELLED)
    restored = Student.from_dict(original.to_dict())
    assert restored.id == original.id
    assert restored.full_name == original.full_name
    assert restored.status is StudentStatus.EXPELLED
    assert restored.enrollment_date == ENROLLED
    assert restored.created_at == original.created_at


def test_student_from_dict_rejects_unknown_faculty():
    data = _student().to_dict()
    data['faculty'] = "medicine"
    with pytest.raises(ValidationError):
        Student.from_dict(data)


def test_student_from_dict_rejects_missing_field():
    data = _student().to_dict()
    del data['full_name']
    with pytest.raises(ValidationError):
        Student.from_dict(data)


# -- Course -------------------------------------------------------------------

def test_course_properties_and_dict():
    course = Course(1, "Contracts", CourseType.MANDATORY, 4, Semester.SECOND, Faculty.LAW, 20)
    assert course.max_students == 20
    data = course.to_dict()
    assert data['course_type'] == "mandatory"
    assert data['semester'] == "second"
    assert data['faculty'] == "law"
    assert Course.from_dict(data).name == "Contracts"


# -- GradeRecord --------------------------------------------------------------

def test_grade_record_defaults_date_to_now():
    before = datetime.now(timezone.utc)
    record = GradeRecord(0, 1, Grade.GOOD, Semester.FIRST)
    assert before <= record.date <= datetime.now(timezone.utc)


def test_grade_record_encodes_grade_as_integer():
    record = GradeRecord(0, 1, Grade.SATISFACTORY, Semester.SECOND)
    data = record.to_dict()
    assert data['grade'] == 3
    restored = GradeRecord.from_dict(data)
    assert restored.grade is Grade.SATISFACTORY
    assert restored.semester is Semester.SECOND


def test_grade_record_is_immutable():
    record = GradeRecord(0, 1, Grade.GOOD, Semester.FIRST)
    with pytest.raises(AttributeError):
        record.grade = Grade.EXCELLENT
    with pytest.raises(AttributeError):
        record.extra = 1


def test_grade_record_rejects_unknown_grade():
    data = GradeRecord(0, 1, Grade.GOOD, Semester.FIRST).to_dict()
    data['grade'] = 7
    with pytest.raises(ValidationError):
        GradeRecord.from_dict(data)
