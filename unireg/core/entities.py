"""
Core entities for the UniReg registry.

Students and courses are identified entities whose integer ids are handed out
by the registry. Grade records have no identity of their own; they are
immutable facts linking a student, a course and a grade.
"""

from abc import ABC
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .enums import Faculty, StudentStatus, CourseType, Semester, Grade
from .exceptions import ValidationError


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


class AbstractEntity(ABC):
    """Base abstract entity with an integer ID, lifecycle timestamps and versioning."""

    def __init__(self, entity_id: int, created_at: Optional[datetime] = None,
                 updated_at: Optional[datetime] = None, version: int = 1):
        self._id = entity_id
        self._created_at = created_at or datetime.now(timezone.utc)
        self._updated_at = updated_at or self._created_at
        self._version = version

    @property
    def id(self) -> int:
        """Get the entity ID."""
        return self._id

    @property
    def created_at(self) -> datetime:
        """Get creation timestamp."""
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        """Get last update timestamp."""
        return self._updated_at

    @property
    def version(self) -> int:
        """Get current version."""
        return self._version

    def touch(self) -> None:
        """Record a modification."""
        self._updated_at = datetime.now(timezone.utc)
        self._version += 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert entity to dictionary."""
        return {
            'id': self._id,
            'created_at': self._created_at.isoformat(),
            'updated_at': self._updated_at.isoformat(),
            'version': self._version,
        }

    @staticmethod
    def _lifecycle_from_dict(data: Dict[str, Any]) -> Dict[str, Any]:
        lifecycle: Dict[str, Any] = {'entity_id': int(data['id'])}
        if data.get('created_at'):
            lifecycle['created_at'] = _parse_datetime(data['created_at'])
        if data.get('updated_at'):
            lifecycle['updated_at'] = _parse_datetime(data['updated_at'])
        if data.get('version') is not None:
            lifecycle['version'] = int(data['version'])
        return lifecycle

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(id={self._id})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self._id}, version={self._version})"


class Student(AbstractEntity):
    """Student entity. Only the status changes after creation."""

    def __init__(self, entity_id: int, full_name: str, faculty: Faculty, year: int,
                 status: StudentStatus, enrollment_date: datetime, group_number: str,
                 **kwargs):
        super().__init__(entity_id, **kwargs)
        self._full_name = full_name
        self._faculty = faculty
        self._year = year
        self._status = status
        self._enrollment_date = enrollment_date
        self._group_number = group_number

    @property
    def full_name(self) -> str:
        return self._full_name

    @property
    def faculty(self) -> Faculty:
        return self._faculty

    @property
    def year(self) -> int:
        return self._year

    @property
    def status(self) -> StudentStatus:
        return self._status

    @property
    def enrollment_date(self) -> datetime:
        return self._enrollment_date

    @property
    def group_number(self) -> str:
        return self._group_number

    @property
    def is_active(self) -> bool:
        return self._status is StudentStatus.ACTIVE

    def set_status(self, status: StudentStatus) -> None:
        """Overwrite the student's status."""
        self._status = status
        self.touch()

    def to_dict(self) -> Dict[str, Any]:
        """Convert student to dictionary."""
        base_dict = super().to_dict()
        base_dict.update({
            'full_name': self._full_name,
            'faculty': self._faculty.value,
            'year': self._year,
            'status': self._status.value,
            'enrollment_date': self._enrollment_date.isoformat(),
            'group_number': self._group_number,
        })
        return base_dict

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Student":
        """Restore a student from its dictionary form."""
        try:
            return cls(
                full_name=data['full_name'],
                faculty=Faculty(data['faculty']),
                year=int(data['year']),
                status=StudentStatus(data['status']),
                enrollment_date=_parse_datetime(data['enrollment_date']),
                group_number=data.get('group_number', ""),
                **cls._lifecycle_from_dict(data),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Invalid student data: {e}", details={'data': data})

    def __repr__(self) -> str:
        return f"Student(id={self._id}, faculty={self._faculty.value}, status={self._status.value})"


class Course(AbstractEntity):
    """Course entity. Immutable once added to the catalog."""

    def __init__(self, entity_id: int, name: str, course_type: CourseType, credits: int,
                 semester: Semester, faculty: Faculty, max_students: int, **kwargs):
        super().__init__(entity_id, **kwargs)
        self._name = name
        self._course_type = course_type
        self._credits = credits
        self._semester = semester
        self._faculty = faculty
        self._max_students = max_students

    @property
    def name(self) -> str:
        return self._name

    @property
    def course_type(self) -> CourseType:
        return self._course_type

    @property
    def credits(self) -> int:
        return self._credits

    @property
    def semester(self) -> Semester:
        return self._semester

    @property
    def faculty(self) -> Faculty:
        return self._faculty

    @property
    def max_students(self) -> int:
        return self._max_students

    def to_dict(self) -> Dict[str, Any]:
        """Convert course to dictionary."""
        base_dict = super().to_dict()
        base_dict.update({
            'name': self._name,
            'course_type': self._course_type.value,
            'credits': self._credits,
            'semester': self._semester.value,
            'faculty': self._faculty.value,
            'max_students': self._max_students,
        })
        return base_dict

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Course":
        """Restore a course from its dictionary form."""
        try:
            return cls(
                name=data['name'],
                course_type=CourseType(data['course_type']),
                credits=int(data['credits']),
                semester=Semester(data['semester']),
                faculty=Faculty(data['faculty']),
                max_students=int(data['max_students']),
                **cls._lifecycle_from_dict(data),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Invalid course data: {e}", details={'data': data})


class GradeRecord:
    """Immutable value object."""

    __slots__ = ('_student_id', '_course_id', '_grade', '_date', '_semester')

    def __init__(self, student_id: int, course_id: int, grade: Grade,
                 semester: Semester, date: Optional[datetime] = None):
        self._student_id = student_id
        self._course_id = course_id
        self._grade = grade
        self._semester = semester
        self._date = date or datetime.now(timezone.utc)

    @property
    def student_id(self) -> int:
        return self._student_id

    @property
    def course_id(self) -> int:
        return self._course_id

    @property
    def grade(self) -> Grade:
        return self._grade

    @property
    def date(self) -> datetime:
        return self._date

    @property
    def semester(self) -> Semester:
        return self._semester

    def to_dict(self) -> Dict[str, Any]:
        """Convert grade record to dictionary."""
        return {
            'student_id': self._student_id,
            'course_id': self._course_id,
            'grade': self._grade.value,
            'date': self._date.isoformat(),
            'semester': self._semester.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GradeRecord":
        """Restore a grade record from its dictionary form."""
        try:
            return cls(
                student_id=int(data['student_id']),
                course_id=int(data['course_id']),
                grade=Grade(int(data['grade'])),
                semester=Semester(data['semester']),
                date=_parse_datetime(data['date']),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Invalid grade record data: {e}", details={'data': data})

    def __repr__(self) -> str:
        return (f"GradeRecord(student_id={self._student_id}, course_id={self._course_id}, "
                f"grade={self._grade.name})")
