"""
Course registration policies.

The registry evaluates these in order; the first one that rejects a
registration determines the error raised.
"""

from typing import List

from ..core.entities import Student, Course
from ..core.exceptions import (
    UniRegException, InvalidStateError, FacultyMismatchError, CapacityExceededError
)
from ..core.interfaces import RegistrationPolicy


class ActiveStatusPolicy(RegistrationPolicy):
    """Only active students can register for courses."""

    def can_register(self, student: Student, course: Course, registered_count: int) -> bool:
        return student.is_active

    def violation(self, student: Student, course: Course) -> UniRegException:
        return InvalidStateError(
            "Only active students can register for courses.",
            details={'student_id': student.id, 'status': student.status.value},
        )

    def get_policy_name(self) -> str:
        return "ActiveStatusPolicy"


class FacultyMatchPolicy(RegistrationPolicy):
    """Students register only for courses of their own faculty."""

    def can_register(self, student: Student, course: Course, registered_count: int) -> bool:
        return student.faculty is course.faculty

    def violation(self, student: Student, course: Course) -> UniRegException:
        return FacultyMismatchError(
            "Student cannot register for a course from a different faculty.",
            details={
                'student_id': student.id,
                'course_id': course.id,
                'student_faculty': student.faculty.value,
                'course_faculty': course.faculty.value,
            },
        )

    def get_policy_name(self) -> str:
        return "FacultyMatchPolicy"


class CapacityPolicy(RegistrationPolicy):
    """Policy that enforces the course's maximum number of students."""

    def can_register(self, student: Student, course: Course, registered_count: int) -> bool:
        return registered_count < course.max_students

    def violation(self, student: Student, course: Course) -> UniRegException:
        return CapacityExceededError(
            "Course has reached maximum capacity.",
            details={'course_id': course.id, 'max_students': course.max_students},
        )

    def get_policy_name(self) -> str:
        return "CapacityPolicy"


def default_policies() -> List[RegistrationPolicy]:
    """Status, then faculty, then capacity."""
    return [ActiveStatusPolicy(), FacultyMatchPolicy(), CapacityPolicy()]
