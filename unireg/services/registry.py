"""
Registry service owning students, courses, grade records and registrations.

Every mutating call validates all of its preconditions against the current
state before touching anything, so a rejected call leaves the registry
exactly as it was.
"""

import logging
from collections import Counter, defaultdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..core.entities import Student, Course, GradeRecord
from ..core.enums import Faculty, StudentStatus, CourseType, Semester, Grade
from ..core.exceptions import ResourceNotFoundError, InvalidStateError, ValidationError
from ..core.interfaces import RegistrationPolicy
from .registration_policies import default_policies

logger = logging.getLogger(__name__)


class Registry:
    """In-memory registry of university entities."""

    def __init__(self, policies: Optional[List[RegistrationPolicy]] = None):
        self._students: List[Student] = []
        self._courses: List[Course] = []
        self._grades: List[GradeRecord] = []

        # course_id -> [student_ids], student_id -> [course_ids]
        self._course_registrations: Dict[int, List[int]] = defaultdict(list)
        self._student_registrations: Dict[int, List[int]] = defaultdict(list)

        self._next_student_id = 0
        self._next_course_id = 0

        self._policies: List[RegistrationPolicy] = policies if policies is not None else default_policies()

    # -- Enrollment & catalog --------------------------------------------------

    def enroll_student(self, full_name: str, faculty: Faculty, year: int,
                       status: StudentStatus = StudentStatus.ACTIVE,
                       enrollment_date: Optional[datetime] = None,
                       group_number: str = "") -> Student:
        """Create a student with a freshly assigned id."""
        student = Student(
            entity_id=self._next_student_id,
            full_name=full_name,
            faculty=faculty,
            year=year,
            status=status,
            enrollment_date=enrollment_date or datetime.now(timezone.utc),
            group_number=group_number,
        )
        self._next_student_id += 1
        self._students.append(student)
        logger.info("Enrolled student %s", student.full_name, extra={'student_id': student.id})
        return student

    def add_course(self, name: str, course_type: CourseType, credits: int,
                   semester: Semester, faculty: Faculty, max_students: int) -> Course:
        """Add a course to the catalog with a freshly assigned id."""
        course = Course(
            entity_id=self._next_course_id,
            name=name,
            course_type=course_type,
            credits=credits,
            semester=semester,
            faculty=faculty,
            max_students=max_students,
        )
        self._next_course_id += 1
        self._courses.append(course)
        logger.info("Added course %s", course.name, extra={'course_id': course.id})
        return course

    # -- Registration ----------------------------------------------------------

    def register_for_course(self, student_id: int, course_id: int) -> None:
        """Register a student for a course.

        Repeating a registration that already exists is accepted and counts
        against the course capacity again.
        """
        student = self.get_student(student_id)
        course = self.get_course(course_id)

        registered_count = len(self._course_registrations.get(course_id, ()))
        for policy in self._policies:
            if not policy.can_register(student, course, registered_count):
                error = policy.violation(student, course)
                logger.warning(
                    "Registration rejected by %s: %s", policy.get_policy_name(), error.message,
                    extra={'student_id': student_id, 'course_id': course_id, 'error_code': error.error_code},
                )
                raise error

        self._course_registrations[course_id].append(student_id)
        self._student_registrations[student_id].append(course_id)
        logger.info("Registered student for course", extra={'student_id': student_id, 'course_id': course_id})

    def is_registered(self, student_id: int, course_id: int) -> bool:
        """Check if a student is registered for a course."""
        return course_id in self._student_registrations.get(student_id, ())

    # -- Grading ---------------------------------------------------------------

    def set_grade(self, student_id: int, course_id: int, grade: Grade) -> GradeRecord:
        """Append a grade record. Earlier grades for the pair are kept."""
        self.get_student(student_id)
        course = self.get_course(course_id)

        if not self.is_registered(student_id, course_id):
            logger.warning(
                "Grade rejected for unregistered student",
                extra={'student_id': student_id, 'course_id': course_id, 'error_code': 'invalid_state'},
            )
            raise InvalidStateError(
                "Student is not registered for this course.",
                details={'student_id': student_id, 'course_id': course_id},
            )

        record = GradeRecord(
            student_id=student_id,
            course_id=course_id,
            grade=grade,
            semester=course.semester,
        )
        self._grades.append(record)
        logger.info("Recorded grade %s", grade.name, extra={'student_id': student_id, 'course_id': course_id})
        return record

    # -- Status ----------------------------------------------------------------

    def update_student_status(self, student_id: int, new_status: StudentStatus) -> Student:
        """Change a student's status unless it is already terminal."""
        student = self.get_student(student_id)

        if student.status.is_terminal:
            logger.warning(
                "Status change rejected for %s student", student.status.value,
                extra={'student_id': student_id, 'error_code': 'invalid_state'},
            )
            raise InvalidStateError(
                "Cannot change status of a Graduated or Expelled student.",
                details={'student_id': student_id, 'status': student.status.value},
            )

        previous = student.status
        student.set_status(new_status)
        logger.info("Student status %s -> %s", previous.value, new_status.value,
                    extra={'student_id': student_id})
        return student

    # -- Lookups ---------------------------------------------------------------

    def get_student(self, student_id: int) -> Student:
        """Get a student by ID."""
        for student in self._students:
            if student.id == student_id:
                return student
        raise ResourceNotFoundError("Student not found.", details={'student_id': student_id})

    def get_course(self, course_id: int) -> Course:
        """Get a course by ID."""
        for course in self._courses:
            if course.id == course_id:
                return course
        raise ResourceNotFoundError("Course not found.", details={'course_id': course_id})

    def list_students(self) -> List[Student]:
        return list(self._students)

    def list_courses(self) -> List[Course]:
        return list(self._courses)

    def get_registered_students(self, course_id: int) -> List[int]:
        """Get IDs of students registered for a course."""
        return list(self._course_registrations.get(course_id, ()))

    def get_registered_courses(self, student_id: int) -> List[int]:
        """Get IDs of courses a student is registered for."""
        return list(self._student_registrations.get(student_id, ()))

    # -- Queries ---------------------------------------------------------------

    def get_students_by_faculty(self, faculty: Faculty) -> List[Student]:
        return [s for s in self._students if s.faculty is faculty]

    def get_student_grades(self, student_id: int) -> List[GradeRecord]:
        return [g for g in self._grades if g.student_id == student_id]

    def get_available_courses(self, faculty: Faculty, semester: Semester) -> List[Course]:
        return [c for c in self._courses if c.faculty is faculty and c.semester is semester]

    def calculate_average_grade(self, student_id: int) -> float:
        """Mean of the student's grade values, or 0 when there are none."""
        student_grades = self.get_student_grades(student_id)
        if not student_grades:
            return 0.0

        total = sum(g.grade.value for g in student_grades)
        return total / len(student_grades)

    def get_excellent_students_by_faculty(self, faculty: Faculty) -> List[Student]:
        return [
            student for student in self.get_students_by_faculty(faculty)
            if self.calculate_average_grade(student.id) >= Grade.EXCELLENT.value
        ]

    def get_statistics(self) -> Dict[str, Any]:
        """Get registry statistics."""
        by_status = Counter(s.status.value for s in self._students)
        return {
            'total_students': len(self._students),
            'total_courses': len(self._courses),
            'total_grades': len(self._grades),
            'total_registrations': sum(len(ids) for ids in self._course_registrations.values()),
            'students_by_status': {status.value: by_status.get(status.value, 0) for status in StudentStatus},
        }

    # -- State export / import -------------------------------------------------

    def export_state(self) -> Dict[str, Any]:
        """Export all collections and registration indexes as plain data."""
        return {
            'students': [s.to_dict() for s in self._students],
            'courses': [c.to_dict() for c in self._courses],
            'grades': [g.to_dict() for g in self._grades],
            'course_registrations': {k: list(v) for k, v in self._course_registrations.items() if v},
            'student_registrations': {k: list(v) for k, v in self._student_registrations.items() if v},
        }

    @classmethod
    def from_state(cls, state: Dict[str, Any],
                   policies: Optional[List[RegistrationPolicy]] = None) -> "Registry":
        """Rebuild a registry from data produced by :meth:`export_state`.

        Next ids continue from the highest restored id of each kind.
        """
        registry = cls(policies=policies)
        try:
            students = [Student.from_dict(d) for d in state.get('students', [])]
            courses = [Course.from_dict(d) for d in state.get('courses', [])]
            grades = [GradeRecord.from_dict(d) for d in state.get('grades', [])]
            course_registrations = {
                int(k): [int(i) for i in v] for k, v in state.get('course_registrations', {}).items()
            }
            student_registrations = {
                int(k): [int(i) for i in v] for k, v in state.get('student_registrations', {}).items()
            }
        except (AttributeError, TypeError, ValueError) as e:
            raise ValidationError(f"Malformed registry state: {e}")

        student_ids = [s.id for s in students]
        course_ids = [c.id for c in courses]
        if len(set(student_ids)) != len(student_ids):
            raise ValidationError("Duplicate student ids in registry state.")
        if len(set(course_ids)) != len(course_ids):
            raise ValidationError("Duplicate course ids in registry state.")

        by_course = Counter(
            (student_id, course_id)
            for course_id, ids in course_registrations.items() for student_id in ids
        )
        by_student = Counter(
            (student_id, course_id)
            for student_id, ids in student_registrations.items() for course_id in ids
        )
        if by_course != by_student:
            raise ValidationError("Registration indexes are not mirrored.")

        students_by_id = {s.id: s for s in students}
        courses_by_id = {c.id: c for c in courses}
        for student_id, course_id in by_course:
            student = students_by_id.get(student_id)
            course = courses_by_id.get(course_id)
            if student is None or course is None:
                raise ValidationError(
                    "Registration references an unknown student or course.",
                    details={'student_id': student_id, 'course_id': course_id},
                )
            if student.faculty is not course.faculty:
                raise ValidationError(
                    "Registration between different faculties.",
                    details={'student_id': student_id, 'course_id': course_id},
                )
        for course_id, ids in course_registrations.items():
            if ids and len(ids) > courses_by_id[course_id].max_students:
                raise ValidationError(
                    "Course registrations exceed its capacity.",
                    details={'course_id': course_id, 'registered': len(ids)},
                )
        for record in grades:
            if (record.student_id, record.course_id) not in by_course:
                raise ValidationError(
                    "Grade record without a matching registration.",
                    details={'student_id': record.student_id, 'course_id': record.course_id},
                )
            if record.semester is not courses_by_id[record.course_id].semester:
                raise ValidationError(
                    "Grade record semester differs from its course.",
                    details={'student_id': record.student_id, 'course_id': record.course_id},
                )

        registry._students = students
        registry._courses = courses
        registry._grades = grades
        registry._course_registrations.update(course_registrations)
        registry._student_registrations.update(student_registrations)
        registry._next_student_id = max(student_ids, default=-1) + 1
        registry._next_course_id = max(course_ids, default=-1) + 1

        logger.info("Restored registry with %d students and %d courses", len(students), len(courses))
        return registry
