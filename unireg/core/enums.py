"""
Enumerations and constants for the UniReg registry.
"""

from enum import Enum
from typing import FrozenSet


class Faculty(Enum):
    """Academic division a student or course belongs to."""
    COMPUTER_SCIENCE = "computer_science"
    ECONOMICS = "economics"
    LAW = "law"
    ENGINEERING = "engineering"


class StudentStatus(Enum):
    """Status of a student."""
    ACTIVE = "active"
    ACADEMIC_LEAVE = "academic_leave"
    GRADUATED = "graduated"
    EXPELLED = "expelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


class CourseType(Enum):
    """Types of courses."""
    MANDATORY = "mandatory"
    OPTIONAL = "optional"
    SPECIAL = "special"


class Semester(Enum):
    """Semester a course is taught in."""
    FIRST = "first"
    SECOND = "second"


class Grade(Enum):
    """Ordinal grades. The value is the numeric mark."""
    EXCELLENT = 5
    GOOD = 4
    SATISFACTORY = 3
    UNSATISFACTORY = 2


# No transition is permitted out of these
TERMINAL_STATUSES: FrozenSet[StudentStatus] = frozenset({
    StudentStatus.GRADUATED,
    StudentStatus.EXPELLED,
})
