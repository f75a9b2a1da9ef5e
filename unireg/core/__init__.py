"""
Core module containing the fundamental object model and base classes.
"""

from .entities import *
from .interfaces import *
from .exceptions import *
from .enums import *

__all__ = [
    # Entities
    "AbstractEntity",
    "Student",
    "Course",
    "GradeRecord",

    # Interfaces
    "RegistrationPolicy",

    # Enums
    "Faculty",
    "StudentStatus",
    "CourseType",
    "Semester",
    "Grade",
    "TERMINAL_STATUSES",

    # Exceptions
    "UniRegException",
    "ResourceNotFoundError",
    "InvalidStateError",
    "FacultyMismatchError",
    "CapacityExceededError",
    "ValidationError",
    "ConfigurationError",
]
