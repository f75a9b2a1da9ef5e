"""
Core interfaces and abstract base classes for the UniReg registry.
"""

from abc import ABC, abstractmethod

from .exceptions import UniRegException


class RegistrationPolicy(ABC):
    """Abstract base class for course registration policies."""

    @abstractmethod
    def can_register(self, student: 'Student', course: 'Course', registered_count: int) -> bool:
        """Check if a student can register for a course."""
        pass

    @abstractmethod
    def violation(self, student: 'Student', course: 'Course') -> UniRegException:
        """Build the error reported when this policy rejects a registration."""
        pass

    @abstractmethod
    def get_policy_name(self) -> str:
        """Get the name of this policy."""
        pass
