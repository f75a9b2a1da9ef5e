"""
Custom exceptions for the UniReg registry.
"""

from typing import Optional, Any, Dict


class UniRegException(Exception):
    """Base exception for all UniReg-related errors."""

    default_error_code = "unireg_error"

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}


class ResourceNotFoundError(UniRegException):
    """Raised when a referenced student or course does not exist."""
    default_error_code = "not_found"


class InvalidStateError(UniRegException):
    """Raised when an operation violates a state precondition."""
    default_error_code = "invalid_state"


class FacultyMismatchError(UniRegException):
    """Raised when a student and a course belong to different faculties."""
    default_error_code = "faculty_mismatch"


class CapacityExceededError(UniRegException):
    """Raised when a course has no free places left."""
    default_error_code = "capacity_exceeded"


class ValidationError(UniRegException):
    """Raised when data validation fails."""
    default_error_code = "validation_error"


class ConfigurationError(UniRegException):
    """Raised when configuration is invalid."""
    default_error_code = "configuration_error"
