"""
Services module containing the registry and its registration policies.
"""

from .registry import Registry
from .registration_policies import (
    ActiveStatusPolicy, FacultyMatchPolicy, CapacityPolicy, default_policies
)

__all__ = [
    "Registry",
    "ActiveStatusPolicy",
    "FacultyMatchPolicy",
    "CapacityPolicy",
    "default_policies",
]
