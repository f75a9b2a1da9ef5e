"""
API module for the REST API implementation.
"""

from .rest_api import RegistryRestAPI

__all__ = [
    "RegistryRestAPI",
]
