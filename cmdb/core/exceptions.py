"""
Core Exceptions
================

Custom exceptions for the application following clean architecture principles.

These exceptions define domain-specific errors that can be caught and handled
appropriately at the application boundaries.
"""

from typing import Optional, List


class ApplicationException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class RepositoryException(ApplicationException):
    """
    Raised by repositories when the underlying store fails.

    The original driver error is kept as ``__cause__`` and is never sent
    to clients.
    """


class OperationFailedException(ApplicationException):
    """
    A store failure translated by a controller.

    ``message`` is safe to show to API clients.
    """


class ValidationException(ApplicationException):
    """Exception for validation errors."""

    def __init__(self, message: str, errors: Optional[List[dict]] = None):
        self.errors = errors or []
        super().__init__(message, {"errors": self.errors})


class ResourceNotFoundException(ApplicationException):
    """Exception when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[str] = None,
        details: Optional[dict] = None
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f"{resource_type} not found", details)


class ConfigurationException(ApplicationException):
    """Exception for configuration errors."""
