"""
Core Module
============

Shared core utilities and abstractions used across the application.

This module contains framework-agnostic code that defines the fundamental
building blocks of the system.
"""

from cmdb.core.exceptions import (
    ApplicationException,
    RepositoryException,
    OperationFailedException,
    ValidationException,
    ResourceNotFoundException,
    ConfigurationException,
)

__all__ = [
    "ApplicationException",
    "RepositoryException",
    "OperationFailedException",
    "ValidationException",
    "ResourceNotFoundException",
    "ConfigurationException",
]
