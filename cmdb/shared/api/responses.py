"""
API Response Envelopes
======================

Every endpoint answers with the same JSON envelope:

- success:    {"success": true, "data": ...}
- deletion:   {"success": true, "message": "..."}
- failure:    {"success": false, "error": "..."}
- validation: {"error": "Validation failed", "details": [...]}
"""

from contextlib import contextmanager
from typing import Any, Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cmdb.core import RepositoryException, OperationFailedException
from cmdb.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base for DTOs exchanged as camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class DataEnvelope(BaseModel, Generic[T]):
    success: bool = True
    data: T


class MessageEnvelope(BaseModel):
    success: bool = True
    message: str


class ErrorEnvelope(BaseModel):
    success: bool = False
    error: str


class ValidationErrorEnvelope(BaseModel):
    error: str = "Validation failed"
    details: List[Any] = Field(default_factory=list)


ERROR_RESPONSES = {
    400: {"model": ValidationErrorEnvelope, "description": "Validation failed"},
    500: {"model": ErrorEnvelope, "description": "Store failure"},
}
NOT_FOUND_RESPONSE = {404: {"model": ErrorEnvelope, "description": "Resource not found"}}


@contextmanager
def translate_store_errors(message: str, **context: Any):
    """
    Convert a RepositoryException raised inside the block into an
    OperationFailedException carrying a client-safe ``message``.

    The original error is logged here and never reaches the client.

    Usage:
        with translate_store_errors("Failed to fetch tickets"):
            tickets = await repo.list(filters)
    """
    try:
        yield
    except RepositoryException as exc:
        logger.error(
            message,
            extra={"error": exc.message, "error_type": type(exc.__cause__).__name__, **context},
        )
        raise OperationFailedException(message) from exc
