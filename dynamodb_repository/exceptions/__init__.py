# Base exception class
from .base import DynamoDBRepositoryError

from .domain_exceptions import (
    ConnectionError,
    InvalidExpressionError,
    NotFoundError,
    SchemaValidationError,
)

__all__ = [
    # Base exception
    "DynamoDBRepositoryError",

    # Domain exceptions (alphabetically ordered)
    "ConnectionError",
    "InvalidExpressionError",
    "NotFoundError",
    "SchemaValidationError",
]
