"""
Domain-Specific Exceptions for the DynamoDB repository layer

Every exception raised by this package extends DynamoDBRepositoryError.
Storage failures coming out of boto3 (ClientError and friends) are NOT part of
this hierarchy: they propagate unchanged so callers can tell "not found" and
"invalid data" apart from everything else.

Organized by category:
1. Data Validation Errors
2. Resource Not Found Errors
3. Expression Errors
4. Infrastructure Errors
"""

from typing import Any, Dict, List, Mapping, Optional

from .base import DynamoDBRepositoryError


# =============================================================================
# Data Validation Errors
# =============================================================================

class SchemaValidationError(DynamoDBRepositoryError):
    """Raised when an item does not satisfy the repository schema.

    Used for:
    - put() candidates that are missing required fields or carry wrong types
    - items read back from DynamoDB that no longer match the current schema
    - custom transform/validator failures inside the schema
    """

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None, original_error: Optional[Exception] = None):
        """Initialize schema validation error.

        Args:
            message: Human-readable error message
            errors: Field-level diagnostics reported by the validator
            original_error: The original exception that caused this error
        """
        self.errors = errors or []
        context = {
            'validation_errors': self.errors
        }
        super().__init__(message, original_error, context)


# =============================================================================
# Resource Not Found Errors
# =============================================================================

class NotFoundError(DynamoDBRepositoryError):
    """Raised when a point lookup finds no item for the given key.

    This is an expected outcome of get(), not a transport failure.
    """

    def __init__(self, table_name: str, key: Mapping[str, Any], original_error: Optional[Exception] = None):
        """Initialize not found error.

        Args:
            table_name: Name of the DynamoDB table
            key: The key that was looked up
            original_error: The original exception that caused this error
        """
        self.table_name = table_name
        self.key = dict(key)
        message = f"Item not found in table '{table_name}' with key: {self.key}"
        context = {
            'table_name': table_name,
            'key': self.key
        }
        super().__init__(message, original_error, context)


# =============================================================================
# Expression Errors
# =============================================================================

class InvalidExpressionError(DynamoDBRepositoryError, ValueError):
    """Raised when an attribute expression cannot be compiled.

    Used for:
    - unknown comparison operators
    - values that are neither a scalar nor an attribute expression
    - parameter names colliding between key and filter conditions
    """

    def __init__(self, message: str, attribute: Optional[str] = None):
        self.attribute = attribute
        context = {}
        if attribute:
            context['attribute'] = attribute
        super().__init__(message, None, context)


# =============================================================================
# Infrastructure Errors
# =============================================================================

class ConnectionError(DynamoDBRepositoryError):
    """Raised when the boto3 session or DynamoDB resource cannot be created.

    Failures of individual requests are not wrapped in this error.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, original_error, context)
