"""
DynamoDB Repository

A thin, schema-validated data-access layer over DynamoDB: typed put/get and
lazily paginated query/scan on a shared table, with key conditions written as
plain mappings instead of hand-written expression strings.

    gateway = create_gateway(DynamoDBConfig.from_env())
    comments = Repository(gateway, "blog", Comment)

    comment = await comments.put({"post_id": "post2", "user_id": "user1", "content": ":)"})
    async for c in comments.query({"pk": "post2", "sk": BeginsWith("comment#")}):
        ...
"""

from .config import DynamoDBConfig
from .core import DynamoDBGateway, StorageGateway, create_gateway
from .exceptions import (
    ConnectionError,
    DynamoDBRepositoryError,
    InvalidExpressionError,
    NotFoundError,
    SchemaValidationError,
)
from .expressions import (
    AttributeExpression,
    BeginsWith,
    Between,
    Compare,
    Condition,
    Equals,
    compile_filter_condition,
    compile_key_condition,
    expression_attribute_values,
)
from .pagination import ItemStream
from .repository import QueryOptions, Repository, ScanOptions
from .schema import PydanticSchema, Schema

__version__ = "1.0.0"
__all__ = [
    # Configuration
    "DynamoDBConfig",

    # Storage gateway
    "DynamoDBGateway",
    "StorageGateway",
    "create_gateway",

    # Exceptions
    "ConnectionError",
    "DynamoDBRepositoryError",
    "InvalidExpressionError",
    "NotFoundError",
    "SchemaValidationError",

    # Expression compiler
    "AttributeExpression",
    "BeginsWith",
    "Between",
    "Compare",
    "Condition",
    "Equals",
    "compile_filter_condition",
    "compile_key_condition",
    "expression_attribute_values",

    # Repository
    "ItemStream",
    "QueryOptions",
    "Repository",
    "ScanOptions",

    # Schemas
    "PydanticSchema",
    "Schema",
]
