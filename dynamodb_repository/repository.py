"""
Schema-bound repository over a single DynamoDB table.

A Repository binds three things: a storage gateway (shared, never opened or
closed here), a table name and a Schema. Everything written goes through the
schema first; everything read comes back through the schema before the caller
sees it. There is no cache and no write buffer.

Entity-specific access patterns are built by composition: a small wrapper
holds a Repository and hardcodes the key layout of its entity.

    class Comments:
        def __init__(self, gateway, table_name):
            self.repository = Repository(gateway, table_name, Comment)

        def for_post(self, post_id):
            return self.repository.query({'pk': post_id, 'sk': BeginsWith('comment#')})

Operations are coroutines. The gateway is synchronous (boto3), so each call
runs in a worker thread via asyncio.to_thread and the event loop is free while
DynamoDB responds. Concurrent calls are not serialized: concurrent puts on the
same key are last-writer-wins.
"""

import asyncio
import logging
from functools import partial
from typing import Any, Callable, Dict, Generic, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

from .core import StorageGateway
from .exceptions import InvalidExpressionError, NotFoundError
from .expressions import Condition, ExpressionInput, compile_filter_condition, compile_key_condition
from .pagination import ItemStream
from .schema import as_schema
from .utils import to_dynamo_item

T = TypeVar('T')

logger = logging.getLogger(__name__)


class ScanOptions(BaseModel):
    """Options for Repository.scan()."""

    index: Optional[str] = Field(default=None, description="Secondary index to scan instead of the table")
    filter: Optional[Dict[str, Any]] = Field(default=None, description="Attribute expressions applied as FilterExpression")
    page_size: Optional[int] = Field(default=None, ge=1, description="Limit per request (not a total)")
    consistent_read: bool = False

    model_config = ConfigDict(frozen=True)


class QueryOptions(ScanOptions):
    """Options for Repository.query()."""

    scan_forward: bool = Field(default=True, description="Ascending sort-key order when True")


def _coerce_options(options: Any, options_class: type) -> Any:
    if options is None:
        return options_class()
    if isinstance(options, options_class):
        return options
    return options_class.model_validate(options)


class Repository(Generic[T]):
    """Generic repository narrowing a table to one validated entity shape."""

    def __init__(self, gateway: StorageGateway, table_name: str, schema: Any):
        """Initialize repository.

        Args:
            gateway: Storage client (e.g. DynamoDBGateway); shared, not owned
            table_name: DynamoDB table name
            schema: Schema instance, or a pydantic model/type to wrap in PydanticSchema
        """
        self.gateway = gateway
        self.table_name = table_name
        self.schema = as_schema(schema)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(table_name={self.table_name!r}, schema={self.schema!r})"

    def _parse(self, item: Dict[str, Any]) -> T:
        return self.schema.validate(item)

    async def put(self, candidate: Any) -> T:
        """Validate ``candidate`` and write it, replacing any item with the same key.

        Args:
            candidate: Input data (mapping or schema instance)

        Returns:
            The validated value, including schema-generated defaults such as ids

        Raises:
            SchemaValidationError: If the candidate fails validation; nothing is written
        """
        value = self.schema.validate(candidate)
        item = to_dynamo_item(self.schema.to_item(value))
        await asyncio.to_thread(self.gateway.put_item, self.table_name, item)
        logger.info(f"Stored {self.schema.name} in {self.table_name}")
        return value

    async def get(self, key: Mapping[str, Any], consistent_read: bool = False) -> T:
        """Fetch and validate the item stored under ``key``.

        Args:
            key: Key attribute name -> value, e.g. ``{'pk': 'post1', 'sk': 'post'}``
            consistent_read: Use a strongly consistent read

        Raises:
            NotFoundError: If no item exists for the key
            SchemaValidationError: If the stored item does not match the schema
        """
        raw = await asyncio.to_thread(
            self.gateway.get_item,
            self.table_name,
            to_dynamo_item(key),
            consistent_read=consistent_read,
        )
        if raw is None:
            raise NotFoundError(self.table_name, key)
        return self._parse(raw)

    def query(
        self,
        key_attributes: Mapping[str, ExpressionInput],
        options: Optional[Union[QueryOptions, Mapping[str, Any]]] = None
    ) -> ItemStream[T]:
        """Lazily query the table (or an index) by key condition.

        Nothing is sent until the returned stream is iterated. Invalid
        expressions are rejected immediately.

        Args:
            key_attributes: Key attribute name -> scalar or attribute expression
            options: QueryOptions or a mapping of its fields

        Returns:
            Single-pass ItemStream of validated items in sort-key order

        Raises:
            InvalidExpressionError: If the key condition is empty or malformed
        """
        options = _coerce_options(options, QueryOptions)
        key_condition = compile_key_condition(key_attributes)
        if key_condition.is_empty:
            raise InvalidExpressionError("query() needs at least one key attribute")
        filter_condition = compile_filter_condition(options.filter)

        request: Dict[str, Any] = {
            'KeyConditionExpression': key_condition.expression,
            'ExpressionAttributeValues': to_dynamo_item(key_condition.merge(filter_condition)),
            'ScanIndexForward': options.scan_forward,
        }
        self._apply_options(request, options, filter_condition)

        logger.debug(f"Query on {self.table_name}: {key_condition.expression} (index={options.index})")
        return ItemStream(
            partial(self._fetch_page, self.gateway.query, request),
            self._parse,
            self.table_name,
            key=key_attributes,
        )

    def scan(self, options: Optional[Union[ScanOptions, Mapping[str, Any]]] = None) -> ItemStream[T]:
        """Lazily iterate every item of the table (or an index).

        Same lazy, validated contract as query(). Meant for small tables,
        fixtures and maintenance tasks.
        """
        options = _coerce_options(options, ScanOptions)
        filter_condition = compile_filter_condition(options.filter)

        request: Dict[str, Any] = {}
        if not filter_condition.is_empty:
            request['ExpressionAttributeValues'] = to_dynamo_item(filter_condition.values)
        self._apply_options(request, options, filter_condition)

        return ItemStream(
            partial(self._fetch_page, self.gateway.scan, request),
            self._parse,
            self.table_name,
        )

    def _apply_options(self, request: Dict[str, Any], options: ScanOptions, filter_condition: Condition) -> None:
        if options.index:
            request['IndexName'] = options.index
        if not filter_condition.is_empty:
            request['FilterExpression'] = filter_condition.expression

        page_size = options.page_size or getattr(self.gateway, 'default_page_size', None)
        if page_size:
            request['Limit'] = page_size
        if options.consistent_read:
            request['ConsistentRead'] = True

    def _fetch_page(
        self,
        operation: Callable[..., Dict[str, Any]],
        request: Dict[str, Any],
        exclusive_start_key: Optional[Dict[str, Any]]
    ) -> Dict[str, Any]:
        kwargs = dict(request)
        if exclusive_start_key is not None:
            kwargs['ExclusiveStartKey'] = exclusive_start_key
        return operation(self.table_name, **kwargs)
