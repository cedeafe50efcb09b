"""
Thin DynamoDB Gateway

This module provides the storage client used by Repository: a lightweight
wrapper around the boto3 DynamoDB resource. It:

1. Creates (or accepts) the boto3 resource and caches Table handles
2. Exposes only the four operations the repository layer needs:
   put_item, get_item, query and scan
3. Passes request parameters straight through to boto3

The gateway is shared, not owned: repositories never open or close it, and a
resource injected by the caller is used as-is.

Errors from DynamoDB (botocore ClientError) are logged and re-raised
unchanged. Retries, backoff and timeouts are configured on botocore through
DynamoDBConfig and are not re-implemented here.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from ..config import DynamoDBConfig
from ..exceptions import ConnectionError

logger = logging.getLogger(__name__)


class StorageGateway(Protocol):
    """Operations Repository needs from a storage client."""

    default_page_size: Optional[int]

    def put_item(self, table_name: str, item: Mapping[str, Any]) -> None: ...

    def get_item(self, table_name: str, key: Mapping[str, Any], consistent_read: bool = False) -> Optional[Dict[str, Any]]: ...

    def query(self, table_name: str, **kwargs: Any) -> Dict[str, Any]: ...

    def scan(self, table_name: str, **kwargs: Any) -> Dict[str, Any]: ...


class DynamoDBGateway:
    """
    Thin gateway for DynamoDB item operations across tables.

    Key principles:
    - Expose native DynamoDB request parameters
    - No error translation: ClientError reaches the caller verbatim
    - Synchronous; Repository moves calls off the event loop
    """

    def __init__(self, config: Optional[DynamoDBConfig] = None, resource: Any = None):
        """Initialize gateway.

        Args:
            config: DynamoDB configuration (defaults to DynamoDBConfig.from_env())
            resource: Existing boto3 DynamoDB resource to use instead of creating one
        """
        self.config = config or DynamoDBConfig.from_env()
        self._dynamodb = resource
        self._tables: Dict[str, Any] = {}

        if self.config.enable_debug_logging:
            logging.getLogger('dynamodb_repository').setLevel(logging.DEBUG)

    @property
    def default_page_size(self) -> Optional[int]:
        return self.config.default_page_size

    @property
    def dynamodb(self):
        """Lazy initialization of DynamoDB resource."""
        if self._dynamodb is None:
            try:
                session = boto3.Session(
                    aws_access_key_id=self.config.aws_access_key_id,
                    aws_secret_access_key=self.config.aws_secret_access_key,
                    region_name=self.config.region_name
                )

                dynamodb_config = {
                    'region_name': self.config.region_name
                }

                if self.config.endpoint_url:
                    dynamodb_config['endpoint_url'] = self.config.endpoint_url

                boto_config = Config(
                    retries={'max_attempts': self.config.retries},
                    max_pool_connections=self.config.max_pool_connections,
                    read_timeout=self.config.timeout_seconds,
                    connect_timeout=self.config.timeout_seconds
                )
                dynamodb_config['config'] = boto_config

                self._dynamodb = session.resource('dynamodb', **dynamodb_config)
            except Exception as e:
                logger.error(f"Failed to create DynamoDB resource: {e}")
                raise ConnectionError(f"Failed to connect to DynamoDB: {e}", e) from e
        return self._dynamodb

    def table(self, table_name: str):
        """Get (and cache) the boto3 Table resource for ``table_name``."""
        if table_name not in self._tables:
            try:
                self._tables[table_name] = self.dynamodb.Table(table_name)
            except ConnectionError:
                raise
            except Exception as e:
                logger.error(f"Failed to access table '{table_name}': {e}")
                raise ConnectionError(f"Failed to access table '{table_name}': {e}", e) from e
        return self._tables[table_name]

    def put_item(self, table_name: str, item: Mapping[str, Any]) -> None:
        """
        Unconditionally put an item, replacing any item with the same key.

        Args:
            table_name: Target table
            item: Attribute mapping including the key attributes
        """
        try:
            self.table(table_name).put_item(Item=dict(item))
            logger.debug(f"Put item in {table_name}: {item}")
        except ClientError as e:
            logger.error(f"PutItem on {table_name} failed: {e}")
            raise

    def get_item(
        self,
        table_name: str,
        key: Mapping[str, Any],
        consistent_read: bool = False
    ) -> Optional[Dict[str, Any]]:
        """
        Point lookup by primary key.

        Returns:
            The raw item, or None when no item has that key
        """
        try:
            response = self.table(table_name).get_item(Key=dict(key), ConsistentRead=consistent_read)
        except ClientError as e:
            logger.error(f"GetItem on {table_name} failed for key {dict(key)}: {e}")
            raise
        item = response.get('Item')
        logger.debug(f"GetItem on {table_name} for key {dict(key)}: {'hit' if item is not None else 'miss'}")
        return item

    def query(self, table_name: str, **kwargs: Any) -> Dict[str, Any]:
        """
        Execute one DynamoDB Query request (a single page).

        Args:
            table_name: Target table
            **kwargs: boto3 query parameters (KeyConditionExpression,
                ExpressionAttributeValues, IndexName, ExclusiveStartKey, Limit, ...)

        Returns:
            Raw DynamoDB response

        Example:
            response = gateway.query(
                'posts',
                KeyConditionExpression='pk = :pk and begins_with(sk, :sk)',
                ExpressionAttributeValues={':pk': 'post2', ':sk': 'comment'},
                Limit=25
            )
        """
        try:
            return self.table(table_name).query(**kwargs)
        except ClientError as e:
            logger.error(f"Query on {table_name} failed: {e}")
            raise

    def scan(self, table_name: str, **kwargs: Any) -> Dict[str, Any]:
        """
        Execute one DynamoDB Scan request (a single page).

        Scans read the whole table. Keep them for small tables, fixtures and
        maintenance jobs; use query() with a key condition or an index otherwise.

        Args:
            table_name: Target table
            **kwargs: boto3 scan parameters

        Returns:
            Raw DynamoDB response
        """
        if 'ExclusiveStartKey' not in kwargs and 'FilterExpression' not in kwargs:
            logger.warning(f"Scan on {table_name} without FilterExpression reads the whole table")
        try:
            return self.table(table_name).scan(**kwargs)
        except ClientError as e:
            logger.error(f"Scan on {table_name} failed: {e}")
            raise


def create_gateway(config: Optional[DynamoDBConfig] = None) -> DynamoDBGateway:
    """
    Factory function to create a DynamoDBGateway instance.

    Args:
        config: DynamoDB configuration; read from the environment when omitted

    Returns:
        Configured DynamoDBGateway instance
    """
    return DynamoDBGateway(config or DynamoDBConfig.from_env())
