"""
Core infrastructure components for DynamoDB operations.

- DynamoDBGateway: Thin wrapper over boto3 DynamoDB item operations
- StorageGateway: Protocol a storage client must satisfy for Repository
- Factory function for creating gateways
"""

from .gateway import DynamoDBGateway, StorageGateway, create_gateway

__all__ = [
    "DynamoDBGateway",
    "StorageGateway",
    "create_gateway",
]
