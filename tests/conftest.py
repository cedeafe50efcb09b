"""
Test configuration and fixtures for the DynamoDB repository layer.

Provides a moto-backed DynamoDB table laid out like the blog domain in
helpers/blog.py, plus a gateway and repositories wired to it.
"""

import sys
from pathlib import Path
from unittest.mock import Mock

# Make the helpers package importable regardless of how pytest is invoked
sys.path.insert(0, str(Path(__file__).parent))

import boto3
import pytest
from moto import mock_aws

from dynamodb_repository import DynamoDBConfig, DynamoDBGateway, Repository

from helpers import BY_USER_INDEX, Comments, Entry, Posts, Users

TABLE_NAME = "test_dev_blog"

SEED_ROWS = [
    ("post1", "post", "user1", "my cool post", 1),
    ("post1", "comment#1", "user2", "blah", 2),
    ("post1", "comment#2", "user3", "hello", 5),
    ("post2", "post", "user2", "i also post stuff", 10),
    ("post2", "comment#1", "user1", ":)", 7),
    ("post2", "comment#2", "user3", ":D", 3),
    ("post2", "comment#3", "user1", ":D", 4),
    ("post2", "comment#4", "user1", ":(", 1),
]


@pytest.fixture
def mock_dynamodb_config():
    """DynamoDB configuration for mocked testing."""
    return DynamoDBConfig(
        aws_access_key_id="test_key",
        aws_secret_access_key="test_secret",
        region_name="us-east-1",
        endpoint_url=None,  # Use default AWS endpoint for moto
        environment="test",
        table_prefix="test_"
    )


@pytest.fixture
def mock_dynamodb_resource():
    """Mock DynamoDB resource."""
    with mock_aws():
        yield boto3.resource('dynamodb', region_name='us-east-1')


@pytest.fixture
def blog_table(mock_dynamodb_resource):
    """Create the shared blog table with its ByUser index."""
    table = mock_dynamodb_resource.create_table(
        TableName=TABLE_NAME,
        KeySchema=[
            {'AttributeName': 'pk', 'KeyType': 'HASH'},
            {'AttributeName': 'sk', 'KeyType': 'RANGE'}
        ],
        AttributeDefinitions=[
            {'AttributeName': 'pk', 'AttributeType': 'S'},
            {'AttributeName': 'sk', 'AttributeType': 'S'},
            {'AttributeName': 'user_id', 'AttributeType': 'S'}
        ],
        GlobalSecondaryIndexes=[
            {
                'IndexName': BY_USER_INDEX,
                'KeySchema': [
                    {'AttributeName': 'user_id', 'KeyType': 'HASH'},
                    {'AttributeName': 'sk', 'KeyType': 'RANGE'}
                ],
                'Projection': {'ProjectionType': 'ALL'}
            }
        ],
        BillingMode='PAY_PER_REQUEST'
    )
    return table


@pytest.fixture
def seeded_table(blog_table):
    """Blog table pre-filled with two posts and six comments."""
    with blog_table.batch_writer() as batch:
        for pk, sk, user_id, content, likes in SEED_ROWS:
            batch.put_item(Item={
                'pk': pk,
                'sk': sk,
                'user_id': user_id,
                'content': content,
                'likes': likes
            })
    return blog_table


@pytest.fixture
def gateway(mock_dynamodb_config, mock_dynamodb_resource):
    """Gateway sharing the moto resource."""
    return DynamoDBGateway(mock_dynamodb_config, resource=mock_dynamodb_resource)


@pytest.fixture
def entries(gateway, seeded_table):
    """Repository over the raw table layout."""
    return Repository(gateway, TABLE_NAME, Entry)


@pytest.fixture
def posts(gateway, blog_table):
    return Posts(gateway, TABLE_NAME)


@pytest.fixture
def comments(gateway, blog_table):
    return Comments(gateway, TABLE_NAME)


@pytest.fixture
def users(gateway, blog_table):
    return Users(gateway, TABLE_NAME)


@pytest.fixture
def mock_gateway():
    """Storage gateway double with no default page size."""
    gateway = Mock()
    gateway.default_page_size = None
    gateway.get_item.return_value = None
    gateway.query.return_value = {'Items': []}
    gateway.scan.return_value = {'Items': []}
    return gateway
