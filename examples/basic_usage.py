#!/usr/bin/env python3
"""
Basic usage examples for the DynamoDB repository library.

This example walks through a small blog stored in one table:
1. Setting up configuration and a shared gateway
2. Declaring entity schemas with pydantic models
3. Wrapping a Repository per entity with its access patterns
4. Writing, reading and lazily querying items

It expects a table named "<prefix>_dev_blog" with pk/sk string keys and a
ByUser global secondary index on user_id/sk (e.g. on DynamoDB Local).
"""

import asyncio
from uuid import uuid4

from pydantic import BaseModel, Field, computed_field

from dynamodb_repository import (
    BeginsWith,
    Compare,
    DynamoDBConfig,
    NotFoundError,
    QueryOptions,
    Repository,
    create_gateway,
)


class Post(BaseModel):
    post_id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    content: str
    likes: int = 0

    @computed_field
    @property
    def pk(self) -> str:
        return self.post_id

    @computed_field
    @property
    def sk(self) -> str:
        return "post"


class Comment(BaseModel):
    post_id: str
    comment_id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    content: str
    likes: int = 0

    @computed_field
    @property
    def pk(self) -> str:
        return self.post_id

    @computed_field
    @property
    def sk(self) -> str:
        return f"comment#{self.comment_id}"


class Posts:
    def __init__(self, gateway, table_name):
        self.repository = Repository(gateway, table_name, Post)

    async def create(self, user_id: str, content: str) -> Post:
        return await self.repository.put({'user_id': user_id, 'content': content})

    async def get(self, post_id: str) -> Post:
        return await self.repository.get({'pk': post_id, 'sk': 'post'})

    def by_user(self, user_id: str):
        return self.repository.query({'user_id': user_id, 'sk': 'post'}, QueryOptions(index='ByUser'))


class Comments:
    def __init__(self, gateway, table_name):
        self.repository = Repository(gateway, table_name, Comment)

    async def create(self, post_id: str, user_id: str, content: str, likes: int = 0) -> Comment:
        return await self.repository.put({'post_id': post_id, 'user_id': user_id, 'content': content, 'likes': likes})

    def for_post(self, post_id: str, **options):
        return self.repository.query({'pk': post_id, 'sk': BeginsWith('comment#')}, options)


async def main():
    """Demonstrate basic usage of the repository layer."""

    # 1. Configure DynamoDB connection
    print("1. Setting up DynamoDB configuration...")
    config = DynamoDBConfig.for_local_development()

    # In deployed environments, read everything from the environment:
    # config = DynamoDBConfig.from_env()

    # 2. One gateway shared by every repository
    print("2. Creating gateway and repositories...")
    gateway = create_gateway(config)
    table_name = config.get_table_name("blog")
    posts = Posts(gateway, table_name)
    comments = Comments(gateway, table_name)

    # 3. Writes validate first; generated ids come back on the result
    print("3. Creating a post and some comments...")
    post = await posts.create("user1", "my cool post")
    print(f"Created post: {post.post_id}")

    await asyncio.gather(
        comments.create(post.post_id, "user2", "blah", likes=2),
        comments.create(post.post_id, "user3", "hello", likes=5),
        comments.create(post.post_id, "user1", ":)", likes=7),
    )

    # 4. Point reads
    print("4. Reading items back...")
    fetched = await posts.get(post.post_id)
    print(f"Retrieved post: {fetched.content}")

    try:
        await posts.get("no-such-post")
    except NotFoundError as e:
        print(f"Missing post: {e.message}")

    # 5. Lazy queries: pages are requested as the loop consumes them
    print("5. Querying comments page by page...")
    stream = comments.for_post(post.post_id, page_size=2)
    async for comment in stream:
        print(f"  {comment.user_id}: {comment.content} ({comment.likes} likes)")
    print(f"Pages fetched: {stream.pages_fetched}")

    popular = await comments.for_post(post.post_id, filter={'likes': Compare('>', 3)}).to_list()
    print(f"Popular comments: {len(popular)}")

    # 6. Secondary index access pattern
    print("6. Querying posts by user through the ByUser index...")
    user_posts = await posts.by_user("user1").to_list()
    print(f"Posts by user1: {len(user_posts)}")

    print("\nExample completed!")


if __name__ == "__main__":
    asyncio.run(main())
