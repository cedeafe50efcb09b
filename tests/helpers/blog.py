"""
Blog domain used across the tests: posts, comments and users sharing one table.

| Type    | pk         | sk                    |
| ------- | ---------- | --------------------- |
| Post    | {post_id}  | post                  |
| Comment | {post_id}  | comment#{comment_id}  |
| User    | {user_id}  | user                  |

| Access pattern         | Key condition                               | Index  |
| ---------------------- | ------------------------------------------- | ------ |
| Get post               | pk = {post_id} and sk = post                | -      |
| Get user               | pk = {user_id} and sk = user                | -      |
| List comments for post | pk = {post_id} and begins_with(sk, comment) | -      |
| List posts for user    | user_id = {user_id} and sk = post           | ByUser |
| List comments for user | user_id = {user_id} and begins_with(sk, ...) | ByUser |
"""

from typing import Any, Mapping
from uuid import uuid4

from pydantic import BaseModel, Field, computed_field

from dynamodb_repository import BeginsWith, ItemStream, QueryOptions, Repository, StorageGateway

BY_USER_INDEX = "ByUser"


def _new_id() -> str:
    return str(uuid4())


class Entry(BaseModel):
    """Raw table layout, keys included, as written by the seed data."""

    pk: str
    sk: str
    user_id: str
    content: str
    likes: int


class Post(BaseModel):
    post_id: str = Field(default_factory=_new_id)
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
    comment_id: str = Field(default_factory=_new_id)
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


class User(BaseModel):
    user_id: str = Field(default_factory=_new_id)
    name: str
    is_admin: bool = False

    @computed_field
    @property
    def pk(self) -> str:
        return self.user_id

    @computed_field
    @property
    def sk(self) -> str:
        return "user"


class Posts:
    """Post access patterns over a shared Repository."""

    def __init__(self, gateway: StorageGateway, table_name: str):
        self.repository: Repository[Post] = Repository(gateway, table_name, Post)

    async def put(self, data: Any) -> Post:
        return await self.repository.put(data)

    async def get_post(self, post_id: str) -> Post:
        return await self.repository.get({'pk': post_id, 'sk': 'post'})

    def posts_by_user(self, user_id: str) -> ItemStream[Post]:
        return self.repository.query({'user_id': user_id, 'sk': 'post'}, QueryOptions(index=BY_USER_INDEX))


class Comments:
    """Comment access patterns over a shared Repository."""

    def __init__(self, gateway: StorageGateway, table_name: str):
        self.repository: Repository[Comment] = Repository(gateway, table_name, Comment)

    async def put(self, data: Any) -> Comment:
        return await self.repository.put(data)

    async def get_comment(self, post_id: str, comment_id: str) -> Comment:
        return await self.repository.get({'pk': post_id, 'sk': f"comment#{comment_id}"})

    def comments_for_post(self, post_id: str, **options: Any) -> ItemStream[Comment]:
        return self.repository.query({'pk': post_id, 'sk': BeginsWith('comment#')}, options)

    def comments_by_user(self, user_id: str) -> ItemStream[Comment]:
        return self.repository.query(
            {'user_id': user_id, 'sk': BeginsWith('comment#')},
            QueryOptions(index=BY_USER_INDEX),
        )


class Users:
    """User access patterns over a shared Repository."""

    def __init__(self, gateway: StorageGateway, table_name: str):
        self.repository: Repository[User] = Repository(gateway, table_name, User)

    async def put(self, data: Mapping[str, Any]) -> User:
        return await self.repository.put(data)

    async def get_user(self, user_id: str) -> User:
        return await self.repository.get({'pk': user_id, 'sk': 'user'})
