"""
Test helpers: the blog domain (posts, comments, users) sharing one table
and DynamoDB-style page builders for gateway doubles.
"""

from .blog import (
    BY_USER_INDEX,
    Comment,
    Comments,
    Entry,
    Post,
    Posts,
    User,
    Users,
)
from .pages import make_pages

__all__ = [
    'BY_USER_INDEX',
    'Comment',
    'Comments',
    'Entry',
    'Post',
    'Posts',
    'User',
    'Users',
    'make_pages',
]
