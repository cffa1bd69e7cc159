"""Validated input schemas (create payloads, patches, list filters)"""

from blogcontent.schemas.user import UserCreate, UserUpdate, UserFilter
from blogcontent.schemas.blog import BlogCreate, BlogUpdate, BlogFilter
from blogcontent.schemas.comment import CommentCreate, CommentUpdate, CommentFilter

__all__ = [
    'UserCreate',
    'UserUpdate',
    'UserFilter',
    'BlogCreate',
    'BlogUpdate',
    'BlogFilter',
    'CommentCreate',
    'CommentUpdate',
    'CommentFilter',
]
