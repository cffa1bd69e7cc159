"""
Domain entities for the BlogContent table.

This module exports the three entity kinds stored in the single table
and the shared base types.
"""

from blogcontent.models.base import Entity, EntityType, new_id, utc_now
from blogcontent.models.user import User
from blogcontent.models.blog import Blog
from blogcontent.models.comment import Comment

__all__ = [
    # Base types
    "Entity",
    "EntityType",
    "new_id",
    "utc_now",
    # Entities
    "User",
    "Blog",
    "Comment",
]
