"""Comment entity."""

from datetime import datetime
from typing import ClassVar

from blogcontent.models.base import Entity, EntityType


class Comment(Entity):
    """
    Stored comment.

    A comment is identified by the (blog_id, user_id) pair, so a user can
    leave at most one comment per blog.

    Attributes:
        blog_id: Blog commented on
        user_id: Author
        created_date: UTC creation time (server-generated)
        message: Comment text
    """

    entity_type: ClassVar[EntityType] = EntityType.COMMENT
    blog_id: str
    user_id: str
    created_date: datetime
    message: str
