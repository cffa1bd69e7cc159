"""Blog entity."""

from datetime import datetime
from typing import ClassVar

from blogcontent.models.base import Entity, EntityType


class Blog(Entity):
    """
    Stored blog post.

    Attributes:
        blog_id: UUID identity
        title: Post title
        score: Rating score
        created_date: UTC creation time (server-generated)
        user_id: Owning user (must exist at write time)
    """

    entity_type: ClassVar[EntityType] = EntityType.BLOG
    blog_id: str
    title: str
    score: float
    created_date: datetime
    user_id: str
