from typing import Optional

from pydantic import BaseModel, ConfigDict

from blogcontent.schemas.fields import EntityId, Score, Title
from blogcontent.schemas.patch import PatchModel


class BlogCreate(BaseModel):
    """
    Input schema for creating a blog.

    ``blog_id`` and ``created_date`` are generated server-side.

    Attributes:
        title: Post title (1-300 chars)
        score: Finite score, defaults to 0.0
        user_id: Owner; must reference an existing user
    """
    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "title": "Single-table design in practice",
                "score": 4.5,
                "user_id": "123e4567-e89b-12d3-a456-426614174000",
            }
        },
    )

    title: Title
    score: Score = 0.0
    user_id: EntityId


class BlogUpdate(PatchModel):
    """
    Partial update for a blog.

    ``blog_id``, ``user_id`` and ``created_date`` are immutable.
    """
    title: Optional[Title] = None
    score: Optional[Score] = None


class BlogFilter(BaseModel):
    """Equality filter for listing blogs."""
    model_config = ConfigDict(extra="forbid")

    title: Optional[Title] = None
    user_id: Optional[EntityId] = None
