from typing import Optional

from pydantic import BaseModel, ConfigDict

from blogcontent.schemas.fields import EntityId, Message
from blogcontent.schemas.patch import PatchModel


class CommentCreate(BaseModel):
    """
    Input schema for creating a comment.

    Attributes:
        blog_id: Blog being commented on (must exist)
        user_id: Author (must exist)
        message: Comment text (1-5000 chars)
    """
    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "blog_id": "9b1deb4d-3b7d-4bad-9bdd-2b0d7b3dcb6d",
                "user_id": "123e4567-e89b-12d3-a456-426614174000",
                "message": "nice post",
            }
        },
    )

    blog_id: EntityId
    user_id: EntityId
    message: Message


class CommentUpdate(PatchModel):
    """Partial update for a comment; only the message can change."""
    message: Optional[Message] = None


class CommentFilter(BaseModel):
    """Equality filter for listing comments."""
    model_config = ConfigDict(extra="forbid")

    blog_id: Optional[EntityId] = None
    user_id: Optional[EntityId] = None
