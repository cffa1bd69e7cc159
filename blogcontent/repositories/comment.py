"""
Comment repository for comment CRUD operations.

A comment is keyed by (blog_id, user_id) inside its blog's partition, so
creating a second comment for the same pair fails the "must not exist"
write condition with ConflictError.
"""

from typing import Any, List, Mapping, Union
import logging

from blogcontent.core.errors import ForeignKeyError
from blogcontent.core.logging_config import log_with_context
from blogcontent.models import Comment, EntityType, utc_now
from blogcontent.repositories import keys
from blogcontent.repositories.base import EntityRepository, validate_id, validate_input
from blogcontent.repositories.codec import comment_codec
from blogcontent.schemas.comment import CommentCreate, CommentFilter, CommentUpdate
from blogcontent.services.cascade import CascadeResult
from blogcontent.services.interfaces.entity_store import WriteCondition

logger = logging.getLogger(__name__)


class CommentRepository(EntityRepository[Comment]):
    """Repository for comment data access."""

    codec = comment_codec

    async def create(self, data: Union[CommentCreate, Mapping[str, Any]]) -> Comment:
        """
        Create a comment.

        Args:
            data: CommentCreate or mapping with blog_id, user_id, message

        Returns:
            Created Comment with generated created_date

        Raises:
            ValidationError: If input is invalid
            ForeignKeyError: If the blog or the user does not exist
            ConflictError: If this user already commented on this blog
        """
        payload = validate_input(CommentCreate, data, "comment")

        if await self.store.get(keys.blog_key(payload.blog_id)) is None:
            raise ForeignKeyError(
                f"Blog {payload.blog_id} referenced by comment does not exist",
                details={"field": "blog_id", "value": payload.blog_id},
            )
        if await self.store.get(keys.user_key(payload.user_id)) is None:
            raise ForeignKeyError(
                f"User {payload.user_id} referenced by comment does not exist",
                details={"field": "user_id", "value": payload.user_id},
            )

        comment = Comment(
            blog_id=payload.blog_id,
            user_id=payload.user_id,
            created_date=utc_now(),
            message=payload.message,
        )
        await self.store.put(self.codec.encode(comment), condition=WriteCondition.NOT_EXISTS)

        log_with_context(
            logger, "info", "Comment created",
            operation="create", entity_type=EntityType.COMMENT.value,
            entity_id=f"{comment.blog_id}/{comment.user_id}",
        )
        return comment

    async def get(self, blog_id: str, user_id: str) -> Comment:
        """
        Retrieve the comment a user left on a blog.

        Raises:
            ValidationError: If either id is not a UUID
            NotFoundError: If there is no such comment
        """
        blog_id = validate_id(blog_id, "blog_id")
        user_id = validate_id(user_id, "user_id")
        return await self._require(keys.comment_key(blog_id, user_id), f"{blog_id}/{user_id}")

    async def update(
        self,
        blog_id: str,
        user_id: str,
        patch: Union[CommentUpdate, Mapping[str, Any]]
    ) -> Comment:
        """
        Replace a comment's message. Last write wins.

        Raises:
            ValidationError: If the patch is invalid
            NotFoundError: If there is no such comment
        """
        blog_id = validate_id(blog_id, "blog_id")
        user_id = validate_id(user_id, "user_id")
        changes = validate_input(CommentUpdate, patch, "comment patch").changes()
        key = keys.comment_key(blog_id, user_id)
        current = await self._require(key, f"{blog_id}/{user_id}")

        updated = self._merge(current, changes)
        await self.store.put(self.codec.encode(updated), condition=WriteCondition.EXISTS)

        log_with_context(
            logger, "info", "Comment updated",
            operation="update", entity_type=EntityType.COMMENT.value,
            entity_id=f"{blog_id}/{user_id}",
        )
        return updated

    async def delete(self, blog_id: str, user_id: str) -> CascadeResult:
        """
        Delete one comment. Comments have no dependents.

        Raises:
            ValidationError: If either id is not a UUID
            NotFoundError: If there is no such comment
        """
        blog_id = validate_id(blog_id, "blog_id")
        user_id = validate_id(user_id, "user_id")
        key = keys.comment_key(blog_id, user_id)
        await self.store.delete(key)

        log_with_context(
            logger, "info", "Comment deleted",
            operation="delete", entity_type=EntityType.COMMENT.value,
            entity_id=f"{blog_id}/{user_id}",
        )
        return CascadeResult(root=key, deleted=[key])

    async def list(self, filter: Union[CommentFilter, Mapping[str, Any], None] = None) -> List[Comment]:
        """
        List comments, optionally by blog and/or author. Always one query:

        - blog_id given: the blog's partition (user_id becomes a filter)
        - only user_id given: the owner index
        - neither: the type index
        """
        criteria = validate_input(CommentFilter, filter, "comment filter")

        if criteria.blog_id is not None:
            condition = keys.blog_comments_key(criteria.blog_id)
            filters = {"user_id": criteria.user_id} if criteria.user_id is not None else {}
        elif criteria.user_id is not None:
            condition = keys.user_comments_index_key(criteria.user_id)
            filters = {}
        else:
            condition = keys.type_index_key(EntityType.COMMENT)
            filters = {}
        return await self._query(condition, filters)
