"""
Blog repository for blog CRUD operations.

Blogs reference their owner by user_id; the owner must exist when a blog
is written. Deleting a blog removes its comments first.
"""

from typing import Any, List, Mapping, Optional, Union
import logging

from blogcontent.core.errors import ForeignKeyError
from blogcontent.core.logging_config import log_with_context
from blogcontent.models import Blog, EntityType, new_id, utc_now
from blogcontent.repositories import keys
from blogcontent.repositories.base import EntityRepository, validate_id, validate_input
from blogcontent.repositories.codec import blog_codec
from blogcontent.schemas.blog import BlogCreate, BlogFilter, BlogUpdate
from blogcontent.services.cascade import CascadeCoordinator, CascadeResult
from blogcontent.services.interfaces.entity_store import IEntityStore, WriteCondition

logger = logging.getLogger(__name__)


class BlogRepository(EntityRepository[Blog]):
    """
    Repository for blog data access.

    Attributes:
        store: Entity store shared with the other repositories
        cascade: Coordinator used by delete()
    """

    codec = blog_codec

    def __init__(self, store: IEntityStore, cascade: Optional[CascadeCoordinator] = None):
        super().__init__(store)
        self.cascade = cascade or CascadeCoordinator(store)

    async def create(self, data: Union[BlogCreate, Mapping[str, Any]]) -> Blog:
        """
        Create a new blog.

        Args:
            data: BlogCreate or mapping with title, score, user_id

        Returns:
            Created Blog with generated blog_id and created_date

        Raises:
            ValidationError: If input is invalid
            ForeignKeyError: If user_id does not reference an existing user

        Example:
            >>> blog = await repo.create({
            ...     "title": "Hello",
            ...     "score": 4.5,
            ...     "user_id": "123e4567-e89b-12d3-a456-426614174000",
            ... })
        """
        payload = validate_input(BlogCreate, data, "blog")

        if await self.store.get(keys.user_key(payload.user_id)) is None:
            raise ForeignKeyError(
                f"User {payload.user_id} referenced by blog does not exist",
                details={"field": "user_id", "value": payload.user_id},
            )

        blog = Blog(
            blog_id=new_id(),
            title=payload.title,
            score=payload.score,
            created_date=utc_now(),
            user_id=payload.user_id,
        )
        await self.store.put(self.codec.encode(blog), condition=WriteCondition.NOT_EXISTS)

        log_with_context(
            logger, "info", "Blog created",
            operation="create", entity_type=EntityType.BLOG.value, entity_id=blog.blog_id,
            user_id=blog.user_id,
        )
        return blog

    async def get(self, blog_id: str) -> Blog:
        """
        Retrieve a blog by id.

        Raises:
            ValidationError: If blog_id is not a UUID
            NotFoundError: If the blog does not exist
        """
        blog_id = validate_id(blog_id, "blog_id")
        return await self._require(keys.blog_key(blog_id), blog_id)

    async def update(self, blog_id: str, patch: Union[BlogUpdate, Mapping[str, Any]]) -> Blog:
        """
        Apply a partial update (title, score) to a blog. Last write wins.

        Raises:
            ValidationError: If the patch or merged blog is invalid
            NotFoundError: If the blog does not exist
        """
        blog_id = validate_id(blog_id, "blog_id")
        changes = validate_input(BlogUpdate, patch, "blog patch").changes()
        current = await self._require(keys.blog_key(blog_id), blog_id)

        updated = self._merge(current, changes)
        await self.store.put(self.codec.encode(updated), condition=WriteCondition.EXISTS)

        log_with_context(
            logger, "info", "Blog updated",
            operation="update", entity_type=EntityType.BLOG.value, entity_id=blog_id,
            fields=sorted(changes),
        )
        return updated

    async def delete(self, blog_id: str) -> CascadeResult:
        """
        Delete a blog and its comments.

        Raises:
            ValidationError: If blog_id is not a UUID
            NotFoundError: If the blog does not exist
            CascadeError: If a comment delete fails part way
        """
        blog_id = validate_id(blog_id, "blog_id")
        return await self.cascade.delete_blog(blog_id)

    async def list(self, filter: Union[BlogFilter, Mapping[str, Any], None] = None) -> List[Blog]:
        """
        List blogs, optionally filtered by exact title and/or owner.

        With user_id the owner index is queried; otherwise the type index.
        Either way this is one query.
        """
        criteria = validate_input(BlogFilter, filter, "blog filter")
        filters = {"title": criteria.title} if criteria.title is not None else {}

        if criteria.user_id is not None:
            condition = keys.user_blogs_index_key(criteria.user_id)
        else:
            condition = keys.type_index_key(EntityType.BLOG)
        return await self._query(condition, filters)
