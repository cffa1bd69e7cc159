"""
Cascade Coordinator

Deletes a User or a Blog together with everything that depends on it.

A cascade runs in two phases:
1. Planning: enumerate dependent items through index queries and build
   an ordered, de-duplicated list of keys, children before parents.
2. Deleting: delete the keys in order.

Terminal outcomes:
- SUCCEEDED: every planned key is gone (already-absent keys count as
  gone; a concurrent delete got there first)
- FAILED: a step raised; CascadeError is raised carrying the keys that
  were deleted and the keys that were not. Nothing is rolled back.

Cascades are not transactional: a child created concurrently with a
cascade can survive as an orphan.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from blogcontent.core.errors import BlogContentError, CascadeError, NotFoundError
from blogcontent.core.logging_config import log_with_context
from blogcontent.repositories import keys
from blogcontent.repositories.codec import blog_codec, comment_codec
from blogcontent.services.interfaces.entity_store import IEntityStore

logger = logging.getLogger(__name__)


class CascadeState(str, Enum):
    PLANNING = "planning"
    DELETING = "deleting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class CascadeResult:
    """
    Outcome of a successful cascade.

    Attributes:
        root: Key of the entity the cascade was rooted at
        deleted: Keys removed by this cascade, in deletion order
        already_absent: Planned keys that were gone before their turn
        state: Always SUCCEEDED for a returned result
    """

    root: keys.Key
    deleted: List[keys.Key] = field(default_factory=list)
    already_absent: List[keys.Key] = field(default_factory=list)
    state: CascadeState = CascadeState.SUCCEEDED

    @property
    def deleted_count(self) -> int:
        return len(self.deleted)


class CascadeCoordinator:
    """
    Ordered dependent-entity deletion over an IEntityStore.

    Args:
        store: Shared entity store (the same instance the repositories use)
    """

    def __init__(self, store: IEntityStore):
        self.store = store

    async def delete_user(self, user_id: str) -> CascadeResult:
        """
        Delete a user, their blogs (with every comment on them) and their
        comments on other users' blogs.

        Order: for each owned blog, its comments then the blog; then the
        user's remaining comments; then the user.

        Args:
            user_id: Validated user id

        Returns:
            CascadeResult with the deleted keys

        Raises:
            NotFoundError: If the user does not exist
            CascadeError: If any step fails
        """
        root = keys.user_key(user_id)
        await self._ensure_exists(root, "User", user_id)
        plan: List[keys.Key] = []
        try:
            for blog_item in await self.store.query(keys.user_blogs_index_key(user_id)):
                blog = blog_codec.decode(blog_item)
                plan.extend(await self._comment_keys_of_blog(blog.blog_id))
                plan.append(keys.blog_key(blog.blog_id))

            for comment_item in await self.store.query(keys.user_comments_index_key(user_id)):
                plan.append(comment_codec.key(comment_codec.decode(comment_item)))
        except BlogContentError as e:
            self._log_failure(root, CascadeState.PLANNING, e)
            raise CascadeError(str(root), deleted=[], remaining=_dedupe(plan + [root]), cause=e) from e

        plan.append(root)
        return await self._run(root, _dedupe(plan))

    async def delete_blog(self, blog_id: str) -> CascadeResult:
        """
        Delete a blog and all of its comments (comments first).

        Args:
            blog_id: Validated blog id

        Returns:
            CascadeResult with the deleted keys

        Raises:
            NotFoundError: If the blog does not exist
            CascadeError: If any step fails
        """
        root = keys.blog_key(blog_id)
        await self._ensure_exists(root, "Blog", blog_id)
        try:
            plan = await self._comment_keys_of_blog(blog_id)
        except BlogContentError as e:
            self._log_failure(root, CascadeState.PLANNING, e)
            raise CascadeError(str(root), deleted=[], remaining=[root], cause=e) from e

        plan.append(root)
        return await self._run(root, _dedupe(plan))

    async def _ensure_exists(self, root: keys.Key, label: str, entity_id: str) -> None:
        if await self.store.get(root) is None:
            raise NotFoundError(
                f"{label} {entity_id} not found",
                details={"pk": root.pk, "sk": root.sk},
            )

    async def _comment_keys_of_blog(self, blog_id: str) -> List[keys.Key]:
        items = await self.store.query(keys.blog_comments_key(blog_id))
        return [comment_codec.key(comment_codec.decode(item)) for item in items]

    async def _run(self, root: keys.Key, plan: List[keys.Key]) -> CascadeResult:
        result = CascadeResult(root=root)
        log_with_context(
            logger, "info", f"Cascade delete of {root} planned: {len(plan)} items",
            operation="cascade_delete", entity_id=str(root),
            state=CascadeState.DELETING.value,
        )

        for position, key in enumerate(plan):
            try:
                await self.store.delete(key)
            except NotFoundError:
                result.already_absent.append(key)
                continue
            except BlogContentError as e:
                self._log_failure(root, CascadeState.DELETING, e)
                raise CascadeError(
                    str(root),
                    deleted=result.deleted,
                    remaining=plan[position:],
                    cause=e,
                ) from e
            result.deleted.append(key)

        log_with_context(
            logger, "info",
            f"Cascade delete of {root} finished: {result.deleted_count} deleted, "
            f"{len(result.already_absent)} already absent",
            operation="cascade_delete", entity_id=str(root),
            state=CascadeState.SUCCEEDED.value,
        )
        return result

    @staticmethod
    def _log_failure(root: keys.Key, state: CascadeState, error: Optional[BaseException]) -> None:
        log_with_context(
            logger, "error", f"Cascade delete of {root} failed while {state.value}: {error}",
            operation="cascade_delete", entity_id=str(root),
            state=CascadeState.FAILED.value,
        )


def _dedupe(plan: List[keys.Key]) -> List[keys.Key]:
    seen = set()
    ordered = []
    for key in plan:
        if key not in seen:
            seen.add(key)
            ordered.append(key)
    return ordered
