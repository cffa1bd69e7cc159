"""
Entity store construction and repository wiring.

The store client is built once and shared by every repository, so there
is exactly one connection pool per process and no module-level client.
"""

from dataclasses import dataclass
from typing import Optional
import logging

from blogcontent.core.config import Settings, settings as default_settings
from blogcontent.repositories.blog import BlogRepository
from blogcontent.repositories.comment import CommentRepository
from blogcontent.repositories.user import UserRepository
from blogcontent.services.cascade import CascadeCoordinator
from blogcontent.services.dynamodb_store import DynamoDBEntityStore
from blogcontent.services.in_memory_store import InMemoryEntityStore
from blogcontent.services.interfaces.entity_store import IEntityStore

logger = logging.getLogger(__name__)


def create_entity_store(settings: Optional[Settings] = None) -> IEntityStore:
    """
    Build the configured entity store.

    Args:
        settings: Settings to use (defaults to the global instance)

    Returns:
        DynamoDBEntityStore or InMemoryEntityStore

    Example:
        >>> store = create_entity_store()
        >>> repos = build_repositories(store)
    """
    settings = settings or default_settings

    if settings.store_backend == "memory":
        logger.info("Using in-memory entity store")
        return InMemoryEntityStore(timeout_seconds=settings.store_timeout_seconds)

    logger.info(
        "Using DynamoDB entity store",
        extra={"table": settings.table_name, "endpoint": settings.dynamodb_endpoint_url or "aws"},
    )
    return DynamoDBEntityStore.from_settings(settings)


@dataclass
class Repositories:
    """All repositories, sharing one store and one cascade coordinator."""

    store: IEntityStore
    users: UserRepository
    blogs: BlogRepository
    comments: CommentRepository

    async def close(self) -> None:
        await self.store.close()


def build_repositories(
    store: IEntityStore,
    password_hash_rounds: Optional[int] = None,
) -> Repositories:
    """
    Wire repositories around one store.

    Args:
        store: Entity store instance
        password_hash_rounds: bcrypt rounds override (tests use a low value)

    Returns:
        Repositories bundle
    """
    cascade = CascadeCoordinator(store)
    return Repositories(
        store=store,
        users=UserRepository(store, cascade, password_hash_rounds=password_hash_rounds),
        blogs=BlogRepository(store, cascade),
        comments=CommentRepository(store),
    )
