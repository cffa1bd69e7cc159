"""
User repository for user CRUD operations.

Provides data access for users stored in the BlogContent table, with
password hashing and cascading delete of owned blogs and comments.
"""

import asyncio
from typing import Any, List, Mapping, Optional, Union
import logging

from blogcontent.core.config import settings
from blogcontent.core.logging_config import log_with_context
from blogcontent.core.security import get_password_hash, verify_password
from blogcontent.models import EntityType, User, new_id
from blogcontent.repositories import keys
from blogcontent.repositories.base import EntityRepository, validate_id, validate_input
from blogcontent.repositories.codec import user_codec
from blogcontent.schemas.fields import normalize_email
from blogcontent.schemas.user import UserCreate, UserFilter, UserUpdate
from blogcontent.services.cascade import CascadeCoordinator, CascadeResult
from blogcontent.services.interfaces.entity_store import IEntityStore, WriteCondition

logger = logging.getLogger(__name__)


class UserRepository(EntityRepository[User]):
    """
    Repository for user data access.

    Attributes:
        store: Entity store shared with the other repositories
        cascade: Coordinator used by delete()
        password_hash_rounds: bcrypt cost factor for new hashes
    """

    codec = user_codec

    def __init__(
        self,
        store: IEntityStore,
        cascade: Optional[CascadeCoordinator] = None,
        password_hash_rounds: Optional[int] = None,
    ):
        """
        Initialize repository with the shared store.

        Args:
            store: Entity store
            cascade: Cascade coordinator (defaults to one over ``store``)
            password_hash_rounds: bcrypt rounds (defaults to settings)
        """
        super().__init__(store)
        self.cascade = cascade or CascadeCoordinator(store)
        self.password_hash_rounds = password_hash_rounds or settings.password_hash_rounds

    async def _hash(self, password: str) -> str:
        # bcrypt is deliberately slow; keep it off the event loop
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, get_password_hash, password, self.password_hash_rounds
        )

    async def create(self, data: Union[UserCreate, Mapping[str, Any]]) -> User:
        """
        Create a new user.

        Args:
            data: UserCreate or mapping with name, email, password

        Returns:
            Created User (password attribute holds the hash)

        Raises:
            ValidationError: If input is invalid
            ConflictError: If the generated id is already taken
        """
        payload = validate_input(UserCreate, data, "user")
        user = User(
            user_id=new_id(),
            name=payload.name,
            email=payload.email,
            password=await self._hash(payload.password),
        )
        await self.store.put(self.codec.encode(user), condition=WriteCondition.NOT_EXISTS)

        log_with_context(
            logger, "info", "User created",
            operation="create", entity_type=EntityType.USER.value, entity_id=user.user_id,
        )
        return user

    async def get(self, user_id: str) -> User:
        """
        Retrieve a user by id.

        Raises:
            ValidationError: If user_id is not a UUID
            NotFoundError: If the user does not exist
        """
        user_id = validate_id(user_id, "user_id")
        return await self._require(keys.user_key(user_id), user_id)

    async def exists(self, user_id: str) -> bool:
        user_id = validate_id(user_id, "user_id")
        return await self.store.get(keys.user_key(user_id)) is not None

    async def update(self, user_id: str, patch: Union[UserUpdate, Mapping[str, Any]]) -> User:
        """
        Apply a partial update to a user.

        A new password is hashed before write. Last write wins.

        Raises:
            ValidationError: If the patch or merged user is invalid
            NotFoundError: If the user does not exist
        """
        user_id = validate_id(user_id, "user_id")
        changes = validate_input(UserUpdate, patch, "user patch").changes()
        current = await self._require(keys.user_key(user_id), user_id)

        if "password" in changes:
            changes["password"] = await self._hash(changes["password"])

        updated = self._merge(current, changes)
        await self.store.put(self.codec.encode(updated), condition=WriteCondition.EXISTS)

        log_with_context(
            logger, "info", "User updated",
            operation="update", entity_type=EntityType.USER.value, entity_id=user_id,
            fields=sorted(changes),
        )
        return updated

    async def delete(self, user_id: str) -> CascadeResult:
        """
        Delete a user with their blogs and comments.

        Raises:
            ValidationError: If user_id is not a UUID
            NotFoundError: If the user does not exist
            CascadeError: If a dependent delete fails part way
        """
        user_id = validate_id(user_id, "user_id")
        return await self.cascade.delete_user(user_id)

    async def list(self, filter: Union[UserFilter, Mapping[str, Any], None] = None) -> List[User]:
        """
        List users, optionally filtered by exact name and/or email.

        One query against the type index.
        """
        criteria = validate_input(UserFilter, filter, "user filter")
        return await self._query(
            keys.type_index_key(EntityType.USER),
            criteria.model_dump(exclude_none=True),
        )

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        """
        Check a user's credentials.

        Args:
            email: Email address (case-insensitive)
            password: Plain text password

        Returns:
            The matching User, or None if no user has this email or the
            password does not match
        """
        try:
            email = normalize_email(email)
        except (ValueError, AttributeError):
            return None

        loop = asyncio.get_running_loop()
        for user in await self._query(keys.type_index_key(EntityType.USER), {"email": email}):
            if await loop.run_in_executor(None, verify_password, password, user.password):
                return user
        return None
