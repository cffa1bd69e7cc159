"""
User entity.

A user owns blogs and comments. The password attribute always holds a
bcrypt hash (see blogcontent.core.security).
"""

from typing import ClassVar

from pydantic import Field

from blogcontent.models.base import Entity, EntityType


class User(Entity):
    """
    Stored user.

    Attributes:
        user_id: UUID identity
        name: Display name
        email: Email address
        password: Bcrypt-hashed password (never plaintext)

    Security considerations:
        - Never log or expose ``password``; it is excluded from repr
    """

    entity_type: ClassVar[EntityType] = EntityType.USER
    user_id: str
    name: str
    email: str
    password: str = Field(repr=False)

    def public_dict(self) -> dict:
        """Attributes safe to return to API clients (no password hash)."""
        return self.model_dump(mode="json", exclude={"password"})
