from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from blogcontent.schemas.fields import Email, Name, Password
from blogcontent.schemas.patch import PatchModel


class UserCreate(BaseModel):
    """
    Input schema for creating a user.

    The id is generated server-side; the password is hashed before write.

    Attributes:
        name: Display name (1-255 chars)
        email: Email address (normalized to lowercase)
        password: Plain text password (8-128 chars)
    """
    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "name": "Ada Lovelace",
                "email": "ada@example.com",
                "password": "correct-horse-battery",
            }
        },
    )

    name: Name
    email: Email
    password: Password = Field(repr=False)


class UserUpdate(PatchModel):
    """
    Partial update for a user. Only fields that are set are applied.

    ``user_id`` is immutable and rejected here.
    """
    name: Optional[Name] = None
    email: Optional[Email] = None
    password: Optional[Password] = Field(default=None, repr=False)


class UserFilter(BaseModel):
    """Equality filter for listing users."""
    model_config = ConfigDict(extra="forbid")

    name: Optional[Name] = None
    email: Optional[Email] = None
