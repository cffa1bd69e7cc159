"""
Base types shared by all domain entities.

Provides the entity type tags stored with every item, the common pydantic
base class, and helpers for server-generated identity and timestamps.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import ClassVar
import uuid

from pydantic import BaseModel, ConfigDict


class EntityType(str, Enum):
    """Entity type tag, stored as ``entity_type`` and used as key prefix."""

    USER = "USER"
    BLOG = "BLOG"
    COMMENT = "COMMENT"


class Entity(BaseModel):
    """
    Base class for stored domain entities.

    Entities are immutable value objects; repositories produce updated
    copies with ``model_copy``/``model_validate`` instead of mutating.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    entity_type: ClassVar[EntityType]


def new_id() -> str:
    """
    Generate a new entity identifier.

    Returns:
        Random UUID4 as a lowercase string
    """
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """
    Get the current UTC time, timezone-aware.

    Returns:
        datetime with tzinfo=UTC
    """
    return datetime.now(timezone.utc)
