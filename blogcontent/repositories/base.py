"""
Shared repository plumbing: input validation, id checks, typed reads.
"""

from typing import Any, Dict, Generic, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from blogcontent.core.errors import NotFoundError, ValidationError
from blogcontent.models import Entity
from blogcontent.repositories import keys
from blogcontent.repositories.codec import EntityCodec
from blogcontent.schemas.fields import normalize_uuid
from blogcontent.services.interfaces.entity_store import IEntityStore

E = TypeVar("E", bound=Entity)
S = TypeVar("S", bound=BaseModel)


def validation_error_from(error: PydanticValidationError, what: str) -> ValidationError:
    """
    Convert a pydantic ValidationError into the taxonomy's ValidationError.

    Field errors are kept in ``details["errors"]`` as
    ``{"field": "a.b", "message": "..."}`` entries.
    """
    errors = [
        {
            "field": ".".join(str(part) for part in err["loc"]) or "__root__",
            "message": err["msg"],
        }
        for err in error.errors(include_url=False)
    ]
    summary = "; ".join(f"{e['field']}: {e['message']}" for e in errors)
    return ValidationError(f"Invalid {what}: {summary}", details={"errors": errors})


def validate_input(schema: Type[S], data: Union[S, Mapping[str, Any], None], what: str) -> S:
    """
    Validate caller input against a schema.

    Args:
        schema: Pydantic schema class
        data: Schema instance (already validated) or raw mapping
        what: Human label for error messages ("blog", "blog patch", ...)

    Returns:
        Schema instance

    Raises:
        ValidationError: If the data does not match the schema
    """
    if isinstance(data, schema):
        return data
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ValidationError(
            f"Invalid {what}: expected an object, got {type(data).__name__}"
        )
    try:
        return schema.model_validate(dict(data))
    except PydanticValidationError as e:
        raise validation_error_from(e, what) from e


def validate_id(value: Any, field: str) -> str:
    """
    Reject empty or non-UUID ids before any key is built.

    Returns:
        Canonical id string

    Raises:
        ValidationError: If value is not a UUID string
    """
    if not isinstance(value, str):
        raise ValidationError(
            f"Invalid {field}: expected a UUID string, got {type(value).__name__}",
            details={"errors": [{"field": field, "message": "must be a UUID string"}]},
        )
    try:
        return normalize_uuid(value)
    except ValueError as e:
        raise ValidationError(
            f"Invalid {field}: {e}",
            details={"errors": [{"field": field, "message": str(e)}]},
        ) from None


class EntityRepository(Generic[E]):
    """
    Base class for per-entity repositories.

    Attributes:
        store: Entity store shared by all repositories
        codec: Codec for this repository's entity type
    """

    codec: EntityCodec

    def __init__(self, store: IEntityStore):
        self.store = store

    @property
    def entity_label(self) -> str:
        return self.codec.entity_type.value.capitalize()

    async def _fetch(self, key: keys.Key) -> Optional[E]:
        item = await self.store.get(key)
        if item is None:
            return None
        return self.codec.decode(item)

    async def _require(self, key: keys.Key, entity_id: str) -> E:
        entity = await self._fetch(key)
        if entity is None:
            raise NotFoundError(
                f"{self.entity_label} {entity_id} not found",
                details={"pk": key.pk, "sk": key.sk},
            )
        return entity

    async def _query(
        self,
        condition: keys.KeyCondition,
        filters: Optional[Dict[str, Any]] = None
    ) -> List[E]:
        items = await self.store.query(condition, filters or None)
        return [self.codec.decode(item) for item in items]

    def _merge(self, entity: E, changes: Mapping[str, Any]) -> E:
        """Apply patch fields and validate the merged entity."""
        merged = {**entity.model_dump(), **changes}
        try:
            return self.codec.model.model_validate(merged)
        except PydanticValidationError as e:
            raise validation_error_from(e, f"{self.entity_label.lower()} update") from e
