"""
Entity codec: domain entity <-> store item (attribute map).

Encoded items carry the primary key, the secondary index keys and the
``entity_type`` tag next to the entity's own attributes. Datetimes are
stored as ISO-8601 strings; everything else is stored as-is.
"""

from typing import Any, Callable, Dict, Generic, Mapping, Type, TypeVar

from pydantic import ValidationError as PydanticValidationError

from blogcontent.core.errors import DecodeError
from blogcontent.models import Blog, Comment, Entity, EntityType, User
from blogcontent.repositories import keys

E = TypeVar("E", bound=Entity)

Item = Dict[str, Any]


class EntityCodec(Generic[E]):
    """
    Bidirectional mapping for one entity type.

    Args:
        model: Entity class
        key_fn: entity -> primary Key
        index_fn: entity -> secondary index attributes
    """

    def __init__(
        self,
        model: Type[E],
        key_fn: Callable[[E], keys.Key],
        index_fn: Callable[[E], Dict[str, str]],
    ):
        self.model = model
        self.entity_type: EntityType = model.entity_type
        self._key_fn = key_fn
        self._index_fn = index_fn

    def key(self, entity: E) -> keys.Key:
        return self._key_fn(entity)

    def encode(self, entity: E) -> Item:
        """
        Encode an entity into a store item.

        Args:
            entity: Entity to encode

        Returns:
            Attribute map including PK/SK, GSI keys and entity_type
        """
        item: Item = entity.model_dump(mode="json")
        item.update(self._key_fn(entity).as_dict())
        item.update(self._index_fn(entity))
        item[keys.ENTITY_TYPE_ATTR] = self.entity_type.value
        return item

    def decode(self, item: Mapping[str, Any]) -> E:
        """
        Decode a store item into an entity.

        Args:
            item: Attribute map returned by the store

        Returns:
            Entity instance

        Raises:
            DecodeError: If the item is of another type, or required
                attributes are missing or malformed
        """
        if not isinstance(item, Mapping):
            raise DecodeError(
                f"Expected an attribute map for {self.entity_type.value}, "
                f"got {type(item).__name__}"
            )

        stored_type = item.get(keys.ENTITY_TYPE_ATTR)
        if stored_type != self.entity_type.value:
            raise DecodeError(
                f"Item {item.get(keys.PK)!r}/{item.get(keys.SK)!r} has entity_type "
                f"{stored_type!r}, expected {self.entity_type.value!r}",
                details={"pk": item.get(keys.PK), "sk": item.get(keys.SK)},
            )

        attributes = {k: v for k, v in item.items() if k not in keys.KEY_ATTRIBUTES}
        try:
            return self.model.model_validate(attributes)
        except PydanticValidationError as e:
            raise DecodeError(
                f"Malformed {self.entity_type.value} item "
                f"{item.get(keys.PK)!r}/{item.get(keys.SK)!r}: {e.error_count()} error(s)",
                details={
                    "pk": item.get(keys.PK),
                    "sk": item.get(keys.SK),
                    "errors": e.errors(include_url=False, include_context=False, include_input=False),
                },
            ) from e


user_codec: EntityCodec[User] = EntityCodec(
    User,
    key_fn=lambda u: keys.user_key(u.user_id),
    index_fn=lambda u: keys.index_attributes_for_user(u.user_id),
)

blog_codec: EntityCodec[Blog] = EntityCodec(
    Blog,
    key_fn=lambda b: keys.blog_key(b.blog_id),
    index_fn=lambda b: keys.index_attributes_for_blog(b.blog_id, b.user_id),
)

comment_codec: EntityCodec[Comment] = EntityCodec(
    Comment,
    key_fn=lambda c: keys.comment_key(c.blog_id, c.user_id),
    index_fn=lambda c: keys.index_attributes_for_comment(c.blog_id, c.user_id),
)


def encode(entity: Entity) -> Item:
    """Encode any entity with the codec for its type."""
    return codec_for(entity.entity_type).encode(entity)


def codec_for(entity_type: EntityType) -> EntityCodec:
    return _CODECS[entity_type]


_CODECS: Dict[EntityType, EntityCodec] = {
    EntityType.USER: user_codec,
    EntityType.BLOG: blog_codec,
    EntityType.COMMENT: comment_codec,
}
