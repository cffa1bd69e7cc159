"""
Key construction for the single-table layout.

Every item lives in one table. Keys are prefixed with the entity type so
the three entity kinds never collide:

    Item      PK              SK                GSI1PK   GSI1SK                  GSI2PK          GSI2SK
    User      USER#<user>     USER#<user>       USER     USER#<user>             -               -
    Blog      BLOG#<blog>     BLOG#<blog>       BLOG     BLOG#<blog>             USER#<user>     BLOG#<blog>
    Comment   BLOG#<blog>     COMMENT#<user>    COMMENT  COMMENT#<blog>#<user>   USER#<user>     COMMENT#<blog>

Access patterns:
- comments of a blog: base table, PK = BLOG#<blog>, SK begins_with COMMENT#
- all entities of a type: GSI1 (type index)
- blogs of a user / comments by a user: GSI2 (owner index)

All functions are pure; ids are validated by callers beforehand.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from blogcontent.models.base import EntityType

# Attribute names
PK = "PK"
SK = "SK"
GSI1_PK = "GSI1PK"
GSI1_SK = "GSI1SK"
GSI2_PK = "GSI2PK"
GSI2_SK = "GSI2SK"
ENTITY_TYPE_ATTR = "entity_type"

# Index names
TYPE_INDEX = "GSI1"
OWNER_INDEX = "GSI2"

# Index name -> (partition attribute, sort attribute); None is the base table
INDEXES: Dict[Optional[str], tuple] = {
    None: (PK, SK),
    TYPE_INDEX: (GSI1_PK, GSI1_SK),
    OWNER_INDEX: (GSI2_PK, GSI2_SK),
}

SEPARATOR = "#"


@dataclass(frozen=True)
class Key:
    """Primary key of one item."""

    pk: str
    sk: str

    def as_dict(self) -> Dict[str, str]:
        return {PK: self.pk, SK: self.sk}

    def __str__(self) -> str:
        return f"{self.pk}|{self.sk}"


@dataclass(frozen=True)
class KeyCondition:
    """
    Key condition for a query: exact partition value plus an optional
    sort-key prefix, against the base table or a secondary index.
    """

    index_name: Optional[str]
    partition_value: str
    sort_prefix: Optional[str] = None

    @property
    def partition_attr(self) -> str:
        return INDEXES[self.index_name][0]

    @property
    def sort_attr(self) -> str:
        return INDEXES[self.index_name][1]


def _join(*parts: str) -> str:
    return SEPARATOR.join(parts)


def _prefix(entity_type: EntityType) -> str:
    return entity_type.value + SEPARATOR


def user_key(user_id: str) -> Key:
    token = _join(EntityType.USER.value, user_id)
    return Key(pk=token, sk=token)


def blog_key(blog_id: str) -> Key:
    token = _join(EntityType.BLOG.value, blog_id)
    return Key(pk=token, sk=token)


def comment_key(blog_id: str, user_id: str) -> Key:
    """Comments are stored in their blog's partition."""
    return Key(
        pk=_join(EntityType.BLOG.value, blog_id),
        sk=_join(EntityType.COMMENT.value, user_id),
    )


def type_index_key(entity_type: EntityType) -> KeyCondition:
    """All items of one entity type."""
    return KeyCondition(index_name=TYPE_INDEX, partition_value=entity_type.value)


def user_blogs_index_key(user_id: str) -> KeyCondition:
    """Blogs owned by a user."""
    return KeyCondition(
        index_name=OWNER_INDEX,
        partition_value=_join(EntityType.USER.value, user_id),
        sort_prefix=_prefix(EntityType.BLOG),
    )


def user_comments_index_key(user_id: str) -> KeyCondition:
    """Comments written by a user, on any blog."""
    return KeyCondition(
        index_name=OWNER_INDEX,
        partition_value=_join(EntityType.USER.value, user_id),
        sort_prefix=_prefix(EntityType.COMMENT),
    )


def blog_comments_key(blog_id: str) -> KeyCondition:
    """Comments of a blog, read from the blog's partition in the base table."""
    return KeyCondition(
        index_name=None,
        partition_value=_join(EntityType.BLOG.value, blog_id),
        sort_prefix=_prefix(EntityType.COMMENT),
    )


def index_attributes_for_user(user_id: str) -> Dict[str, str]:
    return {
        GSI1_PK: EntityType.USER.value,
        GSI1_SK: _join(EntityType.USER.value, user_id),
    }


def index_attributes_for_blog(blog_id: str, user_id: str) -> Dict[str, str]:
    return {
        GSI1_PK: EntityType.BLOG.value,
        GSI1_SK: _join(EntityType.BLOG.value, blog_id),
        GSI2_PK: _join(EntityType.USER.value, user_id),
        GSI2_SK: _join(EntityType.BLOG.value, blog_id),
    }


def index_attributes_for_comment(blog_id: str, user_id: str) -> Dict[str, str]:
    return {
        GSI1_PK: EntityType.COMMENT.value,
        GSI1_SK: _join(EntityType.COMMENT.value, blog_id, user_id),
        GSI2_PK: _join(EntityType.USER.value, user_id),
        GSI2_SK: _join(EntityType.COMMENT.value, blog_id),
    }


KEY_ATTRIBUTES = frozenset({PK, SK, GSI1_PK, GSI1_SK, GSI2_PK, GSI2_SK, ENTITY_TYPE_ATTR})
