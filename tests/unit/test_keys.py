"""
Unit tests for the single-table key builder.
"""

from blogcontent.models import EntityType
from blogcontent.repositories import keys

USER_ID = "123e4567-e89b-12d3-a456-426614174000"
BLOG_ID = "9b1deb4d-3b7d-4bad-9bdd-2b0d7b3dcb6d"


class TestPrimaryKeys:
    """Primary key construction per entity."""

    def test_user_key(self):
        key = keys.user_key(USER_ID)

        assert key.pk == f"USER#{USER_ID}"
        assert key.sk == f"USER#{USER_ID}"

    def test_blog_key(self):
        key = keys.blog_key(BLOG_ID)

        assert key.pk == f"BLOG#{BLOG_ID}"
        assert key.sk == f"BLOG#{BLOG_ID}"

    def test_comment_key_lives_in_blog_partition(self):
        key = keys.comment_key(BLOG_ID, USER_ID)

        assert key.pk == keys.blog_key(BLOG_ID).pk
        assert key.sk == f"COMMENT#{USER_ID}"

    def test_keys_are_deterministic(self):
        assert keys.comment_key(BLOG_ID, USER_ID) == keys.comment_key(BLOG_ID, USER_ID)
        assert hash(keys.user_key(USER_ID)) == hash(keys.user_key(USER_ID))

    def test_user_and_blog_keys_never_collide(self):
        assert keys.user_key(USER_ID) != keys.blog_key(USER_ID)

    def test_as_dict(self):
        assert keys.user_key(USER_ID).as_dict() == {
            "PK": f"USER#{USER_ID}",
            "SK": f"USER#{USER_ID}",
        }


class TestKeyConditions:
    """Key conditions for the access patterns."""

    def test_type_index_key(self):
        condition = keys.type_index_key(EntityType.BLOG)

        assert condition.index_name == keys.TYPE_INDEX
        assert condition.partition_attr == "GSI1PK"
        assert condition.sort_attr == "GSI1SK"
        assert condition.partition_value == "BLOG"
        assert condition.sort_prefix is None

    def test_user_blogs_index_key(self):
        condition = keys.user_blogs_index_key(USER_ID)

        assert condition.index_name == keys.OWNER_INDEX
        assert condition.partition_attr == "GSI2PK"
        assert condition.partition_value == f"USER#{USER_ID}"
        assert condition.sort_prefix == "BLOG#"

    def test_user_comments_index_key(self):
        condition = keys.user_comments_index_key(USER_ID)

        assert condition.index_name == keys.OWNER_INDEX
        assert condition.partition_value == f"USER#{USER_ID}"
        assert condition.sort_prefix == "COMMENT#"

    def test_blog_comments_key_uses_base_table(self):
        condition = keys.blog_comments_key(BLOG_ID)

        assert condition.index_name is None
        assert condition.partition_attr == "PK"
        assert condition.sort_attr == "SK"
        assert condition.partition_value == f"BLOG#{BLOG_ID}"
        assert condition.sort_prefix == "COMMENT#"


class TestIndexAttributes:
    """Secondary index attributes written with each item."""

    def test_user_is_only_in_type_index(self):
        attrs = keys.index_attributes_for_user(USER_ID)

        assert attrs == {"GSI1PK": "USER", "GSI1SK": f"USER#{USER_ID}"}

    def test_blog_is_in_owner_index_of_its_user(self):
        attrs = keys.index_attributes_for_blog(BLOG_ID, USER_ID)

        condition = keys.user_blogs_index_key(USER_ID)
        assert attrs["GSI2PK"] == condition.partition_value
        assert attrs["GSI2SK"].startswith(condition.sort_prefix)
        assert attrs["GSI1PK"] == "BLOG"

    def test_comment_is_in_owner_index_of_its_author(self):
        attrs = keys.index_attributes_for_comment(BLOG_ID, USER_ID)

        condition = keys.user_comments_index_key(USER_ID)
        assert attrs["GSI2PK"] == condition.partition_value
        assert attrs["GSI2SK"] == f"COMMENT#{BLOG_ID}"
        assert attrs["GSI1SK"] == f"COMMENT#{BLOG_ID}#{USER_ID}"

    def test_comment_owner_sort_key_does_not_match_blog_prefix(self):
        attrs = keys.index_attributes_for_comment(BLOG_ID, USER_ID)

        assert not attrs["GSI2SK"].startswith(keys.user_blogs_index_key(USER_ID).sort_prefix)
