"""
Tests for input schemas (create payloads, patches, filters).

Tests follow AAA (Arrange, Act, Assert) pattern.
"""

import pytest
from pydantic import ValidationError

from blogcontent.schemas import (
    BlogCreate,
    BlogFilter,
    BlogUpdate,
    CommentCreate,
    CommentUpdate,
    UserCreate,
    UserUpdate,
)
from blogcontent.schemas.fields import normalize_uuid

USER_ID = "123e4567-e89b-12d3-a456-426614174000"
BLOG_ID = "9b1deb4d-3b7d-4bad-9bdd-2b0d7b3dcb6d"


class TestIdentifiers:

    def test_uuid_is_normalized(self):
        assert normalize_uuid(f"  {USER_ID.upper()} ") == USER_ID

    @pytest.mark.parametrize("value", ["", "   ", "not-a-uuid", "123"])
    def test_invalid_identifiers(self, value):
        with pytest.raises(ValueError):
            normalize_uuid(value)


class TestUserCreate:

    def test_valid(self):
        user = UserCreate(name=" Ada ", email="Ada@Example.COM", password="password123")

        assert user.name == "Ada"
        assert user.email == "ada@example.com"

    def test_password_not_in_repr(self):
        user = UserCreate(name="Ada", email="ada@example.com", password="password123")

        assert "password123" not in repr(user)

    @pytest.mark.parametrize(
        "field,value",
        [
            ("name", ""),
            ("email", "not-an-email"),
            ("password", "short"),
        ],
    )
    def test_invalid_fields(self, field, value):
        data = {"name": "Ada", "email": "ada@example.com", "password": "password123"}
        data[field] = value

        with pytest.raises(ValidationError):
            UserCreate(**data)

    def test_user_id_cannot_be_supplied(self):
        with pytest.raises(ValidationError):
            UserCreate(user_id=USER_ID, name="Ada", email="ada@example.com", password="password123")


class TestBlogCreate:

    def test_score_defaults_to_zero(self):
        blog = BlogCreate(title="Hello", user_id=USER_ID)

        assert blog.score == 0.0

    @pytest.mark.parametrize("score", [float("nan"), float("inf"), "abc"])
    def test_non_finite_score_rejected(self, score):
        with pytest.raises(ValidationError):
            BlogCreate(title="Hello", score=score, user_id=USER_ID)

    @pytest.mark.parametrize("score", [1e200, -1e200, 1e126, 1e-200, -1e-131])
    def test_score_outside_storable_range_rejected(self, score):
        with pytest.raises(ValidationError):
            BlogCreate(title="Hello", score=score, user_id=USER_ID)

    @pytest.mark.parametrize("score", [0.0, 9.99e125, -9.99e125, 1e-130, 4.5])
    def test_score_inside_storable_range_accepted(self, score):
        assert BlogCreate(title="Hello", score=score, user_id=USER_ID).score == score

    def test_created_date_is_server_side(self):
        with pytest.raises(ValidationError):
            BlogCreate(title="Hello", user_id=USER_ID, created_date="2024-01-01T00:00:00Z")

    def test_bad_user_id(self):
        with pytest.raises(ValidationError):
            BlogCreate(title="Hello", user_id="nope")


class TestCommentCreate:

    def test_message_is_stripped(self):
        comment = CommentCreate(blog_id=BLOG_ID, user_id=USER_ID, message="  nice post ")

        assert comment.message == "nice post"

    def test_blank_message_rejected(self):
        with pytest.raises(ValidationError):
            CommentCreate(blog_id=BLOG_ID, user_id=USER_ID, message="   ")


class TestPatches:
    """Patches apply only set fields and reject nulls and immutable keys."""

    def test_changes_contains_only_set_fields(self):
        patch = BlogUpdate(title="New title")

        assert patch.changes() == {"title": "New title"}

    def test_empty_patch_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            BlogUpdate()

        assert "at least one field" in str(exc_info.value)

    def test_explicit_null_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            UserUpdate(name=None)

        assert "cannot be null" in str(exc_info.value)

    @pytest.mark.parametrize("field", ["blog_id", "user_id", "created_date"])
    def test_immutable_blog_fields_rejected(self, field):
        with pytest.raises(ValidationError):
            BlogUpdate(**{field: "x", "title": "t"})

    def test_comment_keys_are_immutable(self):
        with pytest.raises(ValidationError):
            CommentUpdate(message="edited", blog_id=BLOG_ID)

    def test_patch_values_are_validated(self):
        with pytest.raises(ValidationError):
            UserUpdate(email="bad")


class TestFilters:

    def test_empty_filter_allowed(self):
        assert BlogFilter().model_dump(exclude_none=True) == {}

    def test_unknown_filter_field_rejected(self):
        with pytest.raises(ValidationError):
            BlogFilter(score=1.0)
