"""
Unit tests for the error taxonomy.
"""

import pytest

from blogcontent.core.errors import (
    BlogContentError,
    CascadeError,
    ConflictError,
    DecodeError,
    ErrorKind,
    ForeignKeyError,
    NotFoundError,
    StoreUnavailable,
    ValidationError,
)
from blogcontent.repositories.keys import blog_key, comment_key

BLOG_ID = "9b1deb4d-3b7d-4bad-9bdd-2b0d7b3dcb6d"
USER_ID = "123e4567-e89b-12d3-a456-426614174000"


class TestErrorKinds:
    """Each error carries its kind tag and status code."""

    @pytest.mark.parametrize(
        "error_cls,kind,status",
        [
            (ValidationError, ErrorKind.VALIDATION, 400),
            (NotFoundError, ErrorKind.NOT_FOUND, 404),
            (ForeignKeyError, ErrorKind.FOREIGN_KEY, 400),
            (ConflictError, ErrorKind.CONFLICT, 409),
            (DecodeError, ErrorKind.DECODE, 500),
            (StoreUnavailable, ErrorKind.STORE_UNAVAILABLE, 503),
        ],
    )
    def test_kind_and_status(self, error_cls, kind, status):
        error = error_cls("boom")

        assert isinstance(error, BlogContentError)
        assert error.kind is kind
        assert error.status_code == status
        assert str(error) == "boom"

    def test_only_store_unavailable_is_retryable_by_default(self):
        assert StoreUnavailable("x").retryable is True
        assert NotFoundError("x").retryable is False

    def test_retryable_can_be_overridden(self):
        assert StoreUnavailable("table missing", retryable=False).retryable is False

    def test_to_dict(self):
        error = NotFoundError("Blog x not found", details={"pk": "BLOG#x"})

        assert error.to_dict() == {
            "kind": "not_found",
            "message": "Blog x not found",
            "retryable": False,
            "details": {"pk": "BLOG#x"},
        }

    def test_kind_compares_to_plain_string(self):
        assert ConflictError("dup").kind == "conflict"


class TestCascadeError:
    """CascadeError reports completed and pending deletions."""

    def test_message_lists_deleted_and_remaining(self):
        deleted = [comment_key(BLOG_ID, USER_ID)]
        remaining = [blog_key(BLOG_ID)]

        error = CascadeError(
            str(blog_key(BLOG_ID)),
            deleted=deleted,
            remaining=remaining,
            cause=StoreUnavailable("throttled"),
        )

        assert error.kind is ErrorKind.CASCADE
        assert error.status_code == 500
        assert error.deleted == deleted
        assert error.remaining == remaining
        assert "throttled" in str(error)
        assert f"COMMENT#{USER_ID}" in str(error)
        assert error.details["remaining"] == [str(blog_key(BLOG_ID))]

    def test_empty_lists_render_as_none(self):
        error = CascadeError("USER#u", deleted=[], remaining=[], cause=RuntimeError("x"))

        assert "Deleted: none" in str(error)
        assert "Not deleted: none" in str(error)
