"""
Integration tests for cascading deletes.

Tests follow AAA (Arrange, Act, Assert) pattern.
"""

import pytest

from blogcontent.core.database import build_repositories
from blogcontent.core.errors import CascadeError, NotFoundError, StoreUnavailable
from blogcontent.repositories import keys
from blogcontent.services.cascade import CascadeCoordinator, CascadeState
from blogcontent.services.in_memory_store import InMemoryEntityStore

MISSING_ID = "00000000-0000-4000-8000-000000000000"


class FlakyStore(InMemoryEntityStore):
    """In-memory store whose n-th delete (1-based) fails."""

    def __init__(self, fail_on_delete: int):
        super().__init__()
        self.fail_on_delete = fail_on_delete
        self.deletes = 0

    async def delete(self, key):
        self.deletes += 1
        if self.deletes == self.fail_on_delete:
            raise StoreUnavailable("throttled", retryable=False)
        await super().delete(key)


class FailingQueryStore(InMemoryEntityStore):
    async def query(self, condition, filters=None):
        raise StoreUnavailable("query failed")


class TestDeleteUserCascade:

    async def test_removes_user_blogs_and_comments(self, repos, store, make_user, make_blog, make_comment):
        """Test N blogs and M comments plus the user are removed."""
        # Arrange
        user = await make_user()
        other = await make_user()
        blogs = [await make_blog(user.user_id) for _ in range(2)]
        others_blog = await make_blog(other.user_id)
        await make_comment(blogs[0].blog_id, user.user_id)
        await make_comment(others_blog.blog_id, user.user_id)
        store.reset_calls()

        # Act
        result = await repos.users.delete(user.user_id)

        # Assert
        assert result.state is CascadeState.SUCCEEDED
        assert result.deleted_count == 2 + 2 + 1
        assert store.count_calls("delete") == 5
        assert result.deleted[-1] == keys.user_key(user.user_id)
        for blog in blogs:
            with pytest.raises(NotFoundError):
                await repos.blogs.get(blog.blog_id)
        with pytest.raises(NotFoundError):
            await repos.users.get(user.user_id)
        assert await repos.blogs.get(others_blog.blog_id) == others_blog
        assert await repos.comments.list({"user_id": user.user_id}) == []

    async def test_comments_by_others_on_owned_blogs_are_removed(
        self, repos, make_user, make_blog, make_comment
    ):
        owner = await make_user()
        visitor = await make_user()
        blog = await make_blog(owner.user_id)
        await make_comment(blog.blog_id, visitor.user_id)

        result = await repos.users.delete(owner.user_id)

        assert keys.comment_key(blog.blog_id, visitor.user_id) in result.deleted
        assert await repos.comments.list({"user_id": visitor.user_id}) == []
        assert await repos.users.exists(visitor.user_id)

    async def test_children_deleted_before_parents(self, repos, make_user, make_blog, make_comment):
        user = await make_user()
        blog = await make_blog(user.user_id)
        await make_comment(blog.blog_id, user.user_id)

        result = await repos.users.delete(user.user_id)

        assert result.deleted == [
            keys.comment_key(blog.blog_id, user.user_id),
            keys.blog_key(blog.blog_id),
            keys.user_key(user.user_id),
        ]

    async def test_user_without_content(self, repos, make_user):
        user = await make_user()

        result = await repos.users.delete(user.user_id)

        assert result.deleted == [keys.user_key(user.user_id)]

    async def test_missing_user(self, repos, store):
        with pytest.raises(NotFoundError):
            await repos.users.delete(MISSING_ID)

        assert store.count_calls("delete") == 0


class TestDeleteBlogCascade:

    async def test_removes_blog_and_k_comments(self, repos, store, make_user, make_blog, make_comment):
        owner = await make_user()
        blog = await make_blog(owner.user_id)
        commenters = [await make_user() for _ in range(3)]
        for commenter in commenters:
            await make_comment(blog.blog_id, commenter.user_id)
        store.reset_calls()

        result = await repos.blogs.delete(blog.blog_id)

        assert result.deleted_count == 3 + 1
        assert store.count_calls("delete") == 4
        assert result.deleted[-1] == keys.blog_key(blog.blog_id)
        assert await repos.comments.list({"blog_id": blog.blog_id}) == []
        for commenter in commenters:
            assert await repos.users.exists(commenter.user_id)


class TestCascadeFailures:

    async def test_partial_failure_reports_progress(self):
        # Arrange
        store = FlakyStore(fail_on_delete=2)
        repos = build_repositories(store, password_hash_rounds=4)
        user = await repos.users.create({"name": "Ada", "email": "ada@example.com", "password": "password123"})
        blog = await repos.blogs.create({"title": "t", "user_id": user.user_id})
        await repos.comments.create({"blog_id": blog.blog_id, "user_id": user.user_id, "message": "hi"})

        # Act
        with pytest.raises(CascadeError) as exc_info:
            await repos.users.delete(user.user_id)

        # Assert
        error = exc_info.value
        assert error.deleted == [keys.comment_key(blog.blog_id, user.user_id)]
        assert error.remaining == [keys.blog_key(blog.blog_id), keys.user_key(user.user_id)]
        assert isinstance(error.cause, StoreUnavailable)
        assert "throttled" in str(error)
        # Nothing is rolled back and nothing past the failure is touched
        assert await repos.blogs.get(blog.blog_id) == blog
        assert await repos.users.get(user.user_id) == user

    async def test_planning_failure(self):
        store = FailingQueryStore()
        repos = build_repositories(store, password_hash_rounds=4)
        user = await repos.users.create({"name": "Ada", "email": "ada@example.com", "password": "password123"})

        with pytest.raises(CascadeError) as exc_info:
            await repos.users.delete(user.user_id)

        assert exc_info.value.deleted == []
        assert exc_info.value.remaining == [keys.user_key(user.user_id)]
        assert await repos.users.exists(user.user_id)

    async def test_already_absent_items_are_skipped(self, store, make_user, make_blog, make_comment):
        """Test a key deleted by someone else mid-cascade does not fail it."""
        user = await make_user()
        blog = await make_blog(user.user_id)
        await make_comment(blog.blog_id, user.user_id)
        comment_key = keys.comment_key(blog.blog_id, user.user_id)
        coordinator = CascadeCoordinator(store)
        original_delete = store.delete

        async def delete(key):
            if key == keys.blog_key(blog.blog_id):
                # Concurrent delete of the blog lands first
                await original_delete(key)
                raise NotFoundError("gone")
            await original_delete(key)

        store.delete = delete

        result = await coordinator.delete_user(user.user_id)

        assert result.state is CascadeState.SUCCEEDED
        assert result.deleted == [comment_key, keys.user_key(user.user_id)]
        assert result.already_absent == [keys.blog_key(blog.blog_id)]
