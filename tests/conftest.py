"""
Pytest configuration and shared fixtures.

This module provides:
- Environment variable setup for tests
- An in-memory entity store and repositories wired around it
- Factories for users, blogs and comments
"""

import os

import pytest


# Set test environment variables BEFORE any imports
# This must happen first to ensure settings load with test values
os.environ["STORE_BACKEND"] = "memory"
os.environ["TABLE_NAME"] = "BlogContentTest"
os.environ["DYNAMODB_ENDPOINT_URL"] = "http://localhost:8000"
os.environ["AWS_REGION"] = "us-east-1"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"  # Fast bcrypt for tests
os.environ["STORE_MAX_RETRIES"] = "0"
os.environ["LOG_LEVEL"] = "DEBUG"


@pytest.fixture
def store():
    """
    Provide an empty in-memory entity store.

    Returns:
        InMemoryEntityStore
    """
    from blogcontent.services.in_memory_store import InMemoryEntityStore

    return InMemoryEntityStore()


@pytest.fixture
def repos(store):
    """
    Provide repositories sharing the in-memory store.

    Returns:
        Repositories bundle (users, blogs, comments)
    """
    from blogcontent.core.database import build_repositories

    return build_repositories(store, password_hash_rounds=4)


@pytest.fixture
def make_user(repos):
    """Factory creating users with unique emails."""
    counter = {"n": 0}

    async def _make_user(name: str = "Test User", password: str = "password123", **overrides):
        counter["n"] += 1
        data = {
            "name": name,
            "email": f"user{counter['n']}@example.com",
            "password": password,
        }
        data.update(overrides)
        return await repos.users.create(data)

    return _make_user


@pytest.fixture
def make_blog(repos):
    """Factory creating blogs for an existing user."""

    async def _make_blog(user_id: str, title: str = "A blog", score: float = 3.5):
        return await repos.blogs.create({"title": title, "score": score, "user_id": user_id})

    return _make_blog


@pytest.fixture
def make_comment(repos):
    """Factory creating comments."""

    async def _make_comment(blog_id: str, user_id: str, message: str = "nice post"):
        return await repos.comments.create(
            {"blog_id": blog_id, "user_id": user_id, "message": message}
        )

    return _make_comment
