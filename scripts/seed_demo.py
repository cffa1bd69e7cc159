"""
Seed demo users, blogs and comments through the repositories.

Usage:
    python scripts/seed_demo.py

Requirements:
    - The table exists (scripts/create_table.py)
    - DynamoDB reachable at DYNAMODB_ENDPOINT_URL
"""

import asyncio
import sys

from blogcontent.core.config import settings
from blogcontent.core.database import build_repositories, create_entity_store
from blogcontent.core.errors import BlogContentError
from blogcontent.core.logging_config import setup_logging

DEMO_USERS = [
    {"name": "Ada Lovelace", "email": "ada@example.com", "password": "analytical-engine"},
    {"name": "Alan Turing", "email": "alan@example.com", "password": "on-computable-numbers"},
]

DEMO_BLOGS = [
    ("ada@example.com", "Notes on the Analytical Engine", 4.8),
    ("alan@example.com", "Computing Machinery and Intelligence", 4.9),
]


async def seed_demo() -> None:
    repos = build_repositories(create_entity_store(settings))
    try:
        users = {}
        for data in DEMO_USERS:
            existing = await repos.users.list({"email": data["email"]})
            users[data["email"]] = existing[0] if existing else await repos.users.create(data)

        blogs = []
        for email, title, score in DEMO_BLOGS:
            owner = users[email]
            existing = await repos.blogs.list({"user_id": owner.user_id, "title": title})
            blog = existing[0] if existing else await repos.blogs.create(
                {"title": title, "score": score, "user_id": owner.user_id}
            )
            blogs.append(blog)

        # Everyone comments on everyone else's blog
        for blog in blogs:
            for user in users.values():
                if user.user_id == blog.user_id:
                    continue
                if await repos.comments.list({"blog_id": blog.blog_id, "user_id": user.user_id}):
                    continue
                await repos.comments.create({
                    "blog_id": blog.blog_id,
                    "user_id": user.user_id,
                    "message": f"{user.name} enjoyed '{blog.title}'",
                })

        print(f"Seeded {len(users)} users and {len(blogs)} blogs")
    finally:
        await repos.close()


def main() -> int:
    setup_logging(level=settings.log_level, json_format=settings.log_json)
    try:
        asyncio.run(seed_demo())
    except BlogContentError as e:
        print(f"Error seeding demo data: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
