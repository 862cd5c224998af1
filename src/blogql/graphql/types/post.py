"""
Post GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import strawberry

from ...dbmodels import Posts

if TYPE_CHECKING:
    from .author import Author


@strawberry.type
class Post:
    """Post type for GraphQL API."""

    id: strawberry.ID
    title: str
    slug: str
    content: str
    published: bool
    created_at: datetime

    # Join key for the author field; not part of the schema
    author_id: strawberry.Private[UUID]

    @strawberry.field
    async def author(self, info: strawberry.Info) -> Annotated["Author", strawberry.lazy(".author")]:
        """Get the author of this post."""
        from ..resolvers.post import resolve_post_author

        return await resolve_post_author(self, info)

    @classmethod
    def from_model(cls, post: Posts) -> "Post":
        return cls(
            id=strawberry.ID(str(post.id)),
            title=post.title,
            slug=post.slug,
            content=post.content,
            published=post.published,
            created_at=post.created_at,
            author_id=post.author_id,
        )
