"""
Author GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated

import strawberry

from ...dbmodels import Authors

if TYPE_CHECKING:
    from .post import Post


@strawberry.type
class Author:
    """Author type for GraphQL API."""

    id: strawberry.ID
    name: str
    email: str
    created_at: datetime

    @strawberry.field
    async def posts(
        self, info: strawberry.Info
    ) -> list[Annotated["Post", strawberry.lazy(".post")]]:
        """Get the posts written by this author."""
        from ..resolvers.author import resolve_author_posts

        return await resolve_author_posts(self, info)

    @classmethod
    def from_model(cls, author: Authors) -> "Author":
        return cls(
            id=strawberry.ID(str(author.id)),
            name=author.name,
            email=author.email,
            created_at=author.created_at,
        )
