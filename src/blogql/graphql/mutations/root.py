"""
Root GraphQL mutation definitions
"""

import strawberry

from ..types.author import Author
from ..types.post import Post


# Input types for mutations
@strawberry.input
class CreateAuthorInput:
    """Input for creating a new author."""

    name: str
    email: str


@strawberry.input
class UpdateAuthorInput:
    """Input for updating an author. Omitted fields keep their current value."""

    id: strawberry.ID
    name: str | None = None
    email: str | None = None


@strawberry.input
class CreatePostInput:
    """Input for creating a new post."""

    title: str
    slug: str
    content: str
    author_id: strawberry.ID
    published: bool | None = None


@strawberry.input
class UpdatePostInput:
    """Input for updating a post. The owning author cannot be changed."""

    id: strawberry.ID
    title: str | None = None
    slug: str | None = None
    content: str | None = None
    published: bool | None = None


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    # Author mutations
    @strawberry.mutation(name="createAuthor")
    async def create_author(self, info: strawberry.Info, input: CreateAuthorInput) -> Author:
        """Create a new author."""
        from ..resolvers.author import create_author

        return await create_author(info, input)

    @strawberry.mutation(name="updateAuthor")
    async def update_author(self, info: strawberry.Info, input: UpdateAuthorInput) -> Author:
        """Update an existing author."""
        from ..resolvers.author import update_author

        return await update_author(info, input)

    @strawberry.mutation(name="deleteAuthor")
    async def delete_author(self, info: strawberry.Info, id: strawberry.ID) -> bool:
        """Delete an author. Returns false when nothing was deleted."""
        from ..resolvers.author import delete_author

        return await delete_author(info, id)

    # Post mutations
    @strawberry.mutation(name="createPost")
    async def create_post(self, info: strawberry.Info, input: CreatePostInput) -> Post:
        """Create a new post."""
        from ..resolvers.post import create_post

        return await create_post(info, input)

    @strawberry.mutation(name="updatePost")
    async def update_post(self, info: strawberry.Info, input: UpdatePostInput) -> Post:
        """Update an existing post."""
        from ..resolvers.post import update_post

        return await update_post(info, input)

    @strawberry.mutation(name="deletePost")
    async def delete_post(self, info: strawberry.Info, id: strawberry.ID) -> bool:
        """Delete a post. Returns false when nothing was deleted."""
        from ..resolvers.post import delete_post

        return await delete_post(info, id)
