from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ...database.connection import get_async_session
from ...dbmodels import Authors, Posts
from ...errors import NotFoundError, constraint_error_from, require_text
from ...logging import get_logger
from ..ids import parse_id

if TYPE_CHECKING:
    from ..mutations.root import CreateAuthorInput, UpdateAuthorInput
    from ..types.author import Author
    from ..types.post import Post

logger = get_logger(__name__)


# Query resolvers
async def resolve_authors(info: strawberry.Info) -> list[Author]:
    """Resolve every author, in store order."""
    async with get_async_session() as session:
        result = await session.execute(select(Authors))
        authors = result.scalars().all()

        from ..types.author import Author as AuthorType

        return [AuthorType.from_model(author) for author in authors]


async def resolve_author_by_id(info: strawberry.Info, id: str) -> Author | None:
    """
    Resolve an author by its ID.

    A missing or malformed ID resolves to None rather than an error.
    """
    author_id = parse_id(id)
    if author_id is None:
        logger.info("Author not found", author_id=id, reason="malformed id")
        return None

    async with get_async_session() as session:
        result = await session.execute(select(Authors).where(Authors.id == author_id))
        author = result.scalar_one_or_none()

        if not author:
            logger.info("Author not found", author_id=id)
            return None

        from ..types.author import Author as AuthorType

        return AuthorType.from_model(author)


# Author field resolvers
async def resolve_author_posts(author: Author, info: strawberry.Info) -> list[Post]:
    """
    Resolve the posts of one author.

    Runs once per parent author in the response and issues its own query each
    time; lookups are not batched across parents.
    """
    async with get_async_session() as session:
        stmt = select(Posts).where(Posts.author_id == UUID(str(author.id)))
        result = await session.execute(stmt)
        posts = result.scalars().all()

        from ..types.post import Post as PostType

        return [PostType.from_model(post) for post in posts]


# Mutation resolvers
async def create_author(info: strawberry.Info, input: CreateAuthorInput) -> Author:
    """Create a new author. The store generates the id and creation time."""
    name = require_text("name", input.name)
    email = require_text("email", input.email)

    async with get_async_session() as session:
        new_author = Authors(name=name, email=email)
        session.add(new_author)

        try:
            await session.commit()
        except IntegrityError as e:
            raise constraint_error_from(e) from e

        await session.refresh(new_author)

        logger.info("Author created", author_id=str(new_author.id))

        from ..types.author import Author as AuthorType

        return AuthorType.from_model(new_author)


async def update_author(info: strawberry.Info, input: UpdateAuthorInput) -> Author:
    """
    Update an existing author.

    Only the fields supplied in the input are changed.
    """
    author_id = parse_id(input.id)
    if author_id is None:
        raise NotFoundError("Author", input.id)

    async with get_async_session() as session:
        result = await session.execute(select(Authors).where(Authors.id == author_id))
        author = result.scalar_one_or_none()

        if not author:
            raise NotFoundError("Author", input.id)

        updated_fields = []
        if input.name is not None:
            author.name = require_text("name", input.name)
            updated_fields.append("name")
        if input.email is not None:
            author.email = require_text("email", input.email)
            updated_fields.append("email")

        try:
            await session.commit()
        except IntegrityError as e:
            raise constraint_error_from(e) from e

        await session.refresh(author)

        logger.info("Author updated", author_id=str(author.id), updated_fields=updated_fields)

        from ..types.author import Author as AuthorType

        return AuthorType.from_model(author)


async def delete_author(info: strawberry.Info, id: str) -> bool:
    """
    Delete an author.

    Returns False instead of raising when the author does not exist or the
    store refuses the delete (for example while posts still reference it).
    """
    author_id = parse_id(id)
    if author_id is None:
        logger.info("Author delete failed", author_id=id, reason="malformed id")
        return False

    try:
        async with get_async_session() as session:
            result = await session.execute(select(Authors).where(Authors.id == author_id))
            author = result.scalar_one_or_none()

            if not author:
                logger.info("Author delete failed", author_id=id, reason="not found")
                return False

            await session.delete(author)
            await session.commit()
    except Exception as e:
        logger.warning(
            "Author delete failed",
            author_id=id,
            error=str(e),
            error_type=type(e).__name__,
        )
        return False

    logger.info("Author deleted", author_id=id)
    return True
