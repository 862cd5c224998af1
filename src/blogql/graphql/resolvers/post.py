from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ...database.connection import get_async_session
from ...dbmodels import Authors, Posts
from ...errors import NotFoundError, ValidationError, constraint_error_from, require_text
from ...logging import get_logger
from ..ids import parse_id

if TYPE_CHECKING:
    from ..mutations.root import CreatePostInput, UpdatePostInput
    from ..types.author import Author
    from ..types.post import Post

logger = get_logger(__name__)


# Query resolvers
async def resolve_posts(info: strawberry.Info) -> list[Post]:
    """Resolve every post, in store order."""
    async with get_async_session() as session:
        result = await session.execute(select(Posts))
        posts = result.scalars().all()

        from ..types.post import Post as PostType

        return [PostType.from_model(post) for post in posts]


async def resolve_post_by_id(info: strawberry.Info, id: str) -> Post | None:
    """Resolve a post by its ID, or None when there is no such post."""
    post_id = parse_id(id)
    if post_id is None:
        logger.info("Post not found", post_id=id, reason="malformed id")
        return None

    async with get_async_session() as session:
        result = await session.execute(select(Posts).where(Posts.id == post_id))
        post = result.scalar_one_or_none()

        if not post:
            logger.info("Post not found", post_id=id)
            return None

        from ..types.post import Post as PostType

        return PostType.from_model(post)


# Post field resolvers
async def resolve_post_author(post: Post, info: strawberry.Info) -> Author:
    """
    Resolve the author of one post.

    Runs once per parent post in the response; each call is its own lookup.
    """
    async with get_async_session() as session:
        result = await session.execute(select(Authors).where(Authors.id == post.author_id))
        author = result.scalar_one_or_none()

        if not author:
            # The foreign key makes this unreachable short of concurrent deletes
            raise NotFoundError("Author", post.author_id)

        from ..types.author import Author as AuthorType

        return AuthorType.from_model(author)


# Mutation resolvers
async def create_post(info: strawberry.Info, input: CreatePostInput) -> Post:
    """
    Create a new post owned by an existing author.

    `published` defaults to False. A reference to an unknown author is
    rejected by the store's foreign key.
    """
    title = require_text("title", input.title)
    slug = require_text("slug", input.slug)
    if input.content is None:
        raise ValidationError("content is required")

    author_id = parse_id(input.author_id)
    if author_id is None:
        raise ValidationError(f"authorId is not a valid id: {input.author_id}")

    async with get_async_session() as session:
        new_post = Posts(
            title=title,
            slug=slug,
            content=input.content,
            published=input.published if input.published is not None else False,
            author_id=author_id,
        )
        session.add(new_post)

        try:
            await session.commit()
        except IntegrityError as e:
            raise constraint_error_from(e) from e

        await session.refresh(new_post)

        logger.info(
            "Post created",
            post_id=str(new_post.id),
            author_id=str(author_id),
            published=new_post.published,
        )

        from ..types.post import Post as PostType

        return PostType.from_model(new_post)


async def update_post(info: strawberry.Info, input: UpdatePostInput) -> Post:
    """
    Update an existing post.

    Only the supplied fields change. The owning author cannot be changed.
    """
    post_id = parse_id(input.id)
    if post_id is None:
        raise NotFoundError("Post", input.id)

    async with get_async_session() as session:
        result = await session.execute(select(Posts).where(Posts.id == post_id))
        post = result.scalar_one_or_none()

        if not post:
            raise NotFoundError("Post", input.id)

        updated_fields = []
        if input.title is not None:
            post.title = require_text("title", input.title)
            updated_fields.append("title")
        if input.slug is not None:
            post.slug = require_text("slug", input.slug)
            updated_fields.append("slug")
        if input.content is not None:
            post.content = input.content
            updated_fields.append("content")
        if input.published is not None:
            post.published = input.published
            updated_fields.append("published")

        try:
            await session.commit()
        except IntegrityError as e:
            raise constraint_error_from(e) from e

        await session.refresh(post)

        logger.info("Post updated", post_id=str(post.id), updated_fields=updated_fields)

        from ..types.post import Post as PostType

        return PostType.from_model(post)


async def delete_post(info: strawberry.Info, id: str) -> bool:
    """Delete a post. Any failure is logged and reported as False."""
    post_id = parse_id(id)
    if post_id is None:
        logger.info("Post delete failed", post_id=id, reason="malformed id")
        return False

    try:
        async with get_async_session() as session:
            result = await session.execute(select(Posts).where(Posts.id == post_id))
            post = result.scalar_one_or_none()

            if not post:
                logger.info("Post delete failed", post_id=id, reason="not found")
                return False

            await session.delete(post)
            await session.commit()
    except Exception as e:
        logger.warning(
            "Post delete failed",
            post_id=id,
            error=str(e),
            error_type=type(e).__name__,
        )
        return False

    logger.info("Post deleted", post_id=id)
    return True
