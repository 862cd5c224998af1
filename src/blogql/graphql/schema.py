"""
GraphQL schema for authors and posts, and its FastAPI router
"""

from typing import Any

import strawberry
from fastapi import Request
from graphql import get_introspection_query, graphql_sync
from graphql import validate_schema as gql_validate_schema
from strawberry.fastapi import GraphQLRouter

from ..config import settings
from ..logging import get_logger
from .mutations.root import Mutation
from .queries.root import Query

logger = get_logger(__name__)

schema = strawberry.Schema(query=Query, mutation=Mutation)


def schema_problems() -> list[str]:
    """Structural problems of the built schema, empty when it is usable.

    Introspection walks every type, so lazy references that cannot be resolved
    show up here rather than on the first request that touches them.
    """
    graphql_schema = schema._schema

    problems = [str(e) for e in gql_validate_schema(graphql_schema)]
    if problems:
        return problems

    result = graphql_sync(graphql_schema, get_introspection_query())
    return [str(e) for e in result.errors or []]


def validate_schema() -> None:
    """Fail fast at startup when the schema is broken.

    Raises:
        RuntimeError: listing every problem found
    """
    problems = schema_problems()
    if problems:
        logger.error("GraphQL schema validation failed", problems=problems)
        raise RuntimeError(f"GraphQL schema validation failed: {'; '.join(problems)}")

    logger.info("GraphQL schema validation successful")


def export_schema_sdl() -> str:
    return schema.as_str() + "\n"


async def get_context(request: Request) -> dict[str, Any]:
    return {"request": request}


def create_graphql_router() -> GraphQLRouter[dict[str, Any], None]:
    """Router serving POST/GET /graphql, plus GraphiQL when enabled in settings."""
    return GraphQLRouter(
        schema,
        path="/graphql",
        graphql_ide="graphiql" if settings.graphiql else None,
        context_getter=get_context,
    )
