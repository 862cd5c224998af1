"""
Error types raised by the GraphQL resolvers.

Strawberry turns any exception raised by a resolver into a request-level
GraphQL error carrying the exception message.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError


class BlogqlError(Exception):
    """Base class for blogql errors."""

    pass


class ValidationError(BlogqlError):
    """Raised when a required input field is missing or malformed."""

    pass


class NotFoundError(BlogqlError):
    """Raised when an update targets a record that does not exist."""

    def __init__(self, kind: str, id: object):
        super().__init__(f"{kind} not found: {id}")
        self.kind = kind
        self.id = id


class ConstraintError(ValidationError):
    """Raised when a write violates a store-level constraint."""

    pass


def constraint_error_from(exc: IntegrityError) -> ConstraintError:
    """Build a ConstraintError from a SQLAlchemy integrity error."""
    detail = str(exc.orig if exc.orig is not None else exc).strip()
    if not detail:
        return ConstraintError("Constraint violated")
    # Driver messages carry the violated constraint on the first line
    return ConstraintError(detail.splitlines()[0])


def require_text(field: str, value: str | None) -> str:
    """Return the value or raise ValidationError when it is missing or blank."""
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required")
    return value
