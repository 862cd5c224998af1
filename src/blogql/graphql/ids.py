"""
Helpers for the opaque ID scalar exposed by the schema.

Records are keyed by UUID in the database; clients see them as GraphQL `ID`
strings. A string that is not a UUID cannot name any record.
"""

from uuid import UUID


def parse_id(value: str | UUID | None) -> UUID | None:
    """Parse a client-supplied ID, returning None when it is not a valid UUID."""
    if value is None:
        return None
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        return None
