"""Resolver package for the GraphQL schema.

One module per entity; the root query/mutation types and the field resolvers
on the object types import their functions lazily from here.
"""
