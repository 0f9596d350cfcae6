"""
GraphQL API for the library catalog.

Types live in ``types``; the root ``Query``, ``Mutation`` and
``Subscription`` types each have their own module and are assembled
into ``schema`` by ``schema.py``.
"""

from .schema import create_graphql_router, schema

__all__ = ["schema", "create_graphql_router"]
