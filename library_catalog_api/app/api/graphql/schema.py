"""
GraphQL schema and its FastAPI router.

``create_graphql_router`` mounts the schema at ``/`` for both HTTP
(queries and mutations) and WebSocket (subscriptions) clients.
"""

import strawberry
from strawberry.fastapi import GraphQLRouter
from strawberry.subscriptions import GRAPHQL_TRANSPORT_WS_PROTOCOL, GRAPHQL_WS_PROTOCOL

from .context import get_context
from .mutations import Mutation
from .queries import Query
from .subscriptions import Subscription

schema = strawberry.Schema(query=Query, mutation=Mutation, subscription=Subscription)


def create_graphql_router(graphiql: bool = False) -> GraphQLRouter:
    """Build the router serving ``schema``; ``graphiql`` enables the in-browser IDE."""
    return GraphQLRouter(
        schema,
        path="/",
        context_getter=get_context,
        graphql_ide="graphiql" if graphiql else None,
        subscription_protocols=(GRAPHQL_TRANSPORT_WS_PROTOCOL, GRAPHQL_WS_PROTOCOL),
    )
