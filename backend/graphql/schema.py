"""
GraphQL Schema

Creates the Strawberry GraphQL schema and the FastAPI router serving it.
"""

import strawberry
from strawberry.extensions import MaskErrors, MaxTokensLimiter, QueryDepthLimiter
from strawberry.fastapi import GraphQLRouter

from .context import get_context
from .errors import UNEXPECTED_ERROR_MESSAGE, should_mask_error
from .extensions import ErrorLoggingExtension, PerformanceMonitoringExtension
from .mutations import Mutation
from .queries import Query


schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    extensions=[
        # Security: Limit query depth to prevent deeply nested queries
        QueryDepthLimiter(max_depth=10),

        # Security: Limit query size (number of tokens)
        MaxTokensLimiter(max_token_count=1000),

        # Hide internal failures (store errors etc.) behind a generic message
        MaskErrors(should_mask_error=should_mask_error, error_message=UNEXPECTED_ERROR_MESSAGE),

        # Monitoring: Track operation performance
        PerformanceMonitoringExtension,

        # Logging: Log errors with context
        ErrorLoggingExtension,
    ]
)


def create_graphql_router(graphiql: bool = True) -> GraphQLRouter:
    """GraphQL router for FastAPI; the context is built once per request"""
    return GraphQLRouter(
        schema,
        graphql_ide="graphiql" if graphiql else None,
        context_getter=get_context,
    )
