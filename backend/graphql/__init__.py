"""
GraphQL API Module

Strawberry GraphQL implementation of the task list and course catalog API.
"""

from .schema import create_graphql_router, schema

__all__ = ["schema", "create_graphql_router"]
