"""
GraphQL Context

Request-scoped values handed to every resolver: the store gateway, the
session user resolved once from the bearer token, and the DataLoaders.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from fastapi import Request
from strawberry.fastapi import BaseContext

from backend.middleware.jwt_auth import extract_bearer_token, get_user_from_token
from src.core.document_store import DocumentStore
from src.utils.logger import get_logger

from .dataloaders import create_dataloaders
from .errors import AuthenticationError

logger = get_logger(__name__)


@dataclass
class GraphQLContext(BaseContext):
    """
    Context for one GraphQL request.

    `user` is the raw User document, or None for an anonymous session.
    It is set when the context is built and not reassigned afterwards.
    """
    store: DocumentStore = None  # type: ignore[assignment]
    user: Optional[Dict[str, Any]] = None
    loaders: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        super().__init__()
        if not self.loaders:
            self.loaders = create_dataloaders(self.store)

    def require_user(self) -> Dict[str, Any]:
        """Return the session user or fail the operation before any store access"""
        if self.user is None:
            raise AuthenticationError()
        return self.user


async def build_context(store: DocumentStore, authorization: Optional[str]) -> GraphQLContext:
    """Resolve the session and assemble the context for one request"""
    token = extract_bearer_token(authorization)
    user = await get_user_from_token(token, store)
    return GraphQLContext(store=store, user=user)


async def get_context(request: Request) -> GraphQLContext:
    """context_getter for the strawberry FastAPI router"""
    store: DocumentStore = request.app.state.document_store
    return await build_context(store, request.headers.get("authorization"))
