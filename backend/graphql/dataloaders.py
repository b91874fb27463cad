"""
GraphQL DataLoaders

Per-request batching of point lookups to avoid N+1 queries.
"""

from typing import Any, Dict, List, Optional

from bson import ObjectId
from strawberry.dataloader import DataLoader

from src.core.document_store import USERS, DocumentStore
from src.utils.logger import get_logger

logger = get_logger(__name__)


async def load_users_batch(
    keys: List[ObjectId],
    store: DocumentStore
) -> List[Optional[Dict[str, Any]]]:
    """
    Batch load User documents by id.

    Instead of one find_one per member of every task list, issues a single
    $in scan. Results are returned positionally; a miss yields None.

    Args:
        keys: User ObjectIds
        store: Document store gateway

    Returns:
        User documents (or None) in same order as keys
    """
    logger.debug(f"📦 DataLoader: Batch loading {len(keys)} users")

    docs = await store.find_many(USERS, {'_id': {'$in': list(keys)}})
    by_id = {doc['_id']: doc for doc in docs}

    return [by_id.get(key) for key in keys]


def create_dataloaders(store: DocumentStore) -> Dict[str, DataLoader]:
    """
    Create all DataLoaders bound to the request's store.

    Only users are cached: they are never modified by any operation, so a
    cached lookup cannot go stale within a request.
    """
    return {
        'users': DataLoader(load_fn=lambda keys: load_users_batch(keys, store)),
    }
