"""
Document Store Gateway

Thin capability layer over the async MongoDB database. Resolvers only talk
to the store through these operations, each scoped to a logical
collection name.
"""

from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId

from src.utils.logger import get_logger

logger = get_logger(__name__)

# Logical collection names
USERS = "Users"
TASK_LISTS = "TaskList"
TODOS = "ToDo"
COURSES = "Courses"


class InvalidDocumentId(ValueError):
    """Raised when a caller-supplied id is not a valid ObjectId"""

    def __init__(self, value: Any):
        super().__init__(f"Invalid id: {value}")
        self.value = value


def to_object_id(value: Any) -> ObjectId:
    """
    Convert a caller-supplied identifier to an ObjectId.

    Raises:
        InvalidDocumentId: If the value is not a 24-char hex string or ObjectId
    """
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        raise InvalidDocumentId(value)


class DocumentStore:
    """
    Store gateway over an AsyncIOMotorDatabase.

    No operation here treats "zero documents matched" as an error; callers
    get None, an empty list or a zero count back.
    """

    def __init__(self, db, collections: Optional[Dict[str, str]] = None):
        """
        Args:
            db: Motor async database instance
            collections: Optional logical -> physical collection name mapping
        """
        self.db = db
        self.collections = collections or {}

    def collection(self, name: str):
        return self.db[self.collections.get(name, name)]

    async def find_one(self, collection: str, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return await self.collection(collection).find_one(query)

    async def find_by_id(self, collection: str, doc_id: ObjectId) -> Optional[Dict[str, Any]]:
        """Point lookup by _id"""
        return await self.find_one(collection, {'_id': doc_id})

    async def find_many(
        self,
        collection: str,
        query: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        """Filtered scan; an empty/None query scans the whole collection"""
        documents = []
        async for doc in self.collection(collection).find(query or {}):
            documents.append(doc)
        logger.debug(f"{collection}.find({query}) -> {len(documents)} documents")
        return documents

    async def insert(self, collection: str, document: Dict[str, Any]) -> ObjectId:
        """Insert a document and return its store-assigned id"""
        result = await self.collection(collection).insert_one(document)
        logger.debug(f"{collection}.insert -> {result.inserted_id}")
        return result.inserted_id

    async def update_fields(
        self,
        collection: str,
        doc_id: ObjectId,
        fields: Dict[str, Any]
    ) -> int:
        """
        Set the given top-level fields on one document.

        Returns:
            Number of matched documents (0 or 1)
        """
        if not fields:
            return 0
        result = await self.collection(collection).update_one(
            {'_id': doc_id},
            {'$set': fields}
        )
        logger.debug(f"{collection}.update {doc_id} {sorted(fields)} matched={result.matched_count}")
        return result.matched_count

    async def push_to_array(
        self,
        collection: str,
        doc_id: ObjectId,
        field: str,
        value: Any
    ) -> int:
        """
        Append a value to an array field unless it is already present.

        Uses a single $addToSet so the membership check and the append are
        one atomic document update.

        Returns:
            Number of matched documents (0 or 1)
        """
        result = await self.collection(collection).update_one(
            {'_id': doc_id},
            {'$addToSet': {field: value}}
        )
        logger.debug(
            f"{collection}.addToSet {doc_id} {field}={value} "
            f"matched={result.matched_count} modified={result.modified_count}"
        )
        return result.matched_count

    async def delete(self, collection: str, doc_id: ObjectId) -> int:
        """Hard delete by id, no cascade"""
        result = await self.collection(collection).delete_one({'_id': doc_id})
        logger.debug(f"{collection}.delete {doc_id} deleted={result.deleted_count}")
        return result.deleted_count
