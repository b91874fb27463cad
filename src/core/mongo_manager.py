"""
MongoDB Connection Manager

Manages MongoDB connections and provides database and collection access
for the task list service.
"""

from typing import Optional, Dict, Any
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from pymongo.errors import ConnectionFailure, PyMongoError, ServerSelectionTimeoutError
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from src.core.document_store import COURSES, TASK_LISTS, TODOS, USERS
from src.utils.logger import get_logger

logger = get_logger(__name__)


class MongoDBManager:
    """
    MongoDB Connection Manager

    Provides both sync and async MongoDB connections with connection pooling.
    The async client serves GraphQL requests; the sync client is used for
    index creation, health checks and maintenance scripts.
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize MongoDB Manager

        Args:
            config: MongoDB configuration from config.yaml
        """
        self.config = config
        self.uri = config.get('uri') or 'mongodb://localhost:27017'
        self.database_name = config.get('database') or 'task_graph'

        # Connection pool settings
        self.max_pool_size = int(config.get('max_pool_size', 100))
        self.min_pool_size = int(config.get('min_pool_size', 10))

        # Collection names mapping
        self.collections: Dict[str, str] = config.get('collections') or {}

        self._sync_client: Optional[MongoClient] = None
        self._sync_db: Optional[Database] = None

        self._async_client: Optional[AsyncIOMotorClient] = None
        self._async_db: Optional[AsyncIOMotorDatabase] = None

        logger.info(f"MongoDB Manager initialized for database: {self.database_name}")

    def _client_options(self) -> Dict[str, Any]:
        return {
            'maxPoolSize': self.max_pool_size,
            'minPoolSize': self.min_pool_size,
            'serverSelectionTimeoutMS': 5000,
            'connectTimeoutMS': 10000,
            'socketTimeoutMS': 30000,
        }

    def connect_sync(self) -> MongoClient:
        """
        Create synchronous MongoDB connection

        Returns:
            MongoClient instance
        """
        if self._sync_client is None:
            try:
                self._sync_client = MongoClient(self.uri, **self._client_options())

                # Test connection
                self._sync_client.admin.command('ping')
                logger.info("✅ Synchronous MongoDB connection established")

                self._sync_db = self._sync_client[self.database_name]

                if self.config.get('auto_create_indexes', True):
                    self._create_indexes(self._sync_db)

            except (ConnectionFailure, ServerSelectionTimeoutError) as e:
                logger.error(f"❌ Failed to connect to MongoDB: {e}")
                self._sync_client = None
                raise

        return self._sync_client

    def connect_async(self) -> AsyncIOMotorClient:
        """
        Create asynchronous MongoDB connection (for FastAPI)

        Returns:
            AsyncIOMotorClient instance
        """
        if self._async_client is None:
            self._async_client = AsyncIOMotorClient(self.uri, **self._client_options())
            self._async_db = self._async_client[self.database_name]
            logger.info("✅ Asynchronous MongoDB connection established")

        return self._async_client

    @property
    def db(self) -> Database:
        """Get synchronous database instance"""
        if self._sync_db is None:
            self.connect_sync()
        return self._sync_db

    @property
    def async_db(self) -> AsyncIOMotorDatabase:
        """Get asynchronous database instance"""
        if self._async_db is None:
            self.connect_async()
        return self._async_db

    def get_collection(self, collection_name: str) -> Collection:
        """
        Get collection by logical name (synchronous)

        Args:
            collection_name: Logical name of the collection

        Returns:
            Collection instance
        """
        actual_name = self.collections.get(collection_name, collection_name)
        return self.db[actual_name]

    def _create_indexes(self, db: Database):
        """Create indexes backing the filtered scans issued by resolvers"""
        logger.info("📊 Creating MongoDB indexes...")

        try:
            users = db[self.collections.get(USERS, USERS)]
            users.create_index('email')

            task_lists = db[self.collections.get(TASK_LISTS, TASK_LISTS)]
            task_lists.create_index('userIds')

            todos = db[self.collections.get(TODOS, TODOS)]
            todos.create_index([('taskListId', ASCENDING), ('isCompleted', ASCENDING)])

            courses = db[self.collections.get(COURSES, COURSES)]
            courses.create_index('divisionCode')
            courses.create_index('courseCode')

            logger.info("✅ Indexes created successfully")

        except PyMongoError as e:
            logger.warning(f"⚠️  Error creating indexes: {e}")

    def ping(self) -> bool:
        """Round-trip to the server with the sync client"""
        try:
            self.connect_sync().admin.command('ping')
            return True
        except PyMongoError as e:
            logger.error(f"❌ MongoDB ping failed: {e}")
            return False

    def close(self):
        """Close all MongoDB connections"""
        if self._sync_client:
            self._sync_client.close()
            self._sync_client = None
            self._sync_db = None
            logger.info("🔒 Closed synchronous MongoDB connection")

        if self._async_client:
            self._async_client.close()
            self._async_client = None
            self._async_db = None
            logger.info("🔒 Closed asynchronous MongoDB connection")


# Singleton instance
_mongo_manager: Optional[MongoDBManager] = None


def get_mongo_manager(config: Optional[Dict[str, Any]] = None) -> MongoDBManager:
    """
    Get MongoDB Manager singleton instance

    Args:
        config: MongoDB configuration (required on first call)

    Returns:
        MongoDBManager instance
    """
    global _mongo_manager

    if _mongo_manager is None:
        if config is None:
            raise ValueError("MongoDB configuration required for first initialization")
        _mongo_manager = MongoDBManager(config)

    return _mongo_manager


def close_mongo_manager():
    """Close MongoDB Manager and all connections"""
    global _mongo_manager
    if _mongo_manager:
        _mongo_manager.close()
        _mongo_manager = None
