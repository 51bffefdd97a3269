import logging
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, PyMongoError

logger = logging.getLogger(__name__)

# Set pymongo logger to WARNING to reduce noise from driver-level logs
pymongo_logger = logging.getLogger('pymongo')
pymongo_logger.setLevel(logging.WARNING)

USERS_COLLECTION_NAME = 'users'


def create_mongodb_client(url: str | None) -> MongoClient | None:
    """Create a MongoDB client and verify it with a ping.

    The caller owns the returned client and must close it on shutdown.

    Returns:
        MongoDB client or None if the URL is missing or the server is unreachable
    """
    if not url:
        logger.error("[MONGODB] MONGODB_URL not configured.")
        return None

    try:
        client = MongoClient(
            url,
            serverSelectionTimeoutMS=5000,  # 5s timeout for server selection
            connectTimeoutMS=5000,  # 5s timeout for initial connection
            socketTimeoutMS=30000,  # 30s timeout for operations
            maxPoolSize=10,
            minPoolSize=0,
            maxIdleTimeMS=30000,
            waitQueueTimeoutMS=10000,
            retryWrites=True,
            retryReads=True,
        )
        client.admin.command('ping')
        logger.info("[MONGODB] Connected successfully")
        return client
    except (ConnectionFailure, PyMongoError) as e:
        logger.error(f"[MONGODB] Initial connection failed: {str(e)[:200]}")
        return None


def ping(db: Database) -> bool:
    """Return True if the server behind ``db`` answers a ping."""
    try:
        db.client.admin.command('ping')
        return True
    except PyMongoError as e:
        logger.warning("[MONGODB] Ping failed", extra={"error": str(e)[:200]})
        return False
