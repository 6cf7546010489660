"""
MongoDB Connection Utility

MongoDB stores:
- Uploaded resume files (GridFS bucket, object names prefixed by user id)
- AI resume analyses (free-form JSON returned by the AI gateway)

Relational tracker data lives in PostgreSQL; nothing here is joined
against it except by user id.
"""
from gridfs import GridFSBucket
from loguru import logger
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from app.core.config import get_settings

settings = get_settings()

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the tracker documents database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """Get a specific collection."""
    db = get_mongo_db()
    return db[name]


def get_resume_bucket() -> GridFSBucket:
    """GridFS bucket holding uploaded resume files."""
    return GridFSBucket(get_mongo_db(), bucket_name=settings.resume_bucket)


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: {}", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "resume_analyses": "resume_analyses",
    "resume_files": f"{settings.resume_bucket}.files",
}


def init_mongo_indexes():
    """
    Create indexes for better query performance.
    Call this once during app startup.
    """
    db = get_mongo_db()

    db[COLLECTIONS["resume_analyses"]].create_index([("user_id", 1), ("created_at", -1)])

    # Object names are unique per bucket, mirroring a storage path
    db[COLLECTIONS["resume_files"]].create_index("filename", unique=True)
    db[COLLECTIONS["resume_files"]].create_index("metadata.user_id")

    logger.info("MongoDB indexes created")
