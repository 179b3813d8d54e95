from typing import Optional

import motor.motor_asyncio

from gridstore.bucket import GridFSBucket, GridFSBucketOptions
from gridstore.config.config import settings
from gridstore.utils.logger import logger

# Thread-local storage for MongoDB clients
import threading
_thread_local = threading.local()


def get_mongo_client():
    """Get MongoDB client - creates new instance per thread for safety."""
    if not hasattr(_thread_local, 'client') or _thread_local.client is None:
        logger.info("Creating new MongoDB client for thread", thread_id=threading.get_ident())
        _thread_local.client = motor.motor_asyncio.AsyncIOMotorClient(settings.MONGO_URI)
        _thread_local.db = _thread_local.client[settings.MONGO_DB]
    return _thread_local.client, _thread_local.db


def get_database():
    """Get the configured MongoDB database."""
    _, db = get_mongo_client()
    return db


def get_bucket(options: Optional[GridFSBucketOptions] = None) -> GridFSBucket:
    """
    Create a GridFS bucket on the configured database

    Args:
        options: Bucket options, defaults to the ones built from settings

    Returns:
        New bucket handle (index provisioning state is per handle)
    """
    options = options or GridFSBucketOptions.from_settings(settings)
    bucket = GridFSBucket(get_database(), options)

    logger.info(
        "GridFS bucket created",
        database=settings.MONGO_DB,
        bucket=options.bucket_name,
        chunk_size=options.chunk_size_bytes
    )

    return bucket


async def ping_mongodb():
    """Check if MongoDB connection is alive."""
    try:
        client, _ = get_mongo_client()
        await client.admin.command('ping')
        return True
    except Exception as e:
        logger.warning("MongoDB ping failed", error_type=type(e).__name__, error_message=str(e))
        return False


async def close_mongodb():
    """Close MongoDB connection for current thread."""
    if hasattr(_thread_local, 'client') and _thread_local.client:
        _thread_local.client.close()
        _thread_local.client = None
        _thread_local.db = None
