"""
Infrastructure layer for gridstore.
Handles the MongoDB client and bucket construction.
"""

from .database import get_bucket, get_database, ping_mongodb, close_mongodb

__all__ = [
    "get_bucket",
    "get_database",
    "ping_mongodb",
    "close_mongodb"
]
