"""
Database infrastructure for gridstore.
"""

from .mongodb import (
    get_mongo_client,
    get_database,
    get_bucket,
    ping_mongodb,
    close_mongodb
)

__all__ = [
    "get_mongo_client",
    "get_database",
    "get_bucket",
    "ping_mongodb",
    "close_mongodb",
]
