from typing import Any

from bson.errors import BSONError
from pymongo.errors import PyMongoError

# Driver, network, command and BSON encoding errors all count as store failures
STORE_ERRORS = (PyMongoError, BSONError)


class GridFSError(Exception):
    """Base class for every error raised by a GridFS bucket."""


class StoreFailure(GridFSError):
    """A MongoDB operation failed. The driver error is kept on ``cause``."""

    def __init__(self, cause: Exception):
        super().__init__(str(cause))
        self.cause = cause


class FileNotFound(GridFSError):
    """No files collection document exists for the requested id."""

    def __init__(self, file_id: Any):
        super().__init__(f"File not found: {file_id}")
        self.file_id = file_id
