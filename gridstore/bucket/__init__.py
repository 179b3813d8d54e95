"""
GridFS bucket: chunked file storage over a files and a chunks collection.
"""

from .bucket import GridFSBucket
from .catalog import FilesCursor
from .constants import ChunkFields, Collections, FileFields, DEFAULT_CHUNK_SIZE_BYTES
from .errors import STORE_ERRORS, FileNotFound, GridFSError, StoreFailure
from .indexes import IndexProvisioner, ProvisionState, is_ascending
from .options import (
    GridFSBucketOptions,
    GridFSFindOptions,
    GridFSUploadOptions,
    ProgressListener,
)

__all__ = [
    "GridFSBucket",
    "FilesCursor",

    # Options
    "GridFSBucketOptions",
    "GridFSFindOptions",
    "GridFSUploadOptions",
    "ProgressListener",

    # Errors
    "GridFSError",
    "StoreFailure",
    "FileNotFound",
    "STORE_ERRORS",

    # Indexes
    "IndexProvisioner",
    "ProvisionState",
    "is_ascending",

    # Constants
    "Collections",
    "FileFields",
    "ChunkFields",
    "DEFAULT_CHUNK_SIZE_BYTES",
]
