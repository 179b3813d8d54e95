"""
Configuration values for GridFS buckets, uploads and catalog queries.
"""

from typing import Any, Dict, List, Optional, Protocol, Tuple, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict
from pymongo.read_concern import ReadConcern
from pymongo.write_concern import WriteConcern

from .constants import Collections, DEFAULT_BUCKET_NAME, DEFAULT_CHUNK_SIZE_BYTES


SortSpec = Union[List[Tuple[str, int]], Dict[str, int]]


@runtime_checkable
class ProgressListener(Protocol):
    """Receives the cumulative number of bytes written after each chunk."""

    def on_progress(self, bytes_written: int) -> None:
        ...


class GridFSBucketOptions(BaseModel):
    """
    Bucket level options.

    ``write_concern``, ``read_concern`` and ``read_preference`` default to
    ``None``, which means the values of the database are inherited.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    bucket_name: str = DEFAULT_BUCKET_NAME
    chunk_size_bytes: int = DEFAULT_CHUNK_SIZE_BYTES
    disable_md5: bool = False
    write_concern: Optional[WriteConcern] = None
    read_concern: Optional[ReadConcern] = None
    # Any pymongo read preference (ReadPreference.SECONDARY, Nearest(), ...)
    read_preference: Optional[Any] = None

    @property
    def files_collection(self) -> str:
        return f"{self.bucket_name}.{Collections.FILES}"

    @property
    def chunks_collection(self) -> str:
        return f"{self.bucket_name}.{Collections.CHUNKS}"

    @classmethod
    def from_settings(cls, settings) -> "GridFSBucketOptions":
        """Build bucket options from the process settings."""
        return cls(
            bucket_name=settings.GRIDFS_BUCKET_NAME,
            chunk_size_bytes=settings.GRIDFS_CHUNK_SIZE_BYTES,
            disable_md5=settings.GRIDFS_DISABLE_MD5,
        )


class GridFSUploadOptions(BaseModel):
    """Per-upload options. Unset values fall back to the bucket options."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    chunk_size_bytes: Optional[int] = None
    # Stored as given (dict, SON, RawBSONDocument); omitted when not provided
    metadata: Optional[Any] = None
    # Any object implementing ProgressListener
    progress: Optional[Any] = None


class GridFSFindOptions(BaseModel):
    """Options for a find on the files collection."""

    model_config = ConfigDict(frozen=True)

    allow_disk_use: Optional[bool] = None
    batch_size: Optional[int] = None
    limit: Optional[int] = None
    max_time_ms: Optional[int] = None
    no_cursor_timeout: Optional[bool] = None
    skip: int = 0
    sort: Optional[SortSpec] = None

    def to_find_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``Collection.find``; only the values that were set."""
        kwargs: Dict[str, Any] = {"skip": self.skip}
        if self.allow_disk_use is not None:
            kwargs["allow_disk_use"] = self.allow_disk_use
        if self.batch_size is not None:
            kwargs["batch_size"] = self.batch_size
        if self.limit is not None:
            kwargs["limit"] = self.limit
        if self.max_time_ms is not None:
            kwargs["max_time_ms"] = self.max_time_ms
        if self.no_cursor_timeout is not None:
            kwargs["no_cursor_timeout"] = self.no_cursor_timeout
        if self.sort is not None:
            sort = self.sort
            if isinstance(sort, dict):
                sort = list(sort.items())
            kwargs["sort"] = list(sort)
        return kwargs
