"""
GridFS bucket handle: a name prefix over a files and a chunks collection.
"""

from typing import Any, AsyncIterator, Dict, Optional, Tuple

from bson import ObjectId
from pymongo.results import UpdateResult

from .catalog import Catalog, FilesCursor
from .download import ChunkReader
from .indexes import IndexProvisioner
from .options import GridFSBucketOptions, GridFSFindOptions, GridFSUploadOptions
from .upload import ChunkWriter


class GridFSBucket:
    """
    Entry point for storing and reading files on a motor database.

    Example::

        bucket = GridFSBucket(db)
        file_id = await bucket.upload_from_stream("test.txt", b"test data")
        stream = await bucket.open_download_stream(file_id)
        data = b"".join([chunk async for chunk in stream])
    """

    def __init__(self, database, options: Optional[GridFSBucketOptions] = None):
        self.database = database
        self.options = options or GridFSBucketOptions()

        collection_options = dict(
            write_concern=self.options.write_concern,
            read_concern=self.options.read_concern,
            read_preference=self.options.read_preference,
        )
        self.files = database.get_collection(self.options.files_collection, **collection_options)
        self.chunks = database.get_collection(self.options.chunks_collection, **collection_options)

        self.indexes = IndexProvisioner(database, self.files, self.chunks)
        self._writer = ChunkWriter(self.files, self.chunks, self.indexes, self.options)
        self._reader = ChunkReader(self.files, self.chunks)
        self._catalog = Catalog(self.files, self.chunks)

    @property
    def bucket_name(self) -> str:
        return self.options.bucket_name

    async def ensure_indexes(self) -> None:
        await self.indexes.ensure_indexes()

    async def upload_from_stream(
        self,
        filename: str,
        source: Any,
        options: Optional[GridFSUploadOptions] = None
    ) -> ObjectId:
        return await self._writer.upload(filename, source, options)

    async def upload_from_bytes(
        self,
        filename: str,
        data: bytes,
        options: Optional[GridFSUploadOptions] = None
    ) -> ObjectId:
        return await self._writer.upload(filename, data, options)

    async def open_download_stream(self, file_id: Any) -> AsyncIterator[bytes]:
        return await self._reader.open(file_id)

    async def open_download_stream_with_filename(self, file_id: Any) -> Tuple[AsyncIterator[bytes], str]:
        return await self._reader.open_with_filename(file_id)

    async def delete(self, file_id: Any) -> int:
        return await self._catalog.delete(file_id)

    async def rename(self, file_id: Any, new_filename: str) -> UpdateResult:
        return await self._catalog.rename(file_id, new_filename)

    def find(self, filter: Dict[str, Any], options: Optional[GridFSFindOptions] = None) -> FilesCursor:
        return self._catalog.find(filter, options)

    async def drop(self) -> None:
        await self._catalog.drop()
