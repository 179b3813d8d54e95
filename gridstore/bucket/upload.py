"""
Chunk writer: streams a byte source into chunk documents.
"""

import asyncio
import hashlib
import inspect
import io
from datetime import datetime, timezone
from typing import Any, Optional

from bson import Binary, Int64, ObjectId

from gridstore.utils.logger import logger
from .constants import ChunkFields, FileFields
from .errors import STORE_ERRORS, StoreFailure
from .indexes import IndexProvisioner
from .options import GridFSBucketOptions, GridFSUploadOptions


async def _read(source, size: int) -> bytes:
    if inspect.iscoroutinefunction(source.read):
        data = await source.read(size)
    elif isinstance(source, io.BytesIO):
        data = source.read(size)
    else:
        # Blocking reads (files, sockets) run off the event loop
        data = await asyncio.to_thread(source.read, size)
        if inspect.isawaitable(data):
            data = await data
    return data or b""


async def read_chunk(source, size: int) -> bytes:
    """
    Read up to ``size`` bytes from ``source``.

    Short reads are topped up until the chunk is full or the source is
    exhausted, so only the final chunk of a stream can be shorter than
    ``size``.
    """
    buffer = bytearray()
    while len(buffer) < size:
        data = await _read(source, size - len(buffer))
        if not data:
            break
        buffer.extend(data)
    return bytes(buffer)


def as_byte_source(source: Any):
    """Wrap bytes-like values so every source exposes ``read(size)``."""
    if isinstance(source, (bytes, bytearray, memoryview)):
        return io.BytesIO(bytes(source))
    if not hasattr(source, "read"):
        raise TypeError(f"Expected a bytes-like object or a readable source, got {type(source).__name__}")
    return source


class ChunkWriter:
    """Writes one file at a time into the files/chunks collections of a bucket."""

    def __init__(self, files, chunks, provisioner: IndexProvisioner, options: GridFSBucketOptions):
        self._files = files
        self._chunks = chunks
        self._provisioner = provisioner
        self._options = options

    async def upload(
        self,
        filename: str,
        source: Any,
        options: Optional[GridFSUploadOptions] = None
    ) -> ObjectId:
        """
        Upload ``source`` as ``filename`` and return the generated file id.

        The files document is inserted first, then the chunks, then the
        document is finalized with ``length``, ``uploadDate`` and ``md5``.
        Nothing is rolled back on failure.

        Args:
            filename: Stored filename (not validated)
            source: bytes-like object, or an object with a sync or async ``read(size)``
            options: Per-upload chunk size, metadata and progress listener

        Returns:
            ObjectId of the new files document
        """
        options = options or GridFSUploadOptions()
        chunk_size = options.chunk_size_bytes
        if chunk_size is None:
            chunk_size = self._options.chunk_size_bytes
        source = as_byte_source(source)
        file_id = None

        try:
            await self._provisioner.ensure_indexes()

            file_document = {
                FileFields.FILENAME: filename,
                FileFields.CHUNK_SIZE: chunk_size,
            }
            if options.metadata is not None:
                file_document[FileFields.METADATA] = options.metadata

            result = await self._files.insert_one(file_document)
            file_id = result.inserted_id

            md5 = None if self._options.disable_md5 else hashlib.md5()
            length = 0
            n = 0
            while True:
                data = await read_chunk(source, chunk_size)
                if not data:
                    break

                await self._chunks.insert_one({
                    ChunkFields.FILES_ID: file_id,
                    ChunkFields.N: n,
                    ChunkFields.DATA: Binary(data),
                })
                if md5 is not None:
                    md5.update(data)
                length += len(data)
                n += 1

                if options.progress is not None:
                    options.progress.on_progress(length)

            update = {
                FileFields.LENGTH: Int64(length),
                FileFields.UPLOAD_DATE: datetime.now(timezone.utc),
            }
            if md5 is not None:
                update[FileFields.MD5] = md5.hexdigest()

            await self._files.update_one({FileFields.ID: file_id}, {"$set": update})

        except STORE_ERRORS as e:
            logger.error(
                "Error uploading file to GridFS",
                filename=filename,
                file_id=str(file_id) if file_id else None,
                error_type=type(e).__name__,
                error_message=str(e)
            )
            raise StoreFailure(e) from e

        logger.info(
            "File uploaded to GridFS",
            file_id=str(file_id),
            filename=filename,
            length=length,
            chunks=n,
            chunk_size=chunk_size
        )

        return file_id
