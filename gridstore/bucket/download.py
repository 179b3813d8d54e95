"""
Chunk reader: resolves a file id and yields its chunk payloads in order.
"""

from typing import Any, AsyncIterator, Tuple

from pymongo import ASCENDING

from gridstore.utils.logger import logger
from .constants import ChunkFields, FileFields
from .errors import STORE_ERRORS, FileNotFound, StoreFailure


class ChunkReader:
    """Reads stored files back as a lazy sequence of chunk buffers."""

    def __init__(self, files, chunks):
        self._files = files
        self._chunks = chunks

    async def open_with_filename(self, file_id: Any) -> Tuple[AsyncIterator[bytes], str]:
        """
        Open a stored file for reading.

        Args:
            file_id: Id of the files collection document

        Returns:
            Tuple of an async iterator over the chunk payloads (one ``bytes``
            per chunk document, in ``n`` order) and the stored filename

        Raises:
            FileNotFound: no files document has this id; no chunk query is issued
            StoreFailure: the lookup or a later cursor fetch failed
        """
        try:
            file_doc = await self._files.find_one({FileFields.ID: file_id})
        except STORE_ERRORS as e:
            logger.error(
                "Error looking up GridFS file",
                file_id=str(file_id),
                error_type=type(e).__name__,
                error_message=str(e)
            )
            raise StoreFailure(e) from e

        if file_doc is None:
            logger.warning("File not found in GridFS", file_id=str(file_id))
            raise FileNotFound(file_id)

        cursor = self._chunks.find(
            {ChunkFields.FILES_ID: file_id},
            sort=[(ChunkFields.N, ASCENDING)]
        )
        return self._iter_chunks(cursor, file_id), file_doc.get(FileFields.FILENAME)

    async def open(self, file_id: Any) -> AsyncIterator[bytes]:
        stream, _ = await self.open_with_filename(file_id)
        return stream

    async def _iter_chunks(self, cursor, file_id: Any) -> AsyncIterator[bytes]:
        try:
            async for chunk in cursor:
                yield bytes(chunk[ChunkFields.DATA])
        except STORE_ERRORS as e:
            logger.error(
                "Error reading GridFS chunks",
                file_id=str(file_id),
                error_type=type(e).__name__,
                error_message=str(e)
            )
            raise StoreFailure(e) from e
