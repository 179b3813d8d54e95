"""
Catalog operations on a bucket: delete, rename, find, drop.
"""

from typing import Any, Dict, List, Optional

from pymongo.results import UpdateResult

from gridstore.utils.logger import logger
from .constants import ChunkFields, FileFields
from .errors import STORE_ERRORS, FileNotFound, StoreFailure
from .options import GridFSFindOptions


class Catalog:
    """Keeps the files and chunks collections of a bucket consistent."""

    def __init__(self, files, chunks):
        self._files = files
        self._chunks = chunks

    async def delete(self, file_id: Any) -> int:
        """
        Delete a files document and every chunk that references it.

        Args:
            file_id: Id of the files collection document

        Returns:
            Number of chunk documents deleted

        Raises:
            FileNotFound: no files document matched; chunks are left untouched
        """
        try:
            result = await self._files.delete_one({FileFields.ID: file_id})
            if result.deleted_count == 0:
                logger.warning("File not found for delete", file_id=str(file_id))
                raise FileNotFound(file_id)

            chunks_result = await self._chunks.delete_many({ChunkFields.FILES_ID: file_id})

        except STORE_ERRORS as e:
            logger.error(
                "Error deleting GridFS file",
                file_id=str(file_id),
                error_type=type(e).__name__,
                error_message=str(e)
            )
            raise StoreFailure(e) from e

        logger.info(
            "GridFS file deleted",
            file_id=str(file_id),
            deleted_chunks=chunks_result.deleted_count
        )
        return chunks_result.deleted_count

    async def rename(self, file_id: Any, new_filename: str) -> UpdateResult:
        """Set the filename of a stored file. An unknown id matches nothing and is not an error."""
        try:
            result = await self._files.update_one(
                {FileFields.ID: file_id},
                {"$set": {FileFields.FILENAME: new_filename}}
            )
        except STORE_ERRORS as e:
            logger.error(
                "Error renaming GridFS file",
                file_id=str(file_id),
                error_type=type(e).__name__,
                error_message=str(e)
            )
            raise StoreFailure(e) from e

        logger.info(
            "GridFS file renamed",
            file_id=str(file_id),
            new_filename=new_filename,
            matched_count=result.matched_count
        )
        return result

    def find(self, filter: Dict[str, Any], options: Optional[GridFSFindOptions] = None) -> "FilesCursor":
        """
        Find files collection documents matching ``filter``.

        The filter is passed through unchanged. The returned cursor is lazy:
        no round trip happens until it is iterated.
        """
        options = options or GridFSFindOptions()
        return FilesCursor(self._files.find(filter, **options.to_find_kwargs()))

    async def drop(self) -> None:
        """Drop the files and chunks collections. Absent collections are ignored."""
        try:
            await self._files.drop()
            await self._chunks.drop()
        except STORE_ERRORS as e:
            logger.error(
                "Error dropping GridFS bucket",
                files=self._files.name,
                chunks=self._chunks.name,
                error_type=type(e).__name__,
                error_message=str(e)
            )
            raise StoreFailure(e) from e

        logger.info("GridFS bucket dropped", files=self._files.name, chunks=self._chunks.name)


class FilesCursor:
    """
    Forward cursor over files collection documents.

    Wraps the driver cursor so that errors raised while fetching batches
    surface as ``StoreFailure``. The driver cursor stays reachable as
    ``cursor``.
    """

    def __init__(self, cursor):
        self.cursor = cursor
        self._iterator = None

    def __aiter__(self):
        return self

    async def __anext__(self) -> Dict[str, Any]:
        if self._iterator is None:
            self._iterator = self.cursor.__aiter__()
        try:
            return await self._iterator.__anext__()
        except STORE_ERRORS as e:
            self._log_failure(e)
            raise StoreFailure(e) from e

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        try:
            return await self.cursor.to_list(length)
        except STORE_ERRORS as e:
            self._log_failure(e)
            raise StoreFailure(e) from e

    def _log_failure(self, error: Exception) -> None:
        logger.error(
            "Error querying GridFS files",
            error_type=type(error).__name__,
            error_message=str(error)
        )
