"""
Lazy provisioning of the indexes GridFS needs before the first write.
"""

import asyncio
import enum
import numbers
from typing import Any, List, Mapping, Tuple

from gridstore.utils.logger import logger
from .constants import CHUNKS_INDEX_KEYS, FILES_INDEX_KEYS, FileFields
from .errors import STORE_ERRORS, StoreFailure


class ProvisionState(enum.Enum):
    UNPROVISIONED = "unprovisioned"
    IN_PROGRESS = "in_progress"
    READY = "ready"


def is_ascending(value: Any) -> bool:
    """
    True when an index direction means ascending.

    The server may report the direction as an int ``1`` or as a float
    numerically equal to 1, depending on how the index was created.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    if isinstance(value, numbers.Integral):
        return value == 1
    return abs(float(value) - 1.0) < 0.0001


def index_key_matches(key: Mapping[str, Any], required: List[Tuple[str, int]]) -> bool:
    """Check an index ``key`` document against a compound ascending key."""
    fields = list(key.keys())
    if fields != [name for name, _ in required]:
        return False
    return all(is_ascending(key[name]) for name in fields)


class IndexProvisioner:
    """
    Ensures the files and chunks indexes exist, once per bucket instance.

    The state is never shared between bucket instances; two instances racing
    on an empty bucket may both issue the (idempotent) create requests.
    """

    def __init__(self, database, files, chunks):
        self._database = database
        self._files = files
        self._chunks = chunks
        self._lock = asyncio.Lock()
        self.state = ProvisionState.UNPROVISIONED

    @property
    def is_ready(self) -> bool:
        return self.state is ProvisionState.READY

    async def ensure_indexes(self) -> None:
        if self.is_ready:
            return

        async with self._lock:
            if self.is_ready:
                return

            self.state = ProvisionState.IN_PROGRESS
            try:
                existing = await self._files.find_one({}, projection={FileFields.ID: 1})
                if existing is None:
                    await self._ensure_collection_index(self._files, FILES_INDEX_KEYS)
                    await self._ensure_collection_index(self._chunks, CHUNKS_INDEX_KEYS)
                else:
                    logger.info(
                        "Files collection not empty, skipping index check",
                        collection=self._files.name
                    )
            except STORE_ERRORS as e:
                self.state = ProvisionState.UNPROVISIONED
                logger.error(
                    "Error ensuring GridFS indexes",
                    collection=self._files.name,
                    error_type=type(e).__name__,
                    error_message=str(e)
                )
                raise StoreFailure(e) from e
            except BaseException:
                self.state = ProvisionState.UNPROVISIONED
                raise

            self.state = ProvisionState.READY

    async def _ensure_collection_index(self, collection, required: List[Tuple[str, int]]) -> None:
        name = collection.name

        names = await self._database.list_collection_names(filter={"name": name})
        if not names:
            await self._database.create_collection(name)
            logger.info("Collection created", collection=name)

        async for index in collection.list_indexes():
            if index_key_matches(index["key"], required):
                return

        index_name = f"{name}_index"
        await collection.create_index(required, name=index_name)
        logger.info("Index created", collection=name, index=index_name)
