"""
GridFS collection and field name constants
"""

from pymongo import ASCENDING

DEFAULT_BUCKET_NAME = "fs"
DEFAULT_CHUNK_SIZE_BYTES = 255 * 1024


class Collections:
    """Suffixes appended to the bucket name to form collection names"""
    FILES = "files"
    CHUNKS = "chunks"


class FileFields:
    """Constants for files collection document fields"""
    ID = "_id"
    FILENAME = "filename"
    CHUNK_SIZE = "chunkSize"
    LENGTH = "length"
    UPLOAD_DATE = "uploadDate"
    MD5 = "md5"
    METADATA = "metadata"


class ChunkFields:
    """Constants for chunks collection document fields"""
    ID = "_id"
    FILES_ID = "files_id"
    N = "n"
    DATA = "data"


FILES_INDEX_KEYS = [(FileFields.FILENAME, ASCENDING), (FileFields.UPLOAD_DATE, ASCENDING)]
CHUNKS_INDEX_KEYS = [(ChunkFields.FILES_ID, ASCENDING), (ChunkFields.N, ASCENDING)]
