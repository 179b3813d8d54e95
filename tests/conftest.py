"""Shared pytest fixtures for all test suites."""

import pytest

from gridstore.bucket import GridFSBucket, GridFSBucketOptions
from tests.fakes import FakeDatabase


@pytest.fixture
def db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def bucket(db) -> GridFSBucket:
    return GridFSBucket(db)


@pytest.fixture
def small_bucket(db) -> GridFSBucket:
    """Bucket with a 4 byte default chunk size."""
    return GridFSBucket(db, GridFSBucketOptions(chunk_size_bytes=4))


async def read_all(stream) -> list:
    """Collect every chunk produced by a download stream."""
    return [chunk async for chunk in stream]
