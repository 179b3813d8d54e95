"""Tests for lazy index provisioning."""

import asyncio

import pytest
from bson import Int64
from bson.errors import InvalidDocument
from bson.son import SON
from pymongo.errors import AutoReconnect

from gridstore.bucket import GridFSBucket, ProvisionState, StoreFailure, is_ascending
from gridstore.bucket.indexes import index_key_matches

FILES_KEYS = [("filename", 1), ("uploadDate", 1)]


@pytest.mark.parametrize("value", [1, 1.0, Int64(1), 1.00001])
def test_is_ascending_accepts_numeric_one(value):
    assert is_ascending(value)


@pytest.mark.parametrize("value", [-1, 0, 2, 1.5, -1.0, True, "1", None, "text", "2dsphere"])
def test_is_ascending_rejects_everything_else(value):
    assert not is_ascending(value)


@pytest.mark.parametrize("key", [
    SON([("filename", 1), ("uploadDate", 1)]),
    SON([("filename", 1.0), ("uploadDate", 1.0)]),
    SON([("filename", 1), ("uploadDate", 1.0)]),
    SON([("filename", 1.0), ("uploadDate", 1)]),
])
def test_index_key_matches_mixed_int_and_float(key):
    assert index_key_matches(key, FILES_KEYS)


@pytest.mark.parametrize("key", [
    SON([("_id", 1)]),
    SON([("filename", 1)]),
    SON([("uploadDate", 1), ("filename", 1)]),
    SON([("filename", -1), ("uploadDate", 1)]),
    SON([("filename", 1), ("uploadDate", 1), ("length", 1)]),
])
def test_index_key_matches_rejects_other_keys(key):
    assert not index_key_matches(key, FILES_KEYS)


class TestIndexProvisioner:

    @pytest.mark.asyncio
    async def test_creates_collections_and_indexes_on_empty_bucket(self, db, bucket):
        await bucket.ensure_indexes()

        assert bucket.indexes.state is ProvisionState.READY
        assert {"fs.files", "fs.chunks"} <= set(db.collections)

        files_indexes = {index["name"]: index["key"] for index in db.indexes["fs.files"]}
        chunks_indexes = {index["name"]: index["key"] for index in db.indexes["fs.chunks"]}
        assert list(files_indexes["fs.files_index"].items()) == [("filename", 1), ("uploadDate", 1)]
        assert list(chunks_indexes["fs.chunks_index"].items()) == [("files_id", 1), ("n", 1)]

    @pytest.mark.asyncio
    async def test_second_call_does_no_store_work(self, db, bucket):
        await bucket.ensure_indexes()
        calls_after_first = len(db.calls)

        await bucket.ensure_indexes()

        assert len(db.calls) == calls_after_first

    @pytest.mark.asyncio
    async def test_only_first_upload_provisions(self, db, bucket):
        await bucket.upload_from_stream("a.txt", b"first")
        await bucket.upload_from_stream("b.txt", b"second")

        assert len(db.calls_to(operation="list_indexes")) == 2
        assert len(db.calls_to(operation="create_index")) == 2

    @pytest.mark.asyncio
    async def test_existing_files_skip_provisioning(self, db, bucket):
        await db["fs.files"].insert_one({"filename": "legacy.txt", "chunkSize": 4})

        await bucket.ensure_indexes()

        assert bucket.indexes.state is ProvisionState.READY
        assert db.calls_to(operation="list_indexes") == []
        assert db.calls_to(operation="create_index") == []
        assert db.calls_to(operation="create_collection") == []

    @pytest.mark.asyncio
    async def test_existence_check_only_fetches_id(self, db, bucket):
        await bucket.ensure_indexes()

        check = db.calls_to("fs.files", "find_one")[0]
        assert check[2] == ({},)
        assert check[3]["projection"] == {"_id": 1}

    @pytest.mark.asyncio
    async def test_existing_float_indexes_are_reused(self, db, bucket):
        await db.create_collection("fs.files")
        await db.create_collection("fs.chunks")
        db.indexes["fs.files"].append(
            SON([("v", 2), ("key", SON([("filename", 1.0), ("uploadDate", 1)])), ("name", "custom_files")])
        )
        db.indexes["fs.chunks"].append(
            SON([("v", 2), ("key", SON([("files_id", 1), ("n", 1.0)])), ("name", "custom_chunks")])
        )
        db.calls.clear()

        await bucket.ensure_indexes()

        assert db.calls_to(operation="create_collection") == []
        assert db.calls_to(operation="create_index") == []
        assert bucket.indexes.is_ready

    @pytest.mark.asyncio
    async def test_missing_collection_is_created_before_listing_indexes(self, db, bucket):
        await bucket.ensure_indexes()

        operations = [call[1] for call in db.calls if call[1] != "find_one"]
        assert operations[:4] == ["list_collection_names", "create_collection", "list_indexes", "create_index"]
        assert [call[2] for call in db.calls_to(operation="create_collection")] == [("fs.files",), ("fs.chunks",)]

    @pytest.mark.asyncio
    async def test_existence_check_does_not_create_files_collection(self, db, bucket):
        db.fail("list_collection_names", AutoReconnect("connection lost"))

        with pytest.raises(StoreFailure):
            await bucket.ensure_indexes()

        assert len(db.calls_to("fs.files", "find_one")) == 1
        assert "fs.files" not in db.collections

    @pytest.mark.asyncio
    async def test_failure_is_wrapped_and_retried_on_next_call(self, db, bucket):
        error = AutoReconnect("connection lost")
        db.fail("list_indexes", error)

        with pytest.raises(StoreFailure) as excinfo:
            await bucket.ensure_indexes()

        assert excinfo.value.cause is error
        assert excinfo.value.__cause__ is error
        assert bucket.indexes.state is ProvisionState.UNPROVISIONED

        db.failures.clear()
        await bucket.ensure_indexes()

        assert bucket.indexes.is_ready
        assert len(db.calls_to("fs.files", "create_index")) == 1

    @pytest.mark.asyncio
    async def test_encoding_failure_is_wrapped(self, db, bucket):
        error = InvalidDocument("cannot encode object")
        db.fail("find_one", error)

        with pytest.raises(StoreFailure) as excinfo:
            await bucket.ensure_indexes()

        assert excinfo.value.cause is error
        assert bucket.indexes.state is ProvisionState.UNPROVISIONED

    @pytest.mark.asyncio
    async def test_failed_provisioning_aborts_upload(self, db, bucket):
        db.fail("create_index", AutoReconnect("connection lost"))

        with pytest.raises(StoreFailure):
            await bucket.upload_from_stream("test.txt", b"test data")

        assert db.collections.get("fs.files", []) == []

    @pytest.mark.asyncio
    async def test_instances_do_not_share_state(self, db):
        first = GridFSBucket(db)
        second = GridFSBucket(db)

        await first.ensure_indexes()

        assert first.indexes.is_ready
        assert second.indexes.state is ProvisionState.UNPROVISIONED

        await second.ensure_indexes()

        # Still empty, so the second instance repeats the checks but finds the indexes
        assert len(db.calls_to(operation="list_indexes")) == 4
        assert len(db.calls_to(operation="create_index")) == 2

    @pytest.mark.asyncio
    async def test_concurrent_first_uploads_provision_once(self, db, bucket):
        await asyncio.gather(*[
            bucket.upload_from_stream(f"file-{i}.txt", b"payload") for i in range(5)
        ])

        assert len(db.calls_to("fs.files", "find_one")) == 1
        assert len(db.calls_to(operation="create_index")) == 2
        assert len(db.collections["fs.files"]) == 5
