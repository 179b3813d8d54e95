#!/usr/bin/env python3
"""
Command line entry point for gridstore.
Usage:
  python main.py upload ./report.pdf          # Store a file, prints its id
  python main.py download <id> ./report.pdf   # Write a stored file to disk
  python main.py ls                           # List stored files
  python main.py --help                       # Show help
"""

import os
import sys
import argparse
import asyncio
import inspect
import json

from bson import ObjectId
from bson.errors import InvalidId

# Add current directory to Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))


class PrintProgress:
    """Progress listener printing the bytes written so far."""

    def __init__(self, total: int = None):
        self.total = total

    def on_progress(self, bytes_written: int) -> None:
        if self.total:
            percent = bytes_written * 100 // self.total
            print(f"\r📤 {bytes_written}/{self.total} bytes ({percent}%)", end="", flush=True)
        else:
            print(f"\r📤 {bytes_written} bytes", end="", flush=True)


def parse_object_id(value: str) -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise argparse.ArgumentTypeError(f"not a valid ObjectId: {value}")


async def upload(args):
    from gridstore.bucket import GridFSUploadOptions
    from gridstore.infrastructure.database import get_bucket, close_mongodb

    metadata = json.loads(args.metadata) if args.metadata else None
    filename = args.filename or os.path.basename(args.path)

    bucket = get_bucket()
    try:
        with open(args.path, "rb") as source:
            options = GridFSUploadOptions(
                chunk_size_bytes=args.chunk_size,
                metadata=metadata,
                progress=PrintProgress(os.path.getsize(args.path)),
            )
            file_id = await bucket.upload_from_stream(filename, source, options)
        print()
        print(f"✅ Uploaded {filename}: {file_id}")
    finally:
        await close_mongodb()


async def download(args):
    from gridstore.infrastructure.database import get_bucket, close_mongodb

    bucket = get_bucket()
    try:
        stream, filename = await bucket.open_download_stream_with_filename(args.file_id)
        written = 0
        with open(args.output, "wb") as target:
            async for chunk in stream:
                target.write(chunk)
                written += len(chunk)
        print(f"✅ Downloaded {filename} ({written} bytes) to {args.output}")
    finally:
        await close_mongodb()


async def list_files(args):
    from gridstore.bucket import GridFSFindOptions, FileFields
    from gridstore.infrastructure.database import get_bucket, close_mongodb

    query = {FileFields.FILENAME: args.filename} if args.filename else {}
    options = GridFSFindOptions(
        limit=args.limit,
        skip=args.skip,
        sort=[(FileFields.UPLOAD_DATE, -1)],
    )

    bucket = get_bucket()
    try:
        count = 0
        async for file_doc in bucket.find(query, options):
            count += 1
            print(
                f"  {file_doc[FileFields.ID]}  "
                f"{file_doc.get(FileFields.LENGTH, '?'):>12}  "
                f"{file_doc.get(FileFields.UPLOAD_DATE, 'incomplete')}  "
                f"{file_doc.get(FileFields.FILENAME)}"
            )
        print(f"📋 {count} file(s) in bucket '{bucket.bucket_name}'")
    finally:
        await close_mongodb()


async def remove(args):
    from gridstore.infrastructure.database import get_bucket, close_mongodb

    bucket = get_bucket()
    try:
        deleted_chunks = await bucket.delete(args.file_id)
        print(f"🗑️  Deleted {args.file_id} ({deleted_chunks} chunks)")
    finally:
        await close_mongodb()


async def rename(args):
    from gridstore.infrastructure.database import get_bucket, close_mongodb

    bucket = get_bucket()
    try:
        result = await bucket.rename(args.file_id, args.new_filename)
        if result.matched_count:
            print(f"✅ Renamed {args.file_id} to {args.new_filename}")
        else:
            print(f"⚠️  No file with id {args.file_id}, nothing renamed")
    finally:
        await close_mongodb()


async def drop(args):
    from gridstore.infrastructure.database import get_bucket, close_mongodb

    bucket = get_bucket()
    try:
        await bucket.drop()
        print(f"🗑️  Dropped bucket '{bucket.bucket_name}'")
    finally:
        await close_mongodb()


def start_health_check(args):
    """Run system health check."""
    print("🏥 Running system health check...")
    from gridstore.health import print_health_status
    print_health_status()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="GridFS file storage on MongoDB",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py upload ./report.pdf --chunk-size 1048576
  python main.py download 65f0c0ffee0000000000beef ./report.pdf
  python main.py ls --filename report.pdf
  python main.py mv 65f0c0ffee0000000000beef report-2024.pdf
  python main.py rm 65f0c0ffee0000000000beef
  python main.py health
        """
    )
    commands = parser.add_subparsers(dest="command", required=True)

    upload_parser = commands.add_parser("upload", help="Upload a local file")
    upload_parser.add_argument("path", help="Local file to upload")
    upload_parser.add_argument("--filename", help="Stored filename (default: basename of path)")
    upload_parser.add_argument("--chunk-size", type=int, help="Chunk size in bytes")
    upload_parser.add_argument("--metadata", help="JSON object stored as metadata")
    upload_parser.set_defaults(handler=upload)

    download_parser = commands.add_parser("download", help="Download a stored file by id")
    download_parser.add_argument("file_id", type=parse_object_id)
    download_parser.add_argument("output", help="Local destination path")
    download_parser.set_defaults(handler=download)

    ls_parser = commands.add_parser("ls", help="List stored files")
    ls_parser.add_argument("--filename", help="Only files with this exact filename")
    ls_parser.add_argument("--limit", type=int, default=None)
    ls_parser.add_argument("--skip", type=int, default=0)
    ls_parser.set_defaults(handler=list_files)

    rm_parser = commands.add_parser("rm", help="Delete a stored file and its chunks")
    rm_parser.add_argument("file_id", type=parse_object_id)
    rm_parser.set_defaults(handler=remove)

    mv_parser = commands.add_parser("mv", help="Rename a stored file")
    mv_parser.add_argument("file_id", type=parse_object_id)
    mv_parser.add_argument("new_filename")
    mv_parser.set_defaults(handler=rename)

    drop_parser = commands.add_parser("drop", help="Drop the whole bucket")
    drop_parser.add_argument("--yes", action="store_true", help="Confirm the irreversible drop")
    drop_parser.set_defaults(handler=drop)

    health_parser = commands.add_parser("health", help="Run system health check")
    health_parser.set_defaults(handler=start_health_check)

    return parser


def main(argv=None):
    """Main entry point with argument parsing."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "drop" and not args.yes:
        print("❌ Refusing to drop the bucket without --yes")
        return 1

    if not inspect.iscoroutinefunction(args.handler):
        args.handler(args)
        return 0

    from gridstore.bucket import GridFSError

    try:
        asyncio.run(args.handler(args))
    except GridFSError as e:
        print(f"❌ {e}")
        return 1
    except KeyboardInterrupt:
        print("\n🛑 Interrupted")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
