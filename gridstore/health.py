"""
Health check utilities for monitoring service status.
"""

import asyncio
from typing import Dict, Any

from gridstore.infrastructure.database import ping_mongodb, get_bucket
from gridstore.utils.logger import logger


async def check_mongodb_health() -> Dict[str, Any]:
    """Check MongoDB connection health."""
    try:
        is_connected = await ping_mongodb()
        return {
            "service": "mongodb",
            "status": "healthy" if is_connected else "unhealthy",
            "connected": is_connected
        }
    except Exception as e:
        return {
            "service": "mongodb",
            "status": "error",
            "error": str(e),
            "connected": False
        }


async def check_bucket_health() -> Dict[str, Any]:
    """Check that the GridFS bucket collections can be read."""
    try:
        bucket = get_bucket()
        files_count = await bucket.files.estimated_document_count()
        chunks_count = await bucket.chunks.estimated_document_count()
        return {
            "service": "gridfs",
            "status": "healthy",
            "bucket": bucket.bucket_name,
            "files_count": files_count,
            "chunks_count": chunks_count
        }
    except Exception as e:
        return {
            "service": "gridfs",
            "status": "error",
            "error": str(e)
        }


async def get_system_health() -> Dict[str, Any]:
    """Get comprehensive system health status."""
    try:
        logger.info("Running system health check")

        mongodb_health = await check_mongodb_health()
        health_checks = [mongodb_health]

        # The bucket check would only repeat the connection error
        if mongodb_health["status"] == "healthy":
            health_checks.append(await check_bucket_health())

        all_healthy = all(check["status"] == "healthy" for check in health_checks)
        any_error = any(check["status"] == "error" for check in health_checks)

        if all_healthy:
            overall_status = "healthy"
        elif any_error:
            overall_status = "error"
        else:
            overall_status = "degraded"

        result = {
            "overall_status": overall_status,
            "timestamp": asyncio.get_running_loop().time(),
            "services": health_checks
        }

        logger.info("System health check completed", overall_status=overall_status)
        return result

    except Exception as e:
        logger.error("Health check failed", error=str(e))
        return {
            "overall_status": "error",
            "error": str(e),
            "services": []
        }


def print_health_status():
    """Print health status to console."""
    async def _print_health():
        health = await get_system_health()

        print("🏥 System Health Check")
        print("=" * 50)
        print(f"Overall Status: {health['overall_status'].upper()}")
        print()

        for service in health.get('services', []):
            status_emoji = {
                'healthy': '✅',
                'unhealthy': '⚠️',
                'error': '❌'
            }.get(service['status'], '❓')

            print(f"{status_emoji} {service['service'].upper()}: {service['status']}")

            if service['status'] != 'healthy':
                if 'error' in service:
                    print(f"   Error: {service['error']}")
            else:
                if service['service'] == 'gridfs':
                    print(f"   Bucket: {service['bucket']}, Files: {service['files_count']}, Chunks: {service['chunks_count']}")

        print()

    asyncio.run(_print_health())


if __name__ == "__main__":
    print_health_status()
