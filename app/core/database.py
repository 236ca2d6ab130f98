from typing import Optional
from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from app.core.config import settings
import structlog

logger = structlog.get_logger()

_client: Optional[AsyncMongoClient] = None


def get_client() -> AsyncMongoClient:
    """Shared MongoDB client (lazy; no I/O until the first operation)."""
    global _client
    if _client is None:
        logger.info("Creating MongoDB client", database=settings.mongo_database)
        _client = AsyncMongoClient(
            settings.mongo_uri,
            serverSelectionTimeoutMS=settings.mongo_server_selection_timeout_ms,
        )
    return _client


def get_database() -> AsyncDatabase:
    return get_client()[settings.mongo_database]


def get_collection(name: str) -> AsyncCollection:
    return get_database()[name]


async def ping_db() -> None:
    await get_client().admin.command("ping")
    logger.info("MongoDB ping succeeded", database=settings.mongo_database)


async def close_db() -> None:
    global _client
    if _client is not None:
        await _client.close()
        _client = None
