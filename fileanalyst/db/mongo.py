"""Motor client for the API token store.

Only API tokens live in MongoDB; uploaded files are kept on local disk.
The client is created lazily so importing the app never opens a connection.
"""

import logging
import os

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)

logger = logging.getLogger(__name__)

MONGODB_URL = os.getenv("MONGODB_URL", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "fileanalyst")
TOKENS_COLLECTION = "api_tokens"

_client: AsyncIOMotorClient | None = None
_indexes_ready = False


async def get_database() -> AsyncIOMotorDatabase:
    """Return the configured database, connecting on first use."""
    global _client
    if _client is None:
        _client = AsyncIOMotorClient(
            MONGODB_URL,
            serverSelectionTimeoutMS=5000,
            connectTimeoutMS=5000,
        )
    return _client[DATABASE_NAME]


async def get_tokens_collection() -> AsyncIOMotorCollection:
    """Return the token collection, creating its indexes once per client."""
    global _indexes_ready
    db = await get_database()
    collection = db[TOKENS_COLLECTION]
    if not _indexes_ready:
        await collection.create_index("token_hash", unique=True)
        await collection.create_index("user_id")
        _indexes_ready = True
        logger.debug("Token indexes ensured", extra={"database": DATABASE_NAME})
    return collection


async def close_database() -> None:
    """Close the client if one was opened."""
    global _client, _indexes_ready
    if _client is not None:
        _client.close()
        _client = None
    _indexes_ready = False


def set_client(client: AsyncIOMotorClient | None) -> None:
    """Swap the client, e.g. for an in-memory mock in tests."""
    global _client, _indexes_ready
    _client = client
    _indexes_ready = False
