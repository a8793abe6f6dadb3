from __future__ import annotations

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from incident_hub.core.config import get_settings

logger = logging.getLogger(__name__)

REPORTS = "reports"
PROFILES = "profiles"
TRANSACTIONS = "transactions"
USERS = "users"
SESSIONS = "sessions"

_client: Optional[AsyncIOMotorClient] = None


def get_client() -> AsyncIOMotorClient:
    global _client
    if _client is None:
        settings = get_settings()
        _client = AsyncIOMotorClient(settings.mongo_uri)
    return _client


def get_database() -> AsyncIOMotorDatabase:
    return get_client()[get_settings().mongo_db]


def close_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None


async def ensure_indexes(db) -> None:
    await db[REPORTS].create_index([("created_at", DESCENDING)])
    await db[REPORTS].create_index([("latitude", ASCENDING), ("longitude", ASCENDING)])
    await db[REPORTS].create_index([("profile_id", ASCENDING)])
    await db[TRANSACTIONS].create_index([("report_id", ASCENDING)])
    await db[TRANSACTIONS].create_index([("transaction_time", DESCENDING)])
    await db[USERS].create_index([("email", ASCENDING)], unique=True)
    await db[SESSIONS].create_index([("principal_id", ASCENDING)])
    logger.info("Mongo indexes ensured on %s", db.name)
