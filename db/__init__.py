import logging
from typing import Optional

import motor.motor_asyncio
from pymongo import ASCENDING, DESCENDING, IndexModel

from config.mongo_cfg import mongo_settings

_client: Optional[motor.motor_asyncio.AsyncIOMotorClient] = None

logger = logging.getLogger(__name__)

VIDEOS = "videos"
USERS = "users"
LIKES = "likes"
SUBSCRIPTIONS = "subscriptions"
COMMENTS = "comments"
WATCH_HISTORY = "watch_history"


def _build_uri() -> str:
    if mongo_settings.MONGO_URI:
        return mongo_settings.MONGO_URI
    host = mongo_settings.MONGO_HOST
    port = mongo_settings.MONGO_PORT
    user = mongo_settings.MONGO_USER
    pwd = mongo_settings.MONGO_PASSWORD
    auth_src = mongo_settings.MONGO_AUTH_SOURCE

    if user and pwd:
        return f"mongodb://{user}:{pwd}@{host}:{port}/?authSource={auth_src}"
    return f"mongodb://{host}:{port}"


def get_mongo_client() -> motor.motor_asyncio.AsyncIOMotorClient:
    global _client
    if _client:
        return _client
    _client = motor.motor_asyncio.AsyncIOMotorClient(
        _build_uri(),
        serverSelectionTimeoutMS=mongo_settings.MONGO_SERVER_SELECTION_TIMEOUT_MS,
        socketTimeoutMS=mongo_settings.MONGO_SOCKET_TIMEOUT_MS,
    )
    logger.info("MongoDB client initialized db=%s", mongo_settings.MONGO_DB_NAME)
    return _client


def get_db():
    return get_mongo_client()[mongo_settings.MONGO_DB_NAME]


async def ensure_indexes(db) -> None:
    """
    Unique keys back the one-like-per-viewer, one-subscription-per-pair
    and one-history-entry-per-video rules.
    """
    await db[USERS].create_indexes([
        IndexModel([("username", ASCENDING)], unique=True),
        IndexModel([("email", ASCENDING)], unique=True),
    ])
    await db[VIDEOS].create_indexes([
        IndexModel([("is_published", ASCENDING), ("created_at", DESCENDING)]),
        IndexModel([("owner", ASCENDING), ("created_at", DESCENDING)]),
    ])
    await db[LIKES].create_indexes([
        IndexModel([("video", ASCENDING), ("liked_by", ASCENDING)], unique=True),
    ])
    await db[SUBSCRIPTIONS].create_indexes([
        IndexModel([("channel", ASCENDING), ("subscriber", ASCENDING)], unique=True),
        IndexModel([("subscriber", ASCENDING)]),
    ])
    await db[COMMENTS].create_indexes([
        IndexModel([("video", ASCENDING)]),
    ])
    await db[WATCH_HISTORY].create_indexes([
        IndexModel([("user", ASCENDING), ("video", ASCENDING)], unique=True),
        IndexModel([("user", ASCENDING), ("watched_at", DESCENDING)]),
    ])
    logger.info("MongoDB indexes ensured")


def close_mongo_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None
        logger.info("MongoDB client closed")
