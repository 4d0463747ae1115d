"""Pytest configuration and fixtures."""

import itertools
import os
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient
from pymongo.errors import PyMongoError

from db import USERS, VIDEOS, ensure_indexes, get_db
from main import app
from services.media.base_srv import MediaError, StoredMedia
from services.media.build_client_srv import get_media
from utils.security_ut import Viewer, get_current_viewer

# Cursor-returning methods fail on call, the rest when awaited
_CURSOR_METHODS = ("aggregate", "find")


def _failing(name: str, method: str) -> Callable[..., Any]:
    error = PyMongoError(f"injected failure: {name}.{method}")
    if method in _CURSOR_METHODS:
        def _raise_now(*args, **kwargs):
            raise error
        return _raise_now

    async def _raise(*args, **kwargs):
        raise error
    return _raise


class FailingCollection:
    """mongomock-motor collection that raises PyMongoError for the armed methods."""

    def __init__(self, name: str, coll, failures: Set[Tuple[str, str]]) -> None:
        self._name = name
        self._coll = coll
        self._failures = failures

    def __getattr__(self, method: str):
        if (self._name, method) in self._failures:
            return _failing(self._name, method)
        return getattr(self._coll, method)


class FailingDatabase:
    def __init__(self, db) -> None:
        self._db = db
        self.failures: Set[Tuple[str, str]] = set()

    def __getitem__(self, name: str) -> FailingCollection:
        return FailingCollection(name, self._db[name], self.failures)

    def fail(self, collection: str, method: str) -> None:
        self.failures.add((collection, method))


class FakeMediaProvider:
    """Records every call; fail_store / fail_remove hold resource types that should fail."""

    def __init__(self) -> None:
        self.stored: List[StoredMedia] = []
        self.removed: List[Tuple[str, str]] = []
        self.fail_store: Set[str] = set()
        self.fail_remove: Set[str] = set()
        self._seq = itertools.count(1)

    async def store(self, local_path: str, resource_type: str = "auto") -> StoredMedia:
        if os.path.exists(local_path):
            os.remove(local_path)
        if resource_type in self.fail_store:
            raise MediaError(f"{resource_type} store failed")
        n = next(self._seq)
        obj = StoredMedia(
            url=f"https://media.test/{resource_type}/{n}",
            file_id=f"{resource_type}/{n}",
            duration=42.5 if resource_type == "video" else None,
        )
        self.stored.append(obj)
        return obj

    async def remove(self, file_id: str, resource_type: str = "image") -> None:
        if resource_type in self.fail_remove:
            raise MediaError(f"{resource_type} remove failed")
        self.removed.append((file_id, resource_type))


BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


@pytest_asyncio.fixture
async def db() -> FailingDatabase:
    """Fresh in-memory database with the production indexes."""
    database = FailingDatabase(AsyncMongoMockClient()["vidhub_test"])
    await ensure_indexes(database)
    return database


@pytest.fixture
def media() -> FakeMediaProvider:
    return FakeMediaProvider()


@pytest.fixture
def make_user(db: FailingDatabase):
    async def _make(username: str, **extra: Any) -> Dict[str, Any]:
        doc = {
            "username": username.lower(),
            "email": f"{username.lower()}@example.com",
            "full_name": username.title(),
            "avatar": f"https://media.test/avatar/{username.lower()}",
            "cover_image": "",
            "password_hash": "x",
            "created_at": BASE_TIME,
        }
        doc.update(extra)
        doc["_id"] = (await db[USERS].insert_one(doc)).inserted_id
        return doc

    return _make


@pytest.fixture
def make_video(db: FailingDatabase):
    counter = itertools.count()

    async def _make(owner: Dict[str, Any], title: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
        n = next(counter)
        created = BASE_TIME + timedelta(minutes=n)
        doc = {
            "owner": owner["_id"],
            "title": title or f"Video {n}",
            "description": f"Description {n}",
            "duration": 60 + n,
            "views": 0,
            "is_published": True,
            "video_file": {"url": f"https://media.test/video/{n}", "file_id": f"video/{n}"},
            "thumbnail": {"url": f"https://media.test/image/{n}", "file_id": f"image/{n}"},
            "created_at": created,
            "updated_at": created,
        }
        doc.update(extra)
        doc["_id"] = (await db[VIDEOS].insert_one(doc)).inserted_id
        return doc

    return _make


@pytest_asyncio.fixture
async def alice(make_user) -> Dict[str, Any]:
    return await make_user("alice")


@pytest_asyncio.fixture
async def bob(make_user) -> Dict[str, Any]:
    return await make_user("bob")


def viewer_of(user: Dict[str, Any]) -> Viewer:
    return Viewer(user_id=user["_id"], username=user.get("username"))


@pytest.fixture
def as_viewer():
    """Set the viewer the HTTP client acts as (None for a guest)."""
    state: Dict[str, Optional[Viewer]] = {"viewer": None}

    def _set(user: Optional[Dict[str, Any]]) -> None:
        state["viewer"] = viewer_of(user) if user else None

    _set.state = state
    return _set


@pytest_asyncio.fixture
async def client(db: FailingDatabase, media: FakeMediaProvider, as_viewer) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the in-memory database and fake media provider."""
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_media] = lambda: media
    app.dependency_overrides[get_current_viewer] = lambda: as_viewer.state["viewer"]

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def new_id() -> ObjectId:
    return ObjectId()
