"""Tests for recording views and listing watch history."""

from datetime import timedelta

import pytest
from bson import ObjectId

from db import VIDEOS, WATCH_HISTORY
from services.history.watch_srv import list_watch_history, record_watch
from utils.errors_ut import NotFoundError, ValidationError
from tests.conftest import BASE_TIME, viewer_of


class TestRecordWatch:
    """One history entry per (viewer, video); views bumped once."""

    @pytest.mark.asyncio
    async def test_first_view_counts(self, db, alice, bob, make_video):
        video = await make_video(alice)

        out = await record_watch(db, viewer_of(bob), str(video["_id"]), now=BASE_TIME)

        assert out["first_view"] is True
        assert out["views"] == 1
        assert out["watched_at"] == BASE_TIME
        entry = await db[WATCH_HISTORY].find_one({"user": bob["_id"], "video": video["_id"]})
        assert entry["created_at"] == BASE_TIME

    @pytest.mark.asyncio
    async def test_repeat_view_refreshes_timestamp_only(self, db, alice, bob, make_video):
        video = await make_video(alice)
        later = BASE_TIME + timedelta(hours=2)

        await record_watch(db, viewer_of(bob), str(video["_id"]), now=BASE_TIME)
        again = await record_watch(db, viewer_of(bob), str(video["_id"]), now=later)

        assert again["first_view"] is False
        assert again["views"] == 1
        entries = await db[WATCH_HISTORY].find({"user": bob["_id"]}).to_list(None)
        assert len(entries) == 1
        assert entries[0]["watched_at"] == later
        assert entries[0]["created_at"] == BASE_TIME

    @pytest.mark.asyncio
    async def test_distinct_viewers_each_count(self, db, alice, bob, make_user, make_video):
        carol = await make_user("carol")
        video = await make_video(alice)
        for user in (bob, carol, bob, carol, bob):
            await record_watch(db, viewer_of(user), str(video["_id"]))
        assert (await db[VIDEOS].find_one({"_id": video["_id"]}))["views"] == 2
        assert await db[WATCH_HISTORY].count_documents({"video": video["_id"]}) == 2

    @pytest.mark.asyncio
    async def test_guest_rejected(self, db, alice, make_video):
        video = await make_video(alice)
        with pytest.raises(ValidationError):
            await record_watch(db, None, str(video["_id"]))
        assert (await db[VIDEOS].find_one({"_id": video["_id"]}))["views"] == 0

    @pytest.mark.asyncio
    async def test_unknown_video(self, db, bob):
        with pytest.raises(NotFoundError):
            await record_watch(db, viewer_of(bob), str(ObjectId()))

    @pytest.mark.asyncio
    async def test_invalid_video_id(self, db, bob):
        with pytest.raises(ValidationError):
            await record_watch(db, viewer_of(bob), "xyz")

    @pytest.mark.asyncio
    async def test_draft_of_another_owner_not_counted(self, db, alice, bob, make_video):
        video = await make_video(alice, is_published=False)

        with pytest.raises(NotFoundError) as exc:
            await record_watch(db, viewer_of(bob), str(video["_id"]))

        assert exc.value.message == "Video not found"
        assert (await db[VIDEOS].find_one({"_id": video["_id"]}))["views"] == 0
        assert await db[WATCH_HISTORY].count_documents({}) == 0

    @pytest.mark.asyncio
    async def test_owner_watches_own_draft(self, db, alice, make_video):
        video = await make_video(alice, is_published=False)
        out = await record_watch(db, viewer_of(alice), str(video["_id"]))
        assert out["views"] == 1

    @pytest.mark.asyncio
    async def test_unknown_viewer(self, db, alice, make_video):
        video = await make_video(alice)
        ghost = {"_id": ObjectId(), "username": "ghost"}
        with pytest.raises(NotFoundError):
            await record_watch(db, viewer_of(ghost), str(video["_id"]))


class TestListWatchHistory:
    """Tests for list_watch_history."""

    @pytest.mark.asyncio
    async def test_most_recent_first_with_owner(self, db, alice, bob, make_video):
        first = await make_video(alice, title="first")
        second = await make_video(alice, title="second")
        await record_watch(db, viewer_of(bob), str(first["_id"]), now=BASE_TIME)
        await record_watch(db, viewer_of(bob), str(second["_id"]), now=BASE_TIME + timedelta(minutes=5))
        # rewatching moves it back to the top
        await record_watch(db, viewer_of(bob), str(first["_id"]), now=BASE_TIME + timedelta(minutes=10))

        page = await list_watch_history(db, viewer_of(bob))

        assert page["total"] == 2
        assert [i["video"]["title"] for i in page["items"]] == ["first", "second"]
        assert page["items"][0]["owner_details"]["username"] == "alice"
        assert "password_hash" not in page["items"][0]["owner_details"]

    @pytest.mark.asyncio
    async def test_hides_videos_unpublished_by_others(self, db, alice, bob, make_video):
        hidden = await make_video(alice, is_published=False)
        own = await make_video(bob, is_published=False)
        await db[WATCH_HISTORY].insert_many([
            {"user": bob["_id"], "video": hidden["_id"], "watched_at": BASE_TIME, "created_at": BASE_TIME},
            {"user": bob["_id"], "video": own["_id"], "watched_at": BASE_TIME, "created_at": BASE_TIME},
        ])

        page = await list_watch_history(db, viewer_of(bob))

        assert page["total"] == 1
        assert page["items"][0]["video"]["_id"] == own["_id"]

    @pytest.mark.asyncio
    async def test_paginates(self, db, alice, bob, make_video):
        for n in range(5):
            video = await make_video(alice)
            await record_watch(db, viewer_of(bob), str(video["_id"]), now=BASE_TIME + timedelta(minutes=n))

        page = await list_watch_history(db, viewer_of(bob), page=2, limit=2)

        assert page["total"] == 5
        assert page["total_pages"] == 3
        assert len(page["items"]) == 2
        assert page["has_next"] is True
        assert page["has_prev"] is True

    @pytest.mark.asyncio
    async def test_past_the_end_is_empty(self, db, alice, bob, make_video):
        video = await make_video(alice)
        await record_watch(db, viewer_of(bob), str(video["_id"]))
        page = await list_watch_history(db, viewer_of(bob), page=5)
        assert page["items"] == []
        assert page["total"] == 1

    @pytest.mark.asyncio
    async def test_requires_viewer(self, db):
        with pytest.raises(ValidationError):
            await list_watch_history(db, None)
