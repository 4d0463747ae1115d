"""Tests for video likes."""

import pytest
from bson import ObjectId

from db import LIKES
from db.likes_db import add_like
from services.reactions.like_srv import toggle_video_like
from utils.errors_ut import NotFoundError, ValidationError
from tests.conftest import viewer_of


class TestToggleVideoLike:

    @pytest.mark.asyncio
    async def test_like_then_unlike(self, db, alice, bob, make_video):
        video = await make_video(alice)

        liked = await toggle_video_like(db, viewer_of(bob), str(video["_id"]))
        assert liked == {"is_liked": True, "likes_count": 1}

        unliked = await toggle_video_like(db, viewer_of(bob), str(video["_id"]))
        assert unliked == {"is_liked": False, "likes_count": 0}

    @pytest.mark.asyncio
    async def test_counts_across_viewers(self, db, alice, bob, make_video):
        video = await make_video(alice)
        await toggle_video_like(db, viewer_of(bob), str(video["_id"]))
        out = await toggle_video_like(db, viewer_of(alice), str(video["_id"]))
        assert out == {"is_liked": True, "likes_count": 2}

    @pytest.mark.asyncio
    async def test_duplicate_like_rejected_by_index(self, db, alice, bob, make_video):
        video = await make_video(alice)
        assert await add_like(db, video["_id"], bob["_id"]) is True
        assert await add_like(db, video["_id"], bob["_id"]) is False
        assert await db[LIKES].count_documents({"video": video["_id"]}) == 1

    @pytest.mark.asyncio
    async def test_unpublished_video_of_other_owner(self, db, alice, bob, make_video):
        video = await make_video(alice, is_published=False)
        with pytest.raises(NotFoundError):
            await toggle_video_like(db, viewer_of(bob), str(video["_id"]))

    @pytest.mark.asyncio
    async def test_owner_can_like_own_draft(self, db, alice, make_video):
        video = await make_video(alice, is_published=False)
        out = await toggle_video_like(db, viewer_of(alice), str(video["_id"]))
        assert out["is_liked"] is True

    @pytest.mark.asyncio
    async def test_guest_rejected(self, db, alice, make_video):
        video = await make_video(alice)
        with pytest.raises(ValidationError):
            await toggle_video_like(db, None, str(video["_id"]))

    @pytest.mark.asyncio
    async def test_unknown_video(self, db, bob):
        with pytest.raises(NotFoundError):
            await toggle_video_like(db, viewer_of(bob), str(ObjectId()))
