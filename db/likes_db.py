from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from db import LIKES
from utils.time_ut import now_utc


async def count_likes(db, video_id: ObjectId) -> int:
    return await db[LIKES].count_documents({"video": video_id})


async def has_liked(db, video_id: ObjectId, user_id: ObjectId) -> bool:
    doc = await db[LIKES].find_one({"video": video_id, "liked_by": user_id}, {"_id": 1})
    return doc is not None


async def add_like(db, video_id: ObjectId, user_id: ObjectId) -> bool:
    """
    Returns False when the viewer already liked the video (unique key hit).
    """
    try:
        await db[LIKES].insert_one({"video": video_id, "liked_by": user_id, "created_at": now_utc()})
    except DuplicateKeyError:
        return False
    return True


async def remove_like(db, video_id: ObjectId, user_id: ObjectId) -> bool:
    res = await db[LIKES].delete_one({"video": video_id, "liked_by": user_id})
    return res.deleted_count == 1


async def delete_likes_for_video(db, video_id: ObjectId) -> int:
    res = await db[LIKES].delete_many({"video": video_id})
    return res.deleted_count
