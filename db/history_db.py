from datetime import datetime
from typing import Any, Dict, List

from bson import ObjectId

from db import USERS, VIDEOS, WATCH_HISTORY


async def upsert_watch_entry(db, user_id: ObjectId, video_id: ObjectId, watched_at: datetime) -> bool:
    """
    One entry per (user, video). Returns True when this call created the entry,
    False when an existing entry only had its watched_at refreshed.
    """
    res = await db[WATCH_HISTORY].update_one(
        {"user": user_id, "video": video_id},
        {
            "$set": {"watched_at": watched_at},
            "$setOnInsert": {"created_at": watched_at},
        },
        upsert=True,
    )
    return res.upserted_id is not None


def _visible_to(user_id: ObjectId) -> Dict[str, Any]:
    return {"$or": [{"video.is_published": True}, {"video.owner": user_id}]}


def _history_pipeline(user_id: ObjectId) -> List[Dict[str, Any]]:
    return [
        {"$match": {"user": user_id}},
        {"$sort": {"watched_at": -1, "_id": -1}},
        {
            "$lookup": {
                "from": VIDEOS,
                "localField": "video",
                "foreignField": "_id",
                "as": "video",
            }
        },
        {"$unwind": "$video"},
        {"$match": _visible_to(user_id)},
        {
            "$lookup": {
                "from": USERS,
                "localField": "video.owner",
                "foreignField": "_id",
                "as": "owner_details",
            }
        },
        {"$unwind": "$owner_details"},
    ]


async def count_history(db, user_id: ObjectId) -> int:
    rows = await db[WATCH_HISTORY].aggregate(
        _history_pipeline(user_id) + [{"$count": "total"}]
    ).to_list(length=None)
    return int(rows[0]["total"]) if rows else 0


async def list_history(db, user_id: ObjectId, limit: int, offset: int) -> List[Dict[str, Any]]:
    pipeline = _history_pipeline(user_id) + [
        {"$skip": offset},
        {"$limit": limit},
        {
            "$project": {
                "_id": 0,
                "watched_at": 1,
                "video._id": 1,
                "video.title": 1,
                "video.description": 1,
                "video.duration": 1,
                "video.views": 1,
                "video.created_at": 1,
                "video.thumbnail.url": 1,
                "owner_details._id": 1,
                "owner_details.username": 1,
                "owner_details.avatar": 1,
            }
        },
    ]
    return await db[WATCH_HISTORY].aggregate(pipeline).to_list(length=None)


async def delete_history_for_video(db, video_id: ObjectId) -> int:
    res = await db[WATCH_HISTORY].delete_many({"video": video_id})
    return res.deleted_count
