from typing import Any, Dict, Optional

from bson import ObjectId
from pymongo import ReturnDocument

from db import VIDEOS


async def get_video(db, video_id: ObjectId) -> Optional[Dict[str, Any]]:
    return await db[VIDEOS].find_one({"_id": video_id})


async def insert_video(db, doc: Dict[str, Any]) -> ObjectId:
    res = await db[VIDEOS].insert_one(doc)
    return res.inserted_id


async def update_video_fields(db, video_id: ObjectId, set_patch: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Apply a $set patch and return the document as it is after the update.
    """
    return await db[VIDEOS].find_one_and_update(
        {"_id": video_id},
        {"$set": set_patch},
        return_document=ReturnDocument.AFTER,
    )


async def increment_video_views_counter(db, video_id: ObjectId) -> None:
    await db[VIDEOS].update_one({"_id": video_id}, {"$inc": {"views": 1}})


async def get_video_views(db, video_id: ObjectId) -> int:
    doc = await db[VIDEOS].find_one({"_id": video_id}, {"views": 1})
    return int(doc.get("views") or 0) if doc else 0


async def delete_video(db, video_id: ObjectId) -> bool:
    res = await db[VIDEOS].delete_one({"_id": video_id})
    return res.deleted_count == 1
