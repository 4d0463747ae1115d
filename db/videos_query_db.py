import re
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId

from db import USERS, VIDEOS

# Columns a listing may be ordered by
SORTABLE_FIELDS = ("created_at", "updated_at", "title", "views", "duration")

LISTING_PROJECTION: Dict[str, Any] = {
    "title": 1,
    "description": 1,
    "duration": 1,
    "views": 1,
    "is_published": 1,
    "owner": 1,
    "created_at": 1,
    "thumbnail.url": 1,
    "video_file.url": 1,
    "owner_details._id": 1,
    "owner_details.username": 1,
    "owner_details.avatar": 1,
}


def search_stage(query: str, backend: str, index_name: str) -> Dict[str, Any]:
    """
    Full-text match restricted to title and description.
    "atlas" uses an Atlas Search index and must stay the first stage of the pipeline.
    """
    if backend == "atlas":
        return {
            "$search": {
                "index": index_name,
                "text": {"query": query, "path": ["title", "description"]},
            }
        }
    pattern = re.escape(query)
    return {
        "$match": {
            "$or": [
                {"title": {"$regex": pattern, "$options": "i"}},
                {"description": {"$regex": pattern, "$options": "i"}},
            ]
        }
    }


def sort_stage(sort_by: Optional[str], direction: Optional[int]) -> Dict[str, Any]:
    if sort_by and direction:
        spec: Dict[str, int] = {sort_by: direction}
        if sort_by != "_id":
            spec["_id"] = direction
        return {"$sort": spec}
    return {"$sort": {"created_at": -1, "_id": -1}}


def owner_join_stages() -> List[Dict[str, Any]]:
    """
    Attach the owner as a single object; videos without an owner record drop out.
    """
    return [
        {
            "$lookup": {
                "from": USERS,
                "localField": "owner",
                "foreignField": "_id",
                "as": "owner_details",
            }
        },
        {"$unwind": "$owner_details"},
        {"$project": LISTING_PROJECTION},
    ]


def build_feed_pipeline(
    *,
    query: Optional[str],
    owner_id: Optional[ObjectId],
    sort_by: Optional[str],
    direction: Optional[int],
    search_backend: str = "regex",
    search_index: str = "search-videos",
) -> List[Dict[str, Any]]:
    """
    Stage order is fixed: search -> owner -> published -> sort -> owner join.
    Pagination is appended by the caller.
    """
    pipeline: List[Dict[str, Any]] = []
    if query:
        pipeline.append(search_stage(query, search_backend, search_index))
    if owner_id is not None:
        pipeline.append({"$match": {"owner": owner_id}})
    pipeline.append({"$match": {"is_published": True}})
    pipeline.append(sort_stage(sort_by, direction))
    pipeline.extend(owner_join_stages())
    return pipeline


async def fetch_feed_page(
    db,
    pipeline: List[Dict[str, Any]],
    limit: int,
    offset: int,
) -> Tuple[List[Dict[str, Any]], int]:
    """
    Returns (items, total) where total counts every document the pipeline yields.
    """
    counted = await db[VIDEOS].aggregate(pipeline + [{"$count": "total"}]).to_list(length=None)
    total = int(counted[0]["total"]) if counted else 0
    if total == 0 or offset >= total:
        return [], total
    items = await db[VIDEOS].aggregate(
        pipeline + [{"$skip": offset}, {"$limit": limit}]
    ).to_list(length=None)
    return items, total


async def sample_next_videos(db, exclude_id: ObjectId, size: int) -> List[Dict[str, Any]]:
    pipeline = [
        {"$match": {"_id": {"$ne": exclude_id}, "is_published": True}},
        {"$sample": {"size": size}},
    ] + owner_join_stages()
    return await db[VIDEOS].aggregate(pipeline).to_list(length=None)
