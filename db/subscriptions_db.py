from typing import Any, Dict, List

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from db import SUBSCRIPTIONS, USERS
from utils.time_ut import now_utc


async def is_subscribed(db, subscriber_id: ObjectId, channel_id: ObjectId) -> bool:
    doc = await db[SUBSCRIPTIONS].find_one(
        {"subscriber": subscriber_id, "channel": channel_id},
        {"_id": 1},
    )
    return doc is not None


async def subscribe(db, subscriber_id: ObjectId, channel_id: ObjectId) -> bool:
    if subscriber_id == channel_id:
        return False
    try:
        await db[SUBSCRIPTIONS].insert_one(
            {"subscriber": subscriber_id, "channel": channel_id, "created_at": now_utc()}
        )
    except DuplicateKeyError:
        return False
    return True


async def unsubscribe(db, subscriber_id: ObjectId, channel_id: ObjectId) -> bool:
    res = await db[SUBSCRIPTIONS].delete_one({"subscriber": subscriber_id, "channel": channel_id})
    return res.deleted_count == 1


async def count_subscribers(db, channel_id: ObjectId) -> int:
    return await db[SUBSCRIPTIONS].count_documents({"channel": channel_id})


async def count_subscribed_to(db, subscriber_id: ObjectId) -> int:
    return await db[SUBSCRIPTIONS].count_documents({"subscriber": subscriber_id})


async def _list_joined(db, match: Dict[str, Any], user_field: str) -> List[Dict[str, Any]]:
    pipeline = [
        {"$match": match},
        {"$sort": {"created_at": -1}},
        {
            "$lookup": {
                "from": USERS,
                "localField": user_field,
                "foreignField": "_id",
                "as": "user",
            }
        },
        {"$unwind": "$user"},
        {
            "$project": {
                "_id": 0,
                "created_at": 1,
                "user._id": 1,
                "user.username": 1,
                "user.full_name": 1,
                "user.avatar": 1,
            }
        },
    ]
    rows = await db[SUBSCRIPTIONS].aggregate(pipeline).to_list(length=None)
    return [{**r["user"], "subscribed_at": r.get("created_at")} for r in rows]


async def list_subscribers(db, channel_id: ObjectId) -> List[Dict[str, Any]]:
    """
    Users following the channel, newest first.
    """
    return await _list_joined(db, {"channel": channel_id}, "subscriber")


async def list_subscriptions(db, subscriber_id: ObjectId) -> List[Dict[str, Any]]:
    """
    Channels that the user is subscribed to, newest first.
    """
    return await _list_joined(db, {"subscriber": subscriber_id}, "channel")
