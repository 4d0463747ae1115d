from typing import Any, Dict, Optional

from bson import ObjectId

from db import USERS

# Never leaves the account store
PRIVATE_FIELDS = {"password_hash": 0, "refresh_token": 0}

OWNER_SUMMARY_FIELDS = {"username": 1, "full_name": 1, "avatar": 1}


async def get_user_by_id(db, user_id: ObjectId) -> Optional[Dict[str, Any]]:
    return await db[USERS].find_one({"_id": user_id}, PRIVATE_FIELDS)


async def get_user_summary(db, user_id: ObjectId) -> Optional[Dict[str, Any]]:
    return await db[USERS].find_one({"_id": user_id}, OWNER_SUMMARY_FIELDS)


async def get_user_by_username(db, username: str) -> Optional[Dict[str, Any]]:
    """
    Usernames are stored lowercase; callers may pass any casing.
    """
    return await db[USERS].find_one({"username": username.strip().lower()}, PRIVATE_FIELDS)


async def find_user_by_username_or_email(db, username: str, email: str) -> Optional[Dict[str, Any]]:
    return await db[USERS].find_one(
        {"$or": [{"username": username.strip().lower()}, {"email": email.strip().lower()}]},
        {"_id": 1},
    )


async def insert_user(db, doc: Dict[str, Any]) -> ObjectId:
    res = await db[USERS].insert_one(doc)
    return res.inserted_id
