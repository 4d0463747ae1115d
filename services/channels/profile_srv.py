from typing import Any, Dict, Optional

from db.subscriptions_db import count_subscribed_to, count_subscribers, is_subscribed
from db.users_db import get_user_by_username
from utils.errors_ut import NotFoundError, ValidationError
from utils.security_ut import Viewer


async def get_channel_profile(db, username: Optional[str], viewer: Optional[Viewer] = None) -> Dict[str, Any]:
    """
    Channel summary for @username (any casing).
    A guest never triggers the membership query.
    """
    name = (username or "").strip().lower()
    if not name:
        raise ValidationError("username is missing")

    user = await get_user_by_username(db, name)
    if not user:
        raise NotFoundError("Channel does not exist")

    subscribers = await count_subscribers(db, user["_id"])
    subscribed_to = await count_subscribed_to(db, user["_id"])
    subscribed = False
    if viewer is not None:
        subscribed = await is_subscribed(db, viewer.user_id, user["_id"])

    return {
        "_id": user["_id"],
        "full_name": user.get("full_name"),
        "username": user.get("username"),
        "avatar": user.get("avatar"),
        "cover_image": user.get("cover_image") or "",
        "subscribers_count": subscribers,
        "channels_subscribed_to_count": subscribed_to,
        "is_subscribed": subscribed,
    }
