import logging
from typing import Any, Dict, List, Optional

from db.subscriptions_db import (
    count_subscribers,
    is_subscribed,
    list_subscribers,
    list_subscriptions,
    subscribe,
    unsubscribe,
)
from db.users_db import get_user_by_id
from utils.errors_ut import NotFoundError, ValidationError
from utils.objid_ut import parse_object_id
from utils.security_ut import Viewer

logger = logging.getLogger("subscriptions")


async def toggle_subscription(db, viewer: Optional[Viewer], channel_id: Optional[str]) -> Dict[str, Any]:
    """
    Subscribe when not subscribed, unsubscribe otherwise.
    Subscribing to one's own channel is ignored.
    """
    if viewer is None:
        raise ValidationError("Sign in to subscribe")
    cid = parse_object_id(channel_id, "channel id")
    if not await get_user_by_id(db, cid):
        raise NotFoundError("Channel does not exist")

    if cid == viewer.user_id:
        logger.info("Skip self-subscription user=%s", cid)
        subscribed = False
    elif await is_subscribed(db, viewer.user_id, cid):
        await unsubscribe(db, viewer.user_id, cid)
        subscribed = False
    else:
        await subscribe(db, viewer.user_id, cid)
        subscribed = True

    count = await count_subscribers(db, cid)
    logger.info("Subscription toggled channel=%s subscriber=%s subscribed=%s", cid, viewer.user_id, subscribed)
    return {"is_subscribed": subscribed, "subscribers_count": count}


async def get_channel_subscribers(db, channel_id: Optional[str]) -> List[Dict[str, Any]]:
    cid = parse_object_id(channel_id, "channel id")
    if not await get_user_by_id(db, cid):
        raise NotFoundError("Channel does not exist")
    return await list_subscribers(db, cid)


async def get_subscribed_channels(db, viewer: Optional[Viewer]) -> List[Dict[str, Any]]:
    if viewer is None:
        raise ValidationError("Sign in to see subscriptions")
    return await list_subscriptions(db, viewer.user_id)
