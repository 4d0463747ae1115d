from typing import Any, Optional

from fastapi import APIRouter, Depends

from db import get_db
from services.channels.profile_srv import get_channel_profile
from services.channels.subscribe_srv import get_channel_subscribers, get_subscribed_channels, toggle_subscription
from utils.response_ut import ok
from utils.security_ut import Viewer, get_current_viewer

router = APIRouter(tags=["channels"])


@router.get("/c/{username}")
async def channel_profile(
    username: str,
    db=Depends(get_db),
    viewer: Optional[Viewer] = Depends(get_current_viewer),
) -> Any:
    channel = await get_channel_profile(db, username, viewer)
    return ok(channel=channel)


@router.post("/channel/{channel_id}/subscribe")
async def channel_subscribe(
    channel_id: str,
    db=Depends(get_db),
    viewer: Optional[Viewer] = Depends(get_current_viewer),
) -> Any:
    state = await toggle_subscription(db, viewer, channel_id)
    return ok(**state)


@router.get("/channel/{channel_id}/subscribers")
async def channel_subscribers(channel_id: str, db=Depends(get_db)) -> Any:
    items = await get_channel_subscribers(db, channel_id)
    return ok(items=items)


@router.get("/subscriptions")
async def my_subscriptions(
    db=Depends(get_db),
    viewer: Optional[Viewer] = Depends(get_current_viewer),
) -> Any:
    items = await get_subscribed_channels(db, viewer)
    return ok(items=items)
