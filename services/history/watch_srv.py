import logging
from datetime import datetime
from typing import Any, Dict, Optional, Union

from db.history_db import count_history, list_history, upsert_watch_entry
from db.users_db import get_user_by_id
from db.videos_db import get_video, get_video_views, increment_video_views_counter
from services.videos.detail_srv import can_see_video
from utils.errors_ut import NotFoundError, ValidationError
from utils.objid_ut import parse_object_id
from utils.pagination_ut import build_page, normalize_page, normalize_page_size, page_offset
from utils.security_ut import Viewer
from utils.time_ut import now_utc

logger = logging.getLogger(__name__)


async def record_watch(
    db,
    viewer: Optional[Viewer],
    video_id: Optional[str],
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Note that the viewer watched the video.

    The (user, video) history key is unique, so only the call that creates
    the entry bumps the video's view counter; repeat views refresh watched_at.
    The counter bump and the history write are two separate mutations.
    """
    if viewer is None:
        raise ValidationError("Sign in to keep a watch history")
    vid = parse_object_id(video_id, "video id")

    video = await get_video(db, vid)
    if not video or not can_see_video(video, viewer):
        raise NotFoundError("Video not found")
    if not await get_user_by_id(db, viewer.user_id):
        raise NotFoundError("User not found")

    watched_at = now or now_utc()
    first_view = await upsert_watch_entry(db, viewer.user_id, vid, watched_at)
    if first_view:
        await increment_video_views_counter(db, vid)
        logger.info("View recorded video_id=%s user=%s", vid, viewer.user_id)

    return {
        "video_id": vid,
        "watched_at": watched_at,
        "first_view": first_view,
        "views": await get_video_views(db, vid),
    }


async def list_watch_history(
    db,
    viewer: Optional[Viewer],
    page: Union[int, str, None] = 1,
    limit: Union[int, str, None] = None,
) -> Dict[str, Any]:
    if viewer is None:
        raise ValidationError("Sign in to see your watch history")
    p = normalize_page(page)
    ps = normalize_page_size(limit)

    total = await count_history(db, viewer.user_id)
    offset = page_offset(p, ps)
    items = await list_history(db, viewer.user_id, limit=ps, offset=offset) if offset < total else []
    return build_page(items, total, p, ps)
