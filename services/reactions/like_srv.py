import logging
from typing import Any, Dict, Optional

from db.likes_db import add_like, count_likes, has_liked, remove_like
from db.videos_db import get_video
from services.videos.detail_srv import can_see_video
from utils.errors_ut import NotFoundError, ValidationError
from utils.objid_ut import parse_object_id
from utils.security_ut import Viewer

logger = logging.getLogger("reactions")


async def toggle_video_like(db, viewer: Optional[Viewer], video_id: Optional[str]) -> Dict[str, Any]:
    if viewer is None:
        raise ValidationError("Sign in to like videos")
    vid = parse_object_id(video_id, "video id")
    video = await get_video(db, vid)
    if not video or not can_see_video(video, viewer):
        raise NotFoundError("Video not found")

    if await has_liked(db, vid, viewer.user_id):
        await remove_like(db, vid, viewer.user_id)
        liked = False
    else:
        await add_like(db, vid, viewer.user_id)
        liked = True

    likes = await count_likes(db, vid)
    logger.info("Video like toggled video_id=%s actor=%s liked=%s likes=%s", vid, viewer.user_id, liked, likes)
    return {"is_liked": liked, "likes_count": likes}
