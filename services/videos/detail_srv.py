"""
Public view of a single video: owner summary, like/subscriber counts and
the viewer-specific flags.
"""
from typing import Any, Dict, Optional

from db.likes_db import count_likes, has_liked
from db.subscriptions_db import count_subscribers, is_subscribed
from db.users_db import get_user_summary
from db.videos_db import get_video
from utils.errors_ut import NotFoundError
from utils.objid_ut import parse_object_id
from utils.security_ut import Viewer


def can_see_video(video: Dict[str, Any], viewer: Optional[Viewer]) -> bool:
    if video.get("is_published"):
        return True
    # Unpublished videos are previewable by their owner only
    return viewer is not None and video.get("owner") == viewer.user_id


def assemble_video_detail(
    video: Dict[str, Any],
    owner: Optional[Dict[str, Any]],
    *,
    likes_count: int,
    subscribers_count: int,
    is_liked: bool,
    is_subscribed: bool,
    viewer: Optional[Viewer],
) -> Dict[str, Any]:
    """
    Pure projection of the joined data. Guests (viewer=None) always get
    both flags False, whatever the caller passed in.
    """
    personal = viewer is not None
    owner_view: Optional[Dict[str, Any]] = None
    if owner is not None:
        owner_view = {
            "_id": owner.get("_id"),
            "username": owner.get("username"),
            "full_name": owner.get("full_name"),
            "avatar": owner.get("avatar"),
            "subscribers_count": subscribers_count,
            "is_subscribed": bool(is_subscribed) if personal else False,
        }
    return {
        "_id": video["_id"],
        "video_file": {"url": (video.get("video_file") or {}).get("url")},
        "title": video.get("title"),
        "description": video.get("description"),
        "views": int(video.get("views") or 0),
        "created_at": video.get("created_at"),
        "duration": video.get("duration"),
        "likes_count": likes_count,
        "is_liked": bool(is_liked) if personal else False,
        "owner": owner_view,
    }


async def get_video_detail(
    db,
    video_id: Optional[str],
    viewer: Optional[Viewer] = None,
    guest: bool = False,
) -> Dict[str, Any]:
    """
    guest=True forces the guest shape even for a signed-in caller.
    Missing and not-visible videos both raise the same NotFoundError.
    """
    vid = parse_object_id(video_id, "video id")
    if guest:
        viewer = None

    video = await get_video(db, vid)
    if not video or not can_see_video(video, viewer):
        raise NotFoundError("Video not found")

    owner = await get_user_summary(db, video["owner"]) if video.get("owner") else None
    likes_count = await count_likes(db, vid)
    subscribers_count = await count_subscribers(db, owner["_id"]) if owner else 0

    liked = False
    subscribed = False
    if viewer is not None:
        liked = await has_liked(db, vid, viewer.user_id)
        if owner is not None:
            subscribed = await is_subscribed(db, viewer.user_id, owner["_id"])

    return assemble_video_detail(
        video,
        owner,
        likes_count=likes_count,
        subscribers_count=subscribers_count,
        is_liked=liked,
        is_subscribed=subscribed,
        viewer=viewer,
    )
